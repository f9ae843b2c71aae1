from datetime import date, timedelta

import pytest

from algorithms import compatibility
from algorithms.compatibility import (
    age_in_years,
    calculate_age_score,
    calculate_compatibility_score,
    calculate_tenure_score,
    days_on_waitlist,
    evaluate_candidate,
    predict_graft_survival,
)
from tests.factories import donor_stub, patient_stub

TODAY = date(2026, 6, 1)
PERFECT_TYPING = 'A1, A2, B7, B8, DR3, DR4'


class TestScoreTerms:
    def test_tenure_is_linear_and_capped(self):
        assert calculate_tenure_score(0) == 0
        assert calculate_tenure_score(365 // 2) == pytest.approx(5, abs=0.02)
        assert calculate_tenure_score(365) == 10
        assert calculate_tenure_score(2000) == 10

    def test_days_on_waitlist(self):
        assert days_on_waitlist(None, TODAY) == 0
        assert days_on_waitlist(TODAY - timedelta(days=42), TODAY) == 42
        assert days_on_waitlist(TODAY + timedelta(days=3), TODAY) == 0

    @pytest.mark.parametrize('donor_age,candidate_age,expected', [
        (40, 40, 5),
        (40, 50, 5),
        (40, 51, 3),
        (40, 20, 3),
        (40, 19, 0),
        (None, 40, 0),
        (40, None, 0),
    ])
    def test_age_proximity(self, donor_age, candidate_age, expected):
        assert calculate_age_score(donor_age, candidate_age) == expected

    def test_age_uses_average_year(self):
        assert age_in_years(date(1986, 6, 2), TODAY) == 39
        assert age_in_years(date(1986, 5, 30), TODAY) == 40
        assert age_in_years(None, TODAY) is None

    def test_score_clamped_to_range(self):
        assert calculate_compatibility_score(100, 100, 10, 10, 10, 5) == 100
        assert calculate_compatibility_score(-500, 0, 0, 0, 0, 0) == 0


class TestGraftSurvival:
    def test_perfect_identical_match(self):
        assert predict_graft_survival(6, True) == 98

    def test_base_case(self):
        assert predict_graft_survival(0, False) == 85

    def test_penalties(self):
        assert predict_graft_survival(3, False, previous_transplants=1, comorbidity_score=2) == 81

    def test_floor(self):
        assert predict_graft_survival(0, False, previous_transplants=5, comorbidity_score=10) == 60

    def test_missing_inputs_ignored(self):
        assert predict_graft_survival(0, True, previous_transplants=None, comorbidity_score=None) == 88


class TestEvaluateCandidate:
    def test_scenario_a_universal_donor_perfect_match(self):
        donor = donor_stub(blood_type='O-', hla_typing=PERFECT_TYPING, donor_age=40, donor_weight_kg=70)
        patient = patient_stub(
            blood_type='AB+',
            hla_typing=PERFECT_TYPING,
            pra_percentage=0,
            cpra_percentage=0,
            priority_score=80,
            weight_kg=70,
            date_added_to_waitlist=TODAY - timedelta(days=365),
            date_of_birth=date(1986, 1, 1),
        )

        result = evaluate_candidate(donor, patient, today=TODAY)

        assert result is not None
        assert result.abo_compatible and result.blood_type_compatible
        assert result.total_hla_matches == 6
        assert result.virtual_crossmatch == 'negative'
        assert result.size_compatible
        # 28 priority + 30 HLA + 5 ABO + 10 size + 10 tenure + 5 age
        assert result.compatibility_score == pytest.approx(88)
        assert result.predicted_graft_survival == 95
        assert result.days_on_waitlist == 365
        assert result.priority_rank == 0

    def test_scenario_b_abo_incompatible_excluded(self):
        donor = donor_stub(blood_type='A+', organ_type='liver')
        patient = patient_stub(blood_type='B+', priority_score=100)
        assert evaluate_candidate(donor, patient, today=TODAY) is None

    def test_missing_candidate_blood_type_excluded(self):
        assert evaluate_candidate(donor_stub(), patient_stub(blood_type=''), today=TODAY) is None

    def test_scenario_c_sensitized_low_match_excluded(self):
        donor = donor_stub(hla_typing=PERFECT_TYPING)
        patient = patient_stub(cpra_percentage=90, hla_typing='A1 A9 B7 B9 DR5 DR6')
        assert evaluate_candidate(donor, patient, today=TODAY) is None

    def test_scenario_d_sensitized_good_match_pending(self):
        donor = donor_stub(hla_typing=PERFECT_TYPING)
        patient = patient_stub(cpra_percentage=90, hla_typing='A1 A2 B7 B8 DR3 DR9')
        result = evaluate_candidate(donor, patient, today=TODAY)
        assert result is not None
        assert result.total_hla_matches == 5
        assert result.virtual_crossmatch == 'pending'

    def test_untyped_candidate_kept_with_neutral_hla(self):
        donor = donor_stub(hla_typing=PERFECT_TYPING)
        patient = patient_stub(cpra_percentage=95, hla_typing='')
        result = evaluate_candidate(donor, patient, today=TODAY)
        assert result is not None
        assert not result.hla_typed
        assert result.hla_match_score == 50
        assert result.virtual_crossmatch == 'pending'

    def test_size_mismatch_scored_down_not_excluded(self):
        donor = donor_stub(donor_weight_kg=120)
        patient = patient_stub(weight_kg=60, blood_type='O-')
        result = evaluate_candidate(donor, patient, today=TODAY)
        assert result is not None
        assert not result.size_compatible
        # 0 priority + 15 untyped HLA + 10 identical ABO + 3 size
        assert result.compatibility_score == pytest.approx(28)

    def test_bounds_hold_for_extreme_inputs(self):
        donor = donor_stub(hla_typing=PERFECT_TYPING + ', DQ2, DQ8', donor_age=30)
        patient = patient_stub(
            blood_type='O-',
            hla_typing=PERFECT_TYPING + ', DQ2, DQ8',
            priority_score=100,
            date_added_to_waitlist=TODAY - timedelta(days=3000),
            date_of_birth=date(1996, 1, 1),
            comorbidity_score=0,
        )
        result = evaluate_candidate(donor, patient, today=TODAY)
        assert 0 <= result.compatibility_score <= 100
        assert result.compatibility_score == 100
        assert 60 <= result.predicted_graft_survival <= 98
        assert result.hla_match_score == 100

    def test_defaults_to_local_date(self, monkeypatch):
        monkeypatch.setattr(compatibility.timezone, 'localdate', lambda: TODAY)
        patient = patient_stub(date_added_to_waitlist=TODAY - timedelta(days=30))
        result = evaluate_candidate(donor_stub(), patient)
        assert result.days_on_waitlist == 30
