# algorithms/compatibility.py
"""
Compatibility scoring for one donor organ against one waitlisted candidate.

Weighted sum (0-100):
1. Candidate priority score     x 0.35
2. HLA score                    x 0.30
3. ABO identical / compatible   10 / 5
4. Size compatible / mismatch   10 / 3
5. Waitlist tenure              up to 10 (one point per 36.5 days)
6. Age proximity                5 / 3 / 0

Graft survival is predicted separately and never feeds the score.
"""
from dataclasses import dataclass, field
from datetime import datetime

from django.utils import timezone

from algorithms.blood_compatibility import is_compatible, is_identical, calculate_abo_score
from algorithms.crossmatch import POSITIVE, simulate_virtual_crossmatch
from algorithms.hla import LOCI, MAX_SCORED_MATCHES, parse_hla_typing, score_hla_match
from algorithms.size import is_size_compatible, calculate_size_score

PRIORITY_WEIGHT = 0.35
HLA_WEIGHT = 0.30
MAX_TENURE_POINTS = 10
DAYS_PER_YEAR = 365
AVERAGE_YEAR_DAYS = 365.25

GRAFT_SURVIVAL_BASE = 85
GRAFT_SURVIVAL_MIN = 60
GRAFT_SURVIVAL_MAX = 98


@dataclass(frozen=True)
class MatchResult:
    """One candidate that passed ABO and crossmatch gating"""
    patient: object
    compatibility_score: float
    abo_compatible: bool
    hla_match_score: float
    hla_matches: dict = field(default_factory=lambda: {locus: 0 for locus in LOCI})
    total_hla_matches: int = 0
    hla_typed: bool = False
    size_compatible: bool = True
    virtual_crossmatch: str = 'pending'
    predicted_graft_survival: float = GRAFT_SURVIVAL_BASE
    days_on_waitlist: int = 0
    priority_rank: int = 0

    @property
    def blood_type_compatible(self):
        return self.abo_compatible


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


def days_on_waitlist(date_added, today):
    """Whole days since the candidate was listed (0 if unknown or in the future)"""
    date_added = _as_date(date_added)
    if not date_added:
        return 0
    return max(0, (today - date_added).days)


def age_in_years(date_of_birth, today):
    date_of_birth = _as_date(date_of_birth)
    if not date_of_birth:
        return None
    return int((today - date_of_birth).days // AVERAGE_YEAR_DAYS)


def calculate_priority_term(priority_score):
    return (priority_score or 0) * PRIORITY_WEIGHT


def calculate_hla_term(hla_score):
    return hla_score * HLA_WEIGHT


def calculate_tenure_score(days):
    """Linear up to 10 points at one year on the list"""
    return min(MAX_TENURE_POINTS, (days / DAYS_PER_YEAR) * MAX_TENURE_POINTS)


def calculate_age_score(donor_age, candidate_age):
    """Prefer donor/recipient pairs of similar age"""
    if donor_age is None or candidate_age is None:
        return 0
    age_diff = abs(donor_age - candidate_age)
    if age_diff <= 10:
        return 5
    elif age_diff <= 20:
        return 3
    return 0


def calculate_compatibility_score(priority_score, hla_score, abo_points, size_points,
                                  tenure_points, age_points):
    total = (
        calculate_priority_term(priority_score) +
        calculate_hla_term(hla_score) +
        abo_points +
        size_points +
        tenure_points +
        age_points
    )
    return max(0.0, min(100.0, total))


def predict_graft_survival(total_hla_matches, abo_identical, previous_transplants=0, comorbidity_score=0):
    """
    Simplified graft survival estimate (%), clamped to 60-98.
    """
    survival = GRAFT_SURVIVAL_BASE
    survival += (total_hla_matches / MAX_SCORED_MATCHES) * 10
    if abo_identical:
        survival += 3
    survival -= (previous_transplants or 0) * 5
    survival -= (comorbidity_score or 0) * 2
    return max(GRAFT_SURVIVAL_MIN, min(GRAFT_SURVIVAL_MAX, survival))


def evaluate_candidate(donor, patient, today=None, donor_hla=None):
    """
    Run the full per-candidate pipeline.

    Args:
        donor: DonorOrgan or HypotheticalDonor (blood_type, hla_typing,
            donor_age, donor_weight_kg)
        patient: waitlisted Patient
        today: reference date for tenure and age (defaults to the local date)
        donor_hla: pre-parsed donor typing, to avoid re-parsing per candidate

    Returns:
        Unranked MatchResult, or None when the candidate is ABO-incompatible
        or the virtual crossmatch is positive.
    """
    today = today or timezone.localdate()

    if not is_compatible(donor.blood_type, patient.blood_type):
        return None

    if donor_hla is None:
        donor_hla = parse_hla_typing(donor.hla_typing)
    hla = score_hla_match(donor_hla, parse_hla_typing(patient.hla_typing))

    crossmatch = simulate_virtual_crossmatch(
        patient.pra_percentage, patient.cpra_percentage, hla.total, hla_typed=hla.typed
    )
    if crossmatch == POSITIVE:
        return None

    size_compatible = is_size_compatible(donor.donor_weight_kg, patient.weight_kg)
    days = days_on_waitlist(patient.date_added_to_waitlist, today)
    abo_identical = is_identical(donor.blood_type, patient.blood_type)

    score = calculate_compatibility_score(
        patient.priority_score,
        hla.score,
        calculate_abo_score(donor.blood_type, patient.blood_type),
        calculate_size_score(size_compatible),
        calculate_tenure_score(days),
        calculate_age_score(donor.donor_age, age_in_years(patient.date_of_birth, today)),
    )

    return MatchResult(
        patient=patient,
        compatibility_score=score,
        abo_compatible=True,
        hla_match_score=hla.score,
        hla_matches=dict(hla.matches),
        total_hla_matches=hla.total,
        hla_typed=hla.typed,
        size_compatible=size_compatible,
        virtual_crossmatch=crossmatch,
        predicted_graft_survival=predict_graft_survival(
            hla.total, abo_identical, patient.previous_transplants, patient.comorbidity_score
        ),
        days_on_waitlist=days,
    )
