import pytest

from algorithms.blood_compatibility import (
    COMPATIBILITY,
    calculate_abo_score,
    get_compatible_recipients,
    is_compatible,
    is_identical,
)

ALL_TYPES = ['O-', 'O+', 'A-', 'A+', 'B-', 'B+', 'AB-', 'AB+']


class TestCompatibilityMatrix:
    def test_o_negative_is_universal_donor(self):
        assert all(is_compatible('O-', recipient) for recipient in ALL_TYPES)

    def test_ab_positive_is_universal_recipient(self):
        assert all(is_compatible(donor, 'AB+') for donor in ALL_TYPES)

    def test_ab_positive_donor_only_gives_to_ab_positive(self):
        assert get_compatible_recipients('AB+') == ['AB+']

    @pytest.mark.parametrize('donor,recipient', [
        ('A+', 'B+'),
        ('B+', 'A+'),
        ('A+', 'O+'),
        ('O+', 'O-'),
        ('AB-', 'A-'),
    ])
    def test_incompatible_pairs(self, donor, recipient):
        assert not is_compatible(donor, recipient)

    def test_every_type_can_give_to_itself(self):
        for blood_type in COMPATIBILITY:
            assert is_compatible(blood_type, blood_type)

    def test_unknown_or_missing_types_never_compatible(self):
        assert not is_compatible('O-', None)
        assert not is_compatible(None, 'A+')
        assert not is_compatible('C+', 'AB+')
        assert get_compatible_recipients('') == []

    def test_whitespace_and_case_tolerated(self):
        assert is_compatible(' o- ', 'ab+')


class TestAboScore:
    def test_identical(self):
        assert is_identical('A+', 'A+')
        assert calculate_abo_score('A+', 'A+') == 10

    def test_compatible_not_identical(self):
        assert not is_identical('O-', 'A+')
        assert calculate_abo_score('O-', 'A+') == 5

    def test_incompatible(self):
        assert calculate_abo_score('A+', 'B+') == 0

    def test_missing_types_are_not_identical(self):
        assert not is_identical(None, None)
