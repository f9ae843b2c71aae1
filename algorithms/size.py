"""
Donor/recipient size compatibility based on body weight ratio
"""

MIN_WEIGHT_RATIO = 0.7
MAX_WEIGHT_RATIO = 1.5

SIZE_COMPATIBLE_POINTS = 10
SIZE_MISMATCH_POINTS = 3


def is_size_compatible(donor_weight_kg, candidate_weight_kg):
    """
    Compatible iff 0.7 <= donor/candidate <= 1.5.
    Missing weights cannot be assessed and are not penalized.
    """
    if not donor_weight_kg or not candidate_weight_kg:
        return True
    if donor_weight_kg <= 0 or candidate_weight_kg <= 0:
        return True

    ratio = donor_weight_kg / candidate_weight_kg
    return MIN_WEIGHT_RATIO <= ratio <= MAX_WEIGHT_RATIO


def calculate_size_score(size_compatible):
    return SIZE_COMPATIBLE_POINTS if size_compatible else SIZE_MISMATCH_POINTS
