"""
ABO/Rh Compatibility Matrix
Determines which donor blood types can give an organ to which recipients.
Same rules as transfusion: O- is the universal donor, AB+ the universal recipient.
"""

# Donor blood type -> acceptable recipient blood types
COMPATIBILITY = {
    'O-': frozenset({'O-', 'O+', 'A-', 'A+', 'B-', 'B+', 'AB-', 'AB+'}),
    'O+': frozenset({'O+', 'A+', 'B+', 'AB+'}),
    'A-': frozenset({'A-', 'A+', 'AB-', 'AB+'}),
    'A+': frozenset({'A+', 'AB+'}),
    'B-': frozenset({'B-', 'B+', 'AB-', 'AB+'}),
    'B+': frozenset({'B+', 'AB+'}),
    'AB-': frozenset({'AB-', 'AB+'}),
    'AB+': frozenset({'AB+'}),
}

BLOOD_TYPE_CHOICES = [(blood_type, blood_type) for blood_type in
                      ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-')]

IDENTICAL_ABO_POINTS = 10
COMPATIBLE_ABO_POINTS = 5


def _normalize(blood_type):
    return blood_type.strip().upper() if blood_type else ''


def is_compatible(donor_blood_type, recipient_blood_type):
    """
    Hard ABO gate. Unknown or missing blood types are never compatible.

    Args:
        donor_blood_type: Donor's blood type (e.g., 'O-')
        recipient_blood_type: Recipient's blood type (e.g., 'A+')

    Returns:
        Boolean: True if the recipient may receive from this donor
    """
    acceptable = COMPATIBILITY.get(_normalize(donor_blood_type))
    if acceptable is None:
        return False
    return _normalize(recipient_blood_type) in acceptable


def is_identical(donor_blood_type, recipient_blood_type):
    """True when both ABO group and Rh factor are the same (and known)"""
    donor = _normalize(donor_blood_type)
    return bool(donor) and donor == _normalize(recipient_blood_type)


def get_compatible_recipients(donor_blood_type):
    """
    Get the recipient blood types that can receive from a donor

    Returns:
        Sorted list of compatible recipient blood types (empty if unknown)
    """
    return sorted(COMPATIBILITY.get(_normalize(donor_blood_type), ()))


def calculate_abo_score(donor_blood_type, recipient_blood_type):
    """
    Blood-type term of the compatibility score.
    10 = identical, 5 = compatible but not identical, 0 = incompatible
    """
    if not is_compatible(donor_blood_type, recipient_blood_type):
        return 0
    if is_identical(donor_blood_type, recipient_blood_type):
        return IDENTICAL_ABO_POINTS
    return COMPATIBLE_ABO_POINTS
