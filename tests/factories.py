"""
Lightweight stand-ins for donor and candidate records in engine unit tests.
"""
from types import SimpleNamespace


def donor_stub(**overrides):
    """Plain object with the donor attributes the engine reads"""
    fields = {
        'donor_id': 'DN-TEST',
        'organ_type': 'kidney',
        'blood_type': 'O-',
        'hla_typing': 'A1, A2, B7, B8, DR3, DR4',
        'donor_age': None,
        'donor_weight_kg': None,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def patient_stub(**overrides):
    """Plain object with the candidate attributes the engine reads"""
    fields = {
        'blood_type': 'A+',
        'hla_typing': '',
        'pra_percentage': None,
        'cpra_percentage': None,
        'priority_score': 0,
        'date_added_to_waitlist': None,
        'weight_kg': None,
        'date_of_birth': None,
        'previous_transplants': 0,
        'comorbidity_score': None,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)
