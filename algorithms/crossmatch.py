"""
Virtual crossmatch simulation
A predictive estimate (not a lab result) of whether a physical crossmatch
would come back positive, based on sensitization and HLA matches.
"""

NEGATIVE = 'negative'
POSITIVE = 'positive'
PENDING = 'pending'

HIGH_SENSITIZATION_PERCENT = 80
SENSITIZED_MIN_MATCHES = 4
NEGATIVE_MIN_MATCHES = 5


def is_highly_sensitized(pra_percentage, cpra_percentage):
    return (pra_percentage or 0) > HIGH_SENSITIZATION_PERCENT or \
        (cpra_percentage or 0) > HIGH_SENSITIZATION_PERCENT


def simulate_virtual_crossmatch(pra_percentage, cpra_percentage, total_hla_matches, hla_typed=True):
    """
    Decision table, in order:
    1. PRA or cPRA above 80%: positive below 4 matches, otherwise pending
    2. 5+ matches: negative
    3. anything else: pending

    Without HLA typing the match count is unknown, so the verdict is pending.
    A positive verdict excludes the candidate.
    """
    if not hla_typed:
        return PENDING

    if is_highly_sensitized(pra_percentage, cpra_percentage):
        if total_hla_matches < SENSITIZED_MIN_MATCHES:
            return POSITIVE
        return PENDING

    if total_hla_matches >= NEGATIVE_MIN_MATCHES:
        return NEGATIVE

    return PENDING
