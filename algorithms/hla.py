"""
HLA typing parser and match scorer

Typing strings are free text as entered by the lab or clerk, e.g.
"A1, A2, B7, B8, DR3, DR4, DQ2". Matching is exact-string per locus
(no antigen-family or split/broad equivalence).
"""
import re
from dataclasses import dataclass, field

LOCI = ('A', 'B', 'DR', 'DQ')

# Loci counted towards total_hla_matches (2 antigens each). DQ is scored as a
# bonus only.
SCORED_LOCI = ('A', 'B', 'DR')
MAX_SCORED_MATCHES = 6
MAX_MATCHES_PER_LOCUS = 2
DQ_BONUS_PER_MATCH = 5

# Neutral score used when either side has no usable typing
UNTYPED_HLA_SCORE = 50.0

_SEPARATORS = re.compile(r'[\s,;]+')

# DR/DQ must be tested before the single-letter loci
_PREFIXES = (('DR', 'DR'), ('DQ', 'DQ'), ('A', 'A'), ('B', 'B'))


def parse_hla_typing(hla_string):
    """
    Split a typing string into locus buckets.

    Tokens are separated by runs of whitespace, commas or semicolons and
    upper-cased. Tokens that belong to none of A/B/DR/DQ (C, DP, typos) are
    dropped.

    Returns:
        dict: {'A': [...], 'B': [...], 'DR': [...], 'DQ': [...]}
    """
    buckets = {locus: [] for locus in LOCI}
    if not hla_string:
        return buckets

    for token in _SEPARATORS.split(hla_string.strip()):
        token = token.strip().upper()
        if not token:
            continue
        for prefix, locus in _PREFIXES:
            if token.startswith(prefix):
                buckets[locus].append(token)
                break

    return buckets


def is_untyped(buckets):
    """An empty typing means unknown, not zero antigens"""
    return not any(buckets.get(locus) for locus in LOCI)


@dataclass(frozen=True)
class HLAMatch:
    matches: dict = field(default_factory=lambda: {locus: 0 for locus in LOCI})
    total: int = 0
    score: float = UNTYPED_HLA_SCORE
    typed: bool = False


def count_locus_matches(donor_antigens, candidate_antigens):
    shared = set(donor_antigens) & set(candidate_antigens)
    return min(len(shared), MAX_MATCHES_PER_LOCUS)


def score_hla_match(donor_buckets, candidate_buckets):
    """
    Per-locus match counts and a 0-100 HLA score.

    score = total(A+B+DR) / 6 * 100, plus 5 points per DQ match, clamped to
    100 here so callers never see an over-range value.
    """
    if is_untyped(donor_buckets) or is_untyped(candidate_buckets):
        return HLAMatch()

    matches = {
        locus: count_locus_matches(donor_buckets.get(locus, ()), candidate_buckets.get(locus, ()))
        for locus in LOCI
    }
    total = sum(matches[locus] for locus in SCORED_LOCI)

    score = (total / MAX_SCORED_MATCHES) * 100
    if matches['DQ'] > 0:
        score += matches['DQ'] * DQ_BONUS_PER_MATCH

    return HLAMatch(matches=matches, total=total, score=min(100.0, score), typed=True)
