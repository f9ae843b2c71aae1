# algorithms/ranking.py
import dataclasses

import numpy as np


def rank_matches(results):
    """
    Order match results by compatibility score (highest first) and assign
    dense 1-based priority ranks over the full set.

    The sort is stable: equal scores keep the order in which candidates were
    evaluated. No secondary key is applied, so ties are only as meaningful as
    the candidate pool ordering.

    Returns:
        New list of MatchResult objects with priority_rank set
    """
    results = list(results) if results is not None else []
    if not results:
        return []

    scores = np.array([r.compatibility_score for r in results], dtype=float)
    order = np.argsort(-scores, kind='stable')

    return [
        dataclasses.replace(results[i], priority_rank=rank)
        for rank, i in enumerate(order.tolist(), start=1)
    ]


def top_matches(ranked, limit):
    """Highest ranked results, used to cap persistence and notifications"""
    if limit is None or limit < 0:
        return list(ranked)
    return list(ranked[:limit])
