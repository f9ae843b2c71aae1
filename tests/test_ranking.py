from algorithms.compatibility import MatchResult
from algorithms.ranking import rank_matches, top_matches


def make_result(name, score):
    return MatchResult(patient=name, compatibility_score=score, abo_compatible=True, hla_match_score=0)


class TestRankMatches:
    def test_sorted_descending_with_contiguous_ranks(self):
        ranked = rank_matches([make_result('a', 40), make_result('b', 90), make_result('c', 65)])
        assert [r.patient for r in ranked] == ['b', 'c', 'a']
        assert [r.priority_rank for r in ranked] == [1, 2, 3]

    def test_ties_keep_input_order(self):
        ranked = rank_matches([
            make_result('first', 70),
            make_result('top', 80),
            make_result('second', 70),
            make_result('third', 70),
        ])
        assert [r.patient for r in ranked] == ['top', 'first', 'second', 'third']
        assert [r.priority_rank for r in ranked] == [1, 2, 3, 4]

    def test_inputs_not_mutated(self):
        original = [make_result('a', 10), make_result('b', 20)]
        rank_matches(original)
        assert [r.priority_rank for r in original] == [0, 0]

    def test_empty(self):
        assert rank_matches([]) == []
        assert rank_matches(None) == []


class TestTopMatches:
    def test_truncates_after_ranking(self):
        ranked = rank_matches([make_result(str(i), i) for i in range(15)])
        top = top_matches(ranked, 10)
        assert len(top) == 10
        assert [r.priority_rank for r in top] == list(range(1, 11))
        assert ranked[-1].priority_rank == 15

    def test_limit_larger_than_set(self):
        ranked = rank_matches([make_result('a', 1)])
        assert len(top_matches(ranked, 3)) == 1
