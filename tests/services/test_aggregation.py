"""
Tests for the aggregation engine.

These are pure functions, so no database is needed.
"""

from decimal import Decimal

from officer_registry.models.evaluation import SKILL_NAMES
from officer_registry.services.aggregation import (
    EvaluationSnapshot,
    OVERALL_KEY,
    average_skills,
    evaluation_score,
    leaderboard,
    officer_statistics,
    to_fixed,
)


def uniform(score):
    """A skill vector with the same score for every skill."""
    return {name: score for name in SKILL_NAMES}


def snap(officer_id, score, rank="Cadet"):
    return EvaluationSnapshot(officer_id, rank, uniform(score))


class TestAverageSkills:

    def test_mean_per_skill(self):
        first = uniform(6.0)
        second = dict(uniform(8.0), arrest=10.0)
        result = average_skills([first, second])
        assert result["approach"] == Decimal("7")
        assert result["arrest"] == Decimal("8")

    def test_keys_follow_skill_order(self):
        assert list(average_skills([uniform(5)])) == list(SKILL_NAMES)

    def test_empty_input_gives_empty_result(self):
        assert average_skills([]) == {}


class TestEvaluationScore:

    def test_mean_across_vector(self):
        skills = dict(uniform(7.0), arrest=0.0)
        assert evaluation_score(skills) == Decimal("6")


class TestOfficerStatistics:

    def test_three_evaluations_overall_average(self):
        evaluations = [snap(1, 7.0), snap(1, 8.5), snap(1, 6.25)]
        stats = officer_statistics(1, evaluations)

        assert stats.total_evaluations == 3
        for name in SKILL_NAMES:
            assert stats.average_skills[OVERALL_KEY][name] == Decimal("7.25")

    def test_groups_by_snapshotted_rank(self):
        evaluations = [
            snap(1, 5.0, rank="Cadet"),
            snap(1, 7.0, rank="Cadet"),
            snap(1, 9.0, rank="Patrol Officer"),
        ]
        stats = officer_statistics(1, evaluations)

        assert stats.ranks == ["Cadet", "Patrol Officer"]
        assert stats.evaluations_by_rank == {"Cadet": 2, "Patrol Officer": 1}
        assert stats.average_skills["Cadet"]["approach"] == Decimal("6")
        assert stats.average_skills["Patrol Officer"]["approach"] == Decimal("9")

    def test_no_evaluations_gives_zero_and_empty(self):
        stats = officer_statistics(42, [])
        assert stats.officer_id == 42
        assert stats.total_evaluations == 0
        assert stats.ranks == []
        assert stats.evaluations_by_rank == {}
        assert stats.average_skills == {}


class TestLeaderboard:

    def test_sorted_by_average_descending(self):
        evaluations = [snap(1, 5.0), snap(2, 9.0), snap(3, 7.0)]
        rows = leaderboard(evaluations)
        assert [r.officer_id for r in rows] == [2, 3, 1]

    def test_per_officer_mean_of_evaluation_scores(self):
        evaluations = [snap(1, 6.0), snap(1, 8.0), snap(2, 6.5)]
        rows = leaderboard(evaluations)

        assert rows[0].officer_id == 1
        assert rows[0].average_score == Decimal("7")
        assert rows[0].evaluation_count == 2

    def test_ties_broken_by_officer_id(self):
        evaluations = [snap(7, 8.0), snap(3, 8.0), snap(5, 8.0)]
        assert [r.officer_id for r in leaderboard(evaluations)] == [3, 5, 7]

    def test_equal_true_averages_tie_on_officer_id(self):
        # Both vectors sum to exactly 18.9, which float addition misses
        first = dict(zip(SKILL_NAMES, [1.1, 0.5, 1.2, 1.9, 3.9, 4.0, 6.3]))
        second = dict(zip(SKILL_NAMES, [0.6, 4.4, 2.5, 4.3, 2.3, 3.1, 1.7]))
        rows = leaderboard([
            EvaluationSnapshot(2, "Cadet", second),
            EvaluationSnapshot(1, "Cadet", first),
        ])

        assert [r.officer_id for r in rows] == [1, 2]
        assert rows[0].average_score == rows[1].average_score == Decimal("2.7")

    def test_equal_averages_over_different_counts_tie(self):
        evaluations = [snap(2, 2.7), snap(1, 2.6), snap(1, 2.8)]
        rows = leaderboard(evaluations)
        assert [r.officer_id for r in rows] == [1, 2]

    def test_limited_to_top_n(self):
        evaluations = [snap(i, float(i % 10)) for i in range(1, 16)]
        assert len(leaderboard(evaluations)) == 10
        assert len(leaderboard(evaluations, top_n=3)) == 3

    def test_empty_input(self):
        assert leaderboard([]) == []

    def test_deterministic_across_calls(self):
        evaluations = [snap(2, 7.0), snap(1, 7.0), snap(3, 4.5), snap(2, 9.0)]
        assert leaderboard(evaluations) == leaderboard(evaluations)
        assert leaderboard(list(reversed(evaluations))) == leaderboard(evaluations)


class TestToFixed:

    def test_two_places(self):
        assert to_fixed(7) == Decimal("7.00")
        assert str(to_fixed(8.5)) == "8.50"

    def test_rounds_half_up(self):
        assert to_fixed(7.125) == Decimal("7.13")
        assert to_fixed(2 / 3) == Decimal("0.67")

    def test_true_half_cent_rounds_up(self):
        averages = average_skills([uniform(2.67), uniform(2.68)])
        assert to_fixed(averages["arrest"]) == Decimal("2.68")
