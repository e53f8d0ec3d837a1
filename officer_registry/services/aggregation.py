"""
Aggregation engine — skill averages, per-officer statistics and
the leaderboard.

Everything here is a pure function over evaluation snapshots
already fetched from the primary store, so results depend only
on their input and repeated calls give identical answers.

Scores are summed as Decimal, never as binary floats. Two
officers with the same true average must compare equal, or the
leaderboard tie-break would depend on rounding error.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import NamedTuple

from officer_registry.models.evaluation import SKILL_NAMES

OVERALL_KEY = "geral"
DEFAULT_TOP_N = 10

TWO_PLACES = Decimal("0.01")


class EvaluationSnapshot(NamedTuple):
    """The parts of an evaluation the aggregates need."""
    officer_id: int
    rank_at_evaluation: str
    skills: Mapping[str, float]


@dataclass
class OfficerStatistics:
    officer_id: int
    total_evaluations: int = 0
    ranks: list[str] = field(default_factory=list)
    evaluations_by_rank: dict[str, int] = field(default_factory=dict)
    average_skills: dict[str, dict[str, Decimal]] = field(default_factory=dict)


@dataclass
class LeaderboardRow:
    officer_id: int
    average_score: Decimal
    evaluation_count: int


def to_decimal(score: float | Decimal) -> Decimal:
    """Exact decimal value of a stored score, as it was entered."""
    if isinstance(score, Decimal):
        return score
    return Decimal(str(score))


def to_fixed(value: float | Decimal) -> Decimal:
    """Round to two decimal places, halves away from zero."""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _skill_total(skills: Mapping[str, float]) -> Decimal:
    return sum((to_decimal(skills[name]) for name in SKILL_NAMES), Decimal(0))


def average_skills(
    skill_vectors: Iterable[Mapping[str, float]],
) -> dict[str, Decimal]:
    """
    Arithmetic mean of each skill across all vectors.

    An empty input gives an empty result rather than an error.
    """
    totals = dict.fromkeys(SKILL_NAMES, Decimal(0))
    count = 0
    for skills in skill_vectors:
        count += 1
        for name in SKILL_NAMES:
            totals[name] += to_decimal(skills[name])

    if count == 0:
        return {}
    return {name: totals[name] / count for name in SKILL_NAMES}


def evaluation_score(skills: Mapping[str, float]) -> Decimal:
    """Reduce one skill vector to a single score."""
    return _skill_total(skills) / len(SKILL_NAMES)


def officer_statistics(
    officer_id: int, evaluations: Iterable[EvaluationSnapshot]
) -> OfficerStatistics:
    """
    Statistics for one officer's evaluations.

    Grouping uses the rank snapshotted on each evaluation, not
    the officer's current rank: an evaluation scored while the
    officer was a cadet stays under "Cadet" after promotion.
    Ranks are listed in the order they were first seen.
    """
    by_rank: dict[str, list[Mapping[str, float]]] = defaultdict(list)
    overall = []
    for evaluation in evaluations:
        by_rank[evaluation.rank_at_evaluation].append(evaluation.skills)
        overall.append(evaluation.skills)

    stats = OfficerStatistics(officer_id=officer_id)
    if not overall:
        return stats

    stats.total_evaluations = len(overall)
    stats.ranks = list(by_rank)
    stats.evaluations_by_rank = {rank: len(rows) for rank, rows in by_rank.items()}
    stats.average_skills[OVERALL_KEY] = average_skills(overall)
    for rank, rows in by_rank.items():
        stats.average_skills[rank] = average_skills(rows)
    return stats


def leaderboard(
    evaluations: Iterable[EvaluationSnapshot], top_n: int = DEFAULT_TOP_N
) -> list[LeaderboardRow]:
    """
    Top officers by the mean of their per-evaluation scores.

    Each evaluation is first reduced to one score, then scores
    are averaged per officer. Ties on the average are broken by
    officer id, ascending. Officers without evaluations never
    appear.
    """
    # Every vector has the same length, so the mean of per-evaluation
    # means is the skill total over (count * skills). Dividing once
    # keeps equal averages exactly equal.
    totals: dict[int, Decimal] = defaultdict(Decimal)
    counts: dict[int, int] = defaultdict(int)
    for evaluation in evaluations:
        totals[evaluation.officer_id] += _skill_total(evaluation.skills)
        counts[evaluation.officer_id] += 1

    rows = [
        LeaderboardRow(
            officer_id=officer_id,
            average_score=totals[officer_id] / (counts[officer_id] * len(SKILL_NAMES)),
            evaluation_count=counts[officer_id],
        )
        for officer_id in totals
    ]
    rows.sort(key=lambda row: (-row.average_score, row.officer_id))
    return rows[:top_n]
