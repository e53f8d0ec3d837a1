"""
Rank hierarchy.

Ranks are stored on officers as plain strings. The hierarchy
gives them an order (index = seniority) and drives single-step
promotion. A rank that is not in the hierarchy is a legacy
value, not an error: it simply has no position and no next rank.
"""

RANKS = (
    "Cadet",
    "Patrol Officer",
    "Police Officer",
    "Senior Officer",
    "Deputy",
    "Senior Deputy",
    "Undersheriff / Deputy Chief",
    "Sheriff / Chief of Police",
    "Forest Ranger",
    "Tracker Ranger",
    "Senior Ranger",
    "Captain Ranger",
    "Commissioner",
    "Deputy Marshal",
    "Marshal",
)


class RankHierarchy:
    """An ordered, immutable sequence of rank labels."""

    def __init__(self, ranks: tuple[str, ...]):
        if len(set(ranks)) != len(ranks):
            raise ValueError("rank labels must be unique")
        self._ranks = tuple(ranks)
        self._positions = {rank: i for i, rank in enumerate(self._ranks)}

    def __contains__(self, rank: object) -> bool:
        return rank in self._positions

    def __iter__(self):
        return iter(self._ranks)

    def __len__(self) -> int:
        return len(self._ranks)

    @property
    def top(self) -> str:
        return self._ranks[-1]

    def index_of(self, rank: str) -> int | None:
        """Return the seniority position of a rank, or None if unknown."""
        return self._positions.get(rank)

    def next_rank(self, rank: str) -> str | None:
        """
        Return the rank one step senior to ``rank``.

        None means there is nothing to promote to: either the
        rank is already the top of the hierarchy or it is not
        part of the hierarchy at all.
        """
        position = self.index_of(rank)
        if position is None or position == len(self._ranks) - 1:
            return None
        return self._ranks[position + 1]

    def sort_key(self, rank: str) -> int:
        """Ordering key for officer listings. Unknown ranks sort first."""
        position = self.index_of(rank)
        return -1 if position is None else position


RANK_HIERARCHY = RankHierarchy(RANKS)
