"""
Cache keys and the invalidation mapping.

Every cached view has a fixed key here, and every mutation
looks up the keys it must drop through ``invalidation_set``.
When a new cached view or a new mutation is added, this file
must be updated with it: a missing key means readers can see
stale data until the TTL expires.
"""

OFFICERS_ALL = "officers:all"
OFFICERS_COUNT = "officers:count"
OFFICERS_RECENT_PROMOTIONS = "officers:recent-promotions"
EVALUATIONS_RECENT = "evaluations:recent"
ANALYTICS_SUMMARY = "analytics:summary"
ANALYTICS_RANKING = "analytics:ranking"

OFFICER = "Officer"
EVALUATION = "Evaluation"

CREATE = "create"
UPDATE = "update"
DELETE = "delete"
PROMOTE = "promote"


def officer_evaluations(officer_id: int) -> str:
    return f"evaluations:officer:{officer_id}"


def officer_analytics(officer_id: int) -> str:
    return f"analytics:officer:{officer_id}"


def invalidation_set(entity: str, action: str, officer_id: int) -> tuple[str, ...]:
    """
    Return every cache key whose contents a mutation can change.

    ``officer_id`` is the mutated officer for officer mutations
    and the evaluated officer for evaluation mutations.
    """
    if entity == OFFICER:
        if action == CREATE:
            # A brand new officer has no evaluations, so only the
            # roster, the count and the summary total move.
            return (OFFICERS_ALL, OFFICERS_COUNT, ANALYTICS_SUMMARY)
        if action in (UPDATE, PROMOTE, DELETE):
            # Name and rank are shown in promotion, evaluation and
            # ranking feeds; deletion also removes the officer's
            # evaluations.
            return (
                OFFICERS_ALL,
                OFFICERS_COUNT,
                OFFICERS_RECENT_PROMOTIONS,
                EVALUATIONS_RECENT,
                ANALYTICS_SUMMARY,
                ANALYTICS_RANKING,
                officer_evaluations(officer_id),
                officer_analytics(officer_id),
            )

    if entity == EVALUATION and action in (CREATE, DELETE):
        return (
            EVALUATIONS_RECENT,
            officer_evaluations(officer_id),
            ANALYTICS_SUMMARY,
            officer_analytics(officer_id),
            ANALYTICS_RANKING,
        )

    raise ValueError(f"No invalidation mapping for {entity} {action}")
