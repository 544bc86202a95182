from typing import Iterable, List
from routebuilder.schemas.route import ACTIVITY_LEVELS, AttractionRecord, RouteRequest
from routebuilder.utils.logger import get_logger

logger = get_logger(__name__)

LEVEL_RANK = {level: idx for idx, level in enumerate(ACTIVITY_LEVELS)}


# Predicates


def matches_age_group(record: AttractionRecord, age_group: str) -> bool:
    return age_group in (record.age_groups or [])


def within_activity_level(record: AttractionRecord, ceiling: str) -> bool:
    """easy < moderate < intense; an 'intense' ceiling admits every level."""
    max_rank = LEVEL_RANK.get(ceiling, len(ACTIVITY_LEVELS) - 1)
    return LEVEL_RANK.get(record.activity_level, 0) <= max_rank


def shares_interest(record: AttractionRecord, interests: Iterable[str]) -> bool:
    return not set(record.interests or []).isdisjoint(interests)


def fits_budget(record: AttractionRecord, request: RouteRequest) -> bool:
    # Records without a declared cost count as free
    if record.cost is None:
        return True
    return record.cost.overlaps(request.budget)


def is_candidate(record: AttractionRecord, request: RouteRequest) -> bool:
    return (
        matches_age_group(record, request.age_group)
        and within_activity_level(record, request.activity_level)
        and shares_interest(record, request.interests)
        and fits_budget(record, request)
    )


def filter_candidates(
    catalog: Iterable[AttractionRecord], request: RouteRequest
) -> List[AttractionRecord]:
    """
    Narrow the catalog to records compatible with the request.

    Catalog order is preserved. Records without a location are kept.
    """
    records = list(catalog)
    candidates = [r for r in records if is_candidate(r, request)]
    logger.info(
        f"Candidate filter: {len(records)} in, {len(candidates)} out "
        f"(age_group={request.age_group}, activity<={request.activity_level}, "
        f"interests={list(request.interests)})"
    )
    return candidates
