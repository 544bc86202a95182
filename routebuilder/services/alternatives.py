from typing import List, Sequence, Set
from routebuilder.core.config import settings
from routebuilder.schemas.route import AlternativeSummary, AttractionRecord, RouteStop
from routebuilder.services.packer import estimated_cost


def summarize(record: AttractionRecord) -> AlternativeSummary:
    return AlternativeSummary(
        attraction_id=record.id,
        name=record.name,
        rating=record.rating,
        estimated_cost=estimated_cost(record),
    )


def find_alternatives(
    stop: RouteStop,
    ranked: Sequence[AttractionRecord],
    selected_ids: Set[str],
    limit: int = settings.MAX_ALTERNATIVES,
) -> List[AlternativeSummary]:
    """Up to `limit` unselected candidates sharing the stop's category, in ranked order."""
    category = stop.attraction.category
    if category is None or limit <= 0:
        return []

    found: List[AlternativeSummary] = []
    seen = set()
    for record in ranked:
        if record.id in selected_ids or record.id in seen:
            continue
        if record.category != category:
            continue
        found.append(summarize(record))
        seen.add(record.id)
        if len(found) >= limit:
            break
    return found


def attach_alternatives(
    stops: Sequence[RouteStop],
    ranked: Sequence[AttractionRecord],
    limit: int = settings.MAX_ALTERNATIVES,
) -> List[RouteStop]:
    """
    Return copies of `stops` with their alternatives filled in.

    Args:
        stops: Packed stops
        ranked: Full ranked candidate list the stops were packed from
        limit: Max alternatives per stop

    Returns:
        New RouteStop list; the input stops are left untouched
    """
    selected_ids = {s.attraction.id for s in stops}
    return [
        stop.model_copy(
            update={
                "alternatives": find_alternatives(stop, ranked, selected_ids, limit)
            }
        )
        for stop in stops
    ]
