from __future__ import annotations

from typing import Iterable, List, Optional
from routebuilder.core.config import settings
from routebuilder.schemas.route import (
    AttractionRecord,
    RouteRequest,
    RouteResult,
    RouteStop,
    RouteSummary,
)
from routebuilder.services.alternatives import attach_alternatives
from routebuilder.services.filters import filter_candidates
from routebuilder.services.packer import PackerConfig, pack_route, rank_candidates
from routebuilder.services.sequence import optimize_sequence, recompute_legs, tour_distance
from routebuilder.utils.logger import get_logger
from routebuilder.utils.validators import validate_route

logger = get_logger(__name__)


def resequence_stops(
    stops: List[RouteStop], request: RouteRequest, speed_profile: str = "mixed"
) -> List[RouteStop]:
    """
    Reorder stops by nearest neighbor and recompute their travel legs.

    The packer order is kept when the new order would exceed the time budget.
    """
    if len(stops) <= 1:
        return stops

    reordered = recompute_legs(
        optimize_sequence(stops, request.start_location),
        request.start_location,
        speed_profile,
    )
    new_time = sum(s.visit_duration_minutes + s.travel_time_minutes for s in reordered)
    if new_time > request.time_budget_minutes:
        logger.warning(
            f"Resequenced route needs {new_time} min > budget "
            f"{request.time_budget_minutes} min, keeping packer order"
        )
        return stops

    before = tour_distance(stops, request.start_location)
    after = tour_distance(reordered, request.start_location)
    logger.info(f"Resequenced {len(stops)} stops: {before:.0f}m → {after:.0f}m")
    return reordered


def summarize_route(stops: List[RouteStop], request: RouteRequest) -> RouteSummary:
    total_time = sum(s.visit_duration_minutes + s.travel_time_minutes for s in stops)
    total_cost = sum(s.estimated_cost for s in stops)
    total_distance = sum(s.travel_distance_meters for s in stops)
    return RouteSummary(
        total_duration_minutes=int(round(total_time)),
        total_cost=int(round(total_cost)),
        total_distance_meters=round(total_distance, 1),
        stop_count=len(stops),
        age_group=request.age_group,
        activity_level=request.activity_level,
        interests=list(request.interests),
        duration_class=request.duration_class,
    )


def run_route_pipeline(
    request: RouteRequest,
    catalog: Iterable[AttractionRecord],
    optimize: bool = False,
    speed_profile: str = "mixed",
    config: Optional[PackerConfig] = None,
) -> RouteResult:
    """
    Build a route: filter → rank → pack → alternatives → (optional) resequence → summarize.

    Pipeline stages:
    1. Candidate filter: age group, activity ceiling, interests, budget overlap
    2. Ranking: rating desc, review count desc, catalog order
    3. Greedy packing under the time and cost ceilings
    4. Alternatives: up to MAX_ALTERNATIVES same-category unselected candidates per stop
    5. Nearest-neighbor resequencing (optional)

    Args:
        request: Validated route request
        catalog: Snapshot of active attractions
        optimize: Whether to apply nearest-neighbor resequencing
        speed_profile: Travel speed profile for leg estimates
        config: Packer configuration (optional)

    Returns:
        RouteResult. Zero stops is a valid outcome, not an error.

    Raises:
        InvalidCoordinate: a coordinate outside valid bounds was met while measuring
    """
    cfg = config or PackerConfig(speed_profile=speed_profile)

    # Step 1: Filter + rank once, deterministically
    candidates = filter_candidates(catalog, request)
    ranked = rank_candidates(candidates)

    # Step 2: Greedy packing
    packed = pack_route(ranked, request, cfg)

    # Step 3: Alternatives from the same ranked list
    stops = attach_alternatives(packed.stops, ranked, settings.MAX_ALTERNATIVES)

    # Step 4: Optional resequencing
    if optimize:
        stops = resequence_stops(stops, request, cfg.speed_profile)

    result = RouteResult(stops=stops, summary=summarize_route(stops, request))

    report = validate_route(result, request)
    if not report["valid"]:
        logger.error(f"Route violates its constraints: {report['violations']}")

    logger.info(
        f"Route built: {result.summary.stop_count} stops, "
        f"{result.summary.total_duration_minutes} min, "
        f"cost {result.summary.total_cost}"
    )
    return result
