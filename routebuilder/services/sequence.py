from __future__ import annotations

import numpy as np
from typing import List, Optional, Sequence
from routebuilder.schemas.route import Coordinate, RouteStop
from routebuilder.services import geo
from routebuilder.utils.logger import get_logger

logger = get_logger(__name__)


def optimize_sequence(
    stops: Sequence[RouteStop], start: Optional[Coordinate] = None
) -> List[RouteStop]:
    """
    Nearest-neighbor reordering of already selected stops.

    Starts at `start` (or the first located stop) and repeatedly moves to the
    closest unvisited stop. Stops without coordinates go last in their original
    relative order. Ties resolve to the earlier stop. Not an exact TSP: the tour
    is an approximation.

    Args:
        stops: Stops to reorder (not mutated)
        start: Optional starting coordinate

    Returns:
        The same stop objects in visiting order
    """
    located = [s for s in stops if s.coordinate is not None]
    unlocated = [s for s in stops if s.coordinate is None]

    if len(located) <= 1:
        return located + unlocated

    origin = start if start is not None else located[0].coordinate
    nodes = [origin] + [s.coordinate for s in located]
    dist = geo.distance_matrix(nodes)

    visited = np.zeros(len(nodes), dtype=np.bool_)
    visited[0] = True
    current = 0
    ordered: List[RouteStop] = []

    for _ in range(len(located)):
        row = np.where(visited, np.inf, dist[current])
        nearest = int(np.argmin(row))
        ordered.append(located[nearest - 1])
        visited[nearest] = True
        current = nearest

    return ordered + unlocated


def recompute_legs(
    stops: Sequence[RouteStop],
    start: Optional[Coordinate] = None,
    speed_profile: str = "mixed",
) -> List[RouteStop]:
    """
    Copies of `stops` with travel legs and order_index recomputed for their current order.

    Legs are measured from the last located stop, so an unlocated stop never
    becomes the anchor of the next leg.
    """
    anchor = start
    result: List[RouteStop] = []
    for idx, stop in enumerate(stops):
        travel, meters = geo.leg(anchor, stop.coordinate, speed_profile)
        result.append(
            stop.model_copy(
                update={
                    "travel_time_minutes": travel,
                    "travel_distance_meters": meters,
                    "order_index": idx,
                }
            )
        )
        if stop.coordinate is not None:
            anchor = stop.coordinate
    return result


def tour_distance(stops: Sequence[RouteStop], start: Optional[Coordinate] = None) -> float:
    """Total straight-line meters along the stops in their current order."""
    total = 0.0
    anchor = start
    for stop in stops:
        if anchor is not None and stop.coordinate is not None:
            total += geo.distance(anchor, stop.coordinate)
        if stop.coordinate is not None:
            anchor = stop.coordinate
    return total
