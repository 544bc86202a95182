from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set
from routebuilder.core.config import settings
from routebuilder.schemas.route import AttractionRecord, Coordinate, RouteRequest, RouteStop
from routebuilder.services import geo
from routebuilder.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PackerConfig:
    """Immutable knobs for the greedy packer."""

    default_visit_minutes: int = settings.DEFAULT_VISIT_MINUTES
    fill_threshold: float = settings.TIME_FILL_THRESHOLD  # stop scanning past this share
    speed_profile: str = "mixed"


@dataclass
class PackedRoute:
    stops: List[RouteStop] = field(default_factory=list)
    used_time: int = 0
    used_cost: float = 0.0
    used_distance: float = 0.0


def rank_candidates(candidates: Sequence[AttractionRecord]) -> List[AttractionRecord]:
    """
    Highest rated first, tie-break by more reviews.

    sorted() is stable, so equal keys keep catalog order.
    """
    return sorted(
        candidates,
        key=lambda r: (-(r.rating or 0.0), -(r.review_count or 0)),
    )


def visit_minutes(record: AttractionRecord, config: PackerConfig) -> int:
    return record.avg_visit_duration or config.default_visit_minutes


def estimated_cost(record: AttractionRecord) -> float:
    return record.cost.midpoint if record.cost is not None else 0.0


def pack_route(
    ranked: Sequence[AttractionRecord],
    request: RouteRequest,
    config: Optional[PackerConfig] = None,
) -> PackedRoute:
    """
    Single-pass greedy selection under joint time and cost ceilings.

    Candidates are visited in ranked order and admitted iff the running time
    (visit + travel from the last located stop) stays within the time budget
    and the running cost stays within budget.max. Rejected candidates are never
    revisited. Scanning stops once the fill threshold of the time budget is used.

    Args:
        ranked: Filtered candidates, already ranked
        request: Validated route request
        config: Packer configuration (optional)

    Returns:
        PackedRoute with stops in selection order and running totals
    """
    cfg = config or PackerConfig()
    budget_minutes = request.time_budget_minutes
    budget_max = request.budget.max

    packed = PackedRoute()
    selected: Set[str] = set()
    last_location: Optional[Coordinate] = request.start_location

    for record in ranked:
        if record.id in selected:
            continue

        visit = visit_minutes(record, cfg)
        travel, meters = geo.leg(last_location, record.coordinate, cfg.speed_profile)
        cost = estimated_cost(record)

        fits_time = packed.used_time + visit + travel <= budget_minutes
        fits_cost = packed.used_cost + cost <= budget_max

        if fits_time and fits_cost:
            packed.stops.append(
                RouteStop(
                    attraction=record,
                    visit_duration_minutes=visit,
                    travel_time_minutes=travel,
                    travel_distance_meters=meters,
                    estimated_cost=cost,
                    order_index=len(packed.stops),
                )
            )
            selected.add(record.id)
            packed.used_time += visit + travel
            packed.used_cost += cost
            packed.used_distance += meters

            # Unlocated stops leave the anchor where it was
            if record.coordinate is not None:
                last_location = record.coordinate
        else:
            logger.debug(
                f"Skipped {record.id}: fits_time={fits_time}, fits_cost={fits_cost}"
            )

        if packed.used_time >= budget_minutes * cfg.fill_threshold:
            break

    logger.info(
        f"Packed {len(packed.stops)} of {len(ranked)} candidates: "
        f"{packed.used_time}/{budget_minutes} min, "
        f"{packed.used_cost:.0f}/{budget_max:.0f} cost"
    )
    return packed
