from __future__ import annotations

import time
from typing import Any, Callable, Dict, Iterable, Optional, Protocol, Sequence, Tuple
from routebuilder.core.config import settings
from routebuilder.core.exceptions import CatalogUnavailable
from routebuilder.schemas.route import AttractionRecord, Coordinate, CostRange
from routebuilder.utils.logger import get_logger

logger = get_logger(__name__)


class AttractionCatalog(Protocol):
    """Read-only source of active attractions."""

    def list_active_attractions(self) -> Sequence[AttractionRecord]: ...


def row_to_record(row: Dict[str, Any]) -> AttractionRecord:
    """Convert a catalog table row to an AttractionRecord."""
    lat, lon = row.get("latitude"), row.get("longitude")
    coordinate = (
        Coordinate(latitude=float(lat), longitude=float(lon))
        if lat is not None and lon is not None
        else None
    )

    budget_min, budget_max = row.get("budget_min"), row.get("budget_max")
    cost = None
    if budget_min is not None or budget_max is not None:
        cost = CostRange(min=float(budget_min or 0), max=float(budget_max or 0))

    return AttractionRecord(
        id=str(row["id"]),
        name=row.get("name") or "",
        name_en=row.get("name_en"),
        category=row.get("category"),
        coordinate=coordinate,
        interests=row.get("interests") or [],
        age_groups=row.get("age_groups") or [],
        activity_level=row.get("activity_level") or "easy",
        avg_visit_duration=row.get("average_visit_duration"),
        cost=cost,
        rating=row.get("rating"),
        review_count=row.get("review_count"),
    )


class InMemoryCatalog:
    """Immutable snapshot; replace() swaps the whole tuple."""

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[AttractionRecord] = ()):
        self._records: Tuple[AttractionRecord, ...] = tuple(records)

    def list_active_attractions(self) -> Sequence[AttractionRecord]:
        return self._records

    def replace(self, records: Iterable[AttractionRecord]) -> None:
        self._records = tuple(records)


class SupabaseCatalog:
    """Attractions table in Supabase, active and not soft-deleted rows only."""

    def __init__(self, table: Optional[str] = None):
        self.table = table or settings.ATTRACTIONS_TABLE

    def list_active_attractions(self) -> Sequence[AttractionRecord]:
        # Import here so the engine does not need Supabase configured
        from routebuilder.db.supabase_client import get_supabase

        client = get_supabase()
        try:
            resp = (
                client.table(self.table)
                .select("*")
                .eq("is_active", True)
                .eq("is_deleted", False)
                .execute()
            )
        except Exception as e:
            logger.exception("Error reading attraction catalog")
            raise CatalogUnavailable(f"Failed to read attractions: {e}") from e

        try:
            records = tuple(row_to_record(r) for r in (resp.data or []))
        except (KeyError, TypeError, ValueError) as e:
            # pydantic ValidationError is a ValueError
            logger.exception("Malformed row in attraction catalog")
            raise CatalogUnavailable(f"Malformed attraction row: {e}") from e
        logger.info(f"Loaded {len(records)} active attractions from '{self.table}'")
        return records


class CachedCatalog:
    """
    Serves a snapshot of `source`, refreshed at most every `ttl_sec`.

    Each refresh builds a new tuple and swaps it in, so callers holding the
    previous snapshot never see a partial update.
    """

    def __init__(
        self,
        source: AttractionCatalog,
        ttl_sec: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.source = source
        self.clock = clock
        self.ttl_sec = settings.CATALOG_TTL_SEC if ttl_sec is None else ttl_sec
        self._snapshot: Optional[Tuple[AttractionRecord, ...]] = None
        self._loaded_at = 0.0

    def _is_stale(self) -> bool:
        return (
            self._snapshot is None
            or self.clock() - self._loaded_at >= self.ttl_sec
        )

    def refresh(self) -> Tuple[AttractionRecord, ...]:
        snapshot = tuple(self.source.list_active_attractions())
        self._snapshot = snapshot
        self._loaded_at = self.clock()
        return snapshot

    def list_active_attractions(self) -> Sequence[AttractionRecord]:
        snapshot = self._snapshot
        if self._is_stale():
            snapshot = self.refresh()
        return snapshot
