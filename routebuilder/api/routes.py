import os
import json
import uuid
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Query
from routebuilder.core.config import settings
from routebuilder.core.exceptions import (
    CatalogUnavailable,
    InvalidCoordinate,
    RouteValidationError,
)
from routebuilder.services.catalog import AttractionCatalog, CachedCatalog, SupabaseCatalog
from routebuilder.services.notifications import render_share_text
from routebuilder.services.pipeline import run_route_pipeline
from routebuilder.services.transformers import transform_build_payload
from routebuilder.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["routes"])

_catalog = CachedCatalog(SupabaseCatalog())


def get_catalog() -> AttractionCatalog:
    return _catalog


# Storage Helpers


def get_storage_dir() -> str:
    """Get absolute path to saved routes storage directory."""
    return settings.ROUTE_STORAGE_DIR


def save_route(route_id: str, data: dict) -> None:
    """Persist route to local JSON storage."""
    storage_dir = get_storage_dir()
    os.makedirs(storage_dir, exist_ok=True)

    storage_path = os.path.join(storage_dir, f"{route_id}.json")
    with open(storage_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    logger.info(f"Route saved: {storage_path}")


def load_route(route_id: str, include_deleted: bool = False) -> dict:
    """Load route from local JSON storage."""
    storage_path = os.path.join(get_storage_dir(), f"{route_id}.json")

    if not os.path.exists(storage_path):
        raise FileNotFoundError(f"Route {route_id} not found")

    with open(storage_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if data.get("is_deleted") and not include_deleted:
        raise FileNotFoundError(f"Route {route_id} was deleted")
    return data


def _route_name(duration_class: str) -> str:
    return f"Route for {(duration_class or 'trip').replace('_', ' ')}"


# API Endpoints


@router.post("/routes/build")
def build_route(
    payload: dict,
    save: bool = Query(False, description="Persist the built route"),
    optimize: bool = Query(False, description="Resequence stops by nearest neighbor"),
    catalog: AttractionCatalog = Depends(get_catalog),
):
    """
    Build a route from the frontend form payload.

    Flow:
    1. Validate payload → RouteRequest
    2. Read catalog snapshot
    3. Run route pipeline (filter, pack, alternatives, optional resequence)
    4. Persist when requested
    5. Return response

    Returns:
        {
            "stops": [...],
            "summary": {...},
            "saved_route_id": str | None
        }

    Raises:
        HTTPException: 400 invalid payload, 422 bad coordinates,
            503 catalog unavailable, 500 for processing errors
    """
    try:
        request = transform_build_payload(payload)
        logger.info(
            f"Route request: duration={request.duration_class} "
            f"({request.time_budget_minutes} min), "
            f"budget={request.budget.min:.0f}-{request.budget.max:.0f}, "
            f"interests={request.interests}"
        )

        records = catalog.list_active_attractions()
        result = run_route_pipeline(request, records, optimize=optimize)
        body = result.model_dump(mode="json")

        saved_route_id = None
        if save:
            saved_route_id = str(uuid.uuid4())
            save_route(
                saved_route_id,
                {
                    "id": saved_route_id,
                    "name": _route_name(request.duration_class),
                    "duration_class": request.duration_class,
                    "created_at": datetime.now(timezone.utc).isoformat(),
                    "is_deleted": False,
                    "deleted_at": None,
                    "result": body,
                },
            )

        return {**body, "saved_route_id": saved_route_id}

    except RouteValidationError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "field": e.field,
                "fields": e.errors,
            },
        )
    except InvalidCoordinate as e:
        raise HTTPException(
            status_code=422,
            detail={"code": "INVALID_COORDINATE", "message": str(e)},
        )
    except CatalogUnavailable as e:
        logger.error(f"Catalog unavailable: {e}")
        raise HTTPException(
            status_code=503,
            detail={"code": "CATALOG_UNAVAILABLE", "message": str(e)},
        )
    except Exception as e:
        logger.exception("Failed to build route")
        raise HTTPException(
            status_code=500,
            detail={"code": "BUILD_FAILED", "message": str(e) or "Internal server error"},
        )


@router.get("/routes")
def list_routes():
    """
    List saved routes, newest first.

    Returns:
        List of route metadata with stop counts
    """
    try:
        storage_dir = get_storage_dir()
        if not os.path.exists(storage_dir):
            return {"routes": []}

        routes = []
        for filename in os.listdir(storage_dir):
            if not filename.endswith(".json"):
                continue
            try:
                data = load_route(filename[: -len(".json")], include_deleted=True)
            except Exception as e:
                logger.warning(f"Failed to load route {filename}: {e}")
                continue
            if data.get("is_deleted"):
                continue

            summary = data.get("result", {}).get("summary", {})
            routes.append(
                {
                    "id": data.get("id"),
                    "name": data.get("name"),
                    "duration_class": data.get("duration_class"),
                    "total_duration_minutes": summary.get("total_duration_minutes"),
                    "total_cost": summary.get("total_cost"),
                    "stops_count": len(data.get("result", {}).get("stops", [])),
                    "created_at": data.get("created_at"),
                }
            )

        routes.sort(key=lambda r: r.get("created_at") or "", reverse=True)
        return {"routes": routes}
    except Exception as e:
        logger.exception("Failed to list routes")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/routes/{route_id}")
def get_route(route_id: str):
    """
    Retrieve a saved route by ID.

    Raises:
        HTTPException: 404 if not found or deleted, 500 for errors
    """
    try:
        return load_route(route_id)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Route not found")
    except Exception as e:
        logger.exception(f"Failed to load route {route_id}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/routes/{route_id}")
def delete_route(route_id: str):
    """
    Soft delete a saved route.

    Returns:
        {"status": "deleted", "route_id": str}
    """
    try:
        data = load_route(route_id)
        data["is_deleted"] = True
        data["deleted_at"] = datetime.now(timezone.utc).isoformat()
        save_route(route_id, data)
        logger.info(f"Deleted route {route_id}")

        return {"status": "deleted", "route_id": route_id}
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Route not found")
    except Exception as e:
        logger.exception(f"Failed to delete route {route_id}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/routes/{route_id}/share")
def share_route(route_id: str):
    """Plain-text summary of a saved route."""
    try:
        data = load_route(route_id)
        return {
            "route_id": route_id,
            "text": render_share_text(data.get("result", {}), data.get("name")),
        }
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Route not found")
    except Exception as e:
        logger.exception(f"Failed to render route {route_id}")
        raise HTTPException(status_code=500, detail=str(e))
