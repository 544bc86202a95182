from typing import Any, Dict
from pydantic import ValidationError
from routebuilder.core.exceptions import RouteValidationError
from routebuilder.schemas.route import (
    BuildRouteRequest,
    Coordinate,
    CostRange,
    RouteRequest,
)
from routebuilder.utils.logger import get_logger

logger = get_logger(__name__)

# Minute budget per duration class
DURATION_MINUTES = {
    "short": 180,
    "day": 480,
    "multi_day": 1440,
}

# ============================================================================
# Frontend → Engine Transformation
# ============================================================================


def _field_errors(exc: ValidationError) -> Dict[str, str]:
    """Flatten pydantic errors into {"budget.min": "message", ...}."""
    errors: Dict[str, str] = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "body"
        errors.setdefault(field, err.get("msg", "Invalid value"))
    return errors


def parse_build_payload(payload: Dict[str, Any]) -> BuildRouteRequest:
    """
    Validate a raw build-route payload.

    Raises:
        RouteValidationError: naming the first offending field, with every
            field-level problem in `errors`
    """
    if not isinstance(payload, dict):
        raise RouteValidationError("body", "Request body must be a JSON object")

    try:
        return BuildRouteRequest.model_validate(payload)
    except ValidationError as e:
        errors = _field_errors(e)
        field, message = next(iter(errors.items()))
        logger.info(f"Rejected build request: {errors}")
        raise RouteValidationError(field, message, errors) from e


def to_route_request(build: BuildRouteRequest) -> RouteRequest:
    """
    Map the inbound contract to the engine's RouteRequest.

    Transformations:
    - duration_class → time budget in minutes
    - budget → CostRange
    - start_location → Coordinate
    - interests de-duplicated, order kept
    """
    minutes = DURATION_MINUTES.get(build.duration_class)
    if minutes is None:
        raise RouteValidationError(
            "duration_class", f"Unrecognized duration class '{build.duration_class}'"
        )

    start = None
    if build.start_location is not None:
        start = Coordinate(
            latitude=build.start_location.latitude,
            longitude=build.start_location.longitude,
        )

    return RouteRequest(
        time_budget_minutes=minutes,
        budget=CostRange(min=build.budget.min, max=build.budget.max),
        interests=list(dict.fromkeys(build.interests)),
        activity_level=build.activity_level,
        age_group=build.age_group,
        start_location=start,
        duration_class=build.duration_class,
    )


def transform_build_payload(payload: Dict[str, Any]) -> RouteRequest:
    """
    Validate and transform a frontend payload into a RouteRequest.

    Example:
        Input:
        {
            "duration_class": "short",
            "budget": {"min": 0, "max": 5000},
            "interests": ["nature"],
            "activity_level": "easy",
            "age_group": "adults"
        }

        Output:
        RouteRequest(time_budget_minutes=180, budget=CostRange(min=0, max=5000), ...)
    """
    return to_route_request(parse_build_payload(payload))
