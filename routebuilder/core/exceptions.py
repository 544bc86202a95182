from typing import Dict, Optional


class RouteBuilderError(Exception):
    """Base class for errors raised by the route builder."""


class RouteValidationError(RouteBuilderError):
    """Rejected build request. `field` names the first offending field."""

    def __init__(
        self,
        field: str,
        message: str,
        errors: Optional[Dict[str, str]] = None,
    ):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
        self.errors = errors or {field: message}


class InvalidCoordinate(RouteBuilderError):
    """Latitude or longitude outside its valid range."""

    def __init__(self, latitude: float, longitude: float):
        super().__init__(
            f"Invalid coordinate ({latitude}, {longitude}): "
            "latitude must be in [-90, 90] and longitude in [-180, 180]"
        )
        self.latitude = latitude
        self.longitude = longitude


class CatalogUnavailable(RouteBuilderError):
    """The attraction catalog could not be read."""
