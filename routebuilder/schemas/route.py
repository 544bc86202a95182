from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from typing import List, Literal, Optional

ActivityLevel = Literal["easy", "moderate", "intense"]

# Ordered from least to most demanding
ACTIVITY_LEVELS = ("easy", "moderate", "intense")

# Labels sent by the mobile client
DURATION_ALIASES = {"3_hours": "short", "1_day": "day", "3_days": "multi_day"}


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class CostRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: float = 0.0
    max: float = 0.0

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2

    def overlaps(self, other: "CostRange") -> bool:
        return self.max >= other.min and self.min <= other.max


class AttractionRecord(BaseModel):
    """Candidate stop as served by the catalog. Never mutated here."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    name_en: Optional[str] = None
    category: Optional[str] = None
    coordinate: Optional[Coordinate] = None
    interests: List[str] = []
    age_groups: List[str] = []
    activity_level: ActivityLevel = "easy"
    avg_visit_duration: Optional[int] = None
    cost: Optional[CostRange] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None


class RouteRequest(BaseModel):
    """Validated engine input."""

    model_config = ConfigDict(frozen=True)

    time_budget_minutes: int = Field(gt=0)
    budget: CostRange
    interests: List[str] = Field(min_length=1)
    activity_level: ActivityLevel
    age_group: str
    start_location: Optional[Coordinate] = None
    duration_class: Optional[str] = None

    @model_validator(mode="after")
    def _check_budget(self):
        if self.budget.min > self.budget.max:
            raise ValueError("budget.min must not exceed budget.max")
        return self


# Inbound contract


class BudgetRange(BaseModel):
    min: float = Field(ge=0)
    max: float = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self):
        if self.min > self.max:
            raise ValueError("Minimum budget cannot exceed maximum budget")
        return self


class StartLocation(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class BuildRouteRequest(BaseModel):
    duration_class: Literal["short", "day", "multi_day"] = Field(
        validation_alias=AliasChoices("duration_class", "duration")
    )
    budget: BudgetRange
    interests: List[str] = Field(min_length=1)
    activity_level: ActivityLevel = Field(
        validation_alias=AliasChoices("activity_level", "activityLevel")
    )
    age_group: str = Field(
        min_length=1, validation_alias=AliasChoices("age_group", "ageGroup")
    )
    start_location: Optional[StartLocation] = Field(
        default=None,
        validation_alias=AliasChoices("start_location", "startLocation"),
    )

    @field_validator("duration_class", mode="before")
    @classmethod
    def _map_duration_alias(cls, value):
        if isinstance(value, str):
            return DURATION_ALIASES.get(value, value)
        return value


# Outbound contract


class AlternativeSummary(BaseModel):
    attraction_id: str
    name: str
    rating: Optional[float] = None
    estimated_cost: float = 0.0


class RouteStop(BaseModel):
    attraction: AttractionRecord = Field(exclude=True)
    visit_duration_minutes: int
    travel_time_minutes: int = 0
    travel_distance_meters: float = 0.0
    estimated_cost: float = 0.0
    order_index: int = 0
    alternatives: List[AlternativeSummary] = []

    @computed_field
    @property
    def attraction_id(self) -> str:
        return self.attraction.id

    @computed_field
    @property
    def name(self) -> str:
        return self.attraction.name

    @computed_field
    @property
    def category(self) -> Optional[str]:
        return self.attraction.category

    @computed_field
    @property
    def rating(self) -> Optional[float]:
        return self.attraction.rating

    @computed_field
    @property
    def coordinate(self) -> Optional[Coordinate]:
        return self.attraction.coordinate


class RouteSummary(BaseModel):
    total_duration_minutes: int
    total_cost: int
    total_distance_meters: float = 0.0
    stop_count: int
    age_group: str
    activity_level: ActivityLevel
    interests: List[str]
    duration_class: Optional[str] = None


class RouteResult(BaseModel):
    stops: List[RouteStop]
    summary: RouteSummary
