from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Restaurant(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    cuisine: str = ""
    location: str = ""


class Order(BaseModel):
    """A single order as stored in the dataset, never mutated once loaded."""

    model_config = ConfigDict(frozen=True)

    id: Optional[Union[int, str]] = None
    restaurant_id: int
    order_time: datetime
    order_amount: Decimal

    @field_validator("order_time", mode="before")
    @classmethod
    def _parse_order_time(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value
        if not isinstance(value, str) or not value.strip():
            raise ValueError("order_time must be an ISO-8601 timestamp")
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text)

    @field_validator("order_amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("order_amount must be a number")
        if isinstance(value, float):
            return Decimal(str(value))
        return value

    @property
    def local_time(self) -> datetime:
        """Wall-clock time in the zone the record was stored with."""

        return self.order_time.replace(tzinfo=None)

    @property
    def hour(self) -> int:
        return self.order_time.hour

    @property
    def day_of_week(self) -> int:
        """0 = Sunday .. 6 = Saturday."""

        return self.order_time.isoweekday() % 7


class AnalyticsSummary(BaseModel):
    total_revenue: float
    total_orders: int
    average_order_value: float


class DailyTrend(BaseModel):
    date: str
    orders: int
    revenue: float
    peak_hour: str


class TopRestaurant(BaseModel):
    name: str
    revenue: float


class AnalyticsResponse(BaseModel):
    summary: AnalyticsSummary
    daily_trends: List[DailyTrend] = Field(default_factory=list)
    top_restaurants: List[TopRestaurant] = Field(default_factory=list)
    peak_hours: List[List[str]] = Field(default_factory=list)


class TrendBucket(BaseModel):
    orders: int
    revenue: float


class TrendsResponse(BaseModel):
    hourly: Dict[str, TrendBucket] = Field(default_factory=dict)
    daily: Dict[str, TrendBucket] = Field(default_factory=dict)
    weekly: Dict[str, TrendBucket] = Field(default_factory=dict)


class RestaurantPerformance(BaseModel):
    name: str
    total_revenue: float
    total_orders: int
    average_order_value: float


class StatisticsResponse(BaseModel):
    peak_hours: Dict[str, List[str]] = Field(default_factory=dict)
    restaurant_performance: Dict[str, RestaurantPerformance] = Field(default_factory=dict)
    # Reserved, always empty.
    growth_metrics: List[Any] = Field(default_factory=list)


class PageMeta(BaseModel):
    current_page: int
    per_page: int
    total_items: int
    total_pages: int


class RestaurantPage(BaseModel):
    data: List[Restaurant]
    meta: PageMeta


class ErrorResponse(BaseModel):
    error: str
