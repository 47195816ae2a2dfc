"""Composable order filters.

Every filter is a pure function returning a new list in the input order. A
range filter only applies when both of its bounds are present; a lone bound
imposes no constraint.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Iterable, List, Optional

from app.schemas import Order

END_OF_DAY = time(23, 59, 59)


@dataclass(frozen=True)
class FilterCriteria:
    """Validated, request-scoped filter parameters."""

    restaurant_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None
    start_hour: Optional[int] = None
    end_hour: Optional[int] = None

    @property
    def has_date_range(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    @property
    def has_amount_range(self) -> bool:
        return self.min_amount is not None and self.max_amount is not None

    @property
    def has_hour_range(self) -> bool:
        return self.start_hour is not None and self.end_hour is not None


def filter_by_restaurant(orders: Iterable[Order], restaurant_id: int) -> List[Order]:
    return [order for order in orders if order.restaurant_id == restaurant_id]


def filter_by_date_range(orders: Iterable[Order], start_date: date, end_date: date) -> List[Order]:
    lower = datetime.combine(start_date, time.min)
    upper = datetime.combine(end_date, END_OF_DAY)
    return [order for order in orders if lower <= order.local_time <= upper]


def filter_by_amount_range(orders: Iterable[Order], min_amount: Decimal, max_amount: Decimal) -> List[Order]:
    return [order for order in orders if min_amount <= order.order_amount <= max_amount]


def filter_by_hour_range(orders: Iterable[Order], start_hour: int, end_hour: int) -> List[Order]:
    return [order for order in orders if start_hour <= order.hour <= end_hour]


def apply_filters(orders: Iterable[Order], criteria: FilterCriteria) -> List[Order]:
    """AND together every criterion that is present."""

    filtered = list(orders)
    if criteria.restaurant_id is not None:
        filtered = filter_by_restaurant(filtered, criteria.restaurant_id)
    if criteria.has_date_range:
        filtered = filter_by_date_range(filtered, criteria.start_date, criteria.end_date)
    if criteria.has_amount_range:
        filtered = filter_by_amount_range(filtered, criteria.min_amount, criteria.max_amount)
    if criteria.has_hour_range:
        filtered = filter_by_hour_range(filtered, criteria.start_hour, criteria.end_hour)
    return filtered


def apply_date_filter(orders: Iterable[Order], criteria: FilterCriteria) -> List[Order]:
    """Restrict by the date range only, ignoring every other criterion."""

    if not criteria.has_date_range:
        return list(orders)
    return filter_by_date_range(orders, criteria.start_date, criteria.end_date)


__all__ = [
    "FilterCriteria",
    "apply_date_filter",
    "apply_filters",
    "filter_by_amount_range",
    "filter_by_date_range",
    "filter_by_hour_range",
    "filter_by_restaurant",
]
