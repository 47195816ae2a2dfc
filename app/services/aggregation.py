"""Aggregations behind the analytics, trends and statistics views.

Revenue is summed exactly as ``Decimal`` and only rounded (half-up, two
decimals) when the response models are built.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from app.config.settings import PEAK_HOURS_LIMIT, TOP_RESTAURANTS_LIMIT, TRENDS_WINDOW_DAYS
from app.schemas import (
    AnalyticsResponse,
    AnalyticsSummary,
    DailyTrend,
    Order,
    RestaurantPerformance,
    StatisticsResponse,
    TopRestaurant,
    TrendBucket,
    TrendsResponse,
)
from app.services.data_store import Dataset
from app.services.filters import FilterCriteria, apply_date_filter, apply_filters

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24
DAYS_PER_WEEK = 7
NO_ORDERS_LABEL = "No orders"
MONEY_QUANTUM = Decimal("0.01")
ZERO = Decimal("0")


@dataclass
class _DayBucket:
    orders: int = 0
    revenue: Decimal = ZERO
    hourly: List[int] = field(default_factory=lambda: [0] * HOURS_PER_DAY)


@dataclass
class _Tally:
    orders: int = 0
    revenue: Decimal = ZERO

    def add(self, order: Order) -> None:
        self.orders += 1
        self.revenue += order.order_amount

    def to_bucket(self) -> TrendBucket:
        return TrendBucket(orders=self.orders, revenue=round_money(self.revenue))


def round_money(value: Decimal) -> float:
    return float(Decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP))


def format_hour_range(hour: int) -> str:
    """``9`` -> ``"09:00 - 10:00"``; 23 wraps to midnight."""

    return f"{hour:02d}:00 - {(hour + 1) % HOURS_PER_DAY:02d}:00"


def peak_hour_label(hourly_counts: Sequence[int]) -> str:
    """Label of the busiest hour, the lowest hour winning ties."""

    counts = list(hourly_counts)
    peak = max(counts, default=0)
    if peak <= 0:
        return NO_ORDERS_LABEL
    return format_hour_range(counts.index(peak))


def weekly_peak_hours(orders: Iterable[Order], limit: int = PEAK_HOURS_LIMIT) -> List[List[str]]:
    """Top hours per day of week (0 = Sunday), busiest first.

    Days always number seven; hours without orders are never listed.
    """

    counts = [[0] * HOURS_PER_DAY for _ in range(DAYS_PER_WEEK)]
    for order in orders:
        counts[order.day_of_week][order.hour] += 1

    peak_hours: List[List[str]] = []
    for day_counts in counts:
        ranked = sorted(range(HOURS_PER_DAY), key=lambda hour: -day_counts[hour])
        peak_hours.append([format_hour_range(hour) for hour in ranked if day_counts[hour] > 0][:limit])
    return peak_hours


def top_restaurants(
    orders: Iterable[Order],
    restaurant_names: Mapping[int, str],
    criteria: FilterCriteria,
    limit: int = TOP_RESTAURANTS_LIMIT,
) -> List[TopRestaurant]:
    """Rank restaurants by revenue over orders restricted by the date range only.

    The top ``limit`` ids are taken first; ids without a known restaurant are
    then dropped, so fewer than ``limit`` entries may come back.
    """

    revenue: Dict[int, Decimal] = {}
    for order in apply_date_filter(orders, criteria):
        revenue[order.restaurant_id] = revenue.get(order.restaurant_id, ZERO) + order.order_amount

    ranked = sorted(revenue.items(), key=lambda item: item[1], reverse=True)[:limit]
    return [
        TopRestaurant(name=restaurant_names[restaurant_id], revenue=round_money(total))
        for restaurant_id, total in ranked
        if restaurant_id in restaurant_names
    ]


def build_analytics(
    dataset: Dataset,
    criteria: FilterCriteria,
    *,
    top_limit: int = TOP_RESTAURANTS_LIMIT,
    peak_limit: int = PEAK_HOURS_LIMIT,
) -> AnalyticsResponse:
    """Summary and daily trends over the filtered orders.

    Top restaurants and weekly peak hours deliberately look past most filters:
    the ranking honours the date range only and the peak hours use every order.
    """

    filtered = apply_filters(dataset.orders, criteria)
    buckets = _bucket_by_day(filtered)

    total_orders = sum(bucket.orders for bucket in buckets.values())
    total_revenue = sum((bucket.revenue for bucket in buckets.values()), ZERO)
    average = total_revenue / total_orders if total_orders else ZERO

    logger.debug(
        "Analytics computed",
        extra={"orders_in": len(dataset.orders), "orders_matched": total_orders, "days": len(buckets)},
    )
    return AnalyticsResponse(
        summary=AnalyticsSummary(
            total_revenue=round_money(total_revenue),
            total_orders=total_orders,
            average_order_value=round_money(average),
        ),
        daily_trends=[_to_daily_trend(day, bucket) for day, bucket in buckets.items()],
        top_restaurants=top_restaurants(dataset.orders, dataset.restaurant_names(), criteria, top_limit),
        peak_hours=weekly_peak_hours(dataset.orders, peak_limit),
    )


def build_trends(
    orders: Iterable[Order],
    now: Optional[datetime] = None,
    window_days: int = TRENDS_WINDOW_DAYS,
) -> TrendsResponse:
    """Hourly, daily and ISO-week rollups of the orders near ``now``.

    An order counts when it is at most ``window_days`` whole days away from
    ``now`` in either direction; every other filter is ignored.
    """

    current = (now or datetime.now()).replace(tzinfo=None)
    hourly: Dict[str, _Tally] = defaultdict(_Tally)
    daily: Dict[str, _Tally] = defaultdict(_Tally)
    weekly: Dict[str, _Tally] = defaultdict(_Tally)

    for order in orders:
        if abs(order.local_time - current).days > window_days:
            continue
        hourly[f"{order.hour:02d}"].add(order)
        daily[order.order_time.date().isoformat()].add(order)
        weekly[f"{order.order_time.isocalendar()[1]:02d}"].add(order)

    return TrendsResponse(
        hourly=_sorted_buckets(hourly),
        daily=_sorted_buckets(daily),
        weekly=_sorted_buckets(weekly),
    )


def build_statistics(dataset: Dataset, limit: int = PEAK_HOURS_LIMIT) -> StatisticsResponse:
    """Per-weekday peak hours and per-restaurant performance over every order."""

    day_hours: Dict[int, Dict[str, int]] = {}
    per_restaurant: Dict[int, _Tally] = defaultdict(_Tally)
    for order in dataset.orders:
        hours = day_hours.setdefault(order.day_of_week, {})
        hour_key = f"{order.hour:02d}"
        hours[hour_key] = hours.get(hour_key, 0) + 1
        per_restaurant[order.restaurant_id].add(order)

    peak_hours: Dict[str, List[str]] = {}
    for day in sorted(day_hours):
        # Stable sort: equal counts keep first-seen order.
        ranked = sorted(day_hours[day].items(), key=lambda item: -item[1])
        peak_hours[str(day)] = [hour for hour, _ in ranked[:limit]]

    performance: Dict[str, RestaurantPerformance] = {}
    for restaurant in dataset.restaurants:
        tally = per_restaurant.get(restaurant.id, _Tally())
        average = tally.revenue / tally.orders if tally.orders else ZERO
        performance[str(restaurant.id)] = RestaurantPerformance(
            name=restaurant.name,
            total_revenue=round_money(tally.revenue),
            total_orders=tally.orders,
            average_order_value=round_money(average),
        )

    return StatisticsResponse(peak_hours=peak_hours, restaurant_performance=performance, growth_metrics=[])


def _bucket_by_day(orders: Iterable[Order]) -> Dict[str, _DayBucket]:
    buckets: Dict[str, _DayBucket] = {}
    for order in orders:
        day = order.order_time.date().isoformat()
        bucket = buckets.get(day)
        if bucket is None:
            bucket = buckets[day] = _DayBucket()
        bucket.orders += 1
        bucket.revenue += order.order_amount
        bucket.hourly[order.hour] += 1
    return dict(sorted(buckets.items()))


def _to_daily_trend(day: str, bucket: _DayBucket) -> DailyTrend:
    return DailyTrend(
        date=day,
        orders=bucket.orders,
        revenue=round_money(bucket.revenue),
        peak_hour=peak_hour_label(bucket.hourly),
    )


def _sorted_buckets(tallies: Mapping[str, _Tally]) -> Dict[str, TrendBucket]:
    return {key: tallies[key].to_bucket() for key in sorted(tallies)}


__all__ = [
    "build_analytics",
    "build_statistics",
    "build_trends",
    "format_hour_range",
    "peak_hour_label",
    "round_money",
    "top_restaurants",
    "weekly_peak_hours",
]
