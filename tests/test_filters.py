from datetime import date
from decimal import Decimal

from app.schemas import Order
from app.services.filters import (
    FilterCriteria,
    apply_date_filter,
    apply_filters,
    filter_by_amount_range,
    filter_by_date_range,
    filter_by_hour_range,
)


def _order(order_id, restaurant_id, order_time, amount):
    return Order(id=order_id, restaurant_id=restaurant_id, order_time=order_time, order_amount=amount)


ORDERS = (
    _order(1, 101, "2025-06-21T23:59:59", 120.0),
    _order(2, 102, "2025-06-22T00:00:00", 45.5),
    _order(3, 101, "2025-06-22T09:15:00", 20.0),
    _order(4, 103, "2025-06-22T23:59:59", 300.0),
    _order(5, 101, "2025-06-23T00:00:00", 80.0),
    _order(6, 102, "2025-06-23T17:45:00", 10.0),
)


def test_amount_filter_partitions_orders() -> None:
    low, high = Decimal("20"), Decimal("120")
    kept = filter_by_amount_range(ORDERS, low, high)

    assert all(low <= order.order_amount <= high for order in kept)
    excluded = [order for order in ORDERS if order not in kept]
    assert len(kept) + len(excluded) == len(ORDERS)
    assert [order.id for order in kept] == [1, 2, 3, 5]


def test_date_filter_is_inclusive_up_to_end_of_day() -> None:
    kept = filter_by_date_range(ORDERS, date(2025, 6, 22), date(2025, 6, 22))

    assert [order.id for order in kept] == [2, 3, 4]


def test_hour_filter_is_inclusive() -> None:
    kept = filter_by_hour_range(ORDERS, 0, 9)

    assert [order.id for order in kept] == [2, 3, 5]


def test_filters_compose_with_and() -> None:
    criteria = FilterCriteria(
        restaurant_id=101,
        start_date=date(2025, 6, 22),
        end_date=date(2025, 6, 23),
        min_amount=Decimal("0"),
        max_amount=Decimal("100"),
        start_hour=0,
        end_hour=12,
    )

    assert [order.id for order in apply_filters(ORDERS, criteria)] == [3, 5]


def test_empty_criteria_keep_everything_in_order() -> None:
    result = apply_filters(ORDERS, FilterCriteria())

    assert result == list(ORDERS)
    assert result is not ORDERS


def test_lone_bounds_do_not_filter() -> None:
    criteria = FilterCriteria(min_amount=Decimal("1000"), start_hour=23, end_date=date(2025, 6, 1))

    assert len(apply_filters(ORDERS, criteria)) == len(ORDERS)


def test_date_filter_ignores_other_criteria() -> None:
    criteria = FilterCriteria(
        restaurant_id=999,
        start_date=date(2025, 6, 23),
        end_date=date(2025, 6, 23),
        min_amount=Decimal("0"),
        max_amount=Decimal("1"),
    )

    assert [order.id for order in apply_date_filter(ORDERS, criteria)] == [5, 6]


def test_stored_time_zone_is_not_converted() -> None:
    order = _order(7, 101, "2025-06-22T23:30:00+05:30", 12.0)

    kept = filter_by_date_range([order], date(2025, 6, 22), date(2025, 6, 22))

    assert kept == [order]
    assert filter_by_hour_range([order], 23, 23) == [order]
