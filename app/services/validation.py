"""Semantic checks on raw filter parameters, run before any filtering."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Tuple

from app.services.errors import (
    FutureDateRange,
    HourOutOfBounds,
    InvalidDateFormat,
    InvalidDateRange,
    InvalidParameter,
    InvertedRange,
    NonNumericRange,
    ValidationError,
)
from app.services.filters import FilterCriteria

logger = logging.getLogger(__name__)

MIN_HOUR = 0
MAX_HOUR = 23


def validate_date_range(
    start_date: Any,
    end_date: Any,
    today: Optional[date] = None,
) -> Optional[Tuple[date, date]]:
    """Return the parsed ``(start, end)`` pair, or ``None`` unless both are given."""

    start_raw = _clean(start_date)
    end_raw = _clean(end_date)
    if start_raw is None or end_raw is None:
        return None

    start = _parse_date_input(start_raw)
    end = _parse_date_input(end_raw)
    if start is None or end is None:
        raise InvalidDateFormat()
    if start > end:
        raise InvalidDateRange()
    current = today or date.today()
    if start > current or end > current:
        raise FutureDateRange()
    return start, end


def validate_numeric_range(min_value: Any, max_value: Any, field: str) -> Optional[Tuple[Decimal, Decimal]]:
    """Return the parsed ``(min, max)`` pair, or ``None`` unless both are given.

    The ``hour`` field is additionally bounded to 0-23.
    """

    min_raw = _clean(min_value)
    max_raw = _clean(max_value)
    if min_raw is None or max_raw is None:
        return None

    lower = _parse_number(min_raw)
    upper = _parse_number(max_raw)
    if lower is None or upper is None:
        raise NonNumericRange(field)
    if lower > upper:
        raise InvertedRange(field)
    if field == "hour" and (lower < MIN_HOUR or upper > MAX_HOUR):
        raise HourOutOfBounds()
    return lower, upper


def validate_hour_range(start_hour: Any, end_hour: Any) -> Optional[Tuple[int, int]]:
    bounds = validate_numeric_range(start_hour, end_hour, "hour")
    if bounds is None:
        return None
    return int(bounds[0]), int(bounds[1])


def parse_restaurant_id(value: Any) -> Optional[int]:
    raw = _clean(value)
    # "0" is a real id here, not "all restaurants"; only absent or blank means no filter.
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter("restaurant_id", "restaurant_id must be an integer") from exc


def parse_filter_criteria(params: Mapping[str, Any], today: Optional[date] = None) -> FilterCriteria:
    """Validate raw query parameters and build the immutable filter criteria.

    Checks run in a fixed order (dates, amounts, hours) and stop at the first
    rejection.
    """

    try:
        dates = validate_date_range(params.get("startDate"), params.get("endDate"), today=today)
        amounts = validate_numeric_range(params.get("minAmount"), params.get("maxAmount"), "amount")
        hours = validate_hour_range(params.get("startHour"), params.get("endHour"))
        restaurant_id = parse_restaurant_id(params.get("restaurant_id"))
    except ValidationError as exc:
        logger.info("Filter parameters rejected: %s", exc, extra={"rejection": type(exc).__name__})
        raise

    return FilterCriteria(
        restaurant_id=restaurant_id,
        start_date=dates[0] if dates else None,
        end_date=dates[1] if dates else None,
        min_amount=amounts[0] if amounts else None,
        max_amount=amounts[1] if amounts else None,
        start_hour=hours[0] if hours else None,
        end_hour=hours[1] if hours else None,
    )


def _clean(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _parse_date_input(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value)).date()
    except ValueError:
        try:
            return datetime.strptime(str(value), "%Y-%m-%d").date()
        except ValueError:
            return None


def _parse_number(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


__all__ = [
    "parse_filter_criteria",
    "parse_restaurant_id",
    "validate_date_range",
    "validate_hour_range",
    "validate_numeric_range",
]
