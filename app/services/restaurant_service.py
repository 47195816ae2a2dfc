"""Search, filtering, sorting and pagination of the restaurant listing."""

from __future__ import annotations

from dataclasses import dataclass
from math import ceil
from typing import Any, Iterable, List, Mapping, Optional

from app.config.settings import DEFAULT_PER_PAGE, MAX_PER_PAGE
from app.schemas import PageMeta, Restaurant, RestaurantPage
from app.services.errors import InvalidParameter

SORTABLE_FIELDS = ("id", "name", "cuisine", "location")


@dataclass(frozen=True)
class RestaurantQuery:
    search: Optional[str] = None
    cuisine: Optional[str] = None
    location: Optional[str] = None
    sort_by: Optional[str] = None
    descending: bool = False
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE


def parse_restaurant_query(params: Mapping[str, Any]) -> RestaurantQuery:
    """Build a listing query from raw query parameters."""

    sort_by = _optional(params.get("sortBy"))
    if sort_by is not None and sort_by not in SORTABLE_FIELDS:
        raise InvalidParameter(
            "sortBy",
            f"sortBy must be one of: {', '.join(SORTABLE_FIELDS)}",
        )
    order = (_optional(params.get("order")) or "asc").lower()
    return RestaurantQuery(
        search=_optional(params.get("search")),
        cuisine=_optional(params.get("cuisine")),
        location=_optional(params.get("location")),
        sort_by=sort_by,
        descending=order == "desc",
        page=_positive_int(params.get("page"), "page", default=1),
        per_page=_positive_int(params.get("per_page"), "per_page", default=DEFAULT_PER_PAGE, maximum=MAX_PER_PAGE),
    )


def list_restaurants(restaurants: Iterable[Restaurant], query: RestaurantQuery) -> RestaurantPage:
    """Apply search and exact-match filters, sort, then paginate."""

    matches: List[Restaurant] = list(restaurants)
    if query.search is not None:
        term = query.search.lower()
        matches = [restaurant for restaurant in matches if term in restaurant.name.lower()]
    if query.cuisine is not None:
        matches = [restaurant for restaurant in matches if restaurant.cuisine == query.cuisine]
    if query.location is not None:
        matches = [restaurant for restaurant in matches if restaurant.location == query.location]
    if query.sort_by is not None:
        matches.sort(key=lambda restaurant: getattr(restaurant, query.sort_by), reverse=query.descending)

    total_items = len(matches)
    offset = (query.page - 1) * query.per_page
    return RestaurantPage(
        data=matches[offset : offset + query.per_page],
        meta=PageMeta(
            current_page=query.page,
            per_page=query.per_page,
            total_items=total_items,
            total_pages=ceil(total_items / query.per_page),
        ),
    )


def _optional(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _positive_int(value: Any, name: str, *, default: int, maximum: Optional[int] = None) -> int:
    raw = _optional(value)
    if raw is None:
        return default
    try:
        number = int(raw)
    except ValueError as exc:
        raise InvalidParameter(name, f"{name} must be a positive integer") from exc
    if number < 1:
        raise InvalidParameter(name, f"{name} must be a positive integer")
    if maximum is not None and number > maximum:
        raise InvalidParameter(name, f"{name} cannot be greater than {maximum}")
    return number


__all__ = ["RestaurantQuery", "SORTABLE_FIELDS", "list_restaurants", "parse_restaurant_query"]
