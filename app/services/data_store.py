"""Read-only restaurant and order collections loaded from an external source."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from pydantic import ValidationError as PydanticValidationError

from app.config.settings import DATA_DIR, ORDERS_FILE, RESTAURANTS_FILE
from app.schemas import Order, Restaurant
from app.services.errors import DataIntegrityError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dataset:
    """Immutable snapshot of both collections for a single request."""

    restaurants: Tuple[Restaurant, ...]
    orders: Tuple[Order, ...]

    def restaurant_names(self) -> Dict[int, str]:
        return {restaurant.id: restaurant.name for restaurant in self.restaurants}


class DataSource:
    """Base loader: subclasses only fetch raw records, parsing is shared."""

    def fetch_raw_restaurants(self) -> Sequence[Dict[str, Any]]:
        raise NotImplementedError

    def fetch_raw_orders(self) -> Sequence[Dict[str, Any]]:
        raise NotImplementedError

    def load(self) -> Dataset:
        """Fetch and parse both collections, failing on the first bad record."""

        start = time.monotonic()
        restaurants = parse_restaurants(self.fetch_raw_restaurants())
        orders = parse_orders(self.fetch_raw_orders())
        logger.info(
            "Dataset loaded",
            extra={
                "source": type(self).__name__,
                "restaurants": len(restaurants),
                "orders": len(orders),
                "duration_ms": round((time.monotonic() - start) * 1000, 2),
            },
        )
        return Dataset(restaurants=restaurants, orders=orders)


class JsonFileDataSource(DataSource):
    """Reads ``restaurants.json`` and ``orders.json`` on every call."""

    def __init__(
        self,
        restaurants_path: Path = DATA_DIR / RESTAURANTS_FILE,
        orders_path: Path = DATA_DIR / ORDERS_FILE,
    ):
        self.restaurants_path = Path(restaurants_path)
        self.orders_path = Path(orders_path)

    def fetch_raw_restaurants(self) -> Sequence[Dict[str, Any]]:
        return _read_json_array(self.restaurants_path)

    def fetch_raw_orders(self) -> Sequence[Dict[str, Any]]:
        return _read_json_array(self.orders_path)


def parse_restaurants(rows: Sequence[Any]) -> Tuple[Restaurant, ...]:
    restaurants: List[Restaurant] = []
    seen: set[int] = set()
    for index, row in enumerate(rows):
        try:
            restaurant = Restaurant.model_validate(row)
        except PydanticValidationError as exc:
            logger.error("Malformed restaurant record at index %s: %s", index, exc)
            raise DataIntegrityError(f"Malformed restaurant record at index {index}") from exc
        if restaurant.id in seen:
            logger.error("Duplicate restaurant id %s at index %s", restaurant.id, index)
            raise DataIntegrityError(f"Duplicate restaurant id {restaurant.id}")
        seen.add(restaurant.id)
        restaurants.append(restaurant)
    return tuple(restaurants)


def parse_orders(rows: Sequence[Any]) -> Tuple[Order, ...]:
    orders: List[Order] = []
    for index, row in enumerate(rows):
        try:
            orders.append(Order.model_validate(row))
        except PydanticValidationError as exc:
            logger.error("Malformed order record at index %s: %s", index, exc)
            raise DataIntegrityError(f"Malformed order record at index {index}") from exc
    return tuple(orders)


def _read_json_array(path: Path) -> List[Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Dataset file unreadable: %s (%s)", path, exc)
        raise DataIntegrityError(f"Dataset file unavailable: {path.name}") from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error("Dataset file is not valid JSON: %s (%s)", path, exc)
        raise DataIntegrityError(f"Dataset file is not valid JSON: {path.name}") from exc
    if not isinstance(payload, list):
        raise DataIntegrityError(f"Dataset file must contain a JSON array: {path.name}")
    return payload


__all__ = [
    "DataSource",
    "Dataset",
    "JsonFileDataSource",
    "parse_orders",
    "parse_restaurants",
]
