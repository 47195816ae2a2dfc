import pytest

from app.schemas import Restaurant
from app.services.errors import InvalidParameter
from app.services.restaurant_service import list_restaurants, parse_restaurant_query

RESTAURANTS = (
    Restaurant(id=101, name="Tandoori Treats", cuisine="North Indian", location="Bangalore"),
    Restaurant(id=102, name="Sushi Bay", cuisine="Japanese", location="Mumbai"),
    Restaurant(id=103, name="Pasta Point", cuisine="Italian", location="Hyderabad"),
    Restaurant(id=104, name="Burger Hub", cuisine="American", location="Delhi"),
    Restaurant(id=105, name="Dragon Wok", cuisine="Chinese", location="Bangalore"),
)


def _names(page):
    return [restaurant.name for restaurant in page.data]


def test_defaults_keep_dataset_order() -> None:
    page = list_restaurants(RESTAURANTS, parse_restaurant_query({}))

    assert [restaurant.id for restaurant in page.data] == [101, 102, 103, 104, 105]
    assert page.meta.model_dump() == {"current_page": 1, "per_page": 10, "total_items": 5, "total_pages": 1}


def test_search_is_case_insensitive_substring() -> None:
    page = list_restaurants(RESTAURANTS, parse_restaurant_query({"search": "bU"}))

    assert _names(page) == ["Burger Hub"]


def test_cuisine_and_location_match_exactly() -> None:
    by_location = list_restaurants(RESTAURANTS, parse_restaurant_query({"location": "Bangalore"}))
    by_cuisine = list_restaurants(RESTAURANTS, parse_restaurant_query({"cuisine": "japanese"}))

    assert _names(by_location) == ["Tandoori Treats", "Dragon Wok"]
    assert by_cuisine.data == []
    assert by_cuisine.meta.total_pages == 0


def test_sort_descending_by_name() -> None:
    page = list_restaurants(RESTAURANTS, parse_restaurant_query({"sortBy": "name", "order": "DESC"}))

    assert _names(page) == ["Tandoori Treats", "Sushi Bay", "Pasta Point", "Dragon Wok", "Burger Hub"]


def test_pagination_meta() -> None:
    page = list_restaurants(RESTAURANTS, parse_restaurant_query({"page": "2", "per_page": "2", "sortBy": "id"}))

    assert [restaurant.id for restaurant in page.data] == [103, 104]
    assert page.meta.model_dump() == {"current_page": 2, "per_page": 2, "total_items": 5, "total_pages": 3}


def test_page_past_the_end_is_empty() -> None:
    page = list_restaurants(RESTAURANTS, parse_restaurant_query({"page": "9", "per_page": "2"}))

    assert page.data == []
    assert page.meta.total_items == 5


@pytest.mark.parametrize(
    "params, message",
    [
        ({"sortBy": "rating"}, "sortBy must be one of: id, name, cuisine, location"),
        ({"page": "0"}, "page must be a positive integer"),
        ({"page": "two"}, "page must be a positive integer"),
        ({"per_page": "-5"}, "per_page must be a positive integer"),
        ({"per_page": "1000"}, "per_page cannot be greater than 100"),
    ],
)
def test_invalid_listing_parameters(params, message) -> None:
    with pytest.raises(InvalidParameter) as exc_info:
        parse_restaurant_query(params)

    assert str(exc_info.value) == message
    assert exc_info.value.status_code == 400
