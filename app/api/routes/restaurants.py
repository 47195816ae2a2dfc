from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from app.api.dependencies import cached_json_response, get_data_source, get_response_cache
from app.schemas import ErrorResponse, RestaurantPage
from app.services.data_store import DataSource
from app.services.response_cache import ResponseCache
from app.services.restaurant_service import list_restaurants, parse_restaurant_query

router = APIRouter()


@router.get(
    "/restaurants",
    response_model=RestaurantPage,
    responses={400: {"model": ErrorResponse}},
)
def restaurants_endpoint(
    request: Request,
    search: Optional[str] = Query(default=None, description="Case-insensitive name search"),
    cuisine: Optional[str] = Query(default=None),
    location: Optional[str] = Query(default=None),
    sort_by: Optional[str] = Query(default=None, alias="sortBy", description="id | name | cuisine | location"),
    order: Optional[str] = Query(default=None, description="asc | desc"),
    page: Optional[str] = Query(default=None),
    per_page: Optional[str] = Query(default=None),
    source: DataSource = Depends(get_data_source),
    cache: ResponseCache = Depends(get_response_cache),
) -> Response:
    params = {
        "search": search,
        "cuisine": cuisine,
        "location": location,
        "sortBy": sort_by,
        "order": order,
        "page": page,
        "per_page": per_page,
    }

    def _build() -> RestaurantPage:
        query = parse_restaurant_query(params)
        return list_restaurants(source.load().restaurants, query)

    return cached_json_response(request, cache, _build)
