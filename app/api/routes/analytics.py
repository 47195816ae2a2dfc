"""Analytics, trends and statistics endpoints over the order dataset."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from app.api.dependencies import cached_json_response, get_data_source, get_response_cache
from app.schemas import AnalyticsResponse, ErrorResponse, StatisticsResponse, TrendsResponse
from app.services.aggregation import build_analytics, build_statistics, build_trends
from app.services.data_store import DataSource
from app.services.response_cache import ResponseCache
from app.services.validation import parse_filter_criteria

router = APIRouter()


@router.get(
    "/analytics",
    response_model=AnalyticsResponse,
    responses={400: {"model": ErrorResponse}},
)
def analytics_endpoint(
    request: Request,
    start_date: Optional[str] = Query(default=None, alias="startDate", description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(default=None, alias="endDate", description="YYYY-MM-DD, inclusive"),
    min_amount: Optional[str] = Query(default=None, alias="minAmount"),
    max_amount: Optional[str] = Query(default=None, alias="maxAmount"),
    start_hour: Optional[str] = Query(default=None, alias="startHour", description="0-23"),
    end_hour: Optional[str] = Query(default=None, alias="endHour", description="0-23, inclusive"),
    restaurant_id: Optional[str] = Query(default=None),
    source: DataSource = Depends(get_data_source),
    cache: ResponseCache = Depends(get_response_cache),
) -> Response:
    params = {
        "startDate": start_date,
        "endDate": end_date,
        "minAmount": min_amount,
        "maxAmount": max_amount,
        "startHour": start_hour,
        "endHour": end_hour,
        "restaurant_id": restaurant_id,
    }

    def _build() -> AnalyticsResponse:
        # Reject bad filters before touching the data source.
        criteria = parse_filter_criteria(params)
        return build_analytics(source.load(), criteria)

    return cached_json_response(request, cache, _build)


@router.get("/trends", response_model=TrendsResponse)
def trends_endpoint(
    request: Request,
    source: DataSource = Depends(get_data_source),
    cache: ResponseCache = Depends(get_response_cache),
) -> Response:
    return cached_json_response(request, cache, lambda: build_trends(source.load().orders))


@router.get("/statistics", response_model=StatisticsResponse)
def statistics_endpoint(
    request: Request,
    source: DataSource = Depends(get_data_source),
    cache: ResponseCache = Depends(get_response_cache),
) -> Response:
    return cached_json_response(request, cache, lambda: build_statistics(source.load()))
