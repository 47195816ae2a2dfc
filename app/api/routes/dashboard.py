"""Server-rendered dashboard built on the same filter and aggregation engine."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.api.dependencies import get_data_source
from app.schemas import AnalyticsResponse
from app.services.aggregation import build_analytics
from app.services.data_store import DataSource
from app.services.errors import ValidationError
from app.services.validation import parse_filter_criteria

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[3] / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
FILTER_FIELDS = ("startDate", "endDate", "minAmount", "maxAmount", "startHour", "endHour", "restaurant_id")

router = APIRouter()


@router.get("/dashboard", response_class=HTMLResponse, include_in_schema=False)
def dashboard_page(request: Request, source: DataSource = Depends(get_data_source)) -> HTMLResponse:
    filters: Dict[str, str] = {name: request.query_params.get(name, "") for name in FILTER_FIELDS}
    error: Optional[str] = None
    analytics: Optional[AnalyticsResponse] = None

    try:
        criteria = parse_filter_criteria(filters)
    except ValidationError as exc:
        error = str(exc)
        criteria = None

    dataset = source.load()
    if criteria is not None:
        analytics = build_analytics(dataset, criteria)

    context: Dict[str, Any] = {
        "filters": filters,
        "error": error,
        "analytics": analytics,
        "restaurants": sorted(dataset.restaurants, key=lambda restaurant: restaurant.name),
        "day_names": DAY_NAMES,
    }
    return templates.TemplateResponse(request, "dashboard.html", context, status_code=400 if error else 200)
