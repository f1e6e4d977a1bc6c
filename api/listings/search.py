"""Listing search endpoint: filtered, paginated listings as JSON.

GET /api/listings/search?q=&property_type=&province=&price_min=&page=&mine=1
"""

import math
from typing import Any, Optional

from api._http import JsonHandler
from protea.models.filters import ALL, FilterCriteria
from protea.services.listing_filter import FilterState
from protea.utils.errors import ListingValidationError, SupabaseError
from protea.utils.price import parse_price
from protea.views.dashboard import DashboardView, PersonalListingsView

_CHOICE_PARAMS = {
    "property_type": "property_type",
    "transaction_type": "transaction_type",
    "province": "province",
    "city": "city",
    "district": "district",
    "bedrooms": "bedrooms",
    "bathrooms": "bathrooms",
}
_AREA_PARAMS = {
    "land_min": "land_area_min",
    "land_max": "land_area_max",
    "building_min": "building_area_min",
    "building_max": "building_area_max",
}


def _number(name: str, value: str) -> Optional[float]:
    if not value.strip():
        return None
    try:
        number = float(value)
    except ValueError:
        raise ListingValidationError(f"{name} must be a number", field=name)
    if not math.isfinite(number):
        raise ListingValidationError(f"{name} must be a finite number", field=name)
    return number


def _page_number(value: Optional[str]) -> int:
    if not value:
        return 1
    try:
        return int(value)
    except ValueError:
        raise ListingValidationError("page must be an integer", field="page")


def criteria_from_query(params: dict[str, str]) -> FilterCriteria:
    """Build filter criteria from query parameters; absent means unconstrained."""
    values: dict[str, Any] = {"search_term": params.get("q", "")}

    for param, field in _CHOICE_PARAMS.items():
        values[field] = params.get(param) or ALL

    for param in ("price_min", "price_max"):
        if params.get(param, "").strip():
            price = parse_price(params[param])
            if price is None:
                raise ListingValidationError(f"{param} must be a price", field=param)
            values[param] = price

    for param, field in _AREA_PARAMS.items():
        values[field] = _number(param, params.get(param, ""))

    return FilterCriteria.model_validate(values)


def page_payload(page) -> dict:
    return {
        "items": [listing.model_dump(mode="json", by_alias=True) for listing in page.items],
        "total_items": page.total_items,
        "total_pages": page.total_pages,
        "current_page": page.current_page,
        "page_size": page.page_size,
    }


class handler(JsonHandler):
    """Listing search handler for Vercel serverless function."""

    async def _search(self):
        params = self.query()
        criteria = criteria_from_query(params)
        page_number = _page_number(params.get("page"))
        user = await self.authenticate()

        view = PersonalListingsView(user) if params.get("mine") == "1" else DashboardView(user)
        result = await view.load()
        if not result.ok:
            raise SupabaseError(result.notice.message if result.notice else "Failed to load listings")

        view.filters = FilterState(criteria)
        payload = page_payload(view.go_to_page(page_number))
        payload["options"] = view.options()
        return 200, payload

    def do_GET(self):
        """Handle GET request."""
        self.dispatch(self._search)
