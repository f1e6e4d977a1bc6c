"""Listing search/filter engine and two-phase filter state.

Everything here is pure: listings in, listings out, no store access.
"""

import math
from enum import Enum
from typing import Any, Iterable, Optional

from protea.models.filters import ALL, FilterCriteria
from protea.models.listing import Listing
from protea.utils.price import parse_price


def parse_number(value: Any) -> Optional[float]:
    """Parse an area value; a missing value counts as 0, junk text as None."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    text = str(value).strip()
    if not text:
        return 0.0
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _has_bound(low: Optional[float], high: Optional[float]) -> bool:
    return low is not None or high is not None


def _in_range(value: Optional[float], low: Optional[float], high: Optional[float]) -> bool:
    if value is None:
        return False
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def _matches_choice(selected: Any, actual: Any) -> bool:
    if _as_text(selected) == ALL:
        return True
    return _as_text(selected) == _as_text(actual)


def matches_search(listing: Listing, search_term: str) -> bool:
    term = (search_term or "").strip().lower()
    if not term:
        return True
    return term in (listing.title or "").lower() or term in (listing.city or "").lower()


def matches_price(listing: Listing, criteria: FilterCriteria) -> bool:
    if not _has_bound(criteria.price_min, criteria.price_max):
        return True
    return _in_range(parse_price(listing.price), criteria.price_min, criteria.price_max)


def matches_land_area(listing: Listing, criteria: FilterCriteria) -> bool:
    if not _has_bound(criteria.land_area_min, criteria.land_area_max):
        return True
    return _in_range(parse_number(listing.land_area), criteria.land_area_min, criteria.land_area_max)


def matches_building_area(listing: Listing, criteria: FilterCriteria) -> bool:
    # Land has no building; the filter never excludes it
    if listing.is_land:
        return True
    if not _has_bound(criteria.building_area_min, criteria.building_area_max):
        return True
    return _in_range(
        parse_number(listing.building_area),
        criteria.building_area_min,
        criteria.building_area_max,
    )


def matches_rooms(listing: Listing, criteria: FilterCriteria) -> bool:
    if listing.is_land:
        return True
    return (
        _matches_choice(criteria.bedrooms, listing.bedrooms)
        and _matches_choice(criteria.bathrooms, listing.bathrooms)
    )


def listing_matches(listing: Listing, criteria: FilterCriteria) -> bool:
    """True when ``listing`` satisfies every predicate of ``criteria``."""
    return (
        not listing.is_soft_deleted
        and matches_search(listing, criteria.search_term)
        and _matches_choice(criteria.property_type, listing.property_type)
        and _matches_choice(criteria.transaction_type, listing.transaction_type)
        and _matches_choice(criteria.province, listing.province)
        and _matches_choice(criteria.city, listing.city)
        and _matches_choice(criteria.district, listing.district)
        and matches_price(listing, criteria)
        and matches_land_area(listing, criteria)
        and matches_building_area(listing, criteria)
        and matches_rooms(listing, criteria)
    )


def filter_listings(listings: Iterable[Listing], criteria: Optional[FilterCriteria] = None) -> list[Listing]:
    """Return the listings matching ``criteria`` in their original order."""
    criteria = criteria or FilterCriteria()
    return [listing for listing in listings if listing_matches(listing, criteria)]


def live_listings(listings: Iterable[Listing]) -> list[Listing]:
    """Drop soft-deleted listings."""
    return [listing for listing in listings if not listing.is_soft_deleted]


def _distinct(values: Iterable[Optional[str]]) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        text = (value or "").strip()
        if text and text not in seen:
            seen[text] = None
    return list(seen)


def _selected(value: Optional[str]) -> bool:
    return bool(value) and value != ALL


def province_options(listings: Iterable[Listing]) -> list[str]:
    return _distinct(listing.province for listing in live_listings(listings))


def city_options(listings: Iterable[Listing], province: Optional[str] = ALL) -> list[str]:
    """Cities offered for the selected province (all cities when none is selected)."""
    candidates = live_listings(listings)
    if _selected(province):
        candidates = [listing for listing in candidates if listing.province == province]
    return _distinct(listing.city for listing in candidates)


def district_options(
    listings: Iterable[Listing],
    province: Optional[str] = ALL,
    city: Optional[str] = ALL,
) -> list[str]:
    """Districts offered for whichever of province and city are selected."""
    candidates = live_listings(listings)
    if _selected(province) and _selected(city):
        candidates = [l for l in candidates if l.province == province and l.city == city]
    elif _selected(province):
        candidates = [l for l in candidates if l.province == province]
    elif _selected(city):
        candidates = [l for l in candidates if l.city == city]
    return _distinct(listing.district for listing in candidates)


class FilterState:
    """Draft and applied criteria for one listings view.

    Edits go to ``draft``; only ``apply()`` makes them visible to
    ``results()``. ``reset()`` clears both at once.
    """

    def __init__(self, criteria: Optional[FilterCriteria] = None):
        self.draft = criteria.model_copy() if criteria else FilterCriteria()
        self.applied = self.draft.model_copy()

    @property
    def is_dirty(self) -> bool:
        return self.draft != self.applied

    def stage(self, **changes: Any) -> FilterCriteria:
        """Validate and stage criteria edits without applying them."""
        values = self.draft.model_dump()
        values.update(changes)
        self.draft = FilterCriteria.model_validate(values)
        return self.draft

    def select_province(self, province: str, listings: Iterable[Listing]) -> FilterCriteria:
        """Stage a province and drop city/district choices it no longer offers."""
        listings = list(listings)
        changes: dict[str, Any] = {"province": province or ALL}
        if self.draft.city != ALL and self.draft.city not in city_options(listings, province):
            changes["city"] = ALL
        city = changes.get("city", self.draft.city)
        if self.draft.district != ALL and self.draft.district not in district_options(listings, province, city):
            changes["district"] = ALL
        return self.stage(**changes)

    def select_city(self, city: str, listings: Iterable[Listing]) -> FilterCriteria:
        """Stage a city and drop a district choice it no longer offers."""
        listings = list(listings)
        changes: dict[str, Any] = {"city": city or ALL}
        if self.draft.district != ALL and self.draft.district not in district_options(
            listings, self.draft.province, city
        ):
            changes["district"] = ALL
        return self.stage(**changes)

    def apply(self) -> FilterCriteria:
        self.applied = self.draft.model_copy()
        return self.applied

    def reset(self) -> FilterCriteria:
        self.draft = FilterCriteria()
        self.applied = FilterCriteria()
        return self.applied

    def results(self, listings: Iterable[Listing]) -> list[Listing]:
        return filter_listings(listings, self.applied)
