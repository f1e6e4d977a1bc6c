"""Dashboard and personal listing views: filter, cascade and paginate."""

from typing import Any, Optional

from protea.models.filters import FilterCriteria
from protea.models.listing import Listing
from protea.models.notice import Notice, ViewResult
from protea.models.profile import AuthUser
from protea.services.access_gate import AccessGate, get_access_gate
from protea.services.listing_filter import (
    FilterState,
    city_options,
    district_options,
    live_listings,
    province_options,
)
from protea.services.pagination import Page, Paginator
from protea.services.profiles import get_or_create_profile
from protea.utils.config import AppConfig
from protea.utils.errors import SupabaseError
from protea.utils.logging import get_structured_logger, log_timing, mask_user_id
from protea.views.common import fetch_listings, tombstone_listing

logger = get_structured_logger(__name__)


class DashboardView:
    """All live listings with two-phase filters and fixed-size pages."""

    def __init__(
        self,
        user: Optional[AuthUser] = None,
        gate: Optional[AccessGate] = None,
        page_size: int = AppConfig.LISTINGS_PAGE_SIZE,
    ):
        self.user = user
        self.gate = gate or get_access_gate()
        self.listings: list[Listing] = []
        self.filters = FilterState()
        self.paginator = Paginator(page_size)
        self.is_admin = False

    async def _fetch(self) -> list[Listing]:
        return await fetch_listings()

    async def load(self) -> ViewResult:
        """Fetch listings; on failure the previous collection stays in place."""
        try:
            with log_timing("dashboard_load", logger=logger, view=type(self).__name__):
                listings = await self._fetch()
        except SupabaseError as e:
            logger.error("Failed to load listings", view=type(self).__name__, error=str(e))
            return ViewResult.failure(f"Error loading listings: {e}")

        self.is_admin = await self.gate.is_admin(self.user)
        self.set_listings(listings)
        return ViewResult.success(data=self.page())

    def set_listings(self, listings: list[Listing]) -> None:
        """Replace the collection; the current page is clamped, not reset."""
        self.listings = live_listings(listings)

    # Filters
    def stage(self, **changes: Any) -> FilterCriteria:
        return self.filters.stage(**changes)

    def select_province(self, province: str) -> FilterCriteria:
        return self.filters.select_province(province, self.listings)

    def select_city(self, city: str) -> FilterCriteria:
        return self.filters.select_city(city, self.listings)

    def options(self) -> dict[str, list[str]]:
        """Location choices for the staged province/city."""
        draft = self.filters.draft
        return {
            "provinces": province_options(self.listings),
            "cities": city_options(self.listings, draft.province),
            "districts": district_options(self.listings, draft.province, draft.city),
        }

    def apply_filters(self) -> Page:
        self.filters.apply()
        self.paginator.reset()
        return self.page()

    def reset_filters(self) -> Page:
        self.filters.reset()
        self.paginator.reset()
        return self.page()

    # Pages
    def results(self) -> list[Listing]:
        return self.filters.results(self.listings)

    def page(self) -> Page:
        return self.paginator.page(self.results())

    def go_to_page(self, page_number: int) -> Page:
        return self.paginator.go_to(page_number, self.results())

    def next_page(self) -> Page:
        return self.paginator.next(self.results())

    def previous_page(self) -> Page:
        return self.paginator.previous(self.results())


class PersonalListingsView(DashboardView):
    """The signed-in user's own listings, newest first."""

    def __init__(self, user: AuthUser, gate: Optional[AccessGate] = None, **kwargs: Any):
        super().__init__(user, gate, **kwargs)
        self.greeting_name = ""

    async def _fetch(self) -> list[Listing]:
        return await fetch_listings(owner_user_id=self.user.id)

    async def load(self) -> ViewResult:
        result = await super().load()
        if result.ok:
            profile = await get_or_create_profile(self.user)
            self.greeting_name = "Admin" if self.is_admin else profile.display_name
        return result

    async def delete_listing(self, listing_id: str, confirmed: bool = False) -> ViewResult:
        """Soft-delete one of the user's listings after confirmation."""
        listing = next((l for l in self.listings if l.id == listing_id), None)
        if listing is None:
            return ViewResult.failure("Listing not found")
        if not confirmed:
            return ViewResult(ok=False, data={"requires_confirmation": True})

        try:
            await tombstone_listing(listing_id)
        except SupabaseError as e:
            logger.error(
                "Failed to delete listing",
                listing_id=listing_id,
                user_id=mask_user_id(self.user.id),
                error=str(e),
            )
            return ViewResult.failure(f"Error deleting listing: {e}")

        self.listings = [l for l in self.listings if l.id != listing_id]
        return ViewResult(ok=True, data=self.page(), notice=Notice.success("Listing deleted"))
