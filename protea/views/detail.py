"""Single listing view with share link and admin delete paths."""

from typing import Optional

from protea.models.listing import Listing
from protea.models.notice import Notice, ViewResult
from protea.models.profile import AuthUser
from protea.services.access_gate import AccessGate, get_access_gate
from protea.services.profiles import resolve_profiles
from protea.services.storage import remove_listing_image
from protea.services.supabase_client import delete_listing, get_listing_by_id
from protea.utils.config import AppConfig
from protea.utils.errors import ListingNotFoundError, StorageError, SupabaseError
from protea.utils.logging import get_structured_logger, mask_user_id
from protea.utils.price import format_idr
from protea.views.common import admin_redirect, share_url, tombstone_listing

logger = get_structured_logger(__name__)


class ListingDetailView:
    def __init__(self, user: AuthUser, listing_id: str, gate: Optional[AccessGate] = None):
        self.user = user
        self.listing_id = listing_id
        self.gate = gate or get_access_gate()
        self.listing: Optional[Listing] = None

    @property
    def share_url(self) -> str:
        return share_url(self.listing_id)

    async def _get(self) -> Listing:
        row = await get_listing_by_id(self.listing_id)
        if row is None:
            raise ListingNotFoundError(f"Listing not found: {self.listing_id}")
        listing = Listing.model_validate(row)
        if listing.is_soft_deleted:
            raise ListingNotFoundError(f"Listing deleted: {self.listing_id}")
        return listing

    async def load(self) -> ViewResult:
        try:
            listing = await self._get()
        except ListingNotFoundError:
            logger.info("Listing not found, redirecting", listing_id=self.listing_id)
            return ViewResult.redirect(AppConfig.DEFAULT_REDIRECT)
        except SupabaseError as e:
            logger.error("Failed to load listing", listing_id=self.listing_id, error=str(e))
            return ViewResult.failure(f"Error loading listing: {e}")

        self.listing = listing
        profiles = await resolve_profiles([listing.owner_user_id], self.user)
        owner = profiles.get(listing.owner_user_id or "")
        is_admin = await self.gate.is_admin(self.user)

        return ViewResult.success(data={
            "listing": listing,
            "owner_name": listing.owner_label(owner.display_name if owner else None),
            "price_label": format_idr(listing.price),
            "location": listing.location,
            "share_url": self.share_url,
            "is_admin": is_admin,
            "can_edit": is_admin or listing.owner_user_id == self.user.id,
        })

    async def soft_delete(self, confirmed: bool = False) -> ViewResult:
        """Tombstone the listing (admin only, after confirmation)."""
        redirect = await admin_redirect(self.gate, self.user)
        if redirect:
            return redirect
        if not confirmed:
            return ViewResult(ok=False, data={"requires_confirmation": True})

        try:
            await tombstone_listing(self.listing_id)
        except SupabaseError as e:
            logger.error("Failed to delete listing", listing_id=self.listing_id, error=str(e))
            return ViewResult.failure(f"Error deleting listing: {e}")

        return ViewResult(
            ok=True,
            redirect_to=AppConfig.DEFAULT_REDIRECT,
            notice=Notice.success("Listing deleted"),
        )

    async def purge(self, confirmed: bool = False) -> ViewResult:
        """Remove the row and its image for good (admin only)."""
        redirect = await admin_redirect(self.gate, self.user)
        if redirect:
            return redirect
        if not confirmed:
            return ViewResult(ok=False, data={"requires_confirmation": True})

        try:
            row = await get_listing_by_id(self.listing_id)
            if row is None:
                return ViewResult.redirect(AppConfig.DEFAULT_REDIRECT)
            await delete_listing(self.listing_id)
        except SupabaseError as e:
            logger.error("Failed to purge listing", listing_id=self.listing_id, error=str(e))
            return ViewResult.failure(f"Error deleting listing: {e}")

        image_url = row.get("image_urls")
        if image_url:
            try:
                await remove_listing_image(image_url)
            except StorageError as e:
                # Row is already gone; an orphaned object is harmless
                logger.warning("Failed to remove listing image", listing_id=self.listing_id, error=str(e))

        logger.info("Listing purged", listing_id=self.listing_id, user_id=mask_user_id(self.user.id))
        return ViewResult(
            ok=True,
            redirect_to=AppConfig.DEFAULT_REDIRECT,
            notice=Notice.success("Listing permanently deleted"),
        )
