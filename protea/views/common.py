"""Helpers shared by the view models."""

from typing import Optional

from protea.models.listing import SOFT_DELETE_SENTINEL, Listing
from protea.models.notice import ViewResult
from protea.models.profile import AuthUser
from protea.services.access_gate import AccessGate
from protea.services.supabase_client import list_listings, update_listing
from protea.utils.config import AppConfig
from protea.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


async def admin_redirect(gate: AccessGate, user: Optional[AuthUser]) -> Optional[ViewResult]:
    """Silent redirect for non-admins, None when the user may proceed."""
    if await gate.is_admin(user):
        return None
    logger.info(
        "Non-admin redirected from admin view",
        user_id=mask_user_id(user.id) if user else None,
    )
    return ViewResult.redirect(AppConfig.DEFAULT_REDIRECT)


async def fetch_listings(
    owner_user_id: Optional[str] = None,
    limit: Optional[int] = None,
) -> list[Listing]:
    """Newest-first listings as models. Raises SupabaseError."""
    rows = await list_listings(owner_user_id=owner_user_id, newest_first=True, limit=limit)
    return [Listing.model_validate(row) for row in rows]


async def tombstone_listing(listing_id: str) -> Listing:
    """Soft-delete by overwriting the title. Raises SupabaseError."""
    row = await update_listing(listing_id, {"title": SOFT_DELETE_SENTINEL})
    logger.info("Listing soft-deleted", listing_id=listing_id)
    return Listing.model_validate(row)


def share_url(listing_id: str) -> str:
    return f"{AppConfig.APP_BASE_URL}/listing/{listing_id}"
