"""Admin capability checks shared by every view."""

from typing import Optional

from protea.models.profile import AuthUser
from protea.services.supabase_client import get_profile_by_id
from protea.utils.errors import AccessDeniedError, SupabaseError
from protea.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

# Bootstrap admins, consulted only when a profile row is missing or unreadable.
# Set profiles.is_admin for these accounts and this list can go.
FALLBACK_ADMIN_IDS = frozenset({
    "ae43f00b-4138-4baa-9bf2-897e5ee7abfe",
    "4a971da9-0c28-4943-a379-c4a29ca22136",
})


class AccessGate:
    """Decides whether a user gets admin capabilities."""

    def __init__(self, fallback_admin_ids: frozenset[str] = FALLBACK_ADMIN_IDS):
        self.fallback_admin_ids = fallback_admin_ids

    async def is_admin(self, user: Optional[AuthUser]) -> bool:
        if user is None:
            return False

        try:
            row = await get_profile_by_id(user.id)
        except SupabaseError as e:
            logger.warning(
                "Admin lookup failed, using fallback list",
                user_id=mask_user_id(user.id),
                error=str(e),
            )
            return user.id in self.fallback_admin_ids

        if row is None:
            return user.id in self.fallback_admin_ids

        return row.get("is_admin") is True

    async def require_admin(self, user: Optional[AuthUser]) -> AuthUser:
        """Return the user, or raise AccessDeniedError for non-admins."""
        if user is None or not await self.is_admin(user):
            raise AccessDeniedError("Admin privileges required")
        return user

    async def can_edit(self, user: Optional[AuthUser], owner_user_id: Optional[str]) -> bool:
        """Owners edit their own listings; admins edit any listing."""
        if user is None:
            return False
        if owner_user_id and owner_user_id == user.id:
            return True
        return await self.is_admin(user)


_access_gate: Optional[AccessGate] = None


def get_access_gate() -> AccessGate:
    """Get or create the shared access gate."""
    global _access_gate
    if _access_gate is None:
        _access_gate = AccessGate()
    return _access_gate
