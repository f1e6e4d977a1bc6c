"""Admin-only statistics and backup views."""

from typing import Literal, Optional

from protea.models.notice import ViewResult
from protea.models.profile import AuthUser
from protea.services.access_gate import AccessGate, get_access_gate
from protea.services.listing_backup import backup_filename, export_csv, export_json
from protea.services.listing_stats import compute_statistics
from protea.services.profiles import resolve_profiles
from protea.utils.errors import SupabaseError
from protea.utils.logging import get_structured_logger, mask_user_id
from protea.views.common import admin_redirect, fetch_listings

logger = get_structured_logger(__name__)

_CONTENT_TYPES = {"csv": "text/csv", "json": "application/json"}


class StatisticsView:
    def __init__(self, user: AuthUser, gate: Optional[AccessGate] = None):
        self.user = user
        self.gate = gate or get_access_gate()

    async def load(self) -> ViewResult:
        redirect = await admin_redirect(self.gate, self.user)
        if redirect:
            return redirect

        try:
            listings = await fetch_listings()
        except SupabaseError as e:
            logger.error("Failed to load statistics", error=str(e))
            return ViewResult.failure(f"Error loading statistics: {e}")

        profiles = await resolve_profiles((l.owner_user_id for l in listings), self.user)
        return ViewResult.success(data=compute_statistics(listings, profiles))


class BackupView:
    """Downloadable export of every live listing."""

    def __init__(self, user: AuthUser, gate: Optional[AccessGate] = None):
        self.user = user
        self.gate = gate or get_access_gate()

    async def export(self, fmt: Literal["csv", "json"] = "csv") -> ViewResult:
        redirect = await admin_redirect(self.gate, self.user)
        if redirect:
            return redirect
        if fmt not in _CONTENT_TYPES:
            return ViewResult.failure(f"Unsupported export format: {fmt}")

        try:
            listings = await fetch_listings()
        except SupabaseError as e:
            logger.error("Failed to load listings for backup", error=str(e))
            return ViewResult.failure(f"Error creating backup: {e}")

        profiles = await resolve_profiles((l.owner_user_id for l in listings), self.user)
        content = export_csv(listings, profiles) if fmt == "csv" else export_json(listings, profiles)
        filename = backup_filename(fmt)

        logger.info(
            "Listing backup exported",
            user_id=mask_user_id(self.user.id),
            export_format=fmt,
            rows=len(listings),
            backup_file=filename,
        )
        return ViewResult.success(
            data={"filename": filename, "content_type": _CONTENT_TYPES[fmt], "content": content},
            message="Backup ready",
        )
