"""Admin log of recent uploads, kept live by the listing change feed."""

from typing import Optional

from protea.models.change_event import ListingChange, ListingDeleted
from protea.models.notice import Notice, ViewResult
from protea.models.profile import AuthUser, Profile
from protea.services.access_gate import AccessGate, get_access_gate
from protea.services.listing_feed import ListingFeed
from protea.services.listing_log import ListingLog, LogEntry
from protea.services.profiles import resolve_profiles
from protea.utils.config import AppConfig
from protea.utils.errors import SupabaseError
from protea.utils.logging import get_structured_logger
from protea.views.common import admin_redirect, fetch_listings

logger = get_structured_logger(__name__)


class ListingLogView:
    """The newest listings with their owners' live profiles.

    ``open()`` loads the log and subscribes to changes; ``close()`` must be
    called when the view goes away.
    """

    def __init__(
        self,
        user: AuthUser,
        gate: Optional[AccessGate] = None,
        max_entries: int = AppConfig.LISTING_LOG_MAX_ENTRIES,
    ):
        self.user = user
        self.gate = gate or get_access_gate()
        self.log = ListingLog(max_entries)
        self.feed = ListingFeed(self._on_change)
        self.profiles: dict[str, Profile] = {}

    @property
    def entries(self) -> list[LogEntry]:
        return self.log.entries

    async def open(self) -> ViewResult:
        redirect = await admin_redirect(self.gate, self.user)
        if redirect:
            return redirect

        try:
            listings = await fetch_listings(limit=self.log.max_entries)
        except SupabaseError as e:
            logger.error("Failed to load listing log", error=str(e))
            return ViewResult.failure(f"Error loading listings: {e}")

        self.profiles = await resolve_profiles((l.owner_user_id for l in listings), self.user)
        self.log.load(
            LogEntry(listing=listing, owner=self.profiles.get(listing.owner_user_id or ""))
            for listing in listings
        )

        try:
            await self.feed.start()
        except Exception as e:
            logger.warning("Live listing updates unavailable", error=str(e))
            return ViewResult(ok=True, data=self.entries, notice=Notice.error("Live updates unavailable"))

        return ViewResult.success(data=self.entries)

    async def close(self) -> None:
        await self.feed.stop()

    async def _owner_for(self, change: ListingChange) -> Optional[Profile]:
        owner_id = change.listing.owner_user_id
        if not owner_id:
            return None
        if owner_id not in self.profiles:
            self.profiles.update(await resolve_profiles([owner_id], self.user))
        return self.profiles.get(owner_id)

    async def _on_change(self, change: ListingChange) -> None:
        owner = None if isinstance(change, ListingDeleted) else await self._owner_for(change)
        changed = self.log.apply(change, owner)
        logger.debug(
            "Listing change applied",
            kind=change.kind,
            listing_id=change.listing.id,
            changed=changed,
            entries=len(self.log),
        )
