"""Bounded log of recent listing uploads, kept current by change events."""

from typing import Iterable, Optional

from pydantic import BaseModel

from protea.models.change_event import ListingChange, ListingDeleted, ListingInserted, ListingUpdated
from protea.models.listing import Listing
from protea.models.profile import Profile
from protea.utils.config import AppConfig


class LogEntry(BaseModel):
    """A listing with its owner's live profile."""
    listing: Listing
    owner: Optional[Profile] = None

    @property
    def owner_name(self) -> str:
        return self.listing.owner_label(self.owner.display_name if self.owner else None)


class ListingLog:
    """Newest-first list of at most ``max_entries`` listings.

    The single reducer for change-feed events: inserts are de-duplicated by
    id and evict the oldest entry past the cap, updates replace in place,
    deletes remove. Events for unknown ids are tolerated. Soft-deleted
    listings never appear; a tombstoning update removes the entry.
    """

    def __init__(self, max_entries: int = AppConfig.LISTING_LOG_MAX_ENTRIES):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.entries: list[LogEntry] = []

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, listing_id: str) -> bool:
        return any(entry.listing.id == listing_id for entry in self.entries)

    @property
    def ids(self) -> list[str]:
        return [entry.listing.id for entry in self.entries]

    def load(self, entries: Iterable[LogEntry]) -> None:
        """Replace the log with a fresh fetch, newest first."""
        unique: dict[str, LogEntry] = {}
        for entry in entries:
            if entry.listing.is_soft_deleted:
                continue
            unique.setdefault(entry.listing.id, entry)
        ordered = sorted(unique.values(), key=lambda e: e.listing.created_at or "", reverse=True)
        self.entries = ordered[:self.max_entries]

    def apply(self, change: ListingChange, owner: Optional[Profile] = None) -> bool:
        """Fold one change into the log; returns True when the log changed."""
        listing_id = change.listing.id

        if isinstance(change, ListingInserted):
            if listing_id in self or change.listing.is_soft_deleted:
                return False
            self.entries.insert(0, LogEntry(listing=change.listing, owner=owner))
            del self.entries[self.max_entries:]
            return True

        if isinstance(change, ListingUpdated):
            if change.listing.is_soft_deleted:
                return self._remove(listing_id)
            for index, entry in enumerate(self.entries):
                if entry.listing.id == listing_id:
                    self.entries[index] = LogEntry(listing=change.listing, owner=owner or entry.owner)
                    return True
            return False

        if isinstance(change, ListingDeleted):
            return self._remove(listing_id)

        return False

    def _remove(self, listing_id: str) -> bool:
        before = len(self.entries)
        self.entries = [entry for entry in self.entries if entry.listing.id != listing_id]
        return len(self.entries) != before
