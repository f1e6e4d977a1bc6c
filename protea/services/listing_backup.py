"""CSV and JSON exports of the listings table."""

import csv
import io
import json
from datetime import datetime, timezone
from typing import Iterable, Mapping, Optional

from protea.models.listing import Listing
from protea.models.profile import Profile
from protea.services.listing_filter import live_listings

# Column order of the CSV export; names are the listings-table columns
BACKUP_COLUMNS = (
    "id", "title", "description", "property_type", "transaction_type",
    "lt", "lb", "kt", "km", "province", "city", "district", "township",
    "price", "user_id", "owner", "status", "image_urls", "created_at",
)


def backup_filename(extension: str = "csv", now: Optional[datetime] = None) -> str:
    """``listings-backup-20250114-103000.csv`` for the given (UTC) moment."""
    now = now or datetime.now(timezone.utc)
    return f"listings-backup-{now:%Y%m%d-%H%M%S}.{extension}"


def _backup_row(listing: Listing, profiles: Mapping[str, Profile]) -> dict:
    row = listing.to_row()
    profile = profiles.get(listing.owner_user_id) if listing.owner_user_id else None
    row["owner"] = listing.owner_label(profile.display_name if profile else None)
    return row


def backup_rows(
    listings: Iterable[Listing],
    profiles: Optional[Mapping[str, Profile]] = None,
    include_deleted: bool = False,
) -> list[dict]:
    """Listings as table rows with the live owner name filled in."""
    selected = list(listings) if include_deleted else live_listings(listings)
    return [_backup_row(listing, profiles or {}) for listing in selected]


def export_csv(
    listings: Iterable[Listing],
    profiles: Optional[Mapping[str, Profile]] = None,
    include_deleted: bool = False,
) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=BACKUP_COLUMNS, extrasaction="ignore")
    writer.writeheader()
    for row in backup_rows(listings, profiles, include_deleted):
        writer.writerow({k: "" if row.get(k) is None else row[k] for k in BACKUP_COLUMNS})
    return buffer.getvalue()


def export_json(
    listings: Iterable[Listing],
    profiles: Optional[Mapping[str, Profile]] = None,
    include_deleted: bool = False,
) -> str:
    rows = backup_rows(listings, profiles, include_deleted)
    return json.dumps(rows, ensure_ascii=False, indent=2)
