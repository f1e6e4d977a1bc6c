"""Aggregate statistics over live listings."""

from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Optional

from protea.models.listing import Listing
from protea.models.profile import Profile
from protea.models.statistics import ListingStatistics, OwnerListingSummary
from protea.services.listing_filter import live_listings
from protea.utils.price import parse_price

ACTIVE_STATUS = "active"
PENDING_STATUS = "pending"
UNSPECIFIED = "Unspecified"


def _status(listing: Listing) -> str:
    return (listing.status or "").strip().lower()


def _owner_summaries(
    listings: list[Listing],
    profiles: Mapping[str, Profile],
) -> list[OwnerListingSummary]:
    summaries: dict[Optional[str], OwnerListingSummary] = {}
    for listing in listings:
        owner_id = listing.owner_user_id
        summary = summaries.get(owner_id)
        if summary is None:
            profile = profiles.get(owner_id) if owner_id else None
            summary = OwnerListingSummary(
                owner_user_id=owner_id,
                name=listing.owner_label(profile.display_name if profile else None),
                email=profile.email if profile else None,
            )
            summaries[owner_id] = summary

        summary.total_listings += 1
        if _status(listing) == ACTIVE_STATUS:
            summary.active_listings += 1
        elif _status(listing) == PENDING_STATUS:
            summary.pending_listings += 1

    # Stable sort keeps first-seen order between owners with equal totals
    return sorted(summaries.values(), key=lambda s: s.total_listings, reverse=True)


def compute_statistics(
    listings: Iterable[Listing],
    profiles: Optional[Mapping[str, Profile]] = None,
) -> ListingStatistics:
    """Totals, price aggregates and per-owner counts. Soft-deleted rows are ignored."""
    live = live_listings(listings)
    prices = [p for p in (parse_price(listing.price) for listing in live) if p is not None]

    total_value = sum(prices)
    average = Decimal(total_value) / len(prices) if prices else Decimal(0)

    return ListingStatistics(
        total_properties=len(live),
        total_value=total_value,
        average_price=average.quantize(Decimal(1), rounding=ROUND_HALF_UP),
        active_listings=sum(1 for listing in live if _status(listing) == ACTIVE_STATUS),
        pending_listings=sum(1 for listing in live if _status(listing) == PENDING_STATUS),
        by_property_type=dict(Counter(listing.property_type or UNSPECIFIED for listing in live)),
        by_transaction_type=dict(Counter(listing.transaction_type or UNSPECIFIED for listing in live)),
        owners=_owner_summaries(live, profiles or {}),
    )
