"""Aggregate listing statistics."""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class OwnerListingSummary(BaseModel):
    """Listing counts for one owner."""
    owner_user_id: Optional[str] = None
    name: str
    email: Optional[str] = None
    total_listings: int = 0
    active_listings: int = 0
    pending_listings: int = 0


class ListingStatistics(BaseModel):
    """Admin statistics across all live listings."""
    total_properties: int = 0
    total_value: int = Field(0, description="Sum of parseable prices in rupiah")
    average_price: Decimal = Decimal(0)
    active_listings: int = 0
    pending_listings: int = 0
    by_property_type: dict[str, int] = Field(default_factory=dict)
    by_transaction_type: dict[str, int] = Field(default_factory=dict)
    owners: list[OwnerListingSummary] = Field(default_factory=list, description="Most listings first")
