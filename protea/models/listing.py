"""Listing models."""

from enum import Enum
from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from protea.utils.price import normalize_price

# Title written over a listing to tombstone it
SOFT_DELETE_SENTINEL = "DELETED"

NumericText = Union[int, float, str]


class PropertyType(str, Enum):
    """Property type values as stored in the listings table."""
    HOUSE = "Rumah"
    LAND = "Kavling"
    APARTMENT = "Apartemen"


class TransactionType(str, Enum):
    """Transaction type values."""
    SALE = "Jual"
    RENT = "Sewa"


class Listing(BaseModel):
    """Real estate listing row.

    Field names describe the attribute; aliases are the Supabase column names
    (``lt``/``lb``/``kt``/``km`` are the Indonesian abbreviations for land
    area, building area, bedrooms and bathrooms).
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., description="Listing ID (uuid text)")
    title: Optional[str] = Field(None, description="Listing title")
    description: Optional[str] = Field(None, description="Free text description")
    property_type: Optional[str] = Field(None, description="Rumah, Kavling or Apartemen")
    transaction_type: Optional[str] = Field(None, description="Jual or Sewa")
    land_area: Optional[NumericText] = Field(None, alias="lt", description="Land area in m2")
    building_area: Optional[NumericText] = Field(None, alias="lb", description="Building area in m2")
    bedrooms: Optional[NumericText] = Field(None, alias="kt", description="Bedroom count")
    bathrooms: Optional[NumericText] = Field(None, alias="km", description="Bathroom count")
    province: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    township: Optional[str] = None
    price: Optional[str] = Field(None, description="Price as a digit string")
    owner_user_id: Optional[str] = Field(None, alias="user_id", description="Creator user ID")
    owner_display_name: Optional[str] = Field(None, alias="owner", description="Owner name snapshot")
    image_url: Optional[str] = Field(None, alias="image_urls", description="Public image URL")
    status: Optional[str] = Field(None, description="Listing status")
    created_at: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> Optional[str]:
        # Legacy rows hold ints; free-text rows ("nego") keep their text
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return normalize_price(value)
        return value

    @property
    def is_soft_deleted(self) -> bool:
        return (self.title or "").strip() == SOFT_DELETE_SENTINEL

    @property
    def is_land(self) -> bool:
        return self.property_type == PropertyType.LAND.value

    @property
    def location(self) -> str:
        return self.city or "-"

    def owner_label(self, live_name: Optional[str] = None) -> str:
        """Display owner: live profile name first, then the stored snapshot."""
        if live_name and live_name.strip():
            return live_name.strip()
        snapshot = (self.owner_display_name or "").strip()
        return snapshot or "Unknown Owner"

    def to_row(self, exclude_none: bool = False) -> dict:
        """Render the listing as a listings-table row."""
        return self.model_dump(by_alias=True, exclude_none=exclude_none)


class ListingDraft(BaseModel):
    """Create/edit form values before they become a listing row."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = ""
    description: str = ""
    property_type: str = ""
    transaction_type: str = ""
    land_area: str = Field("", alias="lt")
    building_area: str = Field("", alias="lb")
    bedrooms: str = Field("", alias="kt")
    bathrooms: str = Field("", alias="km")
    province: str = ""
    city: str = ""
    district: str = ""
    township: str = ""
    price: str = ""
    image_url: str = Field("", alias="image_urls")
    owner_user_id: Optional[str] = Field(None, alias="user_id")

    @field_validator(
        "title", "description", "property_type", "transaction_type",
        "land_area", "building_area", "bedrooms", "bathrooms",
        "province", "city", "district", "township", "price", "image_url",
        mode="before",
    )
    @classmethod
    def _as_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @classmethod
    def from_listing(cls, listing: Listing) -> "ListingDraft":
        return cls.model_validate(listing.model_dump(by_alias=True))
