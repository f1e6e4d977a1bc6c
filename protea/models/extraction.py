"""Advisory listing fields guessed from free-text descriptions."""

from typing import Optional
from pydantic import BaseModel, Field


class ExtractedListingFields(BaseModel):
    """Field guesses used to pre-fill the listing form; never auto-committed."""
    title: Optional[str] = Field(None, description="Short listing title if one is obvious, otherwise null")
    property_type: Optional[str] = Field(None, description="Rumah, Kavling or Apartemen if stated, otherwise null")
    transaction_type: Optional[str] = Field(None, description="Jual or Sewa if stated, otherwise null")
    land_area: Optional[int] = Field(None, ge=0, description="Luas tanah (LT) in m2")
    building_area: Optional[int] = Field(None, ge=0, description="Luas bangunan (LB) in m2")
    bedrooms: Optional[int] = Field(None, ge=0, description="Kamar tidur (KT), including '+1' rooms")
    bathrooms: Optional[int] = Field(None, ge=0, description="Kamar mandi (KM), including '+1' rooms")
    price: Optional[str] = Field(None, description="Price in rupiah as digits only")
    province: Optional[str] = Field(None, description="Province if stated, otherwise null")
    city: Optional[str] = Field(None, description="City if stated, otherwise null")
    district: Optional[str] = Field(None, description="District (kecamatan) if stated, otherwise null")

    def merged_over(self, base: "ExtractedListingFields") -> "ExtractedListingFields":
        """Fill this result's gaps from ``base``."""
        values = base.model_dump()
        values.update({k: v for k, v in self.model_dump().items() if v is not None})
        return ExtractedListingFields(**values)

    def form_values(self) -> dict[str, str]:
        """Non-null guesses as form strings keyed by listing field name."""
        return {k: str(v) for k, v in self.model_dump().items() if v is not None}
