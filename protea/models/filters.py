"""Listing filter criteria."""

from typing import Optional, Union
from pydantic import BaseModel, Field

ALL = "All"


class FilterCriteria(BaseModel):
    """Criteria for the listing search/filter engine.

    Categorical fields use ``"All"`` for no constraint; numeric bounds use
    ``None`` for unbounded. The default instance matches every live listing.
    """
    search_term: str = Field("", description="Case-insensitive match on title or city")
    property_type: str = ALL
    transaction_type: str = ALL
    province: str = ALL
    city: str = ALL
    district: str = ALL
    price_min: Optional[int] = Field(None, ge=0)
    price_max: Optional[int] = Field(None, ge=0)
    land_area_min: Optional[float] = None
    land_area_max: Optional[float] = None
    building_area_min: Optional[float] = None
    building_area_max: Optional[float] = None
    bedrooms: Union[int, str] = ALL
    bathrooms: Union[int, str] = ALL

    def is_default(self) -> bool:
        return self == FilterCriteria()
