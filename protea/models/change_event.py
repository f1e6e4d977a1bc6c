"""Listing change-feed events delivered by Supabase realtime."""

from typing import Annotated, Any, Literal, Optional, Union
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from protea.models.listing import Listing


class ListingInserted(BaseModel):
    kind: Literal["INSERT"] = "INSERT"
    listing: Listing


class ListingUpdated(BaseModel):
    kind: Literal["UPDATE"] = "UPDATE"
    listing: Listing


class ListingDeleted(BaseModel):
    """Deletes usually carry only the primary key in the old record."""
    kind: Literal["DELETE"] = "DELETE"
    listing: Listing


ListingChange = Annotated[
    Union[ListingInserted, ListingUpdated, ListingDeleted],
    Field(discriminator="kind"),
]

_change_adapter: TypeAdapter[ListingChange] = TypeAdapter(ListingChange)


def parse_change_payload(payload: Any) -> Optional[ListingChange]:
    """Convert a raw postgres_changes payload into a typed change.

    Accepts the realtime-py shape ``{"data": {"type", "record", "old_record"}}``
    and the supabase-js shape ``{"eventType", "new", "old"}``. Returns None
    for anything unrecognised.
    """
    if not isinstance(payload, dict):
        return None

    data = payload.get("data") if isinstance(payload.get("data"), dict) else payload
    kind = data.get("type") or data.get("eventType")
    if isinstance(kind, str):
        kind = kind.upper()

    if kind == "DELETE":
        row = data.get("old_record") or data.get("old")
    else:
        row = data.get("record") or data.get("new")

    if kind not in ("INSERT", "UPDATE", "DELETE") or not isinstance(row, dict):
        return None

    try:
        return _change_adapter.validate_python({"kind": kind, "listing": row})
    except ValidationError:
        return None
