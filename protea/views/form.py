"""Create and edit forms for listings."""

import uuid
from typing import Any, Optional

from protea.models.listing import Listing, ListingDraft
from protea.models.notice import Notice, ViewResult
from protea.models.profile import AuthUser, Profile
from protea.services.access_gate import AccessGate, get_access_gate
from protea.services.listing_extractor import extract_listing_fields
from protea.services.profiles import get_or_create_profile, get_profile
from protea.services.storage import remove_listing_image, upload_listing_image
from protea.services.supabase_client import (
    create_listing,
    get_listing_by_id,
    list_all_profiles,
    update_listing,
)
from protea.utils.config import AppConfig
from protea.utils.errors import (
    AccessDeniedError,
    ListingNotFoundError,
    ListingValidationError,
    StorageError,
    SupabaseError,
)
from protea.utils.logging import get_structured_logger, mask_user_id
from protea.utils.price import normalize_price

logger = get_structured_logger(__name__)

_NULLABLE_FIELDS = ("land_area", "building_area", "bedrooms", "bathrooms")


class ListingFormView:
    """
    Form state for creating a listing (``listing_id=None``) or editing one.

    Only the owner or an admin may edit. Admins creating a listing pick the
    owner from ``owner_choices``; everyone else owns what they create.
    """

    def __init__(self, user: AuthUser, listing_id: Optional[str] = None, gate: Optional[AccessGate] = None):
        self.user = user
        self.listing_id = listing_id
        self.gate = gate or get_access_gate()
        self.draft = ListingDraft()
        self.is_admin = False
        self.owner_choices: list[Profile] = []

    @property
    def is_edit(self) -> bool:
        return self.listing_id is not None

    async def _editable_listing(self) -> Listing:
        """
        Load the stored listing being edited, checking the user may edit it.

        Raises ListingNotFoundError, AccessDeniedError or SupabaseError.
        """
        row = await get_listing_by_id(self.listing_id)
        if row is None:
            raise ListingNotFoundError(f"Listing not found: {self.listing_id}")

        listing = Listing.model_validate(row)
        if not await self.gate.can_edit(self.user, listing.owner_user_id):
            logger.info(
                "Edit denied",
                listing_id=self.listing_id,
                user_id=mask_user_id(self.user.id),
            )
            raise AccessDeniedError("Only the owner or an admin may edit this listing")
        return listing

    async def open(self) -> ViewResult:
        self.is_admin = await self.gate.is_admin(self.user)

        if self.is_edit:
            try:
                listing = await self._editable_listing()
            except SupabaseError as e:
                return ViewResult.failure(f"Error loading property data: {e}")
            except ListingNotFoundError:
                return ViewResult.redirect(AppConfig.DEFAULT_REDIRECT, "Property not found")
            except AccessDeniedError:
                return ViewResult.redirect(AppConfig.DEFAULT_REDIRECT)
            self.draft = ListingDraft.from_listing(listing)

        elif self.is_admin:
            try:
                self.owner_choices = [Profile.model_validate(row) for row in await list_all_profiles()]
            except SupabaseError as e:
                return ViewResult.failure(f"Error loading owners: {e}")

        return ViewResult.success(data=self.draft)

    def update(self, **values: Any) -> ListingDraft:
        """Apply user-entered field values."""
        merged = self.draft.model_dump()
        merged.update(values)
        self.draft = ListingDraft.model_validate(merged)
        return self.draft

    async def prefill(self, description: str) -> ViewResult:
        """Fill empty fields with guesses from a pasted description."""
        guesses = (await extract_listing_fields(description)).form_values()
        current = self.draft.model_dump()
        applied = {k: v for k, v in guesses.items() if k in current and not str(current[k] or "").strip()}
        if not self.draft.description.strip() and description:
            applied["description"] = description
        if applied:
            self.update(**applied)
        return ViewResult.success(data=applied)

    async def upload_image(self, data: bytes, filename: str, content_type: str = "image/jpeg") -> ViewResult:
        try:
            url = await upload_listing_image(data, filename, content_type)
        except StorageError as e:
            return ViewResult.failure(f"Error uploading image: {e}")
        self.update(image_url=url)
        return ViewResult.success(data=url, message="Image uploaded")

    async def remove_image(self) -> ViewResult:
        if not self.draft.image_url:
            return ViewResult.success()
        try:
            await remove_listing_image(self.draft.image_url)
        except StorageError as e:
            return ViewResult.failure(f"Error removing image: {e}")
        self.update(image_url="")
        return ViewResult.success()

    def validate(self) -> None:
        """Raise ListingValidationError for the first invalid field."""
        if not self.draft.title.strip():
            raise ListingValidationError("Title is required", field="title")
        if not self.is_edit and self.is_admin and not self.draft.owner_user_id:
            raise ListingValidationError("Please select an owner", field="owner_user_id")

    def _row(self) -> dict:
        draft = self.draft
        row = Listing(
            id=self.listing_id or "",
            title=draft.title.strip(),
            description=draft.description,
            property_type=draft.property_type or None,
            transaction_type=draft.transaction_type or None,
            province=draft.province or None,
            city=draft.city or None,
            district=draft.district or None,
            township=draft.township or None,
            price=normalize_price(draft.price),
            image_url=draft.image_url or None,
            **{field: getattr(draft, field).strip() or None for field in _NULLABLE_FIELDS},
        ).to_row()
        for column in ("id", "user_id", "owner", "status", "created_at"):
            row.pop(column, None)
        return row

    async def _owner_for_create(self) -> tuple[str, str]:
        owner_id = self.draft.owner_user_id if self.is_admin and self.draft.owner_user_id else self.user.id
        if owner_id == self.user.id:
            profile = await get_or_create_profile(self.user)
        else:
            profile = await get_profile(owner_id)
        return owner_id, profile.display_name if profile else "Unknown User"

    async def submit(self) -> ViewResult:
        try:
            self.validate()
        except ListingValidationError as e:
            return ViewResult(ok=False, data={"field": e.field}, notice=Notice.error(str(e)))

        try:
            if self.is_edit:
                await self._editable_listing()
                saved = await update_listing(self.listing_id, self._row())
            else:
                owner_id, owner_name = await self._owner_for_create()
                row = self._row()
                row.update({"id": str(uuid.uuid4()), "user_id": owner_id, "owner": owner_name})
                saved = await create_listing(row)
        except SupabaseError as e:
            logger.error(
                "Failed to save listing",
                listing_id=self.listing_id,
                user_id=mask_user_id(self.user.id),
                error=str(e),
            )
            return ViewResult.failure(f"Error saving data: {e}")
        except ListingNotFoundError:
            return ViewResult.redirect(AppConfig.DEFAULT_REDIRECT, "Property not found")
        except AccessDeniedError:
            return ViewResult.redirect(AppConfig.DEFAULT_REDIRECT)

        listing = Listing.model_validate(saved)
        logger.info(
            "Listing saved",
            listing_id=listing.id,
            user_id=mask_user_id(self.user.id),
            action="update" if self.is_edit else "create",
        )

        if self.is_edit:
            return ViewResult(
                ok=True,
                data=listing,
                redirect_to=f"/listing/{listing.id}",
                notice=Notice.success("Property updated successfully!"),
            )

        self.draft = ListingDraft()
        return ViewResult.success(data=listing, message="Data submitted successfully!")
