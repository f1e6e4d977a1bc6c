"""Profile resolution - map auth users to display profiles in the profiles table."""

import re
from datetime import datetime, timezone
from typing import Iterable, Optional

from pydantic import ValidationError

from protea.models.profile import AuthUser, Profile
from protea.services.supabase_client import (
    get_profile_by_id,
    list_profiles_by_ids,
    update_profile_row,
    upsert_profile,
)
from protea.utils.errors import SupabaseError
from protea.utils.logging import get_structured_logger, mask_email, mask_user_id

logger = get_structured_logger(__name__)

_NAME_SEPARATORS = re.compile(r"[._-]")


def email_to_name(email: Optional[str]) -> str:
    """Turn ``john.doe_smith@x.com`` into ``John Doe Smith``."""
    if not email:
        return ""
    local_part = email.split("@")[0]
    parts = [part[:1].upper() + part[1:].lower() for part in _NAME_SEPARATORS.split(local_part)]
    return " ".join(part for part in parts if part)


def display_name(profile: Optional[Profile]) -> str:
    return profile.display_name if profile else "Unknown User"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def synthesize_profile(user: AuthUser) -> Profile:
    """Build an unsaved profile from auth metadata or the email local part."""
    name = user.metadata_name or email_to_name(user.email)
    return Profile(
        id=user.id,
        email=user.email,
        name=name,
        full_name=name,
        persisted=False,
    )


async def get_profile(user_id: str) -> Optional[Profile]:
    """Fetch a profile; None when missing. Raises SupabaseError on store failure."""
    row = await get_profile_by_id(user_id)
    return Profile.model_validate(row) if row else None


async def get_or_create_profile(user: AuthUser) -> Profile:
    """
    Resolve an auth user to their profile, creating it on first sight.

    Creation is an upsert that ignores conflicts, so two callers racing on
    the same user both end up reading the single stored row. Store failures
    never propagate: the caller gets an unsaved profile instead.
    """
    try:
        existing = await get_profile(user.id)
        if existing:
            return existing

        fallback = synthesize_profile(user)
        now = _now()
        row = fallback.model_dump(exclude={"is_admin"})
        row.update({"created_at": now, "updated_at": now})

        created = await upsert_profile(row)
        if created is None:
            # Lost the race: another session inserted first
            created = await get_profile_by_id(user.id)

        if created:
            logger.info(
                "Resolved auth user to new profile",
                user_id=mask_user_id(user.id),
                email=mask_email(user.email),
                profile_name=created.get("name"),
            )
            return Profile.model_validate(created)

        logger.warning("Profile upsert returned no row", user_id=mask_user_id(user.id))
        return fallback

    except (SupabaseError, ValidationError) as e:
        logger.error(
            "Error resolving profile, using unsaved fallback",
            user_id=mask_user_id(user.id),
            error=str(e),
        )
        return synthesize_profile(user)


async def update_profile(user_id: str, changes: dict) -> Profile:
    """Update editable profile fields. Raises SupabaseError on failure.

    Listings keep their stored owner snapshot; views show the live name.
    """
    allowed = {k: v for k, v in changes.items() if k in ("name", "full_name", "email")}
    if not allowed:
        existing = await get_profile(user_id)
        if existing:
            return existing
        raise SupabaseError(f"Profile not found: {user_id}")

    allowed["updated_at"] = _now()
    row = await update_profile_row(user_id, allowed)
    logger.info("Profile updated", user_id=mask_user_id(user_id), fields=sorted(allowed))
    return Profile.model_validate(row)


async def resolve_profiles(
    user_ids: Iterable[Optional[str]],
    current_user: Optional[AuthUser] = None,
) -> dict[str, Profile]:
    """
    Map owner IDs to profiles in one query.

    Only the current user's missing profile can be created here; other
    owners without a profile are simply absent from the result.
    """
    unique_ids = list(dict.fromkeys(uid for uid in user_ids if uid))
    if not unique_ids:
        return {}

    profiles: dict[str, Profile] = {}
    try:
        rows = await list_profiles_by_ids(unique_ids)
    except SupabaseError as e:
        logger.warning("Failed to fetch owner profiles", owners=len(unique_ids), error=str(e))
        rows = []

    for row in rows:
        try:
            profile = Profile.model_validate(row)
        except ValidationError as e:
            logger.warning("Skipping malformed profile row", error=str(e))
            continue
        profiles[profile.id] = profile

    if current_user and current_user.id in unique_ids and current_user.id not in profiles:
        profiles[current_user.id] = await get_or_create_profile(current_user)

    return profiles
