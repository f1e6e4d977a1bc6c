"""Supabase client wrapper with async context manager support."""

import os
from typing import Optional
from supabase import AsyncClient, AsyncClientOptions, Client, ClientOptions, acreate_client, create_client
from protea.utils.config import AppConfig
from protea.utils.errors import SupabaseError
import logging

logger = logging.getLogger(__name__)

# Global client instances (singleton pattern)
_client: Optional[Client] = None
_async_client: Optional[AsyncClient] = None


def _credentials() -> tuple[str, str]:
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        raise SupabaseError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
    return url, key


def get_supabase_client() -> Client:
    """Get or create Supabase client singleton."""
    global _client

    if _client is None:
        url, key = _credentials()
        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )
        _client = create_client(url, key, options)
        logger.info("Supabase client initialized", extra={"url": url})

    return _client


async def get_async_supabase_client() -> AsyncClient:
    """Get or create the async client used for realtime channels."""
    global _async_client

    if _async_client is None:
        url, key = _credentials()
        options = AsyncClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )
        _async_client = await acreate_client(url, key, options)
        logger.info("Supabase async client initialized", extra={"url": url})

    return _async_client


async def close_supabase_client() -> None:
    """Drop client references (supabase-py has no explicit close)."""
    global _client, _async_client
    if _client or _async_client:
        _client = None
        _async_client = None
        logger.info("Supabase client closed")


class SupabaseClient:
    """Async context manager for Supabase client."""

    def __init__(self):
        self.client: Optional[Client] = None

    async def __aenter__(self) -> Client:
        self.client = get_supabase_client()
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                extra={"error": str(exc_val), "type": exc_type.__name__}
            )
        return False


def _first(result) -> Optional[dict]:
    return result.data[0] if result.data and len(result.data) > 0 else None


# Listings table operations
async def list_listings(
    owner_user_id: Optional[str] = None,
    newest_first: bool = True,
    limit: Optional[int] = None,
) -> list[dict]:
    """Fetch listing rows, optionally only those created by one user."""
    async with SupabaseClient() as client:
        try:
            query = client.table(AppConfig.LISTINGS_TABLE).select("*")
            if owner_user_id:
                query = query.eq("user_id", owner_user_id)
            query = query.order("created_at", desc=newest_first)
            if limit:
                query = query.limit(limit)
            result = query.execute()
            return result.data if result.data else []
        except Exception as e:
            raise SupabaseError(f"Failed to list listings: {e}")


async def get_listing_by_id(listing_id: str) -> Optional[dict]:
    """Get listing by ID."""
    async with SupabaseClient() as client:
        try:
            result = client.table(AppConfig.LISTINGS_TABLE).select("*").eq("id", listing_id).execute()
            return _first(result)
        except Exception as e:
            raise SupabaseError(f"Failed to get listing: {e}")


async def create_listing(listing_data: dict) -> dict:
    """Insert a listing row and return it."""
    async with SupabaseClient() as client:
        try:
            result = client.table(AppConfig.LISTINGS_TABLE).insert(listing_data).execute()
            row = _first(result)
            if row:
                return row
            raise SupabaseError("Failed to create listing: no data returned")
        except SupabaseError:
            raise
        except Exception as e:
            raise SupabaseError(f"Failed to create listing: {e}")


async def update_listing(listing_id: str, updates: dict) -> dict:
    """Update a listing row and return it."""
    async with SupabaseClient() as client:
        try:
            result = client.table(AppConfig.LISTINGS_TABLE).update(updates).eq("id", listing_id).execute()
            row = _first(result)
            if row:
                return row
            raise SupabaseError(f"Failed to update listing: {listing_id}")
        except SupabaseError:
            raise
        except Exception as e:
            raise SupabaseError(f"Failed to update listing: {e}")


async def delete_listing(listing_id: str) -> None:
    """Remove a listing row."""
    async with SupabaseClient() as client:
        try:
            client.table(AppConfig.LISTINGS_TABLE).delete().eq("id", listing_id).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to delete listing: {e}")


# Profiles table operations
async def get_profile_by_id(user_id: str) -> Optional[dict]:
    """Get profile row by user ID."""
    async with SupabaseClient() as client:
        try:
            result = client.table(AppConfig.PROFILES_TABLE).select("*").eq("id", user_id).execute()
            return _first(result)
        except Exception as e:
            raise SupabaseError(f"Failed to get profile: {e}")


async def upsert_profile(profile_data: dict) -> Optional[dict]:
    """Insert a profile unless one already exists for the same ID.

    Returns the inserted row, or None when a concurrent writer got there first.
    """
    async with SupabaseClient() as client:
        try:
            result = client.table(AppConfig.PROFILES_TABLE).upsert(
                profile_data,
                on_conflict="id",
                ignore_duplicates=True,
            ).execute()
            return _first(result)
        except Exception as e:
            raise SupabaseError(f"Failed to upsert profile: {e}")


async def update_profile_row(user_id: str, updates: dict) -> dict:
    """Update a profile row and return it."""
    async with SupabaseClient() as client:
        try:
            result = client.table(AppConfig.PROFILES_TABLE).update(updates).eq("id", user_id).execute()
            row = _first(result)
            if row:
                return row
            raise SupabaseError(f"Failed to update profile: {user_id}")
        except SupabaseError:
            raise
        except Exception as e:
            raise SupabaseError(f"Failed to update profile: {e}")


async def list_profiles_by_ids(user_ids: list[str]) -> list[dict]:
    """Fetch the profiles for a set of user IDs."""
    if not user_ids:
        return []
    async with SupabaseClient() as client:
        try:
            result = client.table(AppConfig.PROFILES_TABLE).select("*").in_("id", user_ids).execute()
            return result.data if result.data else []
        except Exception as e:
            raise SupabaseError(f"Failed to list profiles: {e}")


async def list_all_profiles() -> list[dict]:
    """Fetch every profile (owner picker on the admin create form)."""
    async with SupabaseClient() as client:
        try:
            result = client.table(AppConfig.PROFILES_TABLE).select("*").order("name").execute()
            return result.data if result.data else []
        except Exception as e:
            raise SupabaseError(f"Failed to list profiles: {e}")
