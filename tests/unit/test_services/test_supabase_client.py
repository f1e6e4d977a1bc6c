"""Tests for the Supabase store wrappers."""

import pytest
from unittest.mock import MagicMock, patch

from protea.services.supabase_client import (
    close_supabase_client,
    create_listing,
    delete_listing,
    get_listing_by_id,
    get_supabase_client,
    list_listings,
    list_profiles_by_ids,
    update_listing,
)
from protea.utils.errors import SupabaseError
from tests.utils.factories import create_listing_data
from tests.utils.helpers import patched_supabase

MODULE = "protea.services.supabase_client"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_list_listings_for_owner_newest_first(mock_supabase_client):
    rows = [create_listing_data(user_id="u1")]
    mock_supabase_client.query.execute.return_value = MagicMock(data=rows)

    with patched_supabase(MODULE, mock_supabase_client):
        result = await list_listings(owner_user_id="u1", limit=50)

    assert result == rows
    mock_supabase_client.table.assert_called_once_with("listings")
    mock_supabase_client.query.eq.assert_called_once_with("user_id", "u1")
    mock_supabase_client.query.order.assert_called_once_with("created_at", desc=True)
    mock_supabase_client.query.limit.assert_called_once_with(50)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_listing_by_id_missing_returns_none(mock_supabase_client):
    with patched_supabase(MODULE, mock_supabase_client):
        assert await get_listing_by_id("nope") is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_listing_without_returned_row_raises(mock_supabase_client):
    with patched_supabase(MODULE, mock_supabase_client):
        with pytest.raises(SupabaseError):
            await create_listing({"id": "1", "title": "x"})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_listing_returns_row(mock_supabase_client):
    row = create_listing_data(id="1", title="DELETED")
    mock_supabase_client.query.execute.return_value = MagicMock(data=[row])

    with patched_supabase(MODULE, mock_supabase_client):
        result = await update_listing("1", {"title": "DELETED"})

    assert result == row
    mock_supabase_client.query.update.assert_called_once_with({"title": "DELETED"})
    mock_supabase_client.query.eq.assert_called_once_with("id", "1")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_backend_errors_become_supabase_error(mock_supabase_client):
    mock_supabase_client.query.execute.side_effect = RuntimeError("502 Bad Gateway")

    with patched_supabase(MODULE, mock_supabase_client):
        with pytest.raises(SupabaseError, match="502"):
            await delete_listing("1")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_list_profiles_by_ids_skips_empty_query(mock_supabase_client):
    with patched_supabase(MODULE, mock_supabase_client):
        assert await list_profiles_by_ids([]) == []

    mock_supabase_client.table.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_client_singleton_is_dropped_on_close():
    await close_supabase_client()

    with patch(f"{MODULE}.create_client", side_effect=[MagicMock(), MagicMock()]) as mock_create:
        first = get_supabase_client()
        assert get_supabase_client() is first

        await close_supabase_client()
        second = get_supabase_client()

    assert second is not first
    assert mock_create.call_count == 2
    await close_supabase_client()
