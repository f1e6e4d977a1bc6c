"""Tests for the listing detail view."""

import pytest
from unittest.mock import AsyncMock, patch

from protea.models.profile import Profile
from protea.utils.errors import StorageError, SupabaseError
from protea.views.detail import ListingDetailView
from tests.utils.assertions import assert_error_notice, assert_silent_redirect
from tests.utils.factories import create_listing_data

MODULE = "protea.views.detail"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_listing_redirects_to_dashboard(auth_user, user_gate):
    with patch(f"{MODULE}.get_listing_by_id", new=AsyncMock(return_value=None)):
        result = await ListingDetailView(auth_user, "nope", user_gate).load()

    assert_silent_redirect(result)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_soft_deleted_listing_redirects(auth_user, user_gate):
    row = create_listing_data(id="1", title="DELETED")

    with patch(f"{MODULE}.get_listing_by_id", new=AsyncMock(return_value=row)):
        result = await ListingDetailView(auth_user, "1", user_gate).load()

    assert result.redirect_to == "/dashboard"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_load_shows_live_owner_and_share_url(auth_user, user_gate):
    row = create_listing_data(id="abc", user_id=auth_user.id, owner="Old Name", price="1500000000", city=None)
    profiles = {auth_user.id: Profile(id=auth_user.id, name="New Name")}

    with patch(f"{MODULE}.get_listing_by_id", new=AsyncMock(return_value=row)), \
         patch(f"{MODULE}.resolve_profiles", new=AsyncMock(return_value=profiles)):
        result = await ListingDetailView(auth_user, "abc", user_gate).load()

    assert result.ok
    assert result.data["owner_name"] == "New Name"
    assert result.data["share_url"] == "https://protea.test/listing/abc"
    assert result.data["price_label"] == "IDR 1.500.000.000"
    assert result.data["location"] == "-"
    assert result.data["can_edit"]
    assert not result.data["is_admin"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_load_store_failure_shows_error(auth_user, user_gate):
    with patch(f"{MODULE}.get_listing_by_id", new=AsyncMock(side_effect=SupabaseError("timeout"))):
        result = await ListingDetailView(auth_user, "1", user_gate).load()

    assert_error_notice(result, contains="timeout")
    assert result.redirect_to is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_soft_delete_is_admin_only_and_confirmed(auth_user, user_gate, admin_user, admin_gate):
    with patch(f"{MODULE}.tombstone_listing", new=AsyncMock()) as mock_tombstone:
        denied = await ListingDetailView(auth_user, "1", user_gate).soft_delete(confirmed=True)
        unconfirmed = await ListingDetailView(admin_user, "1", admin_gate).soft_delete()
        done = await ListingDetailView(admin_user, "1", admin_gate).soft_delete(confirmed=True)

    assert_silent_redirect(denied)
    assert unconfirmed.data == {"requires_confirmation": True}
    mock_tombstone.assert_awaited_once_with("1")
    assert done.ok
    assert done.redirect_to == "/dashboard"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_purge_removes_row_and_image(admin_user, admin_gate):
    row = create_listing_data(id="1", image_urls="https://x.supabase.co/storage/v1/object/public/house-photos/a.jpg")

    with patch(f"{MODULE}.get_listing_by_id", new=AsyncMock(return_value=row)), \
         patch(f"{MODULE}.delete_listing", new=AsyncMock()) as mock_delete, \
         patch(f"{MODULE}.remove_listing_image", new=AsyncMock()) as mock_remove:
        result = await ListingDetailView(admin_user, "1", admin_gate).purge(confirmed=True)

    assert result.ok
    mock_delete.assert_awaited_once_with("1")
    mock_remove.assert_awaited_once_with(row["image_urls"])


@pytest.mark.unit
@pytest.mark.asyncio
async def test_purge_succeeds_when_image_removal_fails(admin_user, admin_gate):
    row = create_listing_data(id="1", image_urls="a.jpg")

    with patch(f"{MODULE}.get_listing_by_id", new=AsyncMock(return_value=row)), \
         patch(f"{MODULE}.delete_listing", new=AsyncMock()), \
         patch(f"{MODULE}.remove_listing_image", new=AsyncMock(side_effect=StorageError("gone"))):
        result = await ListingDetailView(admin_user, "1", admin_gate).purge(confirmed=True)

    assert result.ok


@pytest.mark.unit
@pytest.mark.asyncio
async def test_purge_store_failure_keeps_image(admin_user, admin_gate):
    row = create_listing_data(id="1", image_urls="a.jpg")

    with patch(f"{MODULE}.get_listing_by_id", new=AsyncMock(return_value=row)), \
         patch(f"{MODULE}.delete_listing", new=AsyncMock(side_effect=SupabaseError("down"))), \
         patch(f"{MODULE}.remove_listing_image", new=AsyncMock()) as mock_remove:
        result = await ListingDetailView(admin_user, "1", admin_gate).purge(confirmed=True)

    assert not result.ok
    mock_remove.assert_not_called()
