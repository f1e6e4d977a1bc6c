"""Tests for the realtime listing feed."""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from protea.models.change_event import ListingInserted
from protea.services.listing_feed import ListingFeed
from tests.utils.factories import create_listing_data
from tests.utils.helpers import change_payload


@pytest.fixture
def realtime_client():
    client = MagicMock()
    channel = MagicMock()
    channel.subscribe = AsyncMock(return_value=channel)
    client.channel.return_value = channel
    client.remove_channel = AsyncMock()
    with patch("protea.services.listing_feed.get_async_supabase_client", new=AsyncMock(return_value=client)):
        yield client


@pytest.mark.unit
@pytest.mark.asyncio
async def test_start_subscribes_to_listings_table(realtime_client):
    feed = ListingFeed(AsyncMock())

    await feed.start()
    await feed.start()

    channel = realtime_client.channel.return_value
    realtime_client.channel.assert_called_once_with("listings-changes")
    args, kwargs = channel.on_postgres_changes.call_args
    assert args == ("*",)
    assert kwargs["table"] == "listings"
    assert kwargs["schema"] == "public"
    channel.subscribe.assert_awaited_once()
    assert feed.is_running


@pytest.mark.unit
@pytest.mark.asyncio
async def test_payloads_reach_handler_as_typed_changes(realtime_client):
    handler = AsyncMock()
    feed = ListingFeed(handler)
    await feed.start()

    feed._dispatch(change_payload("INSERT", record=create_listing_data(id="42")))
    feed._dispatch({"unexpected": True})
    await asyncio.sleep(0)

    handler.assert_awaited_once()
    change = handler.call_args.args[0]
    assert isinstance(change, ListingInserted)
    assert change.listing.id == "42"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_handler_errors_do_not_escape(realtime_client):
    feed = ListingFeed(AsyncMock(side_effect=RuntimeError("boom")))
    await feed.start()

    feed._dispatch(change_payload("INSERT", record=create_listing_data(id="1")))
    await asyncio.sleep(0)

    assert feed.is_running


@pytest.mark.unit
@pytest.mark.asyncio
async def test_stop_removes_channel_and_ignores_late_events(realtime_client):
    handler = AsyncMock()
    feed = ListingFeed(handler)
    await feed.start()

    await feed.stop()
    await feed.stop()
    feed._dispatch(change_payload("INSERT", record=create_listing_data(id="1")))
    await asyncio.sleep(0)

    realtime_client.remove_channel.assert_awaited_once_with(realtime_client.channel.return_value)
    handler.assert_not_called()
    assert not feed.is_running
