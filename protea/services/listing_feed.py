"""Realtime subscription to listing row changes."""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from protea.models.change_event import ListingChange, parse_change_payload
from protea.services.supabase_client import get_async_supabase_client
from protea.utils.config import AppConfig
from protea.utils.logging import get_correlation_id, get_structured_logger

logger = get_structured_logger(__name__)

ChangeHandler = Callable[[ListingChange], Awaitable[None]]


class ListingFeed:
    """Owns one realtime channel on the listings table.

    Payloads are parsed into typed changes and handed to ``handler`` as
    tasks on the running loop. ``stop()`` must be called when the owning
    view goes away so no callback outlives it.
    """

    def __init__(self, handler: ChangeHandler, channel_name: str = "listings-changes"):
        self.handler = handler
        self.channel_name = channel_name
        self._client: Any = None
        self._channel: Any = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def is_running(self) -> bool:
        return self._channel is not None

    async def start(self) -> None:
        if self._channel is not None:
            return

        self._client = await get_async_supabase_client()
        channel = self._client.channel(self.channel_name)
        channel.on_postgres_changes(
            "*",
            schema="public",
            table=AppConfig.LISTINGS_TABLE,
            callback=self._dispatch,
        )
        await channel.subscribe()
        self._channel = channel
        logger.info("Listing feed subscribed", channel=self.channel_name)

    async def stop(self) -> None:
        channel, self._channel = self._channel, None
        if channel is None:
            return

        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

        await self._client.remove_channel(channel)
        logger.info("Listing feed unsubscribed", channel=self.channel_name)

    def _dispatch(self, payload: Any) -> None:
        if self._channel is None:
            return

        change = parse_change_payload(payload)
        if change is None:
            logger.debug("Ignoring unrecognised realtime payload", channel=self.channel_name)
            return

        task = asyncio.get_running_loop().create_task(self._handle(change))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _handle(self, change: ListingChange) -> None:
        try:
            await self.handler(change)
        except Exception as e:
            # One bad event must not kill the subscription; the next full load corrects the log
            logger.error(
                "Error handling listing change",
                correlation_id=get_correlation_id(),
                kind=change.kind,
                listing_id=change.listing.id,
                error=str(e),
                exc_info=True,
            )
