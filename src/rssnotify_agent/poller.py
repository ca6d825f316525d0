"""Background polling loop for RSS Notify Agent."""

import asyncio
import logging

from rssnotify_agent.aggregator import aggregate, create_client
from rssnotify_agent.config import Settings
from rssnotify_agent.dispatcher import dispatch
from rssnotify_agent.models import SourceDescriptor
from rssnotify_agent.notifier import Notifier
from rssnotify_agent.read_state import ReadStateStore

logger = logging.getLogger(__name__)


async def run_cycle(
    settings: Settings,
    sources: list[SourceDescriptor],
    store: ReadStateStore,
    notifier: Notifier,
    bootstrap: bool = False,
) -> int:
    """Run one fetch-aggregate-dispatch cycle.

    In bootstrap mode nothing is shown: every pending entry is recorded as
    read in one batch instead.

    Returns:
        Number of entries presented, or acknowledged when bootstrapping.
    """
    notifier.check()
    with create_client(settings.http_timeout) as client:
        entries = await aggregate(sources, store, client)

    if bootstrap:
        count = store.mark_all_read(entries)
        logger.info("Marked %d pending entries as read", count)
        return count

    return await dispatch(entries, notifier, store, limit=settings.max_notifications)


async def start_polling(
    settings: Settings,
    sources: list[SourceDescriptor],
    store: ReadStateStore,
    notifier: Notifier,
    mark_all_first: bool = False,
) -> None:
    """Run the polling loop indefinitely.

    Errors from the read-state store or the open command propagate and stop
    the loop.
    """
    logger.info(
        "Poller started (%d sources, interval: %ds)",
        len(sources),
        settings.poll_interval,
    )

    if mark_all_first:
        await run_cycle(settings, sources, store, notifier, bootstrap=True)

    while True:
        await run_cycle(settings, sources, store, notifier)
        await asyncio.sleep(settings.poll_interval)
