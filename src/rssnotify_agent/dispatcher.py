"""Present unseen entries as notifications and record them as read."""

import logging

from rssnotify_agent.models import Entry
from rssnotify_agent.notifier import Notifier, open_link
from rssnotify_agent.read_state import ReadStateStore

logger = logging.getLogger(__name__)


def notification_title(entry: Entry, position: int, total: int) -> str:
    """Feed title, with an `(i/N)` suffix when the batch has several entries."""
    if total > 1:
        return f"{entry.feed_title} ({position}/{total})"
    return entry.feed_title


async def dispatch(
    entries: list[Entry],
    notifier: Notifier,
    store: ReadStateStore,
    limit: int | None = None,
) -> int:
    """Show entries oldest first and commit each one as soon as it is shown.

    The next entry is only shown once the user has clicked or dismissed the
    current one.

    Args:
        entries: Aggregated entries, most recent first.
        notifier: Presents one notification and returns an awaitable that
            resolves when the user is done with it.
        store: Read-state store receiving one record per shown entry.
        limit: Maximum number of entries to show this cycle. Entries past
            the limit stay unread and come back next cycle.

    Returns:
        Number of entries presented.
    """
    batch = list(reversed(entries))
    if limit is not None:
        batch = batch[:limit]

    total = len(batch)
    for position, entry in enumerate(batch, start=1):
        closed = await notifier.present(
            notification_title(entry, position, total),
            entry.article_title,
            lambda entry=entry: open_link(entry.open_command, entry.link),
        )
        # Showing the entry is what makes it read, not the click
        store.mark_read(entry)
        await closed

    if total:
        logger.info("Presented %d entries", total)
    return total
