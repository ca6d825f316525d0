"""Merge entries from every source into one ordered queue of unseen items."""

import asyncio
import logging
from collections.abc import Callable

import httpx

from rssnotify_agent.feed_parser import USER_AGENT, fetch_entries
from rssnotify_agent.models import Entry, SourceDescriptor
from rssnotify_agent.read_state import ReadStateStore

logger = logging.getLogger(__name__)

FetchFunc = Callable[[SourceDescriptor, httpx.Client], list[Entry]]


def create_client(timeout: float) -> httpx.Client:
    """Create the HTTP client shared by one cycle's fetches."""
    return httpx.Client(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


async def fetch_all(
    sources: list[SourceDescriptor],
    client: httpx.Client,
    fetch: FetchFunc = fetch_entries,
) -> list[Entry]:
    """Fetch every source concurrently and concatenate the results.

    Waits for all fetches before returning. A fetch that raises
    unexpectedly contributes nothing, like any other broken source.
    """
    results = await asyncio.gather(
        *(asyncio.to_thread(fetch, source, client) for source in sources),
        return_exceptions=True,
    )

    entries: list[Entry] = []
    for source, result in zip(sources, results):
        if isinstance(result, BaseException):
            logger.warning("Feed '%s' unexpected error: %s", source.url, result)
            continue
        entries.extend(result)
    return entries


def filter_unread(entries: list[Entry], read_keys: set[tuple[int, str]]) -> list[Entry]:
    """Drop every entry whose identity key is already recorded."""
    return [entry for entry in entries if entry.key not in read_keys]


def sort_entries(entries: list[Entry]) -> list[Entry]:
    """Order by timestamp, then article title, then feed title, all descending."""
    return sorted(
        entries,
        key=lambda e: (e.timestamp, e.article_title, e.feed_title),
        reverse=True,
    )


def deduplicate(entries: list[Entry]) -> list[Entry]:
    """Keep only the first entry for each identity key, preserving order."""
    seen: set[tuple[int, str]] = set()
    unique = []
    for entry in entries:
        if entry.key in seen:
            continue
        seen.add(entry.key)
        unique.append(entry)
    return unique


async def aggregate(
    sources: list[SourceDescriptor],
    store: ReadStateStore,
    client: httpx.Client,
    fetch: FetchFunc = fetch_entries,
) -> list[Entry]:
    """Run one fetch-filter-sort pass over all sources.

    Returns:
        Unseen entries, most recent first.
    """
    entries = await fetch_all(sources, client, fetch)
    unread = filter_unread(entries, store.load())
    ordered = deduplicate(sort_entries(unread))
    logger.debug(
        "Aggregated %d entries, %d unread", len(entries), len(ordered)
    )
    return ordered
