"""RSS/Atom feed fetching and normalization using httpx and feedparser."""

import calendar
import logging
from time import struct_time

import feedparser
import httpx

from rssnotify_agent.models import NO_TIMESTAMP, PLACEHOLDER_LINK, Entry, SourceDescriptor

logger = logging.getLogger(__name__)

USER_AGENT = "rssnotify-agent/0.1"


class FeedParseError(Exception):
    """Raised when a fetched document is not a usable feed."""


def fetch_entries(source: SourceDescriptor, client: httpx.Client) -> list[Entry]:
    """Fetch one source and normalize its items into entries.

    Never raises for network or parse problems: a broken source simply
    contributes no entries to the current cycle.
    """
    try:
        content = _fetch(source.url, client)
    except httpx.HTTPError as e:
        logger.warning("Feed '%s' fetch failed: %s", source.url, e)
        return []

    try:
        parsed = parse_feed(content)
    except FeedParseError as e:
        logger.warning("Feed '%s' parse failed: %s", source.url, e)
        return []

    feed_title = source.title_override or parsed.feed.get("title", "")
    entries = [
        _to_entry(item, feed_title, source.open_command)
        for item in parsed.entries
    ]
    logger.debug("Feed '%s': %d entries", feed_title or source.url, len(entries))
    return entries


def parse_feed(content: bytes) -> feedparser.FeedParserDict:
    """Parse raw feed bytes.

    Raises:
        FeedParseError: If the document is not an RSS or Atom feed.
    """
    parsed = feedparser.parse(content)

    if not parsed.entries and (parsed.bozo or not parsed.get("version")):
        reason = parsed.get("bozo_exception") or "no feed version detected"
        raise FeedParseError(f"Document is not a valid RSS or Atom feed: {reason}")

    if parsed.bozo:
        logger.debug("Feed has formatting issues: %s", parsed.bozo_exception)

    return parsed


def _fetch(url: str, client: httpx.Client) -> bytes:
    response = client.get(url)
    response.raise_for_status()
    return response.content


def _to_entry(item: dict, feed_title: str, open_command: str) -> Entry:
    """Convert a feedparser entry into an Entry."""
    return Entry(
        feed_title=feed_title,
        open_command=open_command,
        article_title=item.get("title", ""),
        timestamp=_resolve_timestamp(item),
        link=item.get("link") or PLACEHOLDER_LINK,
    )


def _resolve_timestamp(item: dict) -> int:
    """Published time, then updated time, then the sentinel."""
    for field in ("published_parsed", "updated_parsed"):
        time_struct = item.get(field)
        if isinstance(time_struct, struct_time):
            try:
                # feedparser normalizes dates to UTC
                return calendar.timegm(time_struct)
            except (ValueError, OverflowError):
                continue
    return NO_TIMESTAMP
