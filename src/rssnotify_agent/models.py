"""Data models for RSS Notify Agent."""

from dataclasses import dataclass

# Timestamp used for items that carry neither a published nor an updated date
NO_TIMESTAMP = 0

# Link used for items that carry no link, so the identity key is never empty
PLACEHOLDER_LINK = "http://example.com"


@dataclass(frozen=True)
class SourceDescriptor:
    """One configured feed, as read from the sources file."""

    url: str
    title_override: str = ""
    open_command: str = ""


@dataclass
class Entry:
    """A single feed item with its display metadata resolved."""

    feed_title: str
    open_command: str
    article_title: str
    timestamp: int = NO_TIMESTAMP
    link: str = PLACEHOLDER_LINK
    acknowledged: bool = False

    @property
    def key(self) -> tuple[int, str]:
        """Identity key used to decide whether an entry was already seen."""
        return (self.timestamp, self.link)
