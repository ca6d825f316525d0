"""Append-only record of entries already shown to the user."""

import logging
from pathlib import Path

from rssnotify_agent.models import Entry

logger = logging.getLogger(__name__)

Key = tuple[int, str]


class ReadStateError(Exception):
    """Raised when the read-state file cannot be written."""


class ReadStateStore:
    """Read-state log with one `epoch_seconds,link` line per read entry.

    The log is never rewritten: records are only appended. Duplicate lines
    may exist across restarts; a key counts as read if it appears at all.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> set[Key]:
        """Load every recorded key.

        A missing or unreadable file is empty. Malformed lines, including
        lines that are not valid UTF-8, are skipped one by one.
        """
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            return set()
        except OSError as e:
            logger.warning("Could not read %s, treating as empty: %s", self.path, e)
            return set()

        keys: set[Key] = set()
        for raw in data.splitlines():
            key = _parse_record(raw)
            if key is not None:
                keys.add(key)
        return keys

    def is_read(self, entry: Entry) -> bool:
        return entry.key in self.load()

    def mark_read(self, entry: Entry) -> bool:
        """Append the entry's key unless it is already recorded.

        Returns:
            True if a record was appended, False if the key was present.

        Raises:
            ReadStateError: If the record cannot be appended.
        """
        if self.is_read(entry):
            return False
        self._append(_format_record(entry.key))
        return True

    def mark_all_read(self, entries: list[Entry]) -> int:
        """Record every entry not yet acknowledged in a single write.

        Sets `acknowledged` on each entry written. Returns the number of
        records appended.

        Raises:
            ReadStateError: If the records cannot be appended.
        """
        lines = []
        written: set[Key] = set()
        for entry in entries:
            if entry.acknowledged:
                continue
            entry.acknowledged = True
            if entry.key in written:
                continue
            written.add(entry.key)
            lines.append(_format_record(entry.key))

        if lines:
            self._append("".join(lines))
        return len(lines)

    def _append(self, data: str) -> None:
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(data)
                f.flush()
        except OSError as e:
            raise ReadStateError(f"Could not append to {self.path}: {e}") from e


# --- Helper functions ---


def _format_record(key: Key) -> str:
    timestamp, link = key
    return f"{timestamp},{link}\n"


def _parse_record(raw: bytes) -> Key | None:
    """Parse one record line, returning None for malformed lines."""
    try:
        line = raw.decode("utf-8")
    except UnicodeDecodeError:
        return None
    timestamp, sep, link = line.strip().partition(",")
    if not sep:
        return None
    try:
        return (int(timestamp), link)
    except ValueError:
        return None
