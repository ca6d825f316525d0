"""Runtime settings and the sources file reader."""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from rssnotify_agent.models import SourceDescriptor

logger = logging.getLogger(__name__)

APP_NAME = "rssnotify"
DEFAULT_POLL_INTERVAL = 60
DEFAULT_MAX_NOTIFICATIONS = 100
DEFAULT_HTTP_TIMEOUT = 30.0

SOURCES_FILENAME = "urls"
READ_STATE_FILENAME = "read"
LOCK_FILENAME = "lock"


class ConfigError(Exception):
    """Raised when the agent cannot be configured at startup."""


def default_open_command() -> str:
    """Return the command the platform uses to open a URL."""
    if sys.platform == "darwin":
        return "open"
    return "xdg-open"


def default_config_dir() -> Path:
    """Resolve the configuration directory from the environment."""
    override = os.environ.get("RSSNOTIFY_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".config"
    return base / APP_NAME


def poll_interval_from_env() -> int:
    """Read the poll interval override, falling back to the default."""
    raw = os.environ.get("RSSNOTIFY_POLL_INTERVAL", "")
    try:
        interval = int(raw)
    except ValueError:
        return DEFAULT_POLL_INTERVAL
    if interval <= 0:
        return DEFAULT_POLL_INTERVAL
    return interval


@dataclass(frozen=True)
class Settings:
    """Configuration built once at startup and passed to each component."""

    config_dir: Path
    poll_interval: int = DEFAULT_POLL_INTERVAL
    max_notifications: int = DEFAULT_MAX_NOTIFICATIONS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    app_name: str = APP_NAME

    @property
    def sources_path(self) -> Path:
        return self.config_dir / SOURCES_FILENAME

    @property
    def read_state_path(self) -> Path:
        return self.config_dir / READ_STATE_FILENAME

    @property
    def lock_path(self) -> Path:
        return self.config_dir / LOCK_FILENAME

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            config_dir=default_config_dir(),
            poll_interval=poll_interval_from_env(),
        )

    def ensure_config_dir(self) -> None:
        """Create the configuration directory if it does not exist.

        Raises:
            ConfigError: If the directory cannot be created.
        """
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(
                f"Could not create configuration directory {self.config_dir}: {e}"
            ) from e


def parse_source_line(line: str) -> SourceDescriptor:
    """Parse one `url[,title[,command]]` line into a SourceDescriptor."""
    fields = [field.strip() for field in line.strip().split(",", 2)]
    while len(fields) < 3:
        fields.append("")
    url, title, command = fields
    return SourceDescriptor(
        url=url,
        title_override=title,
        open_command=command or default_open_command(),
    )


def load_sources(path: Path) -> list[SourceDescriptor]:
    """Read the sources file, skipping blank lines and `#` comments.

    Raises:
        ConfigError: If the file cannot be read.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"create file {path} and add your feeds in it") from e

    sources = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        sources.append(parse_source_line(stripped))

    logger.debug("Loaded %d sources from %s", len(sources), path)
    return sources
