"""Entry point for RSS Notify Agent: python -m rssnotify_agent"""

import argparse
import asyncio
import logging
import sys

from rssnotify_agent.config import ConfigError, Settings, load_sources
from rssnotify_agent.instance_lock import InstanceLock, InstanceLockError
from rssnotify_agent.notifier import Notifier, OpenCommandError
from rssnotify_agent.poller import start_polling
from rssnotify_agent.read_state import ReadStateError, ReadStateStore

logger = logging.getLogger("rssnotify_agent")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rssnotify",
        description="Show new feed entries as desktop notifications.",
    )
    parser.add_argument(
        "-a",
        "--mark-all-read",
        action="store_true",
        help="On the first cycle, mark every pending entry as read without notifying",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    # Quiet noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("desktop_notifier").setLevel(logging.WARNING)


async def run(settings: Settings, mark_all_first: bool) -> None:
    """Load sources and poll until the process is killed."""
    sources = load_sources(settings.sources_path)
    store = ReadStateStore(settings.read_state_path)
    notifier = Notifier(settings.app_name)
    await start_polling(settings, sources, store, notifier, mark_all_first)


def main(argv: list[str] | None = None) -> int:
    """Initialize and run the RSS Notify Agent."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    settings = Settings.from_env()
    try:
        settings.ensure_config_dir()
        with InstanceLock(settings.lock_path):
            asyncio.run(run(settings, args.mark_all_read))
    except InstanceLockError as e:
        print(e, file=sys.stderr)
        return 1
    except ConfigError as e:
        logger.error("%s", e)
        return 1
    except (ReadStateError, OpenCommandError) as e:
        logger.error("Fatal: %s", e)
        return 1
    except KeyboardInterrupt:
        print("\nGoodbye!")
    except Exception as e:
        logger.exception("Fatal: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
