"""Desktop notifications and the external link opener."""

import asyncio
import logging
import subprocess
from collections.abc import Callable

from desktop_notifier import DesktopNotifier

logger = logging.getLogger(__name__)

DEFAULT_ACTION = "default"

# Expiry of 0 asks the notification server to keep the notification until
# the user acts on it
NEVER_EXPIRE = 0


class OpenCommandError(Exception):
    """Raised when the configured open command cannot be started."""


def open_link(command: str, link: str) -> None:
    """Start `command link` without waiting, discarding its output.

    Raises:
        OpenCommandError: If the process cannot be spawned.
    """
    try:
        subprocess.Popen(
            [command, link],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        raise OpenCommandError(f"Failed to spawn '{command}': {e}") from e
    logger.debug("Opened %s with %s", link, command)


class Notifier:
    """Shows interactive notifications through the desktop's notification service.

    Each notification exposes one action, "default" (clicking it), and never
    expires on its own. Action callbacks run on the event loop after
    `present` has returned, so errors raised by them are kept and re-raised
    from `check()`.
    """

    def __init__(self, app_name: str):
        self._backend = DesktopNotifier(app_name=app_name)
        self._failures: list[OpenCommandError] = []

    async def present(
        self, title: str, body: str, on_default: Callable[[], None]
    ) -> asyncio.Future:
        """Show one notification.

        Returns once it is displayed, with a future that resolves when the
        user clicks or dismisses it.
        """
        self.check()
        loop = asyncio.get_running_loop()
        closed = loop.create_future()

        def resolve() -> None:
            loop.call_soon_threadsafe(_set_done, closed)

        await self._backend.send(
            title=title,
            message=body,
            on_clicked=self._guard(on_default, resolve),
            on_dismissed=resolve,
            timeout=NEVER_EXPIRE,
        )
        return closed

    def check(self) -> None:
        """Re-raise the first failure from an action callback, if any."""
        if self._failures:
            raise self._failures.pop(0)

    def _guard(
        self, action: Callable[[], None], done: Callable[[], None]
    ) -> Callable[[], None]:
        def run() -> None:
            logger.debug("Notification action '%s' triggered", DEFAULT_ACTION)
            try:
                action()
            except OpenCommandError as e:
                logger.error("%s", e)
                self._failures.append(e)
            finally:
                done()

        return run


def _set_done(future: asyncio.Future) -> None:
    if not future.done():
        future.set_result(None)
