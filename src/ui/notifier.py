"""User-facing notifications."""
import logging
from typing import Protocol

from nicegui import ui

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...


class NiceGuiNotifier:
    """Toast notifications through ``ui.notify``.

    Pass the page's content element as *container* when notifications may be
    raised from background tasks (debounced search, timers), which run
    outside the page's slot context.
    """

    _TYPES = {
        "success": "positive",
        "warning": "warning",
        "error": "negative",
        "info": "info",
    }

    def __init__(self, container: ui.element | None = None):
        self._container = container

    def _notify(self, level: str, message: str) -> None:
        try:
            if self._container is not None:
                with self._container:
                    ui.notify(message, type=self._TYPES[level])
            else:
                ui.notify(message, type=self._TYPES[level])
        except RuntimeError:
            # No client context left (page closed); keep the message in the log
            logger.info("Dropped %s notification: %s", level, message)

    def success(self, message: str) -> None:
        self._notify("success", message)

    def warning(self, message: str) -> None:
        self._notify("warning", message)

    def error(self, message: str) -> None:
        self._notify("error", message)

    def info(self, message: str) -> None:
        self._notify("info", message)
