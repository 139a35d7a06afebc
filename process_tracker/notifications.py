"""
User-facing notification port.

The host decides how messages are shown (toasts, status bar, dialogs).
The tracker only needs somewhere to send information and error messages.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Notifier(Protocol):
    """Host notification mechanism."""

    def show_info(self, message: str) -> None: ...

    def show_error(self, message: str) -> None: ...


class LoggingNotifier:
    """Notifier that routes user-facing messages to a logger.

    Used when the host provides no notification surface.
    """

    def __init__(self, target: logging.Logger | None = None) -> None:
        self._logger = target or logger

    def show_info(self, message: str) -> None:
        self._logger.info(message)

    def show_error(self, message: str) -> None:
        self._logger.error(message)
