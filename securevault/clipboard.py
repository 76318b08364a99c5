"""
clipboard.py - Copy secrets to the clipboard and clear them after a delay
"""
import logging
import threading
from typing import Callable, Optional

import pyperclip

logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]


def _daemon_timer(delay: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    return timer


class ClipboardManager:
    """Clipboard access with a fire-and-forget auto-clear timer"""

    def __init__(self, timer_factory: Optional[TimerFactory] = None):
        """
        Args:
            timer_factory: Builds the (unstarted) clear timer from
                (delay_seconds, callback); defaults to a daemon threading.Timer
        """
        self._timer_factory = timer_factory or _daemon_timer
        self._pending: Optional[threading.Timer] = None

    def copy(self, text: str) -> bool:
        try:
            pyperclip.copy(text)
            return True
        except pyperclip.PyperclipException as e:
            logger.warning("Failed to copy to clipboard: %s", e)
            return False

    def clear_if_unchanged(self, secret: str) -> bool:
        """
        Clear the clipboard, but only if it still holds `secret`.

        Safe to call any number of times; once the secret is gone it does nothing.
        """
        try:
            if pyperclip.paste() != secret:
                return False
            pyperclip.copy("")
        except pyperclip.PyperclipException as e:
            logger.warning("Failed to clear clipboard: %s", e)
            return False

        logger.info("Clipboard cleared for security.")
        return True

    def copy_with_auto_clear(self, secret: str, delay_seconds: float) -> bool:
        """
        Copy a secret and schedule it to be cleared.

        Args:
            secret: Text to put on the clipboard
            delay_seconds: Clear after this many seconds (0 = never clear)

        Returns:
            True if the copy succeeded
        """
        if not self.copy(secret):
            return False

        if delay_seconds > 0:
            timer = self._timer_factory(delay_seconds, lambda: self.clear_if_unchanged(secret))
            timer.start()
            self._pending = timer
        return True

    def wait(self) -> None:
        """Block until the most recently scheduled clear has run"""
        if self._pending is not None:
            self._pending.join()
            self._pending = None
