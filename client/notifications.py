"""
client/notifications.py
Benachrichtigungen (Toasts) mit automatischem Ablauf.
Notifications (toasts) that expire automatically.
"""

import itertools
import logging
import time
from typing import List, NamedTuple, Optional

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 4.0  # Sekunden / seconds
TOAST_TYPES = ('success', 'error', 'warning', 'info')


class Toast(NamedTuple):
    id: int
    message: str
    type: str
    duration: float
    created_at: float


class Notifier:
    """
    Eine Instanz pro Anwendung; wird in Views und den Editor hineingereicht.
    Dauer 0 bedeutet: bleibt bis hide() oder clear().

    One instance per application; passed into the views and the editor.
    A duration of 0 means: stays until hide() or clear().
    """

    def __init__(self, clock=time.monotonic, default_duration: float = DEFAULT_DURATION):
        self._clock = clock
        self._default_duration = default_duration
        self._ids = itertools.count(1)
        self._toasts: List[Toast] = []

    def show(self, message: str, type: str = 'info', duration: Optional[float] = None) -> int:
        if type not in TOAST_TYPES:
            type = 'info'
        toast = Toast(next(self._ids), message, type,
                      self._default_duration if duration is None else duration, self._clock())
        self._toasts.append(toast)
        logger.log(logging.ERROR if type == 'error' else logging.INFO, f"[{type}] {message}")
        return toast.id

    def hide(self, toast_id: int) -> None:
        self._toasts = [toast for toast in self._toasts if toast.id != toast_id]

    def success(self, message: str, duration: Optional[float] = None) -> int:
        return self.show(message, 'success', duration)

    def error(self, message: str, duration: Optional[float] = None) -> int:
        return self.show(message, 'error', duration)

    def warning(self, message: str, duration: Optional[float] = None) -> int:
        return self.show(message, 'warning', duration)

    def info(self, message: str, duration: Optional[float] = None) -> int:
        return self.show(message, 'info', duration)

    def clear(self) -> None:
        self._toasts = []

    @property
    def toasts(self) -> List[Toast]:
        """
        Aktive Toasts; abgelaufene werden dabei entfernt.
        Active toasts; expired ones are dropped on access.
        """
        now = self._clock()
        self._toasts = [toast for toast in self._toasts
                        if toast.duration <= 0 or now - toast.created_at < toast.duration]
        return list(self._toasts)
