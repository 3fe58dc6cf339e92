"""Notification egress module - persistent notification center and transient toasts"""
import itertools
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

# Recently shown toasts kept for inspection
TOAST_HISTORY_SIZE = 50


class EventKind(str, Enum):
    """What went wrong, as classified by the fetcher."""
    NETWORK = "network"
    AUTH_EXPIRED = "auth_expired"
    LIVE_FAILED = "live_failed"
    HISTORY_FAILED = "history_failed"
    SEVEN_DAY_FAILED = "seven_day_failed"


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class FetchEvent:
    """
    A classified notice emitted by a data fetcher.

    Attributes:
        kind: Failure class, used by the routing policy.
        message: Text shown to the user.
        severity: Display level.
        key: Toast identity; a toast with the same key replaces the previous one.
    """
    kind: EventKind
    message: str
    severity: Severity = Severity.ERROR
    key: str | None = None


class NotificationCenter:
    """Persistent list of notices the user reads and clears at their own pace."""

    def __init__(self):
        self.entries: list[FetchEvent] = []

    def add(self, event: FetchEvent) -> None:
        self.entries.append(event)
        logger.warning(f"Notification: [{event.severity.value}] {event.message}")

    def clear(self) -> None:
        self.entries.clear()


class ToastSink:
    """
    Transient popups.

    Keyed toasts are one-shot: showing a key that is already on screen
    replaces it instead of stacking a duplicate.
    """

    def __init__(self, history_size: int = TOAST_HISTORY_SIZE):
        self.active: dict[str, FetchEvent] = {}
        self.shown: deque[FetchEvent] = deque(maxlen=history_size)
        self._counter = itertools.count()

    def show(self, event: FetchEvent) -> None:
        key = event.key or f"{event.kind.value}:{next(self._counter)}"
        replaced = key in self.active
        self.active[key] = event
        self.shown.append(event)
        if not replaced:
            logger.warning(f"Toast: [{event.severity.value}] {event.message}")

    def dismiss(self, key: str) -> None:
        self.active.pop(key, None)


class NotificationRouter:
    """
    Routing policy from fetch events to sinks.

    Network failures repeat on every poll while the backend is down, so they
    go to the persistent center; everything else is a transient toast.
    """

    def __init__(self, center: NotificationCenter | None = None, toasts: ToastSink | None = None):
        self.center = center or NotificationCenter()
        self.toasts = toasts or ToastSink()

    def __call__(self, event: FetchEvent) -> None:
        if event.kind is EventKind.NETWORK:
            self.center.add(event)
        else:
            self.toasts.show(event)
