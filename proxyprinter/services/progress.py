"""
Progress broadcasting.

Stages report progress through a StageReporter bound to their stage. The
broadcaster tags each report with that stage and forwards it, unchanged and
immediately, to every subscribed listener.
"""

import logging
from collections.abc import Callable
from typing import Protocol

from proxyprinter.models.progress import ProgressEvent, ProgressListener, ProgressStage

logger = logging.getLogger(__name__)


class StageReporter(Protocol):
    """Callable a stage uses to report progress."""

    def __call__(self, percent: float | None, error_message: str | None = None) -> None: ...


def percent_of(done: int, total: int) -> float:
    """Percentage of total completed, clamped to 0-100."""
    if total <= 0:
        return 100.0
    return min(100.0, done / total * 100)


class ProgressBroadcaster:
    """
    Fan-out of ProgressEvents to subscribed listeners.

    Pure forwarding: no buffering, no coalescing, duplicates are delivered.
    """

    def __init__(self) -> None:
        self._listeners: list[ProgressListener] = []

    def subscribe(self, listener: ProgressListener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, event: ProgressEvent) -> None:
        """Deliver an event to every listener in subscription order."""
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Progress listener failed on %s", event)

    def reporter(self, stage: ProgressStage) -> StageReporter:
        """Return a reporter that tags events with the given stage."""

        def report(percent: float | None, error_message: str | None = None) -> None:
            self.notify(ProgressEvent(stage=stage, percent=percent, error_message=error_message))

        return report
