"""Progress sinks for deletion tasks.

A task reports each sub-step with next(), then ends with exactly one of
complete() or error(). The executor owns the terminal signals.
"""

from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class ProgressSink:
    """Receives progress notifications for one task. Default is a no-op."""

    def next(self, message: str) -> None:
        pass

    def complete(self) -> None:
        pass

    def error(self, message: str) -> None:
        pass


class LoggingProgress(ProgressSink):
    """Sends task progress to the module logger."""

    def __init__(self, title: str) -> None:
        self.title = title

    def next(self, message: str) -> None:
        logger.info(f"[{self.title}] {message}")

    def complete(self) -> None:
        logger.info(f"[{self.title}] done")

    def error(self, message: str) -> None:
        logger.error(f"[{self.title}] failed: {message}")


class RecordingProgress(ProgressSink):
    """Keeps every notification as an (event, message) pair."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Optional[str]]] = []

    def next(self, message: str) -> None:
        self.events.append(("next", message))

    def complete(self) -> None:
        self.events.append(("complete", None))

    def error(self, message: str) -> None:
        self.events.append(("error", message))

    @property
    def messages(self) -> list[str]:
        return [message for event, message in self.events if event == "next" and message is not None]

    @property
    def completed(self) -> bool:
        return ("complete", None) in self.events

    @property
    def failed(self) -> bool:
        return any(event == "error" for event, _ in self.events)
