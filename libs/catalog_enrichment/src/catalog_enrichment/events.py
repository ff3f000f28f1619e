"""Typed fetch events and the observers that receive them.

The HTTP client reports every attempt and the category fetcher reports every
cache lookup through a `FetchObserver`, so instrumentation can be swapped
(logging, recording, metrics) without touching the fetch code.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Kinds of events emitted while fetching catalog data."""

    ATTEMPT_STARTED = "attempt_started"
    ATTEMPT_FAILED = "attempt_failed"
    CACHE_HIT = "cache_hit"
    CACHE_MISS = "cache_miss"


@dataclass(frozen=True)
class FetchEvent:
    """A single fetch event.

    Attributes:
        kind: What happened.
        source: Data source label ("products", "categories", "inventory").
        key: Request URL for attempt events, category id for cache events.
        attempt: 1-based attempt number (attempt events only).
        max_attempts: Total attempts allowed (attempt events only).
        error: Failure description (ATTEMPT_FAILED only).
    """

    kind: EventKind
    source: str
    key: str
    attempt: int | None = None
    max_attempts: int | None = None
    error: str | None = None


class FetchObserver(ABC):
    """Receives fetch events. Implementations must not raise."""

    @abstractmethod
    def on_event(self, event: FetchEvent) -> None:
        pass


class NullObserver(FetchObserver):
    def on_event(self, event: FetchEvent) -> None:
        return None


class LoggingObserver(FetchObserver):
    """Default observer: writes events to the module logger."""

    def on_event(self, event: FetchEvent) -> None:
        if event.kind is EventKind.ATTEMPT_FAILED:
            logger.warning(
                f"{event.source} attempt {event.attempt}/{event.max_attempts} failed for {event.key}: {event.error}"
            )
        elif event.kind is EventKind.ATTEMPT_STARTED:
            logger.debug(
                f"{event.source} attempt {event.attempt}/{event.max_attempts}: {event.key}"
            )
        else:
            logger.debug(f"{event.source} {event.kind.value}: {event.key}")


class RecordingObserver(FetchObserver):
    """Keeps every event in memory, in arrival order."""

    def __init__(self) -> None:
        self.events: list[FetchEvent] = []

    def on_event(self, event: FetchEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: EventKind) -> list[FetchEvent]:
        return [event for event in self.events if event.kind is kind]
