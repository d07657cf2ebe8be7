"""Typed progress events emitted while an execution runs."""

from __future__ import annotations

import logging
import queue
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    STAGE = "STAGE"
    SUBMITTED = "SUBMITTED"
    CONFIRMED = "CONFIRMED"
    ERROR = "ERROR"


class Stage(str, Enum):
    """States of one execution attempt."""

    START = "START"
    APPROVING = "APPROVING"
    SUBMITTING = "SUBMITTING"
    CONFIRMING = "CONFIRMING"
    DONE = "DONE"
    PENDING = "PENDING"
    FAILED = "FAILED"


@dataclass(frozen=True)
class ProgressEvent:
    kind: EventKind
    stage: Stage
    chain_id: int
    tx_hash: str | None = None
    details: Mapping[str, Any] = field(default_factory=dict)


class ProgressObserver(Protocol):
    def on_event(self, event: ProgressEvent) -> None: ...


class ProgressBroadcaster:
    """Fan events out to observers; observer failures never reach the caller."""

    def __init__(self, observers: Iterable[ProgressObserver] = ()) -> None:
        self._observers = list(observers)

    def subscribe(self, observer: ProgressObserver) -> None:
        self._observers.append(observer)

    def unsubscribe(self, observer: ProgressObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def emit(self, event: ProgressEvent) -> None:
        for observer in tuple(self._observers):
            try:
                observer.on_event(event)
            except Exception:
                logger.exception("Progress observer %r failed on %s", observer, event.kind.value)


class EventRecorder:
    """Keep every event in order; handy in tests and scripts."""

    def __init__(self) -> None:
        self.events: list[ProgressEvent] = []

    def on_event(self, event: ProgressEvent) -> None:
        self.events.append(event)

    def kinds(self) -> list[EventKind]:
        return [event.kind for event in self.events]

    def stages(self) -> list[Stage]:
        return [event.stage for event in self.events if event.kind is EventKind.STAGE]


class QueueObserver:
    """Push events onto a queue so another thread can consume them."""

    def __init__(self, channel: queue.Queue[ProgressEvent] | None = None) -> None:
        self.channel: queue.Queue[ProgressEvent] = channel if channel is not None else queue.Queue()

    def on_event(self, event: ProgressEvent) -> None:
        self.channel.put_nowait(event)
