"""Execution engine and progress reporting."""

from .engine import DIRECT_CALL_TOOL, ExecutionEngine
from .events import (
    EventKind,
    EventRecorder,
    ProgressBroadcaster,
    ProgressEvent,
    ProgressObserver,
    QueueObserver,
    Stage,
)

__all__ = [
    "DIRECT_CALL_TOOL",
    "EventKind",
    "EventRecorder",
    "ExecutionEngine",
    "ProgressBroadcaster",
    "ProgressEvent",
    "ProgressObserver",
    "QueueObserver",
    "Stage",
]
