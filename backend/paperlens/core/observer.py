"""Diagnostic events emitted while a document is ingested.

The extraction pipeline never prints or logs progress directly. It hands
events to an injectable observer so callers can route them to logging,
metrics, or nowhere at all.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from paperlens.core.logging import get_logger

logger = get_logger(__name__)


class EventKind(str, Enum):
    STAGE_ENTERED = "stage_entered"
    BATCH_COMPLETED = "batch_completed"
    BATCH_FAILED = "batch_failed"
    PAGE_FAILED = "page_failed"
    METADATA_FAILED = "metadata_failed"
    HEURISTIC_FAILED = "heuristic_failed"
    FALLBACK_BUILT = "fallback_built"
    EXTRACTION_COMPLETED = "extraction_completed"


@dataclass(frozen=True)
class ExtractionEvent:
    kind: EventKind
    filename: str
    stage: str
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ExtractionObserver(ABC):
    @abstractmethod
    def on_event(self, event: ExtractionEvent) -> None:
        """Receive one diagnostic event."""
        ...


class NullObserver(ExtractionObserver):
    def on_event(self, event: ExtractionEvent) -> None:
        pass


class LoggingObserver(ExtractionObserver):
    """Forwards events to the standard logging stack."""

    LEVELS = {
        EventKind.STAGE_ENTERED: logging.DEBUG,
        EventKind.BATCH_COMPLETED: logging.DEBUG,
        EventKind.BATCH_FAILED: logging.WARNING,
        EventKind.PAGE_FAILED: logging.WARNING,
        EventKind.METADATA_FAILED: logging.WARNING,
        EventKind.HEURISTIC_FAILED: logging.WARNING,
        EventKind.FALLBACK_BUILT: logging.ERROR,
        EventKind.EXTRACTION_COMPLETED: logging.INFO,
    }

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or get_logger("paperlens.extraction")

    def on_event(self, event: ExtractionEvent) -> None:
        level = self.LEVELS.get(event.kind, logging.INFO)
        details = " ".join(f"{k}={v}" for k, v in event.details.items())
        self.log.log(level, f"[{event.filename}] {event.stage}: {event.kind.value} {details}".rstrip())


class EventEmitter:
    """Binds an observer to a single ingestion call."""

    def __init__(self, observer: ExtractionObserver, filename: str):
        self.observer = observer
        self.filename = filename

    def emit(self, kind: EventKind, stage: str, **details: Any) -> None:
        try:
            self.observer.on_event(
                ExtractionEvent(kind=kind, filename=self.filename, stage=stage, details=details)
            )
        except Exception as e:
            logger.debug(f"Observer failed on {kind.value}: {e}")
