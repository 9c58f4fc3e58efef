"""Diagnostics sink for recoverable config events.

Captures structured events (fallback to defaults, corrupt document, failed
save) into a bounded ring buffer so the Window Host can surface them, and
forwards each event to subscribers and to the module logger.

Design goals:
 - Headless testability (no Qt dependency here)
 - Capacity-bound ring buffer with O(1) append
 - Subscriber failures never break recording
 - Retrieval API returning immutable records
"""

from __future__ import annotations

import json
import logging
import os
import time
from collections import deque
from dataclasses import dataclass
from threading import RLock
from typing import Callable, Deque, List, Optional

__all__ = [
    "DiagnosticEvent",
    "DiagnosticsLog",
    "SECTION_MISSING",
    "SECTION_INVALID",
    "DOCUMENT_CORRUPT",
    "SAVE_FAILED",
    "STORE_UNAVAILABLE",
]

_logger = logging.getLogger(__name__)

# Event kinds
SECTION_MISSING = "section_missing"
SECTION_INVALID = "section_invalid"
DOCUMENT_CORRUPT = "document_corrupt"
SAVE_FAILED = "save_failed"
STORE_UNAVAILABLE = "store_unavailable"


@dataclass(frozen=True)
class DiagnosticEvent:
    kind: str
    message: str
    key: str | None = None
    cause: str | None = None
    created: float = 0.0

    def as_dict(self) -> dict:
        return {
            "kind": self.kind,
            "key": self.key,
            "message": self.message,
            "cause": self.cause,
            "created": self.created,
        }


Subscriber = Callable[[DiagnosticEvent], None]


class DiagnosticsLog:
    def __init__(self, capacity: int = 200) -> None:
        self._capacity = max(1, capacity)
        self._lock = RLock()
        self._entries: Deque[DiagnosticEvent] = deque(maxlen=self._capacity)
        self._subscribers: List[Subscriber] = []

    def record(
        self,
        kind: str,
        message: str,
        *,
        key: str | None = None,
        cause: BaseException | str | None = None,
    ) -> DiagnosticEvent:
        if isinstance(cause, BaseException):
            cause_text: str | None = f"{type(cause).__name__}: {cause}"
        else:
            cause_text = cause
        event = DiagnosticEvent(
            kind=kind, message=message, key=key, cause=cause_text, created=time.time()
        )
        with self._lock:
            self._entries.append(event)
            subscribers = list(self._subscribers)
        _logger.warning("%s: %s%s", kind, message, f" ({cause_text})" if cause_text else "")
        for callback in subscribers:
            try:
                callback(event)
            except Exception:  # noqa: BLE001 - one bad subscriber must not block the rest
                _logger.exception("Diagnostics subscriber failed for %s", kind)
        return event

    # Subscription -----------------------------------------------------
    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""
        with self._lock:
            self._subscribers.append(callback)

        def _cancel() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _cancel

    # Query ------------------------------------------------------------
    def recent(self, limit: Optional[int] = None) -> List[DiagnosticEvent]:
        with self._lock:
            data = list(self._entries)
        return data[-limit:] if limit is not None else data

    def filter(self, *, kind: str | None = None, key: str | None = None) -> List[DiagnosticEvent]:
        out: List[DiagnosticEvent] = []
        for e in self.recent():
            if kind and e.kind != kind:
                continue
            if key and e.key != key:
                continue
            out.append(e)
        return out

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # Export ------------------------------------------------------------
    def export_jsonl(self, path: str | os.PathLike[str], *, append: bool = False) -> int:
        """Export recorded events as JSON Lines.

        Returns number of lines written.
        """
        entries = self.recent()
        mode = "a" if append else "w"
        with open(path, mode, encoding="utf-8") as f:
            for e in entries:
                f.write(json.dumps(e.as_dict(), sort_keys=True) + "\n")
        return len(entries)
