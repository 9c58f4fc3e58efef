"""Background, coalescing config saver.

Window events (continuous resize, move) can request many saves in a short
burst. ``SaveCoalescer`` keeps disk I/O off the caller's thread and collapses
bursts: at most one save is in flight, and any number of requests arriving
meanwhile turn into a single follow-up save of the latest in-memory state.

Failures are reported through ``on_error`` (for ``ConfigError`` the store already
retried once and recorded a diagnostic); no exception escapes the worker thread,
so ``flush`` always returns.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from baseproject.app.errors import ConfigError
from baseproject.app.store import StoreGateway

__all__ = ["SaveCoalescer"]

_logger = logging.getLogger(__name__)


class SaveCoalescer:
    """Latest-wins save scheduler bound to one store.

    Usage
    -----
    saver = SaveCoalescer(store, on_error=show_warning)
    store.set(...); saver.request_save()
    ...
    saver.shutdown()  # flushes pending work by default
    """

    def __init__(
        self,
        store: StoreGateway,
        *,
        on_error: Optional[Callable[[Exception], None]] = None,
        on_saved: Optional[Callable[[], None]] = None,
        name: str = "config-saver",
    ) -> None:
        self._store = store
        self._on_error = on_error
        self._on_saved = on_saved
        self._cond = threading.Condition()
        self._pending = False
        self._busy = False
        self._stopping = False
        self.completed_saves = 0
        self.failed_saves = 0
        self.last_error: Exception | None = None
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def request_save(self) -> None:
        """Schedule a save of the current document. Never blocks on I/O."""
        with self._cond:
            if self._stopping:
                raise RuntimeError("SaveCoalescer has been shut down")
            self._pending = True
            self._cond.notify_all()

    @property
    def idle(self) -> bool:
        with self._cond:
            return not self._pending and not self._busy

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until no save is pending or running. Returns False on timeout."""
        with self._cond:
            return self._cond.wait_for(lambda: not self._pending and not self._busy, timeout)

    def shutdown(self, *, flush: bool = True, timeout: float | None = 5.0) -> None:
        """Stop the worker; pending work is written first when ``flush``."""
        with self._cond:
            if self._stopping:
                return
            if not flush:
                self._pending = False
            self._stopping = True
            self._cond.notify_all()
        self._thread.join(timeout)

    # ------------------------------------------------------------------
    # Worker
    # ------------------------------------------------------------------
    def _run(self) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._pending or self._stopping)
                if not self._pending:  # stopping with nothing left to write
                    self._cond.notify_all()
                    return
                self._pending = False
                self._busy = True
            try:
                self._save_once()
            finally:
                with self._cond:
                    self._busy = False
                    self._cond.notify_all()

    def _save_once(self) -> None:
        try:
            self._store.save()
        except ConfigError as exc:
            _logger.error("Background config save failed: %s", exc)
            self._record_failure(exc)
            return
        except Exception as exc:  # noqa: BLE001 - keep the worker alive
            _logger.exception("Unexpected error during background config save")
            self._record_failure(exc)
            return
        self.completed_saves += 1
        self._notify(self._on_saved)

    def _record_failure(self, exc: Exception) -> None:
        self.failed_saves += 1
        self.last_error = exc
        self._notify(self._on_error, exc)

    @staticmethod
    def _notify(callback, *args) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:  # noqa: BLE001 - callback failures stay in the worker
            _logger.exception("SaveCoalescer callback failed")
