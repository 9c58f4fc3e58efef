"""Store gateway: owns the on-disk config document.

The document is a single JSON object loaded and saved as a whole. One
``StoreGateway`` instance is created at startup and handed to every caller
that needs it; there is no module-level store.

Behavior summary:
- ``open`` creates the config directory, then reads the document. A missing
  file gives an empty document; an unreadable or unparseable file is moved
  aside (``<name>.corrupt.<timestamp>``) and also gives an empty document.
- ``get`` / ``set`` work on the in-memory copy only and never touch disk.
- ``save`` writes a sibling ``.tmp`` file, fsyncs it and replaces the target,
  so the document on disk is either the old one or the new one. One retry.
"""

from __future__ import annotations

import contextlib
from datetime import datetime, timezone
from enum import Enum
import json
import logging
import os
from pathlib import Path
from threading import Lock, RLock
import time
from typing import Any, Dict, Iterable, Optional

import platformdirs

from baseproject.services.diagnostics import (
    DOCUMENT_CORRUPT,
    SAVE_FAILED,
    DiagnosticsLog,
)
from .errors import StoreClosedError, StoreIOError, StoreWriteError
from .schema import APP_NAME, CONFIG_FILENAME

__all__ = [
    "StoreGateway",
    "default_config_dir",
    "default_config_path",
    "CONFIG_DIR_ENV",
    "SAVE_ATTEMPTS",
    "SAVE_RETRY_DELAY_S",
]

_logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "BASEPROJECT_CONFIG_DIR"
SAVE_ATTEMPTS = 2  # first try plus one bounded retry
SAVE_RETRY_DELAY_S = 0.05


def default_config_dir() -> Path:
    """Per-user configuration directory (env override first)."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    return Path(platformdirs.user_config_dir(APP_NAME, appauthor=False))


def default_config_path() -> Path:
    return default_config_dir() / CONFIG_FILENAME


def _key(key: Any) -> str:
    return key.value if isinstance(key, Enum) else str(key)


def _clone(value: Any) -> Any:
    # JSON round trip: deep copy that also rejects values the document cannot hold
    return json.loads(json.dumps(value, ensure_ascii=False, allow_nan=False))


def _atomic_write(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as fh:
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp, path)
    except OSError:
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise


class StoreGateway:
    """In-memory config document with atomic whole-document persistence.

    Thread Safety
    -------------
    ``get``/``set`` are guarded by a re-entrant lock. ``save`` snapshots the
    document under that lock and performs disk I/O under a separate save
    lock, so a ``set`` issued while a save is running is not blocked by disk
    I/O and is picked up by the next save.
    """

    def __init__(
        self,
        path: Path | None,
        data: Dict[str, Any] | None = None,
        *,
        diagnostics: DiagnosticsLog | None = None,
    ) -> None:
        self._path = path
        self._data: Dict[str, Any] = dict(data or {})
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsLog()
        self._lock = RLock()
        self._save_lock = Lock()
        self._closed = False
        self._generation = 0  # bumped by every set
        self._saved_generation = 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def open(
        cls, path: str | os.PathLike[str], *, diagnostics: DiagnosticsLog | None = None
    ) -> "StoreGateway":
        """Open the document at ``path``; nothing is written to disk.

        Unreadable and corrupt documents are moved aside and treated as
        absent. Raises ``StoreIOError`` when the config directory cannot be
        created, or when a bad document cannot be moved aside.
        """
        target = Path(path)
        diag = diagnostics if diagnostics is not None else DiagnosticsLog()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreIOError(f"Cannot create config directory {target.parent}: {exc}") from exc
        data = cls._read_document(target, diag)
        _logger.debug("Opened config document %s (%d keys)", target, len(data))
        return cls(target, data, diagnostics=diag)

    @classmethod
    def in_memory(
        cls,
        data: Dict[str, Any] | None = None,
        *,
        diagnostics: DiagnosticsLog | None = None,
    ) -> "StoreGateway":
        """Store with no backing file; ``save`` is a no-op."""
        return cls(None, _clone(data or {}), diagnostics=diagnostics)

    @staticmethod
    def _read_document(path: Path, diagnostics: DiagnosticsLog) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            raw = path.read_bytes()
        except OSError as exc:
            StoreGateway._set_aside(
                path, diagnostics, f"Config document {path} could not be read", exc
            )
            return {}
        try:
            obj = json.loads(raw.decode("utf-8"))
        except ValueError as exc:
            StoreGateway._set_aside(
                path, diagnostics, f"Config document {path} is not valid JSON", exc
            )
            return {}
        if not isinstance(obj, dict):
            StoreGateway._set_aside(
                path,
                diagnostics,
                f"Config document {path} root is {type(obj).__name__}, expected object",
            )
            return {}
        return obj

    @staticmethod
    def _set_aside(
        path: Path, diagnostics: DiagnosticsLog, message: str, cause: BaseException | None = None
    ) -> None:
        """Record a corrupt document and move it out of the way.

        Raises ``StoreIOError`` when the file cannot be moved: it stays in
        place and the caller must not reseed over it.
        """
        diagnostics.record(DOCUMENT_CORRUPT, message, cause=cause)
        if StoreGateway._backup_corrupt(path) is None:
            raise StoreIOError(f"{message}; could not move it aside") from cause

    @staticmethod
    def _backup_corrupt(path: Path) -> Optional[Path]:
        """Move a corrupt document aside so a later save does not destroy it.

        Best-effort; returns the backup path or None.
        """
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        backup = path.with_name(f"{path.name}.corrupt.{stamp}")
        i = 1
        while backup.exists() and i < 10:
            backup = path.with_name(f"{path.name}.corrupt.{stamp}.{i}")
            i += 1
        try:
            os.replace(path, backup)
        except OSError as exc:
            _logger.warning("Could not back up corrupt config %s: %s", path, exc)
            return None
        _logger.info("Corrupt config moved to %s", backup)
        return backup

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def is_persistent(self) -> bool:
        return self._path is not None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dirty(self) -> bool:
        with self._lock:
            return self._generation != self._saved_generation

    # ------------------------------------------------------------------
    # Document access
    # ------------------------------------------------------------------
    def get(self, key: str) -> Any:
        """Raw stored value for ``key`` (deep copy) or None when absent."""
        with self._lock:
            value = self._data.get(_key(key))
            return None if value is None else _clone(value)

    def has(self, key: str) -> bool:
        with self._lock:
            return _key(key) in self._data

    def keys(self) -> Iterable[str]:
        with self._lock:
            return list(self._data.keys())

    def document(self) -> Dict[str, Any]:
        """Deep copy of the whole in-memory document."""
        with self._lock:
            return _clone(self._data)

    def set(self, key: str, value: Any) -> None:
        """Replace the in-memory value for ``key``. Does not touch disk.

        Section records (anything with ``to_dict``) are stored in their
        canonical dict form. Raises ``TypeError`` for values JSON cannot hold
        and ``ValueError`` for NaN or infinite floats.
        """
        if hasattr(value, "to_dict"):
            value = value.to_dict()
        stored = _clone(value)
        with self._lock:
            self._ensure_open()
            self._data[_key(key)] = stored
            self._generation += 1

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def save(self) -> None:
        """Persist the whole document atomically.

        Raises ``StoreWriteError`` after the retry is exhausted; the
        in-memory document and the previous file on disk are left intact.
        """
        with self._save_lock:
            with self._lock:
                self._ensure_open()
                generation = self._generation
                payload = json.dumps(self._data, indent=2, ensure_ascii=False, allow_nan=False)
            if self._path is None:
                _logger.debug("In-memory config store; save skipped")
                self._mark_saved(generation)
                return
            last_exc: OSError | None = None
            for attempt in range(SAVE_ATTEMPTS):
                try:
                    _atomic_write(self._path, payload)
                    break
                except OSError as exc:
                    last_exc = exc
                    _logger.debug("Config save attempt %d failed: %s", attempt + 1, exc)
                    if attempt + 1 < SAVE_ATTEMPTS:
                        time.sleep(SAVE_RETRY_DELAY_S)
            else:
                self.diagnostics.record(
                    SAVE_FAILED, f"Config document {self._path} could not be saved", cause=last_exc
                )
                raise StoreWriteError(f"Saving {self._path} failed: {last_exc}") from last_exc
            self._mark_saved(generation)
            _logger.debug("Saved config document %s", self._path)

    def _mark_saved(self, generation: int) -> None:
        with self._lock:
            self._saved_generation = max(self._saved_generation, generation)

    def close(self) -> None:
        """Release the store. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        _logger.debug("Closed config store %s", self._path or "<memory>")

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreClosedError("Config store is closed")

    def __enter__(self) -> "StoreGateway":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
