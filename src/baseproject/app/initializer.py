"""Section seeding.

``initialize_store`` guarantees every known section key exists. Missing keys
receive their schema default; keys already present are never touched, even
when their value is invalid or the default has since changed. The document is
saved once after all keys are visited, and only if something was seeded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List

from .errors import StoreWriteError
from .schema import SECTION_KEYS, SectionKey, default_section
from .store import StoreGateway

__all__ = ["InitializationResult", "initialize_store"]

_logger = logging.getLogger(__name__)


@dataclass
class InitializationResult:
    """Outcome of a seeding pass.

    Attributes
    ----------
    seeded: Keys that were absent and received their default.
    saved: Whether the document was written to disk.
    save_error: The write failure, if saving the seeded document failed.
    """

    seeded: List[SectionKey] = field(default_factory=list)
    saved: bool = False
    save_error: StoreWriteError | None = None

    @property
    def changed(self) -> bool:
        return bool(self.seeded)


def initialize_store(store: StoreGateway) -> InitializationResult:
    result = InitializationResult()
    for key in SECTION_KEYS:
        if store.get(key) is None:
            store.set(key, default_section(key))
            result.seeded.append(key)
            _logger.info("%s seeded with defaults", key.value)
    if not result.seeded:
        return result
    try:
        store.save()
        result.saved = store.is_persistent
    except StoreWriteError as exc:
        # Seeding is never fatal; the in-memory defaults stay usable.
        result.save_error = exc
        _logger.error("Seeded config could not be saved: %s", exc)
    return result
