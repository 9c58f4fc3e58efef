"""Typed section loading with an explicit recovery policy.

``STRICT`` raises on a missing or malformed section. ``LENIENT`` substitutes
the schema default and records a diagnostic event describing why. Either way
a returned record is fully populated; a partially valid raw value is never
merged with defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any

from baseproject.services.diagnostics import SECTION_INVALID, SECTION_MISSING, DiagnosticsLog
from .errors import DeserializationError, SectionMissingError, SectionShapeError
from .schema import (
    ProjectConfig,
    SectionKey,
    WindowConfig,
    WindowState,
    default_section,
    section_from_dict,
)
from .store import StoreGateway

__all__ = [
    "LoadPolicy",
    "LoadedSections",
    "load_section",
    "load_project_config",
    "load_window_config",
    "load_window_state",
    "load_all_sections",
]

_logger = logging.getLogger(__name__)


class LoadPolicy(str, Enum):
    STRICT = "strict"
    LENIENT = "lenient"


def load_section(
    store: StoreGateway,
    key: SectionKey | str,
    policy: LoadPolicy = LoadPolicy.LENIENT,
    *,
    diagnostics: DiagnosticsLog | None = None,
) -> Any:
    """Return the typed record stored under ``key``.

    Parameters
    ----------
    store : StoreGateway
        Source of the raw section value.
    key : SectionKey | str
        One of the schema section keys (``ValueError`` otherwise).
    policy : LoadPolicy
        STRICT raises ``SectionMissingError`` / ``DeserializationError``;
        LENIENT returns the default and records a fallback event.
    diagnostics : DiagnosticsLog | None
        Where fallback events go; defaults to the store's sink.
    """
    section = SectionKey(key)
    sink = diagnostics if diagnostics is not None else store.diagnostics
    raw = store.get(section)
    if raw is None:
        if policy is LoadPolicy.STRICT:
            raise SectionMissingError(section.value)
        sink.record(
            SECTION_MISSING,
            f"{section.value} missing; using defaults",
            key=section.value,
        )
        return default_section(section)
    try:
        record = section_from_dict(section, raw)
    except SectionShapeError as exc:
        if policy is LoadPolicy.STRICT:
            raise DeserializationError(section.value, exc) from exc
        sink.record(
            SECTION_INVALID,
            f"{section.value} invalid; using defaults",
            key=section.value,
            cause=exc,
        )
        return default_section(section)
    _logger.debug("Loaded %s: %s", section.value, record)
    return record


def load_project_config(
    store: StoreGateway, policy: LoadPolicy = LoadPolicy.LENIENT
) -> ProjectConfig:
    return load_section(store, SectionKey.PROJECT_CONFIG, policy)


def load_window_config(
    store: StoreGateway, policy: LoadPolicy = LoadPolicy.LENIENT
) -> WindowConfig:
    return load_section(store, SectionKey.WINDOW_CONFIG, policy)


def load_window_state(
    store: StoreGateway, policy: LoadPolicy = LoadPolicy.LENIENT
) -> WindowState:
    return load_section(store, SectionKey.WINDOW_STATE, policy)


@dataclass
class LoadedSections:
    project: ProjectConfig
    window_config: WindowConfig
    window_state: WindowState


def load_all_sections(
    store: StoreGateway, policy: LoadPolicy = LoadPolicy.LENIENT
) -> LoadedSections:
    return LoadedSections(
        project=load_project_config(store, policy),
        window_config=load_window_config(store, policy),
        window_state=load_window_state(store, policy),
    )
