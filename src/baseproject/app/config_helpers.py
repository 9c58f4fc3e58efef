"""Helpers for updating config sections from window events.

These helpers centralize mutation patterns so future validation / hooks can be
added in one place. Each reads the current section leniently, updates it and
stores the whole section back. None of them saves; callers hand persistence to
a ``SaveCoalescer`` (or call ``store.save()`` themselves).
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from .schema import (
    ConcreteTheme,
    ProjectConfig,
    SectionKey,
    ThemeSetting,
    WindowState,
    default_section,
)
from .sections import load_project_config, load_window_state
from .store import StoreGateway

__all__ = [
    "record_window_geometry",
    "record_fullscreen",
    "record_theme",
    "record_panel_layout",
    "update_project",
    "reset_section",
]


def record_window_geometry(
    store: StoreGateway,
    *,
    width: float,
    height: float,
    x: int,
    y: int,
) -> WindowState:
    """Persist (in memory) the last observed size and position."""
    state = load_window_state(store)
    state.width = width
    state.height = height
    state.x = int(x)
    state.y = int(y)
    store.set(SectionKey.WINDOW_STATE, state)
    return state


def record_fullscreen(store: StoreGateway, fullscreen: bool) -> WindowState:
    state = load_window_state(store)
    state.fullscreen = bool(fullscreen)
    store.set(SectionKey.WINDOW_STATE, state)
    return state


def record_theme(store: StoreGateway, theme: ThemeSetting | ConcreteTheme | str) -> WindowState:
    """Store a theme preference; raises ``ValueError`` for unknown names."""
    value = theme.value if isinstance(theme, ConcreteTheme) else theme
    state = load_window_state(store)
    state.theme = ThemeSetting.parse(value)
    store.set(SectionKey.WINDOW_STATE, state)
    return state


def record_panel_layout(
    store: StoreGateway,
    horizontal: Optional[Sequence[float]] = None,
    vertical: Optional[Sequence[float]] = None,
) -> WindowState:
    """Update panel split weights; axes left as None keep their value."""
    state = load_window_state(store)
    if horizontal is not None:
        if len(horizontal) != 3:
            raise ValueError("horizontal layout needs 3 weights")
        state.layout.horizontal = list(horizontal)
    if vertical is not None:
        if len(vertical) != 2:
            raise ValueError("vertical layout needs 2 weights")
        state.layout.vertical = list(vertical)
    store.set(SectionKey.WINDOW_STATE, state)
    return state


def update_project(
    store: StoreGateway,
    *,
    name: str | None = None,
    filepath: str | None = None,
    remarks: str | None = None,
) -> ProjectConfig:
    project = load_project_config(store)
    if name is not None:
        project.name = name
    if filepath is not None:
        project.filepath = filepath
    if remarks is not None:
        project.remarks = remarks
    store.set(SectionKey.PROJECT_CONFIG, project)
    return project


def reset_section(store: StoreGateway, key: SectionKey | str) -> Any:
    """Overwrite one section with its schema default."""
    record = default_section(key)
    store.set(SectionKey(key), record)
    return record
