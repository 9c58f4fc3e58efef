"""Qt glue between config sections and the main window.

Applies the window template and the last window state to a ``QMainWindow`` at
startup, and reads the live geometry back into a ``WindowState`` when the user
resizes, moves or toggles fullscreen. Theme application and any rendering stay
with the window itself.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QMainWindow

from baseproject.app.schema import PanelLayout, WindowConfig, WindowState

__all__ = ["apply_window_config", "apply_window_state", "capture_window_state", "is_fullscreen"]

_logger = logging.getLogger(__name__)


def apply_window_config(window: QMainWindow, cfg: WindowConfig) -> None:
    window.setWindowTitle(cfg.title)
    window.setMinimumSize(cfg.min_width, cfg.min_height)
    if cfg.max_width >= cfg.min_width and cfg.max_height >= cfg.min_height:
        window.setMaximumSize(cfg.max_width, cfg.max_height)
    else:
        _logger.warning(
            "Ignoring max size %sx%s below min size %sx%s",
            cfg.max_width,
            cfg.max_height,
            cfg.min_width,
            cfg.min_height,
        )


def apply_window_state(window: QMainWindow, state: WindowState) -> None:
    """Restore size, position and fullscreen flag (size is clamped by Qt)."""
    window.resize(int(round(state.width)), int(round(state.height)))
    window.move(state.x, state.y)
    flags = window.windowState()
    if state.fullscreen:
        window.setWindowState(flags | Qt.WindowState.WindowFullScreen)
    else:
        window.setWindowState(flags & ~Qt.WindowState.WindowFullScreen)


def is_fullscreen(window: QMainWindow) -> bool:
    return bool(window.windowState() & Qt.WindowState.WindowFullScreen)


def capture_window_state(window: QMainWindow, previous: WindowState) -> WindowState:
    """Return a new state with the window's geometry; theme and layout carry over.

    While fullscreen the previous windowed geometry is kept so leaving
    fullscreen on the next start restores the normal size.
    """
    layout = PanelLayout(
        horizontal=list(previous.layout.horizontal), vertical=list(previous.layout.vertical)
    )
    if is_fullscreen(window):
        return replace(previous, fullscreen=True, layout=layout)
    size = window.size()
    pos = window.pos()
    return replace(
        previous,
        width=size.width(),
        height=size.height(),
        x=pos.x(),
        y=pos.y(),
        fullscreen=False,
        layout=layout,
    )
