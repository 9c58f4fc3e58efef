"""Theme resolution.

Maps the symbolic theme preference (light / dark / auto) to the concrete theme
the Window Host applies. ``auto`` asks an OS hint provider; any failure or
unknown answer falls back to ``DEFAULT_THEME`` (dark) so startup stays
deterministic. Nothing here touches the config document.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from baseproject.app.schema import DEFAULT_THEME, ConcreteTheme, ThemeSetting

__all__ = [
    "OsThemeHintProvider",
    "resolve_theme",
    "coerce_hint",
    "qt_color_scheme_hint",
]

_logger = logging.getLogger(__name__)

# Returns ConcreteTheme, "light"/"dark" (any case) or None when unknown.
OsThemeHintProvider = Callable[[], Any]


def coerce_hint(hint: Any) -> Optional[ConcreteTheme]:
    """Normalize a provider answer; None means unknown."""
    if isinstance(hint, ConcreteTheme):
        return hint
    if isinstance(hint, str):
        try:
            return ConcreteTheme(hint.strip().lower())
        except ValueError:
            return None
    return None


def resolve_theme(
    setting: ThemeSetting | str,
    os_hint_provider: Optional[OsThemeHintProvider] = None,
) -> ConcreteTheme:
    try:
        parsed = ThemeSetting.parse(setting)
    except ValueError:
        _logger.debug("Unrecognized theme setting %r; treating as auto", setting)
        parsed = ThemeSetting.AUTO
    if parsed is ThemeSetting.LIGHT:
        return ConcreteTheme.LIGHT
    if parsed is ThemeSetting.DARK:
        return ConcreteTheme.DARK
    if os_hint_provider is None:
        return DEFAULT_THEME
    try:
        hint = os_hint_provider()
    except Exception as exc:  # noqa: BLE001 - OS query failures must not break startup
        _logger.debug("OS theme query failed (%s); using %s", exc, DEFAULT_THEME.value)
        return DEFAULT_THEME
    theme = coerce_hint(hint)
    if theme is None:
        _logger.debug("OS theme hint %r unknown; using %s", hint, DEFAULT_THEME.value)
        return DEFAULT_THEME
    return theme


def qt_color_scheme_hint() -> Optional[ConcreteTheme]:
    """OS light/dark preference as reported by Qt (PyQt6 >= 6.5).

    Returns None without a running QGuiApplication or when Qt reports
    ``Unknown``.
    """
    from PyQt6.QtCore import Qt  # local import keeps this module headless
    from PyQt6.QtGui import QGuiApplication

    app = QGuiApplication.instance()
    if app is None:
        return None
    scheme = QGuiApplication.styleHints().colorScheme()
    if scheme == Qt.ColorScheme.Dark:
        return ConcreteTheme.DARK
    if scheme == Qt.ColorScheme.Light:
        return ConcreteTheme.LIGHT
    return None
