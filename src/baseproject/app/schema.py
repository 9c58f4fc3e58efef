"""Config document schema: section keys, section records and defaults.

The document persisted by ``StoreGateway`` is a JSON object with exactly three
top-level keys, one per section. Each section has a dataclass record with a
``to_dict`` producing the canonical on-disk shape and a strict ``from_dict``
that either returns a fully populated record or raises ``SectionShapeError``.

Design principles:
- Pure logic (no Qt import) so it can be unit-tested headless.
- One schema, one file name. Window width/height are numbers (int or float),
  window-config bounds are unsigned ints.
- Defaults are built fresh on every call; callers may mutate what they get.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import math
from typing import Any, Dict, List, Mapping

from .errors import SectionShapeError

__all__ = [
    "SCHEMA_VERSION",
    "CONFIG_FILENAME",
    "APP_NAME",
    "DEFAULT_TITLE",
    "SectionKey",
    "SECTION_KEYS",
    "ThemeSetting",
    "ConcreteTheme",
    "DEFAULT_THEME",
    "ProjectConfig",
    "WindowConfig",
    "PanelLayout",
    "WindowState",
    "default_section",
    "default_document",
    "section_type",
    "section_from_dict",
]

SCHEMA_VERSION = 1  # Increment when section shapes change

APP_NAME = "baseproject"
CONFIG_FILENAME = "baseproject.config"
DEFAULT_TITLE = "BaseProject"


class SectionKey(str, Enum):  # str subclass so keys serialize as plain JSON strings
    PROJECT_CONFIG = "project_config"
    WINDOW_CONFIG = "window_config"
    WINDOW_STATE = "window_state"


SECTION_KEYS: tuple[SectionKey, ...] = (
    SectionKey.PROJECT_CONFIG,
    SectionKey.WINDOW_CONFIG,
    SectionKey.WINDOW_STATE,
)


class ThemeSetting(str, Enum):
    """Symbolic theme preference stored in ``window_state.theme``."""

    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"

    @classmethod
    def parse(cls, value: Any) -> "ThemeSetting":
        """Case-insensitive lookup; raises ``ValueError`` for unknown names."""
        if isinstance(value, ThemeSetting):
            return value
        if not isinstance(value, str):
            raise ValueError(f"theme must be a string, got {type(value).__name__}")
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"unknown theme {value!r}") from None


class ConcreteTheme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


DEFAULT_THEME = ConcreteTheme.DARK


# ----------------------------------------------------------------------
# Field coercion helpers (strict: never guess, never partially convert)
# ----------------------------------------------------------------------
def _require_mapping(raw: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise SectionShapeError(name, f"expected an object, got {type(raw).__name__}")
    return raw


def _field(raw: Mapping[str, Any], name: str) -> Any:
    if name not in raw:
        raise SectionShapeError(name, "missing")
    return raw[name]


def _str(raw: Mapping[str, Any], name: str) -> str:
    value = _field(raw, name)
    if not isinstance(value, str):
        raise SectionShapeError(name, f"expected string, got {type(value).__name__}")
    return value


def _int(raw: Mapping[str, Any], name: str) -> int:
    value = _field(raw, name)
    # bool is an int subclass; JSON true/false must not pass as a coordinate
    if isinstance(value, bool) or not isinstance(value, int):
        raise SectionShapeError(name, f"expected integer, got {type(value).__name__}")
    return value


def _uint(raw: Mapping[str, Any], name: str) -> int:
    value = _int(raw, name)
    if value < 0:
        raise SectionShapeError(name, f"expected unsigned integer, got {value}")
    return value


def _number(value: Any, name: str) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SectionShapeError(name, f"expected number, got {type(value).__name__}")
    if isinstance(value, float) and not math.isfinite(value):
        raise SectionShapeError(name, "expected finite number")
    return value


def _bool(raw: Mapping[str, Any], name: str) -> bool:
    value = _field(raw, name)
    if not isinstance(value, bool):
        raise SectionShapeError(name, f"expected boolean, got {type(value).__name__}")
    return value


def _weights(value: Any, name: str, length: int) -> List[int | float]:
    if not isinstance(value, list) or len(value) != length:
        raise SectionShapeError(name, f"expected a list of {length} numbers")
    return [_number(v, f"{name}[{i}]") for i, v in enumerate(value)]


# ----------------------------------------------------------------------
# Section records
# ----------------------------------------------------------------------
@dataclass
class ProjectConfig:
    """Metadata of the currently active project.

    Attributes
    ----------
    name: Display name of the project.
    filepath: Path of the project file on disk.
    remarks: Free-form notes.
    """

    name: str = ""
    filepath: str = ""
    remarks: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "filepath": self.filepath, "remarks": self.remarks}

    @classmethod
    def from_dict(cls, data: Any) -> "ProjectConfig":
        raw = _require_mapping(data, SectionKey.PROJECT_CONFIG.value)
        return cls(
            name=_str(raw, "name"),
            filepath=_str(raw, "filepath"),
            remarks=_str(raw, "remarks"),
        )


@dataclass
class WindowConfig:
    """Window template applied once when the main window is created.

    Attributes
    ----------
    title: Window title.
    min_width, min_height: Minimum window size in physical pixels.
    max_width, max_height: Maximum window size in physical pixels.
    """

    title: str = DEFAULT_TITLE
    min_width: int = 800
    min_height: int = 600
    max_width: int = 1920
    max_height: int = 1080

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "min_width": self.min_width,
            "min_height": self.min_height,
            "max_width": self.max_width,
            "max_height": self.max_height,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "WindowConfig":
        raw = _require_mapping(data, SectionKey.WINDOW_CONFIG.value)
        return cls(
            title=_str(raw, "title"),
            min_width=_uint(raw, "min_width"),
            min_height=_uint(raw, "min_height"),
            max_width=_uint(raw, "max_width"),
            max_height=_uint(raw, "max_height"),
        )


@dataclass
class PanelLayout:
    """Relative split weights of the main panel.

    Weights are proportional, not normalized; nothing enforces a sum.
    """

    horizontal: List[int | float] = field(default_factory=lambda: [15, 70, 15])
    vertical: List[int | float] = field(default_factory=lambda: [85, 15])

    def to_dict(self) -> Dict[str, Any]:
        return {"horizontal": list(self.horizontal), "vertical": list(self.vertical)}

    @classmethod
    def from_dict(cls, data: Any) -> "PanelLayout":
        raw = _require_mapping(data, "main_panel_layout")
        return cls(
            horizontal=_weights(_field(raw, "horizontal"), "horizontal", 3),
            vertical=_weights(_field(raw, "vertical"), "vertical", 2),
        )


@dataclass
class WindowState:
    """Last observed geometry and theme of the main window.

    Attributes
    ----------
    width, height: Window size (numbers; fractional sizes are kept as is).
    x, y: Top-left window position.
    fullscreen: Whether the window was fullscreen.
    theme: Symbolic theme preference (resolved later by the theme resolver).
    layout: Main panel split weights, persisted as ``main_panel_layout``.
    """

    width: int | float = 1200
    height: int | float = 800
    x: int = 100
    y: int = 100
    fullscreen: bool = False
    theme: ThemeSetting = ThemeSetting.AUTO
    layout: PanelLayout = field(default_factory=PanelLayout)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "x": self.x,
            "y": self.y,
            "fullscreen": self.fullscreen,
            "theme": ThemeSetting.parse(self.theme).value,
            "main_panel_layout": self.layout.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "WindowState":
        raw = _require_mapping(data, SectionKey.WINDOW_STATE.value)
        try:
            theme = ThemeSetting.parse(_field(raw, "theme"))
        except ValueError as exc:
            raise SectionShapeError("theme", str(exc)) from exc
        return cls(
            width=_number(_field(raw, "width"), "width"),
            height=_number(_field(raw, "height"), "height"),
            x=_int(raw, "x"),
            y=_int(raw, "y"),
            fullscreen=_bool(raw, "fullscreen"),
            theme=theme,
            layout=PanelLayout.from_dict(_field(raw, "main_panel_layout")),
        )


_SECTION_TYPES = {
    SectionKey.PROJECT_CONFIG: ProjectConfig,
    SectionKey.WINDOW_CONFIG: WindowConfig,
    SectionKey.WINDOW_STATE: WindowState,
}


def section_type(key: SectionKey | str) -> type:
    return _SECTION_TYPES[SectionKey(key)]


def default_section(key: SectionKey | str) -> Any:
    """Return a fresh default record for ``key``.

    Raises ``ValueError`` for a key that is not part of the schema.
    """
    return section_type(key)()


def section_from_dict(key: SectionKey | str, data: Any) -> Any:
    return section_type(key).from_dict(data)


def default_document() -> Dict[str, Any]:
    """Full document as written on a fresh install."""
    return {key.value: default_section(key).to_dict() for key in SECTION_KEYS}
