"""Config store application layer.

Public exports include the store gateway, section schema, seeding, typed
section loading. The startup context lives in ``baseproject.app.bootstrap``.
"""

from .errors import (  # noqa: F401
    ConfigError,
    StoreIOError,
    StoreClosedError,
    StoreWriteError,
    SectionShapeError,
    DeserializationError,
    SectionMissingError,
)
from .schema import (  # noqa: F401
    SCHEMA_VERSION,
    CONFIG_FILENAME,
    SectionKey,
    SECTION_KEYS,
    ThemeSetting,
    ConcreteTheme,
    DEFAULT_THEME,
    ProjectConfig,
    WindowConfig,
    PanelLayout,
    WindowState,
    default_section,
    default_document,
)
from .store import StoreGateway, default_config_dir, default_config_path  # noqa: F401
from .initializer import InitializationResult, initialize_store  # noqa: F401
from .sections import (  # noqa: F401
    LoadPolicy,
    LoadedSections,
    load_section,
    load_project_config,
    load_window_config,
    load_window_state,
    load_all_sections,
)

__all__ = [
    # Errors
    "ConfigError",
    "StoreIOError",
    "StoreClosedError",
    "StoreWriteError",
    "SectionShapeError",
    "DeserializationError",
    "SectionMissingError",
    # Schema
    "SCHEMA_VERSION",
    "CONFIG_FILENAME",
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
    # Store
    "StoreGateway",
    "default_config_dir",
    "default_config_path",
    "InitializationResult",
    "initialize_store",
    # Sections
    "LoadPolicy",
    "LoadedSections",
    "load_section",
    "load_project_config",
    "load_window_config",
    "load_window_state",
    "load_all_sections",
]
