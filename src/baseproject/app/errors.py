"""Error kinds raised by the configuration store.

All errors derive from ``ConfigError`` so the Window Host can catch one type
at its boundary. Startup code converts most of these into defaults plus a
diagnostic event; only save failures are meant to reach the user.
"""

from __future__ import annotations

__all__ = [
    "ConfigError",
    "StoreIOError",
    "StoreClosedError",
    "StoreWriteError",
    "SectionShapeError",
    "DeserializationError",
    "SectionMissingError",
]


class ConfigError(RuntimeError):
    """Base class for configuration store failures."""


class StoreIOError(ConfigError):
    """Raised when the config directory or file cannot be accessed."""


class StoreClosedError(StoreIOError):
    """Raised when mutating or saving a store after ``close()``."""


class StoreWriteError(ConfigError):
    """Raised when persisting the document failed (including the atomic replace)."""


class SectionShapeError(ValueError):
    """Raised by ``from_dict`` when a raw value does not match a section shape."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class DeserializationError(ConfigError):
    """A stored section value could not be converted into its typed record."""

    def __init__(self, key: str, cause: BaseException) -> None:
        super().__init__(f"Section '{key}' could not be deserialized: {cause}")
        self.key = key
        self.cause = cause


class SectionMissingError(ConfigError):
    """A section key is absent from the document (strict loads only)."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Section '{key}' is missing from the config document")
        self.key = key
