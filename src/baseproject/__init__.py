"""BaseProject persistent configuration subsystem."""

__version__ = "0.1.0"
