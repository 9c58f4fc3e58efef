"""Startup path for the config subsystem.

Responsibilities:
 - Resolve the config file location (env override, then platformdirs)
 - Open the store, falling back to an in-memory document if the config
   directory cannot be created or a bad document cannot be moved aside
 - Seed missing sections and load all three leniently
 - Resolve the theme preference against the OS hint
 - Return one context object the Window Host keeps for the session

Nothing in here raises for configuration problems; the application always
reaches a usable state and the reasons end up in ``ctx.diagnostics``.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
import time
from typing import Optional

from baseproject.services.diagnostics import STORE_UNAVAILABLE, DiagnosticsLog
from baseproject.services.save_coalescer import SaveCoalescer
from baseproject.services.theme_resolver import OsThemeHintProvider, resolve_theme
from .errors import StoreIOError
from .initializer import InitializationResult, initialize_store
from .schema import ConcreteTheme
from .sections import LoadedSections, LoadPolicy, load_all_sections
from .store import StoreGateway, default_config_path

__all__ = ["AppContext", "create_app_context", "open_store_or_memory"]

_logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Objects created during config startup.

    Attributes
    ----------
    store: The single store for this application instance.
    diagnostics: Sink holding fallback / error events from startup and later saves.
    saver: Background coalescing saver bound to ``store``.
    sections: Typed sections loaded at startup.
    theme: Concrete theme resolved from ``sections.window_state.theme``.
    config_path: Intended location of the config file.
    initialization: Result of the seeding pass.
    duration_s: Elapsed startup seconds.
    """

    store: StoreGateway
    diagnostics: DiagnosticsLog
    saver: SaveCoalescer
    sections: LoadedSections
    theme: ConcreteTheme
    config_path: Path
    initialization: InitializationResult
    duration_s: float = 0.0

    @property
    def persistent(self) -> bool:
        return self.store.is_persistent

    def close(self) -> None:
        """Write pending changes and release the store."""
        self.saver.shutdown(flush=True)
        self.store.close()


def open_store_or_memory(path: Path, diagnostics: DiagnosticsLog) -> StoreGateway:
    try:
        return StoreGateway.open(path, diagnostics=diagnostics)
    except StoreIOError as exc:
        diagnostics.record(
            STORE_UNAVAILABLE,
            "Config store unavailable; settings will not be persisted",
            cause=exc,
        )
        return StoreGateway.in_memory(diagnostics=diagnostics)


def create_app_context(
    config_path: str | os.PathLike[str] | None = None,
    *,
    os_hint_provider: Optional[OsThemeHintProvider] = None,
    diagnostics: DiagnosticsLog | None = None,
) -> AppContext:
    """Run the config startup path.

    Parameters
    ----------
    config_path: Explicit document path; defaults to ``default_config_path()``.
    os_hint_provider: Callable answering the OS light/dark preference; without
        one, ``auto`` resolves to the default theme.
    """
    started = time.perf_counter()
    diag = diagnostics if diagnostics is not None else DiagnosticsLog()
    path = Path(config_path) if config_path is not None else default_config_path()
    _logger.info("Config file: %s", path)

    store = open_store_or_memory(path, diag)
    init = initialize_store(store)
    sections = load_all_sections(store, LoadPolicy.LENIENT)
    theme = resolve_theme(sections.window_state.theme, os_hint_provider)
    saver = SaveCoalescer(store)

    ctx = AppContext(
        store=store,
        diagnostics=diag,
        saver=saver,
        sections=sections,
        theme=theme,
        config_path=path,
        initialization=init,
        duration_s=time.perf_counter() - started,
    )
    _logger.debug("Config startup finished in %.1f ms", ctx.duration_s * 1000.0)
    return ctx
