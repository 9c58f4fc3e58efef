"""Config maintenance CLI.

Inspect and repair the BaseProject config document without starting the GUI.

Commands:
 - ``path``   print the config file location
 - ``show``   print the document (or one section) as JSON
 - ``init``   seed missing sections and save
 - ``reset``  overwrite one section, or all, with defaults and save
 - ``theme``  print the stored theme preference and what it resolves to
   (outside a running GUI the OS hint is unavailable, so ``auto`` shows dark)

Exit code 0 on success, 1 when a save failed or a strict load was rejected.

Example:
  baseproject-config --config ./baseproject.config show --section window_state
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List

from baseproject.app.errors import ConfigError
from baseproject.app.initializer import initialize_store
from baseproject.app.schema import SECTION_KEYS, SectionKey
from baseproject.app.sections import LoadPolicy, load_section, load_window_state
from baseproject.app.store import StoreGateway, default_config_path
from baseproject.app.config_helpers import reset_section
from baseproject.services.theme_resolver import qt_color_scheme_hint, resolve_theme

_SECTION_CHOICES = [k.value for k in SECTION_KEYS]


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="baseproject-config", description=__doc__.splitlines()[0])
    p.add_argument("--config", help="Config file path (default: per-user config dir)")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("path", help="Print config file location")
    show = sub.add_parser("show", help="Print the config document")
    show.add_argument("--section", choices=_SECTION_CHOICES)
    show.add_argument(
        "--strict", action="store_true", help="Fail if the section is missing or invalid"
    )
    sub.add_parser("init", help="Seed missing sections")
    reset = sub.add_parser("reset", help="Restore defaults")
    reset.add_argument("--section", choices=_SECTION_CHOICES)
    sub.add_parser("theme", help="Show stored and resolved theme")
    return p


def _emit(obj: Any) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))  # noqa: T201


def main(argv: List[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(asctime)s]:[%(levelname)s]: %(message)s",
    )
    path = Path(args.config) if args.config else default_config_path()
    if args.command == "path":
        print(path)  # noqa: T201
        return 0
    try:
        with StoreGateway.open(path) as store:
            if args.command == "show":
                if args.section is None:
                    _emit(store.document())
                else:
                    policy = LoadPolicy.STRICT if args.strict else LoadPolicy.LENIENT
                    _emit(load_section(store, args.section, policy).to_dict())
            elif args.command == "init":
                result = initialize_store(store)
                if result.save_error is not None:
                    raise result.save_error
                seeded = [k.value for k in result.seeded]
                print("seeded: " + (", ".join(seeded) if seeded else "nothing"))  # noqa: T201
            elif args.command == "reset":
                keys = [SectionKey(args.section)] if args.section else list(SECTION_KEYS)
                for key in keys:
                    reset_section(store, key)
                store.save()
                print("reset: " + ", ".join(k.value for k in keys))  # noqa: T201
            elif args.command == "theme":
                state = load_window_state(store)
                resolved = resolve_theme(state.theme, qt_color_scheme_hint)
                print(f"{state.theme.value} -> {resolved.value}")  # noqa: T201
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)  # noqa: T201
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
