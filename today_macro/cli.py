"""CLI entry: today-macro render|list [--config path] (python -m today_macro.cli)."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from today_macro.runner import build_registry, render

load_dotenv()

DEFAULT_CONFIG = "config/config.yaml"
LOG_DIR = Path("logs")


def _setup_logging(verbose: bool = False) -> None:
    LOG_DIR.mkdir(exist_ok=True)
    log_file = LOG_DIR / "app.log"
    fmt = "%(asctime)s %(levelname)s %(name)s %(message)s"
    formatter = logging.Formatter(fmt)
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not root.handlers:
        h_stderr = logging.StreamHandler(sys.stderr)
        h_stderr.setFormatter(formatter)
        root.addHandler(h_stderr)
        h_file = logging.FileHandler(log_file, encoding="utf-8")
        h_file.setFormatter(formatter)
        root.addHandler(h_file)


def _read_text(args: argparse.Namespace) -> str:
    if args.text is not None:
        return args.text
    if args.file in (None, "-"):
        return sys.stdin.read()
    return Path(args.file).read_text(encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    default_config = os.environ.get("TODAY_MACRO_CONFIG", DEFAULT_CONFIG)
    parser = argparse.ArgumentParser(description="Render {{ today }} macros in formatted text")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument(
        "--discover",
        action="store_true",
        help="Also load macro plugins installed under the today_macro.macros entry point group",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    render_parser = sub.add_parser("render", help="Render macros in text for a project")
    render_parser.add_argument(
        "--config",
        default=default_config,
        help=f"Config file path (default: {default_config})",
    )
    render_parser.add_argument(
        "--project",
        action="append",
        required=True,
        help="Project id from config; repeat for a project group",
    )
    render_parser.add_argument("--user", default=None, help="Current user login (from config users)")
    render_parser.add_argument("--text", default=None, help="Text to render (default: read FILE or stdin)")
    render_parser.add_argument("file", nargs="?", default=None, help="File to render, '-' for stdin")

    sub.add_parser("list", help="List registered macros and their capabilities")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if args.command == "list":
        registry = build_registry(discover=args.discover)
        for name in registry.names():
            macro_cls = registry.get(name)
            # can_be_cached is an instance method in the macro ABI
            cacheable = macro_cls({}, None, None).can_be_cached()
            print(
                f"{name}\t{macro_cls.__module__}.{macro_cls.__name__}"
                f"\tcan_be_cached={cacheable}"
                f"\tproject_group={macro_cls.supports_project_group()}"
            )
        return

    if args.command == "render":
        try:
            text = _read_text(args)
            output = render(args.config, args.project, text, args.user, discover=args.discover)
        except FileNotFoundError as e:
            logging.error("%s", e)
            sys.exit(1)
        except ValueError as e:
            logging.error("%s", e)
            sys.exit(1)
        sys.stdout.write(output)
        if not output.endswith("\n"):
            sys.stdout.write("\n")


if __name__ == "__main__":
    main()
