"""Command-line entry point.

Examples::

    gentree ./generators/service my-service
    gentree ./app.yaml my-app --root ./out --set author=Ada --dry-run
    gentree ./app.yaml my-app --force --save-config gentree.json
    python -m gentree.cli mypackage.generators:WEBAPP demo --force
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

from rich.markup import escape

from gentree.config import EngineConfig
from gentree.engine import GeneratorError, generate, load_generator, normalize_scope
from gentree.utils import console, print_error, print_success, print_summary_table, print_warning


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gentree",
        description="gentree -- recursive, path-templated project scaffolding",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  gentree ./generators/service my-service\n"
            "  gentree ./app.yaml my-app --root ./out --set author=Ada\n"
            "  gentree mypackage.generators:WEBAPP demo --dry-run\n"
        ),
    )
    parser.add_argument(
        "generator",
        help="Generator identifier: a YAML/JSON file, a directory, or module[:attribute]",
    )
    parser.add_argument(
        "args",
        nargs="*",
        help="Positional arguments, available as :arg0 .. :arg3",
    )
    parser.add_argument(
        "--root", "-r",
        default=".",
        help="Root directory generated paths are anchored at (default: .)",
    )
    parser.add_argument(
        "--set", "-s",
        dest="params",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Extra scope parameter (repeatable)",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Engine configuration JSON file (default: GENTREE_* environment variables)",
    )
    parser.add_argument("--force", action="store_true", help="Overwrite existing files")
    parser.add_argument("--dry-run", action="store_true", help="Report targets without writing")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only print the summary")
    parser.add_argument(
        "--save-config",
        default=None,
        metavar="FILE",
        help="Write the effective engine configuration to FILE as JSON",
    )
    return parser


def parse_params(pairs: list[str]) -> dict[str, str]:
    """Turn ``["key=value", ...]`` into a mapping.

    Raises:
        ValueError: If an entry has no ``=`` or an empty key.
    """
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Invalid --set value (expected KEY=VALUE): {pair!r}")
        params[key] = value
    return params


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``gentree`` / ``python -m gentree.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        params = parse_params(args.params)
    except ValueError as exc:
        parser.error(str(exc))

    config = EngineConfig.load(Path(args.config)) if args.config else EngineConfig.from_env()
    for flag in ("force", "dry_run", "quiet"):
        if getattr(args, flag):
            setattr(config, flag, True)

    if args.save_config:
        saved = config.save(Path(args.save_config))
        print_success(f"Saved configuration to {saved}")

    values: dict[str, Any] = {
        **params,
        "args": list(args.args),
        "root_path": Path(args.root).expanduser().resolve(),
    }

    try:
        scope = normalize_scope(values, config)
        definition = load_generator(args.generator, scope, config)
        if config.dry_run:
            print_warning("Dry run: nothing will be written.")
        if not config.quiet:
            console.print(f"Generating [bold]{definition.generator}[/bold] in {scope.root_path}")
        paths = asyncio.run(generate(definition, scope, config=config))
    except GeneratorError as exc:
        print_error(f"Error: {escape(str(exc))}")
        sys.exit(1)

    print_summary_table(
        {
            "Generator": definition.generator or args.generator,
            "Root": str(scope.root_path),
            "Paths": str(len(paths)),
            "Mode": "dry run" if config.dry_run else "write",
        },
        title="gentree",
    )
    print_success("Done.")


if __name__ == "__main__":
    main()
