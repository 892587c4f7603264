"""Shared utility functions for gentree.

Provides JSON/YAML I/O and Rich-based console reporting used by the engine
helpers and the CLI.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table

console = Console()


# ---------------------------------------------------------------------------
# JSON / YAML I/O
# ---------------------------------------------------------------------------


def load_data_file(path: str | Path) -> dict[str, Any]:
    """Load a ``.json``, ``.yaml`` or ``.yml`` file that holds a mapping.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file does not contain a top-level mapping.
        json.JSONDecodeError / yaml.YAMLError: If the file cannot be parsed.
    """
    file_path = Path(path)
    raw = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() == ".json":
        data = json.loads(raw)
    else:
        data = yaml.safe_load(raw)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top of {file_path}")
    return data


def dump_json(data: Any) -> str:
    """Serialise *data* as pretty-printed JSON with a trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=str) + "\n"


async def save_json(data: Any, path: str | Path) -> None:
    """Save data as pretty-printed JSON.

    Parent directories are created automatically.  The write itself is
    performed in a worker thread to avoid blocking the event loop.
    """
    file_path = Path(path)
    content = dump_json(data)

    def _write() -> None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")

    await asyncio.to_thread(_write)


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------


def display_path(path: Path, root: Path | None = None) -> str:
    """Show *path* relative to *root* when it lives underneath it."""
    if root is not None:
        try:
            return str(path.relative_to(root))
        except ValueError:
            pass
    return str(path)


def print_created(kind: str, path: Path, root: Path | None = None, *, dry_run: bool = False) -> None:
    """Print a one-line report for a materialised target."""
    marker = "[yellow]~[/yellow]" if dry_run else "[green]+[/green]"
    console.print(f"  {marker} [dim]{kind:<8}[/dim] {display_path(path, root)}")


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
