"""Shared pytest fixtures for the gentree test suite.

Provides reusable fixtures for:
- Temporary output roots and template directories
- A recording executor that captures dispatched targets without writing
- Sample generator definitions (flat and nested)
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any

import pytest

from gentree.engine.models import GeneratorDef, Scope


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    """Empty directory used as ``root_path`` for generated output."""
    root = tmp_path / "out"
    root.mkdir()
    return root


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Template directory with a few Jinja2 templates and a static tree."""
    root = tmp_path / "templates"
    (root / "static" / "img").mkdir(parents=True)
    (root / "README.md.j2").write_text(
        textwrap.dedent(
            """\
            # {{ arg0 }}

            {{ description | default("No description.") }}
            """
        ),
        encoding="utf-8",
    )
    (root / "module.py.j2").write_text(
        "class {{ arg1 | pascal_case }}:\n    name = \"{{ arg1 | snake_case }}\"\n",
        encoding="utf-8",
    )
    (root / "broken.j2").write_text("{{ missing_value }}\n", encoding="utf-8")
    (root / "LICENSE").write_text("MIT\n", encoding="utf-8")
    (root / "static" / "style.css").write_text("body {}\n", encoding="utf-8")
    (root / "static" / "img" / "logo.svg").write_text("<svg/>\n", encoding="utf-8")
    return root


# ---------------------------------------------------------------------------
# Executors
# ---------------------------------------------------------------------------

class RecordingExecutor:
    """Executor stand-in that records every dispatched target.

    Generator-shaped targets (mappings with ``targets``) are passed back
    through ``recursive_generate`` so nested behaviour can be observed.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    async def __call__(
        self,
        target: Any,
        scope: Scope,
        recursive_generate: Any,
        parent: GeneratorDef | None = None,
    ) -> list[Path]:
        self.calls.append({"target": target, "scope": scope, "parent": parent})
        if isinstance(target, dict) and "targets" in target:
            return await recursive_generate(target, scope)
        return [scope.dest_path]

    @property
    def dest_paths(self) -> list[Path]:
        return [call["scope"].dest_path for call in self.calls]


@pytest.fixture
def recorder() -> RecordingExecutor:
    return RecordingExecutor()


# ---------------------------------------------------------------------------
# Sample generators
# ---------------------------------------------------------------------------

@pytest.fixture
def project_generator(templates_dir: Path) -> dict[str, Any]:
    """A generator that lays out a small project under ``:arg0``."""
    return {
        "generator": "project",
        "templates_directory": templates_dir,
        "targets": {
            ":arg0": {"folder": {}},
            ":arg0-docs/README.md": {"template": "README.md.j2"},
            ":arg0-meta/LICENSE": {"copy": "LICENSE"},
            ":arg0-meta/package.json": {
                "jsonfile": lambda scope: {"name": scope.arg0, "version": "0.1.0"}
            },
        },
    }
