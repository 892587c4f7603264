"""End-to-end generation tests.

These tests run the real engine, executor and helpers against a temporary
directory and check the resulting tree.  No external services are needed.
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any

import pytest

from gentree.engine import (
    GeneratorDef,
    Scope,
    TargetExistsError,
    UnresolvedPlaceholderError,
    generate,
)


def _files(root: Path) -> list[str]:
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())


@pytest.mark.integration
class TestProjectGeneration:
    async def test_flat_project(self, project_generator: dict[str, Any], out_dir: Path):
        paths = await generate(
            project_generator,
            {"args": ["shop"], "root_path": out_dir, "quiet": True},
        )

        assert len(paths) == 4
        assert (out_dir / "shop").is_dir()
        assert _files(out_dir) == [
            "shop-docs/README.md",
            "shop-meta/LICENSE",
            "shop-meta/package.json",
        ]
        package = json.loads((out_dir / "shop-meta" / "package.json").read_text(encoding="utf-8"))
        assert package == {"name": "shop", "version": "0.1.0"}

    async def test_nested_generators(self, templates_dir: Path, out_dir: Path):
        module_gen = GeneratorDef(
            generator="module",
            targets={
                "__init__.py": {"jsonfile": {"data": {}}},
                ":arg1.py": {"template": "module.py.j2"},
            },
        )
        app_gen = {
            "generator": "app",
            "templates_directory": templates_dir,
            "targets": {
                "README.md": {"template": "README.md.j2"},
                "src/:arg0": "module",
                "static": {"copy": "static"},
            },
        }

        paths = await generate(
            app_gen,
            Scope(
                args=["shop", "order-line"],
                root_path=out_dir,
                quiet=True,
                modules={"module": module_gen},
            ),
        )

        assert _files(out_dir) == [
            "README.md",
            "src/shop/__init__.py",
            "src/shop/order-line.py",
            "static/img/logo.svg",
            "static/style.css",
        ]
        assert len(paths) == 4
        module_src = (out_dir / "src" / "shop" / "order-line.py").read_text(encoding="utf-8")
        assert module_src.startswith("class OrderLine:")

    async def test_generator_from_yaml_file(self, tmp_path: Path, out_dir: Path):
        gen_dir = tmp_path / "generators" / "service"
        (gen_dir / "templates").mkdir(parents=True)
        (gen_dir / "templates" / "app.py.j2").write_text(
            "SERVICE = \"{{ service }}\"\nPORT = {{ port }}\n", encoding="utf-8"
        )
        (gen_dir / "generator.yaml").write_text(
            textwrap.dedent(
                """\
                targets:
                  ":service/app.py":
                    template: app.py.j2
                """
            ),
            encoding="utf-8",
        )

        await generate(
            {"targets": {"services": {"generator": str(gen_dir)}}},
            {"args": [], "root_path": out_dir, "service": "billing", "port": 8081, "quiet": True},
        )

        app = out_dir / "services" / "billing" / "app.py"
        assert app.read_text(encoding="utf-8") == 'SERVICE = "billing"\nPORT = 8081\n'


@pytest.mark.integration
class TestFailures:
    async def test_existing_file_fails_batch(self, project_generator: dict[str, Any], out_dir: Path):
        (out_dir / "shop-meta").mkdir()
        (out_dir / "shop-meta" / "LICENSE").write_text("custom\n", encoding="utf-8")

        with pytest.raises(TargetExistsError):
            await generate(project_generator, {"args": ["shop"], "root_path": out_dir, "quiet": True})
        assert (out_dir / "shop-meta" / "LICENSE").read_text(encoding="utf-8") == "custom\n"

    async def test_force_overwrites(self, project_generator: dict[str, Any], out_dir: Path):
        (out_dir / "shop-meta").mkdir()
        (out_dir / "shop-meta" / "LICENSE").write_text("custom\n", encoding="utf-8")

        await generate(
            project_generator,
            {"args": ["shop"], "root_path": out_dir, "quiet": True, "force": True},
        )
        assert (out_dir / "shop-meta" / "LICENSE").read_text(encoding="utf-8") == "MIT\n"

    async def test_nested_missing_placeholder(self, templates_dir: Path, out_dir: Path):
        with pytest.raises(UnresolvedPlaceholderError) as exc_info:
            await generate(
                {
                    "templates_directory": templates_dir,
                    "targets": {"pkg": {"targets": {":arg2.py": {"template": "module.py.j2"}}}},
                },
                {"args": ["a", "b"], "root_path": out_dir, "quiet": True},
            )
        assert exc_info.value.placeholder == "arg2"

    async def test_dry_run_leaves_tree_empty(self, project_generator: dict[str, Any], out_dir: Path):
        paths = await generate(
            project_generator,
            {"args": ["shop"], "root_path": out_dir, "quiet": True, "dry_run": True},
        )
        assert len(paths) == 4
        assert list(out_dir.iterdir()) == []
