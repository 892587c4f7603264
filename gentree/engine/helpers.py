"""Built-in target helpers: ``folder``, ``template``, ``copy`` and ``jsonfile``.

Each helper reads its options from the scope it is given (the executor
merges a target's options into the scope first) and writes to
``scope.dest_path``.  Blocking filesystem work runs in a worker thread.
Every helper returns the list of paths it produced; with ``dry_run`` set the
paths are reported but nothing is written.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from jinja2 import TemplateError

from gentree.utils import print_created, save_json

from .errors import GeneratorError, TargetExistsError, TemplateNotFoundError
from .models import Scope
from .templates import TemplateRenderer


async def folder(scope: Scope) -> list[Path]:
    """Create ``dest_path`` as a directory.

    An existing file, or an existing non-empty directory, is an error
    unless ``force`` is set.  ``force`` replaces a file but never deletes a
    directory's contents.  With ``gitkeep`` an empty ``.gitkeep`` is added.
    """
    dest = scope.dest_path
    await asyncio.to_thread(_check_folder, dest, scope.force)
    if not scope.dry_run:
        await asyncio.to_thread(_make_folder, dest, bool(scope.lookup("gitkeep")))
    _report("folder", dest, scope)
    return [dest]


async def template(scope: Scope) -> list[Path]:
    """Render ``template_path`` from the templates directory into ``dest_path``.

    The whole scope is available to the template as variables.
    """
    dest = scope.dest_path
    template_dir, name = _locate_source(scope)
    if not (template_dir / name).is_file():
        raise TemplateNotFoundError(name, template_dir)

    await asyncio.to_thread(_check_file, dest, scope.force)

    renderer = TemplateRenderer(template_dir)
    try:
        if scope.dry_run:
            renderer.render(name, scope.context())
        else:
            await renderer.render_to_file(name, dest, scope.context())
    except TemplateError as exc:
        raise GeneratorError(f"Could not render template {name}: {exc}") from exc

    _report("template", dest, scope)
    return [dest]


async def copy(scope: Scope) -> list[Path]:
    """Copy ``template_path`` (a file or a directory tree) verbatim to ``dest_path``."""
    dest = scope.dest_path
    template_dir, name = _locate_source(scope)
    source = template_dir / name
    if not source.exists():
        raise TemplateNotFoundError(name, template_dir)

    await asyncio.to_thread(_check_file, dest, scope.force)
    if not scope.dry_run:
        await asyncio.to_thread(_copy, source, dest)

    _report("copy", dest, scope)
    return [dest]


async def jsonfile(scope: Scope) -> list[Path]:
    """Write ``scope.data`` to ``dest_path`` as pretty-printed JSON."""
    dest = scope.dest_path
    data = scope.lookup("data")
    if data is None:
        raise GeneratorError(f"jsonfile target at {dest} has no `data`")

    await asyncio.to_thread(_check_file, dest, scope.force)
    if not scope.dry_run:
        await save_json(data, dest)

    _report("jsonfile", dest, scope)
    return [dest]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _locate_source(scope: Scope) -> tuple[Path, str]:
    """Split ``template_path`` into a loader directory and a relative name."""
    template_path = scope.lookup("template_path")
    if not template_path:
        raise TemplateNotFoundError("<missing template_path>", scope.templates_directory)

    path = Path(str(template_path))
    if path.is_absolute():
        return path.parent, path.name
    if scope.templates_directory is None:
        raise TemplateNotFoundError(str(template_path), None)
    return Path(scope.templates_directory), path.as_posix()


def _check_folder(dest: Path, force: bool) -> None:
    if force or not dest.exists():
        return
    if not dest.is_dir() or any(dest.iterdir()):
        raise TargetExistsError(dest)


def _check_file(dest: Path, force: bool) -> None:
    if dest.exists() and not force:
        raise TargetExistsError(dest)


def _make_folder(dest: Path, gitkeep: bool) -> None:
    if dest.exists() and not dest.is_dir():
        dest.unlink()
    dest.mkdir(parents=True, exist_ok=True)
    if gitkeep:
        (dest / ".gitkeep").touch()


def _copy(source: Path, dest: Path) -> None:
    dest.parent.mkdir(parents=True, exist_ok=True)
    if source.is_dir():
        shutil.copytree(source, dest, dirs_exist_ok=True)
    else:
        shutil.copy2(source, dest)


def _report(kind: str, dest: Path, scope: Scope) -> None:
    if not scope.quiet:
        print_created(kind, dest, scope.root_path, dry_run=scope.dry_run)
