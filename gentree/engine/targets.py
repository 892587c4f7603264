"""Default target executor.

A target descriptor is either a helper call::

    {"folder": {"gitkeep": True}}
    {"template": "app/main.py.j2"}
    {"copy": {"template_path": "static"}}
    {"jsonfile": {"data": {...}}}          # or a callable ``scope -> data``
    {"exec": some_callable}                 # ``scope -> None | awaitable``

or a generator reference (an identifier string, a mapping with ``generator``
and/or ``targets``, or a ``GeneratorDef``), which is loaded if necessary and
run through ``recursive_generate`` one level deeper.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path
from typing import Any

from gentree.config import EngineConfig

from . import helpers
from .errors import InvalidTargetError, MaxHopsExceededError
from .loader import load_generator
from .models import GeneratorDef, Scope, is_generator_ref


HELPERS: dict[str, Callable[[Scope], Awaitable[list[Path]]]] = {
    "copy": helpers.copy,
    "folder": helpers.folder,
    "template": helpers.template,
    "jsonfile": helpers.jsonfile,
}

# Checked in this order; the first one present wins.
HELPER_KINDS: tuple[str, ...] = ("copy", "folder", "template", "jsonfile", "exec")

# Helpers whose string shorthand names the source file.
_PATH_SHORTHAND = ("copy", "template")


async def execute_target(
    target: Any,
    scope: Scope,
    recursive_generate: Callable[..., Awaitable[list[Path]]],
    parent: GeneratorDef | None = None,
    *,
    config: EngineConfig | None = None,
) -> list[Path]:
    """Materialise one resolved target.

    *scope* belongs to this target alone (``dest_path`` is already the
    target's absolute destination), so it is updated in place.

    Raises:
        InvalidTargetError: If the descriptor cannot be turned into a
            helper call or a generator definition.
        MaxHopsExceededError: If nested generators go deeper than
            ``scope.max_hops``.
    """
    config = config or EngineConfig()

    resolved = _resolve_target(target, scope, config)

    if parent is not None and parent.templates_directory is not None:
        scope.templates_directory = parent.templates_directory

    kind = helper_kind(resolved)
    if kind == "exec":
        return await _run_exec(resolved["exec"], scope)
    if kind is not None:
        scope = _merge_options(scope, kind, resolved[kind])
        return await HELPERS[kind](scope)

    scope.depth += 1
    if scope.depth > scope.max_hops:
        raise MaxHopsExceededError(scope.max_hops)
    return await recursive_generate(resolved, scope)


def helper_kind(target: Any) -> str | None:
    """Name of the helper *target* calls, or ``None`` if it calls none."""
    if not isinstance(target, Mapping):
        return None
    for kind in HELPER_KINDS:
        # ``{"folder": {}}`` is a valid call with no options
        if target.get(kind) not in (None, False):
            return kind
    return None


def is_valid_target(target: Any) -> bool:
    """A helper call, or a generator definition that carries its targets."""
    if helper_kind(target) is not None:
        return True
    if isinstance(target, GeneratorDef):
        return "targets" in target.model_fields_set
    return isinstance(target, Mapping) and "targets" in target


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _resolve_target(target: Any, scope: Scope, config: EngineConfig) -> Any:
    """Load generator references until *target* is something we can run."""
    resolved = target
    resolves = 0
    while not is_valid_target(resolved):
        resolves += 1
        if resolves > config.max_resolves:
            raise InvalidTargetError(
                str(scope.dest_path),
                target,
                "Could not resolve target (probably a recursive loop)",
            )
        resolved = _parse_target(resolved, scope, config)
    return resolved


def _parse_target(target: Any, scope: Scope, config: EngineConfig) -> Any:
    if isinstance(target, str):
        return {"generator": target}
    if not is_generator_ref(target):
        raise InvalidTargetError(str(scope.dest_path), target, "Unrecognised target")

    reference = target.generator if isinstance(target, GeneratorDef) else target.get("generator")
    if isinstance(reference, str):
        return load_generator(reference, scope, config)
    if isinstance(reference, (Mapping, GeneratorDef)):
        return reference
    raise InvalidTargetError(str(scope.dest_path), target, "Invalid generator reference")


def _merge_options(scope: Scope, kind: str, options: Any) -> Scope:
    """Fold a helper's options into the scope."""
    if kind == "jsonfile" and callable(options):
        options = {"data": options(scope)}
    elif kind in _PATH_SHORTHAND and isinstance(options, (str, Path)):
        options = {"template_path": str(options)}
    elif not isinstance(options, Mapping):
        options = {}
    return Scope.model_validate({**scope.context(), **options})


async def _run_exec(fn: Callable[[Scope], Any], scope: Scope) -> list[Path]:
    result = fn(scope)
    if inspect.isawaitable(result):
        await result
    return []
