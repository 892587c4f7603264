"""Root scope and root generator providers, and the defaults merge.

Every scope and generator handed to ``generate`` is merged over a
process-wide default set.  The merge only takes a closed list of known
fields from the defaults; caller data is passed through untouched.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gentree.config import EngineConfig

from .errors import GeneratorError, InvalidScopeError
from .models import (
    ARG_ALIASES,
    GeneratorDef,
    GeneratorRef,
    Scope,
    explicit_fields,
    generator_to_mapping,
)


# ---------------------------------------------------------------------------
# Closed field sets
# ---------------------------------------------------------------------------

ROOT_SCOPE_FIELDS: tuple[str, ...] = (
    "root_path",
    "force",
    "dry_run",
    "quiet",
    "depth",
    "max_hops",
    "modules",
)

ROOT_GENERATOR_FIELDS: tuple[str, ...] = ("bootstrap", "targets")


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


async def _noop_bootstrap(scope: Scope) -> None:
    return None


def root_scope(config: EngineConfig | None = None) -> dict[str, Any]:
    """Default values merged beneath every caller-supplied scope.

    ``args`` has no default: a scope without it is invalid.
    """
    config = config or EngineConfig()
    return {
        "root_path": Path.cwd(),
        "force": config.force,
        "dry_run": config.dry_run,
        "quiet": config.quiet,
        "depth": 0,
        "max_hops": config.max_hops,
        "modules": {},
    }


def root_generator() -> dict[str, Any]:
    """Default values merged beneath every caller-supplied generator."""
    return {
        "bootstrap": _noop_bootstrap,
        "targets": {},
    }


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def defaults_deep(
    values: Mapping[str, Any],
    defaults: Mapping[str, Any],
    fields: Iterable[str] | None = None,
) -> dict[str, Any]:
    """Fill missing entries of *values* from *defaults*, recursively.

    Existing values always win.  ``None`` counts as missing.  When *fields*
    is given only those top-level keys are taken from *defaults*; nested
    mappings are merged key by key.  Neither input is mutated.
    """
    merged = dict(values)
    names = defaults.keys() if fields is None else fields
    for name in names:
        if name not in defaults:
            continue
        default = defaults[name]
        current = merged.get(name)
        if current is None:
            merged[name] = default
        elif isinstance(current, Mapping) and isinstance(default, Mapping):
            merged[name] = defaults_deep(current, default)
    return merged


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------


def normalize_scope(
    scope: Scope | Mapping[str, Any], config: EngineConfig | None = None
) -> Scope:
    """Merge *scope* over the root scope, validate it, and alias ``args``.

    Raises:
        InvalidScopeError: If ``args`` is missing or not a sequence, or if
            any other known field has the wrong type.
    """
    if isinstance(scope, Scope):
        values = explicit_fields(scope)
    elif isinstance(scope, Mapping):
        values = dict(scope)
    else:
        raise InvalidScopeError(f"Invalid scope passed to generator: {scope!r}", value=scope)

    values = defaults_deep(values, root_scope(config), ROOT_SCOPE_FIELDS)

    args = values.get("args")
    if not isinstance(args, (list, tuple)):
        raise InvalidScopeError(
            f"Invalid `scope.args` passed to generator: {args!r}", value=args
        )

    # Alias the first handful of arguments for use as :params in target keys
    for index, alias in enumerate(ARG_ALIASES):
        if alias not in values:
            values[alias] = args[index] if index < len(args) else None

    if values.get("dest_path") is None:
        values["dest_path"] = "."

    try:
        return Scope.model_validate(values)
    except ValidationError as exc:
        raise InvalidScopeError(f"Invalid scope passed to generator: {exc}", value=scope) from exc


def normalize_generator(generator: GeneratorRef) -> GeneratorDef:
    """Resolve shorthand and merge *generator* over the root generator."""
    try:
        values = generator_to_mapping(generator)
    except TypeError as exc:
        raise GeneratorError(f"Generator error: {exc}") from exc

    values = defaults_deep(values, root_generator(), ROOT_GENERATOR_FIELDS)
    try:
        return GeneratorDef.model_validate(values)
    except ValidationError as exc:
        raise GeneratorError(f"Generator error: Invalid generator definition: {exc}") from exc
