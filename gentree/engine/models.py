"""Pydantic models for generation scopes and generator definitions.

A ``Scope`` carries every value a generation run can see: positional
arguments, the root and destination paths, helper options, and any extra
named parameters used as ``:placeholders`` in target keys.  A
``GeneratorDef`` bundles a bootstrap step with a mapping of target key
templates to target descriptors.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidScopeError


# ---------------------------------------------------------------------------
# Scope
# ---------------------------------------------------------------------------

ARG_ALIASES: tuple[str, ...] = ("arg0", "arg1", "arg2", "arg3")


class Scope(BaseModel):
    """Generation context for one ``generate`` call and its descendants.

    Extra keyword arguments are kept as-is so they can be referenced as
    placeholders (``:name``) in target keys and as variables in templates.
    """

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    args: list[Any] = Field(..., description="Positional arguments, in order")
    arg0: Any = None
    arg1: Any = None
    arg2: Any = None
    arg3: Any = None
    root_path: Path = Field(default_factory=Path.cwd, description="Base directory anchor")
    dest_path: Path = Field(default=Path("."), description="Current destination path")
    force: bool = Field(default=False, description="Overwrite existing destinations")
    dry_run: bool = Field(default=False, description="Report targets without writing")
    quiet: bool = Field(default=False, description="Suppress per-path console output")
    depth: int = Field(default=0, ge=0, description="Nested generator depth")
    max_hops: int = Field(default=100, ge=1, description="Maximum nested generator depth")
    templates_directory: Path | None = Field(default=None)
    modules: dict[str, Any] = Field(
        default_factory=dict,
        description="Identifier -> generator overrides consulted by the loader",
    )

    def lookup(self, name: str) -> Any:
        """Return the value named *name*, or ``None`` if the scope has none."""
        if name in type(self).model_fields:
            return getattr(self, name)
        return (self.model_extra or {}).get(name)

    def derive(self, **updates: Any) -> "Scope":
        """Return an independent deep copy of this scope with *updates* applied.

        Raises:
            InvalidScopeError: If a scope value cannot be deep-copied.
        """
        try:
            return self.model_copy(update=updates, deep=True)
        except (TypeError, copy.Error) as exc:
            name = next(
                (key for key, value in self.context().items() if not _copyable(value)),
                None,
            )
            raise InvalidScopeError(
                f"Invalid scope value `{name}`: scope values must be deep-copyable ({exc})",
                value=name,
            ) from exc

    def context(self) -> dict[str, Any]:
        """Flat mapping of every field and extra value, for template rendering."""
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(self.model_extra or {})
        return values


# ---------------------------------------------------------------------------
# Generator definition
# ---------------------------------------------------------------------------


class GeneratorDef(BaseModel):
    """A bootstrap step plus a mapping of target key templates to descriptors."""

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    generator: str | None = Field(default=None, description="Identifier of the generator")
    templates_directory: Path | None = Field(default=None)
    bootstrap: Callable[..., Any] | None = Field(
        default=None,
        description="Called once with the scope before any target runs",
    )
    targets: dict[str, Any] = Field(default_factory=dict)


# ``Identifier(str) | Definition(mapping or model)``
GeneratorRef = Union[str, Mapping[str, Any], GeneratorDef]


def explicit_fields(model: BaseModel) -> dict[str, Any]:
    """Return only the values that were explicitly set on *model*.

    Values are not serialised, so callables and nested models survive.
    """
    values = {name: getattr(model, name) for name in model.model_fields_set}
    values.update(model.model_extra or {})
    return values


def generator_to_mapping(generator: GeneratorRef) -> dict[str, Any]:
    """Turn any generator reference into a plain mapping.

    A bare identifier ``"name"`` becomes ``{"generator": "name"}``.
    """
    if isinstance(generator, str):
        return {"generator": generator}
    if isinstance(generator, GeneratorDef):
        return explicit_fields(generator)
    if isinstance(generator, Mapping):
        return dict(generator)
    raise TypeError(f"Unsupported generator reference: {generator!r}")


def is_generator_ref(value: Any) -> bool:
    """Whether *value* looks like a generator reference rather than a helper."""
    if isinstance(value, (str, GeneratorDef)):
        return True
    if isinstance(value, Mapping):
        return "targets" in value or "generator" in value
    return False


def _copyable(value: Any) -> bool:
    try:
        copy.deepcopy(value)
    except (TypeError, copy.Error):
        return False
    return True
