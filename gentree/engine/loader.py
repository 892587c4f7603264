"""Generator loading.

Turns a generator identifier into a ``GeneratorDef``.  Identifiers are
tried, in order, as:

1. an entry in ``scope.modules`` (a definition, or another identifier),
2. a ``.json`` / ``.yaml`` / ``.yml`` generator file,
3. a directory holding one of ``EngineConfig.generator_filenames``,
4. a dotted Python module path, optionally ``module:attribute``
   (the attribute defaults to ``GENERATOR``).

Relative file paths resolve against ``scope.root_path``.
"""

from __future__ import annotations

import importlib
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from gentree.config import EngineConfig
from gentree.utils import load_data_file

from .errors import GeneratorError, GeneratorNotFoundError
from .models import GeneratorDef, Scope, generator_to_mapping


DATA_SUFFIXES = (".json", ".yaml", ".yml")
DEFAULT_ATTRIBUTE = "GENERATOR"

_MODULE_RE = re.compile(r"^[A-Za-z_][\w.]*(?::[A-Za-z_]\w*)?$")


def load_generator(
    identifier: str,
    scope: Scope | None = None,
    config: EngineConfig | None = None,
) -> GeneratorDef:
    """Load the generator named *identifier*.

    Raises:
        GeneratorNotFoundError: If no resolution strategy finds it.
        GeneratorError: If it is found but its definition is invalid.
    """
    config = config or EngineConfig()

    modules = scope.modules if scope is not None else {}
    if identifier in modules:
        override = modules[identifier]
        if not isinstance(override, str):
            return _as_definition(override, identifier)
        identifier = override

    root = scope.root_path if scope is not None else Path.cwd()
    candidate = Path(identifier).expanduser()
    if not candidate.is_absolute():
        candidate = root / candidate

    if candidate.is_file() and candidate.suffix.lower() in DATA_SUFFIXES:
        return _load_file(candidate, identifier, config)

    if candidate.is_dir():
        for filename in config.generator_filenames:
            if (candidate / filename).is_file():
                return _load_file(candidate / filename, identifier, config)
        raise GeneratorNotFoundError(
            identifier, f"no {' / '.join(config.generator_filenames)} in {candidate}"
        )

    if _MODULE_RE.match(identifier):
        return _load_module(identifier, config)

    raise GeneratorNotFoundError(identifier)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def _load_file(path: Path, identifier: str, config: EngineConfig) -> GeneratorDef:
    """Load a data-only generator definition from JSON or YAML."""
    try:
        data = load_data_file(path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise GeneratorError(f"Could not load generator file {path}: {exc}") from exc

    templates = data.get("templates_directory")
    if templates:
        data["templates_directory"] = path.parent / templates
    elif (path.parent / config.templates_dir_name).is_dir():
        data["templates_directory"] = path.parent / config.templates_dir_name

    bootstrap = data.get("bootstrap")
    if isinstance(bootstrap, str):
        data["bootstrap"] = _import_object(bootstrap, identifier)

    return _as_definition(data, identifier)


def _load_module(identifier: str, config: EngineConfig) -> GeneratorDef:
    """Import ``module[:attribute]`` and read its generator definition."""
    module_name, _, attribute = identifier.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise GeneratorNotFoundError(identifier, str(exc)) from exc

    attribute = attribute or DEFAULT_ATTRIBUTE
    if not hasattr(module, attribute):
        raise GeneratorNotFoundError(identifier, f"module has no `{attribute}`")

    obj = getattr(module, attribute)
    if callable(obj) and not isinstance(obj, (GeneratorDef, Mapping)):
        obj = obj()

    definition = _as_definition(obj, identifier)
    module_file = getattr(module, "__file__", None)
    if definition.templates_directory is None and module_file:
        templates = Path(module_file).parent / config.templates_dir_name
        if templates.is_dir():
            definition.templates_directory = templates
    return definition


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _as_definition(ref: Any, identifier: str) -> GeneratorDef:
    if isinstance(ref, str):
        raise GeneratorError(
            f"Generator `{identifier}` resolved to another identifier: {ref!r}"
        )
    try:
        values = generator_to_mapping(ref)
        values.setdefault("generator", identifier)
        return GeneratorDef.model_validate(values)
    except (TypeError, ValidationError) as exc:
        raise GeneratorError(f"Invalid definition for generator `{identifier}`: {exc}") from exc


def _import_object(path: str, identifier: str) -> Any:
    """Import ``module:attribute`` (or ``module.attribute``)."""
    if ":" in path:
        module_name, _, attribute = path.partition(":")
    else:
        module_name, _, attribute = path.rpartition(".")
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attribute)
    except (ImportError, AttributeError, ValueError) as exc:
        raise GeneratorError(
            f"Could not import bootstrap `{path}` for generator `{identifier}`: {exc}"
        ) from exc
