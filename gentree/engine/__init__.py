"""gentree engine -- recursive, path-templated scaffolding.

A generator maps target key templates (``"src/:arg0.py"``) to target
descriptors.  ``generate`` resolves every key against a scope and hands
each target to an executor, which writes files or runs a nested generator.

Quick usage::

    from gentree.engine import generate

    paths = await generate(
        {
            "templates_directory": "/path/to/templates",
            "targets": {
                ":arg0": {"folder": {}},
                ":arg0/README.md": {"template": "README.md.j2"},
            },
        },
        {"args": ["my-project"], "root_path": "/tmp/out"},
    )
"""

from gentree.engine.defaults import normalize_generator, normalize_scope, root_generator, root_scope
from gentree.engine.errors import (
    BootstrapError,
    GeneratorError,
    GeneratorNotFoundError,
    InvalidScopeError,
    InvalidTargetError,
    MaxHopsExceededError,
    TargetExistsError,
    TemplateNotFoundError,
    TemplateParseError,
    UnresolvedPlaceholderError,
)
from gentree.engine.generate import generate
from gentree.engine.loader import load_generator
from gentree.engine.models import GeneratorDef, Scope
from gentree.engine.paths import compose_dest_path, parse_placeholders, resolve_key_path
from gentree.engine.targets import execute_target
from gentree.engine.templates import TemplateRenderer

__all__ = [
    "BootstrapError",
    "GeneratorDef",
    "GeneratorError",
    "GeneratorNotFoundError",
    "InvalidScopeError",
    "InvalidTargetError",
    "MaxHopsExceededError",
    "Scope",
    "TargetExistsError",
    "TemplateNotFoundError",
    "TemplateParseError",
    "TemplateRenderer",
    "UnresolvedPlaceholderError",
    "compose_dest_path",
    "execute_target",
    "generate",
    "load_generator",
    "normalize_generator",
    "normalize_scope",
    "parse_placeholders",
    "resolve_key_path",
    "root_generator",
    "root_scope",
]
