"""Exception hierarchy for the generation engine.

Every failure the engine or its target executor can report derives from
``GeneratorError`` so callers (and the CLI) can catch a single type.  The
subclasses carry the offending value as an attribute for programmatic use.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class GeneratorError(Exception):
    """Base class for all generation failures."""


class InvalidScopeError(GeneratorError):
    """Raised when the scope passed to ``generate`` cannot be used."""

    def __init__(self, message: str, *, value: Any = None) -> None:
        self.value = value
        super().__init__(message)


class BootstrapError(GeneratorError):
    """Raised when a generator's bootstrap step fails."""

    def __init__(self, generator: str | None, cause: BaseException) -> None:
        self.generator = generator
        label = f" `{generator}`" if generator else ""
        super().__init__(f"Generator error: bootstrap of generator{label} failed: {cause}")


class InvalidTargetError(GeneratorError):
    """Raised when a target descriptor is empty or cannot be resolved."""

    def __init__(self, key_path: str, target: Any, reason: str = "Invalid target") -> None:
        self.key_path = key_path
        self.target = target
        super().__init__(f"Generator error: {reason}: {{{key_path!r}: {target!r}}}")


class UnresolvedPlaceholderError(GeneratorError):
    """Raised when a target key references a scope value that is missing or falsy."""

    def __init__(self, placeholder: str, template: str) -> None:
        self.placeholder = placeholder
        self.template = template
        super().__init__(
            f'Generator error: Unknown value "{placeholder}" in scope. (target: `{template}`)'
        )


class TemplateParseError(GeneratorError):
    """Raised when a target key template is malformed."""

    def __init__(self, template: str, detail: str = "") -> None:
        self.template = template
        suffix = f" ({detail})" if detail else ""
        super().__init__(f"Generator error: Could not parse target key: {template}{suffix}")


class TargetExistsError(GeneratorError):
    """Raised when a helper would overwrite an existing path without ``force``."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Something else already exists at: {path}")


class TemplateNotFoundError(GeneratorError):
    """Raised when a ``template`` or ``copy`` source cannot be found."""

    def __init__(self, template_path: str, templates_directory: Path | None) -> None:
        self.template_path = template_path
        self.templates_directory = templates_directory
        where = templates_directory if templates_directory else "<no templates directory>"
        super().__init__(f"Template not found: {template_path} (in {where})")


class GeneratorNotFoundError(GeneratorError):
    """Raised when a generator identifier cannot be loaded."""

    def __init__(self, identifier: str, detail: str = "") -> None:
        self.identifier = identifier
        suffix = f": {detail}" if detail else ""
        super().__init__(f"Generator not found: `{identifier}`{suffix}")


class MaxHopsExceededError(GeneratorError):
    """Raised when nested generators recurse deeper than ``max_hops``."""

    def __init__(self, max_hops: int) -> None:
        self.max_hops = max_hops
        super().__init__(
            f"`max_hops` ({max_hops}) exceeded! "
            "There is probably a recursive loop in one of your generators."
        )
