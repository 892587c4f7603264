"""Target key resolution.

Target keys are relative paths that may contain route-style placeholders
(``:name``), e.g. ``"src/:arg0/:module.py"``.  Each placeholder is replaced
with the string form of the scope value of the same name.  A literal colon
can be written as ``\\:``.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .errors import TemplateParseError, UnresolvedPlaceholderError
from .models import Scope


# Escaped colon | placeholder | dangling colon
_TOKEN_RE = re.compile(r"(\\:)|:([A-Za-z_]\w*)|(:)")


def parse_placeholders(template: str) -> list[str]:
    """Return the placeholder names in *template*, in order of first appearance.

    Raises:
        TemplateParseError: If a ``:`` is not followed by an identifier.
    """
    names: list[str] = []
    for match in _TOKEN_RE.finditer(template):
        if match.group(3):
            raise TemplateParseError(
                template, f"dangling ':' at position {match.start()}"
            )
        name = match.group(2)
        if name and name not in names:
            names.append(name)
    return names


def resolve_key_path(template: str, scope: Scope | Mapping[str, Any]) -> str:
    """Substitute every placeholder in *template* with its scope value.

    An empty template is treated as ``"."``.  Every occurrence of a
    placeholder is replaced, not only the first.

    Raises:
        UnresolvedPlaceholderError: If a placeholder's value is missing or falsy.
        TemplateParseError: If the template is malformed or a value cannot
            be turned into a string.
    """
    if template == "":
        template = "."

    names = parse_placeholders(template)

    replacements: dict[str, str] = {}
    for name in names:
        try:
            value = _lookup(scope, name)
            present = bool(value)
        except Exception as exc:
            raise TemplateParseError(template, str(exc)) from exc
        if not present:
            raise UnresolvedPlaceholderError(name, template)
        try:
            replacements[name] = str(value)
        except Exception as exc:
            raise TemplateParseError(template, str(exc)) from exc

    def _substitute(match: re.Match[str]) -> str:
        if match.group(1):
            return ":"
        return replacements[match.group(2)]

    return _TOKEN_RE.sub(_substitute, template)


def compose_dest_path(root_path: str | Path, dest_path: str | Path, key: str) -> Path:
    """Anchor *key* at *dest_path*, itself anchored at *root_path*.

    The result is absolute and normalised.  The filesystem is not consulted,
    so symlinks are left alone.
    """
    joined = os.path.join(str(root_path), str(dest_path), key)
    return Path(os.path.abspath(joined))


def _lookup(scope: Scope | Mapping[str, Any], name: str) -> Any:
    if isinstance(scope, Scope):
        return scope.lookup(name)
    return scope.get(name)
