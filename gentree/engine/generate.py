"""Recursive generation engine.

``generate`` takes a generator definition and a scope, runs the
generator's bootstrap, then resolves and dispatches every target
concurrently.  A target may itself be a generator: the executor receives a
``recursive_generate`` handle that re-enters this function with the same
executor and configuration.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path
from typing import Any

from gentree.config import EngineConfig

from .defaults import normalize_generator, normalize_scope
from .errors import BootstrapError, InvalidTargetError
from .models import GeneratorDef, GeneratorRef, Scope
from .paths import compose_dest_path, resolve_key_path
from .targets import execute_target


# (generator, scope) -> paths
RecursiveGenerate = Callable[..., Awaitable[list[Path]]]
# (target, scope, recursive_generate, parent) -> paths
Executor = Callable[..., Awaitable[list[Path]]]


async def generate(
    generator: GeneratorRef,
    scope: Scope | Mapping[str, Any],
    *,
    executor: Executor | None = None,
    config: EngineConfig | None = None,
) -> list[Path]:
    """Run *generator* against *scope*.

    Args:
        generator: A generator identifier, a mapping, or a ``GeneratorDef``.
        scope: A ``Scope`` or a mapping with at least an ``args`` list.
        executor: Materialises one resolved target.  Defaults to
            :func:`gentree.engine.targets.execute_target`.
        config: Engine settings used for the root scope defaults.

    Returns:
        Every path produced by the targets (and nested generators), in
        target declaration order.

    Raises:
        InvalidScopeError: If the scope is invalid; nothing else runs.
        BootstrapError: If the bootstrap step fails; no target runs.
        GeneratorError: The first error raised by any target.  Targets
            already running are not cancelled.
    """
    scope = normalize_scope(scope, config)
    definition = normalize_generator(generator)

    if executor is None:
        executor = functools.partial(execute_target, config=config)
    recursive_generate = functools.partial(generate, executor=executor, config=config)

    await _run_bootstrap(definition, scope)

    results = await asyncio.gather(
        *(
            _generate_target(key, target, scope, definition, executor, recursive_generate)
            for key, target in definition.targets.items()
        )
    )
    return [path for paths in results for path in (paths or [])]


async def _run_bootstrap(definition: GeneratorDef, scope: Scope) -> None:
    """Call the bootstrap step, awaiting it if it is a coroutine."""
    if definition.bootstrap is None:
        return
    try:
        result = definition.bootstrap(scope)
        if inspect.isawaitable(result):
            await result
    except Exception as exc:
        raise BootstrapError(definition.generator, exc) from exc


async def _generate_target(
    key: str,
    target: Any,
    scope: Scope,
    definition: GeneratorDef,
    executor: Executor,
    recursive_generate: RecursiveGenerate,
) -> list[Path]:
    if target is None or target == "":
        raise InvalidTargetError(key, target)

    key_path = resolve_key_path(key or ".", scope)

    # Each target gets its own deep copy of the scope
    dest_path = compose_dest_path(scope.root_path, scope.dest_path, key_path)
    derived = scope.derive(dest_path=dest_path)

    return await executor(target, derived, recursive_generate, definition)
