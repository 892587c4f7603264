"""gentree configuration.

Typed engine settings built on Pydantic v2 so they can be validated at
construction time and serialised to/from JSON or environment variables
without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """Tuning knobs for the generation engine.

    Instances are typically created once by the CLI entry point (or by the
    caller of ``generate``) and then folded into the root scope.
    """

    max_hops: int = Field(
        default=100, ge=1, description="Maximum depth of nested generators"
    )
    max_resolves: int = Field(
        default=5, ge=1, description="Passes allowed to turn a descriptor into a valid target"
    )
    templates_dir_name: str = Field(
        default="templates",
        description="Directory beside a generator file that holds its templates",
    )
    generator_filenames: list[str] = Field(
        default=["generator.yaml", "generator.yml", "generator.json"],
        description="File names looked up when a generator identifier is a directory",
    )
    force: bool = Field(default=False, description="Overwrite existing destinations")
    dry_run: bool = Field(default=False, description="Report targets without writing")
    quiet: bool = Field(default=False, description="Suppress per-path console output")

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "EngineConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build an ``EngineConfig`` from environment variables.

        Recognised variables (all optional):
            GENTREE_MAX_HOPS, GENTREE_MAX_RESOLVES, GENTREE_TEMPLATES_DIR,
            GENTREE_FORCE, GENTREE_DRY_RUN, GENTREE_QUIET.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("GENTREE_MAX_HOPS"):
            kwargs["max_hops"] = int(os.environ["GENTREE_MAX_HOPS"])
        if os.environ.get("GENTREE_MAX_RESOLVES"):
            kwargs["max_resolves"] = int(os.environ["GENTREE_MAX_RESOLVES"])
        if os.environ.get("GENTREE_TEMPLATES_DIR"):
            kwargs["templates_dir_name"] = os.environ["GENTREE_TEMPLATES_DIR"]

        for flag in ("force", "dry_run", "quiet"):
            raw = os.environ.get(f"GENTREE_{flag.upper()}")
            if raw:
                kwargs[flag] = _parse_bool(raw)

        return cls(**kwargs)


def _parse_bool(value: str) -> bool:
    """Interpret common truthy spellings of an environment flag."""
    return value.strip().lower() in {"1", "true", "yes", "on"}
