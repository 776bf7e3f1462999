"""gincrud configuration.

Typed settings for the generation pipeline.  All settings use Pydantic v2
models so they can be validated at construction time and serialised to/from
JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global gincrud configuration.

    Instances are typically created once by the CLI entry point (or by the
    service hosting the generation trigger) and then shared, read-only, by
    every generation request.
    """

    template_dir: Optional[Path] = Field(
        default=None, description="Template root; None uses the packaged templates"
    )
    staging_dir: Optional[Path] = Field(
        default=None, description="Parent of per-request staging dirs; None uses the system temp dir"
    )
    staging_prefix: str = Field(default="gincrud-")
    output_dir: Path = Field(default=Path("."))
    compresslevel: Optional[int] = Field(
        default=None, ge=0, le=9, description="Deflate level; None uses zlib's default"
    )
    strict_tags: bool = Field(
        default=False, description="Only dedicated tag tokens mark a field as required"
    )

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
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            GINCRUD_TEMPLATE_DIR, GINCRUD_STAGING_DIR, GINCRUD_OUTPUT_DIR,
            GINCRUD_COMPRESSLEVEL, GINCRUD_STRICT_TAGS.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("GINCRUD_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["GINCRUD_TEMPLATE_DIR"])
        if os.environ.get("GINCRUD_STAGING_DIR"):
            kwargs["staging_dir"] = Path(os.environ["GINCRUD_STAGING_DIR"])
        if os.environ.get("GINCRUD_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["GINCRUD_OUTPUT_DIR"])
        if os.environ.get("GINCRUD_COMPRESSLEVEL"):
            kwargs["compresslevel"] = int(os.environ["GINCRUD_COMPRESSLEVEL"])
        if os.environ.get("GINCRUD_STRICT_TAGS"):
            kwargs["strict_tags"] = os.environ["GINCRUD_STRICT_TAGS"].strip().lower() in _TRUTHY
        return cls(**kwargs)
