"""Pydantic v2 models for the model-description parser.

Defines the entities produced by :mod:`gincrud.parser.dsl` and consumed by the
scaffolder templates.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from gincrud.inflector import lower_initial, pluralize, snake_case


# ---------------------------------------------------------------------------
# Model entities
# ---------------------------------------------------------------------------

class ModelField(BaseModel):
    """A single typed field of a model."""
    name: str = Field(..., description="Field name as written, e.g. 'Title'")
    type: str = Field(..., description="Go type token, e.g. 'string', 'int', 'time.Time'")
    serialization_tag: str = Field(..., description="JSON key, the lowercased field name")
    persistence_tag: str = Field(..., description="GORM tag body, e.g. 'column:title'")
    required: bool = Field(default=False, description="Whether the field is required")


class Model(BaseModel):
    """A named entity with typed fields and its derived names."""
    name: str = Field(..., description="Model name as written, e.g. 'UserProfile'")
    fields: list[ModelField] = Field(default_factory=list, description="Fields in source order")
    snake_name: str = Field(default="", description="e.g. 'user_profile'")
    lower_initial_name: str = Field(default="", description="e.g. 'userProfile'")
    plural_name: str = Field(default="", description="e.g. 'UserProfiles'")

    @classmethod
    def from_name(cls, name: str, fields: Optional[list[ModelField]] = None) -> "Model":
        """Build a ``Model`` with its derived names computed from *name*."""
        return cls(
            name=name,
            fields=list(fields or []),
            snake_name=snake_case(name),
            lower_initial_name=lower_initial(name),
            plural_name=pluralize(name),
        )


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------

class ParseWarning(BaseModel):
    """A block or line the parser skipped."""
    block: int = Field(..., description="1-based index of the definition block")
    line: Optional[int] = Field(
        default=None, description="1-based position among the block's non-empty lines, None for whole-block drops"
    )
    text: str = Field(default="", description="The skipped source text")
    reason: str = Field(..., description="Why it was skipped")


class ParseResult(BaseModel):
    """Complete result of parsing a model description."""
    models: list[Model] = Field(default_factory=list, description="Models in input order")
    warnings: list[ParseWarning] = Field(
        default_factory=list, description="Skipped blocks and lines"
    )
