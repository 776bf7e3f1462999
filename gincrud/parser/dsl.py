"""Parser for the compact model description language.

The language is line oriented.  Definitions are separated by empty lines (a line
holding only whitespace stays inside its definition and is skipped); the
first line of a definition is the model name and every following line is a
field::

    Book
    Title string required
    Pages int gorm:"column:page_count"

    Category
    Name string required

Malformed input is never an error: blocks without field lines and field lines
with fewer than two tokens are dropped and reported as ``ParseWarning`` entries
next to the parsed models.
"""

from __future__ import annotations

from dataclasses import dataclass

from gincrud.inflector import snake_case

from .models import Model, ModelField, ParseResult, ParseWarning


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_BLOCK_SEPARATOR = "\n\n"
_PERSISTENCE_PREFIX = "gorm:"
_BINDING_PREFIX = "binding:"
_REQUIRED = "required"
_QUOTES = "\"'"


# ---------------------------------------------------------------------------
# Tag tokenizer
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldTags:
    """Tags extracted from the tokens after ``<name> <type>``."""
    persistence_hint: str = ""
    required: bool = False


def _unquote(value: str) -> str:
    return value.strip(_QUOTES)


def tokenize_tags(tokens: list[str]) -> FieldTags:
    """Classify tag tokens into a persistence hint and a required marker.

    ``gorm:"..."`` carries the persistence hint (the last one wins),
    a bare ``required`` token or a ``binding:"required"`` tag marks the field
    as required.  Any other token is ignored.
    """
    hint = ""
    required = False
    for token in tokens:
        if token.startswith(_PERSISTENCE_PREFIX):
            hint = _unquote(token[len(_PERSISTENCE_PREFIX):])
        elif token.startswith(_BINDING_PREFIX):
            rules = _unquote(token[len(_BINDING_PREFIX):]).split(",")
            required = required or _REQUIRED in rules
        elif token == _REQUIRED:
            required = True
    return FieldTags(persistence_hint=hint, required=required)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _split_blocks(text: str) -> list[list[str]]:
    """Split *text* into definition blocks of stripped, non-empty lines."""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    blocks: list[list[str]] = []
    for raw_block in normalized.split(_BLOCK_SEPARATOR):
        lines = [line.strip() for line in raw_block.split("\n")]
        lines = [line for line in lines if line]
        if lines:
            blocks.append(lines)
    return blocks


def _parse_field(line: str, strict_tags: bool) -> ModelField | None:
    parts = line.split()
    if len(parts) < 2:
        return None

    name, type_ = parts[0], parts[1]
    tags = tokenize_tags(parts[2:])
    required = tags.required if strict_tags else _REQUIRED in line

    return ModelField(
        name=name,
        type=type_,
        serialization_tag=name.lower(),
        persistence_tag=tags.persistence_hint or f"column:{snake_case(name)}",
        required=required,
    )


def parse_models_with_warnings(text: str, *, strict_tags: bool = False) -> ParseResult:
    """Parse a model description into models plus a list of skipped input.

    Args:
        text: Raw model description.
        strict_tags: When ``False`` (the default) a field is required if the
            substring ``required`` appears anywhere on its line.  When
            ``True`` only a dedicated ``required`` token or a
            ``binding:"required"`` tag counts.

    Returns:
        A ``ParseResult``; never raises for malformed input.
    """
    result = ParseResult()
    seen: dict[str, int] = {}

    for block_no, lines in enumerate(_split_blocks(text), start=1):
        if len(lines) < 2:
            result.warnings.append(ParseWarning(
                block=block_no,
                text=lines[0],
                reason="definition has no field lines",
            ))
            continue

        fields: list[ModelField] = []
        for line_no, line in enumerate(lines[1:], start=2):
            field = _parse_field(line, strict_tags)
            if field is None:
                result.warnings.append(ParseWarning(
                    block=block_no,
                    line=line_no,
                    text=line,
                    reason="field line needs at least a name and a type",
                ))
                continue
            fields.append(field)

        model = Model.from_name(lines[0], fields)
        if model.snake_name in seen:
            result.warnings.append(ParseWarning(
                block=block_no,
                line=1,
                text=lines[0],
                reason=f"model name collides with block {seen[model.snake_name]}",
            ))
        else:
            seen[model.snake_name] = block_no
        result.models.append(model)

    return result


def parse_models(text: str, *, strict_tags: bool = False) -> list[Model]:
    """Parse a model description and return only the models."""
    return parse_models_with_warnings(text, strict_tags=strict_tags).models
