"""Model description parser.

Turns the compact model language into ``Model`` entities with derived names.

Usage::

    from gincrud.parser import parse_models_with_warnings

    result = parse_models_with_warnings("Book\\nTitle string required")
    print(result.models)
    print(result.warnings)
"""

from gincrud.parser.dsl import parse_models, parse_models_with_warnings, tokenize_tags
from gincrud.parser.models import Model, ModelField, ParseResult, ParseWarning

__all__ = [
    "parse_models",
    "parse_models_with_warnings",
    "tokenize_tags",
    "Model",
    "ModelField",
    "ParseResult",
    "ParseWarning",
]
