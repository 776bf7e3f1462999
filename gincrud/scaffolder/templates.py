"""Jinja2 template rendering for project scaffolding.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``gincrud/scaffolder/templates/`` directory and renders them with the
generation context (project identity plus one or all models).  Rendering
failures of any kind are surfaced as ``RenderError``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)

from gincrud.inflector import lower_initial, pluralize, snake_case


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class RenderError(Exception):
    """Raised when a template cannot be loaded or rendered."""

    def __init__(self, template: str, cause: Exception) -> None:
        self.template = template
        self.cause = cause
        super().__init__(f"Cannot render template {template}: {cause}")


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Undefined context variables are errors, so a template
    that references a field the context does not carry fails loudly instead of
    rendering an empty string.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["snake_case"] = snake_case
        self.env.filters["pluralize"] = pluralize
        self.env.filters["lower_initial"] = lower_initial
        self.env.filters["openapi_type"] = _openapi_type_filter

    # -- Rendering -----------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"pkg/api/server.go.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.

        Raises:
            RenderError: If the template is missing, malformed, or fails
                while rendering.
        """
        try:
            template = self.env.get_template(template_path)
            return template.render(**context)
        except (TemplateError, TypeError, ValueError) as exc:
            raise RenderError(template_path, exc) from exc

    def render_bytes(self, template_path: str, context: dict[str, Any]) -> bytes:
        """Render a template and return the UTF-8 encoded result."""
        text = self.render(template_path, context)
        try:
            return text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise RenderError(template_path, exc) from exc

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        try:
            template = self.env.from_string(template_string)
            return template.render(**context)
        except (TemplateError, TypeError, ValueError) as exc:
            raise RenderError("<string>", exc) from exc

    # -- Utility -----------------------------------------------------------

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*.

        Paths are relative to the template root directory and always use
        forward slashes.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*.j2")
        )


@lru_cache(maxsize=1)
def default_renderer() -> TemplateRenderer:
    """Return the process-wide renderer over the packaged templates.

    The environment caches compiled templates, so every request shares the
    same read-only template bodies.
    """
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

_OPENAPI_TYPES: dict[str, str] = {
    "string": "string",
    "bool": "boolean",
    "int": "integer",
    "int8": "integer",
    "int16": "integer",
    "int32": "integer",
    "int64": "integer",
    "uint": "integer",
    "uint8": "integer",
    "uint16": "integer",
    "uint32": "integer",
    "uint64": "integer",
    "float32": "number",
    "float64": "number",
}


def _openapi_type_filter(go_type: str) -> str:
    """Map a Go field type to an OpenAPI schema type (``string`` fallback)."""
    return _OPENAPI_TYPES.get(go_type.lstrip("*"), "string")
