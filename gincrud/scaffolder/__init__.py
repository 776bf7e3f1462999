"""gincrud scaffolder -- generates Gin + GORM project structures.

This module takes a ``ProjectIdentity`` and the parsed models and renders a
ready-to-build Go project directory: entry point, config loader, database
initialiser, router, logging middleware, env/go.mod/README/Dockerfile/
.gitignore, plus a GORM model, a CRUD handler and an OpenAPI document per
model.

Quick usage::

    from gincrud.parser import parse_models
    from gincrud.scaffolder import ProjectIdentity, ProjectScaffolder

    identity = ProjectIdentity(name="demo", module_path="example.com/demo", port="8080")
    scaffolder = ProjectScaffolder(identity, parse_models("Book\\nTitle string"))
    written = scaffolder.generate("/tmp/demo")
"""

from gincrud.scaffolder.generator import (
    MODEL_FILES,
    PROJECT_FILES,
    SKELETON_DIRS,
    ProjectIdentity,
    ProjectScaffolder,
    ScaffoldError,
)
from gincrud.scaffolder.templates import RenderError, TemplateRenderer, default_renderer

__all__ = [
    "MODEL_FILES",
    "PROJECT_FILES",
    "SKELETON_DIRS",
    "ProjectIdentity",
    "ProjectScaffolder",
    "ScaffoldError",
    "RenderError",
    "TemplateRenderer",
    "default_renderer",
]
