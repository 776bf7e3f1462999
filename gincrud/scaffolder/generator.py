"""Main scaffolding orchestrator.

Takes a ``ProjectIdentity`` and the parsed models and materialises a complete
Gin + GORM project tree: the fixed directory skeleton, ten project-level files
rendered against every model, and three files per model.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gincrud.parser.models import Model

from .templates import RenderError, TemplateRenderer, default_renderer


# ---------------------------------------------------------------------------
# Project skeleton
# ---------------------------------------------------------------------------

SKELETON_DIRS: tuple[str, ...] = (
    "cmd",
    "pkg/api",
    "pkg/config",
    "pkg/database",
    "pkg/models",
    "pkg/handlers",
    "pkg/middlewares",
    "api",
    "migrations",
    "docs",
)

# Output path -> template name
PROJECT_FILES: dict[str, str] = {
    "cmd/main.go": "cmd/main.go.j2",
    "pkg/config/config.go": "pkg/config/config.go.j2",
    "pkg/database/database.go": "pkg/database/database.go.j2",
    "pkg/api/server.go": "pkg/api/server.go.j2",
    "pkg/middlewares/logger.go": "pkg/middlewares/logger.go.j2",
    ".env": ".env.j2",
    "go.mod": "go.mod.j2",
    "README.md": "README.md.j2",
    "Dockerfile": "Dockerfile.j2",
    ".gitignore": ".gitignore.j2",
}

# Output path pattern (formatted with the model's snake name) -> template name
MODEL_FILES: dict[str, str] = {
    "pkg/models/{name}.go": "pkg/models/model.go.j2",
    "pkg/handlers/{name}.go": "pkg/handlers/handler.go.j2",
    "api/{name}.yaml": "api/model.yaml.j2",
}


# ---------------------------------------------------------------------------
# Identity & errors
# ---------------------------------------------------------------------------


class ProjectIdentity(BaseModel):
    """Who the generated project is: its name, Go module path and port."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project name, also the archive base name")
    module_path: str = Field(..., description="Go module path, accepted as-is")
    port: str = Field(..., description="Port the generated server listens on")


class ScaffoldError(Exception):
    """Raised when a project file cannot be rendered or written."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


# ---------------------------------------------------------------------------
# Scaffolder
# ---------------------------------------------------------------------------


class ProjectScaffolder:
    """Writes the project tree for one generation request.

    Every file is created exactly once; an existing file at a target path is
    an error rather than something to overwrite.
    """

    def __init__(
        self,
        identity: ProjectIdentity,
        models: list[Model],
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.identity = identity
        self.models = list(models)
        self.renderer = renderer or default_renderer()

    # -- Public API --------------------------------------------------------

    def generate(self, root: str | Path) -> list[str]:
        """Generate the complete project under *root*.

        Args:
            root: Existing, empty directory to populate.

        Returns:
            Root-relative paths of the written files, in write order.

        Raises:
            ScaffoldError: On a path collision between models, or when any
                file fails to render or write.  Generation stops at the
                first failure.
        """
        root = Path(root)
        self._check_model_paths()

        written: list[str] = []
        self._create_directory_structure(root)

        project_ctx = self._build_context()
        for rel_path, template_name in PROJECT_FILES.items():
            self._generate_file(root, rel_path, template_name, project_ctx)
            written.append(rel_path)

        for model in self.models:
            model_ctx = self._build_context(model)
            for pattern, template_name in MODEL_FILES.items():
                rel_path = pattern.format(name=model.snake_name)
                self._generate_file(root, rel_path, template_name, model_ctx)
                written.append(rel_path)

        return written

    def expected_files(self) -> list[str]:
        """Root-relative paths :meth:`generate` will write, in write order."""
        paths = list(PROJECT_FILES)
        for model in self.models:
            paths.extend(p.format(name=model.snake_name) for p in MODEL_FILES)
        return paths

    # -- Context building --------------------------------------------------

    def _build_context(self, model: Model | None = None) -> dict[str, Any]:
        """Project-level context carries every model; per-model context one."""
        if model is None:
            return {"project": self.identity, "models": self.models}
        return {"project": self.identity, "model": model}

    # -- Directory structure -----------------------------------------------

    def _create_directory_structure(self, root: Path) -> None:
        """Create the fixed project directory tree."""
        for d in SKELETON_DIRS:
            path = root / d
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise ScaffoldError(d, f"cannot create directory: {exc}") from exc

    # -- Validation --------------------------------------------------------

    def _check_model_paths(self) -> None:
        """Reject models that would write to an empty, shared or foreign path."""
        first_pattern = next(iter(MODEL_FILES))
        owners: dict[str, str] = {}
        for model in self.models:
            rel_path = first_pattern.format(name=model.snake_name)
            if not model.snake_name:
                raise ScaffoldError(rel_path, f"model {model.name!r} has an empty file name")
            if not _is_path_component(model.snake_name):
                raise ScaffoldError(
                    rel_path,
                    f"model {model.name!r} does not map to a single file name",
                )
            if model.snake_name in owners:
                raise ScaffoldError(
                    rel_path,
                    f"models {owners[model.snake_name]!r} and {model.name!r} "
                    f"both map to {model.snake_name!r}",
                )
            owners[model.snake_name] = model.name

    # -- File writing --------------------------------------------------------

    def _generate_file(
        self,
        root: Path,
        rel_path: str,
        template_name: str,
        context: dict[str, Any],
    ) -> Path:
        """Render *template_name* and write it once to ``root / rel_path``."""
        try:
            content = self.renderer.render_bytes(template_name, context)
        except RenderError as exc:
            raise ScaffoldError(rel_path, str(exc)) from exc

        out = root / rel_path
        if not out.resolve().is_relative_to(root.resolve()):
            raise ScaffoldError(rel_path, "path resolves outside the project root")
        try:
            _write_file(out, content)
        except OSError as exc:
            raise ScaffoldError(rel_path, f"cannot write file: {exc}") from exc
        return out


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

_SEPARATORS = {"/", "\\", os.sep} | ({os.altsep} if os.altsep else set())


def _is_path_component(name: str) -> bool:
    """True when *name* is one plain file name: no separators, not ``.``/``..``."""
    if name in (".", ".."):
        return False
    return not any(sep in name for sep in _SEPARATORS)


def _write_file(path: Path, content: bytes) -> None:
    """Create parent dirs and write *content*; fails if *path* exists."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("xb") as fh:
        fh.write(content)
