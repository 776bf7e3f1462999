"""gincrud generation pipeline.

Implements the three-stage generation request:

Stage 1: PARSE    -- Turn the model description into ``Model`` entities.
Stage 2: SCAFFOLD -- Render the project tree into a private staging directory.
Stage 3: ARCHIVE  -- Package the staging tree into a ZIP archive.

Each request is synchronous and owns its staging directory, which is removed
on every exit path.  Concurrent requests share nothing but the read-only
template environment.

Usage::

    python -m gincrud.pipeline models.txt --name demo --module example.com/demo
    cat models.txt | python -m gincrud.pipeline - --name demo --port 9000 -o ./dist
"""

from __future__ import annotations

import asyncio
import sys
import tempfile
import time
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from rich.markup import escape

from gincrud.archiver import ArchiveError, build_archive_with_entries
from gincrud.config import Config
from gincrud.parser import Model, ParseWarning, parse_models_with_warnings
from gincrud.scaffolder import (
    ProjectIdentity,
    ProjectScaffolder,
    ScaffoldError,
    TemplateRenderer,
    default_renderer,
)
from gincrud.utils import (
    archive_filename,
    console,
    format_duration,
    format_size,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)

# ---------------------------------------------------------------------------
# Request / result models
# ---------------------------------------------------------------------------


class Stage(str, Enum):
    """Pipeline stage a failure is attributed to."""
    PARSE = "parse"
    SCAFFOLD = "scaffold"
    ARCHIVE = "archive"


class GenerationRequest(BaseModel):
    """Input of one generation request."""
    project_name: str = Field(..., description="Project name, also the archive base name")
    module_path: str = Field(..., description="Go module path of the generated project")
    port: str = Field(default="8080", description="Port the generated server listens on")
    models_text: str = Field(default="", description="Raw model description")

    def identity(self) -> ProjectIdentity:
        return ProjectIdentity(
            name=self.project_name,
            module_path=self.module_path,
            port=self.port,
        )


class GeneratedArchive(BaseModel):
    """A successfully generated project archive."""
    filename: str = Field(..., description="Suggested download name, e.g. 'demo.zip'")
    content: bytes = Field(..., description="ZIP archive bytes")
    entries: list[str] = Field(default_factory=list, description="Archived files, in order")
    models: list[Model] = Field(default_factory=list)
    warnings: list[ParseWarning] = Field(default_factory=list)


class GenerationFailure(BaseModel):
    """A request-scoped failure: where it happened and why."""
    stage: Stage
    message: str


class GenerationOutcome(BaseModel):
    """Either an archive or a failure, never both."""
    success: bool
    archive: Optional[GeneratedArchive] = None
    error: Optional[GenerationFailure] = None


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class GenerationError(Exception):
    """Raised when a generation request fails at some stage."""

    def __init__(self, stage: Stage, message: str) -> None:
        self.stage = stage
        self.message = message
        super().__init__(f"{stage.value}: {message}")

    def to_failure(self) -> GenerationFailure:
        return GenerationFailure(stage=self.stage, message=self.message)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


@lru_cache(maxsize=8)
def _renderer_for(template_dir: Optional[Path]) -> TemplateRenderer:
    if template_dir is None:
        return default_renderer()
    return TemplateRenderer(template_dir)


def generate_project(
    request: GenerationRequest,
    config: Optional[Config] = None,
) -> GeneratedArchive:
    """Run parse -> scaffold -> archive for one request.

    Args:
        request: Project identity and model description.
        config: Pipeline settings; defaults to ``Config()``.

    Returns:
        The generated archive with its entry list and parser warnings.

    Raises:
        GenerationError: When scaffolding or archiving fails.  The staging
            directory has been removed by then.
    """
    config = config or Config()

    parsed = parse_models_with_warnings(request.models_text, strict_tags=config.strict_tags)
    scaffolder = ProjectScaffolder(
        request.identity(),
        parsed.models,
        renderer=_renderer_for(config.template_dir),
    )

    try:
        staging = tempfile.TemporaryDirectory(
            prefix=config.staging_prefix,
            dir=str(config.staging_dir) if config.staging_dir else None,
        )
    except OSError as exc:
        raise GenerationError(Stage.SCAFFOLD, f"cannot create staging directory: {exc}") from exc

    with staging as staging_root:
        try:
            scaffolder.generate(staging_root)
        except ScaffoldError as exc:
            raise GenerationError(Stage.SCAFFOLD, str(exc)) from exc

        try:
            content, entries = build_archive_with_entries(
                staging_root, compresslevel=config.compresslevel
            )
        except ArchiveError as exc:
            raise GenerationError(Stage.ARCHIVE, str(exc)) from exc

    return GeneratedArchive(
        filename=archive_filename(request.project_name),
        content=content,
        entries=entries,
        models=parsed.models,
        warnings=parsed.warnings,
    )


def run_generation(
    request: GenerationRequest,
    config: Optional[Config] = None,
) -> GenerationOutcome:
    """Like :func:`generate_project`, but failures come back as a result."""
    try:
        archive = generate_project(request, config)
    except GenerationError as exc:
        return GenerationOutcome(success=False, error=exc.to_failure())
    return GenerationOutcome(success=True, archive=archive)


async def generate_project_async(
    request: GenerationRequest,
    config: Optional[Config] = None,
) -> GeneratedArchive:
    """Run :func:`generate_project` in a worker thread."""
    return await asyncio.to_thread(generate_project, request, config)


async def run_generation_async(
    request: GenerationRequest,
    config: Optional[Config] = None,
) -> GenerationOutcome:
    """Run :func:`run_generation` in a worker thread."""
    return await asyncio.to_thread(run_generation, request, config)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _read_models(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _report(archive: GeneratedArchive, target: Path, elapsed: float) -> None:
    for warning in archive.warnings:
        where = f"block {warning.block}"
        if warning.line is not None:
            where += f", line {warning.line}"
        print_warning(f"Skipped ({where}): {escape(warning.text)} -- {warning.reason}")

    print_summary_table(
        {
            "Archive": str(target),
            "Models": ", ".join(m.name for m in archive.models) or "(none)",
            "Files": str(len(archive.entries)),
            "Size": format_size(len(archive.content)),
            "Elapsed": format_duration(elapsed),
        },
        title="Generated project",
    )


def main() -> None:
    """CLI entry point for ``python -m gincrud.pipeline``."""
    import argparse

    parser = argparse.ArgumentParser(
        description="gincrud -- generate a Gin + GORM CRUD project from model definitions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m gincrud.pipeline models.txt --name demo --module example.com/demo\n"
            "  cat models.txt | python -m gincrud.pipeline - --name demo -o ./dist\n"
        ),
    )

    parser.add_argument(
        "models",
        help="Path to the model description file, or '-' for stdin",
    )
    parser.add_argument("--name", required=True, help="Project name")
    parser.add_argument(
        "--module",
        default=None,
        help="Go module path (default: the project name)",
    )
    parser.add_argument("--port", default="8080", help="Server port (default: 8080)")
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Directory for the archive (default: GINCRUD_OUTPUT_DIR or .)",
    )
    parser.add_argument(
        "--strict-tags",
        action="store_true",
        help="Only a 'required' token or binding:\"required\" marks a field required",
    )

    args = parser.parse_args()

    try:
        models_text = _read_models(args.models)
    except OSError as exc:
        console.print(f"[bold red]Error:[/bold red] Cannot read models: {escape(str(exc))}")
        sys.exit(1)

    try:
        config = Config.from_env()
    except ValueError as exc:
        # pydantic's ValidationError is a ValueError
        print_error(f"Invalid configuration: {escape(str(exc))}")
        sys.exit(1)
    if args.output:
        config.output_dir = Path(args.output)
    if args.strict_tags:
        config.strict_tags = True

    request = GenerationRequest(
        project_name=args.name,
        module_path=args.module or args.name,
        port=args.port,
        models_text=models_text,
    )

    started = time.monotonic()
    outcome = run_generation(request, config)
    if not outcome.success:
        assert outcome.error is not None
        print_error(f"Generation failed at {outcome.error.stage.value}: {escape(outcome.error.message)}")
        sys.exit(1)

    archive = outcome.archive
    assert archive is not None
    target = config.output_dir / archive.filename
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(archive.content)
    except OSError as exc:
        print_error(f"Cannot write {escape(str(target))}: {escape(str(exc))}")
        sys.exit(1)

    _report(archive, target, time.monotonic() - started)
    print_success("Project generated successfully!")


if __name__ == "__main__":
    main()
