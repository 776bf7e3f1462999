"""gincrud -- Gin + GORM CRUD project generator.

Parses a compact model description, renders a complete Go backend skeleton
and packages it as a ZIP archive.

Usage::

    from gincrud import GenerationRequest, generate_project

    archive = generate_project(GenerationRequest(
        project_name="demo",
        module_path="example.com/demo",
        port="8080",
        models_text="Book\\nTitle string required",
    ))
    Path(archive.filename).write_bytes(archive.content)
"""

from gincrud.pipeline import (
    GeneratedArchive,
    GenerationError,
    GenerationFailure,
    GenerationOutcome,
    GenerationRequest,
    Stage,
    generate_project,
    generate_project_async,
    run_generation,
    run_generation_async,
)

__version__ = "0.1.0"

__all__ = [
    "GeneratedArchive",
    "GenerationError",
    "GenerationFailure",
    "GenerationOutcome",
    "GenerationRequest",
    "Stage",
    "generate_project",
    "generate_project_async",
    "run_generation",
    "run_generation_async",
]
