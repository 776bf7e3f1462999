"""Shared pytest fixtures for the gincrud test suite.

Provides reusable fixtures for:
- Sample model descriptions
- Project identities and parsed models
- Temporary staging and output directories
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from gincrud.config import Config
from gincrud.parser import Model, parse_models
from gincrud.scaffolder import ProjectIdentity


# ---------------------------------------------------------------------------
# Model descriptions
# ---------------------------------------------------------------------------

@pytest.fixture
def book_models_text() -> str:
    """A single model with one field."""
    return "Book\nTitle string"


@pytest.fixture
def library_models_text() -> str:
    """Three models exercising tags, plurals and multi-word names."""
    return textwrap.dedent("""\
        Book
        Title string required
        Pages int gorm:"column:page_count"
        PublishedAt time.Time

        Category
        Name string required
        Slug string gorm:"uniqueIndex"

        UserProfile
        Email string binding:"required"
        Age int
    """)


# ---------------------------------------------------------------------------
# Parsed entities
# ---------------------------------------------------------------------------

@pytest.fixture
def identity() -> ProjectIdentity:
    return ProjectIdentity(name="demo", module_path="example.com/demo", port="8080")


@pytest.fixture
def book_models(book_models_text: str) -> list[Model]:
    return parse_models(book_models_text)


@pytest.fixture
def library_models(library_models_text: str) -> list[Model]:
    return parse_models(library_models_text)


# ---------------------------------------------------------------------------
# Paths & configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def staging_parent(tmp_path: Path) -> Path:
    """Directory that receives per-request staging directories."""
    parent = tmp_path / "staging"
    parent.mkdir()
    return parent


@pytest.fixture
def config(staging_parent: Path, tmp_path: Path) -> Config:
    """A Config whose staging and output directories live under tmp_path."""
    return Config(staging_dir=staging_parent, output_dir=tmp_path / "out")
