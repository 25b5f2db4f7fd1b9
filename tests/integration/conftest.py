"""Fixtures for tests that run the maker against a project directory."""

import shutil
from pathlib import Path

import pytest

from class_maker.files import LocalFileManager


@pytest.fixture
def project_dir(tmp_path: Path, fixtures_dir: Path) -> Path:
    """A Symfony-style project with one entity and its exported field metadata."""
    entity_dir = tmp_path / "src" / "Entity"
    entity_dir.mkdir(parents=True)
    shutil.copy(fixtures_dir / "Product.php", entity_dir / "Product.php")
    shutil.copy(fixtures_dir / "product_fields.json", tmp_path / "product_fields.json")
    return tmp_path


@pytest.fixture
def project_files(project_dir: Path) -> LocalFileManager:
    return LocalFileManager(project_dir)
