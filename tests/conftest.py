"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from class_maker.config import MakerSettings
from class_maker.files import InMemoryFileManager

_REPO_ROOT = Path(__file__).parent.parent
_FIXTURES = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the PHP fixture directory."""
    return _FIXTURES


@pytest.fixture
def php_parser() -> Parser:
    """Return a tree-sitter parser for PHP."""
    return get_parser("php")


@pytest.fixture
def product_source() -> str:
    """A hand-written entity with imports, attributes, docs and a constructor."""
    return (_FIXTURES / "Product.php").read_text(encoding="utf-8")


@pytest.fixture
def data_source() -> str:
    """An empty class in a namespace."""
    return (_FIXTURES / "Data.php").read_text(encoding="utf-8")


@pytest.fixture
def legacy_source() -> str:
    """A class inside a braced namespace block with untyped members."""
    return (_FIXTURES / "Legacy.php").read_text(encoding="utf-8")


@pytest.fixture
def in_memory_files() -> InMemoryFileManager:
    return InMemoryFileManager()


@pytest.fixture
def settings() -> MakerSettings:
    return MakerSettings()
