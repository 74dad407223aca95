"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from docslice.config.models import DocsliceConfig
from docslice.context.index import DocIndex
from docslice.output.lookup import DocLookup

# Source fixtures are indexed, never collected as tests
collect_ignore_glob = ["fixtures/*"]


@pytest.fixture
def fixtures_dir() -> Path:
    """Get the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def greeter_dir(fixtures_dir: Path) -> Path:
    """Get the path to the sample greeter package."""
    return fixtures_dir / "greeter"


@pytest.fixture
def greeter_index(greeter_dir: Path) -> DocIndex:
    """Build the index of the sample greeter package."""
    return DocIndex.build(greeter_dir)


@pytest.fixture
def lookup(greeter_index: DocIndex) -> DocLookup:
    """Create a lookup over the greeter index."""
    return DocLookup(greeter_index, DocsliceConfig())


@pytest.fixture
def write_sources(tmp_path: Path):
    """Write a set of source files into a temporary directory."""

    def _write(files: dict[str, str]) -> Path:
        for name, content in files.items():
            (tmp_path / name).write_text(content, encoding="utf-8")
        return tmp_path

    return _write
