"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add the project root to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from backlog2md.config import ConversionOptions
from backlog2md.markdown_converter import BacklogConverter


# ============================================================================
# Converter Fixtures
# ============================================================================


@pytest.fixture
def converter():
    """Create a converter with default options."""
    return BacklogConverter()


@pytest.fixture
def promoting_converter():
    """Create a converter that promotes the first table row to header."""
    return BacklogConverter(ConversionOptions(promote_first_row=True))


@pytest.fixture
def crlf_converter():
    """Create a converter that writes \\r\\n line endings."""
    return BacklogConverter(ConversionOptions(use_crlf=True))


# ============================================================================
# Document Fixtures
# ============================================================================


@pytest.fixture
def sample_document():
    """A Backlog page using most of the notation."""
    return "\n".join([
        "#contents",
        "* Release notes",
        "This release fixes ''two'' bugs.",
        "** Changes",
        "- first change",
        "-- detail of the first change",
        "- second change",
        "",
        "+ step one",
        "+ step two",
        "",
        "{code}",
        "if a < b: print('x')",
        "{/code}",
        "",
        "{quote}",
        "Quoted %%old%% text",
        "{/quote}",
        "",
        "|~Name|~Size|h",
        "|backlog.txt|12|",
        "",
        "See [[Backlog>https://backlog.com]] and #attach(notes.txt:1).",
    ])


@pytest.fixture
def source_dir(tmp_path):
    """A directory with Backlog pages linking to each other."""
    pages = tmp_path / "pages"
    pages.mkdir()
    (pages / "Home Page.txt").write_text(
        "* Home\nGo to [[Next>Other Page]] or [[Site>https://example.com]].\n",
        encoding="utf-8",
    )
    (pages / "Other Page.backlog").write_text("* Other\n- item\n", encoding="utf-8")
    (pages / "ignored.png").write_bytes(b"\x89PNG")
    return pages
