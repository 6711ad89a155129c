"""
Pytest configuration and shared fixtures for Stencil tests.
"""

import io
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from stencil_core.logging import LogConfig, StencilLogger  # noqa: E402
from stencil_core.template import Item  # noqa: E402
from stencil_core.types import LogFormat, LogLevel  # noqa: E402

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Directory holding a small set of templates."""
    root = tmp_path / "templates"
    (root / "partials").mkdir(parents=True)
    (root / "default.html").write_text(
        "<title>$title$</title>\n$partial(\"partials/footer.html\")$"
    )
    (root / "partials" / "footer.html").write_text("<footer>$author$</footer>")
    (root / "notes.txt").write_text("$body$")
    return root


# =============================================================================
# Item Fixtures
# =============================================================================


@pytest.fixture
def make_item() -> Callable[..., Item]:
    """Factory for items."""

    def _make(
        identifier: str = "posts/hello.md",
        body: Any = "Hello",
        **metadata: Any,
    ) -> Item:
        return Item(identifier=identifier, body=body, metadata=metadata)

    return _make


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture
def log_output() -> io.StringIO:
    """Buffer receiving logger output."""
    return io.StringIO()


@pytest.fixture
def debug_logger(log_output: io.StringIO) -> StencilLogger:
    """JSON logger at DEBUG level writing to log_output."""
    return StencilLogger(LogConfig(level=LogLevel.DEBUG, format=LogFormat.JSON, output=log_output))


# =============================================================================
# Markers Configuration
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "property: Property-based tests")
