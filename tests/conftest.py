"""
Pytest configuration and shared fixtures for all jsviz tests.

The parser (compiled Lark tables) is the only expensive object and it is
stateless between runs, so one driver is shared by the whole session. Each
`run` builds its own InterpreterState, so sharing the driver never leaks
state between tests.
"""

import sys
import pytest
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from jsviz.frontend.parser import Parser
from jsviz.runtime.driver import ExecutionResult, InterpreterDriver


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_parser():
    """Session-scoped parser; Lark's on-disk cache makes later sessions faster."""
    return Parser()


@pytest.fixture(scope="session")
def session_driver(session_parser):
    """Session-scoped driver built on the shared parser."""
    return InterpreterDriver(parser=session_parser)


# =============================================================================
# Class-scoped fixtures (shared within a test class)
# =============================================================================

@pytest.fixture(scope="class")
def parser(session_parser):
    return session_parser


@pytest.fixture(scope="class")
def driver(session_driver):
    """Class-scoped driver - returns the session driver (stateless, safe to share)."""
    return session_driver


# =============================================================================
# Helper fixtures
# =============================================================================

@pytest.fixture(scope="session")
def run_js_factory(session_driver):
    """
    Factory fixture that runs a source string and returns the ExecutionResult.
    Uses the session driver unless one is passed explicitly.
    """
    def _run_js(
        source: str,
        source_file: str = "<test>",
        driver: Optional[InterpreterDriver] = None,
    ) -> ExecutionResult:
        d = driver if driver is not None else session_driver
        return d.run(source, source_file)

    return _run_js


@pytest.fixture
def run_js(run_js_factory):
    """Convenience fixture around run_js_factory."""
    return run_js_factory


def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
