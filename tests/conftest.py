"""
Pytest configuration and shared fixtures for all deferload tests.

Building the LALR tables is the expensive part of a compile, so the parser,
printer and driver are created once per session and shared; they keep no
state between compilations.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from deferload.backends.printer import ModulePrinter
from deferload.compiler.driver import CompilerDriver
from deferload.frontend.parser import Parser


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_compiler():
    """Session-scoped compiler; resolves against the modules of each compilation."""
    return CompilerDriver()


@pytest.fixture(scope="session")
def session_parser():
    return Parser()


@pytest.fixture(scope="session")
def session_printer():
    return ModulePrinter()


# =============================================================================
# Class-scoped aliases
# =============================================================================

@pytest.fixture(scope="class")
def compiler(session_compiler):
    """Class-scoped compiler - shared across all tests in a class for performance."""
    return session_compiler


@pytest.fixture(scope="class")
def parser(session_parser):
    return session_parser


@pytest.fixture(scope="class")
def printer(session_printer):
    return session_printer
