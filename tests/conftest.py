"""
pytest configuration for decoder tests.

Adds src directory to Python path for imports.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))


@pytest.fixture(autouse=True)
def _reset_log_context():
    """Keep context variables from leaking between tests."""
    from core.logging.context import clear_log_context

    clear_log_context()
    yield
    clear_log_context()
