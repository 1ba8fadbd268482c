"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.learning_style.cache import BehaviorCache  # noqa: E402
from src.learning_style.models import BehavioralDataPoint, Modality  # noqa: E402
from src.learning_style.repository import InMemoryProfileRepository  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (require database)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


def make_points(modality, count, weight=1.0, subject=None):
    """Build ``count`` identical data points."""
    return [
        BehavioralDataPoint(modality=modality, weight=weight, subject=subject)
        for _ in range(count)
    ]


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def even_points():
    """25 unit-weight points spread evenly over all five modalities."""
    points = []
    for modality in Modality:
        points.extend(make_points(modality, 5))
    return points


@pytest.fixture
def logical_heavy_points():
    """60 logical points at weight 2 and 40 verbal points at weight 1."""
    return make_points(Modality.LOGICAL, 60, weight=2.0) + make_points(Modality.VERBAL, 40)


@pytest.fixture
def memory_repository():
    """Empty in-memory profile repository."""
    return InMemoryProfileRepository()


@pytest.fixture
def behavior_cache(tmp_path):
    """Behavior cache backed by a temporary file."""
    return BehaviorCache(tmp_path / "behavior.json", limit=500)
