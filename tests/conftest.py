"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from peervisit.domain.repositories import DatabaseManager
from peervisit.domain.rubric import StandardCategory, StandardItem, RubricDefinition
from peervisit.gateway.local import LocalGateway

REPO_ROOT = Path(__file__).resolve().parents[1]


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )


@pytest.fixture
def rubric_300():
    """Rubric with one critical item "X" and 57 ordinary items: ceiling 15 + 285 = 300."""
    ordinary = [StandardItem(id=f"n{i}", label=f"Item {i}") for i in range(1, 58)]
    return RubricDefinition(
        categories=(
            StandardCategory(id=1, name="Critical", items=(StandardItem(id="X", label="X", is_critical=True),)),
            StandardCategory(id=2, name="First half", items=tuple(ordinary[:30])),
            StandardCategory(id=3, name="Second half", items=tuple(ordinary[30:])),
        )
    )


@pytest.fixture
def db_manager():
    """In-memory database for testing."""
    manager = DatabaseManager("sqlite:///:memory:")
    manager.create_tables()
    return manager


@pytest.fixture
def local_gateway(db_manager):
    return LocalGateway(db_manager)


@pytest.fixture
def sample_config_path():
    return REPO_ROOT / "peervisit_config.yaml"
