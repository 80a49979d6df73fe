"""
Pytest configuration and fixtures for the lockable-resources project.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from lockable.resources.pool import ResourcePool
from lockable.resources.resource import LockableResource


def make_pool(*specs):
    """Build a pool from ``(name, "label label")`` tuples or bare names."""
    resources = []
    for spec in specs:
        if isinstance(spec, str):
            resources.append(LockableResource(spec))
        else:
            name, labels, *rest = spec
            attributes = rest[0] if rest else {}
            resources.append(
                LockableResource(name, frozenset(labels.split()), dict(attributes))
            )
    return ResourcePool(resources)


@pytest.fixture
def plain_pool():
    """Pool of three unlabelled resources A, B and C."""
    return make_pool("A", "B", "C")


@pytest.fixture
def gpu_pool():
    """Pool of three resources labelled gpu."""
    return make_pool(("A", "gpu"), ("B", "gpu"), ("C", "gpu"))


@pytest.fixture
def pool_factory():
    """Factory building isolated pools, see ``make_pool``."""
    return make_pool
