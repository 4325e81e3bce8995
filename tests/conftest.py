"""Shared fixtures: a freshly seeded in-memory ordering system per test."""

import os

# Cheap hashes for tests; must be set before settings are first loaded
os.environ.setdefault("RESTODESK_BCRYPT_ROUNDS", "4")
os.environ.setdefault("RESTODESK_ENV_MODE", "development")
os.environ.setdefault("RESTODESK_SUPERADMIN_PASSWORD", "super-secret")

import pytest
from fastapi.testclient import TestClient

from restodesk.seed import DAVE_ID, MADISON_ID
from restodesk.services import OrderingSystem, reset_ordering_system


@pytest.fixture
def system():
    system = OrderingSystem(seed=True)
    yield system
    system.close()


@pytest.fixture
def empty_system():
    system = OrderingSystem(seed=False)
    yield system
    system.close()


@pytest.fixture
def controller(system):
    """Anonymous session that arrived without a restaurant link."""
    return system.new_controller()


@pytest.fixture
def madison_id():
    return MADISON_ID


@pytest.fixture
def dave_id():
    return DAVE_ID


@pytest.fixture
def api():
    from restodesk.main import app

    reset_ordering_system()
    with TestClient(app) as client:
        yield client
    reset_ordering_system()
