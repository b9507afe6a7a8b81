"""API test fixtures: TestClient over a container on the virtual clock."""

from unittest.mock import Mock

import pytest
from starlette.testclient import TestClient

from api.app import build_container, create_app


@pytest.fixture
def register_handler():
    return Mock()


@pytest.fixture
def container(config, scheduler, store, register_handler):
    """Fully wired components with virtual time and in-memory storage."""
    return build_container(
        config=config,
        scheduler=scheduler,
        store=store,
        register_handler=register_handler,
    )


@pytest.fixture
def client(container):
    """TestClient with the app lifespan running."""
    with TestClient(create_app(container)) as test_client:
        yield test_client
