"""
Pytest configuration and fixtures for Product Service tests.
"""

import os
from decimal import Decimal
from typing import Any, AsyncGenerator, List, Tuple

import pytest
from fastapi.testclient import TestClient

# Set up test environment before any service module reads settings
os.environ["ENVIRONMENT"] = "test"
os.environ["AUTH_MODE"] = "header"
os.environ["EVENTS_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["PRODUCT_DATABASE_URL"] = "sqlite+aiosqlite:///./test_product_service.db"

from product_service.app.api.dependencies import (  # noqa: E402
    get_async_session,
    get_product_event_producer,
)
from product_service.app.core import database as database_module  # noqa: E402
from product_service.app.core.database import (  # noqa: E402
    ProductServiceDatabaseManager,
)
from product_service.app.events.base import BaseEvent, EventPublisher  # noqa: E402
from product_service.app.events.event_producers import (  # noqa: E402
    ProductEventProducer,
)
from product_service.app.main import app  # noqa: E402
from product_service.app.schemas.product import ProductRequest  # noqa: E402
from product_service.app.services.product_service import (  # noqa: E402
    ProductService,
)


class RecordingPublisher(EventPublisher):
    """In-memory publisher capturing every event handed to it."""

    def __init__(self) -> None:
        self.published: List[Tuple[str, BaseEvent]] = []

    async def publish(self, event: BaseEvent, topic: str) -> None:
        self.published.append((topic, event))

    @property
    def payloads(self) -> List[dict]:
        return [event.data for _, event in self.published]


class FailingPublisher(EventPublisher):
    """Publisher whose broker is always unreachable."""

    async def publish(self, event: BaseEvent, topic: str) -> None:
        raise ConnectionError("broker unreachable")


@pytest.fixture
async def test_database_manager(tmp_path) -> AsyncGenerator[Any, None]:
    """Fresh SQLite product store per test."""
    manager = ProductServiceDatabaseManager(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'products.db'}"
    )
    await manager.create_tables()
    yield manager
    await manager.close()


@pytest.fixture
async def db_session(test_database_manager) -> AsyncGenerator[Any, None]:
    """Create a test database session."""
    async with test_database_manager.async_session_maker() as session:
        yield session


@pytest.fixture
def recording_publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def event_producer(recording_publisher) -> ProductEventProducer:
    return ProductEventProducer(recording_publisher, product_deleted_topic="product-deleted")


@pytest.fixture
def failing_event_producer() -> ProductEventProducer:
    return ProductEventProducer(FailingPublisher())


@pytest.fixture
def product_service(db_session, event_producer) -> ProductService:
    return ProductService(db_session, event_producer)


@pytest.fixture
def client(tmp_path, monkeypatch, event_producer) -> Any:
    """FastAPI test client backed by its own SQLite file and a recording producer."""
    manager = ProductServiceDatabaseManager(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}"
    )
    monkeypatch.setattr(database_module, "database_manager", manager)

    async def override_session():
        async with manager.async_session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_product_event_producer] = lambda: event_producer

    # Entering the client runs the lifespan, which creates the tables
    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def seller_headers():
    """Build gateway identity headers for a seller."""

    def build(user_id: str = "seller1", role: str = "SELLER") -> dict:
        return {"X-User-ID": user_id, "X-User-Role": role}

    return build


@pytest.fixture
def sample_product_request() -> ProductRequest:
    return ProductRequest(
        name="Red Shirt",
        description="Cotton shirt",
        price=Decimal("10.00"),
        quantity=5,
    )


@pytest.fixture
def sample_product_payload() -> dict:
    return {
        "name": "Red Shirt",
        "description": "Cotton shirt",
        "price": "10.00",
        "quantity": 5,
    }
