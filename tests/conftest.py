import pytest
from fastapi.testclient import TestClient

from dashchat.app import app
from dashchat.models import Employee, EmployeeRole
from dashchat.services import engine_service
from dashchat.services.engine_service import EngineService

from tests.fakes import (
    InMemoryCommentStorage,
    InMemoryEmployeeStorage,
    InMemoryMessageStorage,
    InMemoryRoomStorage,
)


@pytest.fixture()
def alice():
    return Employee(name="Alice", email="alice@example.com")


@pytest.fixture()
def bob():
    return Employee(name="Bob", email="bob@example.com")


@pytest.fixture()
def carol():
    return Employee(name="Carol", email="carol@example.com")


@pytest.fixture()
def admin():
    return Employee(name="Ada Admin", email="admin@example.com", role=EmployeeRole.ADMIN)


@pytest.fixture()
def employee_storage(alice, bob, carol, admin):
    return InMemoryEmployeeStorage([alice, bob, carol, admin])


@pytest.fixture()
def engine(employee_storage):
    """EngineService wired to in-memory storages"""
    return EngineService(
        employee_storage=employee_storage,
        room_storage=InMemoryRoomStorage(),
        message_storage=InMemoryMessageStorage(),
        comment_storage=InMemoryCommentStorage(),
    )


@pytest.fixture()
def client(engine, monkeypatch):
    """A test client whose app uses the in-memory engine."""
    monkeypatch.setattr(engine_service, "_engine_service", engine)
    with TestClient(app) as test_client:
        yield test_client

