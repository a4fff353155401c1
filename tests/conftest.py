"""Pytest fixtures for testing"""

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from timelock_savings.api.dependencies import get_clock, get_ledger
from timelock_savings.api.main import create_app
from timelock_savings.infrastructure.auth import AllowAllAuthorizer
from timelock_savings.infrastructure.clients.memory_ledger import InMemoryLedger
from timelock_savings.infrastructure.clock import FrozenClock
from timelock_savings.infrastructure.database.models import Base
from timelock_savings.infrastructure.database.session import get_db
from timelock_savings.infrastructure.database.storage import KeyValueStorage
from timelock_savings.services.lifecycle import LifecycleController

from savings_testdata import (
    ADMIN,
    CUSTODY,
    CUSTODY_RESERVE,
    START_TIME,
    TOKEN,
    USER,
    USER_FUNDS,
    TestingSessionLocal,
    engine,
)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage(db: Session) -> KeyValueStorage:
    return KeyValueStorage(db)


@pytest.fixture
def other_storage(db: Session) -> Generator[KeyValueStorage, None, None]:
    """Storage on a second session, as a concurrent request would hold"""
    other_db = TestingSessionLocal()
    try:
        yield KeyValueStorage(other_db)
    finally:
        other_db.close()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(START_TIME)


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Ledger with the test user funded and an interest reserve in custody"""
    ledger = InMemoryLedger()
    ledger.mint(TOKEN, USER, USER_FUNDS)
    ledger.mint(TOKEN, CUSTODY, CUSTODY_RESERVE)
    return ledger


@pytest.fixture
def controller(storage: KeyValueStorage, ledger: InMemoryLedger, clock: FrozenClock) -> LifecycleController:
    """Uninitialized controller with every auth request granted"""
    return LifecycleController(
        storage=storage,
        ledger=ledger,
        authorizer=AllowAllAuthorizer(),
        clock=clock,
        custody_account=CUSTODY,
    )


@pytest.fixture
def contract(controller: LifecycleController) -> LifecycleController:
    """Controller initialized with a 10% emergency penalty"""
    controller.initialize(TOKEN, ADMIN, 1000)
    return controller


@pytest.fixture
def client(db: Session, ledger: InMemoryLedger, clock: FrozenClock) -> TestClient:
    """Create FastAPI test client with test database, in-memory ledger and frozen clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_clock] = lambda: clock
    return TestClient(app)
