"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session
from timelock_savings.config import settings
from timelock_savings.domain.ports import Clock, TokenLedger
from timelock_savings.infrastructure.auth import CallerAuthorizer
from timelock_savings.infrastructure.clients.ledger import LedgerClient
from timelock_savings.infrastructure.clients.memory_ledger import InMemoryLedger
from timelock_savings.infrastructure.clock import SystemClock
from timelock_savings.infrastructure.database.session import get_db
from timelock_savings.infrastructure.database.storage import KeyValueStorage
from timelock_savings.services.lifecycle import LifecycleController

# Process-wide so balances survive across requests
_memory_ledger = InMemoryLedger()


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_ledger() -> TokenLedger:
    """Provide the configured token ledger"""
    if settings.ledger_backend == "memory":
        return _memory_ledger
    return LedgerClient()


def get_clock() -> Clock:
    return SystemClock()


def get_caller(x_caller_id: str | None = Header(default=None)) -> str | None:
    """Identity authenticated by the upstream gateway"""
    return x_caller_id


def get_controller(
    db: Session = Depends(get_db),
    ledger: TokenLedger = Depends(get_ledger),
    clock: Clock = Depends(get_clock),
    caller: str | None = Depends(get_caller),
) -> LifecycleController:
    """Provide a lifecycle controller bound to this request's session and caller"""
    return LifecycleController(
        storage=KeyValueStorage(db),
        ledger=ledger,
        authorizer=CallerAuthorizer(caller),
        clock=clock,
        custody_account=settings.custody_account,
    )
