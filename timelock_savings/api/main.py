"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from timelock_savings.api.dependencies import get_request_id
from timelock_savings.api.middleware import AccessLogMiddleware, RequestIDMiddleware
from timelock_savings.api.v1 import admin, goals
from timelock_savings.api.v1.schemas import ErrorResponse
from timelock_savings.domain.exceptions import (
    AlreadyInitialized,
    AlreadyWithdrawn,
    ConcurrentUpdate,
    GoalInactive,
    GoalNotFound,
    LedgerError,
    NotInitialized,
    SavingsError,
    StillLocked,
    Unauthorized,
)
from timelock_savings.infrastructure.database.session import init_db
from timelock_savings.infrastructure.observability.logging import setup_logging
from timelock_savings.infrastructure.observability.metrics import domain_error_counter
from timelock_savings.config import settings

# Setup structured logging
setup_logging(settings.log_level)

# Everything not listed is a rejected input (422)
ERROR_STATUS = {
    GoalNotFound: 404,
    Unauthorized: 403,
    AlreadyInitialized: 409,
    NotInitialized: 409,
    GoalInactive: 409,
    StillLocked: 409,
    AlreadyWithdrawn: 409,
}


async def savings_error_handler(request: Request, exc: SavingsError) -> JSONResponse:
    """Render a domain error as {"error", "code", "detail"}"""
    domain_error_counter.labels(error=exc.name).inc()
    logging.warning(
        f"Savings operation rejected: {exc.name}",
        extra={"request_id": get_request_id(request), "error_code": exc.code},
    )
    return JSONResponse(
        status_code=ERROR_STATUS.get(type(exc), 422),
        content=ErrorResponse(error=exc.name, code=exc.code, detail=str(exc)).model_dump(),
    )


async def concurrent_update_handler(request: Request, exc: ConcurrentUpdate) -> JSONResponse:
    logging.warning(f"Concurrent update rejected: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(
        status_code=409,
        content=ErrorResponse(error="ConcurrentUpdate", code=0, detail="Contract state changed by a concurrent request; retry").model_dump(),
    )


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    logging.error(f"Ledger error: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(
        status_code=502,
        content=ErrorResponse(
            error="LedgerError", code=0, detail="Token ledger unavailable or rejected the transfer"
        ).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logging.info("Storage ready")
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Time-Locked Savings",
        description="Time-locked savings goals with interest and early-exit penalties",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(SavingsError, savings_error_handler)
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(ConcurrentUpdate, concurrent_update_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(admin.router, prefix="/v1", tags=["admin"])
    app.include_router(goals.router, prefix="/v1", tags=["goals"])

    return app


app = create_app()
