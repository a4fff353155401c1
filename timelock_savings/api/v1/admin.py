"""Contract configuration endpoints"""

import logging
from fastapi import APIRouter, Depends, Request, status

from timelock_savings.api.dependencies import get_caller, get_controller, get_request_id
from timelock_savings.api.v1.schemas import ConfigResponse, InitializeRequest, PenaltyUpdateRequest
from timelock_savings.domain.exceptions import Unauthorized
from timelock_savings.services.lifecycle import LifecycleController

router = APIRouter()


@router.post("/initialize", response_model=ConfigResponse, status_code=status.HTTP_201_CREATED)
def initialize(
    request_body: InitializeRequest,
    request: Request,
    controller: LifecycleController = Depends(get_controller),
):
    """
    One-time contract setup.

    Returns 409 once a token has been configured.
    """
    controller.initialize(
        token=request_body.token,
        admin=request_body.admin,
        emergency_penalty_bps=request_body.emergency_penalty_bps,
    )
    logging.info("Contract initialized", extra={"request_id": get_request_id(request)})
    return ConfigResponse(**vars(controller.get_config()))


@router.get("/config", response_model=ConfigResponse)
def get_config(controller: LifecycleController = Depends(get_controller)):
    return ConfigResponse(**vars(controller.get_config()))


@router.put("/admin/emergency-penalty", response_model=ConfigResponse)
def set_emergency_penalty(
    request_body: PenaltyUpdateRequest,
    request: Request,
    caller: str | None = Depends(get_caller),
    controller: LifecycleController = Depends(get_controller),
):
    """Admin-only penalty update; the caller must be the configured admin"""
    if not caller:
        raise Unauthorized("X-Caller-Id header is required")

    controller.set_emergency_penalty(caller, request_body.penalty_bps)
    logging.info(
        "Emergency penalty updated",
        extra={"request_id": get_request_id(request), "penalty_bps": request_body.penalty_bps},
    )
    return ConfigResponse(**vars(controller.get_config()))
