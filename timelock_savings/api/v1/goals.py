"""Savings goal endpoints - create, inspect, compound, withdraw"""

from fastapi import APIRouter, Depends, Request, status

from timelock_savings.api.dependencies import get_caller, get_controller, get_request_id
from timelock_savings.api.v1.schemas import (
    BalanceResponse,
    CreateGoalRequest,
    CreateGoalResponse,
    GoalCountResponse,
    GoalResponse,
    WithdrawalResponse,
)
from timelock_savings.domain.exceptions import Unauthorized
from timelock_savings.infrastructure.observability.logging import log_goal_event
from timelock_savings.infrastructure.observability.metrics import goals_created_counter, record_withdrawal
from timelock_savings.services.lifecycle import LifecycleController
from timelock_savings.utils.time_utils import seconds_until, to_iso8601

router = APIRouter()


@router.post("/goals", response_model=CreateGoalResponse, status_code=status.HTTP_201_CREATED)
def create_goal(
    request_body: CreateGoalRequest,
    request: Request,
    caller: str | None = Depends(get_caller),
    controller: LifecycleController = Depends(get_controller),
):
    """
    Lock a deposit for the calling owner.

    The owner is the authenticated caller; funds move into custody before
    the goal is recorded.
    """
    if not caller:
        raise Unauthorized("X-Caller-Id header is required")

    goal_id = controller.create_goal(
        owner=caller,
        amount=request_body.amount,
        lock_duration=request_body.lock_duration,
        interest_rate=request_body.interest_rate,
    )

    goals_created_counter.inc()
    log_goal_event(get_request_id(request), "goal_created", caller, goal_id, amount=request_body.amount)

    return CreateGoalResponse(owner=caller, goal_id=goal_id)


@router.get("/goals/{owner}/{goal_id}", response_model=GoalResponse)
def get_goal(owner: str, goal_id: int, controller: LifecycleController = Depends(get_controller)):
    goal = controller.get_goal(owner, goal_id)
    return GoalResponse(
        goal_id=goal_id,
        unlock_at=to_iso8601(goal.unlock_time),
        seconds_until_unlock=seconds_until(goal.unlock_time, controller.clock.now()),
        **goal.to_dict(),
    )


@router.get("/goals/{owner}/{goal_id}/balance", response_model=BalanceResponse)
def get_current_balance(owner: str, goal_id: int, controller: LifecycleController = Depends(get_controller)):
    """Principal plus interest up to now; 0 once the goal is closed"""
    balance = controller.get_current_balance(owner, goal_id)
    return BalanceResponse(owner=owner, goal_id=goal_id, balance=balance)


@router.post("/goals/{owner}/{goal_id}/compound", status_code=status.HTTP_204_NO_CONTENT)
def compound_interest(owner: str, goal_id: int, controller: LifecycleController = Depends(get_controller)):
    """Public bookkeeping call; any caller may compound any goal"""
    controller.compound_interest(owner, goal_id)


@router.post("/goals/{owner}/{goal_id}/withdraw", response_model=WithdrawalResponse)
def withdraw(
    owner: str,
    goal_id: int,
    request: Request,
    controller: LifecycleController = Depends(get_controller),
):
    amount = controller.withdraw(owner, goal_id)

    record_withdrawal("matured")
    log_goal_event(get_request_id(request), "goal_withdrawn", owner, goal_id, amount=amount)

    return WithdrawalResponse(owner=owner, goal_id=goal_id, amount=amount)


@router.post("/goals/{owner}/{goal_id}/emergency-withdraw", response_model=WithdrawalResponse)
def emergency_withdraw(
    owner: str,
    goal_id: int,
    request: Request,
    controller: LifecycleController = Depends(get_controller),
):
    """Early exit; the configured penalty goes to the admin"""
    payout = controller.emergency_withdraw_payout(owner, goal_id)

    record_withdrawal("emergency", payout.penalty)
    log_goal_event(
        get_request_id(request),
        "goal_emergency_withdrawn",
        owner,
        goal_id,
        amount=payout.withdrawal,
        penalty=payout.penalty,
    )

    return WithdrawalResponse(owner=owner, goal_id=goal_id, amount=payout.withdrawal)


@router.get("/users/{owner}/goal-count", response_model=GoalCountResponse)
def get_user_goal_count(owner: str, controller: LifecycleController = Depends(get_controller)):
    return GoalCountResponse(owner=owner, count=controller.get_user_goal_count(owner))
