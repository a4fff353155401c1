"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field


class InitializeRequest(BaseModel):
    """Request body for POST /v1/initialize"""

    token: str = Field(..., min_length=1, description="Token (asset) reference")
    admin: str = Field(..., min_length=1, description="Administrator identity")
    emergency_penalty_bps: int = Field(..., ge=0, description="Early exit penalty in basis points")


class ConfigResponse(BaseModel):
    """Response for GET /v1/config"""

    token: str
    admin: str
    emergency_penalty_bps: int


class PenaltyUpdateRequest(BaseModel):
    """Request body for PUT /v1/admin/emergency-penalty"""

    penalty_bps: int = Field(..., ge=0, description="New early exit penalty in basis points")


class CreateGoalRequest(BaseModel):
    """Request body for POST /v1/goals"""

    amount: int = Field(..., description="Deposit in smallest token units")
    lock_duration: int = Field(..., ge=0, description="Lock period in seconds")
    interest_rate: int = Field(..., ge=0, description="Annual rate in basis points")


class CreateGoalResponse(BaseModel):
    """Response for POST /v1/goals"""

    owner: str
    goal_id: int


class GoalResponse(BaseModel):
    """Response for GET /v1/goals/{owner}/{goal_id}"""

    owner: str
    goal_id: int
    principal: int
    interest_rate: int
    start_time: int
    lock_duration: int
    unlock_time: int
    unlock_at: str
    seconds_until_unlock: int
    accrued_interest: int
    last_compound_time: int
    is_active: bool


class BalanceResponse(BaseModel):
    """Response for GET /v1/goals/{owner}/{goal_id}/balance"""

    owner: str
    goal_id: int
    balance: int


class WithdrawalResponse(BaseModel):
    """Response for withdraw and emergency-withdraw"""

    owner: str
    goal_id: int
    amount: int


class GoalCountResponse(BaseModel):
    """Response for GET /v1/users/{owner}/goal-count"""

    owner: str
    count: int


class ErrorResponse(BaseModel):
    """Body returned for every savings domain error"""

    error: str
    code: int
    detail: str
