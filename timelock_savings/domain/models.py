"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class SavingsGoal:
    """A single time-locked savings position"""

    owner: str
    principal: int  # smallest token unit, i128
    interest_rate: int  # annual rate in basis points
    start_time: int  # seconds since epoch
    lock_duration: int
    unlock_time: int
    accrued_interest: int
    last_compound_time: int
    is_active: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavingsGoal":
        return cls(
            owner=data["owner"],
            principal=int(data["principal"]),
            interest_rate=int(data["interest_rate"]),
            start_time=int(data["start_time"]),
            lock_duration=int(data["lock_duration"]),
            unlock_time=int(data["unlock_time"]),
            accrued_interest=int(data["accrued_interest"]),
            last_compound_time=int(data["last_compound_time"]),
            is_active=bool(data["is_active"]),
        )


@dataclass
class AdminConfig:
    """Contract-wide configuration written at initialization"""

    token: str
    admin: str
    emergency_penalty_bps: int


@dataclass
class EmergencyPayout:
    """Result of splitting a balance into owner payout and admin penalty"""

    withdrawal: int
    penalty: int
