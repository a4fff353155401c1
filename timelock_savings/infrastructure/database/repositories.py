"""Data access layer for savings goals and contract configuration"""

from typing import Optional
from timelock_savings.domain.constants import (
    DEFAULT_EMERGENCY_PENALTY_BPS,
    MAX_EMERGENCY_PENALTY_BPS,
)
from timelock_savings.domain.exceptions import (
    AlreadyInitialized,
    GoalOverflow,
    NotInitialized,
    PenaltyTooHigh,
    Unauthorized,
)
from timelock_savings.domain.fixed_point import U64, checked_add
from timelock_savings.domain.models import AdminConfig, SavingsGoal
from timelock_savings.domain.ports import Authorizer, KeyValueStore
from timelock_savings.infrastructure.database.storage import StorageKey


def _validate_penalty(penalty_bps: int) -> None:
    if not 0 <= penalty_bps <= MAX_EMERGENCY_PENALTY_BPS:
        raise PenaltyTooHigh(
            f"Emergency penalty must be within 0..{MAX_EMERGENCY_PENALTY_BPS} bps, got {penalty_bps}"
        )


class GoalStore:
    """Repository for savings goals and goal counters"""

    def __init__(self, storage: KeyValueStore):
        self.storage = storage

    def get(self, owner: str, goal_id: int) -> Optional[SavingsGoal]:
        """Fetch a goal, or None when (owner, goal_id) was never created"""
        data = self.storage.get(StorageKey.goal(owner, goal_id))
        return SavingsGoal.from_dict(data) if data is not None else None

    def put(self, owner: str, goal_id: int, goal: SavingsGoal) -> None:
        self.storage.set(StorageKey.goal(owner, goal_id), goal.to_dict())

    def next_goal_id(self) -> int:
        """
        Reserve the next global goal id.

        Reads the counter, writes counter + 1 and returns the value read.
        Raises GoalOverflow when the u64 id space is exhausted.
        """
        goal_id = self.storage.get(StorageKey.GOAL_COUNTER) or 0
        next_id = checked_add(goal_id, 1, U64, GoalOverflow)
        self.storage.set(StorageKey.GOAL_COUNTER, next_id)
        return goal_id

    def create(self, owner: str, goal: SavingsGoal) -> int:
        """
        Assign an id, persist the goal and bump the owner's counter.

        Moves no funds. The lifecycle controller runs these steps itself so
        the deposit transfer can sit between reserving the id and writing
        the record.
        """
        goal_id = self.next_goal_id()
        self.put(owner, goal_id, goal)
        self.increment_user_goal_count(owner)
        return goal_id

    def user_goal_count(self, owner: str) -> int:
        return self.storage.get(StorageKey.user_goal_count(owner)) or 0

    def increment_user_goal_count(self, owner: str) -> None:
        count = checked_add(self.user_goal_count(owner), 1, U64, GoalOverflow)
        self.storage.set(StorageKey.user_goal_count(owner), count)


class ConfigStore:
    """Repository for one-time contract configuration"""

    def __init__(self, storage: KeyValueStore):
        self.storage = storage

    def is_initialized(self) -> bool:
        return self.storage.has(StorageKey.TOKEN)

    def initialize(self, token: str, admin: str, penalty_bps: int) -> None:
        """
        Write token, admin and penalty exactly once.

        The initialization check runs before any validation or write.
        """
        if self.is_initialized():
            raise AlreadyInitialized("Contract is already initialized")

        _validate_penalty(penalty_bps)

        self.storage.set(StorageKey.TOKEN, token)
        self.storage.set(StorageKey.ADMIN, admin)
        self.storage.set(StorageKey.EMERGENCY_PENALTY, penalty_bps)
        self.storage.set(StorageKey.GOAL_COUNTER, 0)

    def token(self) -> str:
        token = self.storage.get(StorageKey.TOKEN)
        if token is None:
            raise NotInitialized("Token is not configured")
        return token

    def admin(self) -> str:
        admin = self.storage.get(StorageKey.ADMIN)
        if admin is None:
            raise NotInitialized("Admin is not configured")
        return admin

    def emergency_penalty(self) -> int:
        penalty = self.storage.get(StorageKey.EMERGENCY_PENALTY)
        return DEFAULT_EMERGENCY_PENALTY_BPS if penalty is None else penalty

    def set_penalty(self, caller: str, new_bps: int, authorizer: Authorizer) -> None:
        """Admin-only update of the emergency penalty rate"""
        authorizer.require_auth(caller)

        if caller != self.admin():
            raise Unauthorized("Only the admin may change the emergency penalty")

        _validate_penalty(new_bps)
        self.storage.set(StorageKey.EMERGENCY_PENALTY, new_bps)

    def snapshot(self) -> AdminConfig:
        return AdminConfig(
            token=self.token(),
            admin=self.admin(),
            emergency_penalty_bps=self.emergency_penalty(),
        )
