"""Savings goal lifecycle - the only component that mutates goal state"""

import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Iterator

from timelock_savings.domain.constants import (
    MAX_INTEREST_RATE_BPS,
    MAX_LOCK_DURATION,
    MIN_LOCK_DURATION,
)
from timelock_savings.domain.exceptions import (
    AlreadyWithdrawn,
    GoalInactive,
    GoalNotFound,
    InvalidAmount,
    InvalidDuration,
    Overflow,
    RateTooHigh,
    StillLocked,
)
from timelock_savings.domain.fixed_point import I128, I128_MAX, U64, checked_add
from timelock_savings.domain.interest import (
    accrue,
    elapsed_since_compound,
    project_balance,
    split_penalty,
    total_balance,
)
from timelock_savings.domain.models import AdminConfig, EmergencyPayout, SavingsGoal
from timelock_savings.domain.ports import Authorizer, Clock, KeyValueStore, TokenLedger
from timelock_savings.infrastructure.database.repositories import ConfigStore, GoalStore

logger = logging.getLogger(__name__)


class LifecycleController:
    """
    Orchestrates the goal state machine: Uninitialized -> Active -> Terminated.

    Every public operation is one unit of work: storage commits when the
    outermost call returns and rolls back when it raises. Calls that arrive
    re-entrantly (a ledger calling back during a transfer) join the
    enclosing unit of work.

    Operations on separate sessions are serialized by the storage layer:
    every state change writes the goal or counter it read before any funds
    move, and that write fails with ConcurrentUpdate if another session
    committed a change in between. At most one of two overlapping
    withdrawals of a goal therefore reaches the ledger.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        ledger: TokenLedger,
        authorizer: Authorizer,
        clock: Clock,
        custody_account: str,
    ):
        self.storage = storage
        self.goals = GoalStore(storage)
        self.config = ConfigStore(storage)
        self.ledger = ledger
        self.authorizer = authorizer
        self.clock = clock
        self.custody_account = custody_account
        self._depth = 0

    @contextmanager
    def _unit_of_work(self) -> Iterator[None]:
        self._depth += 1
        try:
            yield
        except Exception:
            if self._depth == 1:
                self.storage.rollback()
            raise
        else:
            if self._depth == 1:
                self.storage.commit()
        finally:
            self._depth -= 1

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def initialize(self, token: str, admin: str, emergency_penalty_bps: int) -> None:
        """Configure token, admin and emergency penalty. Callable once."""
        with self._unit_of_work():
            self.config.initialize(token, admin, emergency_penalty_bps)
            logger.info("Contract initialized", extra={"token": token, "admin": admin})

    def set_emergency_penalty(self, admin: str, new_penalty_bps: int) -> None:
        with self._unit_of_work():
            self.config.set_penalty(admin, new_penalty_bps, self.authorizer)
            logger.info("Emergency penalty updated", extra={"penalty_bps": new_penalty_bps})

    def get_config(self) -> AdminConfig:
        return self.config.snapshot()

    # ------------------------------------------------------------------
    # Goal lifecycle
    # ------------------------------------------------------------------

    def create_goal(self, owner: str, amount: int, lock_duration: int, interest_rate: int) -> int:
        """
        Lock `amount` from `owner` for `lock_duration` seconds.

        Flow:
        1. Authorize owner and validate inputs
        2. Compute unlock time (checked)
        3. Reserve goal id and bump owner counter
        4. Pull funds into custody
        5. Store the Active goal

        Every fallible step except the transfer itself runs before funds
        move; a failed transfer rolls back the reserved id and counter.

        Returns:
            The newly assigned goal id
        """
        with self._unit_of_work():
            self.authorizer.require_auth(owner)

            if amount <= 0 or amount > I128_MAX:
                raise InvalidAmount(f"Amount must be a positive i128, got {amount}")

            if not MIN_LOCK_DURATION <= lock_duration <= MAX_LOCK_DURATION:
                raise InvalidDuration(
                    f"Lock duration must be within {MIN_LOCK_DURATION}..{MAX_LOCK_DURATION}s, got {lock_duration}"
                )

            if not 0 <= interest_rate <= MAX_INTEREST_RATE_BPS:
                raise RateTooHigh(
                    f"Interest rate must be within 0..{MAX_INTEREST_RATE_BPS} bps, got {interest_rate}"
                )

            now = self.clock.now()
            unlock_time = checked_add(now, lock_duration, U64, Overflow)

            token = self.config.token()

            goal_id = self.goals.next_goal_id()
            self.goals.increment_user_goal_count(owner)

            self.ledger.transfer(token, owner, self.custody_account, amount)

            goal = SavingsGoal(
                owner=owner,
                principal=amount,
                interest_rate=interest_rate,
                start_time=now,
                lock_duration=lock_duration,
                unlock_time=unlock_time,
                accrued_interest=0,
                last_compound_time=now,
                is_active=True,
            )
            self.goals.put(owner, goal_id, goal)

            logger.info(
                "Goal created",
                extra={"owner": owner, "goal_id": goal_id, "amount": amount, "unlock_time": unlock_time},
            )
            return goal_id

    def compound_interest(self, owner: str, goal_id: int) -> None:
        """
        Fold interest accrued since the last compounding into the goal.

        Anyone may call this; it moves no funds. A second call in the same
        second is a no-op.
        """
        with self._unit_of_work():
            goal = self._load(owner, goal_id)
            if not goal.is_active:
                raise GoalInactive(f"Goal {goal_id} is no longer active")
            self._bring_current(owner, goal_id, goal, self.clock.now())

    def withdraw(self, owner: str, goal_id: int) -> int:
        """
        Pay out principal plus interest once the goal has unlocked.

        The goal is marked terminated and persisted before the transfer so a
        re-entrant withdrawal sees it as already withdrawn.
        """
        with self._unit_of_work():
            self.authorizer.require_auth(owner)

            goal = self._load(owner, goal_id)
            if not goal.is_active:
                raise AlreadyWithdrawn(f"Goal {goal_id} has already been withdrawn")

            now = self.clock.now()
            goal = self._bring_current(owner, goal_id, goal, now)

            if now < goal.unlock_time:
                raise StillLocked(f"Goal {goal_id} unlocks at {goal.unlock_time}")

            total = total_balance(goal)
            token = self.config.token()

            self.goals.put(owner, goal_id, replace(goal, is_active=False))

            self.ledger.transfer(token, self.custody_account, owner, total)

            logger.info("Goal withdrawn", extra={"owner": owner, "goal_id": goal_id, "amount": total})
            return total

    def emergency_withdraw(self, owner: str, goal_id: int) -> int:
        """
        Exit a goal at any time, forfeiting the emergency penalty to the admin.

        Returns:
            Amount paid to the owner (balance minus penalty)
        """
        return self.emergency_withdraw_payout(owner, goal_id).withdrawal

    def emergency_withdraw_payout(self, owner: str, goal_id: int) -> EmergencyPayout:
        """Emergency withdrawal returning both legs exactly as transferred"""
        with self._unit_of_work():
            self.authorizer.require_auth(owner)

            goal = self._load(owner, goal_id)
            if not goal.is_active:
                raise AlreadyWithdrawn(f"Goal {goal_id} has already been withdrawn")

            goal = self._bring_current(owner, goal_id, goal, self.clock.now())

            payout = split_penalty(total_balance(goal), self.config.emergency_penalty())
            token = self.config.token()
            admin = self.config.admin()

            self.goals.put(owner, goal_id, replace(goal, is_active=False))

            self.ledger.transfer(token, self.custody_account, owner, payout.withdrawal)
            if payout.penalty > 0:
                self.ledger.transfer(token, self.custody_account, admin, payout.penalty)

            logger.info(
                "Goal emergency withdrawn",
                extra={
                    "owner": owner,
                    "goal_id": goal_id,
                    "amount": payout.withdrawal,
                    "penalty": payout.penalty,
                },
            )
            return payout

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_goal(self, owner: str, goal_id: int) -> SavingsGoal:
        return self._load(owner, goal_id)

    def get_user_goal_count(self, owner: str) -> int:
        return self.goals.user_goal_count(owner)

    def get_current_balance(self, owner: str, goal_id: int) -> int:
        """Up-to-date balance without persisting; 0 for terminated goals"""
        goal = self._load(owner, goal_id)
        if not goal.is_active:
            return 0
        return project_balance(goal, self.clock.now())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _load(self, owner: str, goal_id: int) -> SavingsGoal:
        goal = self.goals.get(owner, goal_id)
        if goal is None:
            raise GoalNotFound(f"No goal {goal_id} for owner {owner}")
        return goal

    def _bring_current(self, owner: str, goal_id: int, goal: SavingsGoal, now: int) -> SavingsGoal:
        elapsed = elapsed_since_compound(goal, now)
        if elapsed == 0:
            return goal

        interest = accrue(total_balance(goal), goal.interest_rate, elapsed)
        goal = replace(
            goal,
            accrued_interest=checked_add(goal.accrued_interest, interest, I128, Overflow),
            last_compound_time=now,
        )
        self.goals.put(owner, goal_id, goal)
        return goal
