"""Key-value persistence over a SQLAlchemy session"""

import json
from typing import Any, Optional, Set
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from timelock_savings.domain.exceptions import ConcurrentUpdate
from timelock_savings.infrastructure.database.models import StorageEntry


class StorageKey:
    """
    Tagged storage keys.

    Keys are JSON arrays of (tag, *parts) so owner identities can contain
    any character without colliding with another key.
    """

    TOKEN = json.dumps(["Token"])
    ADMIN = json.dumps(["Admin"])
    GOAL_COUNTER = json.dumps(["GoalCounter"])
    EMERGENCY_PENALTY = json.dumps(["EmergencyPenalty"])

    @staticmethod
    def goal(owner: str, goal_id: int) -> str:
        return json.dumps(["Goal", owner, goal_id])

    @staticmethod
    def user_goal_count(owner: str) -> str:
        return json.dumps(["UserGoalCount", owner])


class KeyValueStorage:
    """
    Session-scoped key-value store; writes are flushed immediately.

    Every write is conditional on what this session read: updates carry the
    entry version they loaded and keys read as absent are inserted, never
    upserted. A write that loses a race with another committed unit of work
    raises ConcurrentUpdate and leaves the session for the caller to roll back.
    """

    def __init__(self, db: Session):
        self.db = db
        self._absent: Set[str] = set()

    def _entry(self, key: str) -> Optional[StorageEntry]:
        entry = self.db.get(StorageEntry, key)
        if entry is None:
            self._absent.add(key)
        return entry

    def get(self, key: str) -> Optional[Any]:
        entry = self._entry(key)
        return entry.value if entry is not None else None

    def has(self, key: str) -> bool:
        return self._entry(key) is not None

    def set(self, key: str, value: Any) -> None:
        entry = None if key in self._absent else self.db.get(StorageEntry, key)
        if entry is None:
            self.db.add(StorageEntry(key=key, value=value))
            self._absent.discard(key)
        else:
            entry.value = value

        try:
            self.db.flush()  # Visible to re-entrant calls before commit
        except (StaleDataError, IntegrityError) as e:
            raise ConcurrentUpdate(f"Storage key {key} was changed by another transaction") from e

    def commit(self) -> None:
        self._absent.clear()
        self.db.commit()

    def rollback(self) -> None:
        self._absent.clear()
        self.db.rollback()
