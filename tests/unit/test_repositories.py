"""Unit tests for goal and configuration stores"""

import json
import pytest
from timelock_savings.domain.exceptions import (
    AlreadyInitialized,
    ConcurrentUpdate,
    GoalOverflow,
    NotInitialized,
    PenaltyTooHigh,
    Unauthorized,
)
from timelock_savings.domain.fixed_point import U64_MAX
from timelock_savings.domain.models import SavingsGoal
from timelock_savings.infrastructure.auth import AllowAllAuthorizer, CallerAuthorizer
from timelock_savings.infrastructure.database.repositories import ConfigStore, GoalStore
from timelock_savings.infrastructure.database.storage import KeyValueStorage, StorageKey


def make_goal(owner: str = "alice", principal: int = 10_000) -> SavingsGoal:
    return SavingsGoal(
        owner=owner,
        principal=principal,
        interest_rate=500,
        start_time=100,
        lock_duration=86_400,
        unlock_time=86_500,
        accrued_interest=0,
        last_compound_time=100,
        is_active=True,
    )


def test_storage_keys_do_not_collide():
    """Owner strings containing separators stay distinct"""
    assert StorageKey.goal("a:b", 1) != StorageKey.goal("a", 1)
    assert json.loads(StorageKey.goal("a:b", 1)) == ["Goal", "a:b", 1]
    assert StorageKey.user_goal_count("x") != StorageKey.goal("x", 0)


def test_storage_round_trip_large_integers(storage: KeyValueStorage):
    big = 2**127 - 1
    storage.set("k", {"value": big})
    assert storage.has("k")
    assert storage.get("k") == {"value": big}
    assert storage.get("missing") is None
    assert not storage.has("missing")


def test_storage_rollback_discards_uncommitted_writes(storage: KeyValueStorage):
    storage.set("kept", 1)
    storage.commit()
    storage.set("dropped", 2)
    storage.rollback()

    assert storage.get("kept") == 1
    assert storage.get("dropped") is None


def test_goal_store_get_missing(storage: KeyValueStorage):
    assert GoalStore(storage).get("alice", 0) is None


def test_goal_store_assigns_sequential_global_ids(storage: KeyValueStorage):
    goals = GoalStore(storage)

    assert goals.create("alice", make_goal("alice")) == 0
    assert goals.create("bob", make_goal("bob")) == 1
    assert goals.create("alice", make_goal("alice", 7)) == 2

    assert goals.get("alice", 2).principal == 7
    assert goals.get("bob", 1).owner == "bob"
    assert goals.get("alice", 1) is None  # id 1 belongs to bob
    assert goals.user_goal_count("alice") == 2
    assert goals.user_goal_count("bob") == 1
    assert goals.user_goal_count("carol") == 0


def test_goal_store_put_overwrites(storage: KeyValueStorage):
    goals = GoalStore(storage)
    goal_id = goals.create("alice", make_goal())

    goal = goals.get("alice", goal_id)
    goal.accrued_interest = 41
    goals.put("alice", goal_id, goal)

    assert goals.get("alice", goal_id).accrued_interest == 41


def test_next_goal_id_exhausted(storage: KeyValueStorage):
    storage.set(StorageKey.GOAL_COUNTER, U64_MAX)

    with pytest.raises(GoalOverflow):
        GoalStore(storage).next_goal_id()

    assert storage.get(StorageKey.GOAL_COUNTER) == U64_MAX


def test_config_initialize_once(storage: KeyValueStorage):
    config = ConfigStore(storage)
    config.initialize("xlm", "admin", 1000)

    snapshot = config.snapshot()
    assert snapshot.token == "xlm"
    assert snapshot.admin == "admin"
    assert snapshot.emergency_penalty_bps == 1000
    assert storage.get(StorageKey.GOAL_COUNTER) == 0

    with pytest.raises(AlreadyInitialized):
        config.initialize("other", "other-admin", 500)


def test_config_already_initialized_checked_before_penalty(storage: KeyValueStorage):
    config = ConfigStore(storage)
    config.initialize("xlm", "admin", 1000)

    with pytest.raises(AlreadyInitialized):
        config.initialize("xlm", "admin", 9999)


def test_config_rejects_penalty_above_cap(storage: KeyValueStorage):
    config = ConfigStore(storage)

    with pytest.raises(PenaltyTooHigh):
        config.initialize("xlm", "admin", 5001)

    assert not config.is_initialized()
    config.initialize("xlm", "admin", 5000)
    assert config.emergency_penalty() == 5000


def test_config_reads_before_initialize(storage: KeyValueStorage):
    config = ConfigStore(storage)

    with pytest.raises(NotInitialized):
        config.token()
    with pytest.raises(NotInitialized):
        config.admin()


def test_config_penalty_fallback_only_when_unset(storage: KeyValueStorage):
    config = ConfigStore(storage)
    assert config.emergency_penalty() == 1000

    config.initialize("xlm", "admin", 0)
    assert config.emergency_penalty() == 0


def test_set_penalty_by_admin(storage: KeyValueStorage):
    config = ConfigStore(storage)
    config.initialize("xlm", "admin", 1000)

    config.set_penalty("admin", 2500, CallerAuthorizer("admin"))
    assert config.emergency_penalty() == 2500


def test_set_penalty_rejects_non_admin(storage: KeyValueStorage):
    config = ConfigStore(storage)
    config.initialize("xlm", "admin", 1000)

    with pytest.raises(Unauthorized):
        config.set_penalty("mallory", 0, AllowAllAuthorizer())
    with pytest.raises(Unauthorized):
        config.set_penalty("admin", 0, CallerAuthorizer("mallory"))

    assert config.emergency_penalty() == 1000


def test_set_penalty_validation(storage: KeyValueStorage):
    config = ConfigStore(storage)

    with pytest.raises(NotInitialized):
        config.set_penalty("admin", 100, AllowAllAuthorizer())

    config.initialize("xlm", "admin", 1000)
    with pytest.raises(PenaltyTooHigh):
        config.set_penalty("admin", 5001, AllowAllAuthorizer())


def test_storage_rejects_update_based_on_stale_read(storage: KeyValueStorage, other_storage: KeyValueStorage):
    storage.set("balance", 100)
    storage.commit()

    assert storage.get("balance") == 100
    other_storage.set("balance", 50)
    other_storage.commit()

    with pytest.raises(ConcurrentUpdate):
        storage.set("balance", 90)

    storage.rollback()
    assert storage.get("balance") == 50


def test_storage_rejects_insert_of_key_read_as_absent(storage: KeyValueStorage, other_storage: KeyValueStorage):
    assert not storage.has("slot")
    other_storage.set("slot", "taken")
    other_storage.commit()

    with pytest.raises(ConcurrentUpdate):
        storage.set("slot", "mine")

    storage.rollback()
    assert storage.get("slot") == "taken"


def test_next_goal_id_never_hands_out_an_id_twice(storage: KeyValueStorage, other_storage: KeyValueStorage):
    storage.set(StorageKey.GOAL_COUNTER, 0)
    storage.commit()

    assert storage.get(StorageKey.GOAL_COUNTER) == 0
    assert GoalStore(other_storage).next_goal_id() == 0
    other_storage.commit()

    with pytest.raises(ConcurrentUpdate):
        GoalStore(storage).next_goal_id()

    storage.rollback()
    assert GoalStore(storage).next_goal_id() == 1
