import pytest

from ..core.errors import StateArchivedError
from ..services import StateRepository
from ..services.registry import TOTAL_ACCOUNTS_KEY, account_key


@pytest.fixture
def repository(session, clock) -> StateRepository:
    return StateRepository(session, "custody", initial_extent=100, clock=clock)


def test_get_missing_key_returns_none(repository) -> None:
    assert repository.get("absent") is None
    assert repository.live_until("absent") is None


def test_set_and_get_json_value(repository) -> None:
    repository.set("record", {"owner": "alice", "balance": 2**100})
    repository.commit()

    assert repository.get("record") == {"owner": "alice", "balance": 2**100}


def test_rollback_discards_flushed_writes(repository) -> None:
    repository.set("kept", 1)
    repository.commit()

    repository.set("kept", 2)
    repository.set("dropped", 3)
    repository.rollback()

    assert repository.get("kept") == 1
    assert repository.get("dropped") is None


def test_new_entries_start_with_initial_extent(repository, clock) -> None:
    repository.set("fresh", True)
    assert repository.live_until("fresh") == clock.now + 100


def test_overwrite_keeps_existing_lifetime(repository, clock) -> None:
    repository.set("key", "a")
    original = repository.live_until("key")

    clock.advance(10)
    repository.set("key", "b")

    assert repository.live_until("key") == original
    assert repository.get("key") == "b"


def test_extend_lifetime_only_touches_entries_below_threshold(repository, clock) -> None:
    repository.set("short", 1)
    clock.advance(60)
    repository.set("long", 2)

    # short has 40s left, long has 100s left
    extended = repository.extend_lifetime(50, 500)

    assert extended == 1
    assert repository.live_until("short") == clock.now + 500
    assert repository.live_until("long") == clock.now + 100


def test_extend_lifetime_is_scoped_to_namespace(session, clock) -> None:
    custody = StateRepository(session, "custody", initial_extent=10, clock=clock)
    other = StateRepository(session, "other", initial_extent=10, clock=clock)
    custody.set("k", 1)
    other.set("k", 2)

    custody.extend_lifetime(1000, 1000)

    assert custody.live_until("k") == clock.now + 1000
    assert other.live_until("k") == clock.now + 10
    assert other.get("k") == 2


def test_expired_entry_raises_instead_of_reading_as_missing(repository, clock) -> None:
    repository.set("old", "value")
    clock.advance(101)

    with pytest.raises(StateArchivedError):
        repository.get("old")


def test_successful_mutations_refresh_retention(service_for, clock, settings) -> None:
    service = service_for("alice")
    service.create_custody_account("alice", 2, False)
    key = account_key("alice")
    assert service.repository.live_until(key) == clock.now + settings.retention_target_extent
    assert service.repository.live_until(TOTAL_ACCOUNTS_KEY) == clock.now + 5000

    clock.advance(4000)
    service.deposit_assets("alice", 10)
    assert service.repository.live_until(key) == clock.now + 5000

    clock.advance(4000)
    service.withdraw_assets("alice", 5, 2)
    assert service.repository.live_until(key) == clock.now + 5000
    assert service.repository.live_until(TOTAL_ACCOUNTS_KEY) == clock.now + 5000


def test_rejected_operations_do_not_refresh_retention(service_for, clock) -> None:
    service = service_for("alice")
    service.create_custody_account("alice", 2, False)
    key = account_key("alice")
    created_until = service.repository.live_until(key)

    clock.advance(1000)
    assert service.deposit_assets("alice", 0) is False
    assert service.withdraw_assets("alice", 10, 2) is False

    assert service.repository.live_until(key) == created_until


def test_expired_account_cannot_be_read(service_for, clock) -> None:
    service = service_for("alice")
    service.create_custody_account("alice", 2, False)

    clock.advance(5001)

    with pytest.raises(StateArchivedError):
        service.view_custody_account("alice")
    with pytest.raises(StateArchivedError):
        service.deposit_assets("alice", 1)
