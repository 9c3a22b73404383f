import pytest

from onecode.core.errors import AlreadyProcessed, Conflict


async def test_read_absent_returns_none(records) -> None:
    assert await records.read("u1", "ex-1") is None


async def test_read_swallows_store_errors(records, fake_db, store_failure) -> None:
    fake_db.user_exercises.fail_with = store_failure
    assert await records.read("u1", "ex-1") is None


async def test_create_then_read(records) -> None:
    assert await records.create("u1", "ex-1", "track-py", "Y29kZQ==", False, 4) is True
    record = await records.read("u1", "ex-1")
    assert record.points_earned == 4
    assert record.is_completed is False
    assert record.track_id == "track-py"
    assert record.users_code == "Y29kZQ=="


async def test_second_create_is_already_processed(records) -> None:
    await records.create("u1", "ex-1", "track-py", "a", False, 4)
    with pytest.raises(AlreadyProcessed):
        await records.create("u1", "ex-1", "track-py", "b", False, 5)


async def test_create_store_error_is_conflict(records, fake_db, store_failure) -> None:
    fake_db.user_exercises.fail_with = store_failure
    with pytest.raises(Conflict):
        await records.create("u1", "ex-1", "track-py", "a", False, 4)


async def test_update_open_record(records) -> None:
    await records.create("u1", "ex-1", "track-py", "a", False, 4)
    await records.update("u1", "ex-1", "b", True, 10)
    record = await records.read("u1", "ex-1")
    assert (record.points_earned, record.is_completed, record.users_code) == (10, True, "b")


async def test_completed_record_is_frozen(records) -> None:
    await records.create("u1", "ex-1", "track-py", "a", True, 10)
    with pytest.raises(AlreadyProcessed):
        await records.update("u1", "ex-1", "b", False, 0)
    record = await records.read("u1", "ex-1")
    assert (record.points_earned, record.is_completed) == (10, True)


async def test_update_store_error_is_conflict(records, fake_db, store_failure) -> None:
    await records.create("u1", "ex-1", "track-py", "a", False, 4)
    fake_db.user_exercises.fail_with = store_failure
    with pytest.raises(Conflict):
        await records.update("u1", "ex-1", "b", False, 5)
