"""Tests for the single instance guard."""

import pytest
from auplay.core.exceptions import AlreadyRunningError, InstanceLockError
from auplay.utils.instance import InstanceLock


def test_second_holder_is_refused(tmp_path):
    first = InstanceLock("player", directory=str(tmp_path))
    second = InstanceLock("player", directory=str(tmp_path))

    first.acquire()
    try:
        with pytest.raises(AlreadyRunningError, match="already playing"):
            second.acquire()
        assert not second.locked
    finally:
        first.release()


def test_lock_is_released_on_exit(tmp_path):
    with InstanceLock("player", directory=str(tmp_path)) as lock:
        assert lock.locked

    assert not lock.locked
    with InstanceLock("player", directory=str(tmp_path)):
        pass


def test_different_names_do_not_conflict(tmp_path):
    with InstanceLock("a", directory=str(tmp_path)):
        with InstanceLock("b", directory=str(tmp_path)) as other:
            assert other.locked


def test_release_without_acquire(tmp_path):
    InstanceLock("player", directory=str(tmp_path)).release()


def test_lock_path_that_is_a_directory(tmp_path):
    (tmp_path / "player.lock").mkdir()
    lock = InstanceLock("player", directory=str(tmp_path))

    with pytest.raises(InstanceLockError, match="cannot open lock file"):
        lock.acquire()
    assert not lock.locked


def test_missing_lock_directory(tmp_path):
    lock = InstanceLock("player", directory=str(tmp_path / "gone"))

    with pytest.raises(InstanceLockError):
        lock.acquire()
