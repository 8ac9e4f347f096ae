"""
Unit tests for booking_lock.py.

Coverage:
1) Key generation
2) Ordering and release of in-process locks
3) Timeout behavior
4) Redis acquisition/release and graceful degradation
"""

from datetime import date
import threading
from unittest.mock import MagicMock, patch

import pytest

from studyroom.core.booking_lock import (
    _namespaced_key,
    booking_scope,
    quota_key,
    slot_key,
)
from studyroom.core.exceptions import BookingBusyException

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _no_redis():
    with patch("studyroom.core.booking_lock._get_sync_redis", return_value=None):
        yield


class TestKeyGeneration:
    def test_slot_key_format(self):
        assert slot_key("ROOM1", date(2026, 2, 16), 10) == "slot:ROOM1:2026-02-16:10"

    def test_quota_key_format(self):
        assert quota_key(date(2026, 2, 16), "Hong", "1") == "quota:2026-02-16:Hong:1"

    def test_namespaced_key_format(self):
        assert _namespaced_key("slot:A:2026-02-16:10") == "studyroom:lock:slot:A:2026-02-16:10"


class TestLocalScope:
    def test_yields_sorted_unique_keys(self):
        with booking_scope(["b", "a", "b"]) as keys:
            assert keys == ["a", "b"]

    def test_second_scope_on_same_key_times_out(self):
        with booking_scope(["slot:x"]):
            with pytest.raises(BookingBusyException) as exc_info:
                with booking_scope(["slot:x"], timeout_s=0.05):
                    pass
        assert exc_info.value.code == "BOOKING_BUSY"
        assert exc_info.value.details["keys"] == ["slot:x"]

    def test_disjoint_keys_do_not_block(self):
        with booking_scope(["slot:x"]):
            with booking_scope(["slot:y"], timeout_s=0.05) as keys:
                assert keys == ["slot:y"]

    def test_keys_released_after_exception(self):
        with pytest.raises(ValueError):
            with booking_scope(["slot:x", "quota:y"]):
                raise ValueError("boom")
        with booking_scope(["slot:x", "quota:y"], timeout_s=0.05):
            pass

    def test_partial_acquisition_is_released_on_timeout(self):
        with booking_scope(["b"]):
            with pytest.raises(BookingBusyException):
                with booking_scope(["a", "b"], timeout_s=0.05):
                    pass
        # "a" was taken before the timeout on "b" and must be free again
        with booking_scope(["a"], timeout_s=0.05):
            pass

    def test_serializes_threads_on_shared_key(self):
        inside = []
        overlap = []
        lock = threading.Lock()

        def worker():
            with booking_scope(["quota:2026-02-16:Hong:1"], timeout_s=5):
                with lock:
                    if inside:
                        overlap.append(True)
                    inside.append(1)
                threading.Event().wait(0.01)
                with lock:
                    inside.pop()

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert overlap == []


class TestRedisScope:
    def test_acquires_and_releases_every_key(self):
        client = MagicMock()
        client.set.return_value = True
        with patch("studyroom.core.booking_lock._get_sync_redis", return_value=client):
            with booking_scope(["b", "a"], ttl_s=30):
                pass

        set_keys = [c.args[0] for c in client.set.call_args_list]
        assert set_keys == ["studyroom:lock:a", "studyroom:lock:b"]
        for call in client.set.call_args_list:
            assert call.kwargs == {"nx": True, "ex": 30}
        released = [c.args[2] for c in client.eval.call_args_list]
        assert released == ["studyroom:lock:b", "studyroom:lock:a"]

    def test_redis_key_held_elsewhere_times_out(self):
        client = MagicMock()
        client.set.return_value = False
        with patch("studyroom.core.booking_lock._get_sync_redis", return_value=client):
            with pytest.raises(BookingBusyException):
                with booking_scope(["slot:z"], timeout_s=0.01):
                    pass
        client.eval.assert_not_called()
        # Local lock must have been released
        with booking_scope(["slot:z"], timeout_s=0.05):
            pass

    def test_redis_error_degrades_to_local_locks(self):
        client = MagicMock()
        client.set.side_effect = ConnectionError("redis down")
        entered = False
        with patch("studyroom.core.booking_lock._get_sync_redis", return_value=client):
            with booking_scope(["slot:w"]):
                entered = True
        assert entered is True

    def test_release_error_is_swallowed(self):
        client = MagicMock()
        client.set.return_value = True
        client.eval.side_effect = ConnectionError("redis down")
        with patch("studyroom.core.booking_lock._get_sync_redis", return_value=client):
            with booking_scope(["slot:v"]):
                pass
        with booking_scope(["slot:v"], timeout_s=0.05):
            pass
