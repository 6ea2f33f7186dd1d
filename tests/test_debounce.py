import pytest

from student_dashboard.debounce import Debouncer


def test_latest_request_wins(clock):
    calls = []
    debouncer = Debouncer(0.15, clock=clock)
    debouncer.schedule(calls.append, "a")
    clock.now = 0.1
    debouncer.schedule(calls.append, "ab")
    clock.now = 0.2
    assert debouncer.poll() is False
    clock.now = 0.3
    assert debouncer.poll() is True
    assert calls == ["ab"]
    assert debouncer.pending is False


def test_cancel_drops_pending(clock):
    calls = []
    debouncer = Debouncer(0.15, clock=clock)
    debouncer.schedule(calls.append, "x")
    debouncer.cancel()
    clock.now = 1.0
    assert debouncer.poll() is False
    assert calls == []


def test_flush_runs_immediately(clock):
    calls = []
    debouncer = Debouncer(0.15, clock=clock)
    assert debouncer.flush() is False
    debouncer.schedule(calls.append, "now")
    assert debouncer.flush() is True
    assert calls == ["now"]


def test_negative_wait_rejected():
    with pytest.raises(ValueError):
        Debouncer(-0.1)
