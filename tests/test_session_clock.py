from __future__ import annotations

from assessment_app.core.services.session_clock import SessionClock
from tests.conftest import make_question


def test_run_cycle_ticks_every_running_session(manager):
    user = manager.sign_up("user@example.com", "secret1")
    manager.add_question(make_question(time_limit=2))
    manager.add_question(make_question("second"))
    manager.start_session(user.id)
    clock = SessionClock(manager, interval_seconds=0)

    assert clock.run_cycle()
    assert manager.get_session(user.id).question_seconds_left == 1
    assert clock.run_cycle()
    assert manager.get_session(user.id).position == 1


def test_stopped_clock_does_not_deliver(manager):
    user = manager.sign_up("user@example.com", "secret1")
    manager.add_question(make_question(time_limit=5))
    manager.start_session(user.id)
    clock = SessionClock(manager, interval_seconds=0)
    clock.stop()

    assert not clock.run_cycle()
    assert manager.get_session(user.id).question_seconds_left == 5


def test_start_and_stop_thread(manager):
    clock = SessionClock(manager, interval_seconds=0.01)
    thread = clock.start()
    assert clock.start() is thread
    assert clock.is_running()

    clock.stop()

    assert not clock.is_running()
    assert not thread.is_alive()
