from core.events.domain_events import domain_events
from core.events.signal import Signal


def test_domain_event_signal_connect_emit_disconnect():
    seen: list[int] = []

    def _handler(user_id: int) -> None:
        seen.append(user_id)

    domain_events.gigs_changed.connect(_handler)
    domain_events.gigs_changed.emit(1)
    domain_events.gigs_changed.disconnect(_handler)
    domain_events.gigs_changed.emit(2)

    assert seen == [1]


def test_signal_connect_is_idempotent():
    signal: Signal[int] = Signal()
    seen: list[int] = []

    def _handler(payload: int) -> None:
        seen.append(payload)

    signal.connect(_handler)
    signal.connect(_handler)
    signal.emit(7)

    assert signal.subscriber_count == 1
    assert seen == [7]


def test_signal_emit_prunes_dead_weakref_callbacks():
    signal: Signal[int] = Signal()
    seen: list[int] = []

    class _DeadProxyCallback:
        def __init__(self) -> None:
            self.calls = 0

        def __call__(self, _payload: int) -> None:
            self.calls += 1
            raise ReferenceError("weakly-referenced object no longer exists")

    dead = _DeadProxyCallback()

    def _ok(payload: int) -> None:
        seen.append(payload)

    signal.connect(dead)
    signal.connect(_ok)

    signal.emit(1)
    signal.emit(2)

    assert dead.calls == 1
    assert seen == [1, 2]
    assert signal.subscriber_count == 1


def test_signal_emit_keeps_other_errors_visible():
    signal: Signal[int] = Signal()

    def _boom(_payload: int) -> None:
        raise RuntimeError("boom")

    signal.connect(_boom)

    try:
        signal.emit(1)
        assert False, "Expected RuntimeError to propagate"
    except RuntimeError as exc:
        assert str(exc) == "boom"
