"""Tests for EventStream — the notification channel."""

from vmstate import EventStream


class TestEmitSubscribe:
    def test_subscribe_receives_emitted_values(self):
        stream = EventStream()
        received = []
        stream.subscribe(lambda v: received.append(v))
        stream.emit(1)
        stream.emit(2)
        assert received == [1, 2]

    def test_insertion_order(self):
        stream = EventStream()
        order = []
        stream.subscribe(lambda v: order.append("a"))
        stream.subscribe(lambda v: order.append("b"))
        stream.emit(None)
        assert order == ["a", "b"]

    def test_unsubscribe(self):
        stream = EventStream()
        received = []
        unsub = stream.subscribe(lambda v: received.append(v))
        stream.emit(1)
        unsub()
        stream.emit(2)
        assert received == [1]
        assert stream.subscriber_count == 0

    def test_unsubscribe_idempotent(self):
        stream = EventStream()
        unsub = stream.subscribe(lambda v: None)
        unsub()
        unsub()  # should not raise

    def test_unsubscribe_during_emit(self):
        """A subscriber may remove another one mid-emit; the removed one is skipped."""
        stream = EventStream()
        received = []
        unsubs = []
        unsubs.append(stream.subscribe(lambda v: unsubs[1]()))
        unsubs.append(stream.subscribe(lambda v: received.append(v)))
        stream.emit(1)
        stream.emit(2)
        assert received == []


class TestDispose:
    def test_emit_after_dispose_is_noop(self):
        stream = EventStream()
        received = []
        stream.subscribe(lambda v: received.append(v))
        stream.dispose()
        stream.emit(1)
        assert received == []
        assert stream.disposed
        assert stream.subscriber_count == 0

    def test_subscribe_after_dispose_is_noop(self):
        stream = EventStream()
        stream.dispose()
        received = []
        unsub = stream.subscribe(lambda v: received.append(v))
        assert stream.subscriber_count == 0
        unsub()  # should not raise
        stream.emit(1)
        assert received == []


class TestStale:
    def test_stops_when_value_goes_stale(self):
        stream = EventStream()
        current = ["a"]
        received = []
        stream.subscribe(lambda v: (received.append(("first", v)), current.__setitem__(0, "b")))
        stream.subscribe(lambda v: received.append(("second", v)))
        stream.emit("a", stale=lambda: current[0] != "a")
        assert received == [("first", "a")]
