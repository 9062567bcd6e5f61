from unittest.mock import MagicMock

from lifetunes.core.events import EventEmitter


class TestEventEmitter:

    def setup_method(self):
        self.emitter = EventEmitter()

    def test_subscribers_called_in_order(self):
        calls = []
        self.emitter.subscribe("changed", lambda p: calls.append(("a", p)))
        self.emitter.subscribe("changed", lambda p: calls.append(("b", p)))

        self.emitter.emit("changed", 1)

        assert calls == [("a", 1), ("b", 1)]

    def test_unsubscribe(self):
        listener = MagicMock()
        self.emitter.subscribe("changed", listener)
        self.emitter.unsubscribe("changed", listener)
        self.emitter.emit("changed", 1)
        listener.assert_not_called()

    def test_unsubscribe_unknown_is_noop(self):
        self.emitter.unsubscribe("changed", MagicMock())

    def test_failing_listener_does_not_stop_others(self):
        broken = MagicMock(side_effect=RuntimeError("boom"))
        healthy = MagicMock()
        self.emitter.subscribe("changed", broken)
        self.emitter.subscribe("changed", healthy)

        self.emitter.emit("changed", "payload")

        healthy.assert_called_once_with("payload")

    def test_emit_without_listeners(self):
        self.emitter.emit("nothing")
