"""Tests for the event emitter."""

import unittest

from chromatic_tuner.core.events import EventEmitter, TunerEventType


class TestEventEmitter(unittest.TestCase):
    def setUp(self):
        self.emitter = EventEmitter()
        self.received = []

    def test_emit_reaches_listener(self):
        self.emitter.on(TunerEventType.READING, self.received.append)
        self.emitter.emit(TunerEventType.READING, "a")
        self.assertEqual(self.received, ["a"])

    def test_listener_registered_once(self):
        self.emitter.on(TunerEventType.READING, self.received.append)
        self.emitter.on(TunerEventType.READING, self.received.append)
        self.emitter.emit(TunerEventType.READING, "a")
        self.assertEqual(self.received, ["a"])

    def test_off_removes_listener(self):
        self.emitter.on(TunerEventType.READING, self.received.append)
        self.emitter.off(TunerEventType.READING, self.received.append)
        self.emitter.emit(TunerEventType.READING, "a")
        self.assertEqual(self.received, [])

    def test_failing_listener_does_not_block_others(self):
        def broken(_):
            raise RuntimeError("boom")

        self.emitter.on(TunerEventType.READING, broken)
        self.emitter.on(TunerEventType.READING, self.received.append)
        self.emitter.emit(TunerEventType.READING, "a")
        self.assertEqual(self.received, ["a"])

    def test_emit_without_listeners(self):
        self.emitter.emit(TunerEventType.SIGNAL_LOST, "a")
        self.assertEqual(self.received, [])


if __name__ == "__main__":
    unittest.main()
