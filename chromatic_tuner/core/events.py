"""Event system for Chromatic Tuner components."""

from typing import Dict, List, Callable, Any
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)


class TunerEventType(Enum):
    """Event types emitted by a tuner engine."""

    READING = auto()
    SIGNAL_LOST = auto()
    STOPPED = auto()


class EventEmitter:
    """Event emitter for Chromatic Tuner components."""

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Added listener for event {event_type}")

    def off(self, event_type: Any, callback: Callable) -> None:
        """Remove a previously registered callback, if present."""
        listeners = self._listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        A failing listener is logged and does not stop the others.

        Args:
            event_type: Event type to emit
            *args: Positional arguments to pass to listeners
            **kwargs: Keyword arguments to pass to listeners
        """
        if event_type not in self._listeners:
            return

        for callback in list(self._listeners[event_type]):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}")


class TunerEvents:
    """Event emitter specifically for tuner readings."""

    def __init__(self):
        """Initialize the tuner events."""
        self._emitter = EventEmitter()

    def on_reading(self, callback: Callable) -> None:
        """Register a callback invoked with every TunerReading."""
        self._emitter.on(TunerEventType.READING, callback)

    def on_signal_lost(self, callback: Callable) -> None:
        """Register a callback invoked when a pitched signal drops out."""
        self._emitter.on(TunerEventType.SIGNAL_LOST, callback)

    def on_stopped(self, callback: Callable) -> None:
        """Register a callback invoked with the neutral reading on stop()."""
        self._emitter.on(TunerEventType.STOPPED, callback)

    def emit_reading(self, reading) -> None:
        self._emitter.emit(TunerEventType.READING, reading)

    def emit_signal_lost(self, reading) -> None:
        self._emitter.emit(TunerEventType.SIGNAL_LOST, reading)

    def emit_stopped(self, reading) -> None:
        self._emitter.emit(TunerEventType.STOPPED, reading)
