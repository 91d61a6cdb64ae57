"""Tuner service that integrates audio input and the tuner engine."""

from __future__ import annotations
import threading
from typing import Optional, Callable

from ..logger import get_logger
from ..note_types import TunerReading
from ..tuner_engine import TunerEngine

logger = get_logger(__name__)


class TunerService:
    """Runs a tuner engine against its live audio input.

    The audio input pushes blocks into the engine's queue from its own thread.
    A single worker thread drains that queue so ``process_block`` is never run
    concurrently, and hands every reading to the client callback.
    """

    POLL_INTERVAL = 0.1  # seconds the worker waits for a block before rechecking

    def __init__(self, engine: TunerEngine) -> None:
        self._engine = engine
        self._callback: Optional[Callable[[TunerReading], None]] = None
        self._worker: Optional[threading.Thread] = None
        self._running = threading.Event()

    @property
    def engine(self) -> TunerEngine:
        return self._engine

    def is_running(self) -> bool:
        return self._running.is_set()

    def start(self, callback: Callable[[TunerReading], None]) -> None:
        """Start the engine and deliver readings to ``callback``.

        Raises:
            CaptureUnavailable: If the engine's audio input cannot be started
        """
        if self.is_running():
            logger.warning("Tuner service already running")
            return

        self._callback = callback
        self._engine.start()

        self._running.set()
        self._worker = threading.Thread(target=self._consume, name="tuner-worker", daemon=True)
        self._worker.start()
        logger.info("Tuner service started")

    def stop(self) -> None:
        """Stop the worker, then the engine."""
        if not self.is_running():
            return

        self._running.clear()
        if self._worker and self._worker is not threading.current_thread():
            self._worker.join()
        self._worker = None
        self._engine.stop()
        logger.info("Tuner service stopped")

    def _consume(self) -> None:
        while self._running.is_set():
            reading = self._engine.next_reading(timeout=self.POLL_INTERVAL)
            if reading is None or not self._callback:
                continue
            try:
                self._callback(reading)
            except Exception as e:
                logger.error(f"Error in tuner reading callback: {e}", exc_info=True)
