# Area: Runner
"""
periselene.runner — Mission Runner
==================================

Cooperative single-threaded loop that drives a client or the director
console: ``tick()`` once per ``tick_interval_seconds``, and ``poll()`` (when
the target has one) at most once per ``poll_interval_seconds``. Store
pushes arrive between iterations; the poll is the backstop. Stops on
SIGINT or ``stop()``.
"""

from __future__ import annotations

import logging
import signal
import time
from typing import Any, Callable, Dict, Optional, Protocol

from ._shared.logging_config import log_error, setup_logging
from .config import with_defaults
from .errors import PeriseleneError

logger = logging.getLogger("periselene.runner")


class Tickable(Protocol):
    def tick(self) -> Any:
        ...


class MissionRunner:
    """
    Drives one target at a fixed interval.

    Attributes:
        target: DirectorConsole, MissionClient or ParticipantClient
        on_view: Optional callback receiving each tick's view
    """

    def __init__(
        self,
        target: Tickable,
        config: Optional[Dict[str, Any]] = None,
        on_view: Optional[Callable[[Any], None]] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        configure_logging: bool = False,
    ):
        self.target = target
        self.config = with_defaults(config)
        self.on_view = on_view
        self.tick_interval = self.config["tick_interval_seconds"]
        self.poll_interval = self.config["poll_interval_seconds"]
        self._sleep = sleep
        self._clock = clock
        self._last_poll_at: Optional[float] = None
        self._running = False
        self.iterations = 0

        if configure_logging:
            setup_logging(log_file_path=self.config.get("log_file", "periselene.log"))

    def run(self) -> None:
        """Start the loop. Blocks until interrupted or stopped."""
        self._running = True
        signal.signal(signal.SIGINT, lambda s, f: setattr(self, "_running", False))

        # Clients start(), the director console bootstrap()s
        start = getattr(self.target, "start", None) or getattr(self.target, "bootstrap", None)
        if callable(start):
            start()

        self._log_startup()
        while self._running:
            try:
                self.run_once()
                self._sleep(self.tick_interval)
            except KeyboardInterrupt:
                break
            except PeriseleneError as e:
                log_error(e)
                self._sleep(self.tick_interval)
            except Exception as e:
                logger.error(f"Loop error: {e}", exc_info=True)
                self._sleep(self.tick_interval)

        # DirectorConsole.stop() means STOP the mission, so prefer close()
        shutdown = getattr(self.target, "close", None) or getattr(self.target, "stop", None)
        if callable(shutdown):
            shutdown()
        logger.info("Mission Runner stopped.")

    def run_once(self) -> Any:
        """Single iteration: poll (if supported and due), tick, publish the view."""
        poll = getattr(self.target, "poll", None)
        if callable(poll) and self._poll_due():
            self._last_poll_at = self._clock()
            poll()
        view = self.target.tick()
        self.iterations += 1
        if self.on_view is not None:
            self.on_view(view)
        return view

    def stop(self) -> None:
        """Ask the loop to exit after the current iteration."""
        self._running = False

    def _poll_due(self) -> bool:
        if self._last_poll_at is None:
            return True
        return self._clock() - self._last_poll_at >= self.poll_interval

    def _log_startup(self) -> None:
        logger.info("=" * 60)
        logger.info("  Periselene Mission Runner — Starting")
        logger.info(f"  Target: {type(self.target).__name__}")
        logger.info(f"  Tick:   every {self.tick_interval}s")
        logger.info(f"  Poll:   every {self.poll_interval}s")
        logger.info("=" * 60)
