# src/task_manager/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the expiry sweeper in a background thread (optional),
- the console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.task_sweeper import SweeperBackgroundRunner, start_sweeper_in_background

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    sweeper: SweeperBackgroundRunner | None = None
    if settings.sweeper_enabled:
        sweeper = start_sweeper_in_background(
            state.tasks,
            interval_seconds=settings.sweep_interval_seconds,
            retention_seconds=settings.sweep_retention_seconds,
        )

    # Use an Event so main can wait without a busy while-loop.
    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        if settings.console_enabled:
            # The REPL handles Ctrl+C / EOF itself.
            run_console_loop(state)
            stop_main.set()
        else:
            try:
                signal.signal(signal.SIGINT, _handle_signal)
                signal.signal(signal.SIGTERM, _handle_signal)
            except (ValueError, OSError):
                # Not in the main thread, or the platform lacks SIGTERM.
                logger.debug("Signal handlers not installed.", exc_info=True)
            logger.info("Console disabled. Running the expiry sweeper only. Press Ctrl+C to stop.")
            stop_main.wait()

    finally:
        if sweeper is not None:
            sweeper.stop()
            sweeper.join(timeout=10.0)

        logger.info("Bye. %s task(s) discarded (in-memory store).", state.tasks.store.count())


if __name__ == "__main__":
    main()
