# src/task_manager/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..logging_setup import request_context

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(state: AppState, line: str) -> str | None:
    """
    Run one console line as a request with its own correlation id.

    Returns the text to show, or None for an empty line.
    """
    line = line.strip()
    if not line:
        return None

    # Plain text is shorthand for /add.
    if not line.startswith("/"):
        line = f"/add {line}"

    with request_context() as rid:
        logger.debug("Console request %s: %s", rid, line)
        try:
            return command_registry.handle(state, line)
        except Exception:
            logger.exception("Command handler crashed.")
            return f"Internal error while handling a command (request {rid})."


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a task title to add it. Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        reply = handle_line(state, user_input)
        if reply is not None:
            _print_ts(reply)

    logger.info("Console connector finished.")
