# src/task_tracker/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then either:
- runs one command given on the command line (`task-tracker list status=todo`);
  the exit status is 1 when the command fails, or
- starts the interactive console loop when no arguments are given.
"""

from __future__ import annotations

import logging
import shlex
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.store_base import StoreError
from .commands import registry as command_registry

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    # keep noisy libs readable
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("nio").setLevel(max(console_level, logging.INFO))

    logger.info("Starting %s (storage=%s)...", settings.app_name, settings.storage)

    try:
        state = create_initial_state(settings=settings)
    except StoreError as e:
        logger.error("Cannot open storage: %s", e)
        print(f"Storage error: {e}", file=sys.stderr)
        return 2

    if not argv:
        run_console_loop(state)
        logger.info("Bye.")
        return 0

    line = " ".join(shlex.quote(a) for a in argv)
    if not line.startswith("/"):
        line = "/" + line

    response, ok = command_registry.run(state, line)
    if response is not None:
        print(response, file=sys.stdout if ok else sys.stderr)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
