# src/planit/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs exactly one command:
    planit tasks --json
    planit done <page_id>
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Sequence

from ..cli.bootstrap import create_initial_state
from ..cli.commands import registry as command_registry
from ..config import get_settings
from ..core.credentials import MissingTokenError
from ..logging_setup import setup_logging
from ..notion.client import NotionAPIError

logger = logging.getLogger(__name__)


def _emit(text: str) -> None:
    print(text, file=sys.stderr, flush=True)


def console_level_for(settings) -> int:
    """Console log level from settings.log_level; WARNING when unset or unknown."""
    level_name = str(getattr(settings, "log_level", "") or "WARNING").strip().upper()
    level = getattr(logging, level_name, logging.WARNING)
    return level if isinstance(level, int) else logging.WARNING


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()

    console_level = console_level_for(settings)
    setup_logging(log_dir=getattr(settings, "data_dir", ".local/planit"), console_level=console_level)

    args = list(sys.argv[1:] if argv is None else argv)
    line = "/" + " ".join(args) if args else "/help"

    state = create_initial_state(settings=settings)
    logger.debug("Running command line=%r", line.split()[0])

    try:
        reply = asyncio.run(command_registry.handle(state, line, emit=_emit))
    except (NotionAPIError, MissingTokenError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    except Exception:
        logger.exception("Command failed: %s", line.split()[0])
        return 1

    if reply:
        print(reply)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
