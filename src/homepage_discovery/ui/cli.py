from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from homepage_discovery.app import reconcile_once, run_controller
from homepage_discovery.config import ConfigurationError, configure_logging, get_controller_config

if TYPE_CHECKING:
    from collections.abc import Sequence

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Publish annotated Kubernetes Services on a homepage dashboard"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("run", help="Watch Services and reconcile continuously")

    once = subparsers.add_parser("once", help="Reconcile a single time and exit")
    once.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the merged services.yaml instead of writing it",
    )
    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        config = get_controller_config()
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)

    try:
        if parsed_args.command == "run":
            asyncio.run(run_controller(config=config))
        elif parsed_args.command == "once":
            outcome = asyncio.run(reconcile_once(config=config, dry_run=parsed_args.dry_run))
            if parsed_args.dry_run:
                sys.stdout.write(outcome.documents.services)
            log.info(
                "Reconcile finished: groups=%s, entities=%s, changed=%s, written=%s",
                ", ".join(outcome.groups) or "-",
                outcome.entities,
                outcome.changed,
                outcome.written,
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during reconcile")
        sys.exit(1)


if __name__ == "__main__":
    main()
