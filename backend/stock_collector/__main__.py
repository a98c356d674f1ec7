"""
Stock collector — command line entry point.

Usage: python -m stock_collector <command> [options]
"""

import asyncio
import json
import sys
from pathlib import Path

from stock_collector.core.config import REQUIRED_FOR_COLLECTION, settings
from stock_collector.core.errors import ConfigurationError
from stock_collector.core.logging import get_logger, setup_logging

logger = get_logger("stock_collector.cli")

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"

USAGE = """
Stock collector
===============

Usage: python -m stock_collector <command> [options]

Commands:
    collect         Run one collection batch over every supplier folder
    check-config    Verify that every required setting is present
    migrate         Apply Alembic migrations (--revision=REV, default head)

Options:
    --json          Print the batch report as JSON ('collect')
"""


def collect(opts: list[str]) -> int:
    from stock_collector.ingestion.orchestrator import build_orchestrator

    report = asyncio.run(build_orchestrator(settings).run())
    if "--json" in opts:
        print(json.dumps(report.to_dict(), indent=2))
    return 1 if report.failed_folders else 0


def check_config(opts: list[str]) -> int:
    settings.require(*REQUIRED_FOR_COLLECTION)
    logger.info("Configuration complete", environment=settings.ENVIRONMENT)
    return 0


def migrate(opts: list[str]) -> int:
    from alembic import command
    from alembic.config import Config

    revision = "head"
    for o in opts:
        if o.startswith("--revision="):
            revision = o.split("=", 1)[1]

    command.upgrade(Config(str(ALEMBIC_INI)), revision)
    logger.info("Migrations applied", revision=revision)
    return 0


COMMANDS = {
    "collect": collect,
    "check-config": check_config,
    "migrate": migrate,
}


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] in ("-h", "--help"):
        print(USAGE)
        return 0

    setup_logging(settings.LOG_LEVEL, json=settings.LOG_JSON)

    command, opts = argv[0], argv[1:]
    handler = COMMANDS.get(command)
    if handler is None:
        logger.error("Unknown command", command=command)
        print(USAGE)
        return 2

    try:
        return handler(opts)
    except ConfigurationError as exc:
        logger.error("Configuration incomplete", missing=exc.missing, error=str(exc))
        return 1
    except Exception as exc:
        logger.exception("Operation failed", command=command, error=str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
