"""structlog setup for the command line tool."""

import logging
import sys

import structlog

from amm_kernel.config import CliConfig


def configure_logging(config: CliConfig) -> None:
    """Configure structlog once for the process.

    Log lines go to stderr so they never mix with command output.
    """
    renderer: structlog.types.Processor
    if config.json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.log_level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
