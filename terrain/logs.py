from __future__ import annotations

import logging

import structlog


def configure_logging(verbose: bool = False) -> None:
    """Console logging for the driver: INFO by default, DEBUG when verbose."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO
        ),
    )
