"""
Logging Setup - Candidate Evaluation Scoring Engine
candidate_scoring/core/logging_config.py

One entry point for the CLI scripts. Standard-library logging writes to
stderr; structlog events from the calculators are routed through the same
stdlib handlers and filtered at the configured level, so stdout only ever
carries the scripts' own output.
"""

import logging

import structlog


def configure_logging(level: str = "INFO") -> None:
    numeric_level = getattr(logging, level, logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%H:%M:%S',
    )

    structlog.configure(
        processors=[
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
