"""Logging configuration for the TAXII client command line."""

import logging
import os
import sys


class GitHubActionsFormatter(logging.Formatter):
    """Prefixes warnings and errors with GitHub Actions annotation commands."""

    LEVEL_MAP = {
        logging.WARNING: "::warning::",
        logging.ERROR: "::error::",
        logging.CRITICAL: "::error::",
    }

    def format(self, record: logging.LogRecord) -> str:
        prefix = self.LEVEL_MAP.get(record.levelno, "")
        return f"{prefix}{super().format(record)}"


LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def setup_logging(debug: bool = False) -> logging.Logger:
    """
    Set up logging for the ``cc_taxii2_client`` logger hierarchy.

    Args:
        debug: Enable debug-level logging

    Returns:
        Configured package logger
    """
    logger = logging.getLogger("cc_taxii2_client")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    if os.environ.get("GITHUB_ACTIONS") == "true":
        formatter: logging.Formatter = GitHubActionsFormatter(fmt=LOG_FORMAT)
    else:
        formatter = logging.Formatter(fmt=LOG_FORMAT)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    return logger
