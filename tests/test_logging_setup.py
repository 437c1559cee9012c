"""Tests for logging setup."""

import logging

from cc_taxii2_client.logging_setup import GitHubActionsFormatter, setup_logging


def _record(level: int) -> logging.LogRecord:
    return logging.LogRecord("cc_taxii2_client.test", level, __file__, 1, "hello", None, None)


class TestGitHubActionsFormatter:
    """Tests for GitHubActionsFormatter."""

    def test_prefixes(self):
        formatter = GitHubActionsFormatter(fmt="%(message)s")

        assert formatter.format(_record(logging.INFO)) == "hello"
        assert formatter.format(_record(logging.WARNING)) == "::warning::hello"
        assert formatter.format(_record(logging.ERROR)) == "::error::hello"


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_levels(self, monkeypatch):
        monkeypatch.delenv("GITHUB_ACTIONS", raising=False)

        assert setup_logging().level == logging.INFO
        logger = setup_logging(debug=True)

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, GitHubActionsFormatter)

    def test_github_actions_formatter(self, monkeypatch):
        monkeypatch.setenv("GITHUB_ACTIONS", "true")

        logger = setup_logging()

        assert isinstance(logger.handlers[0].formatter, GitHubActionsFormatter)
