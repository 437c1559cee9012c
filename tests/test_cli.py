"""Tests for CLI commands."""

import argparse
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from aioresponses import aioresponses

from cc_taxii2_client.cli import (
    build_parser,
    collections_command,
    discovery_command,
    indicators_command,
    main,
    run,
)
from cc_taxii2_client.models import CCIndicator, Collection, Discovery

BASE_URL = "https://taxii.example.com"


@pytest.fixture
def taxii_env(monkeypatch):
    """Set TAXII environment variables for the CLI."""
    monkeypatch.setenv("TAXII_USERNAME", "test-account")
    monkeypatch.setenv("TAXII_API_KEY", "test-api-key")
    monkeypatch.setenv("TAXII_BASE_URL", BASE_URL)


class TestBuildParser:
    """Tests for argument parsing."""

    def test_indicators_defaults(self):
        args = build_parser().parse_args(["indicators"])

        assert args.command == "indicators"
        assert args.limit == 1000
        assert args.private is False
        assert args.follow_pages is False
        assert args.collection is None

    def test_indicators_options(self):
        args = build_parser().parse_args(
            [
                "indicators",
                "--collection", "c1",
                "--limit", "5",
                "--private",
                "--added-after", "2024-01-01T00:00:00Z",
                "--type", "indicator",
                "--follow-pages",
                "--json",
            ]
        )

        assert args.collection == "c1"
        assert args.limit == 5
        assert args.private is True
        assert args.added_after == "2024-01-01T00:00:00Z"
        assert args.type == "indicator"
        assert args.follow_pages is True
        assert args.json is True

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCommands:
    """Tests for the individual command coroutines."""

    @pytest.mark.asyncio
    async def test_discovery_command(self, capsys, discovery_response):
        """Test discovery prints the document as JSON."""
        client = MagicMock()
        client.discover = AsyncMock(return_value=Discovery.from_dict(discovery_response))

        exit_code = await discovery_command(argparse.Namespace(), client)

        assert exit_code == 0
        printed = json.loads(capsys.readouterr().out)
        assert printed["api_roots"] == discovery_response["api_roots"]

    @pytest.mark.asyncio
    async def test_collections_command(self, capsys, collections_response):
        """Test collections are printed for the requested root."""
        collections = [Collection.from_dict(c) for c in collections_response["collections"]]
        client = MagicMock()
        client.get_collections = AsyncMock(return_value=collections)

        exit_code = await collections_command(argparse.Namespace(root="api"), client)

        assert exit_code == 0
        client.get_collections.assert_awaited_once_with("api")
        printed = json.loads(capsys.readouterr().out)
        assert [c["title"] for c in printed] == ["CloudCover Indicators", "Archive"]

    @pytest.mark.asyncio
    async def test_indicators_command_prints_count(self, capsys, indicator):
        """Test indicators prints the count and forwards options."""
        client = MagicMock()
        client.get_cc_indicators = AsyncMock(
            return_value=[CCIndicator.from_dict(indicator)] * 2
        )
        args = build_parser().parse_args(["indicators", "--type", "indicator", "--private"])

        exit_code = await indicators_command(args, client)

        assert exit_code == 0
        assert capsys.readouterr().out.strip() == "2"
        client.get_cc_indicators.assert_awaited_once_with(
            collection_id=None,
            limit=1000,
            private=True,
            added_after=None,
            matches={"type": "indicator"},
            follow_pages=False,
        )

    @pytest.mark.asyncio
    async def test_indicators_command_json(self, capsys, indicator):
        """Test --json prints the indicators themselves."""
        client = MagicMock()
        client.get_cc_indicators = AsyncMock(return_value=[CCIndicator.from_dict(indicator)])
        args = build_parser().parse_args(["indicators", "--json"])

        await indicators_command(args, client)

        printed = json.loads(capsys.readouterr().out)
        assert printed == [indicator]


class TestRun:
    """Tests for run() exit codes."""

    @pytest.mark.asyncio
    async def test_success(self, taxii_env, capsys, discovery_response):
        with aioresponses() as m:
            m.get(f"{BASE_URL}/taxii2/", payload=discovery_response)
            exit_code = await run(build_parser().parse_args(["discovery"]))

        assert exit_code == 0
        assert "CloudCover TAXII Server" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_missing_config_returns_2(self, monkeypatch):
        monkeypatch.delenv("TAXII_USERNAME", raising=False)
        monkeypatch.delenv("TAXII_API_KEY", raising=False)

        exit_code = await run(build_parser().parse_args(["discovery"]))

        assert exit_code == 2

    @pytest.mark.asyncio
    async def test_taxii_error_returns_1(self, taxii_env):
        with aioresponses() as m:
            m.get(f"{BASE_URL}/api/collections/", status=401)
            exit_code = await run(build_parser().parse_args(["collections"]))

        assert exit_code == 1

    def test_main_exits_with_code(self, monkeypatch):
        monkeypatch.delenv("TAXII_USERNAME", raising=False)
        monkeypatch.delenv("TAXII_API_KEY", raising=False)

        with pytest.raises(SystemExit) as exc_info:
            main(["discovery"])

        assert exc_info.value.code == 2
