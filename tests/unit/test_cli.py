"""Tests for techcrunch_digest.cli."""

import argparse
import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from techcrunch_digest.cli import main, parse_args, positive_int, run_batch
from techcrunch_digest.config import AppConfig
from techcrunch_digest.errors import ConfigError, RenderFailure
from techcrunch_digest.models import Category, Summary


class TestParseArgs:
    def test_batch_defaults_to_startups(self) -> None:
        args = parse_args(["batch"])
        assert args.command == "batch"
        assert args.category == "startups"
        assert args.start_page is None

    def test_batch_overrides(self) -> None:
        args = parse_args(["batch", "--category", "ai", "--start-page", "3", "--max-pages", "2"])
        assert (args.category, args.start_page, args.max_pages) == ("ai", 3, 2)

    def test_positive_int_rejects_zero(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            positive_int("0")


class TestRunBatch:
    def test_uses_config_defaults_and_prints_summaries(self, capsys) -> None:
        pipeline = AsyncMock()
        pipeline.run.return_value = [Summary(source_link="https://x/a", title="A", text="facts")]

        code = asyncio.run(run_batch(pipeline, parse_args(["batch"]), AppConfig()))

        assert code == 0
        pipeline.run.assert_awaited_once_with(Category.STARTUPS, 2, 1, 1)
        out = capsys.readouterr().out
        assert "Total articles processed: 1" in out
        assert "Link: https://x/a" in out

    def test_exhausted_retries_exit_non_zero(self) -> None:
        pipeline = AsyncMock()
        pipeline.run.side_effect = RenderFailure("https://techcrunch.com", "timeout")

        assert asyncio.run(run_batch(pipeline, parse_args(["batch"]), AppConfig())) == 1


class TestMain:
    @patch("techcrunch_digest.cli.AppConfig.from_env")
    def test_bad_config_exits_with_two(self, mock_from_env) -> None:
        mock_from_env.side_effect = ConfigError("MAX_PAGES must be a positive integer, got '0'")
        assert main(["batch"]) == 2
