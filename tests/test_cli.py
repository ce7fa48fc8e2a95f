"""CLI tests for the ORMR command line tool.

Every invocation passes ``--offline`` so the registry comes from the bundled
snapshot and no network access is attempted.
"""

import json
from pathlib import Path
from typing import Any, List

import pytest
import yaml
from click.testing import CliRunner, Result

from openrouter_model_registry.cli import app
from openrouter_model_registry.cli.utils.helpers import ExitCode
from openrouter_model_registry.config_paths import CACHE_FILENAME, ENV_TIMEOUT


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner for testing."""
    return CliRunner()


def _invoke(runner: CliRunner, *args: str, fmt: str = "json") -> Result:
    return runner.invoke(app, ["--offline", "--format", fmt, *args])


def _json(result: Result) -> Any:
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestGlobalOptions:
    """Top-level group behavior."""

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "ORMR CLI version:" in result.output
        assert "Library version:" in result.output

    def test_no_subcommand_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, [])
        assert result.exit_code == 0
        assert "models" in result.output
        assert "refresh" in result.output

    def test_invalid_environment_is_usage_error(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_TIMEOUT, "never")
        result = _invoke(cli_runner, "models", "list")
        assert result.exit_code == ExitCode.INVALID_USAGE
        assert ENV_TIMEOUT in result.output


class TestModelsList:
    """ormr models list"""

    def test_all_models(self, cli_runner: CliRunner) -> None:
        data = _json(_invoke(cli_runner, "models", "list"))

        assert data["count"] == 10
        assert data["source"] == "snapshot"
        contexts = [m["context_length"] for m in data["models"]]
        assert contexts == sorted(contexts, reverse=True)

    def test_provider_filter(self, cli_runner: CliRunner) -> None:
        data = _json(_invoke(cli_runner, "models", "list", "--provider", "anthropic"))
        assert [m["id"] for m in data["models"]] == ["anthropic/claude-sonnet-4", "anthropic/claude-3.5-sonnet"]

    def test_free_filter(self, cli_runner: CliRunner) -> None:
        data = _json(_invoke(cli_runner, "models", "list", "--free"))
        assert [m["id"] for m in data["models"]] == ["google/gemini-2.0-flash-exp:free"]

    def test_context_and_tier_filters(self, cli_runner: CliRunner) -> None:
        data = _json(_invoke(cli_runner, "models", "list", "--min-context", "500000", "--tier", "massive"))
        assert data["count"] == 3
        assert all(m["size_tier"] == "massive" for m in data["models"])

    def test_sort_and_limit(self, cli_runner: CliRunner) -> None:
        data = _json(_invoke(cli_runner, "models", "list", "--sort", "context", "--order", "asc", "-n", "3"))

        contexts: List[int] = [m["context_length"] for m in data["models"]]
        assert len(contexts) == 3
        assert contexts == sorted(contexts)
        assert contexts[0] == 128000

    def test_search(self, cli_runner: CliRunner) -> None:
        data = _json(_invoke(cli_runner, "models", "list", "--search", "llama"))
        assert [m["id"] for m in data["models"]] == ["meta-llama/llama-3.3-70b-instruct"]

    def test_csv_columns(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "models", "list", "--provider", "openai", "--columns", "id,context_length", fmt="csv")

        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert lines[0] == "id,context_length"
        assert lines[1:] == ["openai/o3-mini,200000", "openai/gpt-4o,128000"]

    def test_table_output(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "models", "list", "--provider", "openai", "--columns", "id", fmt="table")
        assert result.exit_code == 0
        assert "openai/gpt-4o" in result.output

    def test_yaml_is_rejected(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "models", "list", fmt="yaml")
        assert result.exit_code == ExitCode.INVALID_USAGE

    def test_invalid_sort_key(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "models", "list", "--sort", "popularity")
        assert result.exit_code == ExitCode.INVALID_USAGE


class TestModelsGet:
    """ormr models get"""

    def test_get_by_slug(self, cli_runner: CliRunner) -> None:
        data = _json(_invoke(cli_runner, "models", "get", "claude-3.5-sonnet"))

        assert data["id"] == "anthropic/claude-3.5-sonnet"
        assert data["context_length"] == 200000
        assert data["pricing"]["prompt_per_million"] == 3.0
        assert data["provider"]["name"] == "Anthropic"

    def test_get_fuzzy(self, cli_runner: CliRunner) -> None:
        data = _json(_invoke(cli_runner, "models", "get", "gpt4o"))
        assert data["id"] == "openai/gpt-4o"

    def test_get_yaml(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "models", "get", "openai/o3-mini", fmt="yaml")
        assert result.exit_code == 0
        assert yaml.safe_load(result.stdout)["id"] == "openai/o3-mini"

    def test_table_falls_back_to_json(self, cli_runner: CliRunner) -> None:
        data = _json(_invoke(cli_runner, "models", "get", "grok-3-mini", fmt="table"))
        assert data["id"] == "x-ai/grok-3-mini"

    def test_output_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "model.json"
        result = _invoke(cli_runner, "models", "get", "deepseek-r1", "-o", str(target))

        assert result.exit_code == 0
        assert json.loads(target.read_text())["id"] == "deepseek/deepseek-r1"

    def test_not_found(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "models", "get", "no-such-model")
        assert result.exit_code == ExitCode.MODEL_NOT_FOUND
        assert "not found" in result.output


class TestOtherCommands:
    """providers, stats, refresh and cache."""

    def test_providers(self, cli_runner: CliRunner) -> None:
        data = _json(_invoke(cli_runner, "providers", "list"))

        assert data["count"] == 7
        names = [p["name"] for p in data["providers"]]
        assert names == sorted(names, key=str.casefold)
        anthropic = next(p for p in data["providers"] if p["id"] == "anthropic")
        assert anthropic["model_count"] == 2

    def test_providers_table(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "providers", "list", fmt="table")
        assert result.exit_code == 0
        assert "Anthropic" in result.output

    def test_stats(self, cli_runner: CliRunner) -> None:
        data = _json(_invoke(cli_runner, "stats"))

        assert data["total"] == 10
        assert data["providers"] == 7
        assert data["free_models"] == 1
        assert data["max_context"] == 1048576
        assert data["source"] == "snapshot"
        assert data["stale"] is False

    def test_refresh_reports_skipped_stage(self, cli_runner: CliRunner) -> None:
        data = _json(_invoke(cli_runner, "refresh"))

        assert data["source"] == "snapshot"
        assert data["model_count"] == 10
        assert data["failures"] == [{"stage": "api", "error": "Network access is disabled"}]

    def test_cache_info_and_clear(self, cli_runner: CliRunner, isolated_env: Path) -> None:
        before = _json(_invoke(cli_runner, "cache", "info"))
        assert before["exists"] is False
        assert before["cache_file"] == str(isolated_env / CACHE_FILENAME)

        _json(_invoke(cli_runner, "stats"))

        after = _json(_invoke(cli_runner, "cache", "info"))
        assert after["exists"] is True
        assert after["size_bytes"] > 0
        assert after["metadata"]["source"] == "snapshot"

        cleared = _json(_invoke(cli_runner, "cache", "clear", "--yes"))
        assert cleared["removed"] is True
        assert not (isolated_env / CACHE_FILENAME).exists()

    def test_cache_clear_without_cache(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "cache", "clear", fmt="table")
        assert result.exit_code == 0
        assert "No cached registry found" in result.output

    def test_cache_clear_prompt_declined(self, cli_runner: CliRunner) -> None:
        _json(_invoke(cli_runner, "stats"))
        result = cli_runner.invoke(app, ["--offline", "cache", "clear"], input="n\n")
        assert result.exit_code == 0
        assert "cancelled" in result.output
