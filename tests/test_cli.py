"""Tests for the bqtokenize command line interface."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from bqtokenize import __version__
from bqtokenize.cli.main import cli

from .conftest import TEST_AES_IV, TEST_AES_KEY


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def aes_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AES_KEY", TEST_AES_KEY)
    monkeypatch.setenv("AES_IV_PARAMETER_BASE64", TEST_AES_IV)
    monkeypatch.delenv("BQTOKENIZE_ALGORITHMS", raising=False)
    monkeypatch.delenv("AES_DEFAULT_CIPHER_TYPE", raising=False)


def write_request(path: Path, context: dict[str, str], *rows: list[Any]) -> str:
    request_file = path / "request.json"
    request_file.write_text(
        json.dumps({"requestId": "cli-1", "userDefinedContext": context, "calls": list(rows)})
    )
    return str(request_file)


class TestCLIBasics:
    """Test help and version output."""

    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "serve" in result.output
        assert "run" in result.output

    def test_version_option(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_version_command(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert result.output.strip() == f"bqtokenize v{__version__}"


@pytest.mark.usefixtures("aes_env")
class TestRunCommand:
    """Test processing a request file offline."""

    def test_run_aes_tokenize(self, runner: CliRunner, tmp_path: Path) -> None:
        request_file = write_request(
            tmp_path, {"mode": "tokenize", "algo": "aes"}, ["Anant"], ["Damle"]
        )
        result = runner.invoke(cli, ["run", request_file])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {
            "replies": ["VhxcfvLBLRy8ag4DVl+7yQ==", "vjVNUHd2cpR0S8XLqhR+VQ=="]
        }

    def test_run_pretty(self, runner: CliRunner, tmp_path: Path) -> None:
        request_file = write_request(tmp_path, {"mode": "tokenize", "algo": "base64"}, ["Anant"])
        result = runner.invoke(cli, ["run", request_file, "--pretty"])
        assert result.exit_code == 0
        assert '\n  "replies"' in result.stdout

    def test_run_error_exits_nonzero(self, runner: CliRunner, tmp_path: Path) -> None:
        request_file = write_request(tmp_path, {"mode": "tokenize", "algo": "rot13"}, ["Anant"])
        result = runner.invoke(cli, ["run", request_file])
        assert result.exit_code == 1
        assert "UnknownAlgorithmError" in result.output

    def test_run_invalid_request_file(self, runner: CliRunner, tmp_path: Path) -> None:
        request_file = tmp_path / "request.json"
        request_file.write_text('{"calls": "nope"}')
        result = runner.invoke(cli, ["run", str(request_file)])
        assert result.exit_code == 1
        assert "Invalid request file" in result.output

    def test_run_missing_file(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["run", "does-not-exist.json"])
        assert result.exit_code == 2


class TestRunConfiguration:
    """Test configuration handling of the run command."""

    def test_missing_key_material(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        for name in ("AES_KEY", "AES_IV_PARAMETER_BASE64", "BQTOKENIZE_ALGORITHMS"):
            monkeypatch.delenv(name, raising=False)
        request_file = write_request(tmp_path, {"mode": "tokenize", "algo": "identity"}, ["x"])
        result = runner.invoke(cli, ["run", request_file])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert "AES_KEY" in result.output

    def test_config_file(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        for name in ("AES_KEY", "AES_IV_PARAMETER_BASE64", "BQTOKENIZE_ALGORITHMS"):
            monkeypatch.delenv(name, raising=False)
        config_file = tmp_path / "bqtokenize.yaml"
        config_file.write_text(
            yaml.safe_dump(
                {
                    "aes_key": TEST_AES_KEY,
                    "aes_iv_parameter_base64": TEST_AES_IV,
                    "aes_default_cipher_type": "AES/ECB/PKCS5PADDING",
                    "algorithms": ["aes", "base64"],
                }
            )
        )
        request_file = write_request(tmp_path, {"mode": "tokenize", "algo": "aes"}, ["Anant"])
        result = runner.invoke(cli, ["run", request_file, "--config", str(config_file)])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"replies": ["nrUwN61laFc115jyyQHmng=="]}


@pytest.mark.usefixtures("aes_env")
class TestServeCommand:
    """Test the serve command wiring without binding a socket."""

    def test_serve_runs_uvicorn(self, runner: CliRunner) -> None:
        with patch("uvicorn.run") as mock_run:
            result = runner.invoke(cli, ["serve", "--port", "9090"])
        assert result.exit_code == 0, result.output
        assert "Serving bqtokenize on 0.0.0.0:9090" in result.output
        mock_run.assert_called_once()
        assert mock_run.call_args.kwargs["port"] == 9090
        assert mock_run.call_args.kwargs["host"] == "0.0.0.0"
