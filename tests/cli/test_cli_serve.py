"""Tests for ``review-mcp serve`` and ``review-mcp http``."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from review_mcp import __version__
from review_mcp.cli import main


class TestServe:
    def test_serves_stdin(self) -> None:
        stdin = '{"jsonrpc": "2.0", "id": 1, "method": "ping"}\n'
        result = CliRunner().invoke(main, ["serve"], input=stdin)
        assert result.exit_code == 0
        response = json.loads(result.stdout.strip().splitlines()[-1])
        assert response["id"] == 1
        assert response["result"]["status"] == "ok"

    def test_help(self) -> None:
        result = CliRunner().invoke(main, ["serve", "--help"])
        assert result.exit_code == 0
        assert "stdin/stdout" in result.output

    def test_missing_config_file(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["serve", "--config", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 2


class TestHttp:
    def test_runs_uvicorn(self) -> None:
        with patch("uvicorn.run") as mock_run:
            result = CliRunner().invoke(main, ["http", "--host", "0.0.0.0", "--port", "9000"])

        assert result.exit_code == 0
        mock_run.assert_called_once()
        kwargs = mock_run.call_args.kwargs
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 9000
        app = mock_run.call_args.args[0]
        assert app.state.mcp_server.registry.frozen


class TestVersion:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
