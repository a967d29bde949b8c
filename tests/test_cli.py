"""Tests for the command-line entry point (main.py)."""

import argparse
import json

import pytest

import main


def _args(**values) -> argparse.Namespace:
    defaults = dict(env=None, origin=None, method="GET")
    defaults.update(values)
    return argparse.Namespace(**defaults)


class TestCheckConfig:
    def test_prints_policy(self, capsys) -> None:
        main.cmd_check_config(_args())
        data = json.loads(capsys.readouterr().out)
        assert data["environment"] == "development"
        assert data["allowed_origins"] == ["http://localhost:5173"]
        assert data["preflight_status"] == 204

    def test_production_flag(self, capsys) -> None:
        main.cmd_check_config(_args(env="production"))
        data = json.loads(capsys.readouterr().out)
        assert data["allowed_origins"] == ["https://www.your-production-frontend.com"]

    def test_misconfiguration_exits_1(self, monkeypatch, capsys) -> None:
        monkeypatch.setenv("CORS_ORIGINS", "*")
        with pytest.raises(SystemExit) as exc:
            main.cmd_check_config(_args())
        assert exc.value.code == 1
        assert "Wildcard" in capsys.readouterr().err


class TestEvaluate:
    def test_allowed_origin(self, capsys) -> None:
        main.cmd_evaluate(_args(origin="http://localhost:5173"))
        data = json.loads(capsys.readouterr().out)
        assert data["origin_allowed"] is True
        assert data["outcome"] == "forwarded"
        assert data["transition"] == "pending -> forwarded"
        assert data["headers"]["Access-Control-Allow-Origin"] == "http://localhost:5173"
        assert "status" not in data

    def test_preflight_for_denied_origin(self, capsys) -> None:
        main.cmd_evaluate(_args(origin="http://evil.example", method="options"))
        data = json.loads(capsys.readouterr().out)
        assert data["origin_allowed"] is False
        assert data["outcome"] == "terminated"
        assert data["transition"] == "pending -> terminated"
        assert data["status"] == 204
        assert "Access-Control-Allow-Origin" not in data["headers"]
        assert data["headers"]["Access-Control-Allow-Credentials"] == "true"
