# tests/test_cli.py
import pytest

from agnostic_chat import cli
from agnostic_chat.core import logging_utils


@pytest.fixture(autouse=True)
def keep_pytest_logging(monkeypatch):
    # configure_logging(force=True) would drop pytest's capture handlers
    monkeypatch.setattr(logging_utils, "configure_logging", lambda level="INFO": None)


def test_demo_with_fake_backend(capsys):
    assert cli.main(["demo", "--fake"]) == 0
    out = capsys.readouterr().out
    assert "Running with: FAKE" in out
    assert "Response: echo: What is the capital of France?" in out
    assert "> echo: Write a very short haiku about coding." in out
    assert "All examples completed!" in out


def test_default_command_is_demo():
    args = cli._parse_args([])
    assert args.command == "demo"
    assert args.fake is False


def test_unknown_backend_exits_nonzero(caplog_info):
    assert cli.main(["demo", "--backend", "mistral"]) == 1
    assert any("demo failed" in rec.getMessage() for rec in caplog_info.records)


def test_unconfigured_backend_does_not_fail_the_run(capsys, monkeypatch):
    # no API key: every call fails, each failure is logged, exit code stays 0
    from agnostic_chat.core import config

    monkeypatch.setattr(config, "OPENAI_API_KEY", "")
    assert cli.main(["demo", "--backend", "openai"]) == 0
    assert "Running with: OPENAI" in capsys.readouterr().out
