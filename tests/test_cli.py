"""
tests/test_cli.py
=================
Command dispatch and exit codes of `python -m stock_collector`.
"""

from __future__ import annotations

import pytest

import stock_collector.__main__ as cli
from stock_collector.core.config import REQUIRED_FOR_COLLECTION


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


class TestMain:
    def test_help_prints_usage(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["--help"]) == 0
        assert "check-config" in capsys.readouterr().out

    def test_unknown_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["harvest"]) == 2
        assert "Usage" in capsys.readouterr().out

    def test_check_config_reports_missing_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in REQUIRED_FOR_COLLECTION:
            monkeypatch.setattr(cli.settings, name, "")

        assert cli.main(["check-config"]) == 1

    def test_check_config_passes(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in REQUIRED_FOR_COLLECTION:
            monkeypatch.setattr(cli.settings, name, "configured")

        assert cli.main(["check-config"]) == 0

    def test_unexpected_failure_exits_non_zero(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(opts: list[str]) -> int:
            raise RuntimeError("boom")

        monkeypatch.setitem(cli.COMMANDS, "collect", broken)

        assert cli.main(["collect"]) == 1
