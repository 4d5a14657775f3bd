from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from mobile_perf import cli
from mobile_perf.automation import driver as driver_package


@pytest.fixture
def ios_config(tmp_path: Path) -> Path:
    (tmp_path / "Perf.app").mkdir()
    config = tmp_path / "ios.yml"
    config.write_text("apps:\n  - name: Perf\n    path: Perf.app\n", encoding="utf-8")
    return config


@pytest.fixture(autouse=True)
def _local_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CI", raising=False)
    monkeypatch.delenv("TEST_CONFIG", raising=False)


def test_show_prints_resolved_options(ios_config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--config", str(ios_config), "show"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["platform"] == "iOS"
    assert summary["server"] == "LocalHost"
    assert summary["apps"][0]["file"] == str((ios_config.parent / "Perf.app").resolve())


def test_capabilities_prints_base_map(ios_config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--config", str(ios_config), "capabilities"]) == 0
    caps = json.loads(capsys.readouterr().out)
    assert caps["appium:automationName"] == "XCUITest"
    assert "appium:otherApps" not in caps


def test_configuration_errors_exit_with_two(tmp_path: Path) -> None:
    bad = tmp_path / "bad.yml"
    bad.write_text("apps:\n  - name: X\n    path: x.jar\n", encoding="utf-8")
    assert cli.main(["--config", str(bad), "show"]) == 2


def test_missing_app_file_exits_with_two(tmp_path: Path) -> None:
    config = tmp_path / "missing.yml"
    config.write_text("apps:\n  - name: X\n    path: x.apk\n", encoding="utf-8")
    assert cli.main(["--config", str(config), "show"]) == 2


def test_session_opens_and_quits_driver(monkeypatch: pytest.MonkeyPatch, ios_config: Path) -> None:
    class _Driver:
        session_id = "session-1"
        quit_called = False

        def quit(self) -> None:
            _Driver.quit_called = True

    monkeypatch.setattr(driver_package, "create_driver", lambda options: _Driver())
    assert cli.main(["--config", str(ios_config), "session"]) == 0
    assert _Driver.quit_called is True


def test_session_failure_exits_with_three(monkeypatch: pytest.MonkeyPatch, ios_config: Path) -> None:
    def _refuse(options: Any) -> None:
        raise ConnectionRefusedError("no appium server")

    monkeypatch.setattr(driver_package, "create_driver", _refuse)
    assert cli.main(["--config", str(ios_config), "session"]) == 3
