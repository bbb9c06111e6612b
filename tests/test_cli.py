from __future__ import annotations

from pathlib import Path

import pytest

from trellowatch import cli
from trellowatch.monitor import CycleOutcome, CycleReport

_ENV_KEYS = (
    "TRELLO_API_KEY",
    "TRELLO_API_TOKEN",
    "BOARD_ID",
    "API_KEY",
    "PHONE_NUMBER",
    "STATE_DIR",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # Keep find_dotenv() from picking up a developer's .env.
    monkeypatch.chdir(tmp_path)


def _set_required(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRELLO_API_KEY", "key")
    monkeypatch.setenv("TRELLO_API_TOKEN", "token")
    monkeypatch.setenv("BOARD_ID", "board")
    monkeypatch.setenv("API_KEY", "msg")
    monkeypatch.setenv("PHONE_NUMBER", "123")


def test_missing_configuration_exits_with_status_1(caplog: pytest.LogCaptureFixture) -> None:
    assert cli.main([]) == cli.EXIT_CONFIG
    assert "TRELLO_API_KEY" in caplog.text


def test_env_file_is_loaded(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    env_file = tmp_path / "custom.env"
    env_file.write_text(
        "TRELLO_API_KEY=key\nTRELLO_API_TOKEN=token\nBOARD_ID=board\nAPI_KEY=msg\nPHONE_NUMBER=123\n",
        encoding="utf-8",
    )
    for key in _ENV_KEYS:
        # load_dotenv writes into os.environ; let monkeypatch undo it.
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    seen = {}

    async def fake_run_once(config, store):  # type: ignore[no-untyped-def]
        seen["config"] = config
        return CycleReport(CycleOutcome.BOOTSTRAPPED)

    monkeypatch.setattr(cli, "_run_once", fake_run_once)

    assert cli.main(["--env-file", str(env_file), "--once", "--state-dir", str(tmp_path)]) == cli.EXIT_OK
    assert seen["config"].board_id == "board"
    assert seen["config"].state_dir == tmp_path


def test_once_returns_2_when_fetch_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_required(monkeypatch)

    async def fake_run_once(config, store):  # type: ignore[no-untyped-def]
        return CycleReport(CycleOutcome.FETCH_FAILED)

    monkeypatch.setattr(cli, "_run_once", fake_run_once)

    assert cli.main(["--once"]) == cli.EXIT_FETCH_FAILED


def test_reset_state_removes_files(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _set_required(monkeypatch)
    (tmp_path / "trello-state.json").write_text("{}", encoding="utf-8")
    (tmp_path / "trello-state.initialized").write_text("2026-01-01T00:00:00+00:00", encoding="utf-8")

    async def fake_run_once(config, store):  # type: ignore[no-untyped-def]
        assert store.is_first_run()
        return CycleReport(CycleOutcome.BOOTSTRAPPED)

    monkeypatch.setattr(cli, "_run_once", fake_run_once)

    assert cli.main(["--once", "--reset-state", "--state-dir", str(tmp_path)]) == cli.EXIT_OK
    assert not (tmp_path / "trello-state.json").exists()


def test_serve_mode_is_default(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_required(monkeypatch)
    calls = []

    async def fake_serve(config, store):  # type: ignore[no-untyped-def]
        calls.append(config.port)

    monkeypatch.setattr(cli, "_serve", fake_serve)

    assert cli.main([]) == cli.EXIT_OK
    assert calls == [3000]


def test_reset_state_failure_does_not_stop_startup(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _set_required(monkeypatch)
    (tmp_path / "trello-state.json").write_text("{}", encoding="utf-8")
    (tmp_path / "trello-state.initialized").mkdir()

    async def fake_run_once(config, store):  # type: ignore[no-untyped-def]
        return CycleReport(CycleOutcome.COMPLETED)

    monkeypatch.setattr(cli, "_run_once", fake_run_once)

    assert cli.main(["--once", "--reset-state", "--state-dir", str(tmp_path)]) == cli.EXIT_OK
    assert not (tmp_path / "trello-state.json").exists()
