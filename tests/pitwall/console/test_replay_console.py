from __future__ import annotations

import json
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from pathlib import Path

from pitwall.controller import ReplayController
from pitwall.data.file_source import FileSessionSource
from pitwall.runtime.config import ReplayPreset, load_replay_config
from pitwall.sync.snapshot import EMPTY_SNAPSHOT
from pitwall.console import main as console_main
from pitwall.console.app import build_source, format_status, run_replay

BASE_TIME = datetime(2023, 9, 17, 12, 0, tzinfo=UTC)


class FakeTime:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def wait(self, seconds: float) -> None:
        self.now += seconds


def _write_session(root: Path, seconds: int = 30) -> None:
    cars = [
        {
            "date": (BASE_TIME + timedelta(seconds=step)).isoformat(),
            "speed": 200 + step,
            "throttle": 100,
            "brake": 0,
            "rpm": 11000,
            "n_gear": 7,
            "drs": 0,
            "driver_number": 1,
        }
        for step in range(seconds + 1)
    ]
    (root / "car_data.json").write_text(json.dumps(cars), encoding="utf-8")
    (root / "drivers.json").write_text(
        json.dumps([{"driver_number": 1, "name_acronym": "VER"}]), encoding="utf-8"
    )


def _config():
    return replace(
        load_replay_config({}),
        preset=ReplayPreset(9165, 9165, 1, "Test", "Replay"),
        playback_rate=1.0,
    )


def test_parser_defaults() -> None:
    args = console_main.build_parser().parse_args([])

    assert args.data_dir is None
    assert args.driver is None
    assert args.status_every == 20


def test_parser_reads_session_overrides() -> None:
    args = console_main.build_parser().parse_args(
        ["--data-dir", "dumps/sg", "--session-key", "9165", "--driver", "44", "--rate", "4"]
    )

    assert args.data_dir == Path("dumps/sg")
    assert args.session_key == 9165
    assert args.driver == 44
    assert args.rate == 4.0


def test_build_source_prefers_data_dir(tmp_path: Path) -> None:
    source = build_source(_config(), tmp_path)

    assert isinstance(source, FileSessionSource)
    assert source.root == tmp_path


def test_format_status_renders_missing_values() -> None:
    line = format_status(EMPTY_SNAPSHOT)

    assert "lap=-" in line
    assert "speed=-" in line
    assert "best_lap=-" in line


def test_run_replay_ticks_headless(tmp_path: Path) -> None:
    _write_session(tmp_path)
    controller = ReplayController(FileSessionSource(tmp_path), config=_config())
    clock = FakeTime()

    code = run_replay(
        controller,
        interval_seconds=0.5,
        seconds=10.0,
        status_every=4,
        time_source=clock,
        wait=clock.wait,
    )

    assert code == 0
    assert controller.snapshot.elapsed_seconds == 9.5
    assert controller.snapshot.car is not None
    assert controller.snapshot.car.speed == 209.0


def test_run_replay_reports_load_failure(tmp_path: Path) -> None:
    controller = ReplayController(FileSessionSource(tmp_path / "missing"), config=_config())

    assert run_replay(controller, interval_seconds=0.5, seconds=1.0) == 1


def test_main_returns_error_code_when_load_fails(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(console_main, "configure_logging", lambda config: None)
    monkeypatch.setattr(console_main, "shutdown_logging", lambda: None)

    code = console_main.main(["--data-dir", str(tmp_path / "missing"), "--seconds", "0"])

    assert code == 1


def test_main_replays_offline_dump(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(console_main, "configure_logging", lambda config: None)
    monkeypatch.setattr(console_main, "shutdown_logging", lambda: None)
    _write_session(tmp_path)

    code = console_main.main(
        ["--data-dir", str(tmp_path), "--driver", "1", "--seconds", "0", "--rate", "2"]
    )

    assert code == 0
