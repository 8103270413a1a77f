from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path

from pitwall.console.app import build_source, run_replay
from pitwall.controller import ReplayController
from pitwall.runtime.config import load_replay_config
from pitwall.runtime.logging import LoggingConfig, configure_logging, shutdown_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pitwall-replay",
        description="Headless telemetry session replay.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory with one <endpoint>.json dump per endpoint; OpenF1 when omitted.",
    )
    parser.add_argument("--session-key", type=int, default=None, help="Primary session key.")
    parser.add_argument(
        "--telemetry-session-key",
        type=int,
        default=None,
        help="Session key used for car_data and location.",
    )
    parser.add_argument("--driver", type=int, default=None, help="Driver number to replay.")
    parser.add_argument("--rate", type=float, default=None, help="Playback rate multiplier.")
    parser.add_argument(
        "--seconds",
        type=float,
        default=None,
        help="Stop after this many wall-clock seconds; runs until interrupted when omitted.",
    )
    parser.add_argument(
        "--status-every",
        type=int,
        default=20,
        help="Log a status line every N ticks (0 disables).",
    )
    parser.add_argument("--log-level", default=None, help="Override PITWALL_LOG_LEVEL.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_replay_config()
    preset = config.preset
    config = replace(
        config,
        preset=replace(
            preset,
            session_key=preset.session_key if args.session_key is None else args.session_key,
            telemetry_session_key=(
                preset.telemetry_session_key
                if args.telemetry_session_key is None
                else args.telemetry_session_key
            ),
            driver_number=preset.driver_number if args.driver is None else args.driver,
        ),
    )
    if args.log_level:
        config = replace(config, log_level=args.log_level.upper())
    configure_logging(LoggingConfig.from_replay_config(config))
    try:
        controller = ReplayController(build_source(config, args.data_dir), config=config)
        if args.rate is not None:
            controller.set_rate(args.rate)
        return run_replay(
            controller,
            interval_seconds=config.tick_interval_seconds,
            seconds=args.seconds,
            status_every=args.status_every,
        )
    finally:
        shutdown_logging()


if __name__ == "__main__":
    raise SystemExit(main())
