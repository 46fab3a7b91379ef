import argparse
import math
import signal
import sys
from pathlib import Path
from typing import Any

import numpy as np

from lotus_tuner.configuration import (
    TunerConfig,
    build_tuner_config,
    get_default_config,
    load_config_file,
    save_config_file,
)
from lotus_tuner.errors import TunerError
from lotus_tuner.meter import render_meter_text
from lotus_tuner.note_mapper import map_note
from lotus_tuner.pipeline import PitchPipeline

DEFAULT_DEVICE_FILE = Path("outputs/audio_devices.json")


def launch_ui(config: TunerConfig, device_file: Path = DEFAULT_DEVICE_FILE) -> None:
    from PyQt5 import QtWidgets

    from lotus_tuner.audio_devices import select_input_device
    from lotus_tuner.audio_stream import TunerStream
    from lotus_tuner.latest_reading import LatestReadingSlot
    from lotus_tuner.tuner_widget import TunerWidget

    device = select_input_device(
        config_file=device_file,
        samplerate=config.sample_rate,
        input_channels=config.input_channels,
    )

    app = QtWidgets.QApplication([])

    slot = LatestReadingSlot()
    stream = TunerStream(
        config=config,
        slot=slot,
        input_device_index=int(device["input_device_index"]),
        input_channels=int(device["input_channels"]),
    )

    window = TunerWidget(slot=slot, update_interval_ms=config.refresh_ms)
    window.setWindowTitle("Lotus Tuner")
    window.resize(520, 240)
    window.show()

    print(
        f"Listening at {config.sample_rate:g} Hz, window {config.window_size} samples "
        f"({config.latency_budget_s * 1000:.0f} ms per reading)."
    )
    stream.start()

    signal.signal(signal.SIGINT, signal.SIG_DFL)
    app.aboutToQuit.connect(stream.stop)

    try:
        sys.exit(app.exec())
    except KeyboardInterrupt:
        stream.stop()
        app.quit()


def _name_or_dash(name: str | None) -> str:
    return "-" if name is None else name


def probe_frequencies(freqs: list[float], config: TunerConfig) -> int:
    print("freq_hz,left,center,right,offset_index")
    code = 0
    for freq in freqs:
        match = map_note(freq, config.note_table)
        if match.is_boundary:
            code = 2
        offset = "-" if match.offset_index is None else str(match.offset_index)
        print(
            f"{freq:.6f},{_name_or_dash(match.left_name)},{match.center_name},"
            f"{_name_or_dash(match.right_name)},{offset}"
        )
    return code


def synthesize_sine(freq_hz: float, config: TunerConfig, amplitude: float = 0.5) -> np.ndarray:
    n = np.arange(config.window_size, dtype=np.float64)
    return amplitude * np.sin(2.0 * np.pi * freq_hz * n / config.sample_rate)


def analyze_tone(freq_hz: float, config: TunerConfig, amplitude: float = 0.5) -> int:
    reading = PitchPipeline(config).analyze(synthesize_sine(freq_hz, config, amplitude=amplitude))
    print(render_meter_text(reading))
    if not reading.has_signal:
        print("No pitch detected.")
        return 2
    print(
        f"dominant={reading.dominant_frequency:.2f} Hz "
        f"left={_name_or_dash(reading.left_note)} center={reading.center_note} "
        f"right={_name_or_dash(reading.right_note)} offset_index={reading.offset_index}"
    )
    return 0


def print_note_table(config: TunerConfig) -> int:
    print("name,frequency_hz")
    for note in config.note_table:
        print(f"{note.name},{note.frequency:.4f}")
    return 0


def _add_config_args(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument("--config", type=str, default=None, help="JSON config file to load.")
    subparser.add_argument(
        "--sample-rate",
        type=float,
        default=None,
        help="Capture sample rate in Hz (default: 2000).",
    )
    subparser.add_argument(
        "--window-size",
        type=int,
        default=None,
        help="Samples per analysis window, a power of two (default: 2048).",
    )
    subparser.add_argument(
        "--note-table",
        type=str,
        default=None,
        help="JSON note table: [{name, frequency}, ...]. Defaults to 12-TET C0..B8.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lotus tuner: realtime pitch detection and note utilities")
    subparsers = parser.add_subparsers(dest="command")

    ui = subparsers.add_parser("ui", help="Run the realtime Qt tuner")
    _add_config_args(ui)
    ui.add_argument(
        "--save-config",
        type=str,
        default=None,
        help="Write the effective configuration to this path before starting.",
    )
    ui.add_argument(
        "--device-file",
        type=str,
        default=str(DEFAULT_DEVICE_FILE),
        help=f"Where the selected input device is remembered (default: {DEFAULT_DEVICE_FILE}).",
    )

    probe = subparsers.add_parser("probe", help="Map frequencies to notes and tuning offsets")
    _add_config_args(probe)
    probe.add_argument(
        "--freq",
        dest="freqs",
        type=float,
        action="append",
        required=True,
        help="Frequency in Hz. Pass multiple --freq values to probe multiple points.",
    )

    tone = subparsers.add_parser("tone", help="Run the pipeline on a synthesized sine window")
    _add_config_args(tone)
    tone.add_argument("--freq", type=float, required=True, help="Sine frequency in Hz.")
    tone.add_argument("--amplitude", type=float, default=0.5, help="Sine amplitude (default: 0.5).")

    notes = subparsers.add_parser("notes", help="Print the configured note table")
    _add_config_args(notes)
    return parser


def _config_dict_from_args(args: argparse.Namespace) -> dict[str, dict[str, Any]]:
    config = load_config_file(args.config) if args.config else get_default_config()
    if args.sample_rate is not None:
        config["audio"]["sample_rate"] = args.sample_rate
    if args.window_size is not None:
        config["audio"]["window_size"] = args.window_size
    if args.note_table is not None:
        config["notes"]["table_path"] = args.note_table
    return config


def _resolve_config(parser: argparse.ArgumentParser, args: argparse.Namespace) -> tuple[dict[str, Any], TunerConfig]:
    try:
        raw = _config_dict_from_args(args)
        return raw, build_tuner_config(raw)
    except (TunerError, ValueError, OSError) as exc:
        parser.error(f"Invalid configuration: {exc}")
        raise


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        args = parser.parse_args(["ui"])

    raw_config, config = _resolve_config(parser, args)

    if args.command == "ui":
        if args.save_config:
            saved = save_config_file(args.save_config, raw_config)
            print(f"Saved config to {saved}")
        launch_ui(config=config, device_file=Path(args.device_file))
        return

    if args.command == "probe":
        if not all(math.isfinite(freq) and freq >= 0 for freq in args.freqs):
            parser.error("--freq must be a finite number >= 0.")
        raise SystemExit(probe_frequencies(freqs=args.freqs, config=config))

    if args.command == "tone":
        if not (math.isfinite(args.freq) and args.freq >= 0):
            parser.error("--freq must be a finite number >= 0.")
        if not (math.isfinite(args.amplitude) and args.amplitude >= 0):
            parser.error("--amplitude must be a finite number >= 0.")
        raise SystemExit(analyze_tone(freq_hz=args.freq, config=config, amplitude=args.amplitude))

    if args.command == "notes":
        raise SystemExit(print_note_table(config))

    parser.error(f"Unsupported command: {args.command}")


if __name__ == "__main__":
    main()
