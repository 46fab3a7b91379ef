from __future__ import annotations

import json
import math
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lotus_tuner.errors import InvalidInputSize, InvalidSampleRate, InvalidWindowSize
from lotus_tuner.notes import NoteTable, load_note_table_json, standard_note_table
from lotus_tuner.spectral import is_power_of_two

DEFAULT_CONFIG: dict[str, dict[str, Any]] = {
    "audio": {
        "sample_rate": 2000,
        "window_size": 2048,
        "input_channels": 1,
    },
    "notes": {
        "a4_hz": 440.0,
        "lowest_midi": 12,
        "highest_midi": 119,
        "table_path": None,
    },
    "ui": {
        "refresh_ms": 50,
    },
}


@dataclass(frozen=True)
class TunerConfig:
    """Validated, immutable settings shared by the pipeline and its collaborators."""

    sample_rate: float
    window_size: int
    note_table: NoteTable
    input_channels: int = 1
    refresh_ms: int = 50

    @property
    def latency_budget_s(self) -> float:
        return self.window_size / self.sample_rate


def get_default_config() -> dict[str, dict[str, Any]]:
    return deepcopy(DEFAULT_CONFIG)


def _deep_merge_dict(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    out = deepcopy(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _deep_merge_dict(out[key], value)
        else:
            out[key] = value
    return out


def load_config_file(path: str | Path) -> dict[str, dict[str, Any]]:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("Config root must be a JSON object.")
    return _deep_merge_dict(get_default_config(), payload)


def save_config_file(path: str | Path, config: dict[str, Any]) -> Path:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(config, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    return output


def _build_note_table(notes: dict[str, Any]) -> NoteTable:
    table_path = notes.get("table_path")
    if table_path:
        return load_note_table_json(table_path)
    return standard_note_table(
        a4_hz=float(notes["a4_hz"]),
        lowest_midi=int(notes["lowest_midi"]),
        highest_midi=int(notes["highest_midi"]),
    )


def build_tuner_config(config: dict[str, dict[str, Any]] | None = None) -> TunerConfig:
    merged = _deep_merge_dict(get_default_config(), config or {})
    audio = merged["audio"]

    sample_rate = float(audio["sample_rate"])
    if not (math.isfinite(sample_rate) and sample_rate > 0):
        raise InvalidSampleRate(f"audio.sample_rate must be a finite number > 0, got {audio['sample_rate']}.")
    raw_window = float(audio["window_size"])
    if not (math.isfinite(raw_window) and raw_window > 0):
        raise InvalidWindowSize(f"audio.window_size must be a finite number > 0, got {audio['window_size']}.")
    if raw_window != int(raw_window):
        raise InvalidInputSize(f"audio.window_size must be a whole number of samples, got {audio['window_size']}.")
    window_size = int(raw_window)
    if not is_power_of_two(window_size):
        raise InvalidInputSize(f"audio.window_size must be a power of two, got {window_size}.")
    input_channels = int(audio["input_channels"])
    if input_channels <= 0:
        raise ValueError(f"audio.input_channels must be > 0, got {input_channels}.")
    refresh_ms = int(merged["ui"]["refresh_ms"])
    if refresh_ms <= 0:
        raise ValueError(f"ui.refresh_ms must be > 0, got {refresh_ms}.")

    return TunerConfig(
        sample_rate=sample_rate,
        window_size=window_size,
        note_table=_build_note_table(merged["notes"]),
        input_channels=input_channels,
        refresh_ms=refresh_ms,
    )
