from json import dumps, loads
from pathlib import Path
from typing import Any, Callable, Dict


def _get_sd():
    import sounddevice as sd

    return sd


def list_devices() -> list[dict[str, Any]]:
    sd = _get_sd()
    devices = sd.query_devices()
    for idx, dev in enumerate(devices):
        if dev["max_input_channels"] > 0:
            print(f"[{idx}] {dev['name']} (IN, {int(dev['default_samplerate'])} Hz default)")
    return devices


def prompt_for_input_device(devices: list[dict[str, Any]]) -> int:
    while True:
        try:
            index = int(input("Select input device index: "))
            if devices[index]["max_input_channels"] == 0:
                print("Selected device has no input channels.")
                continue
            return index
        except (ValueError, IndexError):
            print("Invalid index. Try again.")


def _find_supported_channels(
    device_index: int,
    channels_candidates: list[int],
    samplerate: float,
    checker: Callable[..., Any],
) -> int | None:
    # The tuner's sample rate is fixed by configuration, so only the channel count may fall back.
    for channels in channels_candidates:
        if channels <= 0:
            continue
        try:
            checker(device=device_index, channels=channels, samplerate=samplerate)
            return channels
        except Exception:
            continue
    return None


def _validated_or_none(
    saved: Dict[str, int],
    devices: list[dict[str, Any]],
    samplerate: float,
    input_channels: int,
    checker: Callable[..., Any] | None = None,
) -> Dict[str, int] | None:
    idx = int(saved.get("input_device_index", -1))
    if idx < 0 or idx >= len(devices):
        return None
    max_inputs = int(devices[idx].get("max_input_channels", 0))
    if max_inputs <= 0:
        return None

    requested = min(max(1, input_channels), max_inputs)
    if checker is None:
        checker = _get_sd().check_input_settings

    channels = _find_supported_channels(
        device_index=idx,
        channels_candidates=list(range(requested, 0, -1)),
        samplerate=samplerate,
        checker=checker,
    )
    if channels is None:
        return None
    return {"input_device_index": idx, "input_channels": int(channels)}


def select_input_device(config_file: Path, samplerate: float, input_channels: int = 1) -> Dict[str, int]:
    sd = _get_sd()
    devices = sd.query_devices()

    if config_file.exists():
        print(f"Reading input device from {config_file}")
        loaded = loads(config_file.read_text())
        validated = _validated_or_none(loaded, devices, samplerate, input_channels, sd.check_input_settings)
        if validated is not None:
            if validated != loaded:
                config_file.write_text(dumps(validated, indent=4))
                print("Adjusted saved input device to valid settings.")
            return validated
        print(f"Saved input device no longer accepts {samplerate:g} Hz. Please select an input device again.")

    config_file.parent.mkdir(parents=True, exist_ok=True)

    print("=== Available Input Devices ===")
    list_devices()
    print("\n--- Select Input Device ---")
    while True:
        index = prompt_for_input_device(devices)
        validated = _validated_or_none(
            {"input_device_index": index}, devices, samplerate, input_channels, sd.check_input_settings
        )
        if validated is not None:
            break
        print(f"Device {index} does not support {samplerate:g} Hz input. Pick another device.")

    config_file.write_text(dumps(validated, indent=4))
    return validated
