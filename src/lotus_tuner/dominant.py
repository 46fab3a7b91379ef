from __future__ import annotations

import math

import numpy as np

from lotus_tuner.errors import InvalidSampleRate, InvalidWindowSize
from lotus_tuner.spectral import transform


def _check_rate_and_window(sample_rate: float, window_size: float) -> None:
    if not (math.isfinite(window_size) and window_size > 0):
        raise InvalidWindowSize(f"window_size must be a finite number > 0, got {window_size}.")
    if not (math.isfinite(sample_rate) and sample_rate > 0):
        raise InvalidSampleRate(f"sample_rate must be a finite number > 0, got {sample_rate}.")


def bin_frequency(index: int, sample_rate: float, window_size: float) -> float:
    _check_rate_and_window(sample_rate, window_size)
    return float(index) * float(sample_rate) / float(window_size)


def dominant_frequency(spectrum, sample_rate: float, window_size: float) -> float:
    """Frequency in Hz of the strongest bin in the lower half of ``spectrum``.

    An all-zero spectrum yields 0.0, which callers treat as "no signal".
    Non-finite or non-positive rates and sizes are rejected so NaN and
    infinity never reach the note mapper.
    """
    _check_rate_and_window(sample_rate, window_size)
    values = np.asarray(spectrum, dtype=np.complex128)
    if values.shape[0] != window_size:
        raise InvalidWindowSize(
            f"window_size ({window_size}) must match the spectrum length ({values.shape[0]})."
        )

    magnitudes = np.sqrt(values.real**2 + values.imag**2)[: values.shape[0] // 2]
    # argmax keeps the first bin on ties and index 0 for silence.
    max_index = int(np.argmax(magnitudes)) if magnitudes.size else 0

    return bin_frequency(max_index, sample_rate, window_size)


def detect_dominant_frequency(samples, sample_rate: float, window_size: float) -> float:
    return dominant_frequency(transform(samples), sample_rate, window_size)
