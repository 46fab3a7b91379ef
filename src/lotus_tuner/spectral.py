from __future__ import annotations

import numpy as np

from lotus_tuner.errors import InvalidInputSize


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def transform(samples) -> np.ndarray:
    """Radix-2 decimation-in-time FFT of a power-of-two length window.

    ``samples`` may be real or complex; the result is always complex128 of the
    same length. The input is never modified.
    """
    data = np.asarray(samples)
    if data.ndim != 1:
        raise InvalidInputSize(f"Sample window must be one-dimensional, got shape {data.shape}.")
    n = int(data.shape[0])
    if not is_power_of_two(n):
        raise InvalidInputSize(f"Sample window length must be a power of two, got {n}.")
    return _fft(data.astype(np.complex128))


def _fft(x: np.ndarray) -> np.ndarray:
    n = x.shape[0]
    if n == 1:
        return x.copy()

    even = _fft(x[0::2])
    odd = _fft(x[1::2])

    half = n // 2
    twiddle = np.exp(-2j * np.pi * np.arange(half) / n) * odd
    out = np.empty(n, dtype=np.complex128)
    out[:half] = even + twiddle
    out[half:] = even - twiddle
    return out
