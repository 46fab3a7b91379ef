from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from lotus_tuner.configuration import TunerConfig
from lotus_tuner.dominant import dominant_frequency
from lotus_tuner.errors import InvalidInputSize
from lotus_tuner.note_mapper import map_note
from lotus_tuner.spectral import transform


@dataclass(frozen=True)
class PitchReading:
    """One analysis result handed to the presentation layer.

    ``dominant_frequency`` is ``None`` when no dominant component was found;
    the note fields are then empty strings and ``offset_index`` is 0.
    """

    dominant_frequency: Optional[float]
    left_note: Optional[str]
    center_note: str
    right_note: Optional[str]
    offset_index: Optional[int]

    @property
    def has_signal(self) -> bool:
        return self.dominant_frequency is not None

    @classmethod
    def silent(cls) -> "PitchReading":
        return cls(dominant_frequency=None, left_note="", center_note="", right_note="", offset_index=0)


class PitchPipeline:
    def __init__(self, config: TunerConfig):
        self.config = config

    def analyze(self, samples) -> PitchReading:
        mono = np.asarray(samples, dtype=np.float64)
        if mono.ndim != 1 or mono.shape[0] != self.config.window_size:
            raise InvalidInputSize(
                f"Expected {self.config.window_size} mono samples, got shape {mono.shape}."
            )
        return self.analyze_spectrum(transform(mono))

    def analyze_spectrum(self, spectrum) -> PitchReading:
        freq = dominant_frequency(spectrum, self.config.sample_rate, self.config.window_size)
        if freq == 0.0:
            return PitchReading.silent()
        match = map_note(freq, self.config.note_table)
        return PitchReading(
            dominant_frequency=freq,
            left_note=match.left_name,
            center_note=match.center_name,
            right_note=match.right_name,
            offset_index=match.offset_index,
        )
