from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from lotus_tuner.notes import NoteTable

STEP_COUNT = 9
CENTER_STEP = STEP_COUNT // 2


@dataclass(frozen=True)
class NoteMatch:
    """Nearest note and its neighbors for one frequency.

    ``left_name`` / ``right_name`` are ``None`` when the center note sits at the
    edge of the table; ``offset_index`` is then ``None`` as well, since there is
    no span to measure against. With no signal, all names are empty strings and
    ``offset_index`` is 0.
    """

    left_name: Optional[str]
    center_name: str
    right_name: Optional[str]
    offset_index: Optional[int]

    @property
    def is_boundary(self) -> bool:
        return self.left_name is None or self.right_name is None


NO_SIGNAL_MATCH = NoteMatch(left_name="", center_name="", right_name="", offset_index=0)


def nearest_note_index(frequency: float, table: NoteTable) -> int:
    closest = 0
    closest_distance = abs(frequency - table[0].frequency)
    for i, note in enumerate(table):
        distance = abs(frequency - note.frequency)
        if distance < closest_distance:
            closest = i
            closest_distance = distance
    return closest


def offset_index(frequency: float, left_hz: float, center_hz: float, right_hz: float) -> int:
    midpoint_left = center_hz - (center_hz - left_hz) / 2.0
    distance = frequency - midpoint_left
    total_span = right_hz - left_hz
    raw = math.floor(distance / (total_span / 2.0) * STEP_COUNT)
    return min(max(raw, 0), STEP_COUNT - 1)


def map_note(dominant_frequency: float | None, table: NoteTable) -> NoteMatch:
    # NaN or infinity carries no pitch; treat it like silence.
    if not dominant_frequency or not math.isfinite(dominant_frequency):
        return NO_SIGNAL_MATCH

    center = nearest_note_index(dominant_frequency, table)
    center_note = table[center]
    if center == 0 or center == len(table) - 1:
        return NoteMatch(
            left_name=table[center - 1].name if center > 0 else None,
            center_name=center_note.name,
            right_name=table[center + 1].name if center < len(table) - 1 else None,
            offset_index=None,
        )

    left_note = table[center - 1]
    right_note = table[center + 1]
    return NoteMatch(
        left_name=left_note.name,
        center_name=center_note.name,
        right_name=right_note.name,
        offset_index=offset_index(dominant_frequency, left_note.frequency, center_note.frequency, right_note.frequency),
    )
