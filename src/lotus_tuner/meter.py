from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from lotus_tuner.note_mapper import CENTER_STEP, STEP_COUNT
from lotus_tuner.pipeline import PitchReading

CELL_WIDTH = 3
LEFT_CELL = 0
RIGHT_CELL = STEP_COUNT - 1


@dataclass(frozen=True)
class MeterCell:
    """One cell of the tuning meter.

    ``highlight_level`` is ``None`` for plain cells. The highlighted cell gets
    a level from 0 (far off) to ``CENTER_STEP`` (in tune), mirrored around the
    center so both sides share the same palette.
    """

    text: str
    highlight_level: Optional[int] = None


def highlight_level(index: int) -> int:
    return index if index <= CENTER_STEP else RIGHT_CELL - index


def build_meter_cells(reading: PitchReading) -> list[MeterCell]:
    labels = {
        LEFT_CELL: reading.left_note or "",
        CENTER_STEP: reading.center_note or "",
        RIGHT_CELL: reading.right_note or "",
    }
    active = reading.offset_index if reading.has_signal else None
    return [
        MeterCell(
            text=labels.get(i, ""),
            highlight_level=highlight_level(i) if i == active else None,
        )
        for i in range(STEP_COUNT)
    ]


def format_frequency(reading: PitchReading) -> str:
    if reading.dominant_frequency is None:
        return "[--]"
    return f"[{reading.dominant_frequency:.2f}]"


def render_meter_text(reading: PitchReading) -> str:
    cells = build_meter_cells(reading)
    names = " ".join(cell.text.center(CELL_WIDTH) for cell in cells)
    marker = " ".join(("^" if cell.highlight_level is not None else " ").center(CELL_WIDTH) for cell in cells)
    return "\n".join([names.rstrip(), marker.rstrip(), format_frequency(reading)])
