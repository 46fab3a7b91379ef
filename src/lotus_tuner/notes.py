from __future__ import annotations

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from lotus_tuner.errors import EmptyNoteTable, InvalidNoteTable

NOTE_NAMES: list[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]


@dataclass(frozen=True)
class Note:
    name: str
    frequency: float


class NoteTable:
    """Immutable reference table of notes sorted strictly ascending by frequency."""

    def __init__(self, notes: Iterable[Note]):
        notes = tuple(notes)
        if not notes:
            raise EmptyNoteTable("Note table must contain at least one note.")
        previous: Note | None = None
        for note in notes:
            if not (math.isfinite(note.frequency) and note.frequency > 0):
                raise InvalidNoteTable(f"Note {note.name!r} needs a finite positive frequency, got {note.frequency}.")
            if previous is not None and note.frequency <= previous.frequency:
                raise InvalidNoteTable(
                    f"Note table must be strictly ascending: {previous.name!r} ({previous.frequency}) "
                    f"is followed by {note.name!r} ({note.frequency})."
                )
            previous = note
        self._notes = notes

    @property
    def notes(self) -> tuple[Note, ...]:
        return self._notes

    def __len__(self) -> int:
        return len(self._notes)

    def __iter__(self) -> Iterator[Note]:
        return iter(self._notes)

    def __getitem__(self, index: int) -> Note:
        return self._notes[index]

    def __repr__(self) -> str:
        return f"NoteTable({len(self._notes)} notes, {self._notes[0].name}..{self._notes[-1].name})"


def midi_note_to_frequency(midi_note: int, a4_hz: float = 440.0) -> float:
    return float(a4_hz * (2.0 ** ((midi_note - 69) / 12.0)))


def midi_note_name(midi_note: int) -> str:
    return f"{NOTE_NAMES[midi_note % 12]}{midi_note // 12 - 1}"


def standard_note_table(a4_hz: float = 440.0, lowest_midi: int = 12, highest_midi: int = 119) -> NoteTable:
    if a4_hz <= 0:
        raise InvalidNoteTable("a4_hz must be positive.")
    if highest_midi < lowest_midi:
        raise EmptyNoteTable(f"highest_midi ({highest_midi}) is below lowest_midi ({lowest_midi}).")
    return NoteTable(
        Note(name=midi_note_name(m), frequency=midi_note_to_frequency(m, a4_hz=a4_hz))
        for m in range(lowest_midi, highest_midi + 1)
    )


def load_note_table_json(path: str | Path) -> NoteTable:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise InvalidNoteTable("Note table JSON must be a list.")
    notes: list[Note] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise InvalidNoteTable(f"Note table JSON item {idx} must be an object.")
        try:
            notes.append(Note(name=str(item["name"]), frequency=float(item["frequency"])))
        except KeyError as exc:
            raise InvalidNoteTable(f"Note table JSON item {idx} is missing {exc.args[0]!r}.") from exc
    return NoteTable(notes)
