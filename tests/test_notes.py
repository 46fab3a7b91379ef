import json
import tempfile
import unittest
from pathlib import Path

from lotus_tuner.errors import EmptyNoteTable, InvalidNoteTable
from lotus_tuner.notes import (
    Note,
    NoteTable,
    load_note_table_json,
    midi_note_name,
    midi_note_to_frequency,
    standard_note_table,
)


class TestNotes(unittest.TestCase):
    def test_midi_note_helpers(self) -> None:
        self.assertAlmostEqual(midi_note_to_frequency(69), 440.0, places=8)
        self.assertEqual(midi_note_name(69), "A4")
        self.assertEqual(midi_note_name(61), "C#4")
        self.assertEqual(midi_note_name(12), "C0")

    def test_standard_table_spans_c0_to_b8(self) -> None:
        table = standard_note_table()
        self.assertEqual(len(table), 108)
        self.assertEqual(table[0].name, "C0")
        self.assertEqual(table[-1].name, "B8")
        a4 = [note for note in table if note.name == "A4"][0]
        self.assertAlmostEqual(a4.frequency, 440.0, places=8)

    def test_standard_table_respects_reference_pitch(self) -> None:
        table = standard_note_table(a4_hz=432.0, lowest_midi=69, highest_midi=69)
        self.assertEqual(table.notes, (Note("A4", 432.0),))

    def test_empty_table_is_rejected(self) -> None:
        with self.assertRaises(EmptyNoteTable):
            NoteTable([])
        with self.assertRaises(EmptyNoteTable):
            standard_note_table(lowest_midi=60, highest_midi=59)

    def test_table_must_be_strictly_ascending(self) -> None:
        with self.assertRaises(InvalidNoteTable):
            NoteTable([Note("B", 200.0), Note("A", 100.0)])
        with self.assertRaises(InvalidNoteTable):
            NoteTable([Note("A", 100.0), Note("A'", 100.0)])

    def test_table_rejects_non_positive_frequency(self) -> None:
        with self.assertRaises(InvalidNoteTable):
            NoteTable([Note("X", 0.0), Note("A", 100.0)])

    def test_load_note_table_json(self) -> None:
        payload = [{"name": "E2", "frequency": 82.41}, {"name": "A2", "frequency": 110.0}]
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "guitar.json"
            p.write_text(json.dumps(payload), encoding="utf-8")
            table = load_note_table_json(p)
        self.assertEqual([note.name for note in table], ["E2", "A2"])
        self.assertAlmostEqual(table[1].frequency, 110.0, places=8)

    def test_load_note_table_json_reports_missing_fields(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "bad.json"
            p.write_text('[{"name": "E2"}]', encoding="utf-8")
            with self.assertRaises(InvalidNoteTable):
                load_note_table_json(p)

    def test_table_rejects_non_finite_frequency(self) -> None:
        with self.assertRaises(InvalidNoteTable):
            NoteTable([Note("a", 100.0), Note("b", float("nan")), Note("c", 300.0)])
        with self.assertRaises(InvalidNoteTable):
            NoteTable([Note("a", 100.0), Note("b", float("inf"))])

    def test_load_note_table_json_rejects_nan(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "nan.json"
            p.write_text('[{"name": "A", "frequency": 100.0}, {"name": "B", "frequency": NaN}]', encoding="utf-8")
            with self.assertRaises(InvalidNoteTable):
                load_note_table_json(p)


if __name__ == "__main__":
    unittest.main()
