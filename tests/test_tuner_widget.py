from __future__ import annotations

import unittest

from lotus_tuner.latest_reading import LatestReadingSlot
from lotus_tuner.meter import MeterCell
from lotus_tuner.pipeline import PitchReading
from lotus_tuner.tuner_widget import CELL_STYLE, FOOTER_TEXT, HIGHLIGHT_STYLES, TunerWidget, cell_style


class _FakeLabel:
    def __init__(self) -> None:
        self.text = ""
        self.style = ""

    def setText(self, text: str) -> None:  # noqa: N802
        self.text = text

    def setStyleSheet(self, style: str) -> None:  # noqa: N802
        self.style = style


class TestTunerWidget(unittest.TestCase):
    def _build_widget(self, slot: LatestReadingSlot | None) -> TunerWidget:
        widget = TunerWidget.__new__(TunerWidget)
        widget.slot = slot
        widget._shown = None
        widget.cell_labels = [_FakeLabel() for _ in range(9)]
        widget.frequency_label = _FakeLabel()
        return widget

    def test_cell_style_uses_highlight_palette(self) -> None:
        self.assertEqual(cell_style(MeterCell("")), CELL_STYLE)
        self.assertEqual(cell_style(MeterCell("", highlight_level=4)), HIGHLIGHT_STYLES[4])
        self.assertEqual(cell_style(MeterCell("", highlight_level=0)), HIGHLIGHT_STYLES[0])

    def test_update_shows_latest_reading(self) -> None:
        slot = LatestReadingSlot()
        widget = self._build_widget(slot)
        slot.publish(
            PitchReading(dominant_frequency=200.2, left_note="F#3", center_note="G3", right_note="G#3", offset_index=7)
        )
        widget.update_visualization()

        self.assertEqual(widget.cell_labels[0].text, "F#3")
        self.assertEqual(widget.cell_labels[4].text, "G3")
        self.assertEqual(widget.cell_labels[8].text, "G#3")
        self.assertEqual(widget.cell_labels[7].style, HIGHLIGHT_STYLES[1])
        self.assertEqual(widget.cell_labels[4].style, CELL_STYLE)
        self.assertEqual(widget.frequency_label.text, "[200.20]")

    def test_update_without_reading_leaves_labels(self) -> None:
        widget = self._build_widget(LatestReadingSlot())
        widget.update_visualization()
        self.assertEqual(widget.frequency_label.text, "")

        detached = self._build_widget(None)
        detached.update_visualization()
        self.assertEqual(detached.frequency_label.text, "")

    def test_repeated_reading_is_drawn_once(self) -> None:
        slot = LatestReadingSlot()
        widget = self._build_widget(slot)
        drawn = []
        widget.show_reading = drawn.append  # type: ignore[method-assign]
        slot.publish(PitchReading.silent())
        widget.update_visualization()
        widget.update_visualization()
        self.assertEqual(len(drawn), 1)

    def test_footer_keeps_tagline(self) -> None:
        self.assertIn("beginning to see", FOOTER_TEXT)
        self.assertIn("the light!", FOOTER_TEXT)


if __name__ == "__main__":
    unittest.main()
