from typing import List, Optional

from PyQt5 import QtCore, QtWidgets

from lotus_tuner.latest_reading import LatestReadingSlot
from lotus_tuner.meter import MeterCell, build_meter_cells, format_frequency
from lotus_tuner.note_mapper import STEP_COUNT
from lotus_tuner.pipeline import PitchReading
from lotus_tuner.visualizer_base import VisualizerBase

TITLE_STYLE = "font-weight: bold; background: #be8682; color: #f9ffff; padding: 8px 16px;"
FREQUENCY_STYLE = "font-weight: bold; background: #5a3346; color: #a2c9b6; padding: 0 4px;"
FOOTER_STYLE = "font-weight: bold; padding: 0 4px 8px 4px;"
FOOTER_TEXT = '"I\'m beginning to see <span style="color: #be8682;">the light!"</span>'
CELL_STYLE = "font-weight: bold; background: #d4f1f2; color: #2e1010;"
HIGHLIGHT_STYLES: List[str] = [
    "font-weight: bold; background: #701a1a; color: #cea0c8;",
    "font-weight: bold; background: #b07b69; color: #004455;",
    "font-weight: bold; background: #c4c864; color: #fffefe;",
    "font-weight: bold; background: #2e5a5c; color: #cea0c8;",
    "font-weight: bold; background: #0f5c47; color: #eda0b5;",
]


def cell_style(cell: MeterCell) -> str:
    if cell.highlight_level is None:
        return CELL_STYLE
    return HIGHLIGHT_STYLES[cell.highlight_level]


class TunerWidget(VisualizerBase):
    def __init__(
        self,
        slot: Optional[LatestReadingSlot],
        update_interval_ms: int = 50,
        parent: Optional[QtWidgets.QWidget] = None,
    ):
        super().__init__(slot, update_interval_ms=update_interval_ms, parent=parent)

        layout = QtWidgets.QVBoxLayout(self)
        layout.setAlignment(QtCore.Qt.AlignCenter)

        title = QtWidgets.QLabel("Lotus Tuner")
        title.setStyleSheet(TITLE_STYLE)
        title.setAlignment(QtCore.Qt.AlignCenter)
        layout.addWidget(title)

        footer = QtWidgets.QLabel(FOOTER_TEXT)
        footer.setStyleSheet(FOOTER_STYLE)
        footer.setAlignment(QtCore.Qt.AlignCenter)
        layout.addWidget(footer)

        row = QtWidgets.QHBoxLayout()
        self.cell_labels: List[QtWidgets.QLabel] = []
        for _ in range(STEP_COUNT):
            label = QtWidgets.QLabel("")
            label.setAlignment(QtCore.Qt.AlignCenter)
            label.setFixedWidth(40)
            label.setStyleSheet(CELL_STYLE)
            row.addWidget(label)
            self.cell_labels.append(label)
        layout.addLayout(row)

        self.frequency_label = QtWidgets.QLabel("[--]")
        self.frequency_label.setStyleSheet(FREQUENCY_STYLE)
        self.frequency_label.setAlignment(QtCore.Qt.AlignCenter)
        layout.addWidget(self.frequency_label)

        self.show_reading(PitchReading.silent())

    def show_reading(self, reading: PitchReading) -> None:
        for label, cell in zip(self.cell_labels, build_meter_cells(reading)):
            label.setText(cell.text)
            label.setStyleSheet(cell_style(cell))
        self.frequency_label.setText(format_frequency(reading))
