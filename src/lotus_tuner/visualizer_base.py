from abc import abstractmethod
from typing import Optional

from PyQt5 import QtCore, QtWidgets

from lotus_tuner.latest_reading import LatestReadingSlot
from lotus_tuner.pipeline import PitchReading


class VisualizerBase(QtWidgets.QWidget):
    """Widget that polls a reading slot on a timer and redraws on change."""

    def __init__(
        self,
        slot: Optional[LatestReadingSlot],
        update_interval_ms: int = 50,
        parent: Optional[QtWidgets.QWidget] = None,
    ):
        super().__init__(parent)
        self.slot = slot
        self._shown: Optional[PitchReading] = None

        self.timer = QtCore.QTimer(self)
        self.timer.setInterval(update_interval_ms)
        self.timer.timeout.connect(self.update_visualization)
        self.timer.start()

    def update_visualization(self) -> None:
        if self.slot is None:
            return
        reading = self.slot.latest()
        # Readings are immutable, so identity tells us nothing new arrived.
        if reading is None or reading is self._shown:
            return
        self.show_reading(reading)
        self._shown = reading

    @abstractmethod
    def show_reading(self, reading: PitchReading) -> None:
        pass
