import unittest
from unittest.mock import patch

import numpy as np

from lotus_tuner.audio_stream import TunerStream
from lotus_tuner.configuration import build_tuner_config
from lotus_tuner.latest_reading import LatestReadingSlot


class TestTunerStream(unittest.TestCase):
    def setUp(self) -> None:
        self.config = build_tuner_config()
        self.slot = LatestReadingSlot()
        self.stream = TunerStream(config=self.config, slot=self.slot, input_device_index=0)

    def _sine_block(self, freq: float, channels: int = 1) -> np.ndarray:
        n = np.arange(self.config.window_size)
        mono = 0.5 * np.sin(2 * np.pi * freq * n / self.config.sample_rate)
        return np.tile(mono[:, None], (1, channels)).astype(np.float32)

    def test_callback_publishes_reading(self) -> None:
        self.stream.audio_input_callback(self._sine_block(200.0), self.config.window_size, None, None)
        reading = self.slot.latest()
        self.assertIsNotNone(reading)
        self.assertEqual(reading.center_note, "G3")

    def test_stereo_block_is_downmixed(self) -> None:
        reading = self.stream.process_block(self._sine_block(440.0, channels=2))
        self.assertEqual(reading.center_note, "A4")

    def test_wrong_size_block_is_skipped(self) -> None:
        with patch("builtins.print") as fake_print:
            reading = self.stream.process_block(np.zeros((1000, 1), dtype=np.float32))
        self.assertIsNone(reading)
        self.assertEqual(self.stream.skipped_cycles, 1)
        self.assertIsNone(self.slot.latest())
        fake_print.assert_called_once()

    def test_status_flags_are_reported(self) -> None:
        with patch("builtins.print") as fake_print:
            self.stream.audio_input_callback(self._sine_block(440.0), self.config.window_size, None, "input overflow")
        fake_print.assert_called_once_with("Input stream status: input overflow")
        self.assertEqual(self.slot.published_count, 1)

    def test_silence_publishes_no_signal(self) -> None:
        self.stream.process_block(np.zeros((self.config.window_size, 1), dtype=np.float32))
        self.assertFalse(self.slot.latest().has_signal)

    def test_to_mono(self) -> None:
        block = np.array([[1.0, 3.0], [2.0, 4.0]], dtype=np.float32)
        np.testing.assert_allclose(TunerStream.to_mono(block), [2.0, 3.0])


if __name__ == "__main__":
    unittest.main()
