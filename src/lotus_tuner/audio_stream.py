from typing import Any

import numpy as np

from lotus_tuner.configuration import TunerConfig
from lotus_tuner.errors import InvalidInputSize
from lotus_tuner.latest_reading import LatestReadingSlot
from lotus_tuner.pipeline import PitchPipeline, PitchReading


class TunerStream:
    """Runs the pitch pipeline on every captured block and publishes the result."""

    def __init__(
        self,
        config: TunerConfig,
        slot: LatestReadingSlot,
        input_device_index: int | None = None,
        input_channels: int | None = None,
        pipeline: PitchPipeline | None = None,
    ):
        self.config = config
        self.slot = slot
        self.pipeline = pipeline if pipeline is not None else PitchPipeline(config)
        self.input_device_index = input_device_index
        self.input_channels = input_channels if input_channels is not None else config.input_channels
        self.skipped_cycles = 0
        self.input_stream: Any = None

    def open(self) -> None:
        import sounddevice as sd

        self.input_stream = sd.InputStream(
            device=self.input_device_index,
            channels=self.input_channels,
            samplerate=self.config.sample_rate,
            callback=self.audio_input_callback,
            blocksize=self.config.window_size,
            dtype="float32",
            latency="low",
        )

    def start(self) -> bool:
        if self.input_stream is None:
            self.open()
        self.input_stream.start()
        return True

    def stop(self) -> None:
        if self.input_stream is not None:
            self.input_stream.stop()
            self.input_stream.close()
            self.input_stream = None
            print("Input stream stopped.")

    def audio_input_callback(self, indata: np.ndarray, frames: int, time, status) -> None:
        if status:
            print(f"Input stream status: {status}")
        self.process_block(indata)

    def process_block(self, indata: np.ndarray) -> PitchReading | None:
        mono = self.to_mono(indata)
        try:
            reading = self.pipeline.analyze(mono)
        except InvalidInputSize as exc:
            self.skipped_cycles += 1
            print(f"Skipping audio block: {exc}")
            return None
        self.slot.publish(reading)
        return reading

    @staticmethod
    def to_mono(indata: np.ndarray) -> np.ndarray:
        block = np.asarray(indata, dtype=np.float64)
        if block.ndim == 2:
            return block.mean(axis=1)
        return block
