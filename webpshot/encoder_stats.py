"""Running statistics for image encoders."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class EncoderStats:
    """Totals and running averages over the images an encoder produced."""

    images_encoded: int = 0
    bytes_processed: int = 0
    bytes_output: int = 0
    average_compression_ratio: float = 0.0
    average_encoding_time_ms: float = 0.0

    def update(self, input_size: int, output_size: int, time_ms: float) -> None:
        """Record one encoded image."""
        self.images_encoded += 1
        self.bytes_processed += input_size
        self.bytes_output += output_size

        if input_size:
            ratio = output_size / input_size
        else:
            ratio = math.nan if output_size == 0 else math.inf

        previous = self.images_encoded - 1
        count = self.images_encoded
        self.average_compression_ratio = (
            self.average_compression_ratio * previous + ratio
        ) / count
        self.average_encoding_time_ms = (
            self.average_encoding_time_ms * previous + time_ms
        ) / count

    def space_savings_percent(self) -> float:
        """Percentage of input bytes saved by encoding."""
        if self.bytes_processed == 0:
            return 0.0
        return (1.0 - self.bytes_output / self.bytes_processed) * 100.0