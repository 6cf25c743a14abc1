"""
In-memory representation of decoded audio.
"""
from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass
class SampleBuffer:
    """
    Channel-interleaved float32 samples for a whole file.

    Samples are nominally in [-1.0, 1.0] but are not clamped at decode time.
    The buffer is owned by one pipeline run and mutated in place by the gain
    and fade stages.
    """
    samples: np.ndarray
    channel_count: int
    sample_rate: int
    bit_depth: Optional[int] = None
    floating_point: bool = False

    def __post_init__(self):
        if self.channel_count <= 0:
            raise ValueError(f"channel_count must be positive, got {self.channel_count}")
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")

        self.samples = np.ascontiguousarray(self.samples, dtype=np.float32).reshape(-1)
        if self.samples.size % self.channel_count != 0:
            raise ValueError(
                f"{self.samples.size} samples cannot be split into "
                f"{self.channel_count} interleaved channels"
            )

    @property
    def frame_count(self) -> int:
        return self.samples.size // self.channel_count

    @property
    def duration_seconds(self) -> float:
        return self.frame_count / self.sample_rate

    def frames(self) -> np.ndarray:
        """(frames, channels) view sharing memory with ``samples``."""
        return self.samples.reshape(-1, self.channel_count)

    def __len__(self) -> int:
        return self.samples.size
