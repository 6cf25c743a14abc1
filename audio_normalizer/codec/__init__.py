"""
Decoding and encoding between audio files and SampleBuffers.
"""

from .decoder import decode_audio, decode_packets, select_decode_strategy
from .encoder import write_audio
from .sample_layout import SampleLayout

__all__ = [
    "decode_audio",
    "decode_packets",
    "select_decode_strategy",
    "write_audio",
    "SampleLayout",
]
