"""
Decode audio files of any supported format into a SampleBuffer.

Two strategies sit behind ``decode_audio``: a fast path that reads WAV
headers directly with soundfile, and a generic path that probes the file
with FFmpeg (PyAV) and decodes it packet by packet, padding corrupt packets
with silence instead of giving up on the whole file.
"""
import os
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List

import av
import numpy as np
import soundfile as sf

from audio_normalizer.buffer import SampleBuffer
from audio_normalizer.codec.sample_layout import SampleLayout, interleave, to_float32
from audio_normalizer.exceptions import (
    AudioIOError,
    CorruptPacketError,
    DecodeError,
    FormatError,
    NoAudioDataError,
)
from audio_normalizer.utils.logger import get_logger, log_performance

logger = get_logger(__name__)

# Frames of silence inserted per corrupt packet. The true duration of a packet
# that failed to decode is unknown, so this is a fixed estimate.
SILENCE_PAD_FRAMES = 1024

FAST_PATH_EXTENSIONS = {".wav"}

_FLOAT_SUBTYPES = {"FLOAT": 32, "DOUBLE": 64}
_PCM_SUBTYPES = {"PCM_S8": 8, "PCM_U8": 8, "PCM_16": 16, "PCM_24": 24, "PCM_32": 32}


class EndOfStream(Exception):
    """Signals that the decoder has been drained. Not an error."""
    pass


@dataclass
class DecodedChunk:
    """Interleaved float32 samples decoded from one packet."""
    samples: np.ndarray
    channel_count: int
    sample_rate: int

    @property
    def frame_count(self) -> int:
        return self.samples.size // self.channel_count


PacketDecoder = Callable[[object], List[DecodedChunk]]


def select_decode_strategy(path) -> Callable[[str], SampleBuffer]:
    """Pick the decoder for a path from its extension alone."""
    extension = os.path.splitext(os.fspath(path))[1].lower()
    if extension in FAST_PATH_EXTENSIONS:
        return decode_wav
    return decode_generic


@log_performance
def decode_audio(path) -> SampleBuffer:
    """
    Decode an audio file into a SampleBuffer.

    Args:
        path: Path to the input file

    Returns:
        SampleBuffer with interleaved float32 samples

    Raises:
        AudioIOError: File missing or unreadable
        FormatError: Container not recognized
        DecodeError: Unrecoverable decoder error
        NoAudioDataError: Nothing could be decoded
    """
    path = os.fspath(path)
    decode = select_decode_strategy(path)
    logger.debug(f"Decoding {path} with {decode.__name__}")
    buffer = decode(path)
    logger.debug(
        f"Decoded {buffer.frame_count} frames, {buffer.channel_count} channel(s) "
        f"at {buffer.sample_rate} Hz ({buffer.duration_seconds:.2f}s)"
    )
    return buffer


def _check_readable(path: str) -> None:
    if not os.path.exists(path):
        raise AudioIOError(f"Input file not found: {path}")
    if not os.access(path, os.R_OK):
        raise AudioIOError(f"Input file is not readable: {path}")


def decode_wav(path: str) -> SampleBuffer:
    """
    Fast path: read a WAV file using its header as the authority.

    Float samples pass through unchanged. Integer samples are normalized by
    2^(bits-1); soundfile returns them left-justified in int32, so dividing
    by 2^31 is the same scale for every width.
    """
    _check_readable(path)
    try:
        with sf.SoundFile(path) as wav:
            subtype = wav.subtype
            channel_count = wav.channels
            sample_rate = wav.samplerate

            if subtype in _PCM_SUBTYPES:
                raw = wav.read(dtype="int32", always_2d=True)
                samples = (raw.astype(np.float64) / float(2 ** 31)).astype(np.float32)
                bit_depth, floating_point = _PCM_SUBTYPES[subtype], False
            else:
                # Float subtypes, plus companded/ADPCM codecs libsndfile expands itself
                samples = wav.read(dtype="float32", always_2d=True)
                bit_depth = _FLOAT_SUBTYPES.get(subtype)
                floating_point = bit_depth is not None
    except sf.LibsndfileError as e:
        raise FormatError(f"Failed to open WAV file {path}: {e}") from e
    except OSError as e:
        raise AudioIOError(f"Failed to read {path}: {e}") from e

    if samples.size == 0:
        raise NoAudioDataError(f"No audio data decoded from {path}")

    logger.debug(f"WAV header: {subtype}, {channel_count} ch, {sample_rate} Hz")
    return SampleBuffer(
        samples=samples.reshape(-1),
        channel_count=channel_count,
        sample_rate=sample_rate,
        bit_depth=bit_depth,
        floating_point=floating_point,
    )


def decode_generic(path: str) -> SampleBuffer:
    """
    Generic path: probe the container with FFmpeg and decode every packet of
    the first audio stream.
    """
    _check_readable(path)
    try:
        container = av.open(path)
    except OSError as e:
        raise AudioIOError(f"Failed to open {path}: {e}") from e
    except av.error.FFmpegError as e:
        raise FormatError(f"Failed to probe format of {path}: {e}") from e

    with container:
        stream = next((s for s in container.streams if s.type == "audio"), None)
        if stream is None:
            raise FormatError(f"No supported audio tracks found in {path}")

        logger.debug(
            f"Probed {container.format.name}: stream #{stream.index} "
            f"codec={stream.codec_context.name}"
        )
        return decode_packets(_demux(container, stream), _make_packet_decoder(stream))


def _demux(container, stream) -> Iterator[object]:
    """Yield packets until the container runs out or stops demuxing."""
    packets = container.demux(stream)
    while True:
        try:
            packet = next(packets)
        except (StopIteration, av.error.EOFError):
            return
        except av.error.FFmpegError as e:
            logger.warning(f"Demuxing stopped early, treating as end of stream: {e}")
            return
        yield packet


def _make_packet_decoder(stream) -> PacketDecoder:
    def decode_packet(packet) -> List[DecodedChunk]:
        try:
            frames = stream.decode(packet)
        except av.error.InvalidDataError as e:
            raise CorruptPacketError(str(e)) from e
        except av.error.EOFError as e:
            raise EndOfStream() from e
        except av.error.FFmpegError as e:
            raise DecodeError(f"Decode error: {e}") from e
        if not frames:
            # Decoder priming: the packet decoded but produced no frames yet
            return _codec_layout_chunk(stream.codec_context)
        return [frame_to_chunk(frame) for frame in frames]

    return decode_packet


def _codec_layout_chunk(codec_context) -> List[DecodedChunk]:
    """Empty chunk carrying the codec's channel count and rate, if known."""
    layout = getattr(codec_context, "layout", None)
    channel_count = len(layout.channels) if layout is not None else 0
    sample_rate = codec_context.sample_rate or 0
    if not channel_count or not sample_rate:
        return []
    return [DecodedChunk(
        samples=np.zeros(0, dtype=np.float32),
        channel_count=channel_count,
        sample_rate=sample_rate,
    )]


def frame_to_chunk(frame) -> DecodedChunk:
    """Convert a decoded PyAV AudioFrame to interleaved float32."""
    layout = SampleLayout.from_ffmpeg_name(frame.format.name)
    if layout is None:
        raise FormatError(f"Unsupported sample format: {frame.format.name}")

    channel_count = len(frame.layout.channels)
    samples = to_float32(frame.to_ndarray(), layout)
    if frame.format.is_planar:
        samples = interleave(samples)
    else:
        samples = samples.reshape(-1)

    return DecodedChunk(samples=samples, channel_count=channel_count, sample_rate=frame.sample_rate)


def decode_packets(
    packets: Iterable[object],
    decode_packet: PacketDecoder,
    pad_frames: int = SILENCE_PAD_FRAMES,
) -> SampleBuffer:
    """
    Decode a packet sequence into one SampleBuffer.

    Channel count and sample rate are latched from the first packet that
    decodes, including one that yields only an empty chunk (a decoder still
    priming reports the codec layout that way). A packet raising
    CorruptPacketError is replaced by ``pad_frames`` frames of silence (once
    the channel count is known) and decoding continues; EndOfStream stops
    cleanly; any other DecodeError propagates.

    Args:
        packets: Packets in stream order
        decode_packet: Callable turning one packet into decoded chunks
        pad_frames: Frames of silence per corrupt packet

    Returns:
        SampleBuffer holding every decoded and padded frame
    """
    chunks: List[np.ndarray] = []
    channel_count = 0
    sample_rate = 0
    corrupt_packets = 0

    for index, packet in enumerate(packets):
        try:
            decoded = decode_packet(packet)
        except CorruptPacketError as e:
            corrupt_packets += 1
            logger.warning(f"Decode error in packet {index} (continuing): {e}")
            if channel_count:
                chunks.append(np.zeros(pad_frames * channel_count, dtype=np.float32))
            continue
        except EndOfStream:
            break

        for chunk in decoded:
            if not channel_count:
                channel_count, sample_rate = chunk.channel_count, chunk.sample_rate
            elif (chunk.channel_count, chunk.sample_rate) != (channel_count, sample_rate):
                raise DecodeError(
                    f"Stream layout changed in packet {index}: "
                    f"{chunk.channel_count} ch @ {chunk.sample_rate} Hz, "
                    f"expected {channel_count} ch @ {sample_rate} Hz"
                )
            chunks.append(chunk.samples)

    if not channel_count or not any(chunk.size for chunk in chunks):
        raise NoAudioDataError("No audio data decoded")

    if corrupt_packets:
        logger.warning(f"{corrupt_packets} corrupt packet(s) replaced with silence")

    return SampleBuffer(
        samples=np.concatenate(chunks),
        channel_count=channel_count,
        sample_rate=sample_rate,
    )
