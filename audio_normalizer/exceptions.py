"""
Custom exception classes for the audio normalizer.
"""


class AudioNormalizerError(Exception):
    """Base exception for all audio normalizer errors."""
    pass


class AudioIOError(AudioNormalizerError):
    """Raised when an audio file cannot be opened, read or written."""
    pass


class FormatError(AudioNormalizerError):
    """Raised when the container or its sample layout is not recognized."""
    pass


class DecodeError(AudioNormalizerError):
    """Raised when the decoder reports an unrecoverable error."""
    pass


class CorruptPacketError(DecodeError):
    """
    Raised for a single undecodable packet.

    Recoverable: the packet loop replaces the packet with silence and keeps going.
    """
    pass


class NoAudioDataError(DecodeError):
    """Raised when decoding finishes without producing a single sample."""
    pass


class MeasurementError(AudioNormalizerError):
    """Raised when a level measurement cannot be computed for a buffer."""
    pass


class EncodeError(AudioNormalizerError):
    """Raised when a buffer cannot be encoded in the requested format."""
    pass


__all__ = [
    'AudioNormalizerError',
    'AudioIOError',
    'FormatError',
    'DecodeError',
    'CorruptPacketError',
    'NoAudioDataError',
    'MeasurementError',
    'EncodeError',
]
