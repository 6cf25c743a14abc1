"""
Peak and loudness normalization of audio files, with fade envelopes.
"""

__version__ = "2.0.0"
