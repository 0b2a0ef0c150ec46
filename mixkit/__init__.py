"""Building blocks for mixing audio: ring buffers, sample encodings, biquad filters and mixing segments."""

__version__ = "0.1.0"