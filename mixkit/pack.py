"""Interleaved, encoded audio packs held as raw bytes."""

from __future__ import annotations

from .bip import BipBuffer
from .common import Encoding, samplesize


class Pack(BipBuffer):
    """A ring buffer of raw bytes holding ``frames`` interleaved frames."""

    def __init__(self, frames, channels, encoding):
        self.encoding = Encoding(encoding) if encoding in Encoding._value2member_map_ else encoding
        self.channels = channels
        self.frames = frames
        super().__init__(frames * channels * samplesize(encoding))
        self.data = bytearray(self.size)

    def request_write(self, size=None):
        """Return a writable view of up to ``size`` bytes (possibly empty)."""
        offset, count = super().request_write(size)
        return memoryview(self.data)[offset:offset + count]

    def request_read(self, size=None):
        """Return a view of up to ``size`` readable bytes (possibly empty)."""
        offset, count = super().request_read(size)
        return memoryview(self.data)[offset:offset + count]