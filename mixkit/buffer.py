"""Single-channel float sample buffers."""

from __future__ import annotations

from array import array

from .bip import BipBuffer

_FLOAT_BYTES = array("f").itemsize


def _zeros(count):
    return array("f", bytes(_FLOAT_BYTES * count))


class Buffer(BipBuffer):
    """A ring buffer of 32-bit float samples."""

    def __init__(self, size):
        super().__init__(size)
        self.data = _zeros(size)

    def resize(self, size):
        """Change the capacity, keeping the samples that still fit."""
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        resized = array("f", self.data[:size])
        resized.extend(_zeros(size - len(resized)))
        self.data = resized
        self.size = size

    def request_write(self, size=None):
        """Return a writable view of up to ``size`` samples (possibly empty)."""
        offset, count = super().request_write(size)
        return memoryview(self.data)[offset:offset + count]

    def request_read(self, size=None):
        """Return a view of up to ``size`` readable samples (possibly empty)."""
        offset, count = super().request_read(size)
        return memoryview(self.data)[offset:offset + count]

    def write(self, samples):
        """Append as many of ``samples`` as fit; return how many were written."""
        pending = array("f", samples)
        written = 0
        while written < len(pending):
            area = self.request_write(len(pending) - written)
            count = len(area)
            if count == 0:
                break
            area[:] = pending[written:written + count]
            self.finish_write(count)
            written += count
        return written

    def read(self, size=None):
        """Consume up to ``size`` samples (all when ``None``) and return them."""
        result = []
        remaining = size
        while remaining is None or remaining > 0:
            area = self.request_read(remaining)
            count = len(area)
            if count == 0:
                break
            result.extend(area.tolist())
            self.finish_read(count)
            if remaining is not None:
                remaining -= count
        return result


def _move(source, target, consume):
    if source is target:
        return 0
    readable = source.request_read()
    writable = target.request_write(len(readable))
    count = len(writable)
    writable[:] = readable[:count]
    if consume:
        source.finish_read(count)
    target.finish_write(count)
    return count


def transfer(source, target):
    """Move readable samples from ``source`` into ``target``; return the count."""
    return _move(source, target, consume=True)


def copy(source, target):
    """Copy readable samples into ``target`` without consuming them."""
    return _move(source, target, consume=False)