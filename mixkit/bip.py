"""Bipartite ring buffer bookkeeping shared by sample buffers and packs."""

from __future__ import annotations

import sys

from .common import ErrorCode, MixedError

_UNBOUNDED = sys.maxsize


def _wanted(size):
    if size is None:
        return _UNBOUNDED
    if size < 0:
        raise ValueError(f"size must not be negative, got {size}")
    return size


class BipBuffer:
    """Tracks read and write regions of a bipartite ring buffer of ``size`` slots.

    A writer reserves a contiguous region with :meth:`request_write` and
    commits it with :meth:`finish_write`; a reader does the same with
    :meth:`request_read` and :meth:`finish_read`. When the writer reaches the
    end it wraps to a second region at the start, which the reader follows
    once it has consumed the first one.
    """

    def __init__(self, size):
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        self.size = size
        self.clear()

    def clear(self):
        """Forget all written and reserved data."""
        self._read = 0
        self._write = 0
        self._full_r2 = False
        self.reserved = 0

    def request_write(self, size=None):
        """Reserve up to ``size`` slots; return ``(offset, count)``.

        ``count`` is 0 when no space is available. ``None`` asks for as much
        as possible.
        """
        wanted = _wanted(size)
        if not self._full_r2:
            available = self.size - self._write
            if available > 0:
                count = min(wanted, available)
                offset = self._write
            elif self._read > 0:
                count = min(wanted, self._read)
                offset = 0
                self._write = 0
                self._full_r2 = True
            else:
                return 0, 0
        elif self._write < self._read:
            count = min(wanted, self._read - self._write)
            offset = self._write
        else:
            return 0, 0
        self.reserved = count
        return offset, count

    def finish_write(self, size):
        """Commit ``size`` slots of the last reserved region."""
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        if self.reserved < size:
            raise MixedError(ErrorCode.BUFFER_OVERCOMMIT)
        self._write += size
        self.reserved = 0

    def request_read(self, size=None):
        """Return ``(offset, count)`` of up to ``size`` readable slots."""
        wanted = _wanted(size)
        if self._full_r2:
            available = self.size - self._read
            if available > 0:
                return self._read, min(wanted, available)
            if self._write > 0:
                self._full_r2 = False
                self._read = 0
                return 0, min(wanted, self._write)
            return 0, 0
        if self._read < self._write:
            return self._read, min(wanted, self._write - self._read)
        return 0, 0

    def finish_read(self, size):
        """Mark ``size`` slots of the readable region as consumed."""
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        if self._full_r2:
            if self.size - self._read < size:
                raise MixedError(ErrorCode.BUFFER_OVERCOMMIT)
            self._read += size
        elif self._read < self._write:
            if self._write - self._read < size:
                raise MixedError(ErrorCode.BUFFER_OVERCOMMIT)
            self._read += size
        elif size > 0:
            raise MixedError(ErrorCode.BUFFER_OVERCOMMIT)

    def available_read(self):
        """Number of slots the next read request can return."""
        if self._full_r2:
            if self._read < self.size:
                return self.size - self._read
            return self._write
        return self._write - self._read

    def available_write(self):
        """Number of slots the next write request can return."""
        if self._full_r2:
            return self._read - self._write
        if self._write == self.size:
            return self._read
        return self.size - self._write