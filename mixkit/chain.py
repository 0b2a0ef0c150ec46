"""A segment running a sequence of segments one after another."""

from __future__ import annotations

from .buffer import transfer
from .common import ErrorCode, FieldType, MixedError
from .registry import register_segment
from .segment import Field, FieldFlag, FieldInfo, Segment, SegmentInfo


class Chain(Segment):
    """Runs its segments in order; inputs go to the first, outputs to the last.

    When bypassed, the first segment's input buffers are moved straight into
    the last segment's output buffers.
    """

    def __init__(self):
        self.segments = []
        self.bypass = False

    def __len__(self):
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)

    def add(self, segment):
        """Append ``segment`` to the end of the chain."""
        self.segments.append(segment)

    def insert(self, index, segment):
        """Insert ``segment`` before position ``index``."""
        self.segments.insert(index, segment)

    def remove(self, segment):
        """Remove ``segment`` from the chain; raise ValueError if absent."""
        for index, member in enumerate(self.segments):
            if member is segment:
                del self.segments[index]
                return
        raise ValueError("segment is not part of the chain")

    def remove_at(self, index):
        """Remove and return the segment at ``index``."""
        return self.segments.pop(index)

    def set_in(self, field, location, value):
        if field != Field.BUFFER:
            raise MixedError(ErrorCode.INVALID_FIELD)
        if not self.segments:
            raise MixedError(ErrorCode.INVALID_LOCATION)
        self.segments[0].set_in(field, location, value)

    def set_out(self, field, location, value):
        if field != Field.BUFFER:
            raise MixedError(ErrorCode.INVALID_FIELD)
        if not self.segments:
            raise MixedError(ErrorCode.INVALID_LOCATION)
        self.segments[-1].set_out(field, location, value)

    def start(self):
        for segment in self.segments:
            segment.start()

    def mix(self):
        if self.bypass:
            self._mix_bypass()
            return
        for segment in self.segments:
            segment.mix()

    def _mix_bypass(self):
        if not self.segments:
            return
        first, last = self.segments[0], self.segments[-1]
        inputs = first.get(Field.IN_COUNT)
        outputs = last.get(Field.OUT_COUNT)
        for channel in range(min(inputs, outputs)):
            transfer(first.get_in(Field.BUFFER, channel),
                     last.get_out(Field.BUFFER, channel))

    def end(self):
        for segment in self.segments:
            segment.end()

    def get(self, field):
        if field == Field.BYPASS:
            return self.bypass
        raise MixedError(ErrorCode.INVALID_FIELD)

    def set(self, field, value):
        if field != Field.BYPASS:
            raise MixedError(ErrorCode.INVALID_FIELD)
        self.bypass = bool(value)

    def info(self):
        return SegmentInfo(
            name="chain",
            description="Chain together several segments.",
            flags=FieldFlag(0),
            min_inputs=1,
            max_inputs=1,
            outputs=1,
            fields=[
                FieldInfo(Field.BUFFER, FieldType.BUFFER_POINTER, 1,
                          FieldFlag.IN | FieldFlag.OUT | FieldFlag.SET,
                          "The buffer for audio data attached to the location."),
                FieldInfo(Field.BYPASS, FieldType.BOOL, 1,
                          FieldFlag.SEGMENT | FieldFlag.SET | FieldFlag.GET,
                          "Bypass the segment's processing."),
            ],
        )


register_segment("chain", (), Chain)