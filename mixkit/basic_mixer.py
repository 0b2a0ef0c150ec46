"""A segment summing several input buffers per channel into one output."""

from __future__ import annotations

from array import array

from .common import ErrorCode, FieldType, MixedError
from .registry import register_segment
from .segment import Field, FieldFlag, FieldInfo, Segment, SegmentInfo


class BasicMixer(Segment):
    """Mixes interleaved inputs into ``channels`` outputs.

    Input ``i`` feeds output ``i % channels``. Volume changes take effect at
    the next zero crossing of an input to avoid clicks.
    """

    def __init__(self, channels):
        if channels < 1:
            raise ValueError(f"channels must be at least 1, got {channels}")
        self.channels = channels
        self.inputs = []
        self.outputs = [None] * channels
        self.volume = 1.0
        self.target_volume = 1.0

    def start(self):
        if len(self.inputs) % self.channels != 0:
            raise MixedError(ErrorCode.BUFFER_MISSING)
        if any(output is None for output in self.outputs):
            raise MixedError(ErrorCode.BUFFER_MISSING)

    def set_out(self, field, location, value):
        if field != Field.BUFFER:
            raise MixedError(ErrorCode.INVALID_FIELD)
        if not 0 <= location < self.channels:
            raise MixedError(ErrorCode.INVALID_LOCATION)
        self.outputs[location] = value

    def set_in(self, field, location, value):
        """Set, add (past the end) or, with ``None``, clear an input buffer."""
        if field != Field.BUFFER:
            raise MixedError(ErrorCode.INVALID_FIELD)
        if value is not None:
            if location < len(self.inputs):
                self.inputs[location] = value
            else:
                self.inputs.insert(location, value)
            return
        if not 0 <= location < len(self.inputs):
            raise MixedError(ErrorCode.INVALID_LOCATION)
        self.inputs[location] = None

    def mix(self):
        initial = self.volume
        target = self.target_volume
        changed = False
        for channel, output in enumerate(self.outputs):
            sources = [b for b in self.inputs[channel::self.channels] if b is not None]
            area = output.request_write()
            samples = len(area)
            for source in sources:
                samples = len(source.request_read(samples))
                if samples == 0:
                    break
            if samples > 0:
                area[:samples] = array("f", [0.0]) * samples
                for source in sources:
                    values = source.request_read(samples).tolist()
                    volume = initial
                    previous = values[0]
                    area[0] = area[0] + previous * volume
                    for index, sample in enumerate(values[1:], start=1):
                        if previous * sample < 0.0:
                            volume = target
                        area[index] = area[index] + sample * volume
                        previous = sample
                    if volume != initial:
                        changed = True
                    source.finish_read(samples)
            output.finish_write(samples)
        if changed:
            self.volume = target

    def set(self, field, value):
        if field != Field.VOLUME:
            raise MixedError(ErrorCode.INVALID_FIELD)
        self.target_volume = float(value)

    def get(self, field):
        if field != Field.VOLUME:
            raise MixedError(ErrorCode.INVALID_FIELD)
        return self.target_volume

    def info(self):
        return SegmentInfo(
            name="basic_mixer",
            description="Mixes multiple buffers together",
            min_inputs=0,
            max_inputs=None,
            outputs=self.channels,
            fields=[
                FieldInfo(Field.BUFFER, FieldType.BUFFER_POINTER, 1,
                          FieldFlag.IN | FieldFlag.OUT | FieldFlag.SET,
                          "The buffer for audio data attached to the location."),
                FieldInfo(Field.VOLUME, FieldType.FLOAT, 1,
                          FieldFlag.SEGMENT | FieldFlag.SET | FieldFlag.GET,
                          "The volume scaling factor for the output."),
            ],
        )


register_segment(
    "basic_mixer",
    (FieldInfo(type=FieldType.UINT8, description="channels"),),
    BasicMixer,
)