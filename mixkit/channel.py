"""A segment converting audio between different channel layouts."""

from __future__ import annotations

from . import biquad
from .buffer import transfer
from .common import ErrorCode, FieldType, MixedError
from .registry import register_segment
from .segment import Field, FieldFlag, FieldInfo, Segment, SegmentInfo

MONO = 0
LEFT = 0
RIGHT = 1
LEFT_FRONT = 0
RIGHT_FRONT = 1
LEFT_REAR = 2
RIGHT_REAR = 3
CENTER = 4
SUBWOOFER = 5
LEFT_SIDE = 6
RIGHT_SIDE = 7

# Gain applied to the synthesised rear channels when upmixing stereo.
_REAR_GAIN = 0.571


def _center(left, right):
    return (left + right) * 0.5


def _rear(side, center):
    return _REAR_GAIN * (side + (side - 0.5 * center))


class ChannelConvert(Segment):
    """Converts ``in_channels`` input buffers into ``out_channels`` outputs.

    Supported layouts are equal counts (a plain transfer), mono to stereo,
    and stereo to mono, 3.0, 4.0, 5.0, 5.1 and 7.1.
    """

    def __init__(self, in_channels, out_channels, samplerate):
        self.in_channels = in_channels
        self.out_channels = out_channels
        self.samplerate = samplerate
        self.lowpass = [
            biquad.lowpass(samplerate, 4000, 1),
            biquad.lowpass(samplerate, 200, 1),
            biquad.lowpass(samplerate, 7000, 1),
        ]
        self.inputs = [None] * in_channels
        self.outputs = [None] * out_channels
        self._mixer = self._select_mixer()
        if self._mixer is None:
            raise MixedError(ErrorCode.BAD_CHANNEL_CONFIGURATION)

    def _select_mixer(self):
        if self.in_channels == self.out_channels:
            return self._mix_transfer
        return {
            (1, 2): self._mix_1_0_to_2_0,
            (2, 1): self._mix_2_0_to_1_0,
            (2, 3): self._mix_2_0_to_3_0,
            (2, 4): self._mix_2_0_to_4_0,
            (2, 5): self._mix_2_0_to_5_0,
            (2, 6): self._mix_2_0_to_5_1,
            (2, 8): self._mix_2_0_to_7_1,
        }.get((self.in_channels, self.out_channels))

    @staticmethod
    def _resized(slots, count):
        return (slots + [None] * count)[:count]

    def start(self):
        if any(buffer is None for buffer in self.inputs):
            raise MixedError(ErrorCode.BUFFER_MISSING)
        if any(buffer is None for buffer in self.outputs):
            raise MixedError(ErrorCode.BUFFER_MISSING)

    def set_out(self, field, location, value):
        if field != Field.BUFFER:
            raise MixedError(ErrorCode.INVALID_FIELD)
        if not 0 <= location < self.out_channels:
            raise MixedError(ErrorCode.INVALID_LOCATION)
        self.outputs[location] = value

    def set_in(self, field, location, value):
        if field != Field.BUFFER:
            raise MixedError(ErrorCode.INVALID_FIELD)
        if not 0 <= location < self.in_channels:
            raise MixedError(ErrorCode.INVALID_LOCATION)
        self.inputs[location] = value

    def mix(self):
        self._mixer()

    def _run(self, reads, writes, convert):
        """Request regions in order, convert the common frame count, commit.

        ``convert`` receives the input sample lists and returns one list of
        samples per output, in the order of ``writes``.
        """
        frames = None
        areas = []
        for buffer in reads:
            area = buffer.request_read(frames)
            frames = len(area)
            areas.append(area)
        targets = []
        for buffer in writes:
            area = buffer.request_write(frames)
            frames = len(area)
            targets.append(area)
        sources = [area[:frames].tolist() for area in areas]
        for target, samples in zip(targets, convert(*sources)):
            target[:frames] = type(target.obj)("f", samples)
        for buffer in reads:
            buffer.finish_read(frames)
        for buffer in writes:
            buffer.finish_write(frames)
        return frames

    def _mix_transfer(self):
        for source, target in zip(self.inputs, self.outputs):
            transfer(source, target)

    def _mix_2_0_to_1_0(self):
        def convert(left, right):
            return [[(l + r) * 0.5 for l, r in zip(left, right)]]

        self._run([self.inputs[LEFT], self.inputs[RIGHT]], [self.outputs[MONO]], convert)

    def _mix_1_0_to_2_0(self):
        # Outputs are requested before the input, as the frame count is shared.
        frames = None
        targets = []
        for buffer in (self.outputs[LEFT], self.outputs[RIGHT]):
            area = buffer.request_write(frames)
            frames = len(area)
            targets.append(area)
        source = self.inputs[MONO].request_read(frames)
        frames = len(source)
        samples = source[:frames]
        for target in targets:
            target[:frames] = samples
        for buffer in (self.outputs[LEFT], self.outputs[RIGHT]):
            buffer.finish_write(frames)
        self.inputs[MONO].finish_read(frames)

    def _stereo(self):
        return [self.inputs[LEFT], self.inputs[RIGHT]]

    def _mix_2_0_to_3_0(self):
        def convert(left, right):
            return [left, right, [_center(l, r) for l, r in zip(left, right)]]

        self._run(self._stereo(),
                  [self.outputs[LEFT_FRONT], self.outputs[RIGHT_FRONT], self.outputs[2]],
                  convert)

    def _mix_2_0_to_4_0(self):
        def convert(left, right):
            return [left, right, left, right]

        self._run(self._stereo(),
                  [self.outputs[LEFT_FRONT], self.outputs[RIGHT_FRONT],
                   self.outputs[LEFT_REAR], self.outputs[RIGHT_REAR]],
                  convert)

    def _surround(self, left, right, with_lfe, with_sides):
        fronts_l, fronts_r, rears_l, rears_r, centers, lfes = [], [], [], [], [], []
        sides_l, sides_r = [], []
        center_filter, lfe_filter = self.lowpass[0], self.lowpass[1]
        for l, r in zip(left, right):
            c = _center(l, r)
            centers.append(center_filter.sample(c))
            if with_lfe:
                lfes.append(lfe_filter.sample(c))
            rl, rr = _rear(l, c), _rear(r, c)
            fronts_l.append(l)
            fronts_r.append(r)
            rears_l.append(rl)
            rears_r.append(rr)
            if with_sides:
                sides_l.append((l + rl) * 0.5)
                sides_r.append((r + rr) * 0.5)
        result = [fronts_l, fronts_r]
        if with_sides:
            result += [sides_l, sides_r]
        result += [rears_l, rears_r, centers]
        if with_lfe:
            result.append(lfes)
        return result

    def _mix_2_0_to_5_0(self):
        self._run(self._stereo(),
                  [self.outputs[LEFT_FRONT], self.outputs[RIGHT_FRONT],
                   self.outputs[LEFT_REAR], self.outputs[RIGHT_REAR],
                   self.outputs[CENTER]],
                  lambda l, r: self._surround(l, r, with_lfe=False, with_sides=False))

    def _mix_2_0_to_5_1(self):
        self._run(self._stereo(),
                  [self.outputs[LEFT_FRONT], self.outputs[RIGHT_FRONT],
                   self.outputs[LEFT_REAR], self.outputs[RIGHT_REAR],
                   self.outputs[CENTER], self.outputs[SUBWOOFER]],
                  lambda l, r: self._surround(l, r, with_lfe=True, with_sides=False))

    def _mix_2_0_to_7_1(self):
        self._run(self._stereo(),
                  [self.outputs[LEFT_FRONT], self.outputs[RIGHT_FRONT],
                   self.outputs[LEFT_SIDE], self.outputs[RIGHT_SIDE],
                   self.outputs[LEFT_REAR], self.outputs[RIGHT_REAR],
                   self.outputs[CENTER], self.outputs[SUBWOOFER]],
                  lambda l, r: self._surround(l, r, with_lfe=True, with_sides=True))

    def get(self, field):
        if field == Field.CHANNEL_COUNT_IN:
            return self.in_channels
        if field == Field.CHANNEL_COUNT_OUT:
            return self.out_channels
        raise MixedError(ErrorCode.INVALID_FIELD)

    def set(self, field, value):
        if field == Field.CHANNEL_COUNT_IN:
            previous = self.in_channels
            self.in_channels = value
        elif field == Field.CHANNEL_COUNT_OUT:
            previous = self.out_channels
            self.out_channels = value
        else:
            raise MixedError(ErrorCode.INVALID_FIELD)
        mixer = self._select_mixer()
        if mixer is None:
            if field == Field.CHANNEL_COUNT_IN:
                self.in_channels = previous
            else:
                self.out_channels = previous
            raise MixedError(ErrorCode.BAD_CHANNEL_CONFIGURATION)
        self._mixer = mixer
        self.inputs = self._resized(self.inputs, self.in_channels)
        self.outputs = self._resized(self.outputs, self.out_channels)

    def info(self):
        segment_flags = FieldFlag.SEGMENT | FieldFlag.SET | FieldFlag.GET
        return SegmentInfo(
            name="channel_convert",
            description="Mixes multiple buffers together",
            min_inputs=self.in_channels,
            max_inputs=self.in_channels,
            outputs=self.out_channels,
            fields=[
                FieldInfo(Field.BUFFER, FieldType.BUFFER_POINTER, 1,
                          FieldFlag.IN | FieldFlag.OUT | FieldFlag.SET,
                          "The buffer for audio data attached to the location."),
                FieldInfo(Field.CHANNEL_COUNT_IN, FieldType.CHANNEL_T, 1, segment_flags,
                          "The number of input channels."),
                FieldInfo(Field.CHANNEL_COUNT_OUT, FieldType.CHANNEL_T, 1, segment_flags,
                          "The number of output channels."),
            ],
        )


register_segment(
    "channel_convert",
    (
        FieldInfo(type=FieldType.UINT8, description="in"),
        FieldInfo(type=FieldType.UINT8, description="out"),
        FieldInfo(type=FieldType.UINT32, description="samplerate"),
    ),
    ChannelConvert,
)