"""A segment applying one of the standard biquad filters to a single channel."""

from __future__ import annotations

from enum import IntEnum

from . import biquad
from .biquad import BiquadState
from .buffer import transfer
from .common import ErrorCode, FieldType, MixedError
from .registry import register_segment
from .segment import Field, FieldFlag, FieldInfo, Segment, SegmentInfo

# Weight of the current coefficients when easing towards new ones after each mix.
_SMOOTHING = 0.99


class FilterType(IntEnum):
    """Kinds of biquad filter the segment can act as."""

    LOWPASS = 1
    HIGHPASS = 2
    BANDPASS = 3
    NOTCH = 4
    PEAKING = 5
    ALLPASS = 6
    LOWSHELF = 7
    HIGHSHELF = 8


_DESIGNS = {
    FilterType.LOWPASS: (biquad.lowpass, False),
    FilterType.HIGHPASS: (biquad.highpass, False),
    FilterType.BANDPASS: (biquad.bandpass, False),
    FilterType.NOTCH: (biquad.notch, False),
    FilterType.PEAKING: (biquad.peaking, True),
    FilterType.ALLPASS: (biquad.allpass, False),
    FilterType.LOWSHELF: (biquad.lowshelf, True),
    FilterType.HIGHSHELF: (biquad.highshelf, True),
}


def _filter_type(value):
    try:
        return FilterType(value)
    except ValueError:
        raise MixedError(ErrorCode.INVALID_VALUE) from None


class BiquadFilter(Segment):
    """Filters one input buffer into one output buffer.

    Parameter changes do not jump: after every mix the active coefficients
    move a small step towards the ones the current parameters call for.
    """

    def __init__(self, filter_type, frequency, samplerate):
        if samplerate <= frequency:
            raise MixedError(ErrorCode.INVALID_VALUE)
        self.filter_type = _filter_type(filter_type)
        self.frequency = float(frequency)
        self.samplerate = samplerate
        self.q = 1.0
        self.gain = 1.0
        self.input = None
        self.output = None
        self.bypass = False
        self.state = BiquadState()
        self.target = BiquadState()
        self._reinit()

    def _reinit(self):
        design, with_gain = _DESIGNS[self.filter_type]
        if with_gain:
            self.target = design(self.samplerate, self.frequency, self.q, self.gain)
        else:
            self.target = design(self.samplerate, self.frequency, self.q)

    def start(self):
        self.state = BiquadState(b=list(self.target.b), a=list(self.target.a))
        if self.input is None or self.output is None:
            raise MixedError(ErrorCode.BUFFER_MISSING)

    def set_in(self, field, location, value):
        if field != Field.BUFFER:
            raise MixedError(ErrorCode.INVALID_FIELD)
        if location != 0:
            raise MixedError(ErrorCode.INVALID_LOCATION)
        self.input = value

    def set_out(self, field, location, value):
        if field != Field.BUFFER:
            raise MixedError(ErrorCode.INVALID_FIELD)
        if location != 0:
            raise MixedError(ErrorCode.INVALID_LOCATION)
        self.output = value

    def mix(self):
        if self.bypass:
            transfer(self.input, self.output)
            return
        self.state.process(self.input, self.output)
        step = 1.0 - _SMOOTHING
        self.state.a = [new * step + old * _SMOOTHING
                        for new, old in zip(self.target.a, self.state.a)]
        self.state.b = [new * step + old * _SMOOTHING
                        for new, old in zip(self.target.b, self.state.b)]

    def get(self, field):
        if field == Field.SAMPLERATE:
            return self.samplerate
        if field == Field.FREQUENCY:
            return self.frequency
        if field == Field.Q:
            return self.q
        if field == Field.GAIN:
            return self.gain
        if field == Field.BIQUAD_FILTER:
            return self.filter_type
        if field == Field.BYPASS:
            return self.bypass
        raise MixedError(ErrorCode.INVALID_FIELD)

    def set(self, field, value):
        if field == Field.SAMPLERATE:
            if value <= 0:
                raise MixedError(ErrorCode.INVALID_VALUE)
            self.samplerate = value
        elif field == Field.FREQUENCY:
            if value <= 0 or self.samplerate < value:
                raise MixedError(ErrorCode.INVALID_VALUE)
            self.frequency = float(value)
        elif field == Field.BIQUAD_FILTER:
            self.filter_type = _filter_type(value)
        elif field == Field.Q:
            self.q = float(value)
        elif field == Field.GAIN:
            self.gain = float(value)
        elif field == Field.BYPASS:
            self.state.reset()
            self.bypass = bool(value)
            return
        else:
            raise MixedError(ErrorCode.INVALID_FIELD)
        self._reinit()

    def info(self):
        segment_flags = FieldFlag.SEGMENT | FieldFlag.SET | FieldFlag.GET
        return SegmentInfo(
            name="biquad_filter",
            description="A frequency filter segment.",
            flags=FieldFlag.INPLACE,
            min_inputs=1,
            max_inputs=1,
            outputs=1,
            fields=[
                FieldInfo(Field.BUFFER, FieldType.BUFFER_POINTER, 1,
                          FieldFlag.IN | FieldFlag.OUT | FieldFlag.SET,
                          "The buffer for audio data attached to the location."),
                FieldInfo(Field.FREQUENCY, FieldType.FLOAT, 1, segment_flags,
                          "The frequency that the filter attunes to."),
                FieldInfo(Field.BIQUAD_FILTER, FieldType.BIQUAD_FILTER_ENUM, 1, segment_flags,
                          "Which filter type to encompass."),
                FieldInfo(Field.Q, FieldType.FLOAT, 1, segment_flags,
                          "The Q or resonance factor of the filter."),
                FieldInfo(Field.GAIN, FieldType.FLOAT, 1, segment_flags,
                          "The gain on the filter."),
                FieldInfo(Field.SAMPLERATE, FieldType.UINT32, 1, segment_flags,
                          "The samplerate at which the segment operates."),
                FieldInfo(Field.BYPASS, FieldType.BOOL, 1, segment_flags,
                          "Bypass the segment's processing."),
            ],
        )


register_segment(
    "biquad_filter",
    (
        FieldInfo(type=FieldType.BIQUAD_FILTER_ENUM, description="type"),
        FieldInfo(type=FieldType.UINT32, description="frequency"),
        FieldInfo(type=FieldType.UINT32, description="samplerate"),
    ),
    BiquadFilter,
)