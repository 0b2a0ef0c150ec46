"""The segment interface: fields, field descriptions and the base segment."""

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from enum import IntEnum, IntFlag, auto

from .common import ErrorCode, FieldType, MixedError


class Field(IntEnum):
    """Fields a segment can expose for getting and setting."""

    BUFFER = auto()
    VOLUME = auto()
    BYPASS = auto()
    FREQUENCY = auto()
    BIQUAD_FILTER = auto()
    Q = auto()
    GAIN = auto()
    SAMPLERATE = auto()
    CHANNEL_COUNT_IN = auto()
    CHANNEL_COUNT_OUT = auto()
    IN_COUNT = auto()
    OUT_COUNT = auto()
    COMPRESSOR_PREGAIN = auto()
    COMPRESSOR_THRESHOLD = auto()
    COMPRESSOR_KNEE = auto()
    COMPRESSOR_RATIO = auto()
    COMPRESSOR_ATTACK = auto()
    COMPRESSOR_RELEASE = auto()
    COMPRESSOR_PREDELAY = auto()
    COMPRESSOR_RELEASEZONE = auto()
    COMPRESSOR_POSTGAIN = auto()
    COMPRESSOR_WET = auto()
    COMPRESSOR_GAIN = auto()


class FieldFlag(IntFlag):
    """Where a field lives, how it may be accessed, and segment properties."""

    IN = 1
    OUT = 2
    SEGMENT = 4
    SET = 8
    GET = 16
    INPLACE = 32


@dataclass
class FieldInfo:
    """Description of one field of a segment, or of one constructor argument."""

    field: int = 0
    type: FieldType = FieldType.UNKNOWN
    count: int = 1
    flags: FieldFlag = FieldFlag(0)
    description: str = ""


@dataclass
class SegmentInfo:
    """Description of a segment. ``max_inputs`` is ``None`` when unlimited."""

    name: str
    description: str
    flags: FieldFlag = FieldFlag(0)
    min_inputs: int = 0
    max_inputs: int | None = 0
    outputs: int = 0
    fields: list = dataclass_field(default_factory=list)


def _not_implemented():
    return MixedError(ErrorCode.NOT_IMPLEMENTED)


class Segment:
    """Base class of all processing segments.

    Lifecycle hooks ``start`` and ``end`` do nothing unless overridden; every
    other operation raises :class:`MixedError` with ``NOT_IMPLEMENTED``.
    """

    def start(self):
        """Prepare the segment for mixing."""

    def mix(self):
        """Process whatever data is available."""
        raise _not_implemented()

    def end(self):
        """Finish mixing."""

    def set_in(self, field, location, value):
        """Set ``field`` of the input at ``location``."""
        raise _not_implemented()

    def set_out(self, field, location, value):
        """Set ``field`` of the output at ``location``."""
        raise _not_implemented()

    def get_in(self, field, location):
        """Return ``field`` of the input at ``location``."""
        raise _not_implemented()

    def get_out(self, field, location):
        """Return ``field`` of the output at ``location``."""
        raise _not_implemented()

    def get(self, field):
        """Return a segment-wide field."""
        raise _not_implemented()

    def set(self, field, value):
        """Set a segment-wide field."""
        raise _not_implemented()

    def info(self):
        """Return a :class:`SegmentInfo` describing the segment."""
        raise _not_implemented()