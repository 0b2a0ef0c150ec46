"""Shared enumerations, error reporting and the hash-based random generator."""

from __future__ import annotations

import struct
import threading
import time
from enum import IntEnum

VERSION = "2.0.0"

_MASK32 = 0xFFFFFFFF


class ErrorCode(IntEnum):
    """Error conditions reported by the mixing library."""

    NO_ERROR = 0
    OUT_OF_MEMORY = 1
    UNKNOWN_ENCODING = 2
    MIXING_FAILED = 3
    NOT_IMPLEMENTED = 4
    NOT_INITIALIZED = 5
    INVALID_LOCATION = 6
    INVALID_FIELD = 7
    INVALID_VALUE = 8
    SEGMENT_ALREADY_STARTED = 9
    SEGMENT_ALREADY_ENDED = 10
    DYNAMIC_OPEN_FAILED = 11
    BAD_DYNAMIC_LIBRARY = 12
    LADSPA_NO_PLUGIN_AT_INDEX = 13
    LADSPA_INSTANTIATION_FAILED = 14
    RESAMPLE_FAILED = 15
    BUFFER_EMPTY = 16
    BUFFER_FULL = 17
    BUFFER_OVERCOMMIT = 18
    BAD_RESAMPLE_FACTOR = 19
    BAD_CHANNEL_CONFIGURATION = 20
    BUFFER_ALLOCATED = 21
    BUFFER_MISSING = 22
    DUPLICATE_SEGMENT = 23
    BAD_SEGMENT = 24


_ERROR_STRINGS = {
    ErrorCode.NO_ERROR: "No error has occurred.",
    ErrorCode.OUT_OF_MEMORY: "An allocation has failed. You are likely out of memory.",
    ErrorCode.UNKNOWN_ENCODING: "The specified sample encoding is unknown.",
    ErrorCode.MIXING_FAILED: "An error occurred during the mixing of a segment.",
    ErrorCode.NOT_IMPLEMENTED: "The segment function you tried to call was not provided.",
    ErrorCode.NOT_INITIALIZED: (
        "An attempt was made to use an object without initializing it properly first."
    ),
    ErrorCode.INVALID_LOCATION: "Cannot set the field at the specified location in the segment.",
    ErrorCode.INVALID_FIELD: "A field that the segment does not recognise was requested.",
    ErrorCode.INVALID_VALUE: (
        "A value that is not within the valid range for a field was attempted to be set."
    ),
    ErrorCode.SEGMENT_ALREADY_STARTED: "Cannot start the segment as it is already started.",
    ErrorCode.SEGMENT_ALREADY_ENDED: "Cannot end the segment as it is already ended.",
    ErrorCode.DYNAMIC_OPEN_FAILED: (
        "Failed to open the plugin library. Most likely the file could not be read."
    ),
    ErrorCode.BAD_DYNAMIC_LIBRARY: (
        "The plugin library was found but does not seem to be a valid library "
        "as it is missing its initialisation function."
    ),
    ErrorCode.LADSPA_NO_PLUGIN_AT_INDEX: (
        "The LADSPA plugin library does not have a plugin at the requested index."
    ),
    ErrorCode.LADSPA_INSTANTIATION_FAILED: "Instantiation of the LADSPA plugin has failed.",
    ErrorCode.RESAMPLE_FAILED: "An error happened in the libsamplerate library.",
    ErrorCode.BUFFER_EMPTY: "A read was requested on a buffer with no committed write data.",
    ErrorCode.BUFFER_FULL: "A write was requested on a buffer with no available space.",
    ErrorCode.BUFFER_OVERCOMMIT: (
        "More data was attempted to be committed to the buffer than was requested."
    ),
    ErrorCode.BAD_RESAMPLE_FACTOR: "The requested change in the sample rates is too big.",
    ErrorCode.BAD_CHANNEL_CONFIGURATION: (
        "An unsupported channel conversion configuration was requested."
    ),
    ErrorCode.BUFFER_ALLOCATED: (
        "An allocated buffer was passed when an unallocated one was expected."
    ),
    ErrorCode.BUFFER_MISSING: "An input or output port is missing a buffer.",
    ErrorCode.DUPLICATE_SEGMENT: "A segment with the requested name had already been registered.",
    ErrorCode.BAD_SEGMENT: "A segment with the requested name is not registered.",
}


def error_string(code):
    """Return the human readable description of an error code."""
    try:
        return _ERROR_STRINGS[ErrorCode(code)]
    except ValueError:
        return "Unknown error code."


class MixedError(Exception):
    """Raised when a mixing operation fails; carries an :class:`ErrorCode`."""

    def __init__(self, code, message=None):
        self.code = ErrorCode(code)
        super().__init__(message if message is not None else error_string(self.code))


class Encoding(IntEnum):
    """Sample encodings of packed audio data."""

    INT8 = 1
    UINT8 = 2
    INT16 = 3
    UINT16 = 4
    INT24 = 5
    UINT24 = 6
    INT32 = 7
    UINT32 = 8
    FLOAT = 9
    DOUBLE = 10


class FieldType(IntEnum):
    """Types of values held by segment fields."""

    UNKNOWN = 0
    INT8 = 1
    UINT8 = 2
    INT16 = 3
    UINT16 = 4
    INT24 = 5
    UINT24 = 6
    INT32 = 7
    UINT32 = 8
    FLOAT = 9
    DOUBLE = 10
    BOOL = 11
    SIZE_T = 12
    STRING = 13
    FUNCTION = 14
    POINTER = 15
    SEGMENT_POINTER = 16
    BUFFER_POINTER = 17
    PACK_POINTER = 18
    SEGMENT_SEQUENCE_POINTER = 19
    LOCATION_ENUM = 20
    BIQUAD_FILTER_ENUM = 21
    REPEAT_MODE_ENUM = 22
    NOISE_TYPE_ENUM = 23
    GENERATOR_TYPE_ENUM = 24
    FADE_TYPE_ENUM = 25
    ATTENUATION_ENUM = 26
    ENCODING_ENUM = 27
    ERROR_ENUM = 28
    RESAMPLE_TYPE_ENUM = 29
    CHANNEL_T = 30


_TYPE_STRINGS = {
    FieldType.UNKNOWN: "unknown",
    FieldType.INT8: "int8",
    FieldType.UINT8: "uint8",
    FieldType.INT16: "int16",
    FieldType.UINT16: "uint16",
    FieldType.INT24: "int24",
    FieldType.UINT24: "uint24",
    FieldType.INT32: "int32",
    FieldType.UINT32: "uint32",
    FieldType.FLOAT: "float",
    FieldType.DOUBLE: "double",
    FieldType.BOOL: "bool",
    FieldType.SIZE_T: "size_t",
    FieldType.STRING: "string",
    FieldType.FUNCTION: "function",
    FieldType.POINTER: "pointer",
    FieldType.SEGMENT_POINTER: "segment pointer",
    FieldType.BUFFER_POINTER: "buffer pointer",
    FieldType.PACK_POINTER: "pack pointer",
    FieldType.SEGMENT_SEQUENCE_POINTER: "segment sequence pointer",
    FieldType.LOCATION_ENUM: "location",
    FieldType.BIQUAD_FILTER_ENUM: "frequency pass",
    FieldType.REPEAT_MODE_ENUM: "repeat mode",
    FieldType.NOISE_TYPE_ENUM: "noise type",
    FieldType.GENERATOR_TYPE_ENUM: "generator type",
    FieldType.FADE_TYPE_ENUM: "fade type",
    FieldType.ATTENUATION_ENUM: "attenuation",
    FieldType.ENCODING_ENUM: "encoding",
    FieldType.ERROR_ENUM: "error",
    FieldType.RESAMPLE_TYPE_ENUM: "resample type",
}


def type_string(code):
    """Return the name of a field type, or ``"unknown"``."""
    try:
        return _TYPE_STRINGS.get(FieldType(code), "unknown")
    except ValueError:
        return "unknown"


_SAMPLE_SIZES = {
    Encoding.INT8: 1,
    Encoding.UINT8: 1,
    Encoding.INT16: 2,
    Encoding.UINT16: 2,
    Encoding.INT24: 3,
    Encoding.UINT24: 3,
    Encoding.INT32: 4,
    Encoding.UINT32: 4,
    Encoding.FLOAT: 4,
    Encoding.DOUBLE: 8,
}


def samplesize(encoding):
    """Return the number of bytes one sample of ``encoding`` occupies."""
    try:
        return _SAMPLE_SIZES[Encoding(encoding)]
    except ValueError:
        raise MixedError(ErrorCode.UNKNOWN_ENCODING) from None


def version():
    """Return the library version string."""
    return VERSION


def _f32(value):
    return struct.unpack("f", struct.pack("f", value))[0]


class HashRandom:
    """Position-based noise hash producing 32-bit pseudo random numbers."""

    _BIT_NOISE1 = 0x68E31DA4
    _BIT_NOISE2 = 0xB5297A4D
    _BIT_NOISE3 = 0x1B56C4E9

    def __init__(self, seed, position=1):
        self.seed = seed & _MASK32
        self.position = position & _MASK32
        self._lock = threading.Lock()

    def next_int(self):
        """Return the next unsigned 32-bit value and advance the position."""
        with self._lock:
            mangled = self.position
            self.position = (self.position + 1) & _MASK32
        mangled = (mangled * self._BIT_NOISE1) & _MASK32
        mangled = (mangled + self.seed) & _MASK32
        mangled ^= mangled >> 8
        mangled = (mangled + self._BIT_NOISE2) & _MASK32
        mangled ^= (mangled << 8) & _MASK32
        mangled = (mangled * self._BIT_NOISE3) & _MASK32
        mangled ^= mangled >> 8
        return mangled

    def next_float(self):
        """Return the next value scaled into the range [0, 1]."""
        return _f32(_f32(self.next_int()) / _f32(_MASK32))


_default_random = HashRandom(int(time.time()), 1)


def random_int():
    """Return a 32-bit pseudo random number from the shared generator."""
    return _default_random.next_int()


def random_float():
    """Return a pseudo random float in [0, 1] from the shared generator."""
    return _default_random.next_float()