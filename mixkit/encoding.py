"""Conversion of samples between integer or float encodings and normalised floats."""

from __future__ import annotations

import math

from .common import Encoding, ErrorCode, MixedError

INT8_MIN, INT8_MAX = -(2**7), 2**7 - 1
UINT8_MAX = 2**8 - 1
INT16_MIN, INT16_MAX = -(2**15), 2**15 - 1
UINT16_MAX = 2**16 - 1
INT24_MIN, INT24_MAX = -8388608, 8388607
UINT24_MAX = 16777215
INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
UINT32_MAX = 2**32 - 1

# UINT24_MAX / 2 as it comes out in single precision.
_HALF_UINT24 = 8388608.0


def _check(sample, low, high):
    if not low <= sample <= high:
        raise ValueError(f"sample {sample} is outside [{low}, {high}]")


def _from_signed(sample, low, high):
    _check(sample, low, high)
    return -(sample / low) if sample < 0 else sample / high


def from_float(sample):
    """Clamp a float sample into [-1, 1]."""
    if 1.0 < sample:
        return 1.0
    if -1.0 < sample:
        return float(sample)
    return -1.0


def from_double(sample):
    """Clamp a double sample into [-1, 1]."""
    return from_float(sample)


def from_int8(sample):
    return _from_signed(sample, INT8_MIN, INT8_MAX)


def from_uint8(sample):
    _check(sample, 0, UINT8_MAX)
    return sample / (UINT8_MAX / 2) - 1


def from_int16(sample):
    return _from_signed(sample, INT16_MIN, INT16_MAX)


def from_uint16(sample):
    _check(sample, 0, UINT16_MAX)
    return sample / (UINT16_MAX / 2) - 1


def from_int24(sample):
    return _from_signed(sample, INT24_MIN, INT24_MAX)


def from_uint24(sample):
    _check(sample, 0, UINT24_MAX)
    return sample / (UINT24_MAX / 2) - 1


def from_int32(sample):
    return _from_signed(sample, INT32_MIN, INT32_MAX)


def from_uint32(sample):
    _check(sample, 0, UINT32_MAX)
    return from_double((sample - 0x80000000) / 0x80000000)


def to_float(sample):
    """Clamp a normalised sample into [-1, 1]."""
    if 1.0 <= sample:
        return 1.0
    if -1.0 <= sample:
        return float(sample)
    return -1.0


def to_double(sample):
    return to_float(sample)


def _to_signed(sample, low, high, scale):
    if 1.0 <= sample:
        return high
    if -1.0 <= sample:
        return int(sample * scale)
    return low


def _to_unsigned(sample, high, scale):
    if 1.0 <= sample:
        return high
    if -1.0 <= sample:
        return int((sample + 1) * scale)
    return 0


def to_int8(sample):
    return _to_signed(sample, INT8_MIN, INT8_MAX, 0x80)


def to_uint8(sample):
    return _to_unsigned(sample, UINT8_MAX, 0x80)


def to_int16(sample):
    return _to_signed(sample, INT16_MIN, INT16_MAX, 0x8000)


def to_uint16(sample):
    return _to_unsigned(sample, UINT16_MAX, 0x8000)


def to_int24(sample):
    return _to_signed(sample, INT24_MIN, INT24_MAX, 0x800000)


def to_uint24(sample):
    if 1.0 <= sample:
        return UINT24_MAX
    if -1.0 <= sample:
        return min(math.floor((sample + 1) * _HALF_UINT24 + 0.5), UINT24_MAX)
    return 0


def to_int32(sample):
    return _to_signed(sample, INT32_MIN, INT32_MAX, 0x80000000)


def to_uint32(sample):
    return _to_unsigned(sample, UINT32_MAX, 0x80000000)


_DECODERS = {
    Encoding.INT8: from_int8,
    Encoding.UINT8: from_uint8,
    Encoding.INT16: from_int16,
    Encoding.UINT16: from_uint16,
    Encoding.INT24: from_int24,
    Encoding.UINT24: from_uint24,
    Encoding.INT32: from_int32,
    Encoding.UINT32: from_uint32,
    Encoding.FLOAT: from_float,
    Encoding.DOUBLE: from_double,
}

_ENCODERS = {
    Encoding.INT8: to_int8,
    Encoding.UINT8: to_uint8,
    Encoding.INT16: to_int16,
    Encoding.UINT16: to_uint16,
    Encoding.INT24: to_int24,
    Encoding.UINT24: to_uint24,
    Encoding.INT32: to_int32,
    Encoding.UINT32: to_uint32,
    Encoding.FLOAT: to_float,
    Encoding.DOUBLE: to_double,
}


def decoder(encoding):
    """Return the function turning an encoded sample into a normalised float."""
    try:
        return _DECODERS[Encoding(encoding)]
    except ValueError:
        raise MixedError(ErrorCode.UNKNOWN_ENCODING) from None


def encoder(encoding):
    """Return the function turning a normalised float into an encoded sample."""
    try:
        return _ENCODERS[Encoding(encoding)]
    except ValueError:
        raise MixedError(ErrorCode.UNKNOWN_ENCODING) from None