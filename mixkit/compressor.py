"""A dynamic range compressor segment with soft knee and adaptive release."""

from __future__ import annotations

import math
from array import array

from .buffer import transfer
from .common import ErrorCode, FieldType, MixedError
from .registry import register_segment
from .segment import Field, FieldFlag, FieldInfo, Segment, SegmentInfo

MAX_DELAY = 1024
SAMPLES_PER_UPDATE = 32
SPACING_DB = 5.0

_ANG90 = math.pi * 0.5
_ANG90_INV = 2.0 / math.pi
_SATURATION_RELEASE = 0.0025  # seconds
_METER_FALLOFF = 0.325  # seconds


def _div(numerator, denominator):
    """Divide with IEEE semantics instead of raising on a zero divisor."""
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _exp(value):
    try:
        return math.exp(value)
    except OverflowError:
        return math.inf


def _pow(base, exponent):
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf
    except ValueError:
        return math.nan


def _asin(value):
    return math.asin(value) if -1.0 <= value <= 1.0 else math.nan


def _sin(value):
    return math.nan if math.isinf(value) else math.sin(value)


def _fix(value, default):
    """Replace NaN and infinities with ``default``."""
    return default if math.isnan(value) or math.isinf(value) else value


def _clamp(value, low, high):
    if value < low:
        return low
    if value > high:
        return high
    return value


def _db2lin(db):
    return _pow(10.0, 0.05 * db)


def _lin2db(lin):
    if math.isnan(lin) or lin < 0.0:
        return math.nan
    if lin == 0.0:
        return -math.inf
    return 20.0 * math.log10(lin)


def _release_curve(x, a, b, c, d):
    x2 = x * x
    return a * x2 * x + b * x2 + c * x + d


def _knee_curve(x, k, linear_threshold):
    return linear_threshold + _div(1.0 - _exp(-k * (x - linear_threshold)), k)


def _knee_slope(x, k, linear_threshold):
    return _div(k * x, (k * linear_threshold + 1.0) * _exp(k * (x - linear_threshold)) - 1)


def _comp_curve(x, k, slope, linear_threshold, linear_threshold_knee,
                threshold, knee, knee_db_offset):
    if x < linear_threshold:
        return x
    if knee <= 0.0:
        return _db2lin(threshold + slope * (_lin2db(x) - threshold))
    if x < linear_threshold_knee:
        return _knee_curve(x, k, linear_threshold)
    return _db2lin(knee_db_offset + slope * (_lin2db(x) - threshold - knee))


_PARAMETERS = {
    Field.COMPRESSOR_PREGAIN: "pregain",
    Field.COMPRESSOR_THRESHOLD: "threshold",
    Field.COMPRESSOR_KNEE: "knee",
    Field.COMPRESSOR_RATIO: "ratio",
    Field.COMPRESSOR_ATTACK: "attack",
    Field.COMPRESSOR_RELEASE: "release",
    Field.COMPRESSOR_PREDELAY: "predelay",
    Field.COMPRESSOR_POSTGAIN: "postgain",
    Field.COMPRESSOR_WET: "wet",
}


class Compressor(Segment):
    """Compresses the dynamic range of one input buffer into one output buffer.

    Samples are processed in chunks of 32; whatever does not fill a whole
    chunk stays in the input until the next mix. Changing any parameter
    recomputes the curve and resets the envelope state.
    """

    def __init__(self, samplerate):
        self.samplerate = samplerate
        self.pregain = 0.0
        self.threshold = -24.0
        self.knee = 30.0
        self.ratio = 12.0
        self.attack = 0.003
        self.release = 0.25
        self.predelay = 0.006
        self.releasezone = (0.09, 0.16, 0.42, 0.96)
        self.postgain = 0.0
        self.wet = 1.0
        self.input = None
        self.output = None
        self.bypass = False
        self._delay = [0.0] * MAX_DELAY
        self._reinit()

    def _reinit(self):
        rate = self.samplerate
        raw_delay = rate * self.predelay
        if not raw_delay >= 1:
            delay_size = 1
        elif raw_delay > MAX_DELAY:
            delay_size = MAX_DELAY
        else:
            delay_size = int(raw_delay)
        self._delay[:delay_size] = [0.0] * delay_size

        linear_threshold = _db2lin(self.threshold)
        slope = _div(1.0, self.ratio)
        release_samples = rate * self.release

        k = 5.0
        knee_db_offset = 0.0
        linear_threshold_knee = 0.0
        if self.knee > 0.0:
            xknee = _db2lin(self.threshold + self.knee)
            min_k, max_k = 0.1, 10000.0
            for _ in range(15):
                if _knee_slope(xknee, k, linear_threshold) < slope:
                    max_k = k
                else:
                    min_k = k
                k = math.sqrt(min_k * max_k)
            knee_db_offset = _lin2db(_knee_curve(xknee, k, linear_threshold))
            linear_threshold_knee = _db2lin(self.threshold + self.knee)

        full_level = _comp_curve(1.0, k, slope, linear_threshold, linear_threshold_knee,
                                 self.threshold, self.knee, knee_db_offset)

        y1, y2, y3, y4 = (release_samples * zone for zone in self.releasezone)

        self.metergain = 1.0
        self._meter_release = 1.0 - _exp(_div(-1.0, rate * _METER_FALLOFF))
        self._linear_pregain = _db2lin(self.pregain)
        self._linear_threshold = linear_threshold
        self._slope = slope
        self._attack_samples_inv = _div(1.0, rate * self.attack)
        self._sat_release_samples_inv = _div(1.0, rate * _SATURATION_RELEASE)
        self._dry = 1.0 - self.wet
        self._k = k
        self._knee_db_offset = knee_db_offset
        self._linear_threshold_knee = linear_threshold_knee
        self._master_gain = _db2lin(self.postgain) * _pow(_div(1.0, full_level), 0.6)
        self._a = (-y1 + 3.0 * y2 - 3.0 * y3 + y4) / 6.0
        self._b = y1 - 2.5 * y2 + 2.0 * y3 - 0.5 * y4
        self._c = (-11.0 * y1 + 18.0 * y2 - 9.0 * y3 + 2.0 * y4) / 6.0
        self._d = y1
        self._delay_size = delay_size
        self._reset_envelope()

    def _reset_envelope(self):
        self._detector_avg = 0.0
        self._comp_gain = 1.0
        self._max_comp_diff_db = -1.0
        self._delay_write = 0
        self._delay_read = 1 if self._delay_size > 1 else 0

    def start(self):
        self.metergain = 1.0
        self._reset_envelope()

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
        readable = self.input.request_read()
        writable = self.output.request_write(len(readable))
        samples = len(writable) // SAMPLES_PER_UPDATE * SAMPLES_PER_UPDATE
        source = readable[:samples].tolist()

        metergain = self.metergain
        meter_release = self._meter_release
        threshold = self.threshold
        knee = self.knee
        linear_pregain = self._linear_pregain
        linear_threshold = self._linear_threshold
        slope = self._slope
        attack_inv = self._attack_samples_inv
        sat_release_inv = self._sat_release_samples_inv
        wet = self.wet
        dry = self._dry
        k = self._k
        knee_db_offset = self._knee_db_offset
        linear_threshold_knee = self._linear_threshold_knee
        master_gain = self._master_gain
        a, b, c, d = self._a, self._b, self._c, self._d
        detector_avg = self._detector_avg
        comp_gain = self._comp_gain
        max_comp_diff_db = self._max_comp_diff_db
        delay = self._delay
        delay_size = self._delay_size
        write_pos = self._delay_write
        read_pos = self._delay_read

        result = []
        for chunk_start in range(0, samples, SAMPLES_PER_UPDATE):
            detector_avg = _fix(detector_avg, 1.0)
            scaled_desired_gain = _asin(detector_avg) * _ANG90_INV
            comp_diff_db = _lin2db(_div(comp_gain, scaled_desired_gain))

            if comp_diff_db < 0.0:
                # Releasing: follow the adaptive release curve.
                comp_diff_db = _fix(comp_diff_db, -1.0)
                max_comp_diff_db = -1.0
                x = (_clamp(comp_diff_db, -12.0, 0.0) + 12.0) * 0.25
                release_samples = _release_curve(x, a, b, c, d)
                envelope_rate = _db2lin(_div(SPACING_DB, release_samples))
            else:
                comp_diff_db = _fix(comp_diff_db, 1.0)
                if max_comp_diff_db == -1 or max_comp_diff_db < comp_diff_db:
                    max_comp_diff_db = comp_diff_db
                attenuate = max_comp_diff_db
                if attenuate < 0.5:
                    attenuate = 0.5
                envelope_rate = 1.0 - _pow(_div(0.25, attenuate), attack_inv)

            for value in source[chunk_start:chunk_start + SAMPLES_PER_UPDATE]:
                sample = value * linear_pregain
                delay[write_pos] = sample
                sample = abs(sample)

                if sample < 0.0001:
                    attenuation = 1.0
                else:
                    compressed = _comp_curve(sample, k, slope, linear_threshold,
                                             linear_threshold_knee, threshold, knee,
                                             knee_db_offset)
                    attenuation = _div(compressed, sample)

                if attenuation > detector_avg:
                    attenuation_db = -_lin2db(attenuation)
                    if attenuation_db < 2.0:
                        attenuation_db = 2.0
                    rate = _db2lin(attenuation_db * sat_release_inv) - 1.0
                else:
                    rate = 1.0

                detector_avg += (attenuation - detector_avg) * rate
                if detector_avg > 1.0:
                    detector_avg = 1.0
                detector_avg = _fix(detector_avg, 1.0)

                if envelope_rate < 1:
                    comp_gain += (scaled_desired_gain - comp_gain) * envelope_rate
                else:
                    comp_gain *= envelope_rate
                    if comp_gain > 1.0:
                        comp_gain = 1.0

                premix_gain = _sin(_ANG90 * comp_gain)
                gain = dry + wet * master_gain * premix_gain

                premix_gain_db = _lin2db(premix_gain)
                if premix_gain_db < metergain:
                    metergain = premix_gain_db
                else:
                    metergain += (premix_gain_db - metergain) * meter_release

                result.append(delay[read_pos] * gain)
                read_pos = (read_pos + 1) % delay_size
                write_pos = (write_pos + 1) % delay_size

        writable[:samples] = array("f", result)
        self.output.finish_write(samples)
        self.input.finish_read(samples)

        self.metergain = metergain
        self._detector_avg = detector_avg
        self._comp_gain = comp_gain
        self._max_comp_diff_db = max_comp_diff_db
        self._delay_write = write_pos
        self._delay_read = read_pos

    def get(self, field):
        if field == Field.BYPASS:
            return self.bypass
        if field == Field.COMPRESSOR_RELEASEZONE:
            return tuple(self.releasezone)
        try:
            return getattr(self, _PARAMETERS[field])
        except KeyError:
            raise MixedError(ErrorCode.INVALID_FIELD) from None

    def set(self, field, value):
        if field == Field.BYPASS:
            self.bypass = bool(value)
        elif field == Field.COMPRESSOR_RELEASEZONE:
            first, second, third, fourth = value
            self.releasezone = (float(first), float(second), float(third), float(fourth))
        elif field in _PARAMETERS:
            setattr(self, _PARAMETERS[field], float(value))
        else:
            raise MixedError(ErrorCode.INVALID_FIELD)
        self._reinit()

    def info(self):
        segment_flags = FieldFlag.SEGMENT | FieldFlag.SET | FieldFlag.GET
        return SegmentInfo(
            name="compressor",
            description="Dynamically compress the audio volume.",
            flags=FieldFlag.INPLACE,
            min_inputs=1,
            max_inputs=1,
            outputs=1,
            fields=[
                FieldInfo(Field.BUFFER, FieldType.BUFFER_POINTER, 1,
                          FieldFlag.IN | FieldFlag.OUT | FieldFlag.SET,
                          "The buffer for audio data attached to the location."),
                FieldInfo(Field.BYPASS, FieldType.BOOL, 1, segment_flags,
                          "Bypass the segment's processing."),
                FieldInfo(Field.COMPRESSOR_PREGAIN, FieldType.FLOAT, 1, segment_flags,
                          "The gain before compression, in dB."),
                FieldInfo(Field.COMPRESSOR_THRESHOLD, FieldType.FLOAT, 1, segment_flags,
                          "The threshold to activate compression, in dB."),
                FieldInfo(Field.COMPRESSOR_KNEE, FieldType.FLOAT, 1, segment_flags,
                          "The compression knee."),
                FieldInfo(Field.COMPRESSOR_RATIO, FieldType.FLOAT, 1, segment_flags,
                          "The compression ratio."),
                FieldInfo(Field.COMPRESSOR_ATTACK, FieldType.FLOAT, 1, segment_flags,
                          "The attack time in seconds."),
                FieldInfo(Field.COMPRESSOR_RELEASE, FieldType.FLOAT, 1, segment_flags,
                          "The release time in seconds."),
                FieldInfo(Field.COMPRESSOR_PREDELAY, FieldType.FLOAT, 1, segment_flags,
                          "The delay before compression, in seconds."),
                FieldInfo(Field.COMPRESSOR_RELEASEZONE, FieldType.FLOAT, 1, segment_flags,
                          "The release zones of the compressor."),
                FieldInfo(Field.COMPRESSOR_POSTGAIN, FieldType.FLOAT, 1, segment_flags,
                          "The gain after compressin, in dB."),
                FieldInfo(Field.COMPRESSOR_WET, FieldType.FLOAT, 1, segment_flags,
                          "The dry/wet mix"),
                FieldInfo(Field.COMPRESSOR_GAIN, FieldType.FLOAT, 1,
                          FieldFlag.SEGMENT | FieldFlag.GET,
                          "Retrieve the actual gain that was set during the last mixing step."),
            ],
        )


register_segment(
    "compressor",
    (FieldInfo(type=FieldType.UINT32, description="samplerate"),),
    Compressor,
)