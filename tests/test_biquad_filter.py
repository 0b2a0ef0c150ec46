import pytest

from mixkit.biquad_filter import BiquadFilter, FilterType
from mixkit.buffer import Buffer
from mixkit.common import ErrorCode, MixedError
from mixkit.registry import list_segments, make_segment, segment_arguments
from mixkit.segment import Field, FieldFlag


def _connected(filter_type, frequency, samplerate=48000, size=256):
    segment = BiquadFilter(filter_type, frequency, samplerate)
    source, target = Buffer(size), Buffer(size)
    segment.set_in(Field.BUFFER, 0, source)
    segment.set_out(Field.BUFFER, 0, target)
    return segment, source, target


def test_constructor_rejects_frequency_at_samplerate():
    with pytest.raises(MixedError) as err:
        BiquadFilter(FilterType.LOWPASS, 48000, 48000)
    assert err.value.code == ErrorCode.INVALID_VALUE


def test_constructor_rejects_unknown_type():
    with pytest.raises(MixedError) as err:
        BiquadFilter(99, 1000, 48000)
    assert err.value.code == ErrorCode.INVALID_VALUE


def test_defaults_are_reported():
    segment = BiquadFilter(FilterType.NOTCH, 1000, 48000)
    assert segment.get(Field.Q) == 1.0
    assert segment.get(Field.GAIN) == 1.0
    assert segment.get(Field.FREQUENCY) == 1000
    assert segment.get(Field.SAMPLERATE) == 48000
    assert segment.get(Field.BIQUAD_FILTER) == FilterType.NOTCH
    assert segment.get(Field.BYPASS) is False


@pytest.mark.parametrize(
    "field, value",
    [
        (Field.Q, 2.5),
        (Field.GAIN, -3.0),
        (Field.FREQUENCY, 440.0),
        (Field.SAMPLERATE, 44100),
        (Field.BIQUAD_FILTER, FilterType.PEAKING),
        (Field.BYPASS, True),
    ],
)
def test_set_get_round_trip(field, value):
    segment = BiquadFilter(FilterType.LOWPASS, 1000, 48000)
    segment.set(field, value)
    assert segment.get(field) == value


@pytest.mark.parametrize(
    "field, value",
    [
        (Field.SAMPLERATE, 0),
        (Field.FREQUENCY, 0),
        (Field.FREQUENCY, 50000),
        (Field.BIQUAD_FILTER, 0),
        (Field.BIQUAD_FILTER, 9),
    ],
)
def test_set_rejects_bad_values(field, value):
    segment = BiquadFilter(FilterType.LOWPASS, 1000, 48000)
    with pytest.raises(MixedError) as err:
        segment.set(field, value)
    assert err.value.code == ErrorCode.INVALID_VALUE


def test_unknown_field_is_rejected():
    segment = BiquadFilter(FilterType.LOWPASS, 1000, 48000)
    with pytest.raises(MixedError) as err:
        segment.set(Field.VOLUME, 1.0)
    assert err.value.code == ErrorCode.INVALID_FIELD
    with pytest.raises(MixedError) as err:
        segment.get(Field.VOLUME)
    assert err.value.code == ErrorCode.INVALID_FIELD


def test_only_location_zero_exists():
    segment = BiquadFilter(FilterType.LOWPASS, 1000, 48000)
    with pytest.raises(MixedError) as err:
        segment.set_in(Field.BUFFER, 1, Buffer(4))
    assert err.value.code == ErrorCode.INVALID_LOCATION
    with pytest.raises(MixedError) as err:
        segment.set_out(Field.BUFFER, 1, Buffer(4))
    assert err.value.code == ErrorCode.INVALID_LOCATION


def test_start_requires_buffers():
    segment = BiquadFilter(FilterType.LOWPASS, 1000, 48000)
    with pytest.raises(MixedError) as err:
        segment.start()
    assert err.value.code == ErrorCode.BUFFER_MISSING


def test_lowpass_above_nyquist_passes_through():
    segment, source, target = _connected(FilterType.LOWPASS, 30000)
    segment.start()
    source.write([0.5, -0.25, 0.125])
    segment.mix()
    assert target.read() == [0.5, -0.25, 0.125]
    assert source.available_read() == 0


def test_highpass_above_nyquist_silences():
    segment, source, target = _connected(FilterType.HIGHPASS, 30000)
    segment.start()
    source.write([0.5, -0.25, 0.125])
    segment.mix()
    assert target.read() == [0.0, 0.0, 0.0]


def test_lowpass_attenuates_nyquist_signal():
    segment, source, target = _connected(FilterType.LOWPASS, 1000)
    segment.start()
    source.write([1.0 if i % 2 == 0 else -1.0 for i in range(200)])
    segment.mix()
    result = target.read()
    assert len(result) == 200
    assert max(abs(v) for v in result[-50:]) < 0.05


def test_bypass_transfers_unchanged():
    segment, source, target = _connected(FilterType.HIGHPASS, 30000)
    segment.start()
    segment.set(Field.BYPASS, True)
    source.write([0.5, 0.75])
    segment.mix()
    assert target.read() == [0.5, 0.75]


def test_in_place_filtering():
    segment = BiquadFilter(FilterType.HIGHPASS, 30000, 48000)
    shared = Buffer(16)
    segment.set_in(Field.BUFFER, 0, shared)
    segment.set_out(Field.BUFFER, 0, shared)
    segment.start()
    shared.write([0.5, 0.5])
    segment.mix()
    assert shared.read() == [0.0, 0.0]


def test_coefficients_ease_towards_new_design():
    segment, _, _ = _connected(FilterType.LOWPASS, 30000)
    segment.start()
    assert segment.state.b[0] == 1.0
    segment.set(Field.BIQUAD_FILTER, FilterType.HIGHPASS)
    assert segment.target.b[0] == 0.0
    segment.mix()
    assert segment.state.b[0] == pytest.approx(0.99)


def test_info_describes_segment():
    info = BiquadFilter(FilterType.LOWPASS, 1000, 48000).info()
    assert info.name == "biquad_filter"
    assert info.flags == FieldFlag.INPLACE
    assert (info.min_inputs, info.max_inputs, info.outputs) == (1, 1, 1)
    assert [f.field for f in info.fields][0] == Field.BUFFER
    assert Field.BYPASS in [f.field for f in info.fields]


def test_registered_in_registry():
    assert "biquad_filter" in list_segments()
    args = segment_arguments("biquad_filter")
    assert [a.description for a in args] == ["type", "frequency", "samplerate"]
    segment = make_segment("biquad_filter", FilterType.BANDPASS, 1000, 48000)
    assert isinstance(segment, BiquadFilter)
    assert segment.get(Field.BIQUAD_FILTER) == FilterType.BANDPASS