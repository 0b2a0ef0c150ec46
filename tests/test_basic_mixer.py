import pytest

from mixkit.basic_mixer import BasicMixer
from mixkit.buffer import Buffer
from mixkit.common import ErrorCode, MixedError
from mixkit.registry import make_segment, segment_arguments
from mixkit.segment import Field


def mono_mixer(*inputs, size=8):
    mixer = BasicMixer(1)
    output = Buffer(size)
    mixer.set_out(Field.BUFFER, 0, output)
    for index, samples in enumerate(inputs):
        buffer = Buffer(size)
        buffer.write(samples)
        mixer.set_in(Field.BUFFER, index, buffer)
    return mixer, output


def test_sums_inputs():
    a = [0.5, 0.25, -0.5]
    b = [0.25, 0.25, 0.125]
    mixer, output = mono_mixer(a, b)
    mixer.start()
    mixer.mix()
    assert output.read() == pytest.approx([x + y for x, y in zip(a, b)])


def test_single_input_passes_through():
    samples = [0.5, 0.25, 0.125]
    mixer, output = mono_mixer(samples)
    mixer.mix()
    assert output.read() == samples


def test_mixes_only_common_length():
    mixer, output = mono_mixer([0.5, 0.5, 0.5], [0.25, 0.25])
    first = mixer.inputs[0]
    mixer.mix()
    assert len(output.read()) == 2
    assert first.available_read() == 1


def test_empty_input_writes_nothing():
    mixer, output = mono_mixer([0.5, 0.5], [])
    mixer.mix()
    assert output.available_read() == 0
    assert mixer.inputs[0].available_read() == 2


def test_volume_changes_at_zero_crossing():
    samples = [0.5, 0.5, -0.5, 0.5]
    mixer, output = mono_mixer(samples)
    mixer.set(Field.VOLUME, 0.5)
    mixer.mix()
    expected = [samples[0], samples[1]] + [s * 0.5 for s in samples[2:]]
    assert output.read() == pytest.approx(expected)
    assert mixer.volume == 0.5


def test_volume_waits_without_crossing():
    samples = [0.5, 0.25, 0.125]
    mixer, output = mono_mixer(samples)
    mixer.set(Field.VOLUME, 0.5)
    mixer.mix()
    assert output.read() == samples
    assert mixer.volume == 1.0
    assert mixer.get(Field.VOLUME) == 0.5


def test_stereo_routes_by_channel():
    mixer = BasicMixer(2)
    left_out, right_out = Buffer(4), Buffer(4)
    mixer.set_out(Field.BUFFER, 0, left_out)
    mixer.set_out(Field.BUFFER, 1, right_out)
    left_in, right_in = Buffer(4), Buffer(4)
    left_in.write([0.5, 0.25])
    right_in.write([-0.5, -0.25])
    mixer.set_in(Field.BUFFER, 0, left_in)
    mixer.set_in(Field.BUFFER, 1, right_in)
    mixer.start()
    mixer.mix()
    assert left_out.read() == [0.5, 0.25]
    assert right_out.read() == [-0.5, -0.25]


def test_start_requires_outputs():
    mixer = BasicMixer(2)
    mixer.set_out(Field.BUFFER, 0, Buffer(4))
    with pytest.raises(MixedError) as excinfo:
        mixer.start()
    assert excinfo.value.code == ErrorCode.BUFFER_MISSING


def test_start_requires_complete_input_frames():
    mixer = BasicMixer(2)
    mixer.set_out(Field.BUFFER, 0, Buffer(4))
    mixer.set_out(Field.BUFFER, 1, Buffer(4))
    mixer.set_in(Field.BUFFER, 0, Buffer(4))
    with pytest.raises(MixedError) as excinfo:
        mixer.start()
    assert excinfo.value.code == ErrorCode.BUFFER_MISSING


def test_set_out_bad_location():
    with pytest.raises(MixedError) as excinfo:
        BasicMixer(1).set_out(Field.BUFFER, 1, Buffer(4))
    assert excinfo.value.code == ErrorCode.INVALID_LOCATION


def test_remove_input_clears_slot():
    mixer = BasicMixer(1)
    mixer.set_in(Field.BUFFER, 0, Buffer(4))
    mixer.set_in(Field.BUFFER, 0, None)
    assert mixer.inputs == [None]


def test_remove_missing_input_fails():
    with pytest.raises(MixedError) as excinfo:
        BasicMixer(1).set_in(Field.BUFFER, 0, None)
    assert excinfo.value.code == ErrorCode.INVALID_LOCATION


@pytest.mark.parametrize(
    "call",
    [
        lambda m: m.set(Field.BYPASS, True),
        lambda m: m.get(Field.BYPASS),
        lambda m: m.set_in(Field.VOLUME, 0, Buffer(1)),
        lambda m: m.set_out(Field.VOLUME, 0, Buffer(1)),
    ],
)
def test_invalid_fields(call):
    with pytest.raises(MixedError) as excinfo:
        call(BasicMixer(1))
    assert excinfo.value.code == ErrorCode.INVALID_FIELD


def test_info_describes_mixer():
    info = BasicMixer(3).info()
    assert info.name == "basic_mixer"
    assert info.description == "Mixes multiple buffers together"
    assert info.outputs == 3
    assert info.max_inputs is None
    assert [f.field for f in info.fields] == [Field.BUFFER, Field.VOLUME]


def test_registered_factory():
    mixer = make_segment("basic_mixer", 2)
    assert isinstance(mixer, BasicMixer)
    assert mixer.channels == 2
    assert segment_arguments("basic_mixer")[0].description == "channels"


def test_zero_channels_rejected():
    with pytest.raises(ValueError):
        BasicMixer(0)