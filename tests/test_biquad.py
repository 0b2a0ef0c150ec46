import cmath
import math

import pytest

from mixkit.biquad import (
    BiquadState,
    allpass,
    bandpass,
    highpass,
    highshelf,
    lowpass,
    lowshelf,
    notch,
    peaking,
)
from mixkit.buffer import Buffer

RATE = 44100


def _response(state, omega):
    z1 = cmath.exp(-1j * omega)
    z2 = z1 * z1
    b0, b1, b2 = state.b
    a1, a2 = state.a
    return (b0 + b1 * z1 + b2 * z2) / (1 + a1 * z1 + a2 * z2)


def _omega(freq):
    return 2 * math.pi * freq / RATE


def test_lowpass_above_nyquist_is_passthrough():
    state = lowpass(RATE, 30000, 0)
    assert state.b == [1.0, 0.0, 0.0]
    assert state.a == [0.0, 0.0]


def test_lowpass_zero_cutoff_silences():
    assert lowpass(RATE, 0, 0).b == [0.0, 0.0, 0.0]


def test_lowpass_unity_dc_gain():
    state = lowpass(RATE, 1000, 0)
    assert abs(_response(state, 0.0)) == pytest.approx(1.0, abs=1e-9)
    assert abs(_response(state, math.pi)) == pytest.approx(0.0, abs=1e-9)


def test_highpass_blocks_dc():
    state = highpass(RATE, 1000, 0)
    assert abs(_response(state, 0.0)) == pytest.approx(0.0, abs=1e-9)
    assert abs(_response(state, math.pi)) == pytest.approx(1.0, abs=1e-9)


def test_highpass_edge_cases():
    assert highpass(RATE, 30000, 0).b == [0.0, 0.0, 0.0]
    assert highpass(RATE, 0, 0).b == [1.0, 0.0, 0.0]


def test_bandpass_nonpositive_q_is_passthrough():
    assert bandpass(RATE, 2000, 0).b == [1.0, 0.0, 0.0]


@pytest.mark.parametrize("freq", [100, 1000, 5000, 15000])
def test_allpass_keeps_magnitude(freq):
    state = allpass(RATE, 3000, 0.7)
    assert abs(_response(state, _omega(freq))) == pytest.approx(1.0, abs=1e-9)


def test_allpass_nonpositive_q_inverts():
    assert allpass(RATE, 3000, 0).b == [-1.0, 0.0, 0.0]


def test_peaking_without_q_scales():
    assert peaking(RATE, 1000, 0, 20).b[0] == pytest.approx(10.0)


def test_peaking_leaves_far_frequencies():
    state = peaking(RATE, 1000, 1.0, 6)
    assert abs(_response(state, 0.0)) == pytest.approx(1.0, abs=1e-9)


def test_lowshelf_dc_gain_matches_gain():
    gain = 6
    state = lowshelf(RATE, 500, 1.0, gain)
    assert abs(_response(state, 0.0)) == pytest.approx(10 ** (gain / 20), rel=1e-9)


def test_lowshelf_zero_q_is_passthrough():
    assert lowshelf(RATE, 500, 0.0, 6).b == [1.0, 0.0, 0.0]


def test_highshelf_nyquist_gain_matches_gain():
    gain = -6
    state = highshelf(RATE, 5000, 1.0, gain)
    assert abs(_response(state, math.pi)) == pytest.approx(10 ** (gain / 20), rel=1e-9)


def test_highshelf_zero_freq_scales():
    gain = 6
    state = highshelf(RATE, 0, 1.0, gain)
    assert state.b[0] == pytest.approx(10 ** (gain / 20))


def test_sample_and_reset():
    state = BiquadState(b=[0.5, 0.5, 0.0], a=[0.0, 0.0])
    assert state.sample(1.0) == pytest.approx(0.5)
    assert state.sample(0.0) == pytest.approx(0.5)
    state.reset()
    assert state.x == [0.0, 0.0]
    assert state.y == [0.0, 0.0]


def test_process_lowpass_settles_on_constant():
    source, target = Buffer(2048), Buffer(2048)
    source.write([0.5] * 2048)
    state = lowpass(RATE, 1000, 0)
    assert state.process(source, target) == 2048
    output = target.read()
    assert len(output) == 2048
    assert output[-1] == pytest.approx(0.5, abs=1e-3)
    assert source.available_read() == 0


def test_process_in_place():
    buf = Buffer(4)
    buf.write([0.5, -0.25])
    allpass(RATE, 1000, 0).process(buf, buf)
    assert buf.read() == [-0.5, 0.25]