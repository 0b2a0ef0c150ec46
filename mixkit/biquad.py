"""Biquad IIR filter state and the standard filter designs."""

from __future__ import annotations

import math
from dataclasses import dataclass, field


@dataclass
class BiquadState:
    """Coefficients ``b`` (feed-forward), ``a`` (feedback) and the sample history."""

    b: list = field(default_factory=lambda: [0.0, 0.0, 0.0])
    a: list = field(default_factory=lambda: [0.0, 0.0])
    x: list = field(default_factory=lambda: [0.0, 0.0])
    y: list = field(default_factory=lambda: [0.0, 0.0])

    def reset(self):
        """Clear the input and output history."""
        self.x = [0.0, 0.0]
        self.y = [0.0, 0.0]

    def sample(self, value):
        """Filter one sample and return the result."""
        b0, b1, b2 = self.b
        a1, a2 = self.a
        xn1, xn2 = self.x
        yn1, yn2 = self.y
        result = b0 * value + b1 * xn1 + b2 * xn2 - a1 * yn1 - a2 * yn2
        self.x = [value, xn1]
        self.y = [result, yn1]
        return result

    def process(self, source, target):
        """Filter the readable samples of ``source`` into ``target``.

        When both are the same buffer the readable region is filtered in place.
        """
        if source is target:
            area = source.request_read()
            for index, value in enumerate(area.tolist()):
                area[index] = self.sample(value)
            return len(area)
        readable = source.request_read()
        writable = target.request_write(len(readable))
        count = len(writable)
        for index, value in enumerate(readable[:count].tolist()):
            writable[index] = self.sample(value)
        source.finish_read(count)
        target.finish_write(count)
        return count


def _coefficients(b0, b1, b2, a1, a2):
    return BiquadState(b=[b0, b1, b2], a=[a1, a2])


def _scale(amount):
    return _coefficients(amount, 0.0, 0.0, 0.0, 0.0)


def _normalise(rate, freq):
    return freq / (rate * 0.5)


def lowpass(rate, cutoff, resonance):
    """Low-pass filter; ``resonance`` is given in dB."""
    cutoff = _normalise(rate, cutoff)
    if cutoff >= 1.0:
        return _scale(1.0)
    if cutoff <= 0.0:
        return _scale(0.0)
    resonance = 10.0 ** (resonance * 0.05)
    theta = math.pi * 2.0 * cutoff
    alpha = math.sin(theta) / (2.0 * resonance)
    cosw = math.cos(theta)
    beta = (1.0 - cosw) * 0.5
    a0inv = 1.0 / (1.0 + alpha)
    return _coefficients(a0inv * beta, a0inv * 2.0 * beta, a0inv * beta,
                         a0inv * -2.0 * cosw, a0inv * (1.0 - alpha))


def highpass(rate, cutoff, resonance):
    """High-pass filter; ``resonance`` is given in dB."""
    cutoff = _normalise(rate, cutoff)
    if cutoff >= 1.0:
        return _scale(0.0)
    if cutoff <= 0.0:
        return _scale(1.0)
    resonance = 10.0 ** (resonance * 0.05)
    theta = math.pi * 2.0 * cutoff
    alpha = math.sin(theta) / (2.0 * resonance)
    cosw = math.cos(theta)
    beta = (1.0 + cosw) * 0.5
    a0inv = 1.0 / (1.0 + alpha)
    return _coefficients(a0inv * beta, a0inv * -2.0 * beta, a0inv * beta,
                         a0inv * -2.0 * cosw, a0inv * (1.0 - alpha))


def bandpass(rate, freq, q):
    """Band-pass filter with constant 0 dB peak gain."""
    freq = _normalise(rate, freq)
    if freq <= 0.0 or freq >= 1.0:
        return _scale(0.0)
    if q <= 0.0:
        return _scale(1.0)
    w0 = math.pi * 2.0 * freq
    alpha = math.sin(w0) / (2.0 * q)
    k = math.cos(w0)
    a0inv = 1.0 / (1.0 + alpha)
    return _coefficients(a0inv * alpha, 0.0, a0inv * -alpha,
                         a0inv * -2.0 * k, a0inv * (1.0 - alpha))


def notch(rate, freq, q):
    """Notch (band-stop) filter."""
    freq = _normalise(rate, freq)
    if freq <= 0.0 or freq >= 1.0:
        return _scale(1.0)
    if q <= 0.0:
        return _scale(0.0)
    w0 = math.pi * 2.0 * freq
    alpha = math.sin(w0) / (2.0 * q)
    k = math.cos(w0)
    a0inv = 1.0 / (1.0 + alpha)
    return _coefficients(a0inv, a0inv * -2.0 * k, a0inv,
                         a0inv * -2.0 * k, a0inv * (1.0 - alpha))


def peaking(rate, freq, q, gain):
    """Peaking EQ filter; ``gain`` is given in dB."""
    freq = _normalise(rate, freq)
    if freq <= 0.0 or freq >= 1.0:
        return _scale(1.0)
    amp = 10.0 ** (gain * 0.025)
    if q <= 0.0:
        return _scale(amp * amp)
    w0 = math.pi * 2.0 * freq
    alpha = math.sin(w0) / (2.0 * q)
    k = math.cos(w0)
    a0inv = 1.0 / (1.0 + alpha / amp)
    return _coefficients(a0inv * (1.0 + alpha * amp), a0inv * -2.0 * k,
                         a0inv * (1.0 - alpha * amp), a0inv * -2.0 * k,
                         a0inv * (1.0 - alpha / amp))


def allpass(rate, freq, q):
    """All-pass filter shifting phase around ``freq``."""
    freq = _normalise(rate, freq)
    if freq <= 0.0 or freq >= 1.0:
        return _scale(1.0)
    if q <= 0.0:
        return _scale(-1.0)
    w0 = math.pi * 2.0 * freq
    alpha = math.sin(w0) / (2.0 * q)
    k = math.cos(w0)
    a0inv = 1.0 / (1.0 + alpha)
    return _coefficients(a0inv * (1.0 - alpha), a0inv * -2.0 * k,
                         a0inv * (1.0 + alpha), a0inv * -2.0 * k,
                         a0inv * (1.0 - alpha))


def _shelf_parts(freq, q, amp):
    w0 = math.pi * 2.0 * freq
    ainn = max((amp + 1.0 / amp) * (1.0 / q - 1.0) + 2.0, 0.0)
    alpha = 0.5 * math.sin(w0) * math.sqrt(ainn)
    k = math.cos(w0)
    k2 = 2.0 * math.sqrt(amp) * alpha
    return k, k2, amp + 1.0, amp - 1.0


def lowshelf(rate, freq, q, gain):
    """Low-shelf filter; ``gain`` is given in dB."""
    freq = _normalise(rate, freq)
    if freq <= 0.0 or q == 0.0:
        return _scale(1.0)
    amp = 10.0 ** (gain * 0.025)
    if freq >= 1.0:
        return _scale(amp * amp)
    k, k2, ap1, am1 = _shelf_parts(freq, q, amp)
    a0inv = 1.0 / (ap1 + am1 * k + k2)
    return _coefficients(a0inv * amp * (ap1 - am1 * k + k2),
                         a0inv * 2.0 * amp * (am1 - ap1 * k),
                         a0inv * amp * (ap1 - am1 * k - k2),
                         a0inv * -2.0 * (am1 + ap1 * k),
                         a0inv * (ap1 + am1 * k - k2))


def highshelf(rate, freq, q, gain):
    """High-shelf filter; ``gain`` is given in dB."""
    freq = _normalise(rate, freq)
    if freq >= 1.0 or q == 0.0:
        return _scale(1.0)
    amp = 10.0 ** (gain * 0.025)
    if freq <= 0.0:
        return _scale(amp * amp)
    k, k2, ap1, am1 = _shelf_parts(freq, q, amp)
    a0inv = 1.0 / (ap1 - am1 * k + k2)
    return _coefficients(a0inv * amp * (ap1 + am1 * k + k2),
                         a0inv * -2.0 * amp * (am1 + ap1 * k),
                         a0inv * amp * (ap1 + am1 * k - k2),
                         a0inv * 2.0 * (am1 - ap1 * k),
                         a0inv * (ap1 - am1 * k - k2))