"""A 200-tap FIR approximation of the Hilbert transform."""

from __future__ import annotations

COEFFICIENTS = (
    +0.0008103736, +0.0008457886, +0.0009017196, +0.0009793364,
    +0.0010798341, +0.0012044365, +0.0013544008, +0.0015310235,
    +0.0017356466, +0.0019696659, +0.0022345404, +0.0025318040,
    +0.0028630784, +0.0032300896, +0.0036346867, +0.0040788644,
    +0.0045647903, +0.0050948365, +0.0056716186, +0.0062980419,
    +0.0069773575, +0.0077132300, +0.0085098208, +0.0093718901,
    +0.0103049226, +0.0113152847, +0.0124104218, +0.0135991079,
    +0.0148917649, +0.0163008758, +0.0178415242, +0.0195321089,
    +0.0213953037, +0.0234593652, +0.0257599469, +0.0283426636,
    +0.0312667947, +0.0346107648, +0.0384804823, +0.0430224431,
    +0.0484451086, +0.0550553725, +0.0633242001, +0.0740128560,
    +0.0884368322, +0.1090816773, +0.1412745301, +0.1988673273,
    +0.3326528346, +0.9997730178, -0.9997730178, -0.3326528346,
    -0.1988673273, -0.1412745301, -0.1090816773, -0.0884368322,
    -0.0740128560, -0.0633242001, -0.0550553725, -0.0484451086,
    -0.0430224431, -0.0384804823, -0.0346107648, -0.0312667947,
    -0.0283426636, -0.0257599469, -0.0234593652, -0.0213953037,
    -0.0195321089, -0.0178415242, -0.0163008758, -0.0148917649,
    -0.0135991079, -0.0124104218, -0.0113152847, -0.0103049226,
    -0.0093718901, -0.0085098208, -0.0077132300, -0.0069773575,
    -0.0062980419, -0.0056716186, -0.0050948365, -0.0045647903,
    -0.0040788644, -0.0036346867, -0.0032300896, -0.0028630784,
    -0.0025318040, -0.0022345404, -0.0019696659, -0.0017356466,
    -0.0015310235, -0.0013544008, -0.0012044365, -0.0010798341,
    -0.0009793364, -0.0009017196, -0.0008457886, -0.0008103736,
)

_MASK32 = 0xFFFFFFFF


def hilbert(sample, delay, index):
    """Store ``sample`` at ``delay[index]`` and return the filtered value.

    ``delay`` is a mutable ring of past samples; taps are read every second
    slot going backwards, with the offset wrapping as an unsigned 32-bit value.
    """
    size = len(delay)
    if size == 0:
        raise ValueError("delay line must not be empty")
    delay[index] = sample
    return sum(
        coefficient * delay[((index - tap * 2) & _MASK32) % size]
        for tap, coefficient in enumerate(COEFFICIENTS)
    )