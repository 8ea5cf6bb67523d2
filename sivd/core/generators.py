# sivd/core/generators.py
# Test vector generators -- numerically sensitive, fully deterministic workloads.
#
# No random number generation. No time dependency. No module-level mutable
# state. Every generator output is a pure function of its constructor
# arguments; calling generate() twice yields bit-identical tuples on the
# same interpreter, libm and hardware.
#
# IEEE-754 semantics are preserved where Python's math module deviates:
#   math.sinh / math.cosh raise OverflowError   -> signed infinity
#   math.sin / math.cos raise ValueError on inf -> nan
# Every other exception is a defect and propagates.

import math
from typing import Tuple

from sivd.utils.constants import (
    DENORMAL_ANGLE_STEP,
    DENORMAL_ATAN_SCALE,
    DENORMAL_PERTURBATION,
    DENORMAL_SEEDS,
    DENORMAL_SIN_SCALE,
    DENORMAL_X_DIVISOR,
    DENORMAL_X_FACTOR,
    DENORMAL_Y_DIVISOR,
    DENORMAL_Y_FACTOR,
    DENORMAL_Y_SCALE,
    SAMPLE_SIZE,
    TRANSCENDENTAL_FIELDS_PER_INPUT,
    TRANSCENDENTAL_SIN_SCALE,
    TRANSCENDENTAL_SPECIAL_VALUES,
    TRANSCENDENTAL_SWEEP_COUNT,
    TRANSCENDENTAL_SWEEP_DIVISOR,
)

ResultVector = Tuple[float, ...]


def _sin(x: float) -> float:
    if math.isinf(x):
        return math.nan
    return math.sin(x)


def _cos(x: float) -> float:
    if math.isinf(x):
        return math.nan
    return math.cos(x)


def _sinh(x: float) -> float:
    try:
        return math.sinh(x)
    except OverflowError:
        return math.copysign(math.inf, x)


def _cosh(x: float) -> float:
    try:
        return math.cosh(x)
    except OverflowError:
        return math.inf


class VectorGenerator:
    """
    Common contract for all probe workloads.

    Subclasses implement generate() and expected_length(). The verifier
    relies only on these two methods.
    """

    def generate(self) -> ResultVector:
        raise NotImplementedError

    def expected_length(self) -> int:
        raise NotImplementedError

    def __call__(self) -> ResultVector:
        return self.generate()


class DenormalGenerator(VectorGenerator):
    """
    Iterates two coupled recurrences from seeds at the normal/subnormal
    boundary and mixes them with trigonometric weights.

    For each seed s (outer loop) and step i (inner loop):

        x = x / 1.1123156 + x * 0.9123545676
        y = y * 0.951235467 + y / 1.05123245
        c = x * (1 + sin(0.01 i)) + y * (1 + cos(0.01 i))
        v = c + sin(c * 1e300) * 1e-308 + atan(c * 1e200) * 1e-308

    with x0 = s and y0 = s * 1.112345. Gradual underflow and
    flush-to-zero implementations diverge in the low bits of v.
    """

    def __init__(self, seeds: tuple = DENORMAL_SEEDS, sample_size: int = SAMPLE_SIZE):
        self._seeds = tuple(float(s) for s in seeds)
        self._sample_size = sample_size

    @property
    def seeds(self) -> tuple:
        return self._seeds

    def samples_per_seed(self) -> int:
        return self._sample_size // len(self._seeds)

    def expected_length(self) -> int:
        return self.samples_per_seed() * len(self._seeds)

    def generate(self) -> ResultVector:
        steps = self.samples_per_seed()
        results = []

        for start in self._seeds:
            x = start
            y = start * DENORMAL_Y_SCALE

            for i in range(steps):
                x = x / DENORMAL_X_DIVISOR + x * DENORMAL_X_FACTOR
                y = y * DENORMAL_Y_FACTOR + y / DENORMAL_Y_DIVISOR

                angle = i * DENORMAL_ANGLE_STEP
                combined = x * (1.0 + _sin(angle)) + y * (1.0 + _cos(angle))

                final_val = (
                    combined
                    + _sin(combined * DENORMAL_SIN_SCALE) * DENORMAL_PERTURBATION
                    + math.atan(combined * DENORMAL_ATAN_SCALE) * DENORMAL_PERTURBATION
                )
                results.append(final_val)

        return tuple(results)


class TranscendentalGenerator(VectorGenerator):
    """
    Evaluates a chain of libm routines over a fixed input table.

    The table is the special values followed by sweep_count points
    i * pi / sweep_divisor. Per input, nine values are appended in this
    order: sin, cos, sin(10 sin x), exp(cos x) - 1,
    sinh(x) cosh(x) - 0.5 sinh(2x), log10(|x| + 1) + log2(|x| + 2),
    atan, tanh, hypot(sin x, cos x) - 1.

    Several of these are mathematically zero; their numeric residue is
    what differs between math library implementations.
    """

    def __init__(
        self,
        special_values: tuple = TRANSCENDENTAL_SPECIAL_VALUES,
        sweep_count:    int = TRANSCENDENTAL_SWEEP_COUNT,
        sweep_divisor:  float = TRANSCENDENTAL_SWEEP_DIVISOR,
    ):
        self._special_values = tuple(float(v) for v in special_values)
        self._sweep_count = sweep_count
        self._sweep_divisor = float(sweep_divisor)

    def input_table(self) -> tuple:
        sweep = tuple(
            i * math.pi / self._sweep_divisor for i in range(self._sweep_count)
        )
        return self._special_values + sweep

    def expected_length(self) -> int:
        return (len(self._special_values) + self._sweep_count) * TRANSCENDENTAL_FIELDS_PER_INPUT

    def generate(self) -> ResultVector:
        results = []

        for val in self.input_table():
            sin_val = _sin(val)
            cos_val = _cos(val)

            sin_of_sin = _sin(sin_val * TRANSCENDENTAL_SIN_SCALE)
            exp_of_cos = math.exp(cos_val) - 1.0

            compound1 = _sinh(val) * _cosh(val) - 0.5 * _sinh(2.0 * val)
            compound2 = math.log10(abs(val) + 1.0) + math.log2(abs(val) + 2.0)

            results.append(sin_val)
            results.append(cos_val)
            results.append(sin_of_sin)
            results.append(exp_of_cos)
            results.append(compound1)
            results.append(compound2)
            results.append(math.atan(val))
            results.append(math.tanh(val))
            results.append(math.hypot(sin_val, cos_val) - 1.0)

        return tuple(results)
