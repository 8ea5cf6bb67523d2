# sivd/utils/constants.py
# Version: 1.0.0
# Default workload parameters for the silicon fingerprint probes.
# Changing any value below changes every fingerprint produced with the
# defaults. Records taken with different constants are not comparable.
#
# Standard import pattern:
#   from sivd.utils.constants import (
#       CONSISTENCY_RUNS,
#       SAMPLE_SIZE,
#       DENORMAL_SEEDS,
#       TRANSCENDENTAL_SPECIAL_VALUES,
#       TRANSCENDENTAL_SWEEP_COUNT,
#       TRANSCENDENTAL_SWEEP_DIVISOR,
#   )

import math


# ---------------------------------------------------------------------------
# CONSISTENCY VERIFIER
# ---------------------------------------------------------------------------

CONSISTENCY_RUNS: int = 3      # Runs per case within one process


# ---------------------------------------------------------------------------
# DENORMAL-REGIME GENERATOR
# ---------------------------------------------------------------------------
# With lower sample sizes the output is not unique across machines.

SAMPLE_SIZE: int = 1230

# Starting magnitudes at and below the normal/subnormal boundary.
# 2.2250738585072014e-308 is the smallest normal double.
DENORMAL_SEEDS: tuple = (
    1e-308,
    2e-308,
    5e-308,
    1e-307,
    1e-320,
    2.2250738585072014e-308,
)

DENORMAL_Y_SCALE:   float = 1.112345        # y0 = seed * scale
DENORMAL_X_DIVISOR: float = 1.1123156       # x = x / div + x * mul
DENORMAL_X_FACTOR:  float = 0.9123545676
DENORMAL_Y_FACTOR:  float = 0.951235467     # y = y * mul + y / div
DENORMAL_Y_DIVISOR: float = 1.05123245
DENORMAL_ANGLE_STEP: float = 0.01           # angle = i * step

# Perturbation terms: sin(c * 1e300) * 1e-308 + atan(c * 1e200) * 1e-308
DENORMAL_SIN_SCALE:  float = 1e300
DENORMAL_ATAN_SCALE: float = 1e200
DENORMAL_PERTURBATION: float = 1e-308


# ---------------------------------------------------------------------------
# TRANSCENDENTAL-FUNCTION GENERATOR
# ---------------------------------------------------------------------------

TRANSCENDENTAL_SPECIAL_VALUES: tuple = (
    0.0,
    1e-15,
    math.pi / 6.0,
    math.pi / 4.0,
    math.pi / 3.0,
    math.pi / 2.0,
    math.pi,
    3.0 * math.pi / 2.0,
    2.0 * math.pi,
    1.0,
    -1.0,
    0.5,
    -0.534634634512312587,
    1e-10,
    -1e-10,
    1e15,
    -1e15,
)

# Sweep points: i * pi / divisor for i in range(count).
TRANSCENDENTAL_SWEEP_COUNT:   int = 500
TRANSCENDENTAL_SWEEP_DIVISOR: float = 17.12344658922222221111154657

# Values appended per input: sin, cos, sin(10 sin), exp(cos) - 1,
# hyperbolic compound, log compound, atan, tanh, hypot(sin, cos) - 1.
TRANSCENDENTAL_FIELDS_PER_INPUT: int = 9
TRANSCENDENTAL_SIN_SCALE: float = 10.0


# ---------------------------------------------------------------------------
# REPORTING
# ---------------------------------------------------------------------------

PREVIEW_COUNT: int = 10        # Raw values shown per case in the report
