# =============================================================================
# SIVD v1.0.0 -- PROBE CONFIGURATION
# File:   sivd/core/config.py
# =============================================================================
#
# SCOPE
# -----
# Frozen configuration object carrying every tunable workload parameter.
# Defaults come from sivd.utils.constants; callers override per field.
#
# VALIDATION ORDER
# ----------------
#   V1  Finiteness   -- every float table entry and the sweep divisor.
#   V2  Range        -- counts >= their minimum, divisor non-zero,
#                       seed table non-empty.
#   V3  Cross-field  -- sample_size must be a positive multiple of the
#                       seed count; every sweep point must be finite.
#
# There is NO silent coercion. Every violation raises ProbeConfigError.
# =============================================================================

from __future__ import annotations

import math
from dataclasses import dataclass

from sivd.core.exceptions import ProbeConfigError
from sivd.utils.constants import (
    CONSISTENCY_RUNS,
    DENORMAL_SEEDS,
    SAMPLE_SIZE,
    TRANSCENDENTAL_SPECIAL_VALUES,
    TRANSCENDENTAL_SWEEP_COUNT,
    TRANSCENDENTAL_SWEEP_DIVISOR,
)


def _check_int_at_least(field_name: str, value: int, minimum: int) -> None:
    """V2: value must be an int (not bool) and >= minimum."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProbeConfigError(
            field_name=field_name,
            value=value,
            constraint="must be an int",
        )
    if value < minimum:
        raise ProbeConfigError(
            field_name=field_name,
            value=value,
            constraint="must be >= " + str(minimum),
        )


def _check_float_table(field_name: str, values: tuple) -> None:
    """V1: every entry must be a finite float."""
    if not isinstance(values, tuple):
        raise ProbeConfigError(
            field_name=field_name,
            value=values,
            constraint="must be a tuple of float",
        )
    for index, value in enumerate(values):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ProbeConfigError(
                field_name=field_name + "[" + str(index) + "]",
                value=value,
                constraint="must be a float",
            )
        if not math.isfinite(value):
            raise ProbeConfigError(
                field_name=field_name + "[" + str(index) + "]",
                value=value,
                constraint="must be finite",
            )


@dataclass(frozen=True)
class ProbeConfig:
    """
    Immutable probe configuration.

    Invariants:
      - consistency_runs:   int, >= 1.
      - sample_size:        int, a multiple of len(denormal_seeds), >= it.
      - denormal_seeds:     non-empty tuple of finite floats.
      - special_values:     tuple of finite floats (may be empty).
      - sweep_count:        int, >= 0.
      - sweep_divisor:      finite, non-zero, (sweep_count - 1) * pi / divisor finite.
    """

    consistency_runs: int = CONSISTENCY_RUNS
    sample_size:      int = SAMPLE_SIZE
    denormal_seeds:   tuple = DENORMAL_SEEDS
    special_values:   tuple = TRANSCENDENTAL_SPECIAL_VALUES
    sweep_count:      int = TRANSCENDENTAL_SWEEP_COUNT
    sweep_divisor:    float = TRANSCENDENTAL_SWEEP_DIVISOR

    def __post_init__(self) -> None:
        # --- V1: finiteness ---
        _check_float_table("denormal_seeds", self.denormal_seeds)
        _check_float_table("special_values", self.special_values)
        if isinstance(self.sweep_divisor, bool) or not isinstance(self.sweep_divisor, (int, float)):
            raise ProbeConfigError(
                field_name="sweep_divisor",
                value=self.sweep_divisor,
                constraint="must be a float",
            )
        if not math.isfinite(self.sweep_divisor):
            raise ProbeConfigError(
                field_name="sweep_divisor",
                value=self.sweep_divisor,
                constraint="must be finite",
            )

        # --- V2: ranges ---
        _check_int_at_least("consistency_runs", self.consistency_runs, 1)
        _check_int_at_least("sweep_count", self.sweep_count, 0)
        if len(self.denormal_seeds) == 0:
            raise ProbeConfigError(
                field_name="denormal_seeds",
                value=self.denormal_seeds,
                constraint="must not be empty",
            )
        if self.sweep_divisor == 0.0:
            raise ProbeConfigError(
                field_name="sweep_divisor",
                value=self.sweep_divisor,
                constraint="must be non-zero",
            )

        # --- V3: cross-field ---
        _check_int_at_least("sample_size", self.sample_size, len(self.denormal_seeds))
        if self.sample_size % len(self.denormal_seeds) != 0:
            raise ProbeConfigError(
                field_name="sample_size",
                value=self.sample_size,
                constraint="must be a multiple of " + str(len(self.denormal_seeds)),
            )
        if self.sweep_count > 0:
            last_point = (self.sweep_count - 1) * math.pi / self.sweep_divisor
            if not math.isfinite(last_point):
                raise ProbeConfigError(
                    field_name="sweep_divisor",
                    value=self.sweep_divisor,
                    constraint="must keep every sweep point finite",
                )

    def summary(self) -> dict:
        """Plain-data view used by the harness records."""
        return {
            "consistency_runs": self.consistency_runs,
            "sample_size":      self.sample_size,
            "denormal_seeds":   [float(v).hex() for v in self.denormal_seeds],
            "special_values":   [float(v).hex() for v in self.special_values],
            "sweep_count":      self.sweep_count,
            "sweep_divisor":    float(self.sweep_divisor).hex(),
        }


DEFAULT_CONFIG: ProbeConfig = ProbeConfig()
