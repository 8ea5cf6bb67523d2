# sivd/core/probe_cases.py
# Closed set of probe cases. Each member names one workload and knows how
# to build its generator from a ProbeConfig.
#
# Adding a workload means adding a member here and a branch in
# ProbeCase.generator(); the exhaustiveness test in
# tests/unit/core/test_probe_cases.py fails until both exist.

from enum import Enum
from typing import Any, Optional

from sivd.core.config import DEFAULT_CONFIG, ProbeConfig
from sivd.core.exceptions import UnknownProbeCaseError
from sivd.core.generators import (
    DenormalGenerator,
    TranscendentalGenerator,
    VectorGenerator,
)


class ProbeCase(str, Enum):
    """
    Named probe workload. Inherits from str; the value is the display name
    used in reports and records.

    DENORMAL       -- subnormal-boundary recurrences (DenormalGenerator).
    TRANSCENDENTAL -- chained libm routines (TranscendentalGenerator).
    """
    DENORMAL       = "Enhanced Denormal Numbers Test"
    TRANSCENDENTAL = "Transcendental Function Test"

    @property
    def display_name(self) -> str:
        return self.value

    def generator(self, config: Optional[ProbeConfig] = None) -> VectorGenerator:
        """Build this case's generator from config (defaults when None)."""
        cfg = config if config is not None else DEFAULT_CONFIG
        if self is ProbeCase.DENORMAL:
            return DenormalGenerator(
                seeds=cfg.denormal_seeds,
                sample_size=cfg.sample_size,
            )
        if self is ProbeCase.TRANSCENDENTAL:
            return TranscendentalGenerator(
                special_values=cfg.special_values,
                sweep_count=cfg.sweep_count,
                sweep_divisor=cfg.sweep_divisor,
            )
        raise UnknownProbeCaseError(self.name, known=tuple(c.name for c in ProbeCase))

    @classmethod
    def from_name(cls, name: Any) -> "ProbeCase":
        """
        Resolve a member key ('DENORMAL', case-insensitive) or a display
        name ('Transcendental Function Test'). Raises UnknownProbeCaseError.
        """
        if isinstance(name, cls):
            return name
        if isinstance(name, str):
            key = name.strip().upper()
            if key in cls.__members__:
                return cls.__members__[key]
            for case in cls:
                if case.value == name:
                    return case
        raise UnknownProbeCaseError(name, known=tuple(c.name for c in cls))


ALL_CASES: tuple = tuple(ProbeCase)
