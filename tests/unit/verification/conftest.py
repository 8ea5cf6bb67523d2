import pytest

from sivd.core import (
    ConsistencyVerifier,
    ProbeCase,
    ProbeConfig,
    VerificationResult,
    flip_least_significant_bit,
)
from sivd.verification.system_info import SystemInfo

_VECTOR: tuple = (0.0, -0.0, 1.5, 5e-324, float("inf"), float("nan"))


@pytest.fixture
def system_info() -> SystemInfo:
    """Fixed 8-core x86_64 Linux machine."""
    return SystemInfo(os="linux", arch="x86_64", cores=8)


@pytest.fixture
def small_config() -> ProbeConfig:
    """Reduced workload so harness-level tests stay fast."""
    return ProbeConfig(consistency_runs=2, sample_size=60, sweep_count=5)


@pytest.fixture
def consistent_result() -> VerificationResult:
    """Three identical runs of a short vector with every special value class."""
    return ConsistencyVerifier(runs=3).verify("Stable Case", lambda: _VECTOR)


@pytest.fixture
def inconsistent_result() -> VerificationResult:
    """Three runs of which the second flips one bit: tallies 2/1."""
    calls = []

    def generate():
        calls.append(1)
        if len(calls) == 2:
            return (0.0, -0.0, flip_least_significant_bit(1.5)) + _VECTOR[3:]
        return _VECTOR

    return ConsistencyVerifier(runs=3).verify("Flaky Case", generate)


@pytest.fixture
def case_results(small_config):
    """Real results for every probe case under the reduced workload."""
    verifier = ConsistencyVerifier(runs=small_config.consistency_runs)
    return [verifier.verify_case(case, small_config) for case in ProbeCase]
