# sivd/core/__init__.py
# Probe core: generators, fingerprint calculator, consistency verifier.
# Pure computation. No file IO. No platform queries.

from .exceptions import (
    SivdError,
    ProbeConfigError,
    InvariantViolationError,
    UnknownProbeCaseError,
    GeneratorFailureError,
    RecordFormatError,
)
from .config import ProbeConfig, DEFAULT_CONFIG
from .generators import (
    ResultVector,
    VectorGenerator,
    DenormalGenerator,
    TranscendentalGenerator,
)
from .fingerprint import (
    calculate_fingerprint,
    float_bits,
    bits_hex,
    flip_least_significant_bit,
)
from .probe_cases import ProbeCase, ALL_CASES
from .consistency import (
    ConsistencyReport,
    ConsistencyVerifier,
    FingerprintTally,
    VerificationResult,
    VerifierState,
    STATUS_CONSISTENT,
    STATUS_INCONSISTENT,
)
from .logging_layer import EventLogger, Event, EventFilter, LoggingError

__all__ = [
    # Exceptions
    "SivdError",
    "ProbeConfigError",
    "InvariantViolationError",
    "UnknownProbeCaseError",
    "GeneratorFailureError",
    "RecordFormatError",
    # Configuration
    "ProbeConfig",
    "DEFAULT_CONFIG",
    # Generators
    "ResultVector",
    "VectorGenerator",
    "DenormalGenerator",
    "TranscendentalGenerator",
    # Fingerprint
    "calculate_fingerprint",
    "float_bits",
    "bits_hex",
    "flip_least_significant_bit",
    # Cases
    "ProbeCase",
    "ALL_CASES",
    # Verifier
    "ConsistencyReport",
    "ConsistencyVerifier",
    "FingerprintTally",
    "VerificationResult",
    "VerifierState",
    "STATUS_CONSISTENT",
    "STATUS_INCONSISTENT",
    # Event log
    "EventLogger",
    "Event",
    "EventFilter",
    "LoggingError",
]
