# sivd/verification/data_models/failure_record.py
# FailureRecord data class and failure type registry.

from dataclasses import dataclass


# ---------------------------------------------------------------------------
# FAILURE TYPE REGISTRY
# ---------------------------------------------------------------------------
# Exit code mapping:
#   Code 1 -- DETERMINISM_BREACH, FINGERPRINT_MISMATCH
#   Code 2 -- CONFIG_INVALID, UNKNOWN_CASE, CONFIG_MISMATCH
#   Code 3 -- INVARIANT_VIOLATION, GENERATOR_FAILURE, DATA_CORRUPTION
#   Code 4 -- Internal harness errors (including report I/O)

FAILURE_TYPES = {
    # Exit Code 1
    "DETERMINISM_BREACH":     1,    # a case was INCONSISTENT within this process
    "FINGERPRINT_MISMATCH":   1,    # --compare found a differing case
    # Exit Code 2
    "CONFIG_INVALID":         2,
    "UNKNOWN_CASE":           2,
    "CONFIG_MISMATCH":        2,    # --compare record used other workload parameters
    # Exit Code 3
    "INVARIANT_VIOLATION":    3,
    "GENERATOR_FAILURE":      3,
    "DATA_CORRUPTION":        3,
    # Exit Code 4
    "HARNESS_INTERNAL_ERROR": 4,
}


@dataclass
class FailureRecord:
    """
    Failure record written to the output directory on any hard failure.
    Write-once.

    Fields:
      failure_type_id  -- Key from FAILURE_TYPES.
      exit_code        -- Integer exit code (1-4).
      case_name        -- Probe case involved. Empty if not applicable.
      detected_at_iso  -- UTC ISO-8601 timestamp of detection.
      run_id           -- Identifier of this harness invocation.
      harness_version  -- HARNESS_VERSION at time of failure.
      detail           -- Human-readable description.
    """
    failure_type_id: str
    exit_code:       int
    case_name:       str
    detected_at_iso: str
    run_id:          str
    harness_version: str
    detail:          str
