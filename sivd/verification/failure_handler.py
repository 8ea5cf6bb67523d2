# sivd/verification/failure_handler.py
# FailureHandler -- hard failure policy for the harness.
#
# Exit with a non-zero code on any hard failure.
# No catch-and-continue. No retry. No fallback.
# Invoked immediately on detection; no further case runs afterwards.
# If the handler itself fails to write its record, partial information
# goes to stderr and the process exits 4.

import json
import sys
from datetime import datetime, timezone
from pathlib import Path

from sivd.core.exceptions import (
    GeneratorFailureError,
    InvariantViolationError,
    ProbeConfigError,
    RecordFormatError,
    UnknownProbeCaseError,
)
from sivd.verification.data_models.failure_record import FailureRecord, FAILURE_TYPES
from sivd.verification.harness_version import HARNESS_VERSION

# Most specific class first.
_EXCEPTION_FAILURE_TYPES = (
    (ProbeConfigError,        "CONFIG_INVALID"),
    (UnknownProbeCaseError,   "UNKNOWN_CASE"),
    (InvariantViolationError, "INVARIANT_VIOLATION"),
    (GeneratorFailureError,   "GENERATOR_FAILURE"),
    (RecordFormatError,       "DATA_CORRUPTION"),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def failure_type_for(exc: BaseException) -> str:
    for exc_type, failure_type_id in _EXCEPTION_FAILURE_TYPES:
        if isinstance(exc, exc_type):
            return failure_type_id
    return "HARNESS_INTERNAL_ERROR"


class FailureHandler:
    """
    On any hard failure:
      1. Construct FailureRecord.
      2. Write FailureRecord JSON to the output directory.
      3. Print failure summary to stdout.
      4. Call sys.exit(exit_code) as the last operation.
    """

    def __init__(self, output_dir: Path, run_id: str):
        self._output_dir = output_dir
        self._run_id     = run_id

    def handle(
        self,
        failure_type_id: str,
        detail:          str,
        case_name:       str = "",
    ) -> None:
        """Execute the hard failure policy. This method does not return."""
        exit_code   = FAILURE_TYPES.get(failure_type_id, 4)
        detected_at = _now_iso()

        record = FailureRecord(
            failure_type_id=failure_type_id,
            exit_code=exit_code,
            case_name=case_name,
            detected_at_iso=detected_at,
            run_id=self._run_id,
            harness_version=HARNESS_VERSION,
            detail=detail,
        )

        record_dict = {
            "failure_type_id": record.failure_type_id,
            "exit_code":       record.exit_code,
            "case_name":       record.case_name,
            "detected_at_iso": record.detected_at_iso,
            "run_id":          record.run_id,
            "harness_version": record.harness_version,
            "detail":          record.detail,
        }

        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            ts_compact = detected_at.replace(":", "").replace("-", "").replace("+", "Z")[:15]
            filepath   = self._output_dir / f"{self._run_id}_FAIL_{ts_compact}.json"

            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(record_dict, f, indent=4)

            print(
                f"HARNESS RESULT: FAIL\n"
                f"Failure type:   {failure_type_id}\n"
                f"Exit code:      {exit_code}\n"
                f"Case:           {case_name or '(not applicable)'}\n"
                f"Detail:         {detail[:200]}\n"
                f"Record written: {filepath}"
            )

        except OSError as exc:
            sys.stderr.write(
                f"HARNESS_INTERNAL_ERROR: FailureHandler failed to write record: {exc}\n"
                f"Original failure: {failure_type_id} -- {detail}\n"
            )
            sys.exit(4)

        sys.exit(exit_code)

    def handle_from_exception(self, exc: BaseException, case_name: str = "") -> None:
        """Map an exception to its failure type and invoke handle()."""
        if not case_name:
            case_name = getattr(exc, "case_name", "")
        self.handle(
            failure_type_id=failure_type_for(exc),
            detail=str(exc),
            case_name=case_name,
        )
