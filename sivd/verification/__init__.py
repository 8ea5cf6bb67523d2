# sivd/verification/__init__.py
# Silicon Variation Detector harness: runs the probe cases, writes the
# text report and JSON record, compares records across machines.
#
# ENTRY POINT:
#   python -m sivd.verification.run_harness [--runs N] [--sample-size N]
#       [--case NAME ...] [--output-dir DIR] [--json] [--compare RECORD]

from .harness_version import (
    HARNESS_VERSION,
    STORAGE_FORMAT_VERSION,
    FINGERPRINT_ALGORITHM,
)
from .system_info import SystemInfo, collect_system_info, report_filename
from .failure_handler import FailureHandler
from .record_comparator import RecordComparator, RecordComparison, FingerprintMismatch
from .run_harness import main as run_harness

__all__ = [
    # Version constants
    "HARNESS_VERSION",
    "STORAGE_FORMAT_VERSION",
    "FINGERPRINT_ALGORITHM",
    # Pipeline components
    "SystemInfo",
    "collect_system_info",
    "report_filename",
    "FailureHandler",
    "RecordComparator",
    "RecordComparison",
    "FingerprintMismatch",
    # Entry point
    "run_harness",
]
