# sivd/verification/storage/record_serializer.py
# RecordSerializer -- writes a FingerprintRecord as JSON.
#
# All float values are serialized with float.hex() (lossless IEEE 754).
# +0.0, -0.0, +inf, -inf and NaN each serialize to distinct strings.
# File name: fingerprint_{arch}-{cores}c.json in the output directory.

import json
import math
from pathlib import Path
from typing import Sequence

from sivd.core.config import ProbeConfig
from sivd.core.consistency import VerificationResult
from sivd.core.fingerprint import bits_hex
from sivd.utils.constants import PREVIEW_COUNT
from sivd.verification.data_models.fingerprint_record import CaseRecord, FingerprintRecord
from sivd.verification.harness_version import (
    FINGERPRINT_ALGORITHM,
    HARNESS_VERSION,
    STORAGE_FORMAT_VERSION,
)
from sivd.verification.system_info import SystemInfo, record_filename


def serialize_float(value: float) -> str:
    """
    Lossless text form of a float. NaN keeps its payload via the raw bit
    pattern ('nan:7ff8000000000001').
    """
    if math.isnan(value):
        return "nan:" + bits_hex(value)
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return value.hex()


def case_record_from_result(
    result:        VerificationResult,
    preview_count: int = PREVIEW_COUNT,
) -> CaseRecord:
    report = result.report
    return CaseRecord(
        case_name=report.case_name,
        runs=report.runs,
        vector_length=len(result.first_run),
        tallies=tuple(report.tallies.items()),
        status=report.status,
        preview=tuple(serialize_float(v) for v in result.first_run[:preview_count]),
    )


def build_record(
    run_id:  str,
    system:  SystemInfo,
    config:  ProbeConfig,
    results: Sequence[VerificationResult],
    events:  Sequence[dict] = (),
) -> FingerprintRecord:
    return FingerprintRecord(
        run_id=run_id,
        harness_version=HARNESS_VERSION,
        algorithm=FINGERPRINT_ALGORITHM,
        system=system,
        config=config.summary(),
        cases=tuple(case_record_from_result(r) for r in results),
        events=tuple(events),
    )


def _serialize_case(rec: CaseRecord) -> dict:
    return {
        "case_name":     rec.case_name,
        "runs":          rec.runs,
        "vector_length": rec.vector_length,
        "tallies":       [{"fingerprint": fp, "count": count} for fp, count in rec.tallies],
        "status":        rec.status,
        "preview":       list(rec.preview),
    }


def record_to_dict(record: FingerprintRecord) -> dict:
    return {
        "format_version":  STORAGE_FORMAT_VERSION,
        "harness_version": record.harness_version,
        "algorithm":       record.algorithm,
        "run_id":          record.run_id,
        "system":          record.system.to_dict(),
        "config":          record.config,
        "case_count":      len(record.cases),
        "cases":           [_serialize_case(c) for c in record.cases],
        "events":          list(record.events),
    }


class RecordSerializer:
    """Serializes a FingerprintRecord to a JSON file in the output directory."""

    def serialize(self, record: FingerprintRecord, output_dir: Path) -> Path:
        output_dir.mkdir(parents=True, exist_ok=True)
        filepath = output_dir / record_filename(record.system)

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(record_to_dict(record), f, indent=2)

        return filepath
