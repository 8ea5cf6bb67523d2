# sivd/verification/storage/record_loader.py
# RecordLoader -- loads and validates a serialized FingerprintRecord.
#
# Validates format_version, algorithm, case_count and per-case tallies.
# Any structural problem raises RecordFormatError; the harness maps it to
# DATA_CORRUPTION. A record is never partially trusted.

import json
import math
import re
from pathlib import Path

from sivd.core.exceptions import RecordFormatError
from sivd.core.fingerprint import float_from_bits
from sivd.verification.data_models.fingerprint_record import CaseRecord, FingerprintRecord
from sivd.verification.harness_version import FINGERPRINT_ALGORITHM, STORAGE_FORMAT_VERSION
from sivd.verification.system_info import SystemInfo

_FINGERPRINT_RE = re.compile(r"^[0-9a-f]{16}$")
# serialize_float writes NaN as "nan:" plus the 64 payload bits in 16 hex digits.
_NAN_RE = re.compile(r"^nan:[0-9a-f]{16}$")


def deserialize_float(value: str) -> float:
    """Inverse of serialize_float()."""
    if not isinstance(value, str):
        raise RecordFormatError("float value must be a string", field_name="preview", value=value)
    if value.startswith("nan:"):
        if not _NAN_RE.match(value):
            raise RecordFormatError("malformed NaN bit pattern", field_name="preview", value=value)
        result = float_from_bits(int(value[4:], 16))
        if not math.isnan(result):
            raise RecordFormatError("NaN bit pattern does not encode a NaN", field_name="preview", value=value)
        return result
    if value == "inf":
        return math.inf
    if value == "-inf":
        return -math.inf
    try:
        return float.fromhex(value)
    except ValueError:
        raise RecordFormatError("malformed hex float", field_name="preview", value=value)


def _require(payload: dict, key: str, kind: type, where: str):
    if not isinstance(payload, dict) or key not in payload:
        raise RecordFormatError("missing field '" + key + "' in " + where, field_name=key)
    value = payload[key]
    if kind is int and isinstance(value, bool):
        raise RecordFormatError("field '" + key + "' in " + where + " must be int", field_name=key, value=value)
    if not isinstance(value, kind):
        raise RecordFormatError(
            "field '" + key + "' in " + where + " must be " + kind.__name__,
            field_name=key,
            value=value,
        )
    return value


def _load_case(payload: dict, index: int) -> CaseRecord:
    where = "cases[" + str(index) + "]"
    case_name     = _require(payload, "case_name", str, where)
    runs          = _require(payload, "runs", int, where)
    vector_length = _require(payload, "vector_length", int, where)
    status        = _require(payload, "status", str, where)
    raw_tallies   = _require(payload, "tallies", list, where)
    raw_preview   = _require(payload, "preview", list, where)

    tallies = []
    for t_index, entry in enumerate(raw_tallies):
        t_where = where + ".tallies[" + str(t_index) + "]"
        fingerprint = _require(entry, "fingerprint", str, t_where)
        count       = _require(entry, "count", int, t_where)
        if not _FINGERPRINT_RE.match(fingerprint):
            raise RecordFormatError("malformed fingerprint in " + t_where, field_name="fingerprint", value=fingerprint)
        if count < 1:
            raise RecordFormatError("non-positive count in " + t_where, field_name="count", value=count)
        tallies.append((fingerprint, count))

    total = sum(count for _, count in tallies)
    if total != runs:
        raise RecordFormatError(
            "tally counts in " + where + " sum to " + str(total) + ", expected " + str(runs),
            field_name="tallies",
            value=total,
        )

    # Parsed to validate; stored in canonical string form.
    for value in raw_preview:
        deserialize_float(value)

    return CaseRecord(
        case_name=case_name,
        runs=runs,
        vector_length=vector_length,
        tallies=tuple(tallies),
        status=status,
        preview=tuple(raw_preview),
    )


class RecordLoader:
    """Loads a FingerprintRecord written by RecordSerializer."""

    def load(self, filepath: Path) -> FingerprintRecord:
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except json.JSONDecodeError as exc:
            raise RecordFormatError("record is not valid JSON: " + str(exc), value=str(filepath))
        except UnicodeDecodeError as exc:
            raise RecordFormatError("record is not valid UTF-8: " + str(exc), value=str(filepath))
        return self.from_dict(payload)

    def from_dict(self, payload: dict) -> FingerprintRecord:
        where = "record"
        format_version = _require(payload, "format_version", str, where)
        if format_version != STORAGE_FORMAT_VERSION:
            raise RecordFormatError(
                "unsupported format_version",
                field_name="format_version",
                value=format_version,
            )
        algorithm = _require(payload, "algorithm", str, where)
        if algorithm != FINGERPRINT_ALGORITHM:
            raise RecordFormatError(
                "record was hashed with a different algorithm",
                field_name="algorithm",
                value=algorithm,
            )

        system_payload = _require(payload, "system", dict, where)
        system = SystemInfo(
            os=_require(system_payload, "os", str, "system"),
            arch=_require(system_payload, "arch", str, "system"),
            cores=_require(system_payload, "cores", int, "system"),
        )

        raw_cases  = _require(payload, "cases", list, where)
        case_count = _require(payload, "case_count", int, where)
        if case_count != len(raw_cases):
            raise RecordFormatError(
                "case_count does not match number of cases",
                field_name="case_count",
                value=case_count,
            )

        return FingerprintRecord(
            run_id=_require(payload, "run_id", str, where),
            harness_version=_require(payload, "harness_version", str, where),
            algorithm=algorithm,
            system=system,
            config=_require(payload, "config", dict, where),
            cases=tuple(_load_case(c, i) for i, c in enumerate(raw_cases)),
            events=tuple(payload.get("events", ())),
        )
