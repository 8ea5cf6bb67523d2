import json

import pytest

from sivd.core.exceptions import (
    GeneratorFailureError,
    InvariantViolationError,
    ProbeConfigError,
    RecordFormatError,
    UnknownProbeCaseError,
)
from sivd.verification.data_models.failure_record import FAILURE_TYPES
from sivd.verification.failure_handler import FailureHandler, failure_type_for
from sivd.verification.harness_version import HARNESS_VERSION


def _only_record(directory):
    (path,) = list(directory.glob("*_FAIL_*.json"))
    return path, json.loads(path.read_text(encoding="utf-8"))


class TestFailureTypes:
    def test_exit_codes(self):
        assert FAILURE_TYPES["DETERMINISM_BREACH"] == 1
        assert FAILURE_TYPES["FINGERPRINT_MISMATCH"] == 1
        assert FAILURE_TYPES["CONFIG_INVALID"] == 2
        assert FAILURE_TYPES["UNKNOWN_CASE"] == 2
        assert FAILURE_TYPES["CONFIG_MISMATCH"] == 2
        assert FAILURE_TYPES["INVARIANT_VIOLATION"] == 3
        assert FAILURE_TYPES["GENERATOR_FAILURE"] == 3
        assert FAILURE_TYPES["DATA_CORRUPTION"] == 3
        assert FAILURE_TYPES["HARNESS_INTERNAL_ERROR"] == 4

    def test_exception_mapping(self):
        assert failure_type_for(ProbeConfigError("runs", 0, "must be >= 1")) == "CONFIG_INVALID"
        assert failure_type_for(UnknownProbeCaseError("x")) == "UNKNOWN_CASE"
        assert failure_type_for(InvariantViolationError("bad")) == "INVARIANT_VIOLATION"
        assert failure_type_for(GeneratorFailureError("c", 1, 3, ValueError("v"))) == "GENERATOR_FAILURE"
        assert failure_type_for(RecordFormatError("bad")) == "DATA_CORRUPTION"
        assert failure_type_for(KeyError("k")) == "HARNESS_INTERNAL_ERROR"


class TestHandle:
    def test_writes_record_and_exits(self, tmp_path, capsys):
        handler = FailureHandler(output_dir=tmp_path, run_id="RUN-T")
        with pytest.raises(SystemExit) as info:
            handler.handle("DETERMINISM_BREACH", "1 case(s) INCONSISTENT", case_name="Case A")
        assert info.value.code == 1

        path, record = _only_record(tmp_path)
        assert path.name.startswith("RUN-T_FAIL_")
        assert record["failure_type_id"] == "DETERMINISM_BREACH"
        assert record["exit_code"] == 1
        assert record["case_name"] == "Case A"
        assert record["run_id"] == "RUN-T"
        assert record["harness_version"] == HARNESS_VERSION
        assert record["detail"] == "1 case(s) INCONSISTENT"
        assert record["detected_at_iso"].endswith("+00:00")

        out = capsys.readouterr().out
        assert "HARNESS RESULT: FAIL" in out
        assert "Case A" in out

    def test_unknown_failure_type_exits_four(self, tmp_path):
        with pytest.raises(SystemExit) as info:
            FailureHandler(tmp_path, "RUN-T").handle("NOT_A_TYPE", "x")
        assert info.value.code == 4

    def test_unwritable_directory_exits_four(self, tmp_path, capsys):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(SystemExit) as info:
            FailureHandler(blocker / "sub", "RUN-T").handle("CONFIG_INVALID", "bad")
        assert info.value.code == 4
        assert "HARNESS_INTERNAL_ERROR" in capsys.readouterr().err


class TestHandleFromException:
    def test_generator_failure_carries_case(self, tmp_path):
        exc = GeneratorFailureError("Case B", 2, 3, ZeroDivisionError("div"))
        with pytest.raises(SystemExit) as info:
            FailureHandler(tmp_path, "RUN-T").handle_from_exception(exc)
        assert info.value.code == 3
        _, record = _only_record(tmp_path)
        assert record["case_name"] == "Case B"
        assert record["failure_type_id"] == "GENERATOR_FAILURE"
        assert "run 2/3" in record["detail"]

    def test_config_error(self, tmp_path):
        with pytest.raises(SystemExit) as info:
            FailureHandler(tmp_path, "RUN-T").handle_from_exception(
                ProbeConfigError("consistency_runs", 0, "must be >= 1")
            )
        assert info.value.code == 2
        _, record = _only_record(tmp_path)
        assert record["case_name"] == ""

    def test_explicit_case_name_wins(self, tmp_path):
        with pytest.raises(SystemExit):
            FailureHandler(tmp_path, "RUN-T").handle_from_exception(
                InvariantViolationError("bad"), case_name="Case C"
            )
        _, record = _only_record(tmp_path)
        assert record["case_name"] == "Case C"
