# sivd/verification/run_harness.py
# Silicon Variation Detector -- Entry Point.
#
# Standard invocation:
#   python -m sivd.verification.run_harness --output-dir runs
#
# Cross-machine comparison against a record taken elsewhere:
#   python -m sivd.verification.run_harness --output-dir runs --json \
#       --compare path/to/fingerprint_aarch64-8c.json
#
# EXIT CODES:
#   0  -- Every case CONSISTENT (and, with --compare, every case matched).
#   1  -- DETERMINISM_BREACH or FINGERPRINT_MISMATCH.
#   2  -- CONFIG_INVALID, UNKNOWN_CASE or CONFIG_MISMATCH.
#   3  -- INVARIANT_VIOLATION, GENERATOR_FAILURE or DATA_CORRUPTION.
#   4  -- Internal harness error (including report I/O).
#
# Single-threaded. Cases run one after another; runs of a case run one
# after another.

import argparse
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

from sivd.core.config import ProbeConfig
from sivd.core.consistency import ConsistencyVerifier, VerificationResult
from sivd.core.exceptions import ProbeConfigError, RecordFormatError, SivdError, UnknownProbeCaseError
from sivd.core.logging_layer import (
    EVENT_CASE_ABORTED,
    EVENT_CASE_COMPLETED,
    EVENT_CASE_STARTED,
    EventLogger,
)
from sivd.core.probe_cases import ALL_CASES, ProbeCase
from sivd.utils.constants import CONSISTENCY_RUNS, DENORMAL_SEEDS, SAMPLE_SIZE
from sivd.verification.failure_handler import FailureHandler
from sivd.verification.harness_version import HARNESS_VERSION
from sivd.verification.record_comparator import RecordComparator, RecordComparison
from sivd.verification.storage.record_loader import RecordLoader
from sivd.verification.storage.record_serializer import RecordSerializer, build_record
from sivd.verification.storage.report_writer import ReportWriter
from sivd.verification.system_info import collect_system_info


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=f"High Complexity Silicon Variation Detector v{HARNESS_VERSION}",
        prog="python -m sivd.verification.run_harness",
    )
    parser.add_argument(
        "--runs",
        type=int,
        default=CONSISTENCY_RUNS,
        help=f"Runs per case for the consistency check (default {CONSISTENCY_RUNS}).",
    )
    parser.add_argument(
        "--sample-size",
        type=int,
        default=SAMPLE_SIZE,
        help=(
            "Total denormal-regime samples; must be a multiple of the seed "
            f"count ({len(DENORMAL_SEEDS)}) (default {SAMPLE_SIZE})."
        ),
    )
    parser.add_argument(
        "--case",
        action="append",
        default=None,
        help="Probe case to run (DENORMAL, TRANSCENDENTAL or display name). Repeatable. Default: all.",
    )
    parser.add_argument(
        "--output-dir",
        default=".",
        help="Directory for the report, JSON record and failure records.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Also write the lossless JSON fingerprint record.",
    )
    parser.add_argument(
        "--compare",
        default=None,
        help="Path to a JSON record from another machine to compare against.",
    )
    return parser.parse_args(argv)


def _resolve_cases(names: Optional[List[str]]) -> tuple:
    if not names:
        return ALL_CASES
    resolved = []
    for name in names:
        case = ProbeCase.from_name(name)
        if case not in resolved:
            resolved.append(case)
    return tuple(resolved)


def _print_comparison(comparison: RecordComparison, prior_path: Path) -> None:
    print(f"\nComparison against {prior_path}:")
    if not comparison.same_system:
        print("(prior record was taken on a different system)")
    if not comparison.same_config:
        print(
            "(prior record was taken with different workload parameters: "
            + ", ".join(comparison.config_changes) + ")"
        )
    if comparison.matched:
        print(f"-> All {comparison.cases} case(s) share the same fingerprint.")
        return
    for mismatch in comparison.mismatches:
        print(
            f"-> {mismatch.case_name}: {mismatch.reason} "
            f"(local={mismatch.local or '-'}, prior={mismatch.prior or '-'})"
        )


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Pipeline:
      config -> cases -> system info -> verify each case -> text report
      -> JSON record (optional) -> comparison (optional) -> exit code.

    Any hard failure goes through FailureHandler, which exits non-zero.
    """
    args       = _parse_args(argv)
    run_id     = "RUN-" + _now().strftime("%Y%m%d") + "-" + str(uuid.uuid4())[:8].upper()
    output_dir = Path(args.output_dir)
    fh         = FailureHandler(output_dir=output_dir, run_id=run_id)

    try:
        config = ProbeConfig(consistency_runs=args.runs, sample_size=args.sample_size)
        cases  = _resolve_cases(args.case)
    except (ProbeConfigError, UnknownProbeCaseError) as exc:
        fh.handle_from_exception(exc)

    print("High Complexity Silicon Variation Detector")
    print("=========================================")
    print(
        "This program performs intensive computational tests to detect "
        "subtle silicon-level differences"
    )
    print(
        f"Each test will be run {config.consistency_runs} times to verify "
        f"fingerprint consistency"
    )

    info = collect_system_info()
    print(info.describe())

    events   = EventLogger()
    verifier = ConsistencyVerifier(runs=config.consistency_runs)
    results: List[VerificationResult] = []

    for case in cases:
        print(f"\nRunning: {case.display_name}")
        events.log_event(EVENT_CASE_STARTED, {"case": case.display_name}, _now())

        def on_run_start(run_index: int, runs: int) -> None:
            print(f"Run {run_index}/{runs}...")
            sys.stdout.flush()

        def on_run(run_index: int, runs: int, fingerprint: str, _case: ProbeCase = case) -> None:
            print(f"-> Fingerprint: {fingerprint}")
            events.log_run(_case.display_name, run_index, runs, fingerprint, _now())

        try:
            result = verifier.verify_case(case, config, on_run=on_run, on_run_start=on_run_start)
        except SivdError as exc:
            events.log_event(EVENT_CASE_ABORTED, {"case": case.display_name, "detail": str(exc)}, _now())
            fh.handle_from_exception(exc, case_name=case.display_name)

        for tally in result.report.entries():
            print(
                f"-> Consistency: {tally.count}/{tally.runs} runs "
                f"({tally.percentage:.1f}%) - {tally.status}"
            )
        events.log_event(
            EVENT_CASE_COMPLETED,
            {"case": case.display_name, "status": result.report.status},
            _now(),
        )
        results.append(result)

    try:
        report_path = ReportWriter().write(info, results, output_dir)
    except OSError as exc:
        fh.handle("HARNESS_INTERNAL_ERROR", f"Failed to write report: {exc}")

    record = build_record(run_id, info, config, results, events.to_records())
    if args.json:
        try:
            record_path = RecordSerializer().serialize(record, output_dir)
        except OSError as exc:
            fh.handle("HARNESS_INTERNAL_ERROR", f"Failed to write JSON record: {exc}")
        print(f"JSON record: {record_path}")

    comparison = None
    if args.compare is not None:
        prior_path = Path(args.compare)
        try:
            prior = RecordLoader().load(prior_path)
        except RecordFormatError as exc:
            fh.handle_from_exception(exc)
        except OSError as exc:
            fh.handle("DATA_CORRUPTION", f"Cannot read prior record {prior_path}: {exc}")
        comparison = RecordComparator().compare(record, prior)
        _print_comparison(comparison, prior_path)

    print(f"\nTests completed! Results saved to {report_path}")
    print("Run this program on different machines to compare silicon-level differences.")

    inconsistent = [r.report.case_name for r in results if not r.report.is_consistent]
    if inconsistent:
        fh.handle(
            failure_type_id="DETERMINISM_BREACH",
            detail=f"{len(inconsistent)} case(s) INCONSISTENT: {', '.join(inconsistent)}",
            case_name=inconsistent[0],
        )

    if comparison is not None and not comparison.same_config:
        fh.handle(
            failure_type_id="CONFIG_MISMATCH",
            detail=(
                f"{args.compare} was taken with different workload parameters "
                f"({', '.join(comparison.config_changes)}); fingerprints are not comparable."
            ),
        )

    if comparison is not None and not comparison.matched:
        first = comparison.mismatches[0]
        fh.handle(
            failure_type_id="FINGERPRINT_MISMATCH",
            detail=(
                f"{len(comparison.mismatches)} case(s) differ from {args.compare}. "
                f"First: {first.case_name} ({first.reason})."
            ),
            case_name=first.case_name,
        )

    sys.exit(0)


if __name__ == "__main__":
    main()
