# sivd/verification/storage/report_writer.py
# ReportWriter -- human-readable fingerprint report.
#
# Layout:
#   System Information block
#   per case:
#     case name
#     "Raw results from first run (K values, showing first P):"
#     index-aligned repr() of the first P values
#     "Consistency check over N runs:"
#     one "Fingerprint: ..." line per observed fingerprint
#
# Rendering is pure; only ReportWriter.write() touches the filesystem.

from pathlib import Path
from typing import Sequence

from sivd.core.consistency import FingerprintTally, VerificationResult
from sivd.utils.constants import PREVIEW_COUNT
from sivd.verification.system_info import SystemInfo, report_filename


def format_tally_line(tally: FingerprintTally) -> str:
    return (
        f"Fingerprint: {tally.fingerprint} - occurred {tally.count} out of "
        f"{tally.runs} times ({tally.percentage:.1f}%) - {tally.status}"
    )


def render_case(result: VerificationResult, preview_count: int = PREVIEW_COUNT) -> str:
    report = result.report
    first_run = result.first_run
    shown = min(preview_count, len(first_run))

    lines = [
        "",
        "",
        report.case_name,
        f"Raw results from first run ({len(first_run)} values, showing first {shown}):",
    ]
    for i in range(shown):
        lines.append(f"{i:4}: {first_run[i]!r}")
    lines.append("")
    lines.append(f"Consistency check over {report.runs} runs:")
    for tally in report.entries():
        lines.append(format_tally_line(tally))
    return "\n".join(lines) + "\n"


def render_report(
    info:          SystemInfo,
    results:       Sequence[VerificationResult],
    preview_count: int = PREVIEW_COUNT,
) -> str:
    return info.describe() + "".join(render_case(r, preview_count) for r in results)


class ReportWriter:
    """Writes the rendered report as fingerprint_{arch}-{cores}c.txt."""

    def __init__(self, preview_count: int = PREVIEW_COUNT):
        self._preview_count = preview_count

    def write(
        self,
        info:       SystemInfo,
        results:    Sequence[VerificationResult],
        output_dir: Path,
    ) -> Path:
        output_dir.mkdir(parents=True, exist_ok=True)
        filepath = output_dir / report_filename(info)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(render_report(info, results, self._preview_count))
        return filepath
