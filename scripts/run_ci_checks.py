#!/usr/bin/env python3
# =============================================================================
# SIVD v1.0.0 -- CI CHECKS RUNNER
# File:   scripts/run_ci_checks.py
# =============================================================================
#
# PURPOSE
# -------
# Runs the CI gate in two sequential stages:
#   Stage 1: pytest (all tests + coverage report for the sivd package)
#   Stage 2: harness (every probe case must be CONSISTENT on this runner)
#
# Exit codes:
#   0 -- All stages passed.
#   1 -- Stage 1 (pytest) failed.
#   2 -- Stage 2 (harness) failed.
#
# Usage:
#   python scripts/run_ci_checks.py
# =============================================================================

from __future__ import annotations

import pathlib
import subprocess
import sys
import tempfile

_REPO_ROOT = pathlib.Path(__file__).parent.parent
_PYTHON    = sys.executable


def _separator(char: str = "=", width: int = 72) -> str:
    return char * width


def _run(cmd: list[str], label: str) -> int:
    """Run a subprocess command, stream stdout/stderr live, return exit code."""
    print(_separator())
    print(f"CI STAGE: {label}")
    print(f"CMD:      {' '.join(cmd)}")
    print(_separator("-"))
    sys.stdout.flush()

    proc = subprocess.run(cmd, cwd=str(_REPO_ROOT))
    return proc.returncode


def main() -> int:
    print(_separator())
    print("SIVD CI GATE -- starting")
    print(_separator())
    sys.stdout.flush()

    pytest_rc = _run(
        [_PYTHON, "-m", "pytest", "--cov=sivd", "--cov-report=term-missing"],
        "pytest (tests + coverage)",
    )
    if pytest_rc != 0:
        print(_separator())
        print(f"CI RESULT: FAIL  [stage=pytest  exit_code={pytest_rc}]")
        print(_separator())
        sys.stdout.flush()
        return 1

    print(_separator("-"))
    print("CI STAGE pytest: PASS")
    sys.stdout.flush()

    # Harness output goes to a scratch directory; only the exit code matters.
    with tempfile.TemporaryDirectory() as scratch:
        harness_rc = _run(
            [_PYTHON, "-m", "sivd.verification.run_harness", "--output-dir", scratch, "--json"],
            "harness (fingerprint consistency)",
        )

    if harness_rc != 0:
        print(_separator())
        print(f"CI RESULT: FAIL  [stage=harness  exit_code={harness_rc}]")
        print(_separator())
        sys.stdout.flush()
        return 2

    print(_separator())
    print("CI RESULT: PASS  [stages=pytest,harness]")
    print(_separator())
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
