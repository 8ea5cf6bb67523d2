# sivd/core/consistency.py
# ConsistencyVerifier -- runs one probe case N times and tallies fingerprints.
#
# Single-threaded. Each run completes before the next begins. Runs of the
# same case are never parallelised: concurrent runs could disagree for
# reasons unrelated to the floating-point unit.
#
# No partial reports: if any run fails, the remaining runs are abandoned
# and a single GeneratorFailureError is raised.
#
# Classification depends only on the tally counts, never on the order in
# which fingerprints were first seen. First-seen order is kept for display.

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

from sivd.core.config import ProbeConfig
from sivd.core.exceptions import (
    GeneratorFailureError,
    InvariantViolationError,
    ProbeConfigError,
)
from sivd.core.fingerprint import calculate_fingerprint
from sivd.core.generators import ResultVector
from sivd.core.probe_cases import ProbeCase
from sivd.utils.constants import CONSISTENCY_RUNS

STATUS_CONSISTENT:   str = "CONSISTENT"
STATUS_INCONSISTENT: str = "INCONSISTENT"

# on_run_start(run_index, runs), invoked before each run begins.
# on_run(run_index, runs, fingerprint), invoked after each completed run.
RunStartCallback = Callable[[int, int], None]
RunCallback = Callable[[int, int, str], None]


class VerifierState(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    RUNNING     = "RUNNING"
    DONE        = "DONE"
    ABORTED     = "ABORTED"


@dataclass(frozen=True)
class FingerprintTally:
    """One row of a consistency report, ready for display."""
    fingerprint: str
    count:       int
    runs:        int
    percentage:  float
    status:      str


@dataclass(frozen=True)
class ConsistencyReport:
    """
    Fingerprint occurrence counts for one case run N times.

    Fields:
      case_name -- Display name of the probe case.
      runs      -- N, the number of runs executed.
      tallies   -- Read-only mapping fingerprint -> count. Counts sum to N.
                   Iteration order is first-seen order (display only).
    """
    case_name: str
    runs:      int
    tallies:   Mapping[str, int]

    def __post_init__(self) -> None:
        object.__setattr__(self, "tallies", MappingProxyType(dict(self.tallies)))
        if self.runs < 1:
            raise InvariantViolationError(
                "report must cover at least one run",
                field_name="runs",
                value=self.runs,
            )
        if any(count < 1 for count in self.tallies.values()):
            raise InvariantViolationError(
                "every tallied fingerprint must have occurred at least once",
                field_name="tallies",
                value=dict(self.tallies),
            )
        total = sum(self.tallies.values())
        if total != self.runs:
            raise InvariantViolationError(
                "tally counts must sum to the run count",
                field_name="tallies",
                value=total,
            )

    @classmethod
    def from_fingerprints(cls, case_name: str, fingerprints: Iterable[str]) -> "ConsistencyReport":
        counts: Dict[str, int] = {}
        runs = 0
        for fp in fingerprints:
            counts[fp] = counts.get(fp, 0) + 1
            runs += 1
        return cls(case_name=case_name, runs=runs, tallies=counts)

    @property
    def is_consistent(self) -> bool:
        """True iff exactly one fingerprint was observed, on all N runs."""
        return len(self.tallies) == 1 and next(iter(self.tallies.values())) == self.runs

    @property
    def status(self) -> str:
        return STATUS_CONSISTENT if self.is_consistent else STATUS_INCONSISTENT

    @property
    def consensus(self) -> Optional[str]:
        """The single fingerprint when consistent; None otherwise."""
        if not self.is_consistent:
            return None
        return next(iter(self.tallies))

    def percentage(self, fingerprint: str) -> float:
        return self.tallies.get(fingerprint, 0) / self.runs * 100.0

    def fingerprint_status(self, fingerprint: str) -> str:
        if self.tallies.get(fingerprint, 0) == self.runs:
            return STATUS_CONSISTENT
        return STATUS_INCONSISTENT

    def entries(self) -> Tuple[FingerprintTally, ...]:
        return tuple(
            FingerprintTally(
                fingerprint=fp,
                count=count,
                runs=self.runs,
                percentage=self.percentage(fp),
                status=self.fingerprint_status(fp),
            )
            for fp, count in self.tallies.items()
        )


@dataclass(frozen=True)
class VerificationResult:
    """
    Output of one verify() call.

    Fields:
      report       -- ConsistencyReport over all runs.
      first_run    -- ResultVector of run 1, kept for raw-value preview.
      fingerprints -- Per-run fingerprints in execution order.
    """
    report:       ConsistencyReport
    first_run:    ResultVector
    fingerprints: Tuple[str, ...]


class ConsistencyVerifier:
    """
    Executes a generator N times sequentially and aggregates fingerprints.

    State per verify() call:
      NOT_STARTED -> RUNNING(run_index) -> DONE
                                        -> ABORTED  (a run failed)
    """

    def __init__(self, runs: int = CONSISTENCY_RUNS):
        if isinstance(runs, bool) or not isinstance(runs, int) or runs < 1:
            raise ProbeConfigError(
                field_name="consistency_runs",
                value=runs,
                constraint="must be an int >= 1",
            )
        self._runs = runs
        self._state = VerifierState.NOT_STARTED
        self._run_index = 0

    @property
    def runs(self) -> int:
        return self._runs

    @property
    def state(self) -> VerifierState:
        return self._state

    @property
    def run_index(self) -> int:
        """1-based index of the current (or last executed) run; 0 before any run."""
        return self._run_index

    def verify(
        self,
        case_name:       str,
        generate:        Callable[[], Iterable[float]],
        expected_length: Optional[int] = None,
        on_run:          Optional[RunCallback] = None,
        on_run_start:    Optional[RunStartCallback] = None,
    ) -> VerificationResult:
        """
        Run generate() self.runs times and return the VerificationResult.

        on_run_start fires before generate() is called for a run; on_run
        fires once the run has been fingerprinted. An exception from either
        callback aborts the verification and propagates unchanged.

        Raises GeneratorFailureError if any run raises (remaining runs are
        not executed). Raises InvariantViolationError if a run returns a
        vector whose length differs from expected_length or from run 1.
        """
        if self._state is VerifierState.RUNNING:
            raise InvariantViolationError(
                "verify() is not re-entrant",
                field_name="state",
                value=self._state.value,
            )

        self._state = VerifierState.RUNNING
        self._run_index = 0
        fingerprints = []
        first_run: ResultVector = ()

        for run_index in range(1, self._runs + 1):
            self._run_index = run_index
            if on_run_start is not None:
                try:
                    on_run_start(run_index, self._runs)
                except Exception:
                    self._state = VerifierState.ABORTED
                    raise

            try:
                results = tuple(generate())
            except Exception as exc:
                self._state = VerifierState.ABORTED
                raise GeneratorFailureError(
                    case_name=case_name,
                    run_index=run_index,
                    runs=self._runs,
                    cause=exc,
                ) from exc

            required = expected_length if expected_length is not None else (
                len(first_run) if run_index > 1 else None
            )
            if required is not None and len(results) != required:
                self._state = VerifierState.ABORTED
                raise InvariantViolationError(
                    "case '" + case_name + "' run " + str(run_index)
                    + " produced " + str(len(results))
                    + " values, expected " + str(required),
                    field_name="vector_length",
                    value=len(results),
                )

            fingerprint = calculate_fingerprint(results)
            if run_index == 1:
                first_run = results
            fingerprints.append(fingerprint)

            if on_run is not None:
                try:
                    on_run(run_index, self._runs, fingerprint)
                except Exception:
                    self._state = VerifierState.ABORTED
                    raise

        self._state = VerifierState.DONE
        return VerificationResult(
            report=ConsistencyReport.from_fingerprints(case_name, fingerprints),
            first_run=first_run,
            fingerprints=tuple(fingerprints),
        )

    def verify_case(
        self,
        case:         ProbeCase,
        config:       Optional[ProbeConfig] = None,
        on_run:       Optional[RunCallback] = None,
        on_run_start: Optional[RunStartCallback] = None,
    ) -> VerificationResult:
        """Verify a ProbeCase with its generator built from config."""
        generator = case.generator(config)
        return self.verify(
            case_name=case.display_name,
            generate=generator.generate,
            expected_length=generator.expected_length(),
            on_run=on_run,
            on_run_start=on_run_start,
        )
