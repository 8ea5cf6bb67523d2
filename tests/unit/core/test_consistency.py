import pytest

from sivd.core import (
    ConsistencyReport,
    ConsistencyVerifier,
    GeneratorFailureError,
    InvariantViolationError,
    ProbeCase,
    ProbeConfig,
    ProbeConfigError,
    VerifierState,
    calculate_fingerprint,
    flip_least_significant_bit,
)
from sivd.core.consistency import STATUS_CONSISTENT, STATUS_INCONSISTENT


# =============================================================================
# SHARED HELPERS
# =============================================================================

_BASE: tuple = (1.0, -0.0, 2.5e-310, 3.141592653589793, 1e300)
_BASE_FP: str = calculate_fingerprint(_BASE)


def _perturbed(vector: tuple, index: int = 2) -> tuple:
    return vector[:index] + (flip_least_significant_bit(vector[index]),) + vector[index + 1:]


class _CountingGenerator:
    """Returns _BASE, except on the runs listed in perturb_runs."""

    def __init__(self, perturb_runs=(), fail_run=None, vector=_BASE):
        self.calls = 0
        self._perturb_runs = set(perturb_runs)
        self._fail_run = fail_run
        self._vector = vector

    def __call__(self):
        self.calls += 1
        if self.calls == self._fail_run:
            raise ZeroDivisionError("boom")
        if self.calls in self._perturb_runs:
            return _perturbed(self._vector)
        return self._vector


# =============================================================================
# ConsistencyReport
# =============================================================================

class TestConsistencyReport:
    def test_single_fingerprint_all_runs_is_consistent(self):
        report = ConsistencyReport(case_name="c", runs=3, tallies={"a" * 16: 3})
        assert report.is_consistent
        assert report.status == STATUS_CONSISTENT
        assert report.percentage("a" * 16) == 100.0
        assert report.consensus == "a" * 16

    def test_two_fingerprints_is_inconsistent(self):
        report = ConsistencyReport(case_name="c", runs=3, tallies={"x": 2, "y": 1})
        assert not report.is_consistent
        assert report.status == STATUS_INCONSISTENT
        assert report.consensus is None

    def test_percentages(self):
        report = ConsistencyReport(case_name="c", runs=3, tallies={"x": 2, "y": 1})
        assert f"{report.percentage('x'):.1f}" == "66.7"
        assert f"{report.percentage('y'):.1f}" == "33.3"
        assert report.percentage("missing") == 0.0

    def test_classification_independent_of_insertion_order(self):
        a = ConsistencyReport(case_name="c", runs=3, tallies={"x": 2, "y": 1})
        b = ConsistencyReport(case_name="c", runs=3, tallies={"y": 1, "x": 2})
        assert a.status == b.status
        assert a.percentage("x") == b.percentage("x")
        assert a.percentage("y") == b.percentage("y")
        assert a == b

    def test_entries_keep_first_seen_order(self):
        report = ConsistencyReport(case_name="c", runs=3, tallies={"y": 1, "x": 2})
        assert [e.fingerprint for e in report.entries()] == ["y", "x"]

    def test_entry_status_per_fingerprint(self):
        report = ConsistencyReport(case_name="c", runs=3, tallies={"x": 2, "y": 1})
        assert all(e.status == STATUS_INCONSISTENT for e in report.entries())

    def test_tallies_are_read_only(self):
        report = ConsistencyReport(case_name="c", runs=1, tallies={"x": 1})
        with pytest.raises(TypeError):
            report.tallies["y"] = 1  # type: ignore[index]

    def test_tallies_copied_from_input(self):
        source = {"x": 1}
        report = ConsistencyReport(case_name="c", runs=1, tallies=source)
        source["x"] = 5
        assert report.tallies["x"] == 1

    def test_counts_must_sum_to_runs(self):
        with pytest.raises(InvariantViolationError, match="sum to the run count"):
            ConsistencyReport(case_name="c", runs=3, tallies={"x": 2})

    def test_runs_must_be_positive(self):
        with pytest.raises(InvariantViolationError):
            ConsistencyReport(case_name="c", runs=0, tallies={})

    def test_zero_count_rejected(self):
        with pytest.raises(InvariantViolationError):
            ConsistencyReport(case_name="c", runs=1, tallies={"x": 1, "y": 0})

    def test_from_fingerprints(self):
        report = ConsistencyReport.from_fingerprints("c", ["a", "b", "a", "a"])
        assert report.runs == 4
        assert dict(report.tallies) == {"a": 3, "b": 1}


# =============================================================================
# ConsistencyVerifier
# =============================================================================

class TestVerifierConstruction:
    def test_default_runs_is_three(self):
        assert ConsistencyVerifier().runs == 3

    @pytest.mark.parametrize("runs", [0, -1, True, 2.0, "3"])
    def test_invalid_runs_rejected(self, runs):
        with pytest.raises(ProbeConfigError):
            ConsistencyVerifier(runs=runs)

    def test_initial_state(self):
        verifier = ConsistencyVerifier()
        assert verifier.state is VerifierState.NOT_STARTED
        assert verifier.run_index == 0


class TestVerifierRuns:
    def test_stable_generator_is_consistent(self):
        result = ConsistencyVerifier(runs=3).verify("c", _CountingGenerator())
        assert dict(result.report.tallies) == {_BASE_FP: 3}
        assert result.report.status == STATUS_CONSISTENT
        assert result.report.percentage(_BASE_FP) == 100.0

    def test_perturbed_second_run_is_inconsistent(self):
        result = ConsistencyVerifier(runs=3).verify("c", _CountingGenerator(perturb_runs=(2,)))
        other = calculate_fingerprint(_perturbed(_BASE))
        assert dict(result.report.tallies) == {_BASE_FP: 2, other: 1}
        assert result.report.status == STATUS_INCONSISTENT
        assert result.fingerprints == (_BASE_FP, other, _BASE_FP)

    def test_first_run_is_retained(self):
        result = ConsistencyVerifier(runs=3).verify("c", _CountingGenerator(perturb_runs=(2, 3)))
        assert calculate_fingerprint(result.first_run) == _BASE_FP

    def test_first_run_is_a_tuple(self):
        result = ConsistencyVerifier(runs=1).verify("c", lambda: [1.0, 2.0])
        assert result.first_run == (1.0, 2.0)

    def test_single_run_is_trivially_consistent(self):
        result = ConsistencyVerifier(runs=1).verify("c", _CountingGenerator())
        assert result.report.is_consistent
        assert result.report.percentage(_BASE_FP) == 100.0

    @pytest.mark.parametrize("runs", [1, 2, 3, 4, 7])
    def test_counts_sum_to_runs(self, runs):
        gen = _CountingGenerator(perturb_runs=range(2, runs + 1, 2))
        report = ConsistencyVerifier(runs=runs).verify("c", gen).report
        assert sum(report.tallies.values()) == runs
        assert report.is_consistent == (len(report.tallies) == 1)

    def test_generator_called_once_per_run(self):
        gen = _CountingGenerator()
        ConsistencyVerifier(runs=5).verify("c", gen)
        assert gen.calls == 5

    def test_state_done_after_verify(self):
        verifier = ConsistencyVerifier(runs=2)
        verifier.verify("c", _CountingGenerator())
        assert verifier.state is VerifierState.DONE
        assert verifier.run_index == 2

    def test_state_running_during_callback(self):
        verifier = ConsistencyVerifier(runs=3)
        seen = []

        def on_run(run_index, runs, fingerprint):
            seen.append((verifier.state, verifier.run_index, run_index, runs, fingerprint))

        verifier.verify("c", _CountingGenerator(), on_run=on_run)
        assert seen == [
            (VerifierState.RUNNING, 1, 1, 3, _BASE_FP),
            (VerifierState.RUNNING, 2, 2, 3, _BASE_FP),
            (VerifierState.RUNNING, 3, 3, 3, _BASE_FP),
        ]

    def test_verifier_is_reusable(self):
        verifier = ConsistencyVerifier(runs=2)
        first = verifier.verify("a", _CountingGenerator())
        second = verifier.verify("b", _CountingGenerator(perturb_runs=(2,)))
        assert first.report.is_consistent
        assert not second.report.is_consistent

    def test_empty_vector_is_valid(self):
        result = ConsistencyVerifier(runs=2).verify("c", lambda: ())
        assert dict(result.report.tallies) == {"cbf29ce484222325": 2}


class TestVerifierFailures:
    def test_generator_failure_aborts_remaining_runs(self):
        gen = _CountingGenerator(fail_run=2)
        verifier = ConsistencyVerifier(runs=3)
        with pytest.raises(GeneratorFailureError) as info:
            verifier.verify("case-x", gen)
        assert gen.calls == 2
        assert info.value.run_index == 2
        assert info.value.runs == 3
        assert info.value.case_name == "case-x"
        assert isinstance(info.value.__cause__, ZeroDivisionError)
        assert verifier.state is VerifierState.ABORTED

    def test_failure_on_first_run(self):
        with pytest.raises(GeneratorFailureError, match="run 1/3"):
            ConsistencyVerifier(runs=3).verify("c", _CountingGenerator(fail_run=1))

    def test_wrong_expected_length_is_invariant_violation(self):
        verifier = ConsistencyVerifier(runs=3)
        with pytest.raises(InvariantViolationError, match="expected 4"):
            verifier.verify("c", _CountingGenerator(), expected_length=4)
        assert verifier.state is VerifierState.ABORTED

    def test_length_change_between_runs_is_invariant_violation(self):
        calls = []

        def gen():
            calls.append(1)
            return (1.0,) * len(calls)

        with pytest.raises(InvariantViolationError):
            ConsistencyVerifier(runs=3).verify("c", gen)

    def test_callback_error_propagates_and_aborts(self):
        verifier = ConsistencyVerifier(runs=3)

        def on_run(run_index, runs, fingerprint):
            raise RuntimeError("sink failed")

        with pytest.raises(RuntimeError, match="sink failed"):
            verifier.verify("c", _CountingGenerator(), on_run=on_run)
        assert verifier.state is VerifierState.ABORTED


class TestVerifyCase:
    def test_small_transcendental_case(self):
        config = ProbeConfig(sweep_count=10)
        result = ConsistencyVerifier(runs=2).verify_case(ProbeCase.TRANSCENDENTAL, config)
        assert result.report.case_name == "Transcendental Function Test"
        assert len(result.first_run) == (17 + 10) * 9
        assert result.report.is_consistent

    def test_small_denormal_case(self):
        config = ProbeConfig(sample_size=60)
        result = ConsistencyVerifier(runs=2).verify_case(ProbeCase.DENORMAL, config)
        assert len(result.first_run) == 60
        assert result.report.is_consistent


class TestRunStartHook:
    def test_start_hook_fires_before_each_run(self):
        verifier = ConsistencyVerifier(runs=2)
        order = []
        generator = _CountingGenerator()

        def generate():
            order.append(("gen", verifier.run_index))
            return generator()

        def on_run_start(run_index, runs):
            order.append(("start", run_index))

        def on_run(run_index, runs, fingerprint):
            order.append(("end", run_index))

        verifier.verify("c", generate, on_run=on_run, on_run_start=on_run_start)
        assert order == [
            ("start", 1), ("gen", 1), ("end", 1),
            ("start", 2), ("gen", 2), ("end", 2),
        ]

    def test_state_running_in_start_hook(self):
        verifier = ConsistencyVerifier(runs=2)
        seen = []

        def on_run_start(run_index, runs):
            seen.append((verifier.state, verifier.run_index, run_index, runs))

        verifier.verify("c", _CountingGenerator(), on_run_start=on_run_start)
        assert seen == [
            (VerifierState.RUNNING, 1, 1, 2),
            (VerifierState.RUNNING, 2, 2, 2),
        ]

    def test_start_hook_error_aborts_before_generating(self):
        verifier = ConsistencyVerifier(runs=3)
        generator = _CountingGenerator()

        def on_run_start(run_index, runs):
            if run_index == 2:
                raise RuntimeError("console closed")

        with pytest.raises(RuntimeError, match="console closed"):
            verifier.verify("c", generator, on_run_start=on_run_start)
        assert verifier.state is VerifierState.ABORTED
        assert generator.calls == 1

    def test_verify_case_passes_start_hook_through(self):
        starts = []
        ConsistencyVerifier(runs=2).verify_case(
            ProbeCase.DENORMAL,
            ProbeConfig(sample_size=6),
            on_run_start=lambda run_index, runs: starts.append((run_index, runs)),
        )
        assert starts == [(1, 2), (2, 2)]
