# =============================================================================
# SIVD v1.0.0 -- CORE EXCEPTIONS
# File:   sivd/core/exceptions.py
# =============================================================================
#
# SCOPE
# -----
# Exception hierarchy for the probe core and the harness record layer.
# All exceptions are pure value objects: no side effects, no logging,
# no I/O of any kind.
#
# EXCEPTION HIERARCHY
# -------------------
#   SivdError(Exception)                       -- base; never raised directly
#     ProbeConfigError(SivdError)              -- invalid tunable parameter
#     InvariantViolationError(SivdError)       -- programming defect (fatal)
#     UnknownProbeCaseError(SivdError)         -- name outside the closed case set
#     GeneratorFailureError(SivdError)         -- a run raised; remaining runs aborted
#     RecordFormatError(SivdError)             -- stored record is corrupt
#
# MESSAGE CONTRACT
# ----------------
# Every exception message is:
#   - Deterministic: identical inputs -> identical message string.
#   - Explicit: field name and violating value included where applicable.
#   - ASCII-safe.
#   - Non-empty.
#
# =============================================================================

from __future__ import annotations

from typing import Any


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class SivdError(Exception):
    """
    Base class for all sivd exceptions.

    Never raised directly. Use a concrete subclass.

    Attributes:
        field_name:  Name of the offending field, or empty string if not
                     applicable.
        value:       The offending value, or None.
        message:     Human-readable description. Always non-empty.
    """

    def __init__(
        self,
        message:    str,
        field_name: str = "",
        value:      Any = None,
    ) -> None:
        if not isinstance(message, str) or not message:
            raise ValueError(
                "SivdError: message must be a non-empty string"
            )
        if not isinstance(field_name, str):
            raise ValueError(
                "SivdError: field_name must be a string"
            )
        super().__init__(message)
        self.field_name: str = field_name
        self.value:      Any = value
        self.message:    str = message

    def __repr__(self) -> str:
        return (
            self.__class__.__name__
            + "(field_name=" + repr(self.field_name)
            + ", value=" + repr(self.value)
            + ", message=" + repr(self.message)
            + ")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SivdError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.field_name == other.field_name
            and self.value == other.value
            and self.message == other.message
        )

    __hash__ = Exception.__hash__


# =============================================================================
# CONCRETE EXCEPTIONS
# =============================================================================

class ProbeConfigError(SivdError):
    """
    Raised when a tunable probe parameter is invalid.

    Message format:
        "ProbeConfigError: field '<field_name>' violates constraint
         '<constraint>': got <value>."
    """

    def __init__(self, field_name: str, value: Any, constraint: str) -> None:
        if not field_name:
            raise ValueError(
                "ProbeConfigError: field_name must be a non-empty string"
            )
        if not isinstance(constraint, str) or not constraint:
            raise ValueError(
                "ProbeConfigError: constraint must be a non-empty string"
            )
        message = (
            "ProbeConfigError: field '"
            + field_name
            + "' violates constraint '"
            + constraint
            + "': got "
            + repr(value)
            + "."
        )
        super().__init__(message=message, field_name=field_name, value=value)
        self.constraint: str = constraint


class InvariantViolationError(SivdError):
    """
    Raised when the core detects a programming defect, e.g. a generator
    returning a vector of the wrong length. Never recovered from; the
    harness aborts the whole run.
    """

    def __init__(self, invariant: str, field_name: str = "", value: Any = None) -> None:
        if not isinstance(invariant, str) or not invariant:
            raise ValueError(
                "InvariantViolationError: invariant must be a non-empty string"
            )
        message = "InvariantViolationError: " + invariant
        if field_name:
            message += " (field '" + field_name + "' = " + repr(value) + ")"
        super().__init__(message=message, field_name=field_name, value=value)
        self.invariant: str = invariant


class UnknownProbeCaseError(SivdError):
    """Raised when a case name does not resolve to a ProbeCase member."""

    def __init__(self, name: Any, known: tuple = ()) -> None:
        message = "UnknownProbeCaseError: no probe case named " + repr(name)
        if known:
            message += "; known cases: " + ", ".join(repr(k) for k in known)
        super().__init__(message=message, field_name="case", value=name)
        self.known: tuple = tuple(known)


class GeneratorFailureError(SivdError):
    """
    Raised when a generator invocation fails during consistency checking.

    The verifier aborts the remaining runs for the case; no partial
    report is produced. The original exception is chained as __cause__.

    Attributes:
        case_name:  Name of the case whose generator failed.
        run_index:  1-based index of the failing run.
        runs:       Total runs requested for the case.
    """

    def __init__(self, case_name: str, run_index: int, runs: int, cause: BaseException) -> None:
        message = (
            "GeneratorFailureError: case '"
            + case_name
            + "' failed on run "
            + str(run_index)
            + "/"
            + str(runs)
            + ": "
            + type(cause).__name__
            + ": "
            + str(cause)
        )
        super().__init__(message=message, field_name="run_index", value=run_index)
        self.case_name: str = case_name
        self.run_index: int = run_index
        self.runs:      int = runs


class RecordFormatError(SivdError):
    """Raised when a serialized fingerprint record cannot be trusted."""

    def __init__(self, detail: str, field_name: str = "", value: Any = None) -> None:
        if not isinstance(detail, str) or not detail:
            raise ValueError(
                "RecordFormatError: detail must be a non-empty string"
            )
        super().__init__(
            message="RecordFormatError: " + detail,
            field_name=field_name,
            value=value,
        )


# =============================================================================
# MODULE __all__
# =============================================================================

__all__ = [
    "SivdError",
    "ProbeConfigError",
    "InvariantViolationError",
    "UnknownProbeCaseError",
    "GeneratorFailureError",
    "RecordFormatError",
]
