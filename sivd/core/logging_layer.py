# sivd/core/logging_layer.py
# Run event log for probe executions.
#
# Event-sourced, in-memory. No file IO. No global mutable state.
# All timestamps are caller-supplied. All hashes are deterministic.
# Each event hash also covers the previous event's hash, so the log is a
# chain: altering or dropping any stored event changes every later hash.
#
# Canonical import:
#   from sivd.core.logging_layer import EventLogger, Event, EventFilter

import hashlib
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

# Sentinel strings logged in place of non-finite floats. The event is never
# silently dropped.
_NAN_SENTINEL: str = "NaN_DETECTED"
_INF_SENTINEL: str = "Inf_DETECTED"

_HASH_SEP: str = "|"
_GENESIS_HASH: str = "0" * 64

EVENT_CASE_STARTED:   str = "CASE_STARTED"
EVENT_RUN_COMPLETED:  str = "RUN_COMPLETED"
EVENT_CASE_COMPLETED: str = "CASE_COMPLETED"
EVENT_CASE_ABORTED:   str = "CASE_ABORTED"


@dataclass(frozen=True)
class Event:
    """
    Immutable record of a single harness event.

    Fields
    ------
    id        : Deterministic identifier derived from the logger's counter.
    type      : Category string (CASE_STARTED, RUN_COMPLETED, ...).
    timestamp : Caller-supplied datetime. Never generated internally.
    data      : Sanitized key-value payload.
    hash      : SHA-256 hex digest over (previous hash, id, type, timestamp, data).
    """
    id: str
    type: str
    timestamp: datetime
    data: Dict[str, Any]
    hash: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id":        self.id,
            "type":      self.type,
            "timestamp": self.timestamp.isoformat(),
            "data":      dict(self.data),
            "hash":      self.hash,
        }


@dataclass
class EventFilter:
    """
    Filter for EventLogger.query_events(). Omitted fields
    apply no constraint; limit keeps the oldest matches.
    """
    event_type: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    limit: Optional[int] = None


def _sanitize_numeric(value: Any) -> Any:
    if isinstance(value, float):
        if math.isnan(value):
            return _NAN_SENTINEL
        if math.isinf(value):
            return _INF_SENTINEL
    return value


def _sanitize_data(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: _sanitize_numeric(v) for k, v in data.items()}


def _compute_hash(
    previous_hash: str,
    event_id: str,
    event_type: str,
    timestamp: datetime,
    data: Dict[str, Any],
) -> str:
    """
    SHA-256 over the fields in fixed order. repr(sorted(data.items())) is
    independent of dict insertion order.
    """
    preimage: str = _HASH_SEP.join((
        previous_hash,
        event_id,
        event_type,
        timestamp.isoformat(),
        repr(sorted(data.items())),
    ))
    return hashlib.sha256(preimage.encode("ascii", errors="replace")).hexdigest()


def _make_event_id(counter: int) -> str:
    return "EVT-{:016d}".format(counter)


class EventLogger:
    """
    Append-only event log with a deterministic hash chain.

    log_event() raises LoggingError instead of discarding an event.
    """

    def __init__(self) -> None:
        self._store: List[Event] = []
        self._counter: int = 0

    def log_event(self, event_type: str, data: Dict[str, Any], timestamp: datetime) -> str:
        """
        Record one event and return its id.

        Raises LoggingError if event_type is empty or timestamp is not a
        datetime.
        """
        if not event_type:
            raise LoggingError("event_type must be a non-empty string")
        if timestamp is None:
            raise LoggingError("timestamp must be caller-supplied; None is not permitted")
        if not isinstance(timestamp, datetime):
            raise LoggingError(
                "timestamp must be a datetime instance; got: {}".format(type(timestamp))
            )

        self._counter += 1
        event_id: str = _make_event_id(self._counter)
        sanitized: Dict[str, Any] = _sanitize_data(data)
        event_hash: str = _compute_hash(self.head_hash(), event_id, event_type, timestamp, sanitized)

        self._store.append(Event(
            id=event_id,
            type=event_type,
            timestamp=timestamp,
            data=sanitized,
            hash=event_hash,
        ))
        return event_id

    def log_run(
        self,
        case_name: str,
        run_index: int,
        runs: int,
        fingerprint: str,
        timestamp: datetime,
    ) -> str:
        """Record a RUN_COMPLETED event for one verifier run."""
        if not case_name:
            raise LoggingError("case_name must be a non-empty string")
        return self.log_event(
            EVENT_RUN_COMPLETED,
            {
                "case": case_name,
                "run_index": run_index,
                "runs": runs,
                "fingerprint": fingerprint,
            },
            timestamp,
        )

    def head_hash(self) -> str:
        """Hash of the newest event, or the genesis hash when empty."""
        if not self._store:
            return _GENESIS_HASH
        return self._store[-1].hash

    def verify_chain(self) -> bool:
        """Recompute every hash in order; True iff the stored chain is intact."""
        previous = _GENESIS_HASH
        for event in self._store:
            expected = _compute_hash(previous, event.id, event.type, event.timestamp, event.data)
            if expected != event.hash:
                return False
            previous = event.hash
        return True

    def query_events(self, filter: EventFilter) -> List[Event]:
        """Return events matching filter, oldest first. Raises LoggingError if filter is None."""
        if filter is None:
            raise LoggingError("filter must not be None")

        results: List[Event] = []
        for event in self._store:
            if filter.event_type is not None and event.type != filter.event_type:
                continue
            if filter.start_time is not None and event.timestamp < filter.start_time:
                continue
            if filter.end_time is not None and event.timestamp > filter.end_time:
                continue
            results.append(event)

        if filter.limit is not None:
            results = results[: filter.limit]

        return results

    def get_event_stream(self, start_time: datetime) -> Iterator[Event]:
        if start_time is None:
            raise LoggingError("start_time must be caller-supplied; None is not permitted")
        if not isinstance(start_time, datetime):
            raise LoggingError(
                "start_time must be a datetime instance; got: {}".format(type(start_time))
            )
        for event in self._store:
            if event.timestamp >= start_time:
                yield event

    def event_count(self) -> int:
        return len(self._store)

    def to_records(self) -> List[Dict[str, Any]]:
        """Plain-data copy of the log for JSON records."""
        return [event.to_dict() for event in self._store]


class LoggingError(Exception):
    """
    Raised by EventLogger when an invariant is violated. Never silently
    swallowed.
    """
