# sivd/verification/data_models/fingerprint_record.py
# Persisted view of one harness invocation: system metadata plus one
# CaseRecord per probe case. Produced by the harness, written by
# RecordSerializer, restored by RecordLoader, compared by RecordComparator.

from dataclasses import dataclass
from typing import Optional

from sivd.verification.system_info import SystemInfo


@dataclass(frozen=True)
class CaseRecord:
    """
    Result of one probe case.

    Fields:
      case_name     -- ProbeCase display name.
      runs          -- Number of runs executed.
      vector_length -- Length of every run's ResultVector.
      tallies       -- tuple of (fingerprint, count) in first-seen order.
      status        -- "CONSISTENT" or "INCONSISTENT".
      preview       -- First values of run 1 as float.hex() strings.
    """
    case_name:     str
    runs:          int
    vector_length: int
    tallies:       tuple
    status:        str
    preview:       tuple

    @property
    def consensus(self) -> Optional[str]:
        """Fingerprint observed on every run, or None when inconsistent."""
        if len(self.tallies) == 1 and self.tallies[0][1] == self.runs:
            return self.tallies[0][0]
        return None


@dataclass(frozen=True)
class FingerprintRecord:
    """
    Fields:
      run_id            -- Identifier of the harness invocation.
      harness_version   -- HARNESS_VERSION when written.
      algorithm         -- FINGERPRINT_ALGORITHM when written.
      system            -- SystemInfo of the probed machine.
      config            -- ProbeConfig.summary() of the run.
      cases             -- tuple of CaseRecord, in execution order.
      events            -- tuple of event dicts from the EventLogger.
    """
    run_id:          str
    harness_version: str
    algorithm:       str
    system:          SystemInfo
    config:          dict
    cases:           tuple
    events:          tuple = ()

    def case(self, case_name: str) -> Optional[CaseRecord]:
        for rec in self.cases:
            if rec.case_name == case_name:
                return rec
        return None
