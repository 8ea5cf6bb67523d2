# sivd/verification/record_comparator.py
# RecordComparator -- case-by-case comparison of two fingerprint records,
# typically one taken on this machine and one loaded from another.
#
# Fingerprints are compared as exact strings. A case that is INCONSISTENT
# on either side has no consensus fingerprint and always reports a
# mismatch: an unstable machine cannot vouch for its own fingerprint.
#
# Records taken with different workload parameters are not comparable.
# Every case of such a pair is reported as CONFIG_MISMATCH and no
# fingerprint comparison is made. The run count is not a workload
# parameter and may differ.

from dataclasses import dataclass
from typing import List, Tuple

from sivd.verification.data_models.fingerprint_record import FingerprintRecord

MISMATCH_DIFFERENT_FINGERPRINT: str = "DIFFERENT_FINGERPRINT"
MISMATCH_LOCAL_INCONSISTENT:    str = "LOCAL_INCONSISTENT"
MISMATCH_PRIOR_INCONSISTENT:    str = "PRIOR_INCONSISTENT"
MISMATCH_MISSING_LOCAL:         str = "MISSING_LOCAL"
MISMATCH_MISSING_PRIOR:         str = "MISSING_PRIOR"
MISMATCH_CONFIG:                str = "CONFIG_MISMATCH"

# Config summary keys that do not change any generated vector.
_NON_WORKLOAD_KEYS = frozenset({"consistency_runs"})


@dataclass(frozen=True)
class FingerprintMismatch:
    """
    One case on which two records disagree.

    local / prior hold the consensus fingerprint of each side, or an empty
    string when the side is missing the case or is inconsistent.
    """
    case_name: str
    local:     str
    prior:     str
    reason:    str


@dataclass(frozen=True)
class RecordComparison:
    """
    Fields:
      matched        -- True iff every case agrees.
      cases          -- Number of distinct case names compared.
      mismatches     -- tuple of FingerprintMismatch. Empty on match.
      same_system    -- True iff os, arch and cores are equal on both sides.
      same_config    -- True iff both records used the same workload.
      config_changes -- Sorted workload keys whose values differ.
    """
    matched:        bool
    cases:          int
    mismatches:     tuple
    same_system:    bool
    same_config:    bool = True
    config_changes: tuple = ()


def workload_differences(local_config: dict, prior_config: dict) -> Tuple[str, ...]:
    """Keys of the config summaries that differ, ignoring the run count."""
    keys = (set(local_config) | set(prior_config)) - _NON_WORKLOAD_KEYS
    return tuple(sorted(
        key for key in keys
        if key not in local_config
        or key not in prior_config
        or local_config[key] != prior_config[key]
    ))


class RecordComparator:
    """
    Method:
      compare(local, prior) -> RecordComparison
    """

    def compare(self, local: FingerprintRecord, prior: FingerprintRecord) -> RecordComparison:
        mismatches: List[FingerprintMismatch] = []

        names = [c.case_name for c in local.cases]
        names += [c.case_name for c in prior.cases if c.case_name not in names]

        config_changes = workload_differences(local.config, prior.config)

        for name in names:
            local_case = local.case(name)
            prior_case = prior.case(name)
            local_fp = (local_case.consensus or "") if local_case is not None else ""
            prior_fp = (prior_case.consensus or "") if prior_case is not None else ""

            if config_changes:
                reason = MISMATCH_CONFIG
            elif local_case is None:
                reason = MISMATCH_MISSING_LOCAL
            elif prior_case is None:
                reason = MISMATCH_MISSING_PRIOR
            elif not local_fp:
                reason = MISMATCH_LOCAL_INCONSISTENT
            elif not prior_fp:
                reason = MISMATCH_PRIOR_INCONSISTENT
            elif local_fp != prior_fp:
                reason = MISMATCH_DIFFERENT_FINGERPRINT
            else:
                continue

            mismatches.append(FingerprintMismatch(
                case_name=name,
                local=local_fp,
                prior=prior_fp,
                reason=reason,
            ))

        return RecordComparison(
            matched=len(mismatches) == 0,
            cases=len(names),
            mismatches=tuple(mismatches),
            same_system=local.system == prior.system,
            same_config=not config_changes,
            config_changes=config_changes,
        )
