# sivd/verification/system_info.py
# Platform metadata for fingerprint reports and the report file name.
#
# Names are normalised so that records from the same platform family agree
# regardless of how the interpreter spells them (AMD64 vs x86_64,
# Darwin vs macos).

import os
import platform
from dataclasses import dataclass

_OS_ALIASES = {
    "darwin":  "macos",
    "win32":   "windows",
    "cygwin":  "windows",
}

_ARCH_ALIASES = {
    "amd64":  "x86_64",
    "x64":    "x86_64",
    "arm64":  "aarch64",
    "i386":   "x86",
    "i686":   "x86",
}


@dataclass(frozen=True)
class SystemInfo:
    """
    Fields:
      os    -- Normalised operating system name (linux, macos, windows, ...).
      arch  -- Normalised machine architecture (x86_64, aarch64, ...).
      cores -- Logical CPU count.
    """
    os:    str
    arch:  str
    cores: int

    def to_dict(self) -> dict:
        return {"os": self.os, "arch": self.arch, "cores": self.cores}

    def describe(self) -> str:
        return (
            "System Information:\n"
            f"OS: {self.os}\n"
            f"CPU: {self.arch}\n"
            f"Cores: {self.cores}\n"
        )


def normalize_os(name: str) -> str:
    key = name.strip().lower()
    return _OS_ALIASES.get(key, key or "unknown")


def normalize_arch(name: str) -> str:
    key = name.strip().lower()
    return _ARCH_ALIASES.get(key, key or "unknown")


def collect_system_info() -> SystemInfo:
    return SystemInfo(
        os=normalize_os(platform.system()),
        arch=normalize_arch(platform.machine()),
        cores=os.cpu_count() or 1,
    )


def report_stem(info: SystemInfo) -> str:
    return f"fingerprint_{info.arch}-{info.cores}c"


def report_filename(info: SystemInfo) -> str:
    """Text report file name, e.g. 'fingerprint_x86_64-8c.txt'."""
    return report_stem(info) + ".txt"


def record_filename(info: SystemInfo) -> str:
    """JSON record file name sharing the text report's stem."""
    return report_stem(info) + ".json"
