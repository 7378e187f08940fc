"""Process memory statistics, read through psutil."""

from __future__ import annotations

import gc
import resource
import sys
from dataclasses import dataclass

import psutil

_MIB = 1024 * 1024


@dataclass
class MemStats:
    """Memory snapshot, all sizes in bytes."""

    alloc: int  # resident set size right now
    total_alloc: int  # peak resident set size over the process lifetime
    sys: int  # virtual memory reserved from the OS
    num_gc: int  # completed garbage collection runs across all generations

    def to_dict(self) -> dict[str, str]:
        return {
            "Alloc": f"{bytes_to_mib(self.alloc)} MiB",
            "TotalAlloc": f"{bytes_to_mib(self.total_alloc)} MiB",
            "Sys": f"{bytes_to_mib(self.sys)} MiB",
            "NumGC": f"{self.num_gc}",
        }


def bytes_to_mib(b: int) -> int:
    return b // _MIB


def _peak_rss() -> int:
    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports kilobytes, macOS reports bytes
    return peak if sys.platform == "darwin" else peak * 1024


def read_mem_stats() -> MemStats:
    """Take a fresh memory snapshot of the current process."""
    info = psutil.Process().memory_info()
    num_gc = sum(gen["collections"] for gen in gc.get_stats())
    return MemStats(
        alloc=info.rss,
        total_alloc=max(_peak_rss(), info.rss),
        sys=info.vms,
        num_gc=num_gc,
    )
