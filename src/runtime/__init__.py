"""Runtime introspection: memory statistics and the memory ballast."""

from .ballast import MemoryBallast
from .memstats import MemStats, bytes_to_mib, read_mem_stats
