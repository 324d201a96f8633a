"""Counters kept by the zero-copy capture optimizer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ZeroCopyStats:
    """Counts of zero-copy and fallback captures and what they saved."""

    zero_copy_captures: int = 0
    traditional_captures: int = 0
    memory_saved_bytes: int = 0
    time_saved_ms: int = 0
    failed_attempts: int = 0

    def efficiency_percent(self) -> float:
        """Share of captures that took the zero-copy path, in percent."""
        total = self.zero_copy_captures + self.traditional_captures
        if total == 0:
            return 0.0
        return self.zero_copy_captures / total * 100.0

    def avg_memory_saved(self) -> int:
        """Average number of bytes saved by each zero-copy capture."""
        if self.zero_copy_captures == 0:
            return 0
        return self.memory_saved_bytes // self.zero_copy_captures