"""Pixel format conversion between BGRA, RGBA, BGR and RGB byte layouts."""

from __future__ import annotations

import platform
import time
from dataclasses import dataclass, field
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

_BENCHMARK_ROUNDS = 100


@lru_cache(maxsize=None)
def _cpu_flags() -> frozenset[str]:
    """CPU feature flags reported by the operating system, if any."""
    cpuinfo = Path("/proc/cpuinfo")
    try:
        text = cpuinfo.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return frozenset()
    for line in text.splitlines():
        key, _, value = line.partition(":")
        if key.strip() == "flags":
            return frozenset(value.split())
    return frozenset()


def _is_x86_64() -> bool:
    return platform.machine().lower() in {"x86_64", "amd64"}


def _is_aarch64() -> bool:
    return platform.machine().lower() in {"aarch64", "arm64"}


def _detect_x86(flag: str) -> bool:
    return _is_x86_64() and flag in _cpu_flags()


def _swap_first_and_third(data: bytearray, pixel_size: int) -> None:
    """Swap bytes 0 and 2 of every complete pixel, in place."""
    end = len(data) // pixel_size * pixel_size
    if end == 0:
        return
    first = data[0:end:pixel_size]
    third = data[2:end:pixel_size]
    data[0:end:pixel_size] = third
    data[2:end:pixel_size] = first


@dataclass(frozen=True)
class SimdConverter:
    """Converts between pixel byte orders.

    The feature flags record which vector instruction sets the processor
    offers; they are detected when not given and are reported by
    :meth:`capabilities`. All conversions give the same result whatever
    the flags say.
    """

    has_avx2: bool = field(default_factory=lambda: _detect_x86("avx2"))
    has_sse41: bool = field(default_factory=lambda: _detect_x86("sse4_1"))
    has_ssse3: bool = field(default_factory=lambda: _detect_x86("ssse3"))
    has_neon: bool = field(default_factory=_is_aarch64)

    def convert_bgra_to_rgba(self, data: bytearray) -> None:
        """Swap blue and red in every complete 4-byte pixel, in place.

        Trailing bytes that do not form a whole pixel are left untouched.
        """
        _swap_first_and_third(data, 4)

    def convert_bgr_to_rgb(self, data: bytearray) -> None:
        """Swap blue and red in every complete 3-byte pixel, in place.

        Trailing bytes that do not form a whole pixel are left untouched.
        """
        _swap_first_and_third(data, 3)

    def convert_rgba_to_rgb(self, src: bytes) -> bytes:
        """Drop the alpha channel from every complete 4-byte pixel."""
        pixels = len(src) // 4
        end = pixels * 4
        out = bytearray(pixels * 3)
        for channel in range(3):
            out[channel::3] = src[channel:end:4]
        return bytes(out)

    def capabilities(self) -> str:
        """Comma-separated list of detected instruction sets."""
        names = [
            name
            for name, present in (
                ("AVX2", self.has_avx2),
                ("SSE4.1", self.has_sse41),
                ("SSSE3", self.has_ssse3),
                ("NEON", self.has_neon),
            )
            if present
        ]
        return ", ".join(names) if names else "None (scalar)"

    def benchmark_conversion(self, size: int) -> timedelta:
        """Average time of one BGRA to RGBA conversion over a buffer of size bytes."""
        pattern = bytes(range(256))
        data = bytearray((pattern * (size // 256 + 1))[:size])

        start = time.perf_counter()
        for _ in range(_BENCHMARK_ROUNDS):
            self.convert_bgra_to_rgba(data)
        elapsed = time.perf_counter() - start

        return timedelta(seconds=elapsed / _BENCHMARK_ROUNDS)


@lru_cache(maxsize=None)
def global_simd_converter() -> SimdConverter:
    """Shared converter with the detected processor features."""
    return SimdConverter()