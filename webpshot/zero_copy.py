"""Capture front end that prefers a platform zero-copy path when one works."""

from __future__ import annotations

import sys
import threading
import time
from dataclasses import replace
from functools import lru_cache
from typing import Any, Callable, Optional, Protocol

from webpshot.errors import CaptureError, CaptureFailedError
from webpshot.zero_copy_stats import ZeroCopyStats

_SUPPORTED_PLATFORMS = ("win32", "linux", "darwin")
_BYTES_PER_PIXEL = 4


class ScreenCapturer(Protocol):
    """Anything that can capture a whole display."""

    def capture_display(self, display_index: int) -> Any: ...


class ImageEncoder(Protocol):
    """Anything that can encode an image with a configuration."""

    def encode(self, image: Any, config: Any) -> bytes: ...


def _no_platform_capture(display_index: int) -> Any:
    raise CaptureFailedError("No zero-copy method available")


class ZeroCopyOptimizer:
    """Tries a direct platform capture first and falls back to a capturer.

    ``platform_capture`` takes a display index and returns an image with
    ``width`` and ``height``; it signals failure by raising
    :class:`CaptureError`. Without one, every zero-copy attempt fails and
    the regular capturer is used.
    """

    def __init__(
        self,
        platform_capture: Optional[Callable[[int], Any]] = None,
        *,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._platform_capture = (
            platform_capture if platform_capture is not None else _no_platform_capture
        )
        self._clock = clock
        self._lock = threading.Lock()
        self._stats = ZeroCopyStats()
        self._enabled = self.is_supported()

    @staticmethod
    def is_supported() -> bool:
        """Return True if zero-copy capture can be used on this platform."""
        return sys.platform.startswith(_SUPPORTED_PLATFORMS)

    def set_enabled(self, enabled: bool) -> None:
        """Turn the zero-copy path on or off."""
        self._enabled = enabled

    def is_enabled(self) -> bool:
        """Return True if the zero-copy path is enabled and supported."""
        return self._enabled and self.is_supported()

    def capture_zero_copy(self, capturer: ScreenCapturer, display_index: int) -> Any:
        """Capture a display, preferring the zero-copy path."""
        if not self.is_enabled():
            with self._lock:
                self._stats.traditional_captures += 1
            return capturer.capture_display(display_index)

        start = self._clock()
        try:
            image = self._platform_capture(display_index)
        except CaptureError:
            with self._lock:
                self._stats.failed_attempts += 1
                self._stats.traditional_captures += 1
            return capturer.capture_display(display_index)

        elapsed_ms = int((self._clock() - start) * 1000)
        with self._lock:
            self._stats.zero_copy_captures += 1
            self._stats.time_saved_ms += elapsed_ms
            self._stats.memory_saved_bytes += (
                image.width * image.height * _BYTES_PER_PIXEL
            )
        return image

    def encode_zero_copy(self, image: Any, encoder: ImageEncoder, config: Any) -> bytes:
        """Encode an image with the given encoder and configuration."""
        return encoder.encode(image, config)

    def stats(self) -> ZeroCopyStats:
        """A copy of the current counters."""
        with self._lock:
            return replace(self._stats)

    def reset_stats(self) -> None:
        """Set every counter back to zero."""
        with self._lock:
            self._stats = ZeroCopyStats()


@lru_cache(maxsize=None)
def global_zero_copy() -> ZeroCopyOptimizer:
    """The process-wide shared optimizer."""
    return ZeroCopyOptimizer()