"""GPU-accelerated WebP encoding front end."""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from typing import Any, Optional, Protocol

from webpshot.errors import UnsupportedFeatureError


class GpuBackend(Enum):
    """Compute backends an encoder can run on."""

    DIRECT_COMPUTE = "DirectCompute"
    METAL = "Metal"
    VULKAN = "Vulkan"
    OPENCL = "OpenCL"
    NONE = "None"


class GpuDevice(Protocol):
    """A GPU device able to encode images."""

    def encode(self, image: Any, config: Any) -> bytes: ...

    def name(self) -> str: ...

    def available_memory(self) -> int: ...


# Throughput in pixels per microsecond-unit used for rough time estimates.
_PIXELS_PER_MICROSECOND = {
    GpuBackend.DIRECT_COMPUTE: 10000,
    GpuBackend.METAL: 12000,
    GpuBackend.VULKAN: 8000,
}
_DEFAULT_PIXELS_PER_MICROSECOND = 5000
_MIN_SUITABLE_PIXELS = 1920 * 1080


def _detect() -> tuple[GpuBackend, Optional[GpuDevice]]:
    # No compute backend is usable on any platform yet.
    return GpuBackend.NONE, None


class GpuWebPEncoder:
    """Encoder that hands images to a GPU device when one is present."""

    def __init__(
        self,
        backend: Optional[GpuBackend] = None,
        device: Optional[GpuDevice] = None,
    ) -> None:
        if backend is None and device is None:
            backend, device = _detect()
        self.backend = backend if backend is not None else GpuBackend.NONE
        self.device = device

    def is_available(self) -> bool:
        """Return True if a GPU device is ready for encoding."""
        return self.device is not None

    def encode(self, image: Any, config: Any) -> bytes:
        """Encode an image on the GPU."""
        if self.device is None:
            raise UnsupportedFeatureError("GPU encoding not available")
        return self.device.encode(image, config)

    def backend_name(self) -> str:
        """Name of the selected backend."""
        return self.backend.value

    def device_info(self) -> Optional[str]:
        """Name of the device, or None without one."""
        return self.device.name() if self.device is not None else None

    def estimate_encoding_time(self, width: int, height: int) -> timedelta:
        """Rough estimate of how long encoding an image of this size takes."""
        if self.device is None:
            return timedelta(0)
        pixels = width * height
        rate = _PIXELS_PER_MICROSECOND.get(
            self.backend, _DEFAULT_PIXELS_PER_MICROSECOND
        )
        return timedelta(microseconds=pixels // rate)

    def is_size_suitable(self, width: int, height: int) -> bool:
        """Return True if the image is large enough to benefit from the GPU."""
        return width * height >= _MIN_SUITABLE_PIXELS