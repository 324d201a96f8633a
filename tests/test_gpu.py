from datetime import timedelta

import pytest

from webpshot.errors import UnsupportedFeatureError
from webpshot.gpu import GpuBackend, GpuWebPEncoder


class FakeDevice:
    def __init__(self):
        self.calls = []

    def encode(self, image, config):
        self.calls.append((image, config))
        return b"RIFF-fake"

    def name(self):
        return "Fake GPU Device"

    def available_memory(self):
        return 0


def test_gpu_detection():
    encoder = GpuWebPEncoder()
    assert encoder.backend_name() == "None"
    assert not encoder.is_available()
    assert encoder.device_info() is None


def test_size_suitability():
    encoder = GpuWebPEncoder()
    assert encoder.is_size_suitable(1920, 1080)
    assert encoder.is_size_suitable(3840, 2160)
    assert not encoder.is_size_suitable(640, 480)


def test_encode_without_device_raises():
    encoder = GpuWebPEncoder()
    with pytest.raises(UnsupportedFeatureError) as info:
        encoder.encode(object(), object())
    assert str(info.value) == "Unsupported feature: GPU encoding not available"


def test_estimate_without_device_is_zero():
    assert GpuWebPEncoder().estimate_encoding_time(3840, 2160) == timedelta(0)


def test_encode_delegates_to_device():
    device = FakeDevice()
    encoder = GpuWebPEncoder(GpuBackend.METAL, device)
    image, config = object(), object()
    assert encoder.encode(image, config) == b"RIFF-fake"
    assert device.calls == [(image, config)]
    assert encoder.is_available()
    assert encoder.device_info() == "Fake GPU Device"
    assert encoder.backend_name() == "Metal"


@pytest.mark.parametrize(
    "backend, name",
    [
        (GpuBackend.DIRECT_COMPUTE, "DirectCompute"),
        (GpuBackend.METAL, "Metal"),
        (GpuBackend.VULKAN, "Vulkan"),
        (GpuBackend.OPENCL, "OpenCL"),
        (GpuBackend.NONE, "None"),
    ],
)
def test_backend_names(backend, name):
    assert GpuWebPEncoder(backend, FakeDevice()).backend_name() == name


def test_estimates_order_by_backend_speed():
    sizes = (3840, 2160)
    metal = GpuWebPEncoder(GpuBackend.METAL, FakeDevice()).estimate_encoding_time(*sizes)
    dc = GpuWebPEncoder(
        GpuBackend.DIRECT_COMPUTE, FakeDevice()
    ).estimate_encoding_time(*sizes)
    vulkan = GpuWebPEncoder(GpuBackend.VULKAN, FakeDevice()).estimate_encoding_time(*sizes)
    opencl = GpuWebPEncoder(GpuBackend.OPENCL, FakeDevice()).estimate_encoding_time(*sizes)
    assert timedelta(0) < metal < dc < vulkan < opencl


def test_estimate_grows_with_size():
    encoder = GpuWebPEncoder(GpuBackend.VULKAN, FakeDevice())
    assert encoder.estimate_encoding_time(1920, 1080) < encoder.estimate_encoding_time(
        3840, 2160
    )