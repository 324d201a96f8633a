import sys
from dataclasses import dataclass, field

import pytest

from webpshot.errors import CaptureFailedError, DisplayNotFoundError
from webpshot.zero_copy import ZeroCopyOptimizer, global_zero_copy


@dataclass
class FakeImage:
    width: int
    height: int
    tag: str = "fake"


@dataclass
class FakeCapturer:
    calls: list = field(default_factory=list)

    def capture_display(self, display_index):
        self.calls.append(display_index)
        return FakeImage(10, 20, tag="traditional")


class FailingCapturer:
    def capture_display(self, display_index):
        raise DisplayNotFoundError(display_index)


class FakeEncoder:
    def __init__(self):
        self.seen = []

    def encode(self, image, config):
        self.seen.append((image, config))
        return b"RIFF-encoded"


def _clock(values):
    it = iter(values)
    return lambda: next(it)


def test_initial_stats_are_zero():
    optimizer = ZeroCopyOptimizer()
    stats = optimizer.stats()
    assert stats.zero_copy_captures == 0
    assert stats.efficiency_percent() == 0.0


@pytest.mark.parametrize(
    "name,expected",
    [("linux", True), ("win32", True), ("darwin", True), ("freebsd13", False)],
)
def test_is_supported_by_platform(monkeypatch, name, expected):
    monkeypatch.setattr(sys, "platform", name)
    assert ZeroCopyOptimizer.is_supported() is expected


def test_unsupported_platform_is_never_enabled(monkeypatch):
    monkeypatch.setattr(sys, "platform", "freebsd13")
    optimizer = ZeroCopyOptimizer()
    optimizer.set_enabled(True)
    assert optimizer.is_enabled() is False


def test_set_enabled_toggles(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    optimizer = ZeroCopyOptimizer()
    assert optimizer.is_enabled() is True
    optimizer.set_enabled(False)
    assert optimizer.is_enabled() is False


def test_disabled_uses_capturer(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    optimizer = ZeroCopyOptimizer(lambda i: FakeImage(1, 1, tag="zero"))
    optimizer.set_enabled(False)
    capturer = FakeCapturer()
    image = optimizer.capture_zero_copy(capturer, 2)
    assert image.tag == "traditional"
    assert capturer.calls == [2]
    stats = optimizer.stats()
    assert stats.traditional_captures == 1
    assert stats.failed_attempts == 0


def test_failed_platform_capture_falls_back(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    optimizer = ZeroCopyOptimizer()
    capturer = FakeCapturer()
    image = optimizer.capture_zero_copy(capturer, 0)
    assert image.tag == "traditional"
    stats = optimizer.stats()
    assert stats.failed_attempts == 1
    assert stats.traditional_captures == 1
    assert stats.zero_copy_captures == 0


def test_fallback_errors_propagate(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    optimizer = ZeroCopyOptimizer()
    with pytest.raises(DisplayNotFoundError):
        optimizer.capture_zero_copy(FailingCapturer(), 3)


def test_successful_zero_copy_updates_stats(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    optimizer = ZeroCopyOptimizer(
        lambda i: FakeImage(100, 50, tag="zero"), clock=_clock([1.0, 1.25])
    )
    capturer = FakeCapturer()
    image = optimizer.capture_zero_copy(capturer, 0)
    assert image.tag == "zero"
    assert capturer.calls == []
    stats = optimizer.stats()
    assert stats.zero_copy_captures == 1
    assert stats.memory_saved_bytes == 100 * 50 * 4
    assert stats.time_saved_ms == 250
    assert stats.efficiency_percent() == 100.0


def test_platform_capture_receives_index(monkeypatch):
    monkeypatch.setattr(sys, "platform", "win32")
    seen = []

    def platform_capture(index):
        seen.append(index)
        raise CaptureFailedError("busy")

    optimizer = ZeroCopyOptimizer(platform_capture)
    capturer = FakeCapturer()
    image = optimizer.capture_zero_copy(capturer, 5)
    assert seen == [5]
    assert image.tag == "traditional"
    assert capturer.calls == [5]
    assert optimizer.stats().failed_attempts == 1


def test_stats_returns_copy(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    optimizer = ZeroCopyOptimizer()
    snapshot = optimizer.stats()
    snapshot.zero_copy_captures = 42
    assert optimizer.stats().zero_copy_captures == 0


def test_reset_stats(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    optimizer = ZeroCopyOptimizer()
    optimizer.capture_zero_copy(FakeCapturer(), 0)
    assert optimizer.stats().traditional_captures == 1
    optimizer.reset_stats()
    stats = optimizer.stats()
    assert stats.traditional_captures == 0
    assert stats.failed_attempts == 0


@pytest.mark.parametrize("enabled", [True, False])
def test_encode_zero_copy_delegates(monkeypatch, enabled):
    monkeypatch.setattr(sys, "platform", "linux")
    optimizer = ZeroCopyOptimizer()
    optimizer.set_enabled(enabled)
    encoder = FakeEncoder()
    image = FakeImage(2, 2)
    result = optimizer.encode_zero_copy(image, encoder, "config")
    assert result == b"RIFF-encoded"
    assert encoder.seen == [(image, "config")]


def test_global_zero_copy_is_shared(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    first = global_zero_copy()
    second = global_zero_copy()
    assert first is second
    original = first.is_enabled()
    try:
        first.set_enabled(False)
        assert second.is_enabled() is False
        first.set_enabled(True)
        assert second.is_enabled() is True
    finally:
        first.set_enabled(original)