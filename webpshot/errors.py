"""Exception hierarchy for capture, encoding and memory-pool failures."""

from __future__ import annotations


class CaptureError(Exception):
    """Base class for screenshot capture failures.

    Raised directly, it stands for an otherwise unclassified error and its
    message is shown unchanged.
    """

    code = -1999
    recoverable = False

    def is_recoverable(self) -> bool:
        """Return True if retrying the operation may succeed."""
        return self.recoverable

    def to_error_code(self) -> int:
        """Return the numeric error code for this failure."""
        return self.code


class _DetailedCaptureError(CaptureError):
    prefix = ""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")


class DisplayNotFoundError(CaptureError):
    """No display exists at the requested index."""

    code = -1001

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"Display not found: index {index}")


class DisplayEnumerationError(_DetailedCaptureError):
    """Listing the available displays failed."""

    code = -1002
    prefix = "Failed to enumerate displays"


class CaptureFailedError(_DetailedCaptureError):
    """The capture operation itself failed."""

    code = -1003
    prefix = "Capture failed"


class PermissionDeniedError(_DetailedCaptureError):
    """The system refused permission to capture the screen."""

    code = -1004
    prefix = "Permission denied"


class PlatformError(_DetailedCaptureError):
    """A platform-specific facility reported an error."""

    code = -1005
    prefix = "Platform error"


class HardwareAccelerationUnavailableError(_DetailedCaptureError):
    """Hardware acceleration was requested but cannot be used."""

    code = -1006
    prefix = "Hardware acceleration not available"


class InvalidCaptureConfigError(_DetailedCaptureError):
    """The capture configuration is invalid."""

    code = -1007
    prefix = "Invalid configuration"


class MemoryAllocationError(CaptureError):
    """A buffer of the requested size could not be allocated."""

    code = -1008
    recoverable = True

    def __init__(self, size: int) -> None:
        self.size = size
        super().__init__(f"Memory allocation failed: requested {size} bytes")


class CaptureTimeoutError(CaptureError):
    """The capture took longer than allowed."""

    code = -1009
    recoverable = True

    def __init__(self, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(f"Capture timeout: exceeded {timeout_ms}ms")


class CaptureIOError(_DetailedCaptureError):
    """An input/output operation failed during capture."""

    code = -1010
    prefix = "IO error"

    def __init__(self, detail: object) -> None:
        super().__init__(str(detail))


class CaptureEncodingError(_DetailedCaptureError):
    """Encoding the captured image failed."""

    code = -1012
    prefix = "Encoding error"


class EncodingError(Exception):
    """Base class for WebP encoding failures.

    Raised directly, it stands for an otherwise unclassified error and its
    message is shown unchanged.
    """

    code = -2999
    parameter_error = False

    def is_parameter_error(self) -> bool:
        """Return True if the failure was caused by an invalid parameter."""
        return self.parameter_error

    def to_error_code(self) -> int:
        """Return the numeric error code for this failure."""
        return self.code


class _DetailedEncodingError(EncodingError):
    prefix = ""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")


class InvalidDimensionsError(EncodingError):
    """The image has a width or height the encoder cannot accept."""

    code = -2001
    parameter_error = True

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        super().__init__(f"Invalid image dimensions: {width}x{height}")


class InvalidPixelFormatError(_DetailedEncodingError):
    """The pixel format is invalid."""

    code = -2002
    parameter_error = True
    prefix = "Invalid pixel format"


class InvalidEncoderConfigError(_DetailedEncodingError):
    """The encoder configuration is invalid."""

    code = -2003
    prefix = "Invalid configuration"


class UnsupportedFormatError(_DetailedEncodingError):
    """The pixel format is valid but not supported."""

    code = -2004
    prefix = "Unsupported format"


class EncodingFailedError(_DetailedEncodingError):
    """The WebP encoder reported a failure."""

    code = -2005
    prefix = "WebP encoding failed"


class InvalidQualityError(EncodingError):
    """The quality parameter is outside 0-100."""

    code = -2006
    parameter_error = True

    def __init__(self, quality: int) -> None:
        self.quality = quality
        super().__init__(f"Invalid quality parameter: {quality} (must be 0-100)")


class InvalidMethodError(EncodingError):
    """The compression method is outside 0-6."""

    code = -2007
    parameter_error = True

    def __init__(self, method: int) -> None:
        self.method = method
        super().__init__(f"Invalid compression method: {method} (must be 0-6)")


class BufferTooSmallError(EncodingError):
    """The output buffer cannot hold the encoded data."""

    code = -2008

    def __init__(self, required: int, provided: int) -> None:
        self.required = required
        self.provided = provided
        super().__init__(
            f"Output buffer too small: need {required} bytes, got {provided}"
        )


class UnsupportedFeatureError(_DetailedEncodingError):
    """A requested encoder feature is not available."""

    code = -2009
    prefix = "Unsupported feature"


class EncoderMemoryError(EncodingError):
    """Memory could not be allocated while encoding."""

    code = -2010

    def __init__(self) -> None:
        super().__init__("Memory allocation failed during encoding")


class MemoryPoolError(Exception):
    """Base class for memory pool failures."""


class PoolFullError(MemoryPoolError):
    """The pool has reached its maximum capacity."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        super().__init__(f"Memory pool is full: max capacity {capacity} reached")


class InvalidBufferSizeError(MemoryPoolError):
    """A buffer of the requested size cannot be provided."""

    def __init__(self, size: int) -> None:
        self.size = size
        super().__init__(f"Invalid buffer size: {size}")


class BufferNotFoundError(MemoryPoolError):
    """The buffer is not managed by the pool."""

    def __init__(self) -> None:
        super().__init__("Buffer not found in pool")


class PoolPoisonedError(MemoryPoolError):
    """The pool's internal state can no longer be trusted."""

    def __init__(self) -> None:
        super().__init__("Memory pool is poisoned")


_GENERIC_CODES = {
    -1: "Generic error",
    -2: "Invalid parameter",
    -3: "Out of memory",
    -4: "Not supported",
    -5: "Permission denied",
    -6: "Timeout",
}


def error_code_to_string(code: int) -> str:
    """Describe one of the generic numeric error codes."""
    return _GENERIC_CODES.get(code, f"Unknown error code: {code}")


def from_encoding_error(err: EncodingError) -> CaptureEncodingError:
    """Wrap an encoding failure as a capture failure."""
    return CaptureEncodingError(str(err))