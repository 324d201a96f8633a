# webpshot

Building blocks for a screenshot-capture and WebP-encoding pipeline:

- `webpshot.errors` holds the exceptions for capture, encoding and
  buffer-pool failures. Capture and encoding errors carry a numeric error
  code (`to_error_code()`). Capture errors also say whether a retry is worth
  trying (`is_recoverable()`). Encoding errors say whether a bad parameter
  caused them (`is_parameter_error()`). `error_code_to_string()` describes the
  generic codes -1 to -6. `from_encoding_error()` wraps an encoding error as a
  `CaptureEncodingError`.
- `webpshot.pixels` converts pixel layouts through `SimdConverter`:
  BGRA→RGBA and BGR→RGB in place on a `bytearray`, and RGBA→RGB into new
  `bytes`. The converter reports the detected instruction sets with
  `capabilities()`. The results are the same whatever it detects.
  `global_simd_converter()` returns a shared instance.
- `webpshot.memory_pool` provides `MemoryPool`, a thread-safe pool of reusable
  byte buffers. It counts hits, misses, reuse and peak usage (`stats()`,
  `hit_rate()`). `PoolConfig` sets its limits. Buffers come back as
  `PooledBuffer`: call `release()`, use a `with` block, or `detach()` the bytes
  to keep them. `global_pool()` returns the shared pool.
- `webpshot.encoder_stats` provides `EncoderStats`, which keeps running
  averages of compression ratio and encoding time and reports space savings.
- `webpshot.gpu` provides `GpuWebPEncoder`, which hands images to a GPU
  device passed to it. It also estimates encoding time and says whether an
  image is large enough (Full HD or more) to benefit from a GPU.
- `webpshot.zero_copy` provides `ZeroCopyOptimizer`. It tries a
  `platform_capture` callable first and falls back to a capturer's
  `capture_display()` when that raises `CaptureError`. It counts each kind of
  capture in a `ZeroCopyStats` from `webpshot.zero_copy_stats`.
  `global_zero_copy()` returns a shared optimizer.

## Installation

```
pip install webpshot
```

## Examples

Converting pixel layouts:

```python
from webpshot.pixels import global_simd_converter

converter = global_simd_converter()
data = bytearray([0, 1, 2, 3, 4, 5, 6, 7])   # two BGRA pixels
converter.convert_bgra_to_rgba(data)          # converted in place
print(list(data))                              # [2, 1, 0, 3, 6, 5, 4, 7]

rgb = converter.convert_rgba_to_rgb(bytes([255, 128, 64, 255]))
print(list(rgb))                               # [255, 128, 64]
```

Reusing buffers:

```python
from webpshot.memory_pool import MemoryPool

pool = MemoryPool()
with pool.acquire(1024) as buffer:
    ...                                        # goes back to the pool on exit
with pool.acquire(512) as buffer:              # reuses the 1024-byte buffer
    ...
print(pool.stats().memory_reuse_count)         # 1
print(pool.hit_rate())                         # 50.0
```

Handling errors:

```python
from webpshot.errors import CaptureError, CaptureTimeoutError

try:
    raise CaptureTimeoutError(5000)
except CaptureError as err:
    print(err, err.to_error_code(), err.is_recoverable())
    # Capture timeout: exceeded 5000ms -1009 True
```

## What this package does not do

The package does not capture the screen and does not encode WebP images.
Capturers, platform capture functions, encoders and GPU devices are supplied
by the caller. A `GpuWebPEncoder` built without a device reports the backend
`"None"`, and its `encode()` raises `UnsupportedFeatureError`. A
`ZeroCopyOptimizer` built without a `platform_capture` always falls back to
the capturer it is given.

## Running the tests

```
pip install "webpshot[test]"
pytest
```