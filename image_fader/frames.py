"""Loading, fading, and persisting raster frames."""

from __future__ import annotations

import math
from pathlib import Path

import cv2
import numpy as np

from image_fader.errors import FrameWriteError, ImageDecodeError

COLOR_CHANNELS = 3


def _to_bgra8(image: np.ndarray) -> np.ndarray:
    """Normalise any decoded raster to an 8-bit, four-channel BGRA array."""
    if image.dtype == np.uint16:
        image = (image // 257).astype(np.uint8)
    elif image.dtype != np.uint8:
        scaled = np.clip(image.astype(np.float64), 0.0, 1.0) * 255.0
        image = scaled.astype(np.uint8)

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)

    channels = image.shape[2]
    if channels == 1:
        return cv2.cvtColor(image[..., 0], cv2.COLOR_GRAY2BGRA)
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)
    if channels == 4:
        return image
    raise ImageDecodeError(f"Unsupported channel count: {channels}")


def load_image(path: Path) -> np.ndarray:
    """Decode ``path`` into a (height, width, 4) uint8 BGRA array."""
    image_path = Path(path)
    if not image_path.is_file():
        raise ImageDecodeError(f"Input image not found: {image_path}")

    image = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ImageDecodeError(f"Failed to decode input image: {image_path}")

    bgra = _to_bgra8(image)
    # Decoded images are shared by every frame; guard against accidental writes.
    bgra.setflags(write=False)
    return bgra


def fade_frame(image: np.ndarray, factor: float) -> np.ndarray:
    """Return a copy of ``image`` with its color channels scaled by ``factor``.

    Scaling happens in float32 and truncates toward zero, so a factor of 1.0
    reproduces the source exactly. The alpha channel is copied unchanged.
    """
    if not math.isfinite(factor) or not 0.0 <= factor <= 1.0:
        raise ValueError(f"Brightness factor must be within [0, 1], got {factor!r}")
    if image.ndim != 3 or image.shape[2] != 4:
        raise ValueError(f"Expected a (height, width, 4) image, got shape {image.shape}")

    faded = np.empty_like(image)
    color = image[..., :COLOR_CHANNELS].astype(np.float32) * np.float32(factor)
    faded[..., :COLOR_CHANNELS] = color.astype(np.uint8)
    faded[..., COLOR_CHANNELS] = image[..., COLOR_CHANNELS]
    return faded


def frame_filename(index: int, width: int) -> str:
    return f"frame_{index:0{width}d}.png"


def frame_pattern(width: int) -> str:
    """Printf-style pattern matching :func:`frame_filename` for the encoder."""
    return f"frame_%0{width}d.png"


def frame_index_width(frame_count: int) -> int:
    """Zero-padding width that keeps ``frame_count`` filenames in order."""
    return max(4, len(str(max(0, frame_count - 1))))


def write_frame(frame: np.ndarray, path: Path) -> Path:
    """Encode ``frame`` as PNG and write it to ``path``."""
    success, buffer = cv2.imencode(".png", frame)
    if not success:
        raise FrameWriteError(f"Failed to encode frame as PNG: {path}")

    try:
        path.write_bytes(buffer.tobytes())
    except OSError as exc:
        raise FrameWriteError(f"Failed to write frame {path}: {exc}") from exc
    return path


__all__ = [
    "fade_frame",
    "frame_filename",
    "frame_index_width",
    "frame_pattern",
    "load_image",
    "write_frame",
]
