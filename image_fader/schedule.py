"""Brightness schedules for the supported fade styles."""

from __future__ import annotations

import math
from typing import List

from image_fader.models import FadeStyle

# Digits kept before rounding up so 1.1 * 10 yields 11 frames, not 12.
_FRAME_COUNT_PRECISION = 9


def frame_count_for(duration: float, framerate: int) -> int:
    """Return the number of frames needed to cover ``duration`` at ``framerate``.

    The product is rounded up, so partial frames count as whole frames. The
    result is never below one.
    """
    if not math.isfinite(duration) or duration <= 0:
        raise ValueError(f"Duration must be a positive number of seconds, got {duration!r}")
    if framerate <= 0:
        raise ValueError(f"Framerate must be a positive integer, got {framerate!r}")

    exact = round(duration * framerate, _FRAME_COUNT_PRECISION)
    if not math.isfinite(exact):
        raise ValueError(
            f"Duration {duration!r} at {framerate} fps needs more frames than can be counted"
        )
    return max(1, math.ceil(exact))


def _descending(length: int) -> List[float]:
    if length == 1:
        return [1.0]
    last = length - 1
    return [1.0 - index / last for index in range(length)]


def _ascending(length: int) -> List[float]:
    if length == 1:
        return [0.0]
    last = length - 1
    return [index / last for index in range(length)]


def generate_schedule(frame_count: int, style: FadeStyle | str) -> List[float]:
    """Build the per-frame brightness factors for ``style``.

    Round-trip styles spend ``frame_count // 2`` frames on the first leg and
    the remainder on the second. A leg with a single frame holds its starting
    value (1.0 when descending, 0.0 when ascending), and a one-frame clip is
    always ``[1.0]``.
    """
    if frame_count < 1:
        raise ValueError(f"frame_count must be at least 1, got {frame_count}")

    fade_style = FadeStyle.parse(style)
    if frame_count == 1:
        return [1.0]

    if fade_style is FadeStyle.TO_DARK:
        return _descending(frame_count)
    if fade_style is FadeStyle.FROM_DARK:
        return _ascending(frame_count)

    half = frame_count // 2
    remainder = frame_count - half
    if fade_style is FadeStyle.TO_DARK_AND_BACK:
        return _descending(half) + _ascending(remainder)
    return _ascending(half) + _descending(remainder)


__all__ = ["frame_count_for", "generate_schedule"]
