"""Data models used across the image fader."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class FadeStyle(str, Enum):
    """Shape of the brightness curve applied across the clip."""

    TO_DARK = "to-dark"
    FROM_DARK = "from-dark"
    TO_DARK_AND_BACK = "to-dark-and-back"
    FROM_DARK_AND_BACK = "from-dark-and-back"

    @classmethod
    def parse(cls, value: "FadeStyle | str") -> "FadeStyle":
        """Resolve a style from its CLI spelling, accepting underscores and any case."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower().replace("_", "-")
        try:
            return cls(text)
        except ValueError as exc:
            choices = ", ".join(style.value for style in cls)
            raise ValueError(f"Unknown fade style '{value}' (expected one of: {choices})") from exc

    @classmethod
    def choices(cls) -> tuple[str, ...]:
        return tuple(style.value for style in cls)


@dataclass(frozen=True)
class FadeRequest:
    """A single still-image-to-clip conversion job."""

    input_path: Path
    output_path: Path
    framerate: int
    duration: float
    style: FadeStyle = FadeStyle.TO_DARK


@dataclass(frozen=True)
class FadeResult:
    """Summary of a rendered fade clip."""

    output_path: Path
    frame_count: int
    width: int
    height: int
    style: FadeStyle


__all__ = [
    "FadeRequest",
    "FadeResult",
    "FadeStyle",
]
