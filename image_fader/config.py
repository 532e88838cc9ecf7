"""Configuration dataclass and loading helpers for the image fader."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from image_fader.models import FadeStyle

DEFAULT_CONFIG_FILENAME = "image_fader.json"


def _parse_positive_int(value: Any, default: int) -> int:
    """Parse a positive integer with fallback to default."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _parse_positive_float(value: Any, default: float) -> float:
    """Parse a positive floating point number with fallback to default."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _parse_optional_non_negative_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    return parsed if parsed >= 0 else None


def _parse_optional_positive_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


def _parse_extension(value: Any, default: str) -> str:
    """Normalise container extensions to a leading-dot form such as ``.mp4``."""
    if not isinstance(value, str):
        return default
    text = value.strip()
    if not text or text == ".":
        return default
    return text if text.startswith(".") else f".{text}"


def _parse_style(value: Any, default: FadeStyle) -> FadeStyle:
    if value is None:
        return default
    try:
        return FadeStyle.parse(value)
    except ValueError:
        return default


def _parse_str(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


@dataclass(frozen=True)
class FaderSettings:
    """Encoder and default-request settings for a fader run."""

    ffmpeg_binary: str = "ffmpeg"
    container_extension: str = ".mp4"
    video_codec: str = "libx264"
    pixel_format: str = "yuv420p"
    quality: Optional[int] = None
    encoder_timeout: Optional[float] = None
    default_framerate: int = 10
    default_duration: float = 2.0
    default_style: FadeStyle = FadeStyle.TO_DARK
    log_file: Optional[Path] = None


def _parse_settings(data: Mapping[str, Any]) -> FaderSettings:
    default = FaderSettings()
    log_file = data.get("log_file")
    return FaderSettings(
        ffmpeg_binary=_parse_str(data.get("ffmpeg_binary"), default.ffmpeg_binary),
        container_extension=_parse_extension(
            data.get("container_extension"),
            default.container_extension,
        ),
        video_codec=_parse_str(data.get("video_codec"), default.video_codec),
        pixel_format=_parse_str(data.get("pixel_format"), default.pixel_format),
        quality=_parse_optional_non_negative_int(data.get("quality")),
        encoder_timeout=_parse_optional_positive_float(data.get("encoder_timeout")),
        default_framerate=_parse_positive_int(
            data.get("default_framerate"),
            default.default_framerate,
        ),
        default_duration=_parse_positive_float(
            data.get("default_duration"),
            default.default_duration,
        ),
        default_style=_parse_style(data.get("default_style"), default.default_style),
        log_file=Path(log_file) if log_file else None,
    )


def _load_env_settings(env: Mapping[str, str]) -> FaderSettings:
    """Settings derived from ``FADER_*`` environment variables."""
    return _parse_settings({
        "ffmpeg_binary": env.get("FADER_FFMPEG_BINARY"),
        "container_extension": env.get("FADER_CONTAINER_EXTENSION"),
        "video_codec": env.get("FADER_VIDEO_CODEC"),
        "pixel_format": env.get("FADER_PIXEL_FORMAT"),
        "quality": env.get("FADER_QUALITY"),
        "encoder_timeout": env.get("FADER_ENCODER_TIMEOUT"),
        "default_framerate": env.get("FADER_FRAMERATE"),
        "default_duration": env.get("FADER_DURATION"),
        "default_style": env.get("FADER_STYLE"),
        "log_file": env.get("FADER_LOG_FILE"),
    })


def load_settings(
    config_path: Path | str = DEFAULT_CONFIG_FILENAME,
    env: Mapping[str, str] | None = None,
) -> FaderSettings:
    """Load settings from a JSON file, falling back to environment variables."""
    source_env = os.environ if env is None else env
    path = Path(config_path)

    if path.exists():
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, Mapping):
            raise ValueError(f"Settings file {path} must contain a JSON object")
        return _parse_settings(data)

    return _load_env_settings(source_env)


__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "FaderSettings",
    "load_settings",
]
