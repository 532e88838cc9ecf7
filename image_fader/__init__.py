"""
Render brightness fades of a still image into short video clips.
"""

from .encoding import Encoder, FFmpegEncoder
from .errors import (
    EncodeError,
    EncoderNotFoundError,
    FaderError,
    FrameWriteError,
    ImageDecodeError,
    OutputWriteError,
    TempStorageError,
)
from .frames import fade_frame, load_image
from .models import FadeRequest, FadeResult, FadeStyle
from .pipeline import FadePipeline, build_request, default_output_path
from .schedule import frame_count_for, generate_schedule

__all__ = [
    "EncodeError",
    "Encoder",
    "EncoderNotFoundError",
    "FFmpegEncoder",
    "FadePipeline",
    "FadeRequest",
    "FadeResult",
    "FadeStyle",
    "FaderError",
    "FrameWriteError",
    "ImageDecodeError",
    "OutputWriteError",
    "TempStorageError",
    "build_request",
    "default_output_path",
    "fade_frame",
    "frame_count_for",
    "generate_schedule",
    "load_image",
]
