"""Still-image to fade-clip pipeline."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from image_fader.encoding import Encoder
from image_fader.errors import TempStorageError
from image_fader.frames import (
    fade_frame,
    frame_filename,
    frame_index_width,
    frame_pattern,
    load_image,
    write_frame,
)
from image_fader.models import FadeRequest, FadeResult, FadeStyle
from image_fader.schedule import frame_count_for, generate_schedule

TEMP_DIR_PREFIX = "image_fader_"


def default_output_path(input_path: Path, extension: str = ".mp4") -> Path:
    """Derive the output clip path from the input file's stem.

    The clip lands in the current working directory, not next to the input.
    """
    stem = Path(input_path).stem or "output"
    return Path(stem).with_suffix(extension)


def build_request(
    input_path: Path | str,
    *,
    output_path: Path | str | None = None,
    framerate: int = 10,
    duration: float = 2.0,
    style: FadeStyle | str = FadeStyle.TO_DARK,
    extension: str = ".mp4",
) -> FadeRequest:
    source = Path(input_path)
    target = Path(output_path) if output_path else default_output_path(source, extension)
    return FadeRequest(
        input_path=source,
        output_path=target,
        framerate=framerate,
        duration=duration,
        style=FadeStyle.parse(style),
    )


class FadePipeline:
    """Render a brightness fade for a still image and hand it to an encoder."""

    def __init__(
        self,
        encoder: Encoder,
        *,
        logger: Optional[logging.Logger] = None,
        temp_root: Optional[Path] = None,
    ) -> None:
        self.encoder = encoder
        self.logger = logger or logging.getLogger("image_fader")
        self.temp_root = temp_root

    def render_frames(
        self,
        image: np.ndarray,
        schedule: Sequence[float],
        frame_dir: Path,
    ) -> List[Path]:
        """Write one faded PNG per factor into ``frame_dir``, in schedule order."""
        total = len(schedule)
        width = frame_index_width(total)
        progress_interval = max(1, total // 20)
        written: List[Path] = []

        for index, factor in enumerate(schedule):
            frame = fade_frame(image, factor)
            written.append(write_frame(frame, frame_dir / frame_filename(index, width)))

            completed = index + 1
            if completed % progress_interval == 0 or completed == total:
                self.logger.debug(
                    "Frame rendering progress: %s/%s frames (%0.1f%%)",
                    completed,
                    total,
                    (completed / total) * 100.0,
                )

        return written

    def run(self, request: FadeRequest) -> FadeResult:
        """Execute ``request`` end to end and return a summary of the clip.

        Raises :class:`~image_fader.errors.FaderError` subclasses on failure.
        The temporary frame directory is removed on every exit path.
        """
        image = load_image(request.input_path)
        height, width = image.shape[:2]

        frame_count = frame_count_for(request.duration, request.framerate)
        schedule = generate_schedule(frame_count, request.style)
        self.logger.info(
            "Rendering %s frames (%s, %s fps, %.3gs) from %s (%sx%s)",
            frame_count,
            request.style.value,
            request.framerate,
            request.duration,
            request.input_path,
            width,
            height,
        )

        try:
            temp_dir = tempfile.TemporaryDirectory(
                prefix=TEMP_DIR_PREFIX,
                dir=str(self.temp_root) if self.temp_root else None,
            )
        except OSError as exc:
            raise TempStorageError(f"Failed to create temporary frame directory: {exc}") from exc

        with temp_dir as temp_dir_str:
            frame_dir = Path(temp_dir_str)
            self.render_frames(image, schedule, frame_dir)

            pattern = str(frame_dir / frame_pattern(frame_index_width(frame_count)))
            self.logger.info("Encoding %s frames to %s", frame_count, request.output_path)
            self.encoder.encode(pattern, request.framerate, request.output_path)

        return FadeResult(
            output_path=request.output_path,
            frame_count=frame_count,
            width=width,
            height=height,
            style=request.style,
        )


__all__ = [
    "FadePipeline",
    "build_request",
    "default_output_path",
]
