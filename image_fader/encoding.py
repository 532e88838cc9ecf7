"""Video encoder collaborators that turn a frame sequence into a clip."""

from __future__ import annotations

import logging
import shutil
import subprocess
import uuid
from pathlib import Path
from typing import List, Optional, Protocol

from image_fader.config import FaderSettings
from image_fader.errors import EncodeError, EncoderNotFoundError, OutputWriteError

# libx264 with yuv420p rejects odd dimensions; pad by one pixel where needed.
EVEN_DIMENSIONS_FILTER = "pad=ceil(iw/2)*2:ceil(ih/2)*2"


class Encoder(Protocol):
    """Anything that can encode a numbered frame sequence into a video file."""

    def encode(self, frame_pattern: str, framerate: int, output_path: Path) -> None:
        """Encode frames matching ``frame_pattern`` or raise :class:`EncodeError`."""
        ...


class FFmpegEncoder:
    """Encode PNG frame sequences by shelling out to ffmpeg."""

    def __init__(
        self,
        *,
        logger: logging.Logger,
        binary: str = "ffmpeg",
        video_codec: str = "libx264",
        pixel_format: str = "yuv420p",
        quality: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.logger = logger
        self.binary = binary
        self.video_codec = video_codec
        self.pixel_format = pixel_format
        self.quality = quality
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: FaderSettings, *, logger: logging.Logger) -> "FFmpegEncoder":
        return cls(
            logger=logger,
            binary=settings.ffmpeg_binary,
            video_codec=settings.video_codec,
            pixel_format=settings.pixel_format,
            quality=settings.quality,
            timeout=settings.encoder_timeout,
        )

    def build_command(self, frame_pattern: str, framerate: int, output_path: Path) -> List[str]:
        codec_args = ["-c:v", self.video_codec]
        if self.quality is not None:
            codec_args.extend(["-crf", str(self.quality)])
        codec_args.extend(["-pix_fmt", self.pixel_format])

        return [
            self.binary,
            "-y",
            "-framerate",
            str(framerate),
            "-i",
            frame_pattern,
            "-vf",
            EVEN_DIMENSIONS_FILTER,
            *codec_args,
            str(output_path),
        ]

    def encode(self, frame_pattern: str, framerate: int, output_path: Path) -> None:
        if shutil.which(self.binary) is None:
            raise EncoderNotFoundError(
                f"{self.binary} not found on PATH. Install ffmpeg with {self.video_codec} support."
            )

        output_path = Path(output_path)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputWriteError(
                f"Failed to create output directory {output_path.parent}: {exc}"
            ) from exc
        temp_output = output_path.with_name(f".tmp_{uuid.uuid4().hex}_{output_path.name}")
        cmd = self.build_command(frame_pattern, framerate, temp_output)
        self.logger.debug("Running encoder: %s", " ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                check=False,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            temp_output.unlink(missing_ok=True)
            raise EncodeError(
                f"{self.binary} did not finish within {self.timeout} seconds",
                cmd=cmd,
                stderr=exc.stderr or b"",
            ) from exc
        except OSError as exc:
            temp_output.unlink(missing_ok=True)
            raise EncoderNotFoundError(f"Failed to start {self.binary}: {exc}", cmd=cmd) from exc

        if result.returncode != 0:
            temp_output.unlink(missing_ok=True)
            raise EncodeError(
                f"{self.binary} exited with status {result.returncode}",
                returncode=result.returncode,
                cmd=cmd,
                stderr=result.stderr or b"",
            )

        try:
            temp_output.replace(output_path)
        except OSError as exc:
            temp_output.unlink(missing_ok=True)
            raise OutputWriteError(f"Failed to move encoded clip to {output_path}: {exc}") from exc


__all__ = ["EVEN_DIMENSIONS_FILTER", "Encoder", "FFmpegEncoder"]
