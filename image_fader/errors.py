"""Exception types raised by the image fader pipeline."""

from __future__ import annotations

from typing import Optional, Sequence


class FaderError(Exception):
    """Base class for all fader failures surfaced to the CLI."""


class InputError(FaderError):
    """The request cannot be served because its inputs are unusable."""


class ImageDecodeError(InputError):
    """The source image could not be read or decoded."""


class ResourceError(FaderError):
    """Local storage needed for rendering could not be acquired or written."""


class TempStorageError(ResourceError):
    """The scoped temporary frame directory could not be created."""


class FrameWriteError(ResourceError):
    """A rendered frame could not be encoded or persisted."""


class OutputWriteError(ResourceError):
    """The finished clip could not be placed at its output path."""


class EncodeError(FaderError):
    """The external video encoder failed to produce an output file."""

    def __init__(
        self,
        message: str,
        *,
        returncode: Optional[int] = None,
        cmd: Optional[Sequence[str]] = None,
        stderr: bytes = b"",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.cmd = list(cmd) if cmd is not None else None
        self.stderr = stderr

    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace").strip()


class EncoderNotFoundError(EncodeError):
    """The encoder binary is not available in the execution environment."""


__all__ = [
    "EncodeError",
    "EncoderNotFoundError",
    "FaderError",
    "FrameWriteError",
    "ImageDecodeError",
    "InputError",
    "OutputWriteError",
    "ResourceError",
    "TempStorageError",
]
