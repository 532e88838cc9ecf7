import logging
import sys
from pathlib import Path
from unittest.mock import patch

import cv2
import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import image_fader.pipeline as pipeline_module  # noqa: E402
from image_fader.errors import (  # noqa: E402
    EncodeError,
    FrameWriteError,
    ImageDecodeError,
    TempStorageError,
)
from image_fader.models import FadeRequest, FadeStyle  # noqa: E402
from image_fader.pipeline import FadePipeline, build_request, default_output_path  # noqa: E402


class RecordingEncoder:
    """Captures the frames present when the encoder is invoked."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []
        self.frames = []
        self.frame_dir = None

    def encode(self, frame_pattern, framerate, output_path):
        self.calls.append((frame_pattern, framerate, output_path))
        self.frame_dir = Path(frame_pattern).parent
        for path in sorted(self.frame_dir.glob("frame_*.png")):
            self.frames.append(cv2.imread(str(path), cv2.IMREAD_UNCHANGED))
        if self.fail:
            raise EncodeError("ffmpeg exited with status 1", returncode=1)
        Path(output_path).write_bytes(b"video")


def write_solid_image(path: Path, bgra: tuple[int, int, int, int], size=(2, 2)) -> Path:
    image = np.zeros((size[1], size[0], 4), dtype=np.uint8)
    image[...] = bgra
    cv2.imwrite(str(path), image)
    return path


def make_pipeline(encoder, **kwargs) -> FadePipeline:
    return FadePipeline(encoder, logger=logging.getLogger("pipeline-tests"), **kwargs)


def test_solid_red_fades_to_black(tmp_path: Path) -> None:
    source = write_solid_image(tmp_path / "red.png", (0, 0, 255, 255))
    output = tmp_path / "red.mp4"
    encoder = RecordingEncoder()
    request = FadeRequest(
        input_path=source,
        output_path=output,
        framerate=2,
        duration=1.0,
        style=FadeStyle.TO_DARK,
    )

    result = make_pipeline(encoder).run(request)

    assert result.frame_count == 2
    assert (result.width, result.height) == (2, 2)
    assert result.output_path == output
    assert output.read_bytes() == b"video"

    assert len(encoder.frames) == 2
    first, last = encoder.frames
    assert first.shape == last.shape == (2, 2, 4)
    assert {tuple(map(int, pixel)) for pixel in first.reshape(-1, 4)} == {(0, 0, 255, 255)}
    assert {tuple(map(int, pixel)) for pixel in last.reshape(-1, 4)} == {(0, 0, 0, 255)}


def test_encoder_receives_sequence_pattern_and_framerate(tmp_path: Path) -> None:
    source = write_solid_image(tmp_path / "still.png", (10, 20, 30, 255))
    encoder = RecordingEncoder()
    request = build_request(source, output_path=tmp_path / "out.mp4", framerate=10, duration=1.5)

    result = make_pipeline(encoder).run(request)

    pattern, framerate, output_path = encoder.calls[0]
    assert Path(pattern).name == "frame_%04d.png"
    assert framerate == 10
    assert output_path == tmp_path / "out.mp4"
    assert result.frame_count == 15
    assert len(encoder.frames) == 15


def test_round_trip_frames_follow_schedule(tmp_path: Path) -> None:
    source = write_solid_image(tmp_path / "white.png", (200, 200, 200, 90))
    encoder = RecordingEncoder()
    request = build_request(
        source,
        output_path=tmp_path / "out.mp4",
        framerate=5,
        duration=1.0,
        style="from-dark-and-back",
    )

    make_pipeline(encoder).run(request)

    blue_levels = [int(frame[0, 0, 0]) for frame in encoder.frames]
    assert blue_levels == [0, 200, 200, 100, 0]
    assert all(int(frame[0, 0, 3]) == 90 for frame in encoder.frames)


def test_temp_frames_removed_after_success(tmp_path: Path) -> None:
    source = write_solid_image(tmp_path / "still.png", (1, 2, 3, 255))
    encoder = RecordingEncoder()

    make_pipeline(encoder).run(build_request(source, output_path=tmp_path / "out.mp4"))

    assert encoder.frame_dir is not None
    assert not encoder.frame_dir.exists()


def test_encoder_failure_propagates_and_cleans_up(tmp_path: Path) -> None:
    source = write_solid_image(tmp_path / "still.png", (1, 2, 3, 255))
    output = tmp_path / "out.mp4"
    encoder = RecordingEncoder(fail=True)

    with pytest.raises(EncodeError):
        make_pipeline(encoder).run(build_request(source, output_path=output))

    assert not encoder.frame_dir.exists()
    assert not output.exists()


def test_undecodable_input_fails_before_encoding(tmp_path: Path) -> None:
    source = tmp_path / "broken.png"
    source.write_bytes(b"garbage")
    encoder = RecordingEncoder()

    with pytest.raises(ImageDecodeError):
        make_pipeline(encoder).run(build_request(source, output_path=tmp_path / "out.mp4"))

    assert encoder.calls == []


def test_temp_storage_failure_is_reported(tmp_path: Path) -> None:
    source = write_solid_image(tmp_path / "still.png", (1, 2, 3, 255))
    encoder = RecordingEncoder()

    with patch.object(
        pipeline_module.tempfile,
        "TemporaryDirectory",
        side_effect=PermissionError("read-only filesystem"),
    ):
        with pytest.raises(TempStorageError):
            make_pipeline(encoder).run(build_request(source, output_path=tmp_path / "out.mp4"))

    assert encoder.calls == []


def test_frame_write_failure_releases_temp_dir(tmp_path: Path) -> None:
    source = write_solid_image(tmp_path / "still.png", (1, 2, 3, 255))
    temp_root = tmp_path / "scratch"
    temp_root.mkdir()
    encoder = RecordingEncoder()

    with patch.object(pipeline_module, "write_frame", side_effect=FrameWriteError("disk full")):
        with pytest.raises(FrameWriteError):
            make_pipeline(encoder, temp_root=temp_root).run(
                build_request(source, output_path=tmp_path / "out.mp4")
            )

    assert list(temp_root.iterdir()) == []
    assert encoder.calls == []


def test_render_frames_writes_zero_padded_sequence(tmp_path: Path) -> None:
    image = np.full((3, 3, 4), 255, dtype=np.uint8)
    pipeline = make_pipeline(RecordingEncoder())

    written = pipeline.render_frames(image, [1.0, 0.5, 0.0], tmp_path)

    assert [path.name for path in written] == [
        "frame_0000.png",
        "frame_0001.png",
        "frame_0002.png",
    ]
    middle = cv2.imread(str(written[1]), cv2.IMREAD_UNCHANGED)
    assert int(middle[0, 0, 0]) == 127
    assert int(middle[0, 0, 3]) == 255


def test_default_output_path_uses_input_stem() -> None:
    assert default_output_path(Path("/photos/sunset.jpg")) == Path("sunset.mp4")
    assert default_output_path(Path("shots/frame.v2.png"), ".mkv") == Path("frame.mkv")
    assert default_output_path(Path("noext"), ".webm") == Path("noext.webm")


def test_build_request_defaults() -> None:
    request = build_request("images/cat.png")

    assert request.input_path == Path("images/cat.png")
    assert request.output_path == Path("cat.mp4")
    assert request.framerate == 10
    assert request.duration == 2.0
    assert request.style is FadeStyle.TO_DARK
