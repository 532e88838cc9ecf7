"""
Command line entrypoint for turning a still image into a fade clip.
"""

from __future__ import annotations

import argparse
import math
import shlex
import sys
from pathlib import Path

from dotenv import load_dotenv

from image_fader.config import DEFAULT_CONFIG_FILENAME, FaderSettings, load_settings
from image_fader.encoding import FFmpegEncoder
from image_fader.errors import EncodeError, InputError, ResourceError
from image_fader.logging_setup import configure_logging
from image_fader.models import FadeStyle
from image_fader.pipeline import FadePipeline, build_request
from image_fader.schedule import frame_count_for

EXIT_OK = 0
EXIT_ENCODER_FAILED = 1
EXIT_INPUT_ERROR = 2
EXIT_RESOURCE_ERROR = 3


def positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{value}'") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{value}'")
    return parsed


def positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a positive number, got '{value}'") from exc
    if not math.isfinite(parsed) or parsed <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive number, got '{value}'")
    return parsed


def build_parser(settings: FaderSettings | None = None) -> argparse.ArgumentParser:
    defaults = settings or FaderSettings()
    parser = argparse.ArgumentParser(
        prog="image-fader",
        description="Render a brightness fade of a still image into a short video clip.",
    )
    parser.add_argument("input", type=Path, metavar="INPUT", help="Input image path.")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help=f"Output video path (default: <input stem>{defaults.container_extension}).",
    )
    parser.add_argument(
        "-f",
        "--framerate",
        type=positive_int,
        default=defaults.default_framerate,
        help=f"Frame rate of the output video (default: {defaults.default_framerate}).",
    )
    parser.add_argument(
        "-d",
        "--duration",
        type=positive_float,
        default=defaults.default_duration,
        help=f"Duration of the fade in seconds (default: {defaults.default_duration:g}).",
    )
    parser.add_argument(
        "-s",
        "--style",
        choices=FadeStyle.choices(),
        default=defaults.default_style.value,
        help=f"Style of the fade effect (default: {defaults.default_style.value}).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(DEFAULT_CONFIG_FILENAME),
        help=f"Settings JSON file (default: {DEFAULT_CONFIG_FILENAME}, falls back to FADER_* env vars).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def _preparse_config_path(argv: list[str] | None) -> Path:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", type=Path, default=Path(DEFAULT_CONFIG_FILENAME))
    known, _ = pre_parser.parse_known_args(argv)
    return known.config


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    config_path = _preparse_config_path(argv)
    try:
        settings = load_settings(config_path)
    except (OSError, ValueError) as exc:
        print(f"Failed to load settings from {config_path}: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    parser = build_parser(settings)
    args = parser.parse_args(argv)
    try:
        frame_count_for(args.duration, args.framerate)
    except ValueError as exc:
        parser.error(str(exc))

    logger = configure_logging(
        verbose=args.verbose,
        log_file=settings.log_file,
    )

    request = build_request(
        args.input,
        output_path=args.output,
        framerate=args.framerate,
        duration=args.duration,
        style=args.style,
        extension=settings.container_extension,
    )
    encoder = FFmpegEncoder.from_settings(settings, logger=logger)
    pipeline = FadePipeline(encoder, logger=logger)

    try:
        result = pipeline.run(request)
    except InputError as exc:
        logger.error("%s", exc)
        return EXIT_INPUT_ERROR
    except ResourceError as exc:
        logger.error("%s", exc)
        return EXIT_RESOURCE_ERROR
    except EncodeError as exc:
        logger.error("Video encoding failed: %s", exc)
        stderr_text = exc.stderr_text()
        if stderr_text:
            logger.error("Encoder output:\n%s", stderr_text)
        if exc.cmd:
            logger.error("Encoder command: %s", shlex.join(exc.cmd))
        return EXIT_ENCODER_FAILED

    logger.info(
        "Rendered %s frames at %sx%s",
        result.frame_count,
        result.width,
        result.height,
    )
    print(f"Video saved to {result.output_path}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
