"""CLI for the still-to-video fallback.

Usage:
    scenereel motion scene.png --duration 10 --motion pan_left --output scene.mp4
"""

import argparse

from .motion import DEFAULT_FPS, VALID_MOTIONS, generate_motion_clip


def _parse_size(value: str) -> tuple[int, int]:
    try:
        w, h = (int(v) for v in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got '{value}'")
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive, got '{value}'")
    return w, h


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Turn a still image into a pan/zoom video clip.",
    )
    parser.add_argument("image", help="Path to the still image")
    parser.add_argument(
        "--duration", type=float, required=True,
        help="Clip length in seconds",
    )
    parser.add_argument(
        "--motion", default="zoom_in", choices=sorted(VALID_MOTIONS),
        help="Camera motion (default: zoom_in)",
    )
    parser.add_argument("--output", required=True, help="Output mp4 path")
    parser.add_argument(
        "--fps", type=int, default=DEFAULT_FPS,
        help=f"Output frame rate (default: {DEFAULT_FPS})",
    )
    parser.add_argument(
        "--size", type=_parse_size, default="1920x1080",
        help="Output resolution WIDTHxHEIGHT (default: 1920x1080)",
    )
    parsed = parser.parse_args(args)

    if parsed.duration <= 0:
        parser.error("--duration must be > 0")

    generate_motion_clip(
        parsed.image, parsed.output, parsed.duration, parsed.motion,
        fps=parsed.fps, size=parsed.size,
    )
    print(f"Done: {parsed.output}")


if __name__ == "__main__":
    main()
