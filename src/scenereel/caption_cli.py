"""CLI for burning a line of text onto a video.

Usage:
    scenereel caption final.mp4 --text "A cozy bookstore" --output titled.mp4
"""

import argparse

from .captions import VALID_POSITIONS, overlay_text


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Overlay a line of text on a video.",
    )
    parser.add_argument("video", help="Path to the source video")
    parser.add_argument("--text", required=True, help="Text to overlay")
    parser.add_argument("--output", required=True, help="Output mp4 path")
    parser.add_argument(
        "--position", default="bottom", choices=sorted(VALID_POSITIONS),
        help="Vertical placement (default: bottom)",
    )
    parser.add_argument(
        "--font-size", type=int, default=48,
        help="Font size in pixels (default: 48)",
    )
    parsed = parser.parse_args(args)

    overlay_text(
        parsed.video, parsed.output, parsed.text,
        position=parsed.position, font_size=parsed.font_size,
    )
    print(f"Done: {parsed.output}")


if __name__ == "__main__":
    main()
