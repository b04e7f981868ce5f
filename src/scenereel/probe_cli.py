"""CLI for duration probing.

Usage:
    scenereel probe scene_01.mp4 scene_02.mp4 ...
"""

import argparse

from .errors import ScenereelError
from .probe import probe_duration


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Print the duration of each clip in seconds.",
    )
    parser.add_argument("clips", nargs="+", help="Clip paths")
    parsed = parser.parse_args(args)

    total = 0.0
    for clip in parsed.clips:
        try:
            duration = probe_duration(clip)
        except ScenereelError as e:
            parser.exit(1, f"Error: {e}\n")
        total += duration
        print(f"  {duration:8.3f}s  {clip}")
    if len(parsed.clips) > 1:
        print(f"  {total:8.3f}s  total")


if __name__ == "__main__":
    main()
