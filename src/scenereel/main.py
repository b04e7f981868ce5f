"""Subcommand dispatcher for scenereel.

Usage:
    scenereel assemble --manifest ... --output ...
    scenereel motion   scene.png --duration 10 --output scene.mp4
    scenereel mix      final.mp4 --music music.mp3 --output out.mp4
    scenereel caption  final.mp4 --text ... --output out.mp4
    scenereel probe    clip.mp4 ...
"""

import argparse
import sys


COMMANDS = {
    "assemble": "Join scene clips into one video with transitions",
    "motion": "Turn a still image into a pan/zoom clip",
    "mix": "Overlay music/ambience beds onto a video",
    "caption": "Burn a line of text onto a video",
    "probe": "Print clip durations",
}


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="scenereel",
        description="Clip assembly, transitions, and audio layering for scene videos.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    for name, help_text in COMMANDS.items():
        subparsers.add_parser(name, help=help_text, add_help=False)

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "assemble":
        from .assemble_cli import main as assemble_main
        assemble_main(remaining)
    elif parsed.command == "motion":
        from .motion_cli import main as motion_main
        motion_main(remaining)
    elif parsed.command == "mix":
        from .mix_cli import main as mix_main
        mix_main(remaining)
    elif parsed.command == "caption":
        from .caption_cli import main as caption_main
        caption_main(remaining)
    elif parsed.command == "probe":
        from .probe_cli import main as probe_main
        probe_main(remaining)


if __name__ == "__main__":
    main()
