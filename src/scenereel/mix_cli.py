"""CLI for the audio layer mixer.

Usage:
    scenereel mix final.mp4 --music music.mp3 --ambient rain.wav --output out.mp4
    scenereel mix final.mp4 --music music.mp3 --music-gain 0.5 --output out.mp4
"""

import argparse

from .audio import DEFAULT_AMBIENT_GAIN, DEFAULT_MUSIC_GAIN, AudioBed, overlay_audio
from .errors import ScenereelError


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Replace a video's audio with up to two gain-scaled beds.",
    )
    parser.add_argument("video", help="Path to the composited video")
    parser.add_argument("--output", required=True, help="Output mp4 path")
    parser.add_argument("--music", default=None, help="Music bed audio file")
    parser.add_argument(
        "--music-gain", type=float, default=DEFAULT_MUSIC_GAIN,
        help=f"Music gain 0..1 (default: {DEFAULT_MUSIC_GAIN})",
    )
    parser.add_argument("--ambient", default=None, help="Ambience bed audio file")
    parser.add_argument(
        "--ambient-gain", type=float, default=DEFAULT_AMBIENT_GAIN,
        help=f"Ambience gain 0..1 (default: {DEFAULT_AMBIENT_GAIN})",
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Timeout in seconds for the ffmpeg invocation",
    )
    parsed = parser.parse_args(args)

    try:
        music = AudioBed(parsed.music, parsed.music_gain) if parsed.music else None
        ambient = AudioBed(parsed.ambient, parsed.ambient_gain) if parsed.ambient else None
    except ValueError as e:
        parser.error(str(e))

    try:
        overlay_audio(
            parsed.video, parsed.output, primary=music, secondary=ambient,
            timeout=parsed.timeout,
        )
    except ScenereelError as e:
        parser.exit(1, f"Error: {e}\n")
    print(f"Done: {parsed.output}")


if __name__ == "__main__":
    main()
