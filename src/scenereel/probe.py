"""Duration probing - read a clip's playable length from container metadata."""

import json
import subprocess
from pathlib import Path

from .errors import ProbeError
from .toolchain import ffprobe_exe, require_moviepy, stderr_tail


def _ffprobe_duration(ffprobe: str, path: Path) -> float:
    """Get video duration in seconds using ffprobe."""
    try:
        result = subprocess.run(
            [ffprobe, "-v", "error", "-print_format", "json",
             "-show_format", str(path)],
            capture_output=True, text=True, check=True,
        )
    except subprocess.CalledProcessError as e:
        raise ProbeError(path, f"ffprobe failed: {stderr_tail(e.stderr)}") from e

    try:
        return float(json.loads(result.stdout)["format"]["duration"])
    except (ValueError, KeyError, TypeError) as e:
        raise ProbeError(path, "no duration in container metadata") from e


def _moviepy_duration(path: Path) -> float:
    """Parse duration from ffmpeg's stream info (no frame decoding)."""
    require_moviepy()
    from moviepy.video.io.ffmpeg_reader import ffmpeg_parse_infos

    try:
        infos = ffmpeg_parse_infos(str(path))
    except (OSError, ValueError, KeyError, IndexError) as e:
        raise ProbeError(path, f"unreadable media: {e}") from e

    duration = infos.get("duration")
    if duration is None:
        raise ProbeError(path, "no duration in container metadata")
    return float(duration)


def probe_duration(path: str | Path) -> float:
    """Return the duration of *path* in seconds.

    Uses ffprobe when it is on PATH, otherwise moviepy's ffmpeg info
    parser (the bundled imageio-ffmpeg ships ffmpeg only).

    Raises:
        ProbeError: File missing, unreadable, or without a positive duration.
    """
    path = Path(path)
    if not path.is_file():
        raise ProbeError(path, "file not found")

    ffprobe = ffprobe_exe()
    if ffprobe:
        duration = _ffprobe_duration(ffprobe, path)
    else:
        duration = _moviepy_duration(path)

    if duration <= 0:
        raise ProbeError(path, f"non-positive duration {duration!r}")
    return duration


def probe_durations(clips: list[str | Path]) -> list[float]:
    """Probe each clip in order. The first failure aborts the whole list."""
    return [probe_duration(clip) for clip in clips]
