"""ffmpeg discovery and subprocess execution.

The ffmpeg binary comes from imageio-ffmpeg (bundled, or the one it finds
on the system). imageio-ffmpeg does NOT bundle ffprobe, so ffprobe is only
used when it happens to be on PATH.
"""

import functools
import shutil
import subprocess

import imageio_ffmpeg

from .errors import ToolchainUnavailable

# How much of ffmpeg's stderr to keep in error messages.
STDERR_TAIL_CHARS = 2000


@functools.lru_cache(maxsize=None)
def ffmpeg_exe() -> str:
    """Return the path of a usable ffmpeg binary.

    Raises:
        ToolchainUnavailable: imageio-ffmpeg could not locate a binary.
    """
    try:
        return imageio_ffmpeg.get_ffmpeg_exe()
    except RuntimeError as e:
        raise ToolchainUnavailable(f"ffmpeg is not installed or not in PATH: {e}") from e


def require_moviepy() -> None:
    """Make sure moviepy can load before a caller imports from it.

    moviepy looks up its ffmpeg binary at import time and raises a bare
    RuntimeError when there is none. Modules here import it inside the
    functions that need it, right after this check.

    Raises:
        ToolchainUnavailable: No ffmpeg, or moviepy could not load it.
    """
    ffmpeg_exe()
    try:
        import moviepy  # noqa: F401
    except RuntimeError as e:
        raise ToolchainUnavailable(f"moviepy could not load ffmpeg: {e}") from e


def ffprobe_exe() -> str | None:
    """Return the ffprobe path if one is on PATH, else None."""
    return shutil.which("ffprobe")


def check_toolchain() -> str:
    """Verify ffmpeg runs, before any work begins. Returns its version line."""
    exe = ffmpeg_exe()
    try:
        result = subprocess.run(
            [exe, "-version"], capture_output=True, text=True, check=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        raise ToolchainUnavailable(f"ffmpeg at {exe} does not run: {e}") from e
    return result.stdout.splitlines()[0] if result.stdout else exe


def stderr_tail(stderr) -> str:
    if not stderr:
        return ""
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")
    return stderr.strip()[-STDERR_TAIL_CHARS:]


def run_ffmpeg(args: list[str], error_cls, timeout: float | None = None) -> None:
    """Run ffmpeg with *args* (everything after the binary).

    Any failure (non-zero exit, timeout, missing binary) is re-raised as
    *error_cls* with the tail of ffmpeg's stderr in the message.
    """
    cmd = [ffmpeg_exe(), "-y", "-hide_banner", *args]
    try:
        subprocess.run(cmd, check=True, capture_output=True, timeout=timeout)
    except subprocess.CalledProcessError as e:
        raise error_cls(
            f"ffmpeg exited with status {e.returncode}: {stderr_tail(e.stderr)}"
        ) from e
    except subprocess.TimeoutExpired as e:
        raise error_cls(f"ffmpeg timed out after {e.timeout}s") from e
    except OSError as e:
        raise error_cls(f"ffmpeg could not be started: {e}") from e
