"""Shared test fixtures for scenereel tests.

Clips are synthesized with the bundled ffmpeg (lavfi sources). Every clip
from make_clip shares size, fps and pixel format so xfade can join them.
"""

import subprocess
from unittest.mock import patch

import pytest
import imageio_ffmpeg
from PIL import Image

from scenereel.toolchain import ffmpeg_exe

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()

CLIP_SIZE = "160x120"
CLIP_FPS = 10


@pytest.fixture
def make_clip(tmp_path):
    """Factory: make_clip("a", 5.0, "red") -> Path of a silent color clip."""

    def _make(name, duration, color="blue"):
        out = tmp_path / f"{name}.mp4"
        subprocess.run(
            [
                _FFMPEG, "-y",
                "-f", "lavfi",
                "-i", f"color=c={color}:s={CLIP_SIZE}:d={duration}:r={CLIP_FPS}",
                "-c:v", "libx264", "-crf", "28", "-pix_fmt", "yuv420p",
                str(out),
            ],
            check=True,
            capture_output=True,
        )
        return out

    return _make


@pytest.fixture
def make_tone(tmp_path):
    """Factory: make_tone("music", 2.0, 440) -> Path of a sine-wave m4a."""

    def _make(name, duration, frequency=440):
        out = tmp_path / f"{name}.m4a"
        subprocess.run(
            [
                _FFMPEG, "-y",
                "-f", "lavfi",
                "-i", f"sine=frequency={frequency}:duration={duration}",
                "-c:a", "aac", "-b:a", "64k",
                str(out),
            ],
            check=True,
            capture_output=True,
        )
        return out

    return _make


@pytest.fixture
def still_image(tmp_path):
    """A 320x240 gradient PNG for motion / caption tests."""
    img = Image.new("RGB", (320, 240))
    for x in range(320):
        for y in range(0, 240, 8):
            img.putpixel((x, y), (x % 256, 80, 160))
    out = tmp_path / "still.png"
    img.save(out)
    return out


@pytest.fixture
def no_ffmpeg():
    """Make imageio-ffmpeg behave as on a host with no ffmpeg binary."""
    ffmpeg_exe.cache_clear()
    with patch(
        "imageio_ffmpeg.get_ffmpeg_exe",
        side_effect=RuntimeError("No ffmpeg exe could be found"),
    ):
        yield
    ffmpeg_exe.cache_clear()
