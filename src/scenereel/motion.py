"""Still-to-video fallback - parametric pan/zoom over a single image.

Used when an upstream animation provider fails for a scene: the scene's
still image is turned into a moving clip that re-enters assembly like any
other clip.

Motion is a function of the output frame index at a fixed fps and fixed
output resolution:

  - zoom_in:   zoom grows by ZOOM_STEP per frame from 1.0, capped at MAX_ZOOM.
  - zoom_out:  zoom starts at MAX_ZOOM and shrinks by ZOOM_STEP per frame,
               never below MIN_ZOOM_OUT.
  - pan_left:  fixed PAN_ZOOM; the window starts at the left edge and slides
               right PAN_STEP source pixels per frame (content moves left).
  - pan_right: fixed PAN_ZOOM; the window starts at the right edge and
               slides left.

The window always keeps the output aspect ratio, so frames are never
stretched. Windows are clamped to the image.
"""

from pathlib import Path

import numpy as np
from PIL import Image

from .toolchain import require_moviepy


VALID_MOTIONS = {"zoom_in", "zoom_out", "pan_left", "pan_right"}

DEFAULT_FPS = 25
DEFAULT_SIZE = (1920, 1080)

ZOOM_STEP = 0.001
MAX_ZOOM = 1.5
MIN_ZOOM_OUT = 1.001
PAN_ZOOM = 1.2
PAN_STEP = 1.0


def _base_window(src_size: tuple[int, int], out_size: tuple[int, int]) -> tuple[float, float]:
    """Largest (w, h) with the output aspect ratio that fits in the source."""
    src_w, src_h = src_size
    out_w, out_h = out_size
    if src_w / src_h > out_w / out_h:
        return src_h * out_w / out_h, float(src_h)
    return float(src_w), src_w * out_h / out_w


def zoom_at(motion: str, frame_index: int) -> float:
    """Zoom factor for *motion* at output frame *frame_index*."""
    if motion == "zoom_in":
        return min(1.0 + ZOOM_STEP * frame_index, MAX_ZOOM)
    if motion == "zoom_out":
        return max(MAX_ZOOM - ZOOM_STEP * frame_index, MIN_ZOOM_OUT)
    if motion in ("pan_left", "pan_right"):
        return PAN_ZOOM
    raise ValueError(f"Invalid motion '{motion}'. Valid: {sorted(VALID_MOTIONS)}")


def motion_window(
    motion: str,
    frame_index: int,
    src_size: tuple[int, int],
    out_size: tuple[int, int] = DEFAULT_SIZE,
) -> tuple[float, float, float, float]:
    """Source-image crop box (left, top, right, bottom) for one output frame."""
    src_w, src_h = src_size
    base_w, base_h = _base_window(src_size, out_size)
    zoom = zoom_at(motion, frame_index)
    w = base_w / zoom
    h = base_h / zoom
    top = (src_h - h) / 2
    max_left = src_w - w

    if motion == "pan_left":
        left = min(PAN_STEP * frame_index, max_left)
    elif motion == "pan_right":
        left = max(max_left - PAN_STEP * frame_index, 0.0)
    else:
        left = max_left / 2

    return (left, top, left + w, top + h)


def frame_count(duration: float, fps: int = DEFAULT_FPS) -> int:
    return max(1, round(duration * fps))


def render_motion_frame(
    image: Image.Image,
    motion: str,
    frame_index: int,
    out_size: tuple[int, int] = DEFAULT_SIZE,
) -> np.ndarray:
    """Render one RGB frame (h, w, 3) of the motion."""
    box = motion_window(motion, frame_index, image.size, out_size)
    frame = image.resize(out_size, Image.Resampling.LANCZOS, box=box)
    return np.asarray(frame)


def generate_motion_clip(
    image: str | Path,
    destination: str | Path,
    duration: float,
    motion: str = "zoom_in",
    fps: int = DEFAULT_FPS,
    size: tuple[int, int] = DEFAULT_SIZE,
) -> Path:
    """Render *image* as a *duration*-second clip with the given motion.

    Args:
        image: Path to the still image.
        destination: Output mp4 path (parent dirs are created).
        duration: Clip length in seconds, > 0.
        motion: One of VALID_MOTIONS.
        fps: Output frame rate.
        size: Output (width, height).

    Returns:
        Path of the written clip.

    Raises:
        ValueError: Unknown motion or non-positive duration.
        FileNotFoundError: Image does not exist.
        ToolchainUnavailable: ffmpeg missing.
    """
    if motion not in VALID_MOTIONS:
        raise ValueError(f"Invalid motion '{motion}'. Valid: {sorted(VALID_MOTIONS)}")
    if duration <= 0:
        raise ValueError(f"Motion clip duration must be > 0, got {duration!r}")

    image = Path(image)
    if not image.exists():
        raise FileNotFoundError(f"Still image not found: {image}")
    destination = Path(destination)

    require_moviepy()
    from moviepy import VideoClip

    destination.parent.mkdir(parents=True, exist_ok=True)

    with Image.open(image) as img:
        source = img.convert("RGB")

    last_frame = frame_count(duration, fps) - 1

    def _make_frame(t):
        n = min(int(round(t * fps)), last_frame)
        return render_motion_frame(source, motion, n, size)

    print(f"  MOTION {motion} {duration:.1f}s  {image} -> {destination}", flush=True)
    clip = VideoClip(_make_frame, duration=duration)
    clip.write_videofile(
        str(destination),
        fps=fps,
        codec="libx264",
        audio=False,
        preset="medium",
        ffmpeg_params=["-pix_fmt", "yuv420p"],
        logger=None,
    )
    clip.close()
    return destination
