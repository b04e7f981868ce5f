"""Text overlay - burn a single line of text onto a finished video.

White text with a black drop shadow, horizontally centered, at the top,
center, or bottom of the frame. The source audio is kept.
"""

from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw

from .common import load_font
from .toolchain import require_moviepy


VALID_POSITIONS = {"top", "center", "bottom"}

EDGE_MARGIN = 50          # px from top/bottom edge
SHADOW_OFFSET = 2         # px, down and right
TEXT_COLOR = (255, 255, 255, 255)
SHADOW_COLOR = (0, 0, 0, 255)


def compute_text_position(
    position: str,
    patch_w: int,
    patch_h: int,
    frame_w: int,
    frame_h: int,
) -> tuple[int, int]:
    """(x, y) of the text patch's top-left corner on the frame."""
    if position not in VALID_POSITIONS:
        raise ValueError(
            f"Invalid text position '{position}'. Valid: {sorted(VALID_POSITIONS)}"
        )
    x = (frame_w - patch_w) // 2
    if position == "top":
        y = EDGE_MARGIN
    elif position == "center":
        y = (frame_h - patch_h) // 2
    else:
        y = frame_h - patch_h - EDGE_MARGIN

    x = max(0, min(x, frame_w - patch_w))
    y = max(0, min(y, frame_h - patch_h))
    return x, y


def render_text_patch(text: str, font_size: int) -> np.ndarray:
    """Render text plus shadow on a transparent patch. Returns RGBA (h, w, 4)."""
    font = load_font(font_size)
    draw_tmp = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
    left, top, right, bottom = draw_tmp.textbbox((0, 0), text, font=font)
    patch_w = right - left + SHADOW_OFFSET
    patch_h = bottom - top + SHADOW_OFFSET

    img = Image.new("RGBA", (max(1, patch_w), max(1, patch_h)), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    origin = (-left, -top)
    draw.text(
        (origin[0] + SHADOW_OFFSET, origin[1] + SHADOW_OFFSET),
        text, fill=SHADOW_COLOR, font=font,
    )
    draw.text(origin, text, fill=TEXT_COLOR, font=font)
    return np.array(img)


def apply_text_to_frame(frame: np.ndarray, patch: np.ndarray, position: str) -> np.ndarray:
    """Alpha-blend *patch* onto a copy of *frame* at *position*."""
    frame_h, frame_w = frame.shape[:2]
    # Crop patches wider/taller than the frame.
    patch = patch[:frame_h, :frame_w]
    patch_h, patch_w = patch.shape[:2]
    x, y = compute_text_position(position, patch_w, patch_h, frame_w, frame_h)

    result = frame.copy()
    alpha = patch[:, :, 3:4].astype(np.float32) / 255.0
    rgb = patch[:, :, :3].astype(np.float32)
    dest = result[y:y + patch_h, x:x + patch_w].astype(np.float32)
    blended = dest * (1 - alpha) + rgb * alpha
    result[y:y + patch_h, x:x + patch_w] = blended.astype(np.uint8)
    return result


def overlay_text(
    video: str | Path,
    destination: str | Path,
    text: str,
    position: str = "bottom",
    font_size: int = 48,
) -> Path:
    """Write *video* with *text* burned in to *destination*.

    Raises:
        ValueError: Unknown position or empty text.
        FileNotFoundError: Video does not exist.
        ToolchainUnavailable: ffmpeg missing.
    """
    if position not in VALID_POSITIONS:
        raise ValueError(
            f"Invalid text position '{position}'. Valid: {sorted(VALID_POSITIONS)}"
        )
    if not text:
        raise ValueError("Overlay text must not be empty")
    video = Path(video)
    if not video.exists():
        raise FileNotFoundError(f"Video not found: {video}")
    destination = Path(destination)

    require_moviepy()
    from moviepy import VideoFileClip

    destination.parent.mkdir(parents=True, exist_ok=True)

    patch = render_text_patch(text, font_size)

    def _apply(get_frame, t):
        return apply_text_to_frame(get_frame(t), patch, position)

    print(f"  TEXT   '{text}' ({position}) -> {destination}", flush=True)
    with VideoFileClip(str(video)) as clip:
        captioned = clip.transform(_apply, apply_to=[])
        captioned.write_videofile(
            str(destination),
            fps=clip.fps,
            codec="libx264",
            audio=clip.audio is not None,
            audio_codec="aac",
            preset="medium",
            ffmpeg_params=["-crf", "18", "-pix_fmt", "yuv420p"],
            logger=None,
        )
    return destination
