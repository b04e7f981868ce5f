"""scenereel.common - shared helpers for manifests and text rendering."""

import re
from pathlib import Path

from PIL import ImageFont


# ── Font paths ─────────────────────────────────────────────────────
# Inter preferred, DejaVu Sans as fallback.

FONT_PATHS = [
    Path.home() / ".local/share/fonts/Inter.ttc",
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
]


# ── Path utilities ─────────────────────────────────────────────────

def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the paths dict."""
    def _replace(match):
        key = match.group(1)
        if key not in paths:
            raise ValueError(f"Unknown path variable: ${{{key}}}")
        return paths[key]
    return re.sub(r"\$\{(\w+)\}", _replace, text)


def sibling_path(path: str | Path, suffix: str) -> Path:
    """out/final.mp4 + '_with_audio' -> out/final_with_audio.mp4"""
    path = Path(path)
    return path.with_name(f"{path.stem}{suffix}{path.suffix}")


# ── Font loading ───────────────────────────────────────────────────

def load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load Inter (or fallback) at the given size.

    Inter.ttc is a font collection; index 0 is Regular.
    """
    for font_path in FONT_PATHS:
        if font_path.exists():
            try:
                return ImageFont.truetype(str(font_path), size=size, index=0)
            except (OSError, IndexError):
                continue
    # Last resort: Pillow default font (scalable on Pillow >= 10.1).
    return ImageFont.load_default(size=size)
