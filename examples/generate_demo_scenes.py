#!/usr/bin/env python3
"""Generate synthetic scene assets and an assembly manifest for a demo run.

Creates in examples/demo-scenes/:
  - four solid-color scene clips of varying length (2.5s to 4s)
  - one still image (rendered into a pan clip at assembly time)
  - a music tone and an ambience tone
  - assembly.yaml wiring them together

Usage:
    python examples/generate_demo_scenes.py
    scenereel assemble --manifest examples/demo-scenes/assembly.yaml \
        --output examples/demo-scenes/final.mp4
"""

import subprocess
from pathlib import Path

import imageio_ffmpeg
import yaml
from PIL import Image, ImageDraw

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()

OUTPUT_DIR = Path(__file__).resolve().parent / "demo-scenes"
SIZE = (640, 360)
FPS = 25

# Durations vary so the xfade offsets are not all equal.
SCENES = [
    ("scene_01", "0xB43C3C", 3.0),  # red
    ("scene_02", "0x3C3CB4", 4.0),  # blue
    ("scene_04", "0x3CA03C", 2.5),  # green
    ("scene_05", "0xC88228", 3.5),  # orange
]


def _make_scene(name: str, color: str, duration: float) -> Path:
    out = OUTPUT_DIR / f"{name}.mp4"
    subprocess.run(
        [
            _FFMPEG, "-y",
            "-f", "lavfi",
            "-i", f"color=c={color}:s={SIZE[0]}x{SIZE[1]}:d={duration}:r={FPS}",
            "-c:v", "libx264", "-crf", "23", "-pix_fmt", "yuv420p",
            str(out),
        ],
        check=True,
        capture_output=True,
    )
    return out


def _make_still(name: str) -> Path:
    """A wide striped image so pans are easy to see."""
    img = Image.new("RGB", (1280, 480), (30, 30, 40))
    draw = ImageDraw.Draw(img)
    for x in range(0, 1280, 80):
        draw.rectangle([x, 0, x + 39, 479], fill=(200, 180, 60))
    draw.text((40, 40), name, fill=(255, 255, 255))
    out = OUTPUT_DIR / f"{name}.png"
    img.save(out)
    return out


def _make_tone(name: str, frequency: int, duration: float) -> Path:
    out = OUTPUT_DIR / f"{name}.m4a"
    subprocess.run(
        [
            _FFMPEG, "-y",
            "-f", "lavfi", "-i", f"sine=frequency={frequency}:duration={duration}",
            "-c:a", "aac", "-b:a", "96k",
            str(out),
        ],
        check=True,
        capture_output=True,
    )
    return out


def main():
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    for name, color, duration in SCENES:
        path = _make_scene(name, color, duration)
        print(f"  {path.name}  {duration:.1f}s")
    still = _make_still("scene_03")
    print(f"  {still.name}")
    _make_tone("music", 440, 20.0)
    _make_tone("ambient", 110, 20.0)

    manifest = {
        "video": {
            "transition": "wipeleft",
            "transition_duration": 0.5,
            "fps": FPS,
            "resolution": list(SIZE),
        },
        "paths": {"scenes": str(OUTPUT_DIR)},
        "clips": [
            {"path": "${scenes}/scene_01.mp4"},
            {"path": "${scenes}/scene_02.mp4"},
            {"image": "${scenes}/scene_03.png", "motion": "pan_left", "duration": 3},
            {"path": "${scenes}/scene_04.mp4"},
            {"path": "${scenes}/scene_05.mp4"},
        ],
        "audio": {
            "music": {"path": "${scenes}/music.m4a", "gain": 0.3},
            "ambient": {"path": "${scenes}/ambient.m4a", "gain": 0.1},
        },
    }
    manifest_path = OUTPUT_DIR / "assembly.yaml"
    with open(manifest_path, "w") as f:
        yaml.safe_dump(manifest, f, sort_keys=False)
    print(f"\nManifest: {manifest_path}")


if __name__ == "__main__":
    main()
