"""Assembly manifest loader - which clips to join, how, and with what audio.

Assembly manifest schema:
  video:
    transition: fade            # xfade kind, applied to every join
    transition_duration: 0.5    # seconds, > 0
    fps: 25                     # for clips rendered from stills
    resolution: [1920, 1080]    # for clips rendered from stills
  paths:
    scenes: "/path/to/scenes"
  clips:
    - path: "${scenes}/scene_01.mp4"
    - image: "${scenes}/scene_02.png"   # still -> motion clip fallback
      motion: pan_right
      duration: 10
      path: "${scenes}/scene_02.mp4"    # optional, default: image.mp4
  audio:
    music:   {path: "${scenes}/music.mp3", gain: 0.3}
    ambient: {path: "${scenes}/ambient.wav", gain: 0.1}
"""

from pathlib import Path

import yaml

from .assembly import (
    DEFAULT_TRANSITION,
    DEFAULT_TRANSITION_DURATION,
    AssemblyRequest,
)
from .audio import DEFAULT_AMBIENT_GAIN, DEFAULT_MUSIC_GAIN, AudioBed
from .common import resolve_path_vars
from .graph import normalize_transition
from .motion import DEFAULT_FPS, DEFAULT_SIZE, VALID_MOTIONS


AUDIO_BEDS = {"music": DEFAULT_MUSIC_GAIN, "ambient": DEFAULT_AMBIENT_GAIN}


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _load_video_settings(raw: dict) -> dict:
    video = dict(raw.get("video") or {})

    video["transition"] = normalize_transition(
        video.get("transition", DEFAULT_TRANSITION)
    )

    t = video.get("transition_duration", DEFAULT_TRANSITION_DURATION)
    if not _is_number(t) or t <= 0:
        raise ValueError(
            f"Assembly manifest: video.transition_duration must be > 0, got {t!r}"
        )
    video["transition_duration"] = float(t)

    fps = video.get("fps", DEFAULT_FPS)
    if not isinstance(fps, int) or isinstance(fps, bool) or fps <= 0:
        raise ValueError(f"Assembly manifest: video.fps must be a positive int, got {fps!r}")
    video["fps"] = fps

    resolution = video.get("resolution", list(DEFAULT_SIZE))
    if (
        not isinstance(resolution, (list, tuple))
        or len(resolution) != 2
        or not all(isinstance(v, int) and v > 0 for v in resolution)
    ):
        raise ValueError(
            f"Assembly manifest: video.resolution must be [width, height], got {resolution!r}"
        )
    video["resolution"] = tuple(resolution)
    return video


def _load_clip(i: int, clip: dict, paths: dict) -> dict:
    if not isinstance(clip, dict):
        raise ValueError(f"Assembly clip {i}: expected a mapping, got {clip!r}")

    if "image" not in clip:
        if "path" not in clip:
            raise ValueError(f"Assembly clip {i}: missing required field 'path' or 'image'")
        return {"path": resolve_path_vars(str(clip["path"]), paths)}

    # Still image rendered with the motion generator before assembly.
    image = resolve_path_vars(str(clip["image"]), paths)
    motion = clip.get("motion", "zoom_in")
    if motion not in VALID_MOTIONS:
        raise ValueError(
            f"Assembly clip {i}: invalid motion '{motion}'. Valid: {sorted(VALID_MOTIONS)}"
        )
    if "duration" not in clip:
        raise ValueError(f"Assembly clip {i}: still image needs a 'duration'")
    duration = clip["duration"]
    if not _is_number(duration) or duration <= 0:
        raise ValueError(f"Assembly clip {i}: duration must be > 0, got {duration!r}")

    if "path" in clip:
        path = resolve_path_vars(str(clip["path"]), paths)
    else:
        path = str(Path(image).with_suffix(".mp4"))

    return {"path": path, "image": image, "motion": motion, "duration": float(duration)}


def _load_audio(raw: dict, paths: dict) -> dict:
    audio = raw.get("audio") or {}
    unknown = set(audio) - set(AUDIO_BEDS)
    if unknown:
        raise ValueError(
            f"Assembly manifest: unknown audio bed(s) {sorted(unknown)}. "
            f"Valid: {sorted(AUDIO_BEDS)}"
        )

    beds = {}
    for name, default_gain in AUDIO_BEDS.items():
        bed = audio.get(name)
        if bed is None:
            continue
        if isinstance(bed, str):
            bed = {"path": bed}
        if not isinstance(bed, dict):
            raise ValueError(
                f"Assembly manifest: audio.{name} must be a path or a mapping, got {bed!r}"
            )
        if "path" not in bed:
            raise ValueError(f"Assembly manifest: audio.{name} missing required field 'path'")
        gain = bed.get("gain", default_gain)
        if not _is_number(gain) or not 0 <= gain <= 1:
            raise ValueError(
                f"Assembly manifest: audio.{name}.gain must be in [0, 1], got {gain!r}"
            )
        beds[name] = {
            "path": resolve_path_vars(str(bed["path"]), paths),
            "gain": float(gain),
        }
    return beds


def load_assembly_manifest(manifest_path: str | Path) -> dict:
    """Load, validate, and normalize an assembly manifest.

    Processing pipeline:
      1. Parse YAML.
      2. Validate video settings, applying defaults.
      3. Resolve ${path} variables in clip, image, and audio paths.
      4. Validate each clip and audio bed.

    Returns:
        Normalized config dict: {"video", "clips", "audio"}.

    Raises:
        ValueError: Missing/invalid fields.
    """
    with open(manifest_path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError("Assembly manifest: top level must be a mapping")

    paths = raw.get("paths") or {}
    video = _load_video_settings(raw)
    clips = [_load_clip(i, clip, paths) for i, clip in enumerate(raw.get("clips") or [])]
    audio = _load_audio(raw, paths)

    return {"video": video, "clips": clips, "audio": audio}


def validate_assembly_paths(config: dict) -> None:
    """Check that every clip (or its source image) and audio bed exists.

    Raises:
        FileNotFoundError: Lists all missing files.
    """
    missing = []
    for clip in config["clips"]:
        source = clip.get("image", clip["path"])
        if not Path(source).exists():
            missing.append(source)
    for bed in config["audio"].values():
        if not Path(bed["path"]).exists():
            missing.append(bed["path"])

    if missing:
        msg = f"Missing {len(missing)} file(s):\n"
        for p in missing:
            msg += f"  - {p}\n"
        raise FileNotFoundError(msg)


def build_request(
    config: dict, output_path: str | Path, timeout: float | None = None,
) -> AssemblyRequest:
    """Turn a loaded manifest into an AssemblyRequest."""
    video = config["video"]
    audio = config["audio"]
    music = audio.get("music")
    ambient = audio.get("ambient")
    return AssemblyRequest(
        clips=tuple(clip["path"] for clip in config["clips"]),
        destination=str(output_path),
        transition=video["transition"],
        transition_duration=video["transition_duration"],
        music=AudioBed(music["path"], music["gain"]) if music else None,
        ambient=AudioBed(ambient["path"], ambient["gain"]) if ambient else None,
        timeout=timeout,
    )
