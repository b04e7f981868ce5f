"""Audio layer mixer - replace a video's audio with up to two gain-scaled beds.

  - no beds: pass-through copy, no re-encode.
  - one bed: video stream copied, audio = bed * gain, output trimmed to the
    shorter of video and bed (-shortest).
  - two beds: each bed scaled independently, then amplitude-mixed (amix).
"""

import shutil
from dataclasses import dataclass
from pathlib import Path

from .errors import AudioMixFailed
from .toolchain import run_ffmpeg


DEFAULT_MUSIC_GAIN = 0.3
DEFAULT_AMBIENT_GAIN = 0.1


@dataclass(frozen=True)
class AudioBed:
    """An audio file and the gain multiplier (0..1) to play it at."""
    path: str
    gain: float = 1.0

    def __post_init__(self):
        if (
            not isinstance(self.gain, (int, float))
            or isinstance(self.gain, bool)
            or not 0 <= self.gain <= 1
        ):
            raise ValueError(f"Audio bed gain must be in [0, 1], got {self.gain!r}")


def build_audio_filter(beds: list[AudioBed]) -> tuple[str, str]:
    """Return (filter_complex, output_label) for 1 or 2 beds.

    Bed k is ffmpeg input k+1 (input 0 is the video).
    """
    if not 1 <= len(beds) <= 2:
        raise ValueError(f"Expected 1 or 2 audio beds, got {len(beds)}")

    parts = []
    labels = []
    for k, bed in enumerate(beds):
        label = f"[a{k}]"
        parts.append(f"[{k + 1}:a]volume={bed.gain:g}{label}")
        labels.append(label)

    if len(beds) == 1:
        return ";".join(parts), labels[0]

    parts.append(f"{''.join(labels)}amix=inputs=2[aout]")
    return ";".join(parts), "[aout]"


def build_mix_args(video: Path, beds: list[AudioBed], destination: Path) -> list[str]:
    filter_graph, out_label = build_audio_filter(beds)
    inputs = ["-i", str(video)]
    for bed in beds:
        inputs.extend(["-i", str(bed.path)])
    return [
        *inputs,
        "-filter_complex", filter_graph,
        "-map", "0:v",
        "-map", out_label,
        "-c:v", "copy",
        "-c:a", "aac",
        "-shortest",
        str(destination),
    ]


def overlay_audio(
    video: str | Path,
    destination: str | Path,
    primary: AudioBed | None = None,
    secondary: AudioBed | None = None,
    timeout: float | None = None,
) -> Path:
    """Marry zero, one or two audio beds to *video*, writing *destination*.

    Raises:
        FileNotFoundError: The video or a bed file does not exist.
        AudioMixFailed: ffmpeg failed.
    """
    video = Path(video)
    destination = Path(destination)
    beds = [bed for bed in (primary, secondary) if bed is not None]

    missing = [str(p) for p in [video, *(Path(b.path) for b in beds)] if not p.exists()]
    if missing:
        raise FileNotFoundError(f"Missing audio overlay input(s): {', '.join(missing)}")

    destination.parent.mkdir(parents=True, exist_ok=True)

    if not beds:
        try:
            shutil.copyfile(video, destination)
        except OSError as e:
            raise AudioMixFailed(f"Cannot copy {video} to {destination}: {e}") from e
        return destination

    print(f"  AUDIO  mixing {len(beds)} bed(s) into {destination}", flush=True)
    run_ffmpeg(build_mix_args(video, beds, destination), AudioMixFailed, timeout)
    return destination
