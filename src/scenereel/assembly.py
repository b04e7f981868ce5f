"""Assembly pipeline - ordered clips in, one continuous video out.

    assemble(clips, transition, transition_duration, destination)

  1. Zero clips -> EmptyAssembly. One clip -> plain copy (no probing,
     no graph), whatever transition was requested.
  2. Probe every clip, in order. Any ProbeError aborts the assembly.
  3. Build the xfade chain (InvalidTransitionWindow if a clip is too short).
  4. Hand the graph to the ClipCompositor: xfade re-encode, or the
     stream-copy concat fallback if that fails.

assemble_video() wraps this with the toolchain check and the optional
audio overlay stage.
"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from .audio import AudioBed, overlay_audio
from .common import sibling_path
from .compositor import ClipCompositor
from .errors import CompositingError, EmptyAssembly
from .graph import build_transition_graph, expected_duration, normalize_transition
from .probe import probe_durations
from .toolchain import check_toolchain


DEFAULT_TRANSITION = "fade"
DEFAULT_TRANSITION_DURATION = 0.5
AUDIO_SUFFIX = "_with_audio"


@dataclass(frozen=True)
class AssemblyRequest:
    """One unit of work for the engine. Treated as read-only."""
    clips: tuple[str, ...]
    destination: str
    transition: str = DEFAULT_TRANSITION
    transition_duration: float = DEFAULT_TRANSITION_DURATION
    music: AudioBed | None = None
    ambient: AudioBed | None = None
    timeout: float | None = field(default=None, compare=False)

    @property
    def has_audio(self) -> bool:
        return self.music is not None or self.ambient is not None


def _validate_clip_paths(clips: list[Path]) -> None:
    missing = [str(c) for c in clips if not c.exists()]
    if missing:
        msg = f"Missing {len(missing)} clip file(s):\n"
        for p in missing:
            msg += f"  - {p}\n"
        raise FileNotFoundError(msg)


def assemble(
    clips: list[str | Path],
    transition: str,
    transition_duration: float,
    destination: str | Path,
    compositor: ClipCompositor | None = None,
    timeout: float | None = None,
) -> Path:
    """Join *clips* into one video at *destination* with uniform transitions.

    Args:
        clips: Ordered clip paths.
        transition: xfade transition kind (see graph.VALID_TRANSITIONS).
        transition_duration: Overlap in seconds; must be shorter than every clip.
        destination: Output mp4 path (parent dirs are created).
        compositor: Strategy pair to use; defaults to xfade + concat fallback.
        timeout: Per-ffmpeg-call timeout in seconds.

    Returns:
        Path of the produced video.

    Raises:
        EmptyAssembly: No clips.
        FileNotFoundError: Some clip path does not exist.
        ProbeError: A clip could not be measured.
        InvalidTransitionWindow: transition_duration >= some clip's duration.
        CompositingError: The single clip could not be copied.
        CompositingFailed: Both compositing strategies failed.
    """
    if not clips:
        raise EmptyAssembly()

    clip_paths = [Path(c) for c in clips]
    _validate_clip_paths(clip_paths)
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    # Single clip: nothing to join, copy verbatim.
    if len(clip_paths) == 1:
        clip = clip_paths[0]
        if destination.resolve() == clip.resolve():
            print(f"Single clip - already at {destination}")
            return destination
        print(f"Single clip - copying to {destination}")
        try:
            shutil.copyfile(clip, destination)
        except OSError as e:
            raise CompositingError(f"Cannot copy {clip} to {destination}: {e}") from e
        return destination

    kind = normalize_transition(transition)

    print(f"Probing {len(clip_paths)} clips...")
    durations = probe_durations(clip_paths)
    for i, (clip, d) in enumerate(zip(clip_paths, durations)):
        print(f"  [{i}] {d:.1f}s  {clip}")

    graph = build_transition_graph(durations, kind, transition_duration)

    compositor = compositor or ClipCompositor()
    print(f"\nAssembling {len(clip_paths)} clips with {kind} transitions...")
    print(f"Expected duration: ~{expected_duration(durations, transition_duration):.1f}s")
    print(f"Writing to: {destination}")
    result = compositor.composite(clip_paths, graph, destination, timeout=timeout)
    print(f"\nDone: {result}")
    return result


def assemble_video(
    request: AssemblyRequest,
    compositor: ClipCompositor | None = None,
) -> Path:
    """Full assembly stage: toolchain check, clips, then optional audio.

    With audio beds the mixed video is written beside the destination as
    <stem>_with_audio.mp4 and that path is returned.

    Raises:
        ToolchainUnavailable: ffmpeg missing, checked before any work.
        (plus everything assemble() and overlay_audio() raise)
    """
    check_toolchain()

    video = assemble(
        list(request.clips),
        request.transition,
        request.transition_duration,
        request.destination,
        compositor=compositor,
        timeout=request.timeout,
    )

    if not request.has_audio:
        return video

    return overlay_audio(
        video,
        sibling_path(video, AUDIO_SUFFIX),
        primary=request.music,
        secondary=request.ambient,
        timeout=request.timeout,
    )
