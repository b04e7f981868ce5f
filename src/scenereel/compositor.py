"""Clip compositor - run the transition graph, fall back to stream-copy concat.

Two strategies share one interface, run(clips, graph, destination, timeout):

  - XfadeStrategy: executes the xfade filter graph and re-encodes video
    (crossfades cannot be stream-copied).
  - ConcatStrategy: writes a concat-demuxer manifest and joins the clips
    with -c copy. No re-encoding, no transitions. The manifest is always
    deleted, whether the concat succeeds or not.

ClipCompositor is the single decision point: primary first, fallback only
if the primary raised CompositingError.
"""

from pathlib import Path

from .errors import CompositingError, CompositingFailed
from .graph import FilterGraph
from .toolchain import run_ffmpeg


DEFAULT_CRF = 18
DEFAULT_PRESET = "medium"


def _codec_params(codec: str, crf: int) -> list[str]:
    """Constant-quality flags for the given encoder."""
    if codec == "h264_nvenc":
        return ["-cq", str(crf), "-pix_fmt", "yuv420p"]
    return ["-crf", str(crf), "-pix_fmt", "yuv420p"]


def _quote_concat_path(path: Path) -> str:
    # concat demuxer: single-quoted, embedded quotes closed/escaped/reopened.
    return "'" + str(path).replace("'", "'\\''") + "'"


def write_concat_manifest(clips: list[str | Path], manifest_path: str | Path) -> Path:
    """Write one `file '<absolute path>'` line per clip, in input order."""
    manifest_path = Path(manifest_path)
    lines = [f"file {_quote_concat_path(Path(c).resolve())}" for c in clips]
    manifest_path.write_text("\n".join(lines) + "\n")
    return manifest_path


def concat_manifest_path(destination: str | Path) -> Path:
    """Manifest lives beside the output: out.mp4 -> out_list.txt."""
    destination = Path(destination)
    return destination.with_name(f"{destination.stem}_list.txt")


class XfadeStrategy:
    """Primary strategy: chained xfade filter graph, re-encoded."""

    name = "xfade"

    def __init__(
        self,
        codec: str = "libx264",
        crf: int = DEFAULT_CRF,
        preset: str = DEFAULT_PRESET,
    ):
        self.codec = codec
        self.crf = crf
        self.preset = preset

    def build_args(
        self, clips: list[str | Path], graph: FilterGraph, destination: Path,
    ) -> list[str]:
        inputs = []
        for clip in clips:
            inputs.extend(["-i", str(clip)])
        return [
            *inputs,
            "-filter_complex", graph.to_filter_complex(),
            "-map", graph.output_label,
            "-c:v", self.codec, *_codec_params(self.codec, self.crf),
            "-preset", self.preset,
            str(destination),
        ]

    def run(
        self,
        clips: list[str | Path],
        graph: FilterGraph,
        destination: Path,
        timeout: float | None = None,
    ) -> Path:
        if graph is None:
            raise CompositingError("xfade strategy needs a filter graph (>= 2 clips)")
        run_ffmpeg(self.build_args(clips, graph, destination), CompositingError, timeout)
        return destination


class ConcatStrategy:
    """Fallback strategy: lossless stream-copy concat, transitions dropped."""

    name = "concat"

    def build_args(self, manifest: Path, destination: Path) -> list[str]:
        return [
            "-f", "concat", "-safe", "0",
            "-i", str(manifest),
            "-c", "copy",
            str(destination),
        ]

    def run(
        self,
        clips: list[str | Path],
        graph: FilterGraph | None,
        destination: Path,
        timeout: float | None = None,
    ) -> Path:
        manifest = concat_manifest_path(destination)
        try:
            write_concat_manifest(clips, manifest)
            run_ffmpeg(self.build_args(manifest, destination), CompositingError, timeout)
        except OSError as e:
            raise CompositingError(f"Cannot write concat manifest {manifest}: {e}") from e
        finally:
            manifest.unlink(missing_ok=True)
        return destination


class ClipCompositor:
    """Try the primary strategy; on CompositingError, use the fallback."""

    def __init__(self, primary=None, fallback=None):
        self.primary = primary if primary is not None else XfadeStrategy()
        self.fallback = fallback if fallback is not None else ConcatStrategy()

    def composite(
        self,
        clips: list[str | Path],
        graph: FilterGraph,
        destination: str | Path,
        timeout: float | None = None,
    ) -> Path:
        """Produce one encoded video at *destination*.

        Raises:
            CompositingFailed: Primary and fallback both failed.
        """
        destination = Path(destination)
        try:
            return self._run(self.primary, clips, graph, destination, timeout)
        except CompositingError as primary_error:
            print(
                f"  WARN   {self.primary.name} compositing failed, "
                f"falling back to {self.fallback.name} (transitions dropped)",
                flush=True,
            )
            print(f"         {primary_error}", flush=True)
            try:
                return self._run(self.fallback, clips, graph, destination, timeout)
            except CompositingError as fallback_error:
                raise CompositingFailed(primary_error, fallback_error) from fallback_error

    @staticmethod
    def _run(strategy, clips, graph, destination, timeout) -> Path:
        # The output file existing is the only success signal.
        result = Path(strategy.run(clips, graph, destination, timeout=timeout))
        if not result.is_file():
            raise CompositingError(f"{strategy.name} wrote no output at {result}")
        return result
