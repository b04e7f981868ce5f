"""Tests for the clip compositor and its two strategies.

Strategy failures are injected with stand-in strategies or by patching
run_ffmpeg, so the fallback path is exercised without breaking ffmpeg.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from scenereel.compositor import (
    ClipCompositor,
    ConcatStrategy,
    XfadeStrategy,
    concat_manifest_path,
    write_concat_manifest,
)
from scenereel.errors import CompositingError, CompositingFailed
from scenereel.graph import build_transition_graph
from scenereel.probe import probe_duration


class _FailingStrategy:
    name = "broken"

    def __init__(self):
        self.calls = 0

    def run(self, clips, graph, destination, timeout=None):
        self.calls += 1
        raise CompositingError("injected failure")


class _RecordingStrategy:
    """Writes a placeholder output and remembers the clips it was given."""

    name = "recording"

    def __init__(self):
        self.clips = None

    def run(self, clips, graph, destination, timeout=None):
        self.clips = list(clips)
        Path(destination).write_bytes(b"ok")
        return destination


class _SilentStrategy:
    """Claims success without writing anything."""

    name = "silent"

    def run(self, clips, graph, destination, timeout=None):
        return destination


class TestConcatManifest:
    def test_one_absolute_line_per_clip_in_order(self, tmp_path):
        clips = [tmp_path / "b.mp4", tmp_path / "a.mp4", tmp_path / "c.mp4"]
        manifest = write_concat_manifest(clips, tmp_path / "list.txt")
        lines = manifest.read_text().splitlines()
        assert lines == [f"file '{c.resolve()}'" for c in clips]

    def test_relative_paths_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        manifest = write_concat_manifest(["scene.mp4"], tmp_path / "list.txt")
        assert manifest.read_text().strip() == f"file '{tmp_path.resolve() / 'scene.mp4'}'"

    def test_escapes_single_quotes(self, tmp_path):
        clip = tmp_path / "it's.mp4"
        manifest = write_concat_manifest([clip], tmp_path / "list.txt")
        assert "it'\\''s.mp4" in manifest.read_text()

    def test_manifest_path_beside_output(self, tmp_path):
        assert concat_manifest_path(tmp_path / "final.mp4") == tmp_path / "final_list.txt"


class TestXfadeStrategy:
    def test_build_args(self, tmp_path):
        graph = build_transition_graph([5.0, 5.0], "fade", 1.0)
        args = XfadeStrategy().build_args(["a.mp4", "b.mp4"], graph, tmp_path / "o.mp4")
        assert args[:4] == ["-i", "a.mp4", "-i", "b.mp4"]
        assert args[args.index("-filter_complex") + 1] == graph.to_filter_complex()
        assert args[args.index("-map") + 1] == "[v0]"
        assert args[args.index("-c:v") + 1] == "libx264"
        assert args[args.index("-crf") + 1] == "18"
        assert args[args.index("-preset") + 1] == "medium"
        assert args[-1] == str(tmp_path / "o.mp4")

    def test_nvenc_uses_cq(self, tmp_path):
        graph = build_transition_graph([5.0, 5.0], "fade", 1.0)
        args = XfadeStrategy(codec="h264_nvenc").build_args(["a", "b"], graph, tmp_path / "o.mp4")
        assert "-cq" in args
        assert "-crf" not in args

    def test_runs_graph(self, make_clip, tmp_path):
        clips = [make_clip("a", 3.0, "red"), make_clip("b", 3.0, "green")]
        graph = build_transition_graph([3.0, 3.0], "dissolve", 1.0)
        out = XfadeStrategy().run(clips, graph, tmp_path / "out.mp4")
        assert probe_duration(out) == pytest.approx(5.0, abs=0.3)


class TestConcatStrategy:
    def test_stream_copy_concat(self, make_clip, tmp_path):
        clips = [make_clip("a", 2.0, "red"), make_clip("b", 3.0, "green")]
        out = ConcatStrategy().run(clips, None, tmp_path / "out.mp4")
        assert probe_duration(out) == pytest.approx(5.0, abs=0.3)

    def test_build_args_copy_codec(self, tmp_path):
        args = ConcatStrategy().build_args(tmp_path / "l.txt", tmp_path / "o.mp4")
        assert args[args.index("-f") + 1] == "concat"
        assert args[args.index("-safe") + 1] == "0"
        assert args[args.index("-c") + 1] == "copy"

    def test_manifest_removed_on_success(self, make_clip, tmp_path):
        clips = [make_clip("a", 1.0), make_clip("b", 1.0)]
        out = tmp_path / "out.mp4"
        ConcatStrategy().run(clips, None, out)
        assert not concat_manifest_path(out).exists()

    def test_manifest_removed_on_failure(self, tmp_path):
        out = tmp_path / "out.mp4"
        seen = {}

        def _fail(args, error_cls, timeout=None):
            seen["manifest_existed"] = concat_manifest_path(out).exists()
            raise error_cls("boom")

        with patch("scenereel.compositor.run_ffmpeg", side_effect=_fail):
            with pytest.raises(CompositingError, match="boom"):
                ConcatStrategy().run([tmp_path / "a.mp4"], None, out)

        assert seen["manifest_existed"]
        assert not concat_manifest_path(out).exists()


class TestClipCompositor:
    def test_primary_success_skips_fallback(self, tmp_path):
        primary, fallback = _RecordingStrategy(), _FailingStrategy()
        out = ClipCompositor(primary, fallback).composite(["a", "b"], None, tmp_path / "o.mp4")
        assert out == tmp_path / "o.mp4"
        assert fallback.calls == 0

    def test_primary_failure_uses_fallback_same_order(self, tmp_path, capsys):
        primary, fallback = _FailingStrategy(), _RecordingStrategy()
        clips = ["c.mp4", "a.mp4", "b.mp4"]
        ClipCompositor(primary, fallback).composite(clips, None, tmp_path / "o.mp4")
        assert primary.calls == 1
        assert fallback.clips == clips
        assert "falling back" in capsys.readouterr().out

    def test_both_fail_raises_compositing_failed(self, tmp_path):
        with pytest.raises(CompositingFailed) as exc_info:
            ClipCompositor(_FailingStrategy(), _FailingStrategy()).composite(
                ["a", "b"], None, tmp_path / "o.mp4",
            )
        assert isinstance(exc_info.value.primary_error, CompositingError)
        assert isinstance(exc_info.value.fallback_error, CompositingError)

    def test_missing_output_counts_as_failure(self, tmp_path):
        fallback = _RecordingStrategy()
        ClipCompositor(_SilentStrategy(), fallback).composite(["a", "b"], None, tmp_path / "o.mp4")
        assert fallback.clips == ["a", "b"]

    def test_fallback_matches_direct_concat(self, make_clip, tmp_path):
        """Primary failure yields the same result as calling concat directly."""
        clips = [make_clip("a", 2.0, "red"), make_clip("b", 2.0, "green")]
        via_fallback = ClipCompositor(_FailingStrategy(), ConcatStrategy()).composite(
            clips, None, tmp_path / "fallback.mp4",
        )
        direct = ConcatStrategy().run(clips, None, tmp_path / "direct.mp4")
        assert probe_duration(via_fallback) == pytest.approx(probe_duration(direct), abs=0.05)

    def test_default_strategies(self):
        compositor = ClipCompositor()
        assert isinstance(compositor.primary, XfadeStrategy)
        assert isinstance(compositor.fallback, ConcatStrategy)
