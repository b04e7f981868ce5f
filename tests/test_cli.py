"""Tests for the subcommand CLIs."""

from unittest.mock import patch

import pytest
import yaml

from scenereel.probe import probe_duration


def _write(tmp_path, content: dict):
    path = tmp_path / "assembly.yaml"
    path.write_text(yaml.dump(content))
    return str(path)


class TestAssembleCli:
    def test_validate_lists_clips(self, make_clip, tmp_path, capsys):
        from scenereel.assemble_cli import main

        a, b = make_clip("a", 2.0), make_clip("b", 2.0)
        manifest = _write(tmp_path, {"clips": [{"path": str(a)}, {"path": str(b)}]})
        main(["--manifest", manifest, "--validate"])
        out = capsys.readouterr().out
        assert "2 clips" in out
        assert "All paths verified." in out

    def test_validate_missing_clip_raises(self, tmp_path):
        from scenereel.assemble_cli import main

        manifest = _write(tmp_path, {"clips": [{"path": str(tmp_path / "gone.mp4")}]})
        with pytest.raises(FileNotFoundError, match="gone.mp4"):
            main(["--manifest", manifest, "--validate"])

    def test_output_required(self, make_clip, tmp_path):
        from scenereel.assemble_cli import main

        manifest = _write(tmp_path, {"clips": [{"path": str(make_clip("a", 2.0))}]})
        with pytest.raises(SystemExit):
            main(["--manifest", manifest])

    def test_empty_manifest_exits_with_error(self, tmp_path, capsys):
        from scenereel.assemble_cli import main

        manifest = _write(tmp_path, {"clips": []})
        with pytest.raises(SystemExit) as exc_info:
            main(["--manifest", manifest, "--output", str(tmp_path / "o.mp4")])
        assert exc_info.value.code == 1
        assert "No clips" in capsys.readouterr().err

    def test_assembles_video_and_still(self, make_clip, still_image, tmp_path):
        from scenereel.assemble_cli import main

        clip = make_clip("a", 2.0)
        manifest = _write(tmp_path, {
            "video": {
                "transition": "dissolve", "transition_duration": 0.5,
                "fps": 10, "resolution": [160, 120],
            },
            "clips": [
                {"path": str(clip)},
                {"image": str(still_image), "duration": 2, "motion": "zoom_out",
                 "path": str(tmp_path / "still.mp4")},
            ],
        })
        out = tmp_path / "final.mp4"
        main(["--manifest", manifest, "--output", str(out)])
        assert (tmp_path / "still.mp4").exists()
        assert out.exists()
        # 2 + 2 - 0.5 with the dissolve; up to 4.0 if concat fallback kicked in.
        assert 3.0 < probe_duration(out) < 4.6

    def test_existing_still_render_is_skipped(self, still_image, tmp_path, capsys):
        from scenereel.assemble_cli import render_still_clips

        rendered = tmp_path / "still.mp4"
        rendered.write_bytes(b"already here")
        config = {
            "video": {"fps": 10, "resolution": (160, 120)},
            "clips": [{"path": str(rendered), "image": str(still_image),
                       "motion": "zoom_in", "duration": 1.0}],
        }
        with patch("scenereel.assemble_cli.generate_motion_clip") as gen:
            render_still_clips(config)
        gen.assert_not_called()
        assert "SKIP" in capsys.readouterr().out

    def test_gpu_flag_selects_nvenc(self, make_clip, tmp_path):
        from scenereel.assemble_cli import main

        manifest = _write(tmp_path, {"clips": [{"path": str(make_clip("a", 2.0))}]})
        with patch("scenereel.assemble_cli.assemble_video") as run:
            run.return_value = tmp_path / "o.mp4"
            main(["--manifest", manifest, "--output", str(tmp_path / "o.mp4"), "--gpu"])
        compositor = run.call_args.kwargs["compositor"]
        assert compositor.primary.codec == "h264_nvenc"


class TestMotionCli:
    def test_writes_clip(self, still_image, tmp_path):
        from scenereel.motion_cli import main

        out = tmp_path / "scene.mp4"
        main([str(still_image), "--duration", "1", "--motion", "pan_right",
              "--fps", "10", "--size", "64x48", "--output", str(out)])
        assert out.exists()

    def test_bad_size_errors(self, still_image, tmp_path):
        from scenereel.motion_cli import main

        with pytest.raises(SystemExit):
            main([str(still_image), "--duration", "1", "--size", "big",
                  "--output", str(tmp_path / "s.mp4")])

    def test_unknown_motion_errors(self, still_image, tmp_path):
        from scenereel.motion_cli import main

        with pytest.raises(SystemExit):
            main([str(still_image), "--duration", "1", "--motion", "orbit",
                  "--output", str(tmp_path / "s.mp4")])


class TestMixCli:
    def test_passes_beds_with_gains(self, tmp_path):
        from scenereel.mix_cli import main

        with patch("scenereel.mix_cli.overlay_audio") as overlay:
            main(["v.mp4", "--music", "m.mp3", "--music-gain", "0.5",
                  "--ambient", "r.wav", "--output", str(tmp_path / "o.mp4")])
        kwargs = overlay.call_args.kwargs
        assert kwargs["primary"].path == "m.mp3"
        assert kwargs["primary"].gain == 0.5
        assert kwargs["secondary"].gain == 0.1

    def test_bad_gain_errors(self, tmp_path):
        from scenereel.mix_cli import main

        with pytest.raises(SystemExit):
            main(["v.mp4", "--music", "m.mp3", "--music-gain", "3",
                  "--output", str(tmp_path / "o.mp4")])


class TestProbeCli:
    def test_prints_durations_and_total(self, make_clip, capsys):
        from scenereel.probe_cli import main

        main([str(make_clip("a", 1.0)), str(make_clip("b", 2.0))])
        out = capsys.readouterr().out
        assert "total" in out

    def test_unreadable_clip_exits(self, tmp_path):
        from scenereel.probe_cli import main

        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "missing.mp4")])
        assert exc_info.value.code == 1
