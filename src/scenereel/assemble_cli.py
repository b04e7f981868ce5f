"""CLI for assembly - join scene clips into a final video with transitions.

Clips listed with an `image` instead of a rendered video are first turned
into motion clips (pan/zoom over the still), then assembled like any other
clip. If the manifest has audio beds, the mixed result is written next
to the output as <output>_with_audio.mp4.

Usage:
    scenereel assemble --manifest assembly.yaml --output final.mp4
    scenereel assemble --manifest assembly.yaml --validate
"""

import argparse
from pathlib import Path

from .assembly import assemble_video
from .compositor import ClipCompositor, XfadeStrategy
from .errors import ScenereelError
from .manifest import build_request, load_assembly_manifest, validate_assembly_paths
from .motion import generate_motion_clip


def render_still_clips(config: dict, force: bool = False) -> None:
    """Render every image-backed clip to its path (skip existing unless force)."""
    video = config["video"]
    for i, clip in enumerate(config["clips"]):
        if "image" not in clip:
            continue
        out = Path(clip["path"])
        if out.exists() and not force:
            print(f"  SKIP   [{i}] {out} (exists, use --force to re-render)")
            continue
        generate_motion_clip(
            clip["image"], out, clip["duration"], clip["motion"],
            fps=video["fps"], size=video["resolution"],
        )


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Assembly CLI - join scene clips into a final video.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to YAML assembly manifest",
    )
    parser.add_argument(
        "--output",
        help="Output mp4 path (required unless --validate)",
    )
    parser.add_argument(
        "--gpu", action="store_true",
        help="Use GPU encoding (h264_nvenc). Default is CPU (libx264).",
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Timeout in seconds for each ffmpeg invocation",
    )
    parser.add_argument(
        "--force", action="store_true",
        help="Re-render motion clips from stills even if they exist",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validate manifest only - check paths, don't render",
    )
    parsed = parser.parse_args(args)

    config = load_assembly_manifest(parsed.manifest)
    validate_assembly_paths(config)

    if parsed.validate:
        video = config["video"]
        print(f"Assembly manifest valid: {len(config['clips'])} clips")
        print(f"  transition: {video['transition']} ({video['transition_duration']}s)")
        for i, c in enumerate(config["clips"]):
            if "image" in c:
                print(f"  {i}: {c['image']} -> {c['motion']} ({c['duration']}s)")
            else:
                print(f"  {i}: {c['path']}")
        for name, bed in config["audio"].items():
            print(f"  audio.{name}: {bed['path']} (gain {bed['gain']})")
        print("All paths verified.")
        return

    if not parsed.output:
        parser.error("--output is required (unless using --validate)")

    render_still_clips(config, force=parsed.force)

    request = build_request(config, parsed.output, timeout=parsed.timeout)
    codec = "h264_nvenc" if parsed.gpu else "libx264"
    compositor = ClipCompositor(primary=XfadeStrategy(codec=codec))

    try:
        result = assemble_video(request, compositor=compositor)
    except ScenereelError as e:
        parser.exit(1, f"Error: {e}\n")
    print(f"\nFinal video: {result}")


if __name__ == "__main__":
    main()
