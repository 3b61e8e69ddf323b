# Следы частиц в потоке шума
import sys
from pathlib import Path
import argparse

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
EXAMPLES_DIR = Path(__file__).resolve().parent
if str(EXAMPLES_DIR) not in sys.path:
    sys.path.insert(0, str(EXAMPLES_DIR))

from noiseflow import TrailCanvas, build_simulation, list_presets
from noiseflow.interactive import add_interactive_args, add_preset_arg, InteractiveConfig, run_interactive
from _output import save_ppm, save_ppm_sequence, save_mp4


def main():
    parser = argparse.ArgumentParser(description="Particle trails in a noise flow field")
    add_interactive_args(parser)
    add_preset_arg(parser, list_presets(), default="original")
    parser.add_argument("--seed", type=int, default=None, help="Noise and particle seed")
    parser.add_argument("--steps", type=int, default=600, help="Steps to simulate before saving")
    parser.add_argument("--particles", type=int, default=None, help="Override particle count")
    parser.add_argument("--alpha", type=float, default=0.08, help="Opacity of one trail segment")
    parser.add_argument("--output", type=Path, default=EXAMPLES_DIR / "output" / "flow_lines.ppm")
    parser.add_argument("--video", type=Path, default=None, help="Optional mp4 of periodic snapshots")
    parser.add_argument("--frames-dir", type=Path, default=None, help="Optional directory for PPM snapshots")
    parser.add_argument("--snapshot-every", type=int, default=20)
    args = parser.parse_args()

    overrides = {}
    if args.particles is not None:
        overrides["particle_count"] = args.particles
    noise, sim = build_simulation(args.preset, seed=args.seed, **overrides)

    if args.interactive:
        config = InteractiveConfig.from_args(args, title=f"noiseflow: {args.preset}")
        width, height = config.resolve_size()
        canvas = TrailCanvas(width, height, sim.params.domain, alpha=args.alpha)
        step = 0

        def render_frame(frame):
            nonlocal step
            for _ in range(config.steps_per_frame):
                sim.advance(step)
                canvas.draw_segments(sim.segments)
                step += 1
            return canvas.image

        run_interactive(render_frame, config)
        return

    width = args.width or 683
    height = args.height or 384
    canvas = TrailCanvas(width, height, sim.params.domain, alpha=args.alpha)
    keep_snapshots = args.video is not None or args.frames_dir is not None
    snapshots = []
    for step in range(args.steps):
        sim.advance(step)
        canvas.draw_segments(sim.segments)
        if keep_snapshots and step % max(1, args.snapshot_every) == 0:
            snapshots.append(canvas.image.copy())

    stats = sim.get_stats()
    print(f"Simulated {stats['step_count']} steps, mean speed {stats['mean_speed']:.6f}")
    save_ppm(canvas.image, args.output)
    print(f"Saved {args.output}")
    if args.frames_dir is not None:
        save_ppm_sequence(snapshots, args.frames_dir, prefix="flow")
        print(f"Saved {len(snapshots)} frames to {args.frames_dir}")
    if args.video is not None and save_mp4(snapshots, args.video):
        print(f"Saved {args.video}")


if __name__ == "__main__":
    main()
