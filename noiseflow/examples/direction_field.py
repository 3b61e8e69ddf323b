# Углы сетки направлений как цветовой тон
import sys
from pathlib import Path
import argparse
import numpy as np

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
EXAMPLES_DIR = Path(__file__).resolve().parent
if str(EXAMPLES_DIR) not in sys.path:
    sys.path.insert(0, str(EXAMPLES_DIR))

from noiseflow import build_simulation, list_presets
from noiseflow.interactive import add_interactive_args, add_preset_arg, InteractiveConfig, run_interactive
from _output import save_ppm


def _hue_to_rgb(hue: np.ndarray) -> np.ndarray:
    """Полностью насыщенный цвет для тона в [0, 1)"""
    h6 = (hue % 1.0) * 6.0
    r = np.clip(np.abs(h6 - 3.0) - 1.0, 0, 1)
    g = np.clip(2.0 - np.abs(h6 - 2.0), 0, 1)
    b = np.clip(2.0 - np.abs(h6 - 4.0), 0, 1)
    return np.stack([r, g, b], axis=-1).astype(np.float32)


def _render_directions(directions: np.ndarray, cell_px: int) -> np.ndarray:
    angles = np.arctan2(directions[..., 1], directions[..., 0])
    rgb = _hue_to_rgb(angles / (2 * np.pi))
    # Строка 0 - нижний край домена
    rgb = rgb[::-1]
    return np.repeat(np.repeat(rgb, cell_px, axis=0), cell_px, axis=1)


def main():
    parser = argparse.ArgumentParser(description="Direction grid of one simulation step")
    add_interactive_args(parser)
    add_preset_arg(parser, list_presets(), default="original")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--step", type=int, default=0, help="Step index to render")
    parser.add_argument("--cell-px", type=int, default=6, help="Pixels per grid cell")
    parser.add_argument("--output", type=Path, default=EXAMPLES_DIR / "output" / "direction_field.ppm")
    args = parser.parse_args()

    # Частицы не нужны: берется только сетка
    noise, sim = build_simulation(args.preset, seed=args.seed, particle_count=1)

    if args.interactive:
        config = InteractiveConfig.from_args(args, title="noiseflow: directions")

        def render_frame(frame):
            sim.advance(args.step + frame * config.steps_per_frame)
            return _render_directions(sim.directions, args.cell_px)

        run_interactive(render_frame, config)
        return

    sim.advance(args.step)
    image = _render_directions(sim.directions, args.cell_px)
    save_ppm(image, args.output)
    print(f"Saved {args.output} ({sim.params.grid_width}x{sim.params.grid_height} cells)")


if __name__ == "__main__":
    main()
