# Срез фрактального шума в градациях серого
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

from noiseflow import NoiseField
from noiseflow.interactive import add_interactive_args, InteractiveConfig, run_interactive
from _output import save_ppm


def _render_slice(noise: NoiseField, w: int, h: int, scale: float, z: float) -> np.ndarray:
    return noise.sample_grid(w, h, scale, z).astype(np.float32)


def main():
    parser = argparse.ArgumentParser(description="Grayscale slice of the noise field")
    add_interactive_args(parser)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--octaves", type=int, default=8)
    parser.add_argument("--persistence", type=float, default=0.5)
    parser.add_argument("--size", type=int, default=256)
    parser.add_argument("--cell", type=float, default=0.01, help="Noise units per pixel")
    parser.add_argument("--z", type=float, default=0.0)
    parser.add_argument("--single-octave", action="store_true", help="Render one octave only")
    parser.add_argument("--output", type=Path, default=EXAMPLES_DIR / "output" / "noise_slice.ppm")
    args = parser.parse_args()

    octaves = 1 if args.single_octave else args.octaves
    noise = NoiseField(args.seed, octaves=octaves, persistence=args.persistence)

    if args.interactive:
        config = InteractiveConfig.from_args(args, title="noiseflow: noise slice")
        width, height = config.resolve_size()

        def render_frame(frame):
            z = args.z + frame * 0.01 * config.speed
            return _render_slice(noise, width, height, args.cell, z)

        run_interactive(render_frame, config)
        return

    image = _render_slice(noise, args.size, args.size, args.cell, args.z)
    print(f"Noise range: {image.min():.3f} .. {image.max():.3f}")
    save_ppm(image, args.output)
    print(f"Saved {args.output}")


if __name__ == "__main__":
    main()
