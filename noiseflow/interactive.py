"""Helpers for interactive, frame-stepped preview windows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple
import itertools
import time

import numpy as np


def add_interactive_args(parser) -> None:
    parser.add_argument("--interactive", action="store_true", help="Run interactive view")
    parser.add_argument("--scale", type=float, default=0.5, help="Window size as a fraction of the screen")
    parser.add_argument("--fps", type=float, default=30.0, help="Target FPS")
    parser.add_argument("--width", type=int, default=None, help="Override width")
    parser.add_argument("--height", type=int, default=None, help="Override height")
    parser.add_argument("--speed", type=float, default=1.0, help="Simulation steps per displayed frame")


def add_preset_arg(parser, presets, default: Optional[str] = None, dest: str = "preset") -> None:
    parser.add_argument(
        "--preset",
        choices=presets,
        default=default,
        dest=dest,
        help="Preset name",
    )


def resolve_preset(value: Optional[str], presets, fallback: Optional[str] = None) -> Optional[str]:
    if value is None:
        return fallback
    if value not in presets:
        raise ValueError(f"Unknown preset '{value}'. Available: {', '.join(presets)}")
    return value


def ensure_rgb(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        image = np.repeat(image[:, :, None], 3, axis=2)
    if image.shape[2] == 1:
        image = np.repeat(image, 3, axis=2)
    if image.shape[2] >= 3:
        return image[:, :, :3]
    raise ValueError("Unsupported image shape for RGB conversion.")


def get_screen_size(default: Tuple[int, int] = (1366, 768)) -> Tuple[int, int]:
    try:
        import tkinter as tk
        root = tk.Tk()
        root.withdraw()
        screen_width = root.winfo_screenwidth()
        screen_height = root.winfo_screenheight()
        root.destroy()
        return int(screen_width), int(screen_height)
    except Exception:
        return default


@dataclass
class InteractiveConfig:
    title: str = "noiseflow"
    target_fps: float = 30.0
    scale: float = 0.5
    width: Optional[int] = None
    height: Optional[int] = None
    speed: float = 1.0
    min_size: int = 64

    @classmethod
    def from_args(cls, args, title: Optional[str] = None) -> "InteractiveConfig":
        return cls(
            title=title or "noiseflow",
            target_fps=max(1.0, getattr(args, "fps", 30.0)),
            scale=max(0.1, getattr(args, "scale", 0.5)),
            width=getattr(args, "width", None),
            height=getattr(args, "height", None),
            speed=max(1.0, getattr(args, "speed", 1.0)),
        )

    def resolve_size(self) -> Tuple[int, int]:
        """Window size in pixels: explicit width/height win over screen scale."""
        screen_w, screen_h = get_screen_size()
        width = self.width or int(screen_w * self.scale)
        height = self.height or int(screen_h * self.scale)
        return max(self.min_size, width), max(self.min_size, height)

    @property
    def steps_per_frame(self) -> int:
        return max(1, int(round(self.speed)))


def run_interactive(
    render_frame: Callable[[int], np.ndarray],
    config: InteractiveConfig,
) -> None:
    """Show frames from ``render_frame(frame_index)`` until the window closes.

    Frames are not resized: the callback owns the image size, since trail
    images accumulate across frames.
    """
    try:
        import matplotlib.pyplot as plt
        from matplotlib.animation import FuncAnimation
    except Exception:
        print("matplotlib is not available; cannot display interactive output.")
        return

    frame0 = ensure_rgb(render_frame(0))
    height, width = frame0.shape[:2]

    fig, ax = plt.subplots()
    dpi = fig.get_dpi()
    fig.set_size_inches(width / dpi, height / dpi)
    ax.axis("off")
    ax.set_title(config.title)
    fig.subplots_adjust(left=0, right=1, top=1, bottom=0)

    target_s = 1.0 / max(1.0, config.target_fps)
    last_time = time.perf_counter()
    im = ax.imshow(frame0, animated=True, aspect="auto", vmin=0.0, vmax=1.0)

    def update(frame):
        nonlocal last_time
        now = time.perf_counter()
        if now - last_time < target_s:
            time.sleep(target_s - (now - last_time))
        last_time = time.perf_counter()
        im.set_array(ensure_rgb(render_frame(frame + 1)))
        return (im,)

    anim = FuncAnimation(
        fig,
        update,
        frames=itertools.count(),
        interval=0,
        blit=True,
        repeat=True,
        cache_frame_data=False,
    )
    plt.show(block=True)
