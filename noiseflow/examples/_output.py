"""Small helpers for saving example outputs without extra deps."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable
import warnings

import numpy as np


def _ensure_rgb(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        image = np.repeat(image[:, :, None], 3, axis=2)
    if image.ndim != 3:
        raise ValueError("Unsupported image shape for RGB conversion.")
    if image.shape[2] == 1:
        image = np.repeat(image, 3, axis=2)
    if image.shape[2] >= 3:
        return image[:, :, :3]
    raise ValueError("Unsupported image shape for RGB conversion.")


def _normalize_to_uint8(image: np.ndarray, stretch: bool) -> np.ndarray:
    img = image.astype(np.float32)
    if img.size == 0:
        return img.astype(np.uint8)
    min_val = float(img.min())
    max_val = float(img.max())
    if stretch and max_val > min_val:
        img = (img - min_val) / (max_val - min_val)
    img = np.clip(img, 0.0, 1.0)
    return (img * 255.0 + 0.5).astype(np.uint8)


def save_ppm(image: np.ndarray, path: Path, stretch: bool = False) -> None:
    """Save an image to binary PPM (P6) format."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rgb = _ensure_rgb(image)
    data = _normalize_to_uint8(rgb, stretch=stretch)
    height, width, _ = data.shape
    header = f"P6\n{width} {height}\n255\n".encode("ascii")
    with path.open("wb") as f:
        f.write(header)
        f.write(data.tobytes())


def save_ppm_sequence(
    frames: Iterable[np.ndarray],
    directory: Path,
    prefix: str = "frame",
    stretch: bool = False,
) -> None:
    """Save a sequence of frames as numbered PPM files."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    for i, frame in enumerate(frames):
        save_ppm(frame, directory / f"{prefix}_{i:03d}.ppm", stretch=stretch)


def save_mp4(
    frames: Iterable[np.ndarray],
    path: Path,
    fps: int = 24,
    stretch: bool = False,
    macro_block_size: int = 1,
) -> bool:
    """Save frames to MP4 if imageio is available. Returns whether a file was written."""
    try:
        import imageio
        use_v3 = hasattr(imageio, "v3")
    except ImportError:
        warnings.warn("imageio is not installed; skipping mp4 export")
        return False

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    prepared = [_normalize_to_uint8(_ensure_rgb(frame), stretch=stretch) for frame in frames]

    if use_v3:
        imageio.v3.imwrite(path, prepared, fps=fps, macro_block_size=macro_block_size)
    else:
        imageio.mimsave(path, prepared, fps=fps, macro_block_size=macro_block_size)
    return True
