# noiseflow/trail_canvas.py
"""
Накопление следов частиц в изображении
Отрезки рисуются поверх предыдущих кадров без очистки
"""

import numpy as np
from typing import Tuple
from numba import jit
import math


@jit(nopython=True, cache=True)
def _blend(image: np.ndarray, px: int, py: int, color: np.ndarray, alpha: float) -> None:
    """Смешивание source-over одного пикселя"""
    if px < 0 or py < 0 or py >= image.shape[0] or px >= image.shape[1]:
        return
    for ch in range(3):
        image[py, px, ch] = image[py, px, ch] * (1.0 - alpha) + color[ch] * alpha

@jit(nopython=True, cache=True)
def rasterize_segments(image: np.ndarray, segments: np.ndarray, domain: np.ndarray,
                       color: np.ndarray, alpha: float) -> None:
    """
    Растеризация отрезков (DDA) в изображение на месте

    Args:
        image: (H, W, 3) float32
        segments: (N, 2, 2) пары точек в координатах домена
        domain: (x_min, x_max, y_min, y_max)
        color: RGB цвет линий
        alpha: Непрозрачность одного отрезка
    """
    height = image.shape[0]
    width = image.shape[1]
    sx = (width - 1) / (domain[1] - domain[0])
    sy = (height - 1) / (domain[3] - domain[2])

    # Последовательно: пересекающиеся отрезки пишут в одни пиксели
    for i in range(segments.shape[0]):
        # Ось y направлена вверх
        x0 = (segments[i, 0, 0] - domain[0]) * sx
        y0 = (domain[3] - segments[i, 0, 1]) * sy
        x1 = (segments[i, 1, 0] - domain[0]) * sx
        y1 = (domain[3] - segments[i, 1, 1]) * sy

        steps = int(max(abs(x1 - x0), abs(y1 - y0)))
        if steps == 0:
            _blend(image, int(math.floor(x0 + 0.5)), int(math.floor(y0 + 0.5)), color, alpha)
            continue
        dx = (x1 - x0) / steps
        dy = (y1 - y0) / steps
        for s in range(steps + 1):
            _blend(image, int(math.floor(x0 + dx * s + 0.5)),
                   int(math.floor(y0 + dy * s + 0.5)), color, alpha)


class TrailCanvas:
    """Холст следов, который не очищается между кадрами"""

    def __init__(self, width: int, height: int,
                 domain: Tuple[float, float, float, float] = (-1.0, 1.0, -1.0, 1.0),
                 color: Tuple[float, float, float] = (0.0, 0.0, 0.0),
                 alpha: float = 0.08,
                 background: Tuple[float, float, float] = (1.0, 1.0, 1.0)):
        if width <= 1 or height <= 1:
            raise ValueError(f"Canvas must be at least 2x2, got {width}x{height}")
        if not 0.0 <= alpha <= 1.0:
            raise ValueError(f"alpha must be in [0, 1], got {alpha}")
        self.width = int(width)
        self.height = int(height)
        self.domain = np.array(domain, dtype=np.float64)
        self.color = np.array(color, dtype=np.float32)
        self.alpha = float(alpha)
        self.background = np.array(background, dtype=np.float32)
        self._image = np.empty((self.height, self.width, 3), dtype=np.float32)
        self.clear()

    @property
    def image(self) -> np.ndarray:
        return self._image

    def clear(self) -> None:
        self._image[:] = self.background

    def draw_segments(self, segments: np.ndarray) -> np.ndarray:
        """Дорисовать отрезки (N, 2, 2) и вернуть изображение"""
        segments = np.ascontiguousarray(segments, dtype=np.float64)
        if segments.ndim != 3 or segments.shape[1:] != (2, 2):
            raise ValueError(f"segments must have shape (N, 2, 2), got {segments.shape}")
        rasterize_segments(self._image, segments, self.domain, self.color, self.alpha)
        return self._image
