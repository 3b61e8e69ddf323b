# noiseflow/flow_simulation.py
"""
Поле направлений на основе шума и адвекция частиц
Ограниченное ускорение, тороидальные границы
"""

import numpy as np
from typing import Dict, Optional, Tuple
from numba import jit, prange
import math
import operator
import warnings
from dataclasses import dataclass
from enum import Enum

from .noise_field import NoiseField, fractal_noise

# ----------------------------------------------------------------------
# Структуры данных
# ----------------------------------------------------------------------

class SimulationState(Enum):
    """Состояния симуляции"""
    INITIALIZED = 1  # Частицы размещены, сетка не заполнена
    STEPPED = 2      # Выполнен хотя бы один шаг

@dataclass
class FlowParams:
    """Параметры потока и популяции частиц"""
    particle_count: int = 10000
    grid_width: int = 112
    grid_height: int = 64
    domain: Tuple[float, float, float, float] = (-1.0, 1.0, -1.0, 1.0)  # x_min, x_max, y_min, y_max
    max_speed: float = 0.001
    axis_scale: float = 0.01       # Шаг шума между соседними ячейками
    time_scale: float = 0.0001     # Шаг шума между кадрами
    acceleration_ratio: float = 0.01  # Ускорение как доля max_speed
    seed: Optional[int] = None     # Seed для начальных позиций

    def __post_init__(self):
        for name in ("particle_count", "grid_width", "grid_height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise TypeError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        if len(self.domain) != 4:
            raise ValueError(f"domain must be (x_min, x_max, y_min, y_max), got {self.domain!r}")
        self.domain = tuple(float(v) for v in self.domain)
        x_min, x_max, y_min, y_max = self.domain
        if not all(math.isfinite(v) for v in self.domain):
            raise ValueError(f"domain bounds must be finite, got {self.domain}")
        if x_min >= x_max or y_min >= y_max:
            raise ValueError(f"domain must satisfy x_min < x_max and y_min < y_max, got {self.domain}")

        self.max_speed = float(self.max_speed)
        if not (math.isfinite(self.max_speed) and self.max_speed > 0.0):
            raise ValueError(f"max_speed must be positive, got {self.max_speed}")
        self.acceleration_ratio = float(self.acceleration_ratio)
        if not (math.isfinite(self.acceleration_ratio) and self.acceleration_ratio >= 0.0):
            raise ValueError(f"acceleration_ratio must be >= 0, got {self.acceleration_ratio}")
        self.axis_scale = float(self.axis_scale)
        self.time_scale = float(self.time_scale)

        # Seed приводится к 32 битам, как в NoiseField
        if self.seed is not None:
            self.seed = operator.index(self.seed) & 0xFFFFFFFF

        if self.max_speed >= min(x_max - x_min, y_max - y_min):
            warnings.warn(
                f"max_speed {self.max_speed} is not smaller than the domain; "
                "particles may skip whole grid rows per step"
            )

    @property
    def acceleration(self) -> float:
        """Длина вектора направления в ячейке"""
        return self.max_speed * self.acceleration_ratio

# ----------------------------------------------------------------------
# Ядра шага симуляции (Numba)
# ----------------------------------------------------------------------

@jit(nopython=True, parallel=True, cache=True)
def fill_directions(directions: np.ndarray, gradients: np.ndarray, octaves: int,
                    persistence: float, axis_scale: float, t: float,
                    magnitude: float) -> None:
    """
    Заполнение сетки направлений на месте

    Угол ячейки (r, c) = sample(c * axis_scale, r * axis_scale, t) * 2pi
    """
    rows = directions.shape[0]
    cols = directions.shape[1]
    two_pi = 2.0 * math.pi

    for r in prange(rows):
        for c in range(cols):
            angle = fractal_noise(c * axis_scale, r * axis_scale, t,
                                  gradients, octaves, persistence) * two_pi
            directions[r, c, 0] = math.cos(angle) * magnitude
            directions[r, c, 1] = math.sin(angle) * magnitude

@jit(nopython=True, cache=True)
def cell_coordinate(p: float, lo: float, hi: float, n: int) -> int:
    """Индекс ячейки вдоль одной оси; правая граница -> последняя ячейка"""
    if p >= hi:
        return n - 1
    index = int((p - lo) / (hi - lo) * n)
    if index < 0:
        return 0
    if index > n - 1:
        return n - 1
    return index

@jit(nopython=True, cache=True)
def _wrap_high(p: float, lo: float, hi: float) -> float:
    """Выход через верхнюю границу: вход снизу с сохранением перелета"""
    return lo + np.fmod(p - hi, hi - lo)

@jit(nopython=True, cache=True)
def _wrap_low(p: float, lo: float, hi: float) -> float:
    """Выход через нижнюю границу: вход сверху с сохранением перелета"""
    return hi - np.fmod(lo - p, hi - lo)

@jit(nopython=True, parallel=True, cache=True)
def advect_particles(lines: np.ndarray, velocities: np.ndarray,
                     directions: np.ndarray, domain: np.ndarray,
                     max_speed: float) -> int:
    """
    Шаг частиц по заполненной сетке направлений

    lines[i] = (x, y, prev_x, prev_y). Сетка только читается.

    Returns:
        Количество частиц, перенесенных через границу
    """
    x_min = domain[0]
    x_max = domain[1]
    y_min = domain[2]
    y_max = domain[3]
    rows = directions.shape[0]
    cols = directions.shape[1]
    wrapped_total = 0

    for i in prange(lines.shape[0]):
        x = lines[i, 0]
        y = lines[i, 1]
        col = cell_coordinate(x, x_min, x_max, cols)
        row = cell_coordinate(y, y_min, y_max, rows)

        # Ускорение и ограничение скорости
        vx = velocities[i, 0] + directions[row, col, 0]
        vy = velocities[i, 1] + directions[row, col, 1]
        speed = math.sqrt(vx * vx + vy * vy)
        if speed > max_speed:
            k = max_speed / speed
            vx *= k
            vy *= k
        velocities[i, 0] = vx
        velocities[i, 1] = vy

        # Перемещение
        lines[i, 2] = x
        lines[i, 3] = y
        x += vx
        y += vy

        # Тороидальные границы
        wrapped = 0
        if x > x_max and vx > 0.0:
            x = _wrap_high(x, x_min, x_max)
            wrapped = 1
        elif x < x_min and vx < 0.0:
            x = _wrap_low(x, x_min, x_max)
            wrapped = 1
        if y > y_max and vy > 0.0:
            y = _wrap_high(y, y_min, y_max)
            wrapped = 1
        elif y < y_min and vy < 0.0:
            y = _wrap_low(y, y_min, y_max)
            wrapped = 1

        lines[i, 0] = x
        lines[i, 1] = y
        if wrapped:
            # Иначе отрезок протянется через весь домен
            lines[i, 2] = x
            lines[i, 3] = y
        wrapped_total += wrapped

    return wrapped_total

# ----------------------------------------------------------------------
# Симуляция
# ----------------------------------------------------------------------

class FlowSimulation:
    """Популяция частиц в поле направлений, построенном по шуму"""

    def __init__(self, noise_field: NoiseField, params: Optional[FlowParams] = None):
        """
        Args:
            noise_field: Источник шума (должен жить не меньше симуляции)
            params: Параметры потока (по умолчанию FlowParams())
        """
        self.noise = noise_field
        self.params = params or FlowParams()
        p = self.params

        self.domain = np.array(p.domain, dtype=np.float64)
        # Вершины отрезков: (x, y, prev_x, prev_y)
        self.lines = np.zeros((p.particle_count, 4), dtype=np.float64)
        self.velocities = np.zeros((p.particle_count, 2), dtype=np.float64)
        # Значения не определены до первого шага
        self.directions = np.empty((p.grid_height, p.grid_width, 2), dtype=np.float64)

        self.reset(p.seed)

    @property
    def positions(self) -> np.ndarray:
        """Текущие позиции (N, 2), вид на lines"""
        return self.lines[:, 0:2]

    @property
    def previous_positions(self) -> np.ndarray:
        """Предыдущие позиции (N, 2), вид на lines"""
        return self.lines[:, 2:4]

    @property
    def segments(self) -> np.ndarray:
        """Отрезки для отрисовки (N, 2, 2): текущая и предыдущая точка"""
        return self.lines.reshape(-1, 2, 2)

    def reset(self, seed: Optional[int] = None) -> None:
        """Случайное равномерное размещение частиц, нулевые скорости"""
        x_min, x_max, y_min, y_max = self.params.domain
        n = self.params.particle_count
        rng = np.random.RandomState(seed)

        self.lines[:, 0] = rng.uniform(x_min, x_max, n)
        self.lines[:, 1] = rng.uniform(y_min, y_max, n)
        self.lines[:, 2:4] = self.lines[:, 0:2]
        self.velocities[:] = 0.0

        self.state = SimulationState.INITIALIZED
        self.step_count = 0
        self.last_step: Optional[int] = None
        self.last_wrap_count = 0

    def place_particles(self, positions: np.ndarray,
                        velocities: Optional[np.ndarray] = None) -> None:
        """
        Явное задание состояния частиц

        Args:
            positions: (N, 2) внутри домена
            velocities: (N, 2) с модулем не больше max_speed, по умолчанию нули
        """
        n = self.params.particle_count
        positions = np.asarray(positions, dtype=np.float64)
        if positions.shape != (n, 2):
            raise ValueError(f"positions must have shape ({n}, 2), got {positions.shape}")
        if not np.all(np.isfinite(positions)):
            raise ValueError("positions must be finite")
        x_min, x_max, y_min, y_max = self.params.domain
        inside = ((positions[:, 0] >= x_min) & (positions[:, 0] <= x_max) &
                  (positions[:, 1] >= y_min) & (positions[:, 1] <= y_max))
        if not np.all(inside):
            raise ValueError(f"positions must lie inside domain {self.params.domain}")

        if velocities is None:
            velocities = np.zeros((n, 2), dtype=np.float64)
        velocities = np.asarray(velocities, dtype=np.float64)
        if velocities.shape != (n, 2):
            raise ValueError(f"velocities must have shape ({n}, 2), got {velocities.shape}")
        speeds = np.hypot(velocities[:, 0], velocities[:, 1])
        if not np.all(np.isfinite(speeds)) or np.any(speeds > self.params.max_speed):
            raise ValueError(f"velocity magnitudes must not exceed max_speed {self.params.max_speed}")

        self.lines[:, 0:2] = positions
        self.lines[:, 2:4] = positions
        self.velocities[:] = velocities

    def cell_index(self, x: float, y: float) -> Tuple[int, int]:
        """Ячейка сетки (row, col) под точкой (x, y)"""
        x_min, x_max, y_min, y_max = self.params.domain
        col = cell_coordinate(float(x), x_min, x_max, self.params.grid_width)
        row = cell_coordinate(float(y), y_min, y_max, self.params.grid_height)
        return row, col

    def advance(self, step_index: int) -> None:
        """
        Один шаг симуляции

        1. Пересчет всей сетки направлений для времени step_index * time_scale
        2. Обновление скоростей и позиций всех частиц

        Частицы читают сетку только после ее полного заполнения.
        """
        p = self.params
        fill_directions(self.directions, self.noise.gradients, self.noise.octaves,
                        self.noise.persistence, p.axis_scale,
                        step_index * p.time_scale, p.acceleration)
        self.last_wrap_count = int(advect_particles(
            self.lines, self.velocities, self.directions, self.domain, p.max_speed
        ))

        self.state = SimulationState.STEPPED
        self.step_count += 1
        self.last_step = step_index

    def get_stats(self) -> Dict:
        """Статистика текущего состояния"""
        speeds = np.hypot(self.velocities[:, 0], self.velocities[:, 1])
        return {
            "state": self.state.name.lower(),
            "step_count": self.step_count,
            "last_step": self.last_step,
            "mean_speed": float(speeds.mean()),
            "max_speed": float(speeds.max()),
            "last_wrap_count": self.last_wrap_count,
        }
