# noiseflow/noise_field.py
"""
Градиентный шум с общей хеш-таблицей градиентов
Одна октава + фрактальная сумма октав, значения в диапазоне [0, 1]
"""

import numpy as np
from typing import Union
from numba import jit, prange
import math
import operator
import warnings

# ----------------------------------------------------------------------
# Константы
# ----------------------------------------------------------------------

# Размер таблицы градиентов
NUM_VECTORS = 256

# Выше этого числа октав частоты выводят решетку в зону коллизий хеша
_MAX_SAFE_OCTAVES = 32

# Диапазон целой части координаты в хеше
_HASH_RANGE = 2.0 ** 62

# ----------------------------------------------------------------------
# Вспомогательные функции
# ----------------------------------------------------------------------

@jit(nopython=True, cache=True)
def _split_coordinate(x: float):
    """
    Целая часть для хеша и дробная часть координаты

    floor берется во float, поэтому для огромных x дробная часть
    равна 0, а целая часть приводится по модулю 2^62 до int.
    """
    if not math.isfinite(x):
        return 0, 0.0
    fx = np.floor(x)
    return int(np.fmod(fx, _HASH_RANGE)), x - fx

@jit(nopython=True, cache=True)
def _fade(t: float) -> float:
    """Кривая сглаживания 6t^5 - 15t^4 + 10t^3"""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)

@jit(nopython=True, cache=True)
def _lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)

@jit(nopython=True, cache=True)
def _grad(gradients: np.ndarray, index: int, x: float, y: float, z: float) -> float:
    """Скалярное произведение градиента из таблицы с вектором (x, y, z)"""
    return gradients[index, 0] * x + gradients[index, 1] * y + gradients[index, 2] * z

# ----------------------------------------------------------------------
# Одна октава
# ----------------------------------------------------------------------

@jit(nopython=True, cache=True)
def octave_noise(x: float, y: float, z: float, gradients: np.ndarray) -> float:
    """
    Одна октава шума

    Все восемь углов ячейки решетки используют один хеш и, значит,
    один градиент. Вклады углов различаются только смещениями (±1).

    Скалярное произведение со смещениями ±1 выходит за [-1, 1], поэтому
    результат обрезается до [0, 1]. Для таблицы со seed 42 на краях
    оказывается около 39% значений одной октавы (замер по 200 тыс.
    случайных точек). В поле направлений оба края дают один угол 0,
    поэтому распределение углов неравномерно. Сумма нескольких октав
    насыщается заметно реже.

    Args:
        x, y, z: Координаты (любые конечные; огромные дают коллизии хеша)
        gradients: Таблица градиентов (N, 3)

    Returns:
        Значение шума в диапазоне [0, 1]
    """
    # Шаг 1: Целые и дробные части
    xi, x = _split_coordinate(x)
    yi, y = _split_coordinate(y)
    zi, z = _split_coordinate(z)

    # Шаг 2: Хеш целых частей (переполнение int64 дает только коллизии)
    h = 7 + xi
    h = h * 31 + yi
    h = h * 31 + zi
    index = h % gradients.shape[0]

    # Шаг 3: Веса сглаживания
    u = _fade(x)
    v = _fade(y)
    w = _fade(z)

    # Шаг 4: Интерполяция по x, затем по y, затем по z
    x00 = _lerp(_grad(gradients, index, x - 1.0, y - 1.0, z - 1.0),
                _grad(gradients, index, x + 1.0, y - 1.0, z - 1.0), u)
    x10 = _lerp(_grad(gradients, index, x - 1.0, y + 1.0, z - 1.0),
                _grad(gradients, index, x + 1.0, y + 1.0, z - 1.0), u)
    y0 = _lerp(x00, x10, v)

    x01 = _lerp(_grad(gradients, index, x - 1.0, y - 1.0, z + 1.0),
                _grad(gradients, index, x + 1.0, y - 1.0, z + 1.0), u)
    x11 = _lerp(_grad(gradients, index, x - 1.0, y + 1.0, z + 1.0),
                _grad(gradients, index, x + 1.0, y + 1.0, z + 1.0), u)
    y1 = _lerp(x01, x11, v)

    # Шаг 5: Перевод в [0, 1]
    value = (_lerp(y0, y1, w) + 1.0) / 2.0
    if value < 0.0:
        return 0.0
    if value > 1.0:
        return 1.0
    return value

# ----------------------------------------------------------------------
# Фрактальная сумма октав
# ----------------------------------------------------------------------

@jit(nopython=True, cache=True)
def fractal_noise(x: float, y: float, z: float, gradients: np.ndarray,
                  octaves: int, persistence: float) -> float:
    """
    Сумма октав с удвоением частоты и затуханием амплитуды

    Нормируется на сумму использованных амплитуд, поэтому
    результат остается в [0, 1] при любых допустимых параметрах.
    """
    total = 0.0
    amplitude = 1.0
    frequency = 1.0
    max_value = 0.0

    for _ in range(octaves):
        total += octave_noise(x * frequency, y * frequency, z * frequency, gradients) * amplitude
        max_value += amplitude
        amplitude *= persistence
        frequency *= 2.0

    return total / max_value

# ----------------------------------------------------------------------
# Векторизованные версии для работы с массивами
# ----------------------------------------------------------------------

@jit(nopython=True, parallel=True, cache=True)
def octave_noise_array(xs: np.ndarray, ys: np.ndarray, zs: np.ndarray,
                       gradients: np.ndarray) -> np.ndarray:
    """Векторизованная версия одной октавы (одномерные массивы)"""
    n = xs.shape[0]
    result = np.empty(n, dtype=np.float64)

    for i in prange(n):
        result[i] = octave_noise(xs[i], ys[i], zs[i], gradients)

    return result

@jit(nopython=True, parallel=True, cache=True)
def fractal_noise_array(xs: np.ndarray, ys: np.ndarray, zs: np.ndarray,
                        gradients: np.ndarray, octaves: int,
                        persistence: float) -> np.ndarray:
    """Векторизованная версия фрактального шума (одномерные массивы)"""
    n = xs.shape[0]
    result = np.empty(n, dtype=np.float64)

    for i in prange(n):
        result[i] = fractal_noise(xs[i], ys[i], zs[i], gradients, octaves, persistence)

    return result

# ----------------------------------------------------------------------
# Класс для удобной работы с шумом
# ----------------------------------------------------------------------

class NoiseField:
    """Детерминированное поле шума, заданное seed"""

    def __init__(self, seed: int = 42, octaves: int = 8, persistence: float = 0.5):
        """
        Инициализация генератора шума

        Args:
            seed: Семя для таблицы градиентов (приводится к 32 битам)
            octaves: Количество октав (>= 1)
            persistence: Затухание амплитуды между октавами, (0, 1]

        Raises:
            TypeError: seed не целое число
            ValueError: недопустимые octaves или persistence
        """
        self.seed = operator.index(seed) & 0xFFFFFFFF
        self._gradients = self._generate_gradients(self.seed)
        self.octaves = 8
        self.persistence = 0.5
        self.configure(octaves, persistence)

    @staticmethod
    def _generate_gradients(seed: int) -> np.ndarray:
        """Таблица градиентов: компоненты равномерно из [-1, 1)"""
        rng = np.random.RandomState(seed)
        return rng.random_sample((NUM_VECTORS, 3)) * 2.0 - 1.0

    @property
    def gradients(self) -> np.ndarray:
        """Таблица градиентов только для чтения"""
        view = self._gradients.view()
        view.flags.writeable = False
        return view

    def configure(self, octaves: int, persistence: float) -> None:
        """
        Изменение параметров суммы октав

        Недопустимые значения отклоняются, а не обрезаются.
        Таблица градиентов не меняется.
        """
        if isinstance(octaves, bool) or not isinstance(octaves, (int, np.integer)):
            raise ValueError(f"octaves must be an integer, got {octaves!r}")
        if octaves < 1:
            raise ValueError(f"octaves must be >= 1, got {octaves}")
        persistence = float(persistence)
        if not (math.isfinite(persistence) and 0.0 < persistence <= 1.0):
            raise ValueError(f"persistence must be in (0, 1], got {persistence}")
        if octaves > _MAX_SAFE_OCTAVES:
            warnings.warn(
                f"{octaves} octaves: high frequencies will hit hash collisions "
                f"beyond octave {_MAX_SAFE_OCTAVES}"
            )

        self.octaves = int(octaves)
        self.persistence = persistence

    def sample_octave(self, x: Union[float, np.ndarray],
                      y: Union[float, np.ndarray] = 0.0,
                      z: Union[float, np.ndarray] = 0.0) -> Union[float, np.ndarray]:
        """Одна октава шума в [0, 1]"""
        if any(isinstance(v, np.ndarray) for v in (x, y, z)):
            xs, ys, zs, shape = _flatten(x, y, z)
            return octave_noise_array(xs, ys, zs, self._gradients).reshape(shape)
        return octave_noise(float(x), float(y), float(z), self._gradients)

    def sample(self, x: Union[float, np.ndarray],
               y: Union[float, np.ndarray] = 0.0,
               z: Union[float, np.ndarray] = 0.0) -> Union[float, np.ndarray]:
        """Фрактальный шум (сумма октав) в [0, 1]"""
        if any(isinstance(v, np.ndarray) for v in (x, y, z)):
            xs, ys, zs, shape = _flatten(x, y, z)
            result = fractal_noise_array(xs, ys, zs, self._gradients,
                                         self.octaves, self.persistence)
            return result.reshape(shape)
        return fractal_noise(float(x), float(y), float(z), self._gradients,
                             self.octaves, self.persistence)

    __call__ = sample

    def sample_grid(self, width: int, height: int, scale: float,
                    z: float = 0.0) -> np.ndarray:
        """
        Сетка значений sample(c * scale, r * scale, z)

        Returns:
            Массив (height, width)
        """
        cols = np.arange(width, dtype=np.float64) * scale
        rows = np.arange(height, dtype=np.float64) * scale
        xx, yy = np.meshgrid(cols, rows)
        return self.sample(xx, yy, np.full_like(xx, z))


def _flatten(x, y, z):
    """Приведение аргументов к общей форме и одномерным массивам float64"""
    bx, by, bz = np.broadcast_arrays(
        np.asarray(x, dtype=np.float64),
        np.asarray(y, dtype=np.float64),
        np.asarray(z, dtype=np.float64),
    )
    shape = bx.shape
    return (np.ascontiguousarray(bx).ravel(),
            np.ascontiguousarray(by).ravel(),
            np.ascontiguousarray(bz).ravel(),
            shape)
