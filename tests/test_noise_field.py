import math

import numpy as np
import pytest

from noiseflow import NoiseField, NUM_VECTORS


@pytest.fixture(scope="module")
def field():
    return NoiseField(42)


def _lattice_index(n, m, k):
    return (((7 + n) * 31 + m) * 31 + k) % NUM_VECTORS


def test_gradient_table_shape_and_range(field):
    g = field.gradients
    assert g.shape == (NUM_VECTORS, 3)
    assert g.min() >= -1.0
    assert g.max() < 1.0


def test_gradient_table_is_read_only(field):
    with pytest.raises(ValueError):
        field.gradients[0, 0] = 0.0


def test_same_seed_same_table_and_samples():
    a = NoiseField(7)
    b = NoiseField(7)
    np.testing.assert_array_equal(a.gradients, b.gradients)
    for x, y, z in [(0.1, 0.2, 0.3), (-4.7, 13.25, 0.001), (100.5, -0.5, 9.9)]:
        assert a.sample(x, y, z) == b.sample(x, y, z)
        assert a.sample(x, y, z) == a.sample(x, y, z)


def test_different_seeds_differ():
    assert not np.array_equal(NoiseField(1).gradients, NoiseField(2).gradients)


def test_seed_is_reduced_to_32_bits():
    assert NoiseField(-1).seed == 0xFFFFFFFF
    np.testing.assert_array_equal(NoiseField(-1).gradients, NoiseField(2**32 - 1).gradients)


def test_non_integer_seed_rejected():
    with pytest.raises(TypeError):
        NoiseField(1.5)


@pytest.mark.parametrize("octaves,persistence", [(1, 1.0), (3, 0.5), (8, 0.5), (8, 1.0), (5, 0.05)])
def test_output_is_bounded(octaves, persistence):
    field = NoiseField(3, octaves=octaves, persistence=persistence)
    rng = np.random.RandomState(0)
    pts = rng.uniform(-50.0, 50.0, size=(3, 2000))
    values = field.sample(pts[0], pts[1], pts[2])
    assert values.min() >= 0.0
    assert values.max() <= 1.0
    singles = field.sample_octave(pts[0], pts[1], pts[2])
    assert singles.min() >= 0.0
    assert singles.max() <= 1.0


@pytest.mark.parametrize("coord", [1e19, -1e19, 1e60, 1e300, -1e300, 1.7e308])
def test_huge_coordinates_stay_bounded(field, coord):
    values = [
        field.sample_octave(coord, 0.5, 0.5),
        field.sample(coord, 0.5, 0.5),
        field.sample(0.5, coord, -coord),
    ]
    values.extend(field.sample(np.array([coord, 0.25]), 0.5, coord))
    for value in values:
        assert math.isfinite(value)
        assert 0.0 <= value <= 1.0


def test_single_octave_saturates_at_both_ends(field):
    rng = np.random.RandomState(1)
    pts = rng.uniform(-50.0, 50.0, size=(3, 20000))
    singles = field.sample_octave(pts[0], pts[1], pts[2])
    assert np.any(singles == 0.0)
    assert np.any(singles == 1.0)
    composite = field.sample(pts[0], pts[1], pts[2])
    single_edges = np.mean((singles == 0.0) | (singles == 1.0))
    composite_edges = np.mean((composite == 0.0) | (composite == 1.0))
    assert composite_edges < single_edges


def test_sample_octave_continuity_inside_cells(field):
    eps = 1e-4
    for x in np.linspace(0.05, 0.95, 19):
        a = field.sample_octave(x, 0.37, 0.81)
        b = field.sample_octave(x + eps, 0.37, 0.81)
        assert abs(a - b) < 1e-3


def test_composite_continuity_away_from_lattice_boundaries():
    field = NoiseField(11, octaves=4, persistence=0.5)
    freqs = [1.0, 2.0, 4.0, 8.0]
    eps = 1e-5
    checked = 0
    for x in np.linspace(0.013, 3.9, 97):
        if any(math.floor(x * f) != math.floor((x + eps) * f) for f in freqs):
            continue
        a = field.sample(x, 0.4, 0.2)
        b = field.sample(x + eps, 0.4, 0.2)
        assert abs(a - b) < 1e-3
        checked += 1
    assert checked > 50


@pytest.mark.parametrize("n,m,k", [(0, 0, 0), (3, -2, 5), (-7, 11, -1), (120, 64, 0)])
def test_lattice_points_use_shared_gradient(field, n, m, k):
    g = field.gradients[_lattice_index(n, m, k)]
    expected = min(1.0, max(0.0, (1.0 - g.sum()) / 2.0))
    value = field.sample_octave(float(n), float(m), float(k))
    assert value == pytest.approx(expected, abs=1e-12)
    assert field.sample_octave(n, m, k) == value


def test_single_octave_composite_equals_kernel():
    field = NoiseField(5, octaves=1)
    for x, y, z in [(0.3, 0.6, 0.9), (-1.25, 2.5, 7.75)]:
        assert field.sample(x, y, z) == pytest.approx(field.sample_octave(x, y, z))


def test_composite_is_amplitude_weighted_average():
    field = NoiseField(9, octaves=3, persistence=0.5)
    x, y, z = 0.31, 1.42, 0.07
    octaves = [field.sample_octave(x * f, y * f, z * f) for f in (1.0, 2.0, 4.0)]
    expected = (octaves[0] * 1.0 + octaves[1] * 0.5 + octaves[2] * 0.25) / 1.75
    assert field.sample(x, y, z) == pytest.approx(expected, abs=1e-12)


def test_array_sampling_matches_scalar(field):
    xs = np.array([[0.1, 2.3], [-5.5, 7.01]])
    ys = np.array([[0.4, -1.2], [3.3, 0.0]])
    result = field.sample(xs, ys, 0.25)
    assert result.shape == (2, 2)
    for idx in np.ndindex(xs.shape):
        assert result[idx] == pytest.approx(field.sample(xs[idx], ys[idx], 0.25), abs=1e-12)


def test_call_is_sample(field):
    assert field(0.5, 0.25, 0.125) == field.sample(0.5, 0.25, 0.125)


def test_sample_grid(field):
    grid = field.sample_grid(5, 3, 0.1, z=0.5)
    assert grid.shape == (3, 5)
    assert grid[2, 4] == pytest.approx(field.sample(0.4, 0.2, 0.5), abs=1e-12)


def test_configure_changes_output_not_table():
    field = NoiseField(13)
    table = field.gradients.copy()
    xs = np.linspace(0.0, 5.0, 64)
    before = field.sample(xs, 0.66, 0.99)
    field.configure(2, 0.9)
    assert field.octaves == 2
    assert field.persistence == 0.9
    assert not np.allclose(field.sample(xs, 0.66, 0.99), before)
    np.testing.assert_array_equal(field.gradients, table)


@pytest.mark.parametrize("octaves,persistence", [
    (0, 0.5), (-1, 0.5), (2.5, 0.5), (True, 0.5),
    (4, 0.0), (4, -0.5), (4, 1.5), (4, float("nan")),
])
def test_configure_rejects_invalid_values(octaves, persistence):
    field = NoiseField(1)
    with pytest.raises(ValueError):
        field.configure(octaves, persistence)
    assert field.octaves == 8
    assert field.persistence == 0.5


def test_constructor_rejects_invalid_configuration():
    with pytest.raises(ValueError):
        NoiseField(1, octaves=0)


def test_many_octaves_warn():
    field = NoiseField(1)
    with pytest.warns(UserWarning):
        field.configure(40, 0.5)
    assert field.octaves == 40
