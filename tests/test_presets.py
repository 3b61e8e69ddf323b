import numpy as np
import pytest

from noiseflow import PRESETS, FlowSimulation, NoiseField, build_simulation, list_presets


def test_presets_listed():
    assert list_presets() == list(PRESETS)
    assert "original" in list_presets()


def test_default_preset_is_original():
    noise, sim = build_simulation(seed=5, particle_count=10)
    assert isinstance(noise, NoiseField)
    assert isinstance(sim, FlowSimulation)
    assert sim.noise is noise
    assert (sim.params.grid_width, sim.params.grid_height) == (112, 64)
    assert sim.params.particle_count == 10
    assert noise.octaves == 8


def test_overrides_and_seed_are_reproducible():
    _, a = build_simulation("turbulent", seed=2, particle_count=30)
    _, b = build_simulation("turbulent", seed=2, particle_count=30)
    np.testing.assert_array_equal(a.positions, b.positions)
    assert a.params.acceleration_ratio == 0.05


def test_negative_seed_builds_simulation():
    noise, sim = build_simulation(seed=-5, particle_count=10)
    assert noise.seed == sim.params.seed == 2**32 - 5
    sim.advance(0)
    assert sim.state.name == "STEPPED"


def test_unknown_preset():
    with pytest.raises(ValueError):
        build_simulation("windy")
