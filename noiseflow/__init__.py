"""noiseflow public API."""

from .noise_field import NoiseField, NUM_VECTORS
from .flow_simulation import FlowParams, FlowSimulation, SimulationState
from .trail_canvas import TrailCanvas
from .presets import PRESETS, build_simulation, list_presets
from .interactive import (
    InteractiveConfig,
    add_interactive_args,
    add_preset_arg,
    resolve_preset,
    run_interactive,
    get_screen_size,
)
from .examples import list_examples, run_example

__all__ = [
    "NoiseField",
    "NUM_VECTORS",
    "FlowParams",
    "FlowSimulation",
    "SimulationState",
    "TrailCanvas",
    "PRESETS",
    "build_simulation",
    "list_presets",
    "InteractiveConfig",
    "add_interactive_args",
    "add_preset_arg",
    "resolve_preset",
    "run_interactive",
    "get_screen_size",
    "list_examples",
    "run_example",
]

__version__ = "0.1.0"
