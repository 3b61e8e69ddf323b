"""Example modules for noiseflow."""

from __future__ import annotations

import runpy
import sys
from typing import List, Optional


def list_examples() -> List[str]:
    return [
        "flow_lines",
        "noise_slice",
        "direction_field",
    ]


def run_example(name: str, args: Optional[List[str]] = None) -> None:
    """Run an example module by name."""
    if name not in list_examples():
        raise ValueError(f"Unknown example '{name}'.")
    module = f"noiseflow.examples.{name}"
    sys.argv = [module] + (args or [])
    runpy.run_module(module, run_name="__main__")
