"""Configuration helpers for kernel components."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class KernelConfig:
    """Sampling resolutions and numeric policies used across the kernel."""

    measure_cubic_steps: int = 40
    curve_polyline_steps: int = 80
    bbox_cubic_steps: int = 40
    solver_cubic_steps: int = 80
    solver_bracket_iterations: int = 16
    solver_bisect_iterations: int = 24
    min_edge_length_px: float = 1e-4
    circle_tolerance: float = 0.02
    tile_padding_px: float = 10.0
    max_margin_cm: float = 10.0


_KERNEL_CONFIG = KernelConfig()


def get_kernel_config() -> KernelConfig:
    return copy.deepcopy(_KERNEL_CONFIG)


def set_kernel_config(config: KernelConfig) -> None:
    global _KERNEL_CONFIG
    _KERNEL_CONFIG = copy.deepcopy(config)


__all__ = ["KernelConfig", "get_kernel_config", "set_kernel_config"]
