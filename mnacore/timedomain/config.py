"""Transient run configuration."""

from __future__ import annotations
import math
from typing import NamedTuple, Mapping, Any

from ..constants import MIN_DT


class SimulationConfig(NamedTuple):
    """
    Time axis of a transient run.

    dt is floored to MIN_DT; the run always has at least one step.
    """
    dt: float  # seconds
    duration: float  # seconds

    @property
    def step_size(self) -> float:
        return max(float(self.dt), MIN_DT)

    @property
    def steps(self) -> int:
        return max(1, math.floor(float(self.duration) / self.step_size))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SimulationConfig:
        return cls(dt=float(data["dt"]), duration=float(data["duration"]))


DEFAULT_SIM_CONFIG = SimulationConfig(dt=0.0005, duration=0.1)


def as_config(config: SimulationConfig | Mapping[str, Any]) -> SimulationConfig:
    if isinstance(config, SimulationConfig):
        return config
    return SimulationConfig.from_mapping(config)
