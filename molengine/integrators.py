from __future__ import annotations
import numpy as np
import logging

from .constants import DEFAULT_DT, DEFAULT_DAMPING

logger = logging.getLogger(__name__)


class Integrator:
    """
    Base class for numerical integrators over an (n, 3) position array.
    """

    def __init__(self, dt: float, positions: np.ndarray):
        self.dt = float(dt)
        self.positions = positions
        self.velocities = np.zeros_like(positions)

    def step(self, forces: np.ndarray) -> None:
        """
        Advance positions and velocities by one time step under the given forces.
        """
        raise NotImplementedError


class DampedEulerIntegrator(Integrator):
    """
    Semi-implicit Euler with velocity damping, unit masses:
        v(t+dt) = (v(t) + F*dt) * damping
        r(t+dt) = r(t) + v(t+dt)*dt
    """

    def __init__(self, dt: float, positions: np.ndarray, damping: float = DEFAULT_DAMPING):
        super().__init__(dt, positions)
        self.damping = float(damping)

    def step(self, forces: np.ndarray) -> None:
        self.velocities = (self.velocities + forces * self.dt) * self.damping
        self.positions += self.velocities * self.dt


def create_integrator(integrator_type: str, positions: np.ndarray, dt: float = DEFAULT_DT, **kwargs) -> Integrator:
    """
    Factory function to create an integrator instance.
    """
    if integrator_type.lower() == "damped_euler":
        return DampedEulerIntegrator(dt, positions, **kwargs)
    else:
        raise ValueError(f"Unknown integrator type: {integrator_type}")
