"""
Diagnostics for geometry relaxation runs.
Records the potential energy of the structure after every relaxation step so a
run can be inspected or plotted afterwards.
"""

from __future__ import annotations
from typing import Dict, Optional
import numpy as np
import logging
from collections import deque

logger = logging.getLogger(__name__)


class RelaxationMetrics:
    """
    Tracks per-iteration energies of one or more optimize_geometry calls.
    """

    def __init__(self, max_history: int = 1000):
        """
        Args:
            max_history: Maximum number of data points to keep
        """
        self.max_history = max_history
        self.potential: deque[float] = deque(maxlen=max_history)
        self.max_displacement: deque[float] = deque(maxlen=max_history)
        self.initial_energy: Optional[float] = None

    def update(self, potential_energy: float, max_displacement: float = 0.0) -> None:
        """Record the state after one relaxation step."""
        if self.initial_energy is None:
            self.initial_energy = float(potential_energy)
        self.potential.append(float(potential_energy))
        self.max_displacement.append(float(max_displacement))

    def iterations(self) -> np.ndarray:
        return np.arange(1, len(self.potential) + 1)

    def energy_drop(self) -> float:
        """Energy released since the first recorded step (positive when relaxing)."""
        if self.initial_energy is None or not self.potential:
            return 0.0
        return self.initial_energy - self.potential[-1]

    def is_converged(self, tolerance: float = 1e-4, window: int = 5) -> bool:
        """
        True when the largest per-step displacement stayed below tolerance over
        the last `window` steps.
        """
        if len(self.max_displacement) < window:
            return False
        recent = list(self.max_displacement)[-window:]
        return max(recent) < tolerance

    def summary(self) -> Dict[str, float]:
        return {
            "steps": float(len(self.potential)),
            "initial_energy": float(self.initial_energy or 0.0),
            "final_energy": float(self.potential[-1]) if self.potential else 0.0,
            "energy_drop": self.energy_drop(),
        }

    def reset(self) -> None:
        self.potential.clear()
        self.max_displacement.clear()
        self.initial_energy = None
