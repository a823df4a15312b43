"""
Headless plotting for geometry relaxation runs.
Saves figures as SVG and PNG side by side.
"""

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from typing import List, Optional, Union

from molengine.metrics import RelaxationMetrics

plt.rcParams['font.size'] = 12
plt.rcParams['axes.labelsize'] = 14
plt.rcParams['axes.titlesize'] = 16
plt.rcParams['figure.dpi'] = 100
plt.rcParams['savefig.dpi'] = 300
plt.rcParams['savefig.bbox'] = 'tight'


def plot_relaxation(metrics: RelaxationMetrics,
                    filename_prefix: str = 'relaxation_plot',
                    title: Optional[str] = None) -> List[str]:
    """
    Plot potential energy and largest per-step displacement against iteration.

    Parameters:
    -----------
    metrics : RelaxationMetrics
        Recorder filled by optimize_geometry
    filename_prefix : str
        Prefix for output files (default: 'relaxation_plot')
    title : str, optional
        Plot title (default: 'Geometry Relaxation')

    Returns the paths written.
    """
    if not metrics.potential:
        raise ValueError("No relaxation steps recorded")

    steps = metrics.iterations()
    fig, (ax_e, ax_d) = plt.subplots(2, 1, figsize=(8, 8), sharex=True)

    ax_e.plot(steps, list(metrics.potential), 'b-', linewidth=2, alpha=0.8)
    ax_e.set_ylabel('Potential Energy')
    ax_e.grid(True, alpha=0.3)

    displacement = np.maximum(np.asarray(metrics.max_displacement, dtype=float), 1e-12)
    ax_d.semilogy(steps, displacement, 'r-', linewidth=2, alpha=0.8)
    ax_d.set_xlabel('Iteration')
    ax_d.set_ylabel('Max Step Size')
    ax_d.grid(True, alpha=0.3)

    fig.suptitle(title or 'Geometry Relaxation')
    fig.tight_layout()

    paths = [f'{filename_prefix}.svg', f'{filename_prefix}.png']
    fig.savefig(paths[0], format='svg')
    fig.savefig(paths[1], format='png')
    plt.close(fig)
    return paths


def plot_energy(iterations: Union[List[float], np.ndarray],
                energy: Union[List[float], np.ndarray],
                filename_prefix: str = 'energy_plot',
                title: Optional[str] = None) -> None:
    """
    Plot a bare energy series, e.g. energies collected across several edits.
    """
    plt.figure(figsize=(8, 6))
    plt.plot(iterations, energy, 'b-', linewidth=2, alpha=0.8)
    plt.xlabel('Iteration')
    plt.ylabel('Potential Energy')
    plt.title(title or 'Energy vs Iteration')
    plt.grid(True, alpha=0.3)
    plt.tight_layout()

    plt.savefig(f'{filename_prefix}.svg', format='svg')
    plt.savefig(f'{filename_prefix}.png', format='png')
    plt.close()
