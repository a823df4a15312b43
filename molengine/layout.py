"""
Geometry engine for molecule graphs.

Stateless functions that place new atoms, relax a structure with a simple
two-term force field (Hookean bond springs plus Lennard-Jones-style non-bonded
repulsion) and recenter it on the origin. All functions operate on a
MoleculeGraph in place or return plain numpy vectors.

The non-bonded term scans every atom pair, so a relaxation step is O(n^2):
intended for molecules of tens of atoms, not macromolecules.
"""

from __future__ import annotations
from typing import List, Optional, Sequence, Tuple, Union, Any
import numpy as np
import math
import logging

from .atoms import Atom
from .elements_data import Element, get_bond_length, get_element_radius
from .integrators import create_integrator
from .metrics import RelaxationMetrics
from .molecule_graph import MoleculeGraph
from .constants import (
    DEFAULT_ITERATIONS,
    BOND_SPRING_K,
    LJ_EPSILON,
    LJ_SIGMA,
    NONBONDED_MIN_DISTANCE,
    NONBONDED_CUTOFF,
    DEFAULT_DT,
    DEFAULT_DAMPING,
    LARGE_MOLECULE_WARNING,
    EPSILON,
)

logger = logging.getLogger(__name__)


# -----------------------
# Placement
# -----------------------

def random_direction(rng: Optional[Any] = None) -> np.ndarray:
    """
    Sample a unit vector uniformly over the sphere.

    Uses two uniform [0, 1) draws u1, u2 from `rng` (a numpy Generator or any
    object with a `random()` method):
        theta = 2*pi*u1, phi = acos(2*u2 - 1)
        dir = (sin(phi)cos(theta), sin(phi)sin(theta), cos(phi))
    """
    if rng is None:
        rng = np.random.default_rng()
    u1 = float(rng.random())
    u2 = float(rng.random())
    theta = u1 * 2.0 * math.pi
    phi = math.acos(2.0 * u2 - 1.0)
    return np.array([
        math.sin(phi) * math.cos(theta),
        math.sin(phi) * math.sin(theta),
        math.cos(phi),
    ])


def place_atom_relative(base_atom: Atom,
                        new_element: Union[Element, str],
                        direction: Optional[Sequence[float]] = None,
                        rng: Optional[Any] = None) -> np.ndarray:
    """
    Position for a new atom bonded to base_atom.

    The new atom sits along `direction` (normalized; random when omitted) at
    bond_length + radius(base) + radius(new) from the base atom.

    Raises
    ------
    ValueError
        If an explicit direction has zero length.
    """
    bond_length = get_bond_length(base_atom.element, new_element)
    distance = bond_length + get_element_radius(base_atom.element) + get_element_radius(new_element)

    if direction is not None:
        dirn = np.asarray(direction, dtype=float)
        norm = np.linalg.norm(dirn)
        if norm < EPSILON:
            raise ValueError("Placement direction must be non-zero")
        dirn = dirn / norm
    else:
        dirn = random_direction(rng)

    return base_atom.position + dirn * distance


# -----------------------
# Force field
# -----------------------

def _topology(graph: MoleculeGraph) -> Tuple[List[Atom], List[Tuple[int, int, float]], set]:
    """
    Index atoms once for a relaxation run.
    Returns (atoms, [(i, j, target_length)] per bond, bonded index pairs).
    """
    atoms = list(graph.atoms.values())
    index = {a.uid: i for i, a in enumerate(atoms)}
    springs = []
    bonded = set()
    for bond in graph.bonds.values():
        i, j = index[bond.a1], index[bond.a2]
        springs.append((i, j, get_bond_length(atoms[i].element, atoms[j].element)))
        bonded.add(frozenset((i, j)))
    return atoms, springs, bonded


def _compute_forces(positions: np.ndarray,
                    springs: List[Tuple[int, int, float]],
                    bonded: set) -> np.ndarray:
    forces = np.zeros_like(positions)

    # bond springs: pull stretched bonds together, push compressed ones apart
    for i, j, target in springs:
        delta = positions[j] - positions[i]
        dist = np.linalg.norm(delta)
        if dist > NONBONDED_MIN_DISTANCE:
            fmag = BOND_SPRING_K * (dist - target)
            f = fmag * delta / dist
            forces[i] += f
            forces[j] -= f

    # non-bonded repulsion (softened Lennard-Jones); positive magnitude pushes apart
    n = len(positions)
    for i in range(n):
        for j in range(i + 1, n):
            if frozenset((i, j)) in bonded:
                continue
            delta = positions[j] - positions[i]
            dist = np.linalg.norm(delta)
            if NONBONDED_MIN_DISTANCE < dist < NONBONDED_CUTOFF:
                r6 = (LJ_SIGMA / dist) ** 6
                r12 = r6 * r6
                fmag = (24.0 * LJ_EPSILON / dist) * (2.0 * r12 - r6)
                f = fmag * delta / dist
                forces[i] -= f
                forces[j] += f

    return forces


def _energy(positions: np.ndarray,
            springs: List[Tuple[int, int, float]],
            bonded: set) -> float:
    pe_bond = 0.0
    for i, j, target in springs:
        dist = np.linalg.norm(positions[j] - positions[i])
        pe_bond += 0.5 * BOND_SPRING_K * (dist - target) ** 2

    pe_nb = 0.0
    n = len(positions)
    for i in range(n):
        for j in range(i + 1, n):
            if frozenset((i, j)) in bonded:
                continue
            dist = np.linalg.norm(positions[j] - positions[i])
            if NONBONDED_MIN_DISTANCE < dist < NONBONDED_CUTOFF:
                sr6 = (LJ_SIGMA / dist) ** 6
                pe_nb += 4.0 * LJ_EPSILON * (sr6 * sr6 - sr6)
    return float(pe_bond + pe_nb)


def potential_energy(graph: MoleculeGraph) -> float:
    """
    Potential energy of the current geometry under the relaxation force field:
    0.5*k*(d - target)^2 per bond plus 4*eps*((sigma/d)^12 - (sigma/d)^6) per
    non-bonded pair inside the interaction window.
    """
    atoms, springs, bonded = _topology(graph)
    if not atoms:
        return 0.0
    positions = np.array([a.position for a in atoms], dtype=float)
    return _energy(positions, springs, bonded)


# -----------------------
# Relaxation
# -----------------------

def optimize_geometry(graph: MoleculeGraph,
                      iterations: int = DEFAULT_ITERATIONS,
                      metrics: Optional[RelaxationMetrics] = None) -> None:
    """
    Relax atom positions in place with a fixed number of damped integration steps.

    Each step accumulates bond spring and non-bonded forces, then integrates
    with dt=DEFAULT_DT and damping=DEFAULT_DAMPING (unit masses). Velocities
    start at zero on every call. Deterministic for a given input.

    Args:
        graph: Molecule to relax; ids and topology are untouched.
        iterations: Number of integration steps; 0 leaves the graph unchanged.
        metrics: Optional recorder receiving the energy after every step.
    """
    atoms, springs, bonded = _topology(graph)
    if not atoms or iterations <= 0:
        return
    if len(atoms) > LARGE_MOLECULE_WARNING:
        logger.warning(f"optimize_geometry: {len(atoms)} atoms, all-pairs repulsion scales as O(n^2)")

    positions = np.array([a.position for a in atoms], dtype=float)
    integrator = create_integrator("damped_euler", positions, dt=DEFAULT_DT, damping=DEFAULT_DAMPING)

    for _ in range(iterations):
        forces = _compute_forces(integrator.positions, springs, bonded)
        integrator.step(forces)
        if metrics is not None:
            step_sizes = np.linalg.norm(integrator.velocities, axis=1) * integrator.dt
            metrics.update(_energy(integrator.positions, springs, bonded), float(step_sizes.max()))

    for i, atom in enumerate(atoms):
        atom.position = integrator.positions[i].copy()

    logger.debug(f"optimize_geometry: {iterations} steps over {len(atoms)} atoms")


def center_molecule(graph: MoleculeGraph) -> None:
    """
    Translate all atoms so their centroid sits at the origin. No-op when empty.
    """
    if not graph.atoms:
        return
    centroid = np.mean([a.position for a in graph.atoms.values()], axis=0)
    for atom in graph.atoms.values():
        atom.position = atom.position - centroid
