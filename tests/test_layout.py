import math
import pytest
import numpy as np
from molengine.molecule_graph import MoleculeGraph
from molengine.layout import (
    random_direction, place_atom_relative, optimize_geometry, center_molecule, potential_energy
)
from molengine.metrics import RelaxationMetrics
from molengine.integrators import create_integrator


class StubDraws:
    """Feeds fixed uniform draws in order."""
    def __init__(self, *values):
        self._values = list(values)

    def random(self):
        return self._values.pop(0)


def distance(g, a, b):
    return float(np.linalg.norm(g.atoms[a].position - g.atoms[b].position))


def mk_bonded(e1="C", e2="O", separation=4.0):
    g = MoleculeGraph()
    a = g.add_atom(e1, (0.0, 0.0, 0.0))
    b = g.add_atom(e2, (separation, 0.0, 0.0))
    g.add_bond(a, b)
    return g, a, b


def positions(g):
    return np.array([a.position for a in g.atoms.values()])


def test_random_direction_exact_for_given_draws():
    d = random_direction(StubDraws(0.25, 0.5))
    np.testing.assert_allclose(d, [0.0, 1.0, 0.0], atol=1e-12)
    d = random_direction(StubDraws(0.0, 0.0))
    np.testing.assert_allclose(d, [0.0, 0.0, -1.0], atol=1e-12)


def test_random_direction_seeded_is_reproducible_unit_vector():
    d1 = random_direction(np.random.default_rng(7))
    d2 = random_direction(np.random.default_rng(7))
    np.testing.assert_array_equal(d1, d2)
    assert np.linalg.norm(d1) == pytest.approx(1.0)
    assert np.linalg.norm(random_direction()) == pytest.approx(1.0)


def test_place_atom_relative_explicit_direction():
    g = MoleculeGraph()
    c = g.add_atom("C", (1.0, 1.0, 1.0))
    pos = place_atom_relative(g.atoms[c], "H", direction=(2.0, 0.0, 0.0))
    # 1.09 (C-H) + 0.77 (C) + 0.31 (H)
    np.testing.assert_allclose(pos, [1.0 + 2.17, 1.0, 1.0])


def test_place_atom_relative_untabulated_pair_and_random_direction():
    g = MoleculeGraph()
    s = g.add_atom("S")
    pos = place_atom_relative(g.atoms[s], "P", rng=StubDraws(0.25, 0.5))
    np.testing.assert_allclose(pos, [0.0, 1.5 + 1.02 + 1.06, 0.0], atol=1e-12)


def test_place_atom_relative_zero_direction_raises():
    g = MoleculeGraph()
    c = g.add_atom("C")
    with pytest.raises(ValueError):
        place_atom_relative(g.atoms[c], "H", direction=(0, 0, 0))


def test_optimize_zero_iterations_is_noop():
    g, a, b = mk_bonded()
    g.add_atom("H", (0.3, 0.2, 0.1))
    before = positions(g)
    optimize_geometry(g, 0)
    np.testing.assert_array_equal(positions(g), before)


def test_bonded_pair_converges_to_tabulated_length():
    g, a, b = mk_bonded("C", "O", separation=4.0)
    optimize_geometry(g, 1000)
    assert distance(g, a, b) == pytest.approx(1.43, abs=0.01)
    # equal and opposite forces keep the centroid fixed
    np.testing.assert_allclose(positions(g).mean(axis=0), [2.0, 0.0, 0.0], atol=1e-9)


def test_compressed_bond_expands_to_tabulated_length():
    g, a, b = mk_bonded("C", "H", separation=0.5)
    optimize_geometry(g, 1000)
    assert distance(g, a, b) == pytest.approx(1.09, abs=0.01)


def test_single_step_matches_damped_euler_update():
    g, a, b = mk_bonded("C", "O", separation=4.0)
    optimize_geometry(g, 1)
    # force 0.1 * (4 - 1.43) on each atom; v = F*dt*damping; dx = v*dt
    assert distance(g, a, b) == pytest.approx(4.0 - 2 * 0.257 * 0.1 * 0.9 * 0.1, abs=1e-12)


def test_velocities_reset_between_calls():
    g, a, b = mk_bonded("C", "O", separation=4.0)
    optimize_geometry(g, 1)
    optimize_geometry(g, 1)
    assert distance(g, a, b) == pytest.approx(3.9907563268, abs=1e-9)

    h, c, d = mk_bonded("C", "O", separation=4.0)
    optimize_geometry(h, 2)
    assert distance(h, c, d) == pytest.approx(3.9865929268, abs=1e-9)


def test_nonbonded_pair_is_pushed_apart():
    g = MoleculeGraph()
    a = g.add_atom("H", (0.0, 0.0, 0.0))
    b = g.add_atom("H", (2.0, 0.0, 0.0))
    optimize_geometry(g, 1)
    assert distance(g, a, b) > 2.0


def test_pairs_outside_window_feel_no_force():
    g = MoleculeGraph()
    g.add_atom("H", (0.0, 0.0, 0.0))
    g.add_atom("H", (6.0, 0.0, 0.0))
    g.add_atom("O", (6.0, 0.0, 0.0))
    before = positions(g)
    optimize_geometry(g, 5)
    np.testing.assert_array_equal(positions(g), before)


def test_optimize_is_deterministic():
    g = MoleculeGraph()
    c = g.add_atom("C", (0.0, 0.0, 0.0))
    for pos in [(1, 0, 0), (0, 1.2, 0), (0, 0, 0.8), (-1, -1, 0)]:
        h = g.add_atom("H", pos)
        g.add_bond(c, h)
    g.add_atom("O", (2.5, 2.5, 0.0))
    first, second = g.clone(), g.clone()
    optimize_geometry(first, 30)
    optimize_geometry(second, 30)
    np.testing.assert_array_equal(positions(first), positions(second))
    assert list(first.atoms) == list(g.atoms)
    assert list(first.bonds) == list(g.bonds)


def test_center_molecule_moves_centroid_to_origin():
    g = MoleculeGraph()
    ids = [g.add_atom("C", (1.0, 2.0, 3.0)), g.add_atom("O", (4.0, -2.0, 0.5)), g.add_atom("H", (0.1, 0.2, 9.0))]
    d01 = distance(g, ids[0], ids[1])
    d12 = distance(g, ids[1], ids[2])
    center_molecule(g)
    np.testing.assert_allclose(positions(g).mean(axis=0), [0.0, 0.0, 0.0], atol=1e-12)
    assert distance(g, ids[0], ids[1]) == pytest.approx(d01)
    assert distance(g, ids[1], ids[2]) == pytest.approx(d12)


def test_center_and_optimize_empty_graph():
    g = MoleculeGraph()
    center_molecule(g)
    optimize_geometry(g, 10)
    assert g.atom_count == 0
    assert potential_energy(g) == 0.0


def test_potential_energy_zero_at_rest():
    g, _, _ = mk_bonded("C", "O", separation=1.43)
    assert potential_energy(g) == pytest.approx(0.0)
    g2, _, _ = mk_bonded("C", "O", separation=2.43)
    assert potential_energy(g2) == pytest.approx(0.5 * 0.1 * 1.0)


def test_metrics_record_relaxation():
    g, _, _ = mk_bonded("C", "O", separation=4.0)
    metrics = RelaxationMetrics()
    optimize_geometry(g, 20, metrics=metrics)
    assert len(metrics.potential) == 20
    assert metrics.energy_drop() > 0.0
    assert not metrics.is_converged()

    optimize_geometry(g, 1000, metrics=metrics)
    assert metrics.is_converged()
    assert metrics.summary()["steps"] == 1000.0
    assert math.isclose(metrics.potential[-1], 0.0, abs_tol=1e-8)


def test_metrics_reset():
    metrics = RelaxationMetrics(max_history=3)
    for e in [5.0, 4.0, 3.0, 2.0]:
        metrics.update(e, 0.1)
    assert list(metrics.potential) == [4.0, 3.0, 2.0]
    assert metrics.energy_drop() == pytest.approx(3.0)
    metrics.reset()
    assert metrics.initial_energy is None
    assert metrics.energy_drop() == 0.0


def test_integrator_factory():
    pos = np.zeros((2, 3))
    integrator = create_integrator("damped_euler", pos, dt=0.1, damping=0.9)
    integrator.step(np.array([[1.0, 0.0, 0.0], [-1.0, 0.0, 0.0]]))
    np.testing.assert_allclose(integrator.velocities[0], [0.09, 0.0, 0.0])
    np.testing.assert_allclose(integrator.positions[0], [0.009, 0.0, 0.0])
    with pytest.raises(ValueError):
        create_integrator("verlet", pos)
