import pytest
import numpy as np
from molengine.editor import MoleculeEditor, build_methane
from molengine.molecule_graph import MoleculeGraph


class StubDraws:
    def __init__(self, *values):
        self._values = list(values)

    def random(self):
        return self._values.pop(0)


def test_default_methane_session():
    editor = MoleculeEditor(default_methane=True)
    mol = editor.molecule
    assert mol.get_formula() == "CH4"
    assert mol.bond_count == 4
    np.testing.assert_allclose(np.mean([a.position for a in mol.atoms.values()], axis=0), 0.0, atol=1e-12)
    assert not editor.can_undo()
    assert not editor.can_redo()


def test_add_atom_relative_to_base():
    editor = MoleculeEditor(default_methane=True)
    carbon = "atom_1"
    new_id = editor.add_atom("O", base_atom=carbon, rng=StubDraws(0.25, 0.5))
    mol = editor.molecule
    sep = np.linalg.norm(mol.atoms[new_id].position - mol.atoms[carbon].position)
    # 1.43 (C-O) + 0.77 (C) + 0.73 (O)
    assert sep == pytest.approx(2.93)
    assert mol.get_formula() == "CH4O"
    assert editor.can_undo()


def test_add_atom_falls_back_to_origin_before_centering():
    editor = MoleculeEditor()
    first = editor.add_atom("C", base_atom="atom_404")
    second = editor.add_atom("N", position=(2.0, 0.0, 0.0))
    mol = editor.molecule
    np.testing.assert_allclose(mol.atoms[first].position, [-1.0, 0.0, 0.0])
    np.testing.assert_allclose(mol.atoms[second].position, [1.0, 0.0, 0.0])


def test_committed_molecule_is_never_mutated():
    editor = MoleculeEditor(default_methane=True)
    published = editor.molecule
    editor.add_atom("Cl", position=(5.0, 0.0, 0.0))
    editor.remove_atom("atom_2")
    assert published.atom_count == 5
    assert published.get_formula() == "CH4"
    assert editor.molecule is not published


def test_rejected_bond_leaves_history_untouched():
    editor = MoleculeEditor(default_methane=True)
    size = len(editor.undo_stack)
    assert editor.add_bond("atom_1", "atom_1") is None
    assert editor.add_bond("atom_1", "atom_99") is None
    assert len(editor.undo_stack) == size
    assert editor.remove_bond("bond_99") is False
    assert editor.remove_atom("atom_99") is False
    assert len(editor.undo_stack) == size


def test_bond_edit_then_undo_redo():
    editor = MoleculeEditor(default_methane=True)
    o = editor.add_atom("O", position=(3.0, 0.0, 0.0))
    bond = editor.add_bond("atom_1", o)
    assert bond == "bond_5"
    assert editor.molecule.get_bond_order("atom_1", o) == 1

    assert editor.undo() is True
    assert editor.molecule.get_bond_order("atom_1", o) == 0
    assert editor.molecule.atom_count == 6
    assert editor.can_redo()

    assert editor.redo() is True
    assert editor.molecule.get_bond_order("atom_1", o) == 1
    assert editor.redo() is False

    assert editor.remove_bond(bond) is True
    assert editor.molecule.bond_count == 4


def test_undo_to_start_then_new_edit_drops_redo():
    editor = MoleculeEditor()
    editor.add_atom("C")
    editor.add_atom("H", position=(1.0, 0.0, 0.0))
    assert editor.undo()
    assert editor.undo()
    assert editor.undo() is False
    assert editor.molecule.atom_count == 0
    editor.add_atom("N")
    assert not editor.can_redo()
    assert editor.molecule.get_formula() == "N"


def test_update_atom_position_skips_history():
    editor = MoleculeEditor(default_methane=True)
    size = len(editor.undo_stack)
    assert editor.update_atom_position("atom_2", (9.0, 9.0, 9.0)) is True
    np.testing.assert_array_equal(editor.molecule.atoms["atom_2"].position, [9.0, 9.0, 9.0])
    assert len(editor.undo_stack) == size
    assert editor.update_atom_position("atom_99", (0, 0, 0)) is False


def test_optimize_commits_and_recenters():
    editor = MoleculeEditor()
    c = editor.add_atom("C", position=(0.0, 0.0, 0.0))
    o = editor.add_atom("O", position=(4.0, 0.0, 0.0))
    editor.add_bond(c, o)
    before = np.linalg.norm(editor.molecule.atoms[o].position - editor.molecule.atoms[c].position)
    editor.optimize(200)
    mol = editor.molecule
    after = np.linalg.norm(mol.atoms[o].position - mol.atoms[c].position)
    assert abs(after - 1.43) < abs(before - 1.43)
    np.testing.assert_allclose(np.mean([a.position for a in mol.atoms.values()], axis=0), 0.0, atol=1e-9)
    assert editor.undo()
    assert editor.molecule.bond_count == 1


def test_clear_and_load_reset_history():
    editor = MoleculeEditor(default_methane=True)
    editor.add_atom("O")
    editor.clear()
    assert editor.molecule.atom_count == 0
    assert not editor.can_undo()

    source = build_methane()
    source.atoms["atom_1"].position += 10.0
    editor.load_molecule(source)
    assert editor.molecule.get_formula() == "CH4"
    assert not editor.can_undo()
    # loading works on a copy
    assert editor.molecule is not source
    assert source.atoms["atom_1"].position[0] == pytest.approx(10.0)


def test_save_state_records_current():
    editor = MoleculeEditor()
    editor.update_atom_position("atom_1", (0, 0, 0))
    editor.save_state()
    assert isinstance(editor.undo_stack.get_current_state(), MoleculeGraph)
    assert len(editor.undo_stack) == 2
