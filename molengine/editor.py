from __future__ import annotations
from typing import Optional, Sequence, Union, Any
import logging

from .constants import DEFAULT_ITERATIONS, EDIT_RELAX_ITERATIONS, DEFAULT_HISTORY_MAXLEN
from .elements_data import Element
from .layout import place_atom_relative, optimize_geometry, center_molecule
from .molecule_graph import MoleculeGraph
from .undo_stack import UndoStack

logger = logging.getLogger(__name__)

# Tetrahedral hydrogen offsets around a carbon at the origin
METHANE_H_POSITIONS = (
    (0.89, 0.89, 0.89),
    (-0.89, -0.89, 0.89),
    (0.89, -0.89, -0.89),
    (-0.89, 0.89, -0.89),
)


def build_methane() -> MoleculeGraph:
    """Carbon with four tetrahedral hydrogens, centred on the origin."""
    molecule = MoleculeGraph()
    carbon = molecule.add_atom(Element.C, (0.0, 0.0, 0.0))
    for pos in METHANE_H_POSITIONS:
        hydrogen = molecule.add_atom(Element.H, pos)
        molecule.add_bond(carbon, hydrogen, 1)
    center_molecule(molecule)
    return molecule


class MoleculeEditor:
    """
    Editing session holding one current molecule and its undo history.

    Every edit works on a clone of the current molecule, relaxes or recentres
    it, then replaces the current molecule wholesale and records it in the
    history. A molecule obtained from `molecule` is therefore never mutated
    by later edits.

    Usage:
        editor = MoleculeEditor(default_methane=True)
        o = editor.add_atom("O", base_atom=carbon_id)
        editor.add_bond(carbon_id, o)
        editor.undo()
    """

    def __init__(self,
                 default_methane: bool = False,
                 history_size: int = DEFAULT_HISTORY_MAXLEN,
                 relax_iterations: int = EDIT_RELAX_ITERATIONS):
        self.history_size = int(history_size)
        self.relax_iterations = int(relax_iterations)
        self._molecule: MoleculeGraph = build_methane() if default_methane else MoleculeGraph()
        self.undo_stack = UndoStack(max_size=self.history_size)
        self.undo_stack.push(self._molecule)
        logger.info(f"MoleculeEditor initialized with {self._molecule!r}")

    @property
    def molecule(self) -> MoleculeGraph:
        """The committed molecule. Treat as read-only; edits go through the editor."""
        return self._molecule

    def _commit(self, molecule: MoleculeGraph) -> None:
        self._molecule = molecule
        self.undo_stack.push(molecule)

    # -----------------------
    # Edits
    # -----------------------
    def add_atom(self,
                 element: Union[Element, str],
                 position: Optional[Sequence[float]] = None,
                 base_atom: Optional[str] = None,
                 rng: Optional[Any] = None) -> str:
        """
        Add an atom at `position`, else bonded-distance away from `base_atom`
        in a random direction, else at the origin. Returns the new atom id.
        """
        molecule = self._molecule.clone()
        if position is None and base_atom is not None and base_atom in molecule.atoms:
            position = place_atom_relative(molecule.atoms[base_atom], element, rng=rng)
        atom_id = molecule.add_atom(element, position)
        center_molecule(molecule)
        self._commit(molecule)
        return atom_id

    def remove_atom(self, atom_id: str) -> bool:
        molecule = self._molecule.clone()
        if not molecule.remove_atom(atom_id):
            return False
        center_molecule(molecule)
        self._commit(molecule)
        return True

    def add_bond(self, a1: str, a2: str, order: int = 1) -> Optional[str]:
        """
        Bond two atoms and relax. A rejected bond leaves the molecule and the
        history untouched and returns None.
        """
        molecule = self._molecule.clone()
        bond_id = molecule.add_bond(a1, a2, order)
        if bond_id is None:
            return None
        optimize_geometry(molecule, self.relax_iterations)
        center_molecule(molecule)
        self._commit(molecule)
        return bond_id

    def remove_bond(self, bond_id: str) -> bool:
        molecule = self._molecule.clone()
        if not molecule.remove_bond(bond_id):
            return False
        optimize_geometry(molecule, self.relax_iterations)
        center_molecule(molecule)
        self._commit(molecule)
        return True

    def update_atom_position(self, atom_id: str, position: Sequence[float]) -> bool:
        """
        Move an atom without recording history (e.g. while dragging).
        """
        molecule = self._molecule.clone()
        if not molecule.set_atom_position(atom_id, position):
            return False
        self._molecule = molecule
        return True

    def optimize(self, iterations: int = DEFAULT_ITERATIONS, metrics=None) -> None:
        molecule = self._molecule.clone()
        optimize_geometry(molecule, iterations, metrics=metrics)
        center_molecule(molecule)
        self._commit(molecule)

    # -----------------------
    # History
    # -----------------------
    def undo(self) -> bool:
        previous = self.undo_stack.undo()
        if previous is None:
            return False
        self._molecule = previous
        return True

    def redo(self) -> bool:
        following = self.undo_stack.redo()
        if following is None:
            return False
        self._molecule = following
        return True

    def can_undo(self) -> bool:
        return self.undo_stack.can_undo()

    def can_redo(self) -> bool:
        return self.undo_stack.can_redo()

    def save_state(self) -> None:
        """Record the current molecule in the history."""
        self.undo_stack.push(self._molecule)

    def clear(self) -> None:
        """Start over with an empty molecule and a fresh history."""
        self._molecule = MoleculeGraph()
        self.undo_stack = UndoStack(max_size=self.history_size)
        self.undo_stack.push(self._molecule)

    def load_molecule(self, molecule: MoleculeGraph) -> None:
        """Replace the session with a centred copy of molecule and a fresh history."""
        loaded = molecule.clone()
        center_molecule(loaded)
        self._molecule = loaded
        self.undo_stack = UndoStack(max_size=self.history_size)
        self.undo_stack.push(loaded)
        logger.info(f"Loaded {loaded!r}")
