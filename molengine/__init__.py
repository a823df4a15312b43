# molengine/__init__.py
__all__ = [
    "Element", "Atom", "Bond", "MoleculeGraph", "UndoStack", "MoleculeEditor",
    "place_atom_relative", "optimize_geometry", "center_molecule"
]

from .elements_data import Element
from .atoms import Atom
from .bonds import Bond
from .molecule_graph import MoleculeGraph
from .layout import place_atom_relative, optimize_geometry, center_molecule
from .undo_stack import UndoStack
from .editor import MoleculeEditor
