from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Union, Any, Iterable
import re
import logging

import numpy as np

from .atoms import Atom
from .bonds import Bond
from .elements_data import Element
from . import products

logger = logging.getLogger(__name__)

ATOM_ID_PREFIX = "atom_"
BOND_ID_PREFIX = "bond_"


def _infer_next_id(ids: Iterable[str], prefix: str) -> int:
    """
    Return one past the largest numeric suffix among ids of the form <prefix><n>.
    Ids of any other shape are ignored.
    """
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
    highest = 0
    for uid in ids:
        m = pattern.match(str(uid))
        if m:
            highest = max(highest, int(m.group(1)))
    return highest + 1


class MoleculeGraph:
    """
    Mutable graph of atoms and bonds.

    Atoms and bonds live in insertion-ordered dicts keyed by opaque string ids;
    bonds reference atoms by id. Iteration over `atoms` and `bonds` follows
    insertion order.

    Normal failures (missing ids, self-bonds, duplicate bonds) never raise:
    the mutators return False or None and leave the graph unchanged.

    Typical usage:
        g = MoleculeGraph()
        c = g.add_atom("C")
        h = g.add_atom("H", (1.09, 0.0, 0.0))
        g.add_bond(c, h)
        g.get_formula()   # "CH"
    """

    def __init__(self):
        self.atoms: Dict[str, Atom] = {}
        self.bonds: Dict[str, Bond] = {}
        # unordered atom pair -> bond id
        self._pair_index: Dict[frozenset, str] = {}
        self._next_atom_id: int = 1
        self._next_bond_id: int = 1

    # -----------------------
    # Id allocation
    # -----------------------
    def _allocate_atom_id(self) -> str:
        uid = f"{ATOM_ID_PREFIX}{self._next_atom_id}"
        self._next_atom_id += 1
        # loaded data may already hold ids past the counter
        while uid in self.atoms:
            uid = f"{ATOM_ID_PREFIX}{self._next_atom_id}"
            self._next_atom_id += 1
        return uid

    def _allocate_bond_id(self) -> str:
        uid = f"{BOND_ID_PREFIX}{self._next_bond_id}"
        self._next_bond_id += 1
        while uid in self.bonds:
            uid = f"{BOND_ID_PREFIX}{self._next_bond_id}"
            self._next_bond_id += 1
        return uid

    # -----------------------
    # Atoms
    # -----------------------
    def add_atom(self,
                 element: Union[Element, str],
                 position: Optional[Sequence[float]] = None,
                 charge: Optional[float] = None) -> str:
        """
        Add an atom and return its new id. Always succeeds for a supported element.
        """
        uid = self._allocate_atom_id()
        self.atoms[uid] = Atom(uid, element, position, charge)
        logger.debug(f"Added atom {uid} ({self.atoms[uid].element.value})")
        return uid

    def remove_atom(self, uid: str) -> bool:
        """
        Remove an atom together with every bond incident to it.
        Returns False if the atom does not exist.
        """
        if uid not in self.atoms:
            logger.debug(f"remove_atom: no atom {uid}")
            return False
        for bond in self.get_bonds_for_atom(uid):
            self._drop_bond(bond)
        del self.atoms[uid]
        logger.debug(f"Removed atom {uid}")
        return True

    def get_atom(self, uid: str) -> Optional[Atom]:
        return self.atoms.get(uid)

    def set_atom_position(self, uid: str, position: Sequence[float]) -> bool:
        """Move an atom. Returns False if the atom does not exist."""
        atom = self.atoms.get(uid)
        if atom is None:
            return False
        pos = np.array(position, dtype=float)
        if pos.shape != (3,):
            raise ValueError(f"Atom position must have 3 components, got shape {pos.shape}")
        atom.position = pos
        return True

    # -----------------------
    # Bonds
    # -----------------------
    def add_bond(self, a1: str, a2: str, order: int = 1) -> Optional[str]:
        """
        Bond two distinct existing atoms.

        Returns the new bond id, the id of the bond already joining the pair
        (in either direction), or None when the pair is rejected.
        """
        if a1 == a2:
            logger.debug(f"add_bond: rejected self-bond on {a1}")
            return None
        if a1 not in self.atoms or a2 not in self.atoms:
            logger.debug(f"add_bond: rejected {a1}-{a2}, missing endpoint")
            return None

        existing = self._pair_index.get(frozenset((a1, a2)))
        if existing is not None:
            return existing

        uid = self._allocate_bond_id()
        bond = Bond(uid, a1, a2, order)
        self.bonds[uid] = bond
        self._pair_index[bond.key] = uid
        logger.debug(f"Added bond {bond}")
        return uid

    def remove_bond(self, uid: str) -> bool:
        """Remove a bond by id. Returns False if it does not exist."""
        bond = self.bonds.get(uid)
        if bond is None:
            logger.debug(f"remove_bond: no bond {uid}")
            return False
        self._drop_bond(bond)
        return True

    def remove_bond_between(self, a1: str, a2: str) -> bool:
        """Remove the bond joining a1 and a2 in either direction, if any."""
        uid = self._pair_index.get(frozenset((a1, a2)))
        if uid is None:
            return False
        return self.remove_bond(uid)

    def _drop_bond(self, bond: Bond) -> None:
        del self.bonds[bond.uid]
        del self._pair_index[bond.key]

    def get_bond(self, uid: str) -> Optional[Bond]:
        return self.bonds.get(uid)

    def find_bond(self, a1: str, a2: str) -> Optional[Bond]:
        """Return the bond joining a1 and a2 in either direction, or None."""
        uid = self._pair_index.get(frozenset((a1, a2)))
        return self.bonds[uid] if uid is not None else None

    # -----------------------
    # Topology queries
    # -----------------------
    def get_neighbors(self, uid: str) -> List[str]:
        """Ids of atoms directly bonded to uid, in bond insertion order."""
        return [b.other(uid) for b in self.bonds.values() if b.involves(uid)]

    def get_bond_order(self, a1: str, a2: str) -> int:
        """Order of the bond joining a1 and a2, or 0 if they are not bonded."""
        bond = self.find_bond(a1, a2)
        return bond.order if bond is not None else 0

    def get_bonds_for_atom(self, uid: str) -> List[Bond]:
        return [b for b in self.bonds.values() if b.involves(uid)]

    def bonded_pairs(self) -> set:
        """Set of unordered atom-id pairs that share a bond."""
        return set(self._pair_index.keys())

    def get_fragments(self) -> List[List[str]]:
        """Connected components as lists of atom ids, largest first."""
        return products.extract_connected_components(self.atoms.keys(), self.bonds.values())

    @property
    def atom_count(self) -> int:
        return len(self.atoms)

    @property
    def bond_count(self) -> int:
        return len(self.bonds)

    # -----------------------
    # Copying & serialization
    # -----------------------
    def clone(self) -> MoleculeGraph:
        """
        Deep copy of atoms, bonds and id counters. The copy and the original
        can be mutated independently.
        """
        clone = MoleculeGraph()
        clone.atoms = {uid: atom.copy() for uid, atom in self.atoms.items()}
        clone.bonds = {uid: bond.copy() for uid, bond in self.bonds.items()}
        clone._pair_index = dict(self._pair_index)
        clone._next_atom_id = self._next_atom_id
        clone._next_bond_id = self._next_bond_id
        return clone

    def serialize(self) -> Dict[str, Any]:
        """
        Plain, JSON-compatible record of the graph including its id counters.
        """
        return {
            "atoms": [a.to_dict() for a in self.atoms.values()],
            "bonds": [b.to_dict() for b in self.bonds.values()],
            "next_atom_id": self._next_atom_id,
            "next_bond_id": self._next_bond_id,
        }

    @classmethod
    def deserialize(cls, data: Dict[str, Any]) -> MoleculeGraph:
        """
        Rebuild a graph from a serialized record, keeping the stored ids.

        Id counters come from "next_atom_id"/"next_bond_id" when present and are
        never set below one past the highest atom_<n>/bond_<n> id in the data.

        Raises
        ------
        ValueError
            If the record would violate the graph invariants (duplicate ids,
            self-bonds, dangling endpoints, duplicate atom pairs).
        """
        graph = cls()
        for record in data.get("atoms", []):
            atom = Atom.from_dict(record)
            if atom.uid in graph.atoms:
                raise ValueError(f"Duplicate atom id {atom.uid!r}")
            graph.atoms[atom.uid] = atom

        for record in data.get("bonds", []):
            bond = Bond.from_dict(record)
            if bond.uid in graph.bonds:
                raise ValueError(f"Duplicate bond id {bond.uid!r}")
            if bond.a1 not in graph.atoms or bond.a2 not in graph.atoms:
                raise ValueError(f"Bond {bond.uid!r} references a missing atom")
            if bond.key in graph._pair_index:
                raise ValueError(f"Bond {bond.uid!r} duplicates bond {graph._pair_index[bond.key]!r}")
            graph.bonds[bond.uid] = bond
            graph._pair_index[bond.key] = bond.uid

        graph._next_atom_id = max(int(data.get("next_atom_id", 1)), _infer_next_id(graph.atoms, ATOM_ID_PREFIX))
        graph._next_bond_id = max(int(data.get("next_bond_id", 1)), _infer_next_id(graph.bonds, BOND_ID_PREFIX))
        logger.debug(f"Deserialized {graph!r}")
        return graph

    # -----------------------
    # Derived chemistry
    # -----------------------
    def get_formula(self) -> str:
        """Hill-ordered molecular formula, e.g. "CH4"."""
        return products.formula_to_pretty_string(products.graph_to_formula(self.atoms.values()))

    def get_molecular_weight(self) -> float:
        """Sum of atomic weights over all atoms."""
        return float(sum(atom.weight for atom in self.atoms.values()))

    # -----------------------
    # Utilities & debugging
    # -----------------------
    def check_invariants(self) -> None:
        """
        Assert the structural invariants. A failure here is a logic defect.
        """
        seen_pairs = set()
        for uid, bond in self.bonds.items():
            assert uid == bond.uid, f"bond key {uid} != bond id {bond.uid}"
            assert bond.a1 in self.atoms and bond.a2 in self.atoms, f"dangling bond {bond}"
            assert bond.a1 != bond.a2, f"self-bond {bond}"
            assert bond.key not in seen_pairs, f"duplicate bond for pair {sorted(bond.key)}"
            seen_pairs.add(bond.key)
        assert seen_pairs == set(self._pair_index), "pair index out of sync"
        for uid, atom in self.atoms.items():
            assert uid == atom.uid, f"atom key {uid} != atom id {atom.uid}"

    def __repr__(self) -> str:
        return f"<MoleculeGraph {self.get_formula() or 'empty'} atoms={len(self.atoms)} bonds={len(self.bonds)}>"
