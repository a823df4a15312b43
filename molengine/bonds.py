from __future__ import annotations
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)

MIN_BOND_ORDER = 1
MAX_BOND_ORDER = 3


class Bond:
    """
    Represents an undirected bond between two atoms of the same graph.

    Endpoints are atom ids, not Atom objects, so that copying a graph never
    has to rewire references.
    """
    def __init__(self, uid: str, a1: str, a2: str, order: int = 1):
        """
        Initialize a bond.

        Args:
            uid (str): Unique identifier assigned by the owning graph.
            a1 (str): Id of the first atom.
            a2 (str): Id of the second atom.
            order (int): Bond order (1=single, 2=double, 3=triple)
        """
        if a1 == a2:
            raise ValueError("Cannot bond an atom to itself")

        self.uid: str = uid
        self.a1: str = a1
        self.a2: str = a2
        self.order: int = max(MIN_BOND_ORDER, min(int(order), MAX_BOND_ORDER))
        if self.order != order:
            logger.debug(f"Bond {uid}: order {order} clamped to {self.order}")

    @property
    def key(self) -> frozenset:
        """Unordered endpoint pair; (a, b) and (b, a) share the same key."""
        return frozenset((self.a1, self.a2))

    def involves(self, atom_id: str) -> bool:
        return atom_id == self.a1 or atom_id == self.a2

    def other(self, atom_id: str) -> str:
        """
        Return the endpoint opposite atom_id.
        """
        if atom_id == self.a1:
            return self.a2
        if atom_id == self.a2:
            return self.a1
        raise ValueError(f"Atom {atom_id} is not an endpoint of bond {self.uid}")

    def copy(self) -> Bond:
        return Bond(self.uid, self.a1, self.a2, self.order)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.uid, "a1": self.a1, "a2": self.a2, "order": self.order}

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> Bond:
        try:
            return cls(record["id"], record["a1"], record["a2"], record.get("order", 1))
        except KeyError as e:
            raise ValueError(f"Bond record missing field {e}") from None

    def __repr__(self):
        return f"<Bond {self.uid} {self.a1}-{self.a2} order={self.order}>"
