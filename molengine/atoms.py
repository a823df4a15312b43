from __future__ import annotations
from typing import Optional, Sequence, Union, Dict, Any
import numpy as np
import logging

from .elements_data import Element, get_element_radius, get_atomic_weight

logger = logging.getLogger(__name__)


class Atom:
    """
    Represents a single atom of a molecule graph.

    Atoms compare by identity: two atoms with the same element and position are
    still different atoms.
    """

    def __init__(
        self,
        uid: str,
        element: Union[Element, str],
        position: Optional[Sequence[float]] = None,
        charge: Optional[float] = None
    ):
        """
        Initialize an Atom.

        Args:
            uid (str): Unique identifier assigned by the owning graph.
            element (Element | str): Element member or symbol, e.g. "C".
            position (sequence of 3 floats, optional): Cartesian position. Defaults to origin.
            charge (float, optional): Formal or partial charge, if known.
        """
        self.uid: str = uid
        self.element: Element = Element.from_symbol(element)
        self.position: np.ndarray = np.array(position if position is not None else np.zeros(3), dtype=float)
        if self.position.shape != (3,):
            raise ValueError(f"Atom position must have 3 components, got shape {self.position.shape}")
        self.charge: Optional[float] = float(charge) if charge is not None else None

    @property
    def radius(self) -> float:
        return get_element_radius(self.element)

    @property
    def weight(self) -> float:
        return get_atomic_weight(self.element)

    def copy(self) -> Atom:
        """
        Return an independent copy sharing no mutable state with this atom.
        """
        return Atom(self.uid, self.element, self.position.copy(), self.charge)

    def to_dict(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "id": self.uid,
            "element": self.element.value,
            "position": [float(c) for c in self.position],
        }
        if self.charge is not None:
            record["charge"] = self.charge
        return record

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> Atom:
        try:
            return cls(record["id"], record["element"], record.get("position"), record.get("charge"))
        except KeyError as e:
            raise ValueError(f"Atom record missing field {e}") from None

    def __repr__(self) -> str:
        return f"<Atom {self.uid} element={self.element.value} pos={self.position} charge={self.charge}>"
