from enum import Enum
import logging
from typing import Dict, Union

from .constants import DEFAULT_BOND_LENGTH

logger = logging.getLogger(__name__)


class Element(str, Enum):
    """
    Supported chemical elements. The value of each member is its symbol.
    """
    H = "H"
    C = "C"
    N = "N"
    O = "O"
    F = "F"
    S = "S"
    P = "P"
    Cl = "Cl"
    Br = "Br"
    I = "I"

    @classmethod
    def from_symbol(cls, symbol: Union["Element", str]) -> "Element":
        """
        Resolve an Element from a member or a symbol string (case-insensitive).

        Raises
        ------
        ValueError
            If the symbol is not one of the supported elements.
        """
        if isinstance(symbol, cls):
            return symbol
        normalized = str(symbol).strip().capitalize()
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unsupported element symbol: {symbol!r}") from None

    def __str__(self) -> str:
        return self.value


# Covalent radius per element (length units)
ELEMENT_RADII: Dict[Element, float] = {
    Element.H: 0.31,
    Element.C: 0.77,
    Element.N: 0.75,
    Element.O: 0.73,
    Element.F: 0.72,
    Element.S: 1.02,
    Element.P: 1.06,
    Element.Cl: 0.99,
    Element.Br: 1.14,
    Element.I: 1.33,
}

# Standard atomic weight per element (g/mol)
ATOMIC_WEIGHTS: Dict[Element, float] = {
    Element.H: 1.008,
    Element.C: 12.011,
    Element.N: 14.007,
    Element.O: 15.999,
    Element.F: 18.998,
    Element.S: 32.065,
    Element.P: 30.974,
    Element.Cl: 35.453,
    Element.Br: 79.904,
    Element.I: 126.904,
}

# Display colours used by rendering front-ends
ELEMENT_COLORS: Dict[Element, str] = {
    Element.H: "#3b82f6",
    Element.C: "#1e293b",
    Element.N: "#8b5cf6",
    Element.O: "#ef4444",
    Element.F: "#10b981",
    Element.S: "#f59e0b",
    Element.P: "#f97316",
    Element.Cl: "#84cc16",
    Element.Br: "#991b1b",
    Element.I: "#7c3aed",
}

# Equilibrium single-bond lengths keyed by unordered element pair
COVALENT_BOND_LENGTHS: Dict[frozenset, float] = {
    frozenset((Element.C, Element.C)): 1.54,
    frozenset((Element.C, Element.H)): 1.09,
    frozenset((Element.C, Element.O)): 1.43,
    frozenset((Element.C, Element.N)): 1.47,
    frozenset((Element.O, Element.H)): 0.96,
    frozenset((Element.N, Element.H)): 1.01,
    frozenset((Element.C, Element.F)): 1.35,
    frozenset((Element.C, Element.Cl)): 1.77,
    frozenset((Element.C, Element.Br)): 1.94,
    frozenset((Element.C, Element.I)): 2.14,
    frozenset((Element.O, Element.O)): 1.48,
    frozenset((Element.N, Element.N)): 1.45,
}


def get_bond_length(e1: Union[Element, str], e2: Union[Element, str]) -> float:
    """
    Return the tabulated covalent bond length for an element pair.

    The lookup is symmetric; untabulated pairs fall back to DEFAULT_BOND_LENGTH.
    """
    key = frozenset((Element.from_symbol(e1), Element.from_symbol(e2)))
    return COVALENT_BOND_LENGTHS.get(key, DEFAULT_BOND_LENGTH)


def get_element_radius(element: Union[Element, str]) -> float:
    """Covalent radius of an element."""
    return ELEMENT_RADII[Element.from_symbol(element)]


def get_atomic_weight(element: Union[Element, str]) -> float:
    """
    Atomic weight of an element; unknown symbols weigh nothing.
    """
    try:
        return ATOMIC_WEIGHTS[Element.from_symbol(element)]
    except ValueError:
        logger.debug(f"No atomic weight for {element!r}; counting as 0")
        return 0.0


def get_element_color(element: Union[Element, str]) -> str:
    """Hex display colour for an element (grey for unknown symbols)."""
    try:
        return ELEMENT_COLORS[Element.from_symbol(element)]
    except ValueError:
        return "#808080"
