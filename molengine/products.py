from __future__ import annotations
from typing import List, Dict, Iterable
from collections import defaultdict
import logging

from .atoms import Atom
from .bonds import Bond

logger = logging.getLogger(__name__)

# Hill system: carbon, hydrogen, then everything else alphabetically
HILL_PREFIX = ("C", "H")


# -----------------------
# Graph ↔ Formula utilities
# -----------------------

def graph_to_formula(atoms: Iterable[Atom]) -> Dict[str, int]:
    """
    Convert atoms into an element symbol → count dictionary.
    """
    counts: Dict[str, int] = defaultdict(int)
    for atom in atoms:
        counts[atom.element.value] += 1
    return dict(counts)


def hill_order(symbols: Iterable[str]) -> List[str]:
    """
    Order element symbols C, H, then the rest alphabetically.
    C and H lead whenever they are present, even without carbon.
    """
    present = set(symbols)
    lead = [s for s in HILL_PREFIX if s in present]
    return lead + sorted(present.difference(HILL_PREFIX))


def formula_to_pretty_string(counts: Dict[str, int]) -> str:
    """
    Convert a formula dict to a string such as "CH4" or "C2H6O".
    Counts of one are omitted; elements with zero count contribute nothing.
    """
    parts = []
    for sym in hill_order(k for k, v in counts.items() if v > 0):
        c = counts[sym]
        parts.append(f"{sym}{c if c != 1 else ''}")
    return "".join(parts)


# -----------------------
# Connected components
# -----------------------

def extract_connected_components(atom_ids: Iterable[str], bonds: Iterable[Bond]) -> List[List[str]]:
    """
    Identify connected components (fragments) of a graph.
    Returns lists of atom ids, largest fragment first; ties keep the
    order in which their first atom appears.
    """
    atom_ids = list(atom_ids)
    adj: Dict[str, List[str]] = defaultdict(list)
    for bond in bonds:
        adj[bond.a1].append(bond.a2)
        adj[bond.a2].append(bond.a1)

    visited = set()
    components: List[List[str]] = []

    for uid in atom_ids:
        if uid in visited:
            continue
        stack = [uid]
        comp: List[str] = []
        visited.add(uid)
        while stack:
            current = stack.pop()
            comp.append(current)
            for neighbor in adj.get(current, []):
                if neighbor not in visited:
                    visited.add(neighbor)
                    stack.append(neighbor)
        components.append(comp)

    components.sort(key=len, reverse=True)
    logger.debug("Found %d connected components", len(components))
    return components
