"""
JSON conversion for molecule graphs.

Files hold the record produced by MoleculeGraph.serialize():
    {"atoms": [{"id", "element", "position": [x, y, z], "charge"?}],
     "bonds": [{"id", "a1", "a2", "order"}],
     "next_atom_id": int, "next_bond_id": int}
"""
from __future__ import annotations
from pathlib import Path
from typing import Union
import json
import logging
import os

from .molecule_graph import MoleculeGraph

logger = logging.getLogger(__name__)


def ensure_parent_dir(path: Union[str, Path]) -> None:
    parent = os.path.dirname(os.path.abspath(str(path)))
    if parent and not os.path.exists(parent):
        os.makedirs(parent, exist_ok=True)


def molecule_to_json(graph: MoleculeGraph, indent: int = 2) -> str:
    return json.dumps(graph.serialize(), indent=indent, ensure_ascii=False)


def molecule_from_json(text: str) -> MoleculeGraph:
    """
    Parse a JSON document into a graph.

    Raises json.JSONDecodeError for malformed JSON and ValueError for records
    that do not describe a valid graph.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Molecule JSON must be an object with 'atoms' and 'bonds'")
    return MoleculeGraph.deserialize(data)


def save_molecule(graph: MoleculeGraph, path: Union[str, Path]) -> str:
    """Write graph as UTF-8 JSON to path. Returns the path written."""
    target = str(path)
    ensure_parent_dir(target)
    with open(target, "w", encoding="utf-8") as fh:
        fh.write(molecule_to_json(graph))
    logger.info(f"Saved {graph!r} to {target}")
    return target


def load_molecule(path: Union[str, Path]) -> MoleculeGraph:
    with open(str(path), "r", encoding="utf-8") as fh:
        graph = molecule_from_json(fh.read())
    logger.info(f"Loaded {graph!r} from {path}")
    return graph
