import sys
import logging
import argparse
from typing import List, Optional

from molengine.constants import DEFAULT_ITERATIONS, LOGGING_LEVEL
from molengine.editor import build_methane
from molengine.exporter import load_molecule, save_molecule
from molengine.layout import optimize_geometry, center_molecule, potential_energy
from molengine.metrics import RelaxationMetrics

logger = logging.getLogger("molengine.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Relax a molecule and report its composition.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", type=str, help="Molecule JSON file to load")
    source.add_argument("--demo", action="store_true", help="Start from a methane molecule")
    parser.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS, help="Relaxation steps")
    parser.add_argument("--no-center", action="store_true", help="Do not move the centroid to the origin")
    parser.add_argument("--output", type=str, default=None, help="Write the relaxed molecule to this JSON file")
    parser.add_argument("--plot", type=str, default=None, help="Filename prefix for a relaxation plot (SVG + PNG)")
    parser.add_argument("--log-level", type=str, default=LOGGING_LEVEL, help="DEBUG, INFO, WARNING or ERROR")
    return parser


def run_cli(argv: Optional[List[str]] = None) -> int:
    """
    Load or build a molecule, relax it and print formula, weight and energy.
    Returns a process exit code.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    if args.demo:
        molecule = build_methane()
    else:
        try:
            molecule = load_molecule(args.input)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load molecule from {args.input}: {e}")
            return 1

    metrics = RelaxationMetrics()
    optimize_geometry(molecule, args.iterations, metrics=metrics)
    if not args.no_center:
        center_molecule(molecule)

    print(f"Formula:          {molecule.get_formula() or '(empty)'}")
    print(f"Molecular weight: {molecule.get_molecular_weight():.3f}")
    print(f"Potential energy: {potential_energy(molecule):.6f}")
    print(f"Fragments:        {len(molecule.get_fragments())}")

    if args.output:
        save_molecule(molecule, args.output)
        print(f"Wrote {args.output}")

    if args.plot and metrics.potential:
        from analysis.plots import plot_relaxation
        for path in plot_relaxation(metrics, filename_prefix=args.plot):
            print(f"Wrote {path}")

    return 0


if __name__ == "__main__":
    sys.exit(run_cli())
