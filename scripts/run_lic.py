"""
Run a laser-induced cavitation simulation from the command line.

Builds the Bubble for a reference case (data/cases.py), applies an
optional JSON options file, integrates it, and writes a whitespace-
delimited results file with the columns

    t R U pG pL pInf cL Rn

Usage:
    python scripts/run_lic.py --tend 12e-6
    python scripts/run_lic.py --options lic_options.json --output lic.txt

Options file (every section and key optional):
    {
        "bubble":    {"R0": 1.0e-6, "p0": 1.0e5, "U0": 0.0},
        "liquid":    {"rho_ref": 997.0, "p_ref": 1.0e5, "gamma": 7.15,
                      "B": 3.046e8, "b": 0.0, "mu": 1.002e-3},
        "gas":       {"gamma": 1.4},
        "interface": {"sigma": 0.0728, "kappa_s": 0.0},
        "lic":       {"tauL": 265e-15, "Rnbd": 13.718e-6, ...},
        "solver":    {"t_end": 12e-6, "num_outputs": 2000, "rtol": 1e-8}
    }

IMPORTANT: No unicode in code or messages (Windows charmap).
"""

import argparse
import json
import logging
import os
import sys

_REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

import numpy as np

from data.cases import build_bubble, get_case, merge_case
from physics.dynamics import BubbleStateError
from physics.engine import BubbleEngine, SimulationConfig, SolverError

RESULT_COLUMNS = ("t", "R", "U", "pG", "pL", "pInf", "cL", "Rn")


def load_options(path):
    """Read a JSON options file; an empty dict when no path is given."""
    if not path:
        return {}
    with open(path, "r") as fh:
        options = json.load(fh)
    if not isinstance(options, dict):
        raise ValueError("Options file must contain a JSON object")
    return options


def result_table(result):
    """
    Assemble the results-file columns from a BubbleResult.

    Returns
    -------
    numpy.ndarray
        Array of shape (num_outputs, len(RESULT_COLUMNS)).
    """
    stages = result.trace()
    wall = stages["wall_pressure"]
    columns = [
        result.t,
        result.R,
        result.U,
        stages["gas_pressure"].series,
        wall.series,
        wall.intermediates["p_inf"],
        stages["sound_speed"].series,
        stages["equilibrium_radius"].series,
    ]
    return np.column_stack([np.asarray(c, dtype=float) for c in columns])


def write_results(path, table):
    np.savetxt(path, table, fmt="%.10e", header=" ".join(RESULT_COLUMNS),
               comments="")


def main():
    ap = argparse.ArgumentParser(
        description="Laser-induced cavitation bubble (modified Gilmore model)."
    )
    ap.add_argument("--case", default="liang2022",
                    help="Reference case id from data/cases.py")
    ap.add_argument("--options", default=None,
                    help="JSON options file overriding the case")
    ap.add_argument("--tend", type=float, default=None,
                    help="End time in seconds (overrides case and options)")
    ap.add_argument("--output", default="lic_results.txt",
                    help="Results file (default: lic_results.txt)")
    ap.add_argument("--verbose", action="store_true",
                    help="Log solver progress")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    case = get_case(args.case)
    if case is None:
        print("Unknown case '{}'".format(args.case))
        return 1

    try:
        options = load_options(args.options)
        if args.tend is not None:
            options.setdefault("solver", {})["t_end"] = args.tend
        merged = merge_case(case, options)
        bubble = build_bubble(case, options)
        sim_config = SimulationConfig(t_end=merged["t_end"], **merged.get("solver", {}))
    except (OSError, ValueError, TypeError) as exc:
        print("Invalid configuration: {}".format(exc))
        return 1

    try:
        result = BubbleEngine(bubble, sim_config).run()
    except (BubbleStateError, SolverError) as exc:
        print("Simulation stopped: {}".format(exc))
        return 2

    write_results(args.output, result_table(result))

    print("Solver concluded {} time-steps and {} evaluations in {:.3f} s.".format(
        result.nsteps, result.nfev, result.wall_time))
    for i, peak in enumerate(result.radius_maxima()[:2]):
        print("  Radius maximum {}: t = {:.4e} s, R = {:.4e} m".format(
            i + 1, peak["t"], peak["R"]))
    print("Wrote {} ({} samples)".format(args.output, len(result.t)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
