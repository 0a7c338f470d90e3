"""
Plot radius and gas pressure of a laser-induced cavitation bubble.

Reads a results file written by scripts/run_lic.py and plots R(t) with
the equilibrium radius Rn(t), and p_gas(t) on a log axis. The times of
the first and second radius maxima used by the run are marked; pass the
same --case and --options as for run_lic.py so overridden values match.

Usage:
    python scripts/run_lic.py --options lic.json --output lic_results.txt
    python scripts/plot_lic_radius.py lic_results.txt --options lic.json --save lic_radius.png

No unicode (Windows charmap).
"""

import argparse
import json
import os
import sys

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
REPO_ROOT = os.path.dirname(SCRIPT_DIR)
sys.path.insert(0, REPO_ROOT)

import numpy as np
import matplotlib.pyplot as plt

from data.cases import get_case, merge_case


def phase_markers(case_id, options_path=None):
    """
    Return (tmax1, tmax2) of a case with an options file applied.

    None when the case is unknown.
    """
    case = get_case(case_id)
    if case is None:
        return None
    options = {}
    if options_path:
        with open(options_path, "r") as fh:
            options = json.load(fh)
    lic = merge_case(case, options)["lic"]
    return lic["tmax1"], lic["tmax2"]


def main():
    ap = argparse.ArgumentParser(description="Plot a run_lic.py results file.")
    ap.add_argument("results", help="Results file from scripts/run_lic.py")
    ap.add_argument("--case", default="liang2022",
                    help="Case whose tmax1/tmax2 are marked")
    ap.add_argument("--options", default=None,
                    help="JSON options file the run used")
    ap.add_argument("--save", default=None, help="Write the figure to this file")
    args = ap.parse_args()

    try:
        markers = phase_markers(args.case, args.options)
    except (OSError, ValueError) as exc:
        print("Invalid options: {}".format(exc))
        return 1

    data = np.genfromtxt(args.results, names=True)
    t_us = data["t"] * 1e6

    fig, (ax_r, ax_p) = plt.subplots(2, 1, figsize=(7, 6), sharex=True)

    ax_r.plot(t_us, data["R"] * 1e6, '-', color='C0', lw=1.6, label='R')
    ax_r.plot(t_us, data["Rn"] * 1e6, '--', color='0.5', lw=1.0, label='Rn')
    ax_r.set_ylabel('Radius (um)')
    ax_r.legend(loc='upper right')

    ax_p.semilogy(t_us, data["pG"], '-', color='C3', lw=1.4)
    ax_p.set_ylabel('Gas pressure (Pa)')
    ax_p.set_xlabel('Time (us)')

    if markers:
        for t_mark in markers:
            for ax in (ax_r, ax_p):
                ax.axvline(t_mark * 1e6, color='k', lw=0.6, ls=':')

    fig.tight_layout()
    if args.save:
        fig.savefig(args.save, dpi=150)
        print("Saved {}".format(args.save))
    else:
        plt.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())
