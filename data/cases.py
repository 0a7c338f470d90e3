"""
Reference case catalog for laser-induced cavitation runs.

LIANG ET AL. (2022), Journal of Fluid Mechanics 940, A5:
  Femtosecond laser breakdown in water, bubble collapsing near a free
  surface. The equilibrium radii were fitted to the measured radius-time
  curve; tmax1 and tmax2 are the measured times of the first and second
  radius maxima.

Each case entry contains:
  id: unique identifier
  name: display name
  reference: literature reference string
  R0: initial radius (m)
  p0: ambient pressure (Pa)
  t_end: default end time (s)
  model: id of the DynamicsModel the case runs (physics.bubble.MODELS)
  lic: LaserCavitationParameters fields
  liquid, gas, interface: collaborator overrides (empty = defaults)
  solver: SimulationConfig overrides

IMPORTANT: No unicode characters (Windows charmap constraint).
"""

import copy

from physics.bubble import Bubble, create_model
from physics.gas import Gas
from physics.interface import Interface
from physics.lic import LaserCavitationParameters
from physics.liquid import Liquid

# Sections an options dict may override, with the keys each accepts
OVERRIDE_SECTIONS = {
    "bubble": ("R0", "p0", "U0"),
    "liquid": ("rho_ref", "p_ref", "gamma", "B", "b", "mu"),
    "gas": ("gamma",),
    "interface": ("sigma", "kappa_s"),
    "lic": LaserCavitationParameters.FIELDS,
    "solver": ("t_start", "t_end", "num_outputs", "dt_initial", "rtol",
               "atol", "max_step"),
}

LIC_CASES = [
    {
        "id": "liang2022",
        "name": "Femtosecond laser breakdown in water (Liang et al. 2022)",
        "reference": "Liang, X.-X. et al., J. Fluid Mech. 940 (2022), A5",
        "R0": 1.0e-6,
        "p0": 1.0e5,
        "t_end": 1.2e-5,
        "model": "lic",
        "lic": {
            "tauL": 265e-15,
            "Rnbd": 13.718e-6,
            "Rnc1": 3.615e-6,
            "Rnc2": 2.415e-6,
            "tmax1": 3.2440e-6,
            "tmax2": 7.2688e-6,
        },
        "liquid": {},
        "gas": {},
        "interface": {},
        "solver": {
            "dt_initial": 1.0e-15,
        },
    },
]


def get_all_cases():
    """Return a copy of the full case catalog."""
    return copy.deepcopy(LIC_CASES)


def get_case(case_id):
    """Look up a case by its unique id; None if unknown."""
    for case in LIC_CASES:
        if case["id"] == case_id:
            return copy.deepcopy(case)
    return None


def check_overrides(overrides):
    """
    Reject unknown sections and keys in an options dict.

    Raises
    ------
    ValueError
        On the first unknown section or key.
    """
    for section, values in (overrides or {}).items():
        if section not in OVERRIDE_SECTIONS:
            raise ValueError("Unknown options section '{}'".format(section))
        if not isinstance(values, dict):
            raise ValueError("Options section '{}' must be an object".format(section))
        for key in values:
            if key not in OVERRIDE_SECTIONS[section]:
                raise ValueError("Unknown option '{}' in section '{}'".format(key, section))


def merge_case(case, overrides=None):
    """
    Apply an options dict on top of a case entry.

    Returns a new case dict; the catalog entry is not modified.
    """
    check_overrides(overrides)
    merged = copy.deepcopy(case)
    for section, values in (overrides or {}).items():
        if section == "bubble":
            merged.update(values)
        else:
            merged.setdefault(section, {}).update(values)
    if "t_end" in merged.get("solver", {}):
        merged["t_end"] = merged["solver"].pop("t_end")
    return merged


def build_bubble(case, overrides=None, model_id=None):
    """
    Build a laser-induced cavitation Bubble from a case entry.

    Parameters
    ----------
    case : dict
        Catalog entry (see get_case).
    overrides : dict, optional
        Options dict keyed by OVERRIDE_SECTIONS.
    model_id : str, optional
        DynamicsModel id; defaults to the case's "model" entry.

    Returns
    -------
    Bubble
        Bubble carrying the case's model and its parameters.

    Raises
    ------
    ValueError
        If an override is unknown, a value is invalid, or the model id
        is not registered.
    TypeError
        If the model does not take laser-induced cavitation parameters.
    """
    merged = merge_case(case, overrides)
    model = create_model(model_id or merged.get("model", "lic"))
    try:
        params = LaserCavitationParameters.from_dict(merged["lic"])
    except KeyError as exc:
        raise ValueError("Missing case parameter {}".format(exc))

    return Bubble(
        R0=merged["R0"],
        p0=merged["p0"],
        U0=merged.get("U0", 0.0),
        gas=Gas(**merged.get("gas", {})),
        liquid=Liquid(**merged.get("liquid", {})),
        interface=Interface(**merged.get("interface", {})),
        model=model,
        case_parameters=params,
    )
