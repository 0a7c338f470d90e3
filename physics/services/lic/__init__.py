"""
Laser-Induced Cavitation Service: modified Gilmore runs of a laser bubble.

Builds a Bubble from a reference case (data.cases) with optional
overrides, injects the LaserCavitationModel, and integrates it with
BubbleEngine.

Endpoints:
  GET  /api/lic/cases                -> { cases: [...] }
  POST /api/lic/simulate             -> flat series + radius maxima
                                        ("verbose": true adds traces)
  POST /api/lic/equilibrium-radius   -> sampled Rn(t), rhc(t), phase(t)

Errors:
  400 for invalid requests (ValueError from validate()).
  422 when the run stops on an invalid bubble state or the integrator
  fails (BubbleStateError, SolverError from compute()).

No unicode (Windows charmap).
"""

import logging
import math

import numpy as np
from flask import jsonify, request

from data.cases import build_bubble, get_all_cases, get_case, merge_case
from physics.dynamics import BubbleStateError
from physics.engine import BubbleEngine, SimulationConfig, SolverError
from physics.equations import equilibrium_phase
from physics.lic import equilibrium_radius, hardcore_radius
from physics.services import CavisService

log = logging.getLogger(__name__)

DEFAULT_CASE = "liang2022"
DEFAULT_NUM_OUTPUTS = 500
DEFAULT_CURVE_POINTS = 200

# Top-level request keys and the options section each one overrides
SHORTCUT_KEYS = {
    "R0": "bubble",
    "p0": "bubble",
    "t_end": "solver",
    "num_outputs": "solver",
    "rtol": "solver",
    "atol": "solver",
    "max_step": "solver",
}


def _as_float(value, key):
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ValueError("'{}' must be a number".format(key))
    if not math.isfinite(result):
        raise ValueError("'{}' must be finite".format(key))
    return result


class LaserCavitationService(CavisService):
    """Laser-induced cavitation bubble (Liang et al. 2022 model)."""

    id = "lic"
    name = "Laser-Induced Cavitation"
    description = "Modified Gilmore model with laser breakdown source and hard-core gas"
    category = "laser"
    status = "live"
    model_id = "lic"

    def _collect_overrides(self, config):
        overrides = config.get("overrides") or {}
        if not isinstance(overrides, dict):
            raise ValueError("'overrides' must be an object")
        overrides = {section: dict(values) if isinstance(values, dict) else values
                     for section, values in overrides.items()}
        for key, section in SHORTCUT_KEYS.items():
            if config.get(key) is not None:
                overrides.setdefault(section, {})[key] = _as_float(config[key], key)
        return overrides

    def validate(self, config):
        """
        Normalize a simulate or equilibrium-radius request.

        Returns
        -------
        dict
            case_id, merged case, bubble, sim_config, verbose.

        Raises
        ------
        ValueError
            Unknown case, unknown override, or invalid value.
        """
        if not isinstance(config, dict):
            raise ValueError("Request body must be a JSON object")
        case_id = str(config.get("case_id", DEFAULT_CASE)).strip().lower()
        case = get_case(case_id)
        if case is None:
            raise ValueError("Unknown case '{}'".format(case_id))

        overrides = self._collect_overrides(config)
        try:
            merged = merge_case(case, overrides)
            bubble = build_bubble(case, overrides, model_id=self.model_id)
            solver = dict(merged.get("solver", {}))
            solver.setdefault("num_outputs", DEFAULT_NUM_OUTPUTS)
            sim_config = SimulationConfig(t_end=merged["t_end"], **solver)
        except TypeError as exc:
            raise ValueError(str(exc))

        return {
            "case_id": case_id,
            "case": merged,
            "bubble": bubble,
            "sim_config": sim_config,
            "verbose": bool(config.get("verbose", False)),
        }

    def compute(self, config):
        """Integrate the bubble and serialize the result."""
        bubble = config["bubble"]
        result = BubbleEngine(bubble, config["sim_config"]).run()

        if config["verbose"]:
            response = result.to_verbose_response()
        else:
            response = result.to_api_response()
        response["case_id"] = config["case_id"]
        response["case_parameters"] = bubble.case_parameters.to_dict()
        response["radius_maxima"] = result.radius_maxima()
        return response

    def equilibrium_curve(self, config, num_points=DEFAULT_CURVE_POINTS):
        """
        Sample the equilibrium and hard-core radius over the run window.

        No integration is performed.
        """
        bubble = config["bubble"]
        sim_config = config["sim_config"]
        params = bubble.case_parameters
        times = np.linspace(sim_config.t_start, sim_config.t_end, num_points)
        return {
            "case_id": config["case_id"],
            "t": [float(t) for t in times],
            "Rn": [equilibrium_radius(t, params, bubble.R0) for t in times],
            "rhc": [hardcore_radius(t, params, bubble.R0) for t in times],
            "phase": [equilibrium_phase(t, params) for t in times],
        }

    def register_routes(self, bp):
        service = self

        @bp.route("/lic/cases", methods=["GET"])
        def lic_cases():
            return jsonify({"cases": get_all_cases()})

        @bp.route("/lic/simulate", methods=["POST"])
        def lic_simulate():
            data = request.get_json(silent=True)
            try:
                config = service.validate(data)
            except ValueError as e:
                return jsonify({"error": str(e)}), 400
            try:
                out = service.compute(config)
            except (BubbleStateError, SolverError) as e:
                log.warning("LIC simulation of case '%s' failed: %s", config["case_id"], e)
                return jsonify({"error": str(e)}), 422
            return jsonify(out)

        @bp.route("/lic/equilibrium-radius", methods=["POST"])
        def lic_equilibrium_radius():
            data = request.get_json(silent=True)
            try:
                config = service.validate(data)
                num_points = int(data.get("num_points", DEFAULT_CURVE_POINTS))
            except (TypeError, ValueError) as e:
                return jsonify({"error": str(e)}), 400
            num_points = max(2, min(num_points, 5000))
            return jsonify(service.equilibrium_curve(config, num_points))
