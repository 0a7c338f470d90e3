"""
Flask API routes for CAVIS.

Shared endpoints live here; each live CavisService mounts its own
namespaced endpoints onto the same blueprint.

Endpoints:
  GET  /api/services             - metadata of all registered services
  GET  /api/models               - registered dynamics models
  GET  /api/constants            - default fluid properties and solver settings
  /api/<service_id>/...          - service-owned routes (see physics/services)
"""

from flask import Blueprint, jsonify

from physics import constants
from physics.bubble import MODELS


def create_api_blueprint(registry):
    """
    Build the API blueprint for a populated service registry.

    Parameters
    ----------
    registry : CavisRegistry
        Registry whose live services mount their routes.

    Returns
    -------
    flask.Blueprint
    """
    api = Blueprint("api", __name__, url_prefix="/api")

    @api.route("/services", methods=["GET"])
    def list_services():
        """Return metadata for every registered service."""
        return jsonify({"services": registry.list_all()})

    @api.route("/models", methods=["GET"])
    def list_models():
        """Return the dynamics models a bubble can be configured with."""
        return jsonify({"models": [cls().metadata() for cls in MODELS.values()]})

    @api.route("/constants", methods=["GET"])
    def get_constants():
        """Return the default water/air properties and solver settings."""
        return jsonify({
            "liquid": {
                "rho_ref": constants.RHO_REF,
                "p_ref": constants.P_REF,
                "gamma": constants.GAMMA_LIQUID,
                "B": constants.B_LIQUID,
                "b": constants.COVOLUME_LIQUID,
                "mu": constants.MU_LIQUID,
                "c_ref": constants.reference_sound_speed(),
            },
            "interface": {
                "sigma": constants.SIGMA,
                "kappa_s": constants.KAPPA_S,
            },
            "gas": {
                "gamma": constants.GAMMA_GAS,
            },
            "hugoniot": {
                "c1": constants.HUGONIOT_C1,
                "c2": constants.HUGONIOT_C2,
            },
            "solver": {
                "dt_initial": constants.DT_INITIAL,
                "rtol": constants.RTOL,
                "atol": constants.ATOL,
            },
        })

    for service in registry.live():
        service.register_routes(api)

    return api
