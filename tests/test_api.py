"""
Tests for Flask API endpoints.

Integration tests that validate the REST API returns correct
status codes, JSON structure, and physically reasonable values, and
that no request produces NaN or Infinity in the response.
"""

import json
import math

import pytest

from app import create_registry
from physics.engine import SolverError
from physics.services import CavisRegistry, CavisService
from physics.services.lic import LaserCavitationService

SHORT_RUN = {"t_end": 5.0e-10, "num_outputs": 10}


def _post(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


class TestRegistry:

    def test_lic_registered_and_live(self):
        registry = create_registry()
        service = registry.get("lic")
        assert isinstance(service, LaserCavitationService)
        assert service in registry.live()

    def test_duplicate_registration(self):
        registry = CavisRegistry()
        registry.register(LaserCavitationService())
        with pytest.raises(ValueError):
            registry.register(LaserCavitationService())

    def test_service_injects_its_model(self):
        service = LaserCavitationService()
        config = service.validate({"t_end": 1.0e-9})
        assert config["bubble"].model.id == service.model_id

    def test_service_model_must_match_case(self):
        class PolytropicService(LaserCavitationService):
            model_id = "gilmore"

        with pytest.raises(ValueError):
            PolytropicService().validate({"t_end": 1.0e-9})

    def test_unknown_service(self):
        assert create_registry().get("ultrasound") is None

    def test_coming_soon_service_has_no_routes(self):
        class Stub(CavisService):
            id = "stub"

            def validate(self, config):
                raise NotImplementedError

            def compute(self, config):
                raise NotImplementedError

        registry = CavisRegistry()
        registry.register(Stub())
        assert registry.live() == []
        assert registry.list_all()[0]["status"] == "coming_soon"


class TestSharedEndpoints:

    def test_root(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.get_json()["name"] == "CAVIS"

    def test_services(self, client):
        resp = client.get("/api/services")
        assert resp.status_code == 200
        services = resp.get_json()["services"]
        lic = [s for s in services if s["id"] == "lic"]
        assert len(lic) == 1
        assert lic[0]["status"] == "live"
        assert lic[0]["model"] == "lic"

    def test_models(self, client):
        resp = client.get("/api/models")
        assert resp.status_code == 200
        ids = {m["id"] for m in resp.get_json()["models"]}
        assert ids == {"gilmore", "lic"}

    def test_constants(self, client):
        resp = client.get("/api/constants")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["liquid"]["rho_ref"] == 997.0
        assert data["hugoniot"] == {"c1": 5190.0, "c2": 25306.0}
        assert 1450.0 < data["liquid"]["c_ref"] < 1500.0


class TestCasesEndpoint:

    def test_list_cases(self, client):
        resp = client.get("/api/lic/cases")
        assert resp.status_code == 200
        cases = resp.get_json()["cases"]
        assert any(c["id"] == "liang2022" for c in cases)


class TestEquilibriumRadiusEndpoint:

    def test_curve(self, client):
        resp = _post(client, "/api/lic/equilibrium-radius",
                     {"t_end": 1.0e-5, "num_points": 101})
        assert resp.status_code == 200
        data = resp.get_json()
        assert len(data["t"]) == 101
        assert data["Rn"][0] == 1.0e-6
        assert data["Rn"][-1] == 2.415e-6
        assert data["rhc"][-1] == pytest.approx(2.415e-6 / 9.0)
        assert data["phase"][0] == "breakdown_growth"
        assert "first_collapse" in data["phase"]
        assert data["phase"][-1] == "later_collapses"

    def test_defaults_to_case_window(self, client):
        resp = _post(client, "/api/lic/equilibrium-radius", {})
        assert resp.status_code == 200
        data = resp.get_json()
        assert len(data["t"]) == 200
        assert data["t"][-1] == pytest.approx(1.2e-5)

    def test_negative_start_time_rejected(self, client):
        payload = {"overrides": {"solver": {"t_start": -1.0e-12}},
                   "t_end": 1.0e-12, "num_points": 3}
        resp = _post(client, "/api/lic/equilibrium-radius", payload)
        assert resp.status_code == 400
        assert "t_start" in resp.get_json()["error"]

    def test_bad_num_points(self, client):
        resp = _post(client, "/api/lic/equilibrium-radius", {"num_points": "many"})
        assert resp.status_code == 400


class TestSimulateEndpoint:

    def test_short_run(self, client):
        resp = _post(client, "/api/lic/simulate", SHORT_RUN)
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["case_id"] == "liang2022"
        assert data["case_parameters"]["tauL"] == 265e-15
        n = len(data["t"])
        assert n == 10
        for key in ("R", "U", "Rn", "p_gas", "p_wall", "sound_speed", "particle_source"):
            assert len(data[key]) == n
            assert all(v is not None and math.isfinite(v) for v in data[key])
        assert data["R"][-1] > data["R"][0]
        assert isinstance(data["radius_maxima"], list)

    def test_verbose(self, client):
        payload = dict(SHORT_RUN, verbose=True)
        resp = _post(client, "/api/lic/simulate", payload)
        assert resp.status_code == 200
        data = resp.get_json()
        assert "stages" in data
        assert "equilibrium_radius" in data["stages"]
        assert data["config"]["num_outputs"] == 10

    def test_override_r0(self, client):
        payload = dict(SHORT_RUN, R0=1.2e-6)
        resp = _post(client, "/api/lic/simulate", payload)
        assert resp.status_code == 200
        assert resp.get_json()["R"][0] == pytest.approx(1.2e-6)

    @pytest.mark.parametrize("payload", [
        {"case_id": "nonexistent"},
        {"R0": "big"},
        {"R0": -1.0e-6},
        {"t_end": -1.0},
        {"overrides": {"ultrasound": {"f": 1.0e6}}},
        {"overrides": {"lic": {"tmax1": 8.0e-6}}},
        {"overrides": {"lic": {"tauL": 0.0}}},
        {"overrides": {"solver": {"num_outputs": "ten"}}},
        {"overrides": {"solver": {"t_start": -1.0e-12}}, "t_end": 1.0e-12},
        {"overrides": [1, 2]},
    ])
    def test_invalid_requests(self, client, payload):
        resp = _post(client, "/api/lic/simulate", payload)
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    def test_non_json_body(self, client):
        resp = client.post("/api/lic/simulate", data="not json",
                           content_type="text/plain")
        assert resp.status_code == 400

    def test_solver_failure_is_422(self, client, monkeypatch):
        def fail(self):
            raise SolverError("Integration failed: step size underflow")

        monkeypatch.setattr("physics.services.lic.BubbleEngine.run", fail)
        resp = _post(client, "/api/lic/simulate", SHORT_RUN)
        assert resp.status_code == 422
        assert "step size" in resp.get_json()["error"]
