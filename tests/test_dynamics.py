"""
Tests for the fluid collaborators and the Gilmore equation.

Verifies:
  1. NASG liquid closures: reference state, isentropic enthalpy,
     sound speed, validation.
  2. Interface stresses and their derivatives.
  3. Bubble-wall pressure and its explicit time derivative.
  4. Gilmore acceleration: equilibrium, an independent evaluation of
     the six-step algorithm, the coefficient guard.
  5. Default polytropic model and the model table.
"""

import math

import pytest

from physics.bubble import MODELS, Bubble, create_model
from physics.dynamics import (
    BubbleStateError,
    DynamicsModel,
    GilmoreModel,
    gilmore_acceleration,
)
from physics.gas import Gas
from physics.interface import Interface
from physics.lic import LaserCavitationModel
from physics.liquid import Liquid


# -----------------------------------------------------------------------
# Liquid
# -----------------------------------------------------------------------
class TestLiquid:

    def test_reference_density(self):
        liquid = Liquid()
        assert liquid.density(liquid.p_ref) == pytest.approx(997.0, rel=1e-12)

    def test_reference_sound_speed(self):
        liquid = Liquid()
        expected = math.sqrt(7.15 * (1.0e5 + 3.046e8) / 997.0)
        assert liquid.c_ref == pytest.approx(expected, rel=1e-12)
        assert 1450.0 < liquid.c_ref < 1500.0
        assert liquid.sound_speed(1.0e5, 997.0) == pytest.approx(liquid.c_ref, rel=1e-12)

    def test_density_increases_with_pressure(self):
        liquid = Liquid()
        assert liquid.density(1.0e8) > liquid.density(1.0e5) > liquid.density(-1.0e5)

    @pytest.mark.parametrize("b", [0.0, 1.0e-4])
    def test_enthalpy_is_isentropic(self, b):
        """dh/dp = 1/rho along the isentrope."""
        liquid = Liquid(b=b)
        p = 5.0e6
        dp = 1.0e2
        h_plus = liquid.enthalpy(p + dp, liquid.density(p + dp))
        h_minus = liquid.enthalpy(p - dp, liquid.density(p - dp))
        assert (h_plus - h_minus) / (2.0 * dp) == pytest.approx(
            1.0 / liquid.density(p), rel=1e-6)

    def test_covolume_reduces_to_stiffened_gas(self):
        liquid = Liquid(b=0.0)
        rho = liquid.density(2.0e6)
        expected = 7.15 / 6.15 * (2.0e6 + 3.046e8) / rho
        assert liquid.enthalpy(2.0e6, rho) == pytest.approx(expected, rel=1e-12)

    def test_invalid_parameters(self):
        with pytest.raises(ValueError):
            Liquid(rho_ref=0.0)
        with pytest.raises(ValueError):
            Liquid(gamma=1.0)
        with pytest.raises(ValueError):
            Liquid(mu=-1.0e-3)
        with pytest.raises(ValueError):
            Liquid(b=2.0 / 997.0)

    def test_viscous_terms(self):
        liquid = Liquid(mu=1.0e-3)
        assert liquid.pressure_viscous(2.0e-6, 10.0) == pytest.approx(4.0e-3 * 10.0 / 2.0e-6)
        assert liquid.pressure_derivative_viscous_impl(2.0e-6) == pytest.approx(4.0e-3 / 2.0e-6)


# -----------------------------------------------------------------------
# Interface and gas
# -----------------------------------------------------------------------
class TestInterface:

    def test_defaults(self):
        interface = Interface()
        assert interface.surface_tension(1.0e-6) == 0.0728
        assert interface.pressure_viscous(1.0e-6, 10.0) == 0.0

    def test_surface_viscosity_terms(self):
        interface = Interface(kappa_s=1.0e-9)
        R, U = 2.0e-6, 5.0
        assert interface.pressure_viscous(R, U) == pytest.approx(4.0e-9 * U / R ** 2)
        assert interface.pressure_derivative_viscous_expl(R, U) == pytest.approx(
            -8.0e-9 * U * U / R ** 3)
        assert interface.pressure_derivative_viscous_impl(R) == pytest.approx(4.0e-9 / R ** 2)

    def test_invalid(self):
        with pytest.raises(ValueError):
            Interface(sigma=-0.01)
        with pytest.raises(ValueError):
            Interface(kappa_s=-1.0)
        with pytest.raises(ValueError):
            Gas(gamma=0.9)


# -----------------------------------------------------------------------
# Bubble-wall pressure
# -----------------------------------------------------------------------
class TestBubbleWallPressure:

    def test_equilibrium_wall_pressure(self):
        bubble = Bubble()
        pL = bubble.liquid.pressure_bubblewall([0.0, bubble.R0], 0.0, bubble)
        assert pL == pytest.approx(bubble.p0, rel=1e-12)

    def test_stress_balance(self):
        bubble = Bubble(interface=Interface(kappa_s=1.0e-9))
        U, R = 20.0, 1.5e-6
        sol = [U, R]
        expected = (bubble.model.gas_pressure(sol, 0.0, bubble)
                    - 2.0 * 0.0728 / R
                    - 4.0 * bubble.liquid.mu * U / R
                    - 4.0e-9 * U / R ** 2)
        pL = bubble.liquid.pressure_bubblewall(sol, 0.0, bubble)
        assert pL == pytest.approx(expected, rel=1e-12)

    def test_explicit_derivative_matches_numerical(self):
        """
        dpL/dt at constant U equals the explicit derivative: the implicit
        part multiplies dU/dt.
        """
        bubble = Bubble(interface=Interface(kappa_s=1.0e-9))
        U, R = -30.0, 1.2e-6
        h = 1.0e-12
        p_plus = bubble.liquid.pressure_bubblewall([U, R + U * h], 0.0, bubble)
        p_minus = bubble.liquid.pressure_bubblewall([U, R - U * h], 0.0, bubble)
        numerical = (p_plus - p_minus) / (2.0 * h)
        explicit = bubble.liquid.pressure_derivative_bubblewall_expl([U, R], 0.0, bubble)
        assert explicit == pytest.approx(numerical, rel=1e-6)


# -----------------------------------------------------------------------
# Gilmore acceleration
# -----------------------------------------------------------------------
def _independent_gilmore(sol, t, bubble):
    """Straight transcription of the six-step Gilmore algorithm."""
    U, R = sol
    liquid = bubble.liquid
    pL = liquid.pressure_bubblewall(sol, t, bubble)
    p_inf = bubble.pressure_infinity(t)
    rho_L = liquid.density(pL)
    rho_inf = liquid.density(p_inf)
    H = liquid.enthalpy(pL, rho_L) - liquid.enthalpy(p_inf, rho_inf)
    dH = (liquid.pressure_derivative_bubblewall_expl(sol, t, bubble) / rho_L
          - bubble.pressure_derivative_infinity(t) / rho_inf)
    cL = liquid.sound_speed(pL, rho_L)
    visc = (liquid.pressure_derivative_viscous_impl(R)
            + bubble.interface.pressure_derivative_viscous_impl(R))
    coeff_b = 1.0 + (visc / cL) / rho_L
    numerator = (1.0 + U / cL) * H - 1.5 * (1.0 - U / (3.0 * cL)) * U * U
    return (numerator / ((1.0 - U / cL) * R) + dH / cL) / coeff_b


class TestGilmoreAcceleration:

    def test_zero_at_equilibrium(self):
        bubble = Bubble()
        assert gilmore_acceleration([0.0, bubble.R0], 0.0, bubble) == pytest.approx(0.0, abs=1e-3)

    @pytest.mark.parametrize("sol", [[0.0, 0.8e-6], [25.0, 1.3e-6], [-150.0, 0.6e-6]])
    def test_matches_independent_evaluation(self, sol):
        bubble = Bubble(interface=Interface(kappa_s=1.0e-10))
        expected = _independent_gilmore(sol, 0.0, bubble)
        assert gilmore_acceleration(sol, 0.0, bubble) == pytest.approx(expected, rel=1e-10)

    def test_compressed_bubble_expands(self):
        bubble = Bubble()
        assert gilmore_acceleration([0.0, 0.8 * bubble.R0], 0.0, bubble) > 0.0

    def test_stretched_bubble_contracts(self):
        bubble = Bubble()
        assert gilmore_acceleration([0.0, 1.5 * bubble.R0], 0.0, bubble) < 0.0

    def test_non_positive_coefficient_raises(self):
        class StiffInterface(Interface):
            def pressure_derivative_viscous_impl(self, R):
                return -1.0e12

        bubble = Bubble(interface=StiffInterface())
        with pytest.raises(BubbleStateError) as info:
            gilmore_acceleration([0.0, bubble.R0], 2.0e-9, bubble)
        assert info.value.t == 2.0e-9
        assert info.value.value <= 0.0


# -----------------------------------------------------------------------
# Models
# -----------------------------------------------------------------------
class TestModels:

    def test_gilmore_polytropic_law(self):
        bubble = Bubble(R0=2.0e-6)
        model = bubble.model
        p_g0 = 1.0e5 + 2.0 * 0.0728 / 2.0e-6
        assert model.gas_pressure([0.0, 1.0e-6], 0.0, bubble) == pytest.approx(
            p_g0 * 2.0 ** 4.2, rel=1e-12)

    def test_gilmore_derivative_matches_numerical(self):
        bubble = Bubble()
        model = bubble.model
        U, R, h = 40.0, 0.9e-6, 1.0e-12
        numerical = (model.gas_pressure([U, R + U * h], 0.0, bubble)
                     - model.gas_pressure([U, R - U * h], 0.0, bubble)) / (2.0 * h)
        assert model.gas_pressure_derivative([U, R], 0.0, bubble) == pytest.approx(
            numerical, rel=1e-6)

    def test_gilmore_rejects_non_positive_radius(self):
        bubble = Bubble()
        with pytest.raises(BubbleStateError):
            bubble.model.gas_pressure([0.0, 0.0], 0.0, bubble)

    def test_model_table(self):
        assert set(MODELS) == {"gilmore", "lic"}
        assert isinstance(create_model("gilmore"), GilmoreModel)
        assert isinstance(create_model("lic"), LaserCavitationModel)
        with pytest.raises(ValueError):
            create_model("rayleigh_plesset")

    def test_models_implement_interface(self):
        for cls in MODELS.values():
            assert issubclass(cls, DynamicsModel)
        with pytest.raises(TypeError):
            DynamicsModel()

    def test_metadata(self):
        assert GilmoreModel().metadata()["parameters"] is None
        assert LaserCavitationModel().metadata() == {
            "id": "lic",
            "name": "Laser-induced cavitation (Liang et al. 2022)",
            "parameters": "LaserCavitationParameters",
        }
