"""
Liquid model: Noble-Abel stiffened-gas (NASG) closures and bubble-wall pressure.

Equation of state in reference-state form:

    (p + B) * (1/rho - b)^Gamma = K,   K = (p_ref + B) * (1/rho_ref - b)^Gamma

Isentropic closures derived from it:

    rho(p)    = 1 / (((p + B)/K)^(-1/Gamma) + b)
    h(p, rho) = Gamma/(Gamma - 1) * (p + B) * (1/rho - b) + b*p
    c(p, rho) = sqrt(Gamma * (p + B) / (rho^2 * (1/rho - b)))

The bubble-wall pressure follows from the normal-stress balance at the
interface with a Newtonian liquid:

    pL = p_gas - 2*sigma/R - 4*mu*U/R - p_visc_interface

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
"""

import math

from physics import constants


class Liquid:
    """
    NASG liquid with Newtonian viscosity.

    Parameters
    ----------
    rho_ref : float
        Reference density in kg/m^3.
    p_ref : float
        Reference pressure in Pa.
    gamma : float
        NASG exponent (must exceed 1).
    B : float
        Stiffening pressure in Pa.
    b : float
        Co-volume in m^3/kg.
    mu : float
        Dynamic viscosity in Pa s.
    """

    def __init__(self, rho_ref=constants.RHO_REF, p_ref=constants.P_REF,
                 gamma=constants.GAMMA_LIQUID, B=constants.B_LIQUID,
                 b=constants.COVOLUME_LIQUID, mu=constants.MU_LIQUID):
        self.rho_ref = float(rho_ref)
        self.p_ref = float(p_ref)
        self.gamma = float(gamma)
        self.B = float(B)
        self.b = float(b)
        self.mu = float(mu)

        if self.rho_ref <= 0:
            raise ValueError("Liquid reference density must be positive")
        if self.gamma <= 1.0:
            raise ValueError("Liquid NASG exponent must be greater than 1")
        if self.mu < 0:
            raise ValueError("Liquid viscosity must be non-negative")
        if self.b * self.rho_ref >= 1.0:
            raise ValueError("Liquid co-volume must be smaller than 1/rho_ref")

        self.K = (self.p_ref + self.B) * (1.0 / self.rho_ref - self.b) ** self.gamma
        self.c_ref = constants.reference_sound_speed(
            self.rho_ref, self.p_ref, self.gamma, self.B, self.b)

    # ------------------------------------------------------------------
    # NASG closures
    # ------------------------------------------------------------------

    def density(self, p):
        """Liquid density at pressure p."""
        return 1.0 / (((p + self.B) / self.K) ** (-1.0 / self.gamma) + self.b)

    def enthalpy(self, p, rho):
        """Specific enthalpy at (p, rho), referenced so that dh = dp/rho."""
        return (self.gamma / (self.gamma - 1.0) * (p + self.B) * (1.0 / rho - self.b)
                + self.b * p)

    def sound_speed(self, p, rho):
        """Speed of sound at (p, rho)."""
        return math.sqrt(self.gamma * (p + self.B) / (rho * rho * (1.0 / rho - self.b)))

    # ------------------------------------------------------------------
    # Bubble-wall pressure and its derivatives
    # ------------------------------------------------------------------

    def pressure_viscous(self, R, U):
        """Newtonian viscous normal stress at the wall, 4*mu*U/R."""
        return 4.0 * self.mu * U / R

    def pressure_bubblewall(self, sol, t, bubble):
        """
        Liquid pressure at the bubble wall.

        Parameters
        ----------
        sol : sequence of float
            State [U, R].
        t : float
            Time in seconds.
        bubble : Bubble
            Bubble context providing the model, gas and interface.

        Returns
        -------
        float
            pL in Pa.
        """
        U, R = sol[0], sol[1]
        interface = bubble.interface
        return (bubble.model.gas_pressure(sol, t, bubble)
                - 2.0 * interface.surface_tension(R) / R
                - self.pressure_viscous(R, U)
                - interface.pressure_viscous(R, U))

    def pressure_derivative_bubblewall_expl(self, sol, t, bubble):
        """
        Explicit part of dpL/dt (everything not multiplying dU/dt).

        dpL/dt = dp_gas/dt + 2*sigma*U/R^2 + 4*mu*U^2/R^2
                 + [interface explicit term] - (4*mu/R + ...) * dU/dt

        The dU/dt terms are returned separately by
        pressure_derivative_viscous_impl().
        """
        U, R = sol[0], sol[1]
        interface = bubble.interface
        return (bubble.model.gas_pressure_derivative(sol, t, bubble)
                + 2.0 * interface.surface_tension(R) * U / (R * R)
                + 4.0 * self.mu * U * U / (R * R)
                - interface.pressure_derivative_viscous_expl(R, U))

    def pressure_derivative_viscous_impl(self, R):
        """Coefficient of dU/dt in -dpL/dt from liquid viscosity, 4*mu/R."""
        return 4.0 * self.mu / R

    def to_dict(self):
        return {
            "rho_ref": self.rho_ref,
            "p_ref": self.p_ref,
            "gamma": self.gamma,
            "B": self.B,
            "b": self.b,
            "mu": self.mu,
            "c_ref": self.c_ref,
        }
