"""
Dynamics Model interface and the Gilmore equation of bubble-wall motion.

A DynamicsModel supplies the three right-hand-side hooks the ODE driver
needs: the wall acceleration dU/dt, the gas pressure, and the gas
pressure time derivative. Concrete models are selected at configuration
time and injected into the Bubble context; the driver only ever talks
to this interface.

Gilmore model (compressible liquid, Kirkwood-Bethe hypothesis):

    R*dU/dt*(1 - U/C) + 3/2*U^2*(1 - U/(3C))
        = H*(1 + U/C) + R/C*(1 - U/C)*dH/dt

with H the specific-enthalpy difference between the wall and the far
field and C the sound speed at the wall. The viscous part of dH/dt is
proportional to dU/dt; it is moved to the left-hand side and absorbed
into the coefficient

    GilmoreCoeffB = 1 + (dp_visc_impl / C) / rho_L

Classes:
    BubbleStateError - Invalid physical state raised by a model
    DynamicsModel    - Abstract capability interface
    GilmoreModel     - Default Gilmore model with a polytropic gas

Functions:
    gilmore_acceleration - Steps shared by every Gilmore-type model

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
"""

from abc import ABC, abstractmethod

from physics.constants import ONE_THIRD


class BubbleStateError(ValueError):
    """
    The bubble reached a state for which the model is undefined.

    Parameters
    ----------
    message : str
        Description of the violated condition.
    t : float, optional
        Time at which the state was evaluated.
    value : float, optional
        The offending quantity (radius, radicand, coefficient).
    """

    def __init__(self, message, t=None, value=None):
        super().__init__(message)
        self.t = t
        self.value = value


class DynamicsModel(ABC):
    """
    Abstract capability interface for bubble dynamics models.

    All hooks are pure functions of (sol, t, bubble) where sol = [U, R].
    They hold no state between calls and may be evaluated repeatedly
    for the same t while the integrator shrinks a rejected step.

    Class Attributes
    ----------------
    id : str
        Unique model identifier used in configuration.
    name : str
        Human-readable model name.
    parameters_type : type or None
        Type of the case parameters the model reads from
        bubble.case_parameters, or None if it needs none.
    """

    id = ""
    name = ""
    parameters_type = None

    @abstractmethod
    def velocity_derivative(self, sol, t, bubble):
        """Wall acceleration dU/dt in m/s^2."""

    @abstractmethod
    def gas_pressure(self, sol, t, bubble):
        """Gas pressure inside the bubble in Pa."""

    @abstractmethod
    def gas_pressure_derivative(self, sol, t, bubble):
        """Time derivative of the gas pressure in Pa/s."""

    def metadata(self):
        return {
            "id": self.id,
            "name": self.name,
            "parameters": (self.parameters_type.__name__
                           if self.parameters_type is not None else None),
        }


def gilmore_acceleration(sol, t, bubble):
    """
    Gilmore wall acceleration without additional source terms.

    The wall pressure, and therefore the gas pressure, come from the
    model attached to the bubble, so laser-induced and default models
    share this function.

    Parameters
    ----------
    sol : sequence of float
        State [U, R] (wall velocity in m/s, radius in m).
    t : float
        Time in seconds.
    bubble : Bubble
        Bubble context with liquid, interface and model.

    Returns
    -------
    float
        dU/dt in m/s^2. Diverges as U approaches the wall sound speed;
        that sonic limit is left to the integrator's step-size control.

    Raises
    ------
    BubbleStateError
        If the implicit viscous coefficient is not positive.
    """
    U, R = sol[0], sol[1]
    liquid = bubble.liquid

    pL = liquid.pressure_bubblewall(sol, t, bubble)
    p_inf = bubble.pressure_infinity(t)
    rho_L = liquid.density(pL)
    rho_inf = liquid.density(p_inf)
    H = liquid.enthalpy(pL, rho_L) - liquid.enthalpy(p_inf, rho_inf)
    dot_H_expl = (liquid.pressure_derivative_bubblewall_expl(sol, t, bubble) / rho_L
                  - bubble.pressure_derivative_infinity(t) / rho_inf)
    inv_cL = 1.0 / liquid.sound_speed(pL, rho_L)

    dot_pvisc_impl = (liquid.pressure_derivative_viscous_impl(R)
                      + bubble.interface.pressure_derivative_viscous_impl(R))
    coeff_b = 1.0 + dot_pvisc_impl * inv_cL / rho_L
    if coeff_b <= 0.0:
        raise BubbleStateError(
            "Gilmore coefficient B = {:.6g} is not positive".format(coeff_b),
            t=t, value=coeff_b)

    return ((((1.0 + U * inv_cL) * H - 1.5 * (1.0 - U * ONE_THIRD * inv_cL) * U * U)
             / ((1.0 - U * inv_cL) * R)
             + dot_H_expl * inv_cL)
            / coeff_b)


class GilmoreModel(DynamicsModel):
    """
    Default Gilmore model with a polytropic gas referenced to R0.

        p_gas = (p0 + 2*sigma/R0) * (R0/R)^(3*Gamma)
        dp_gas/dt = -3*Gamma*p_gas*U/R
    """

    id = "gilmore"
    name = "Gilmore (polytropic gas)"

    def velocity_derivative(self, sol, t, bubble):
        return gilmore_acceleration(sol, t, bubble)

    def gas_pressure(self, sol, t, bubble):
        R = sol[1]
        if R <= 0.0:
            raise BubbleStateError(
                "Bubble radius {:.6g} m is not positive".format(R), t=t, value=R)
        R0 = bubble.R0
        p_g0 = bubble.p0 + 2.0 * bubble.interface.surface_tension(R0) / R0
        return p_g0 * (R0 / R) ** (3.0 * bubble.gas.gamma)

    def gas_pressure_derivative(self, sol, t, bubble):
        U, R = sol[0], sol[1]
        return -3.0 * bubble.gas.gamma * self.gas_pressure(sol, t, bubble) * U / R
