"""
Laser-induced cavitation (LIC) bubble model.

Implements the modified Gilmore model of Liang et al., Journal of Fluid
Mechanics 940 (2022), A5, for a bubble generated by a femtosecond laser
pulse. Three pieces are layered on the standard Gilmore equation:

  1. Equilibrium-radius stager. The unstressed radius Rn(t) grows from
     R0 to the breakdown radius Rnbd while the laser deposits energy,
     then holds constant plateaus that step down after each radius
     maximum (mass and energy lost at every collapse):

        t < 2*tauL           Rn^3 = R0^3 + (Rnbd^3 - R0^3) * f(t)
                             f(t) = (t - tauL/pi * sin(pi*t/tauL)) / (2*tauL)
        2*tauL <= t < tmax1  Rn = Rnbd
        tmax1 <= t < tmax2   Rn = Rnc1
        tmax2 <= t           Rn = Rnc2

  2. Laser particle-velocity source. During the pulse (t <= 2*tauL) the
     breakdown pressure P(t) is converted into a particle-velocity rate
     through the Rice-Walsh Hugoniot fit of water, and added to the wall
     acceleration:

        P    = (p_inf*Rn^4 + 2*sigma*Rn^3) / R0^4
        dP/dt = (2*p_inf*Rn + 3*sigma) / (3*R0^4*tauL)
                * (Rnbd^3 - R0^3) * (1 - cos(pi*t/tauL))
        du_p/dt = dP/dt / sqrt((rho_ref*c_ref)^2
                               + 4*rho_ref*c2*P / (ln(10)*c1))

  3. Hard-core gas law referenced to the equilibrium radius, with the
     hard-core radius rhc = Rn/9 switched on after the first maximum:

        p_gas = (p0 + 2*sigma/Rn) * ((Rn^3 - rhc^3) / (R^3 - rhc^3))^Gamma
        dp_gas/dt = -3*p_gas*Gamma*R^2*U / (R^3 - rhc^3)

Every function here is pure in (sol, t, parameters); the phase schedule
is plain time-threshold branching, never a stored mode.

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
"""

import dataclasses
import logging
import math

from physics.constants import (
    PI,
    LN_OF_10,
    ONE_THIRD,
    HUGONIOT_C1,
    HUGONIOT_C2,
    HARDCORE_FRACTION,
)
from physics.dynamics import BubbleStateError, DynamicsModel, gilmore_acceleration

log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class LaserCavitationParameters:
    """
    Immutable case parameters of a laser-induced cavitation run.

    Parameters
    ----------
    tauL : float
        Laser pulse duration (full width at half maximum) in seconds.
    Rnbd : float
        Equilibrium radius at peak laser pressure (breakdown) in m.
    Rnc1 : float
        Equilibrium radius during the first collapse in m.
    Rnc2 : float
        Equilibrium radius during the second and later collapses in m.
    tmax1 : float
        Time of the first radius maximum in seconds.
    tmax2 : float
        Time of the second radius maximum in seconds.

    Raises
    ------
    ValueError
        If a value is not finite, tauL or a radius is not positive, or
        tmax1 >= tmax2.
    """

    tauL: float
    Rnbd: float
    Rnc1: float
    Rnc2: float
    tmax1: float
    tmax2: float

    FIELDS = ("tauL", "Rnbd", "Rnc1", "Rnc2", "tmax1", "tmax2")

    def __post_init__(self):
        for key in self.FIELDS:
            value = float(getattr(self, key))
            if not math.isfinite(value):
                raise ValueError("Case parameter '{}' must be finite".format(key))
            object.__setattr__(self, key, value)

        if self.tauL <= 0:
            raise ValueError("Case parameter 'tauL' must be positive")
        for key in ("Rnbd", "Rnc1", "Rnc2"):
            if getattr(self, key) <= 0:
                raise ValueError("Case parameter '{}' must be positive".format(key))
        if self.tmax1 >= self.tmax2:
            raise ValueError("Case parameters must satisfy tmax1 < tmax2")
        if self.tmax1 <= 2.0 * self.tauL:
            log.warning("tmax1 (%g s) <= 2*tauL (%g s): breakdown plateau is empty",
                        self.tmax1, 2.0 * self.tauL)

    @classmethod
    def from_dict(cls, data):
        """Build from a dict holding all six FIELDS; KeyError if one is missing."""
        return cls(**{key: data[key] for key in cls.FIELDS})

    def replace(self, **changes):
        """Return a copy with some fields changed (validated again)."""
        for key in changes:
            if key not in self.FIELDS:
                raise ValueError("Unknown case parameter '{}'".format(key))
        return dataclasses.replace(self, **changes)

    def to_dict(self):
        return dataclasses.asdict(self)


# ----------------------------------------------------------------------
# Equilibrium-radius stager
# ----------------------------------------------------------------------

def breakdown_growth_radius(t, params, R0):
    """
    Growth-phase law for the equilibrium radius.

    Raised-cosine interpolation of the cube of the radius from R0 at
    t = 0 to Rnbd at t = 2*tauL, with zero slope at both ends.

    Parameters
    ----------
    t : float
        Time in seconds.
    params : LaserCavitationParameters
        Case parameters.
    R0 : float
        Initial radius in m.

    Returns
    -------
    float
        Rn in m; exactly R0 at t = 0.

    Raises
    ------
    ValueError
        If t is negative (the law is defined from the pulse onset).
    """
    if t < 0:
        raise ValueError("Time must not be negative, got {:g} s".format(t))
    if t == 0:
        return R0
    tauL = params.tauL
    f = (t - (tauL / PI) * math.sin(PI * t / tauL)) / (2.0 * tauL)
    R0_3 = R0 * R0 * R0
    return (R0_3 + (params.Rnbd ** 3 - R0_3) * f) ** ONE_THIRD


def equilibrium_radius(t, params, R0):
    """
    Equilibrium (unstressed) bubble radius at time t.

    Parameters
    ----------
    t : float
        Time in seconds.
    params : LaserCavitationParameters
        Case parameters.
    R0 : float
        Initial radius in m.

    Returns
    -------
    float
        Rn in m. Continuous except at tmax1 and tmax2.

    Raises
    ------
    ValueError
        If t is negative.
    """
    if t < 2.0 * params.tauL:
        return breakdown_growth_radius(t, params, R0)
    elif t < params.tmax1:
        return params.Rnbd
    elif t < params.tmax2:
        return params.Rnc1
    else:
        return params.Rnc2


def hardcore_radius(t, params, R0):
    """Hard-core radius: 0 up to and including tmax1, Rn/9 afterwards."""
    if t > params.tmax1:
        return equilibrium_radius(t, params, R0) * HARDCORE_FRACTION
    return 0.0


# ----------------------------------------------------------------------
# Laser particle-velocity source term
# ----------------------------------------------------------------------

def breakdown_pressure(sol, t, bubble):
    """
    Laser breakdown pressure P and its time derivative dP/dt.

    Parameters
    ----------
    sol : sequence of float
        State [U, R].
    t : float
        Time in seconds (meaningful for t <= 2*tauL).
    bubble : Bubble
        Bubble context carrying LaserCavitationParameters.

    Returns
    -------
    tuple of (float, float)
        (P in Pa, dP/dt in Pa/s)
    """
    params = bubble.case_parameters
    R0 = bubble.R0
    p_inf = bubble.pressure_infinity(t)
    sigma = bubble.interface.surface_tension(sol[1])
    Rn = equilibrium_radius(t, params, R0)

    R0_4 = R0 ** 4
    P = (p_inf * Rn ** 4 + 2.0 * sigma * Rn ** 3) / R0_4
    dot_P = (((2.0 * p_inf * Rn + 3.0 * sigma) / (3.0 * R0_4 * params.tauL))
             * (params.Rnbd ** 3 - R0 ** 3)
             * (1.0 - math.cos(PI * t / params.tauL)))
    return P, dot_P


def particle_velocity_derivative(sol, t, bubble):
    """
    Rate of change of the laser-induced particle velocity.

    Zero once the pulse is over (t > 2*tauL). During the pulse the
    Hugoniot relation u_p = (c1/c2) * log10(1 + ...) of Rice and Walsh
    converts the breakdown pressure rate into a particle acceleration.

    Parameters
    ----------
    sol : sequence of float
        State [U, R].
    t : float
        Time in seconds.
    bubble : Bubble
        Bubble context carrying LaserCavitationParameters.

    Returns
    -------
    float
        du_p/dt in m/s^2.

    Raises
    ------
    BubbleStateError
        If the square-root argument is not positive (breakdown pressure
        below -(rho_ref*c_ref)^2 * ln(10)*c1 / (4*rho_ref*c2)).
    """
    params = bubble.case_parameters
    if t > 2.0 * params.tauL:
        return 0.0

    P, dot_P = breakdown_pressure(sol, t, bubble)
    rho_ref = bubble.liquid.rho_ref
    c_ref = bubble.liquid.c_ref
    radicand = ((rho_ref * c_ref) ** 2
                + 4.0 * rho_ref * HUGONIOT_C2 * P / (LN_OF_10 * HUGONIOT_C1))
    if radicand <= 0.0:
        raise BubbleStateError(
            "Hugoniot radicand {:.6g} is not positive (P = {:.6g} Pa)".format(radicand, P),
            t=t, value=radicand)
    return dot_P / math.sqrt(radicand)


# ----------------------------------------------------------------------
# Dynamics model
# ----------------------------------------------------------------------

class LaserCavitationModel(DynamicsModel):
    """
    Modified Gilmore model for a laser-induced cavitation bubble.

    Reads its LaserCavitationParameters from bubble.case_parameters.
    """

    id = "lic"
    name = "Laser-induced cavitation (Liang et al. 2022)"
    parameters_type = LaserCavitationParameters

    def equilibrium_radius(self, t, bubble):
        return equilibrium_radius(t, bubble.case_parameters, bubble.R0)

    def hardcore_radius(self, t, bubble):
        return hardcore_radius(t, bubble.case_parameters, bubble.R0)

    def velocity_derivative(self, sol, t, bubble):
        """Gilmore acceleration plus the laser particle-velocity source."""
        return (gilmore_acceleration(sol, t, bubble)
                + particle_velocity_derivative(sol, t, bubble))

    def _volume_gap(self, R, rhc, t):
        gap = R ** 3 - rhc ** 3
        if R <= rhc or gap <= 0.0:
            raise BubbleStateError(
                "Bubble radius {:.6g} m collapsed onto the hard core "
                "({:.6g} m)".format(R, rhc), t=t, value=R)
        return gap

    def gas_pressure(self, sol, t, bubble):
        """Hard-core gas pressure referenced to the equilibrium radius."""
        R = sol[1]
        Rn = self.equilibrium_radius(t, bubble)
        rhc = self.hardcore_radius(t, bubble)
        gap = self._volume_gap(R, rhc, t)
        sigma = bubble.interface.surface_tension(R)
        return ((bubble.p0 + 2.0 * sigma / Rn)
                * ((Rn ** 3 - rhc ** 3) / gap) ** bubble.gas.gamma)

    def gas_pressure_derivative(self, sol, t, bubble):
        """
        dp_gas/dt at frozen Rn and rhc (quasi-static in the equilibrium radius).
        """
        U, R = sol[0], sol[1]
        rhc = self.hardcore_radius(t, bubble)
        gap = self._volume_gap(R, rhc, t)
        return (-3.0 * self.gas_pressure(sol, t, bubble) * bubble.gas.gamma
                * R * R * U / gap)
