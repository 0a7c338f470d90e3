"""
Traced equation callables for the BubbleEngine trace pipeline.

Each function in this module is a self-contained computation that:
  1. Takes (sol, t, bubble, **params) as input, with sol = [U, R].
  2. Calls the model and fluid closures the integrator itself uses for
     the core numerical step.
  3. Returns (output_value, intermediates_dict) where intermediates
     captures every physically meaningful intermediate variable.

The intermediates are what the verbose API mode exposes, giving the
user the full chain of math at every output sample.

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
IMPORTANT: These functions must produce numerically identical results
to the right-hand side evaluated by the integrator. They call the same
closures in the same order.
"""

from physics.lic import breakdown_pressure, particle_velocity_derivative


# ----------------------------------------------------------------------
# Laser-induced cavitation stager
# ----------------------------------------------------------------------

EQUILIBRIUM_RADIUS_LABEL = (
    "Rn^3 = R0^3 + (Rnbd^3 - R0^3)*(t - tauL/pi*sin(pi*t/tauL))/(2*tauL) "
    "for t < 2*tauL; Rnbd, Rnc1, Rnc2 after; rhc = Rn/9 for t > tmax1"
)


def equilibrium_phase(t, params):
    """Name of the stager phase active at time t."""
    if t < 2.0 * params.tauL:
        return "breakdown_growth"
    if t < params.tmax1:
        return "breakdown_plateau"
    if t < params.tmax2:
        return "first_collapse"
    return "later_collapses"


def equilibrium_radius_eq(sol, t, bubble):
    """
    Equilibrium and hard-core radius of a laser-induced bubble.

    Returns
    -------
    tuple of (float, dict)
        (Rn, {"Rn", "rhc", "phase"})
    """
    model = bubble.model
    Rn = model.equilibrium_radius(t, bubble)
    rhc = model.hardcore_radius(t, bubble)
    return Rn, {
        "Rn": Rn,
        "rhc": rhc,
        "phase": equilibrium_phase(t, bubble.case_parameters),
    }


PARTICLE_SOURCE_LABEL = (
    "du_p/dt = (dP/dt) / sqrt((rho_ref*c_ref)^2 + 4*rho_ref*c2*P/(ln(10)*c1)) "
    "for t <= 2*tauL, else 0"
)


def particle_source_eq(sol, t, bubble):
    """
    Laser particle-velocity source term.

    After the pulse the breakdown pressure is no longer evaluated and
    both P and dP/dt are reported as 0.

    Returns
    -------
    tuple of (float, dict)
        (du_p/dt, {"P", "dP_dt"})
    """
    if t > 2.0 * bubble.case_parameters.tauL:
        return 0.0, {"P": 0.0, "dP_dt": 0.0}
    P, dot_P = breakdown_pressure(sol, t, bubble)
    return particle_velocity_derivative(sol, t, bubble), {"P": P, "dP_dt": dot_P}


# ----------------------------------------------------------------------
# Pressures
# ----------------------------------------------------------------------

GAS_PRESSURE_LABEL = "p_gas from the dynamics model; dp_gas/dt at frozen Rn"


def gas_pressure_eq(sol, t, bubble):
    """
    Gas pressure inside the bubble and its time derivative.

    Returns
    -------
    tuple of (float, dict)
        (p_gas, {"R", "U", "dp_gas_dt"})
    """
    model = bubble.model
    p_gas = model.gas_pressure(sol, t, bubble)
    return p_gas, {
        "R": sol[1],
        "U": sol[0],
        "dp_gas_dt": model.gas_pressure_derivative(sol, t, bubble),
    }


WALL_PRESSURE_LABEL = "pL = p_gas - 2*sigma/R - 4*mu*U/R - 4*kappa_s*U/R^2"


def wall_pressure_eq(sol, t, bubble):
    """
    Liquid pressure at the bubble wall with its stress contributions.

    Returns
    -------
    tuple of (float, dict)
        (pL, {"p_gas", "p_surface", "p_visc_liquid", "p_visc_interface",
              "p_inf"})
    """
    U, R = sol[0], sol[1]
    liquid = bubble.liquid
    interface = bubble.interface
    pL = liquid.pressure_bubblewall(sol, t, bubble)
    return pL, {
        "p_gas": bubble.model.gas_pressure(sol, t, bubble),
        "p_surface": 2.0 * interface.surface_tension(R) / R,
        "p_visc_liquid": liquid.pressure_viscous(R, U),
        "p_visc_interface": interface.pressure_viscous(R, U),
        "p_inf": bubble.pressure_infinity(t),
    }


# ----------------------------------------------------------------------
# Liquid state at the wall
# ----------------------------------------------------------------------

SOUND_SPEED_LABEL = "cL = sqrt(Gamma*(pL + B)/(rho_L^2*(1/rho_L - b))); Ma = U/cL"


def sound_speed_eq(sol, t, bubble):
    """
    Sound speed of the liquid at the wall and the wall Mach number.

    Returns
    -------
    tuple of (float, dict)
        (cL, {"pL", "rho_L", "mach"})
    """
    liquid = bubble.liquid
    pL = liquid.pressure_bubblewall(sol, t, bubble)
    rho_L = liquid.density(pL)
    cL = liquid.sound_speed(pL, rho_L)
    return cL, {
        "pL": pL,
        "rho_L": rho_L,
        "mach": sol[0] / cL,
    }
