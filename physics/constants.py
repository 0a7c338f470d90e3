"""
Physical and model constants for CAVIS bubble dynamics calculations.

Liquid defaults describe water at 1 bar and 20 C in the reference-state
form of the Noble-Abel stiffened-gas (NASG) equation of state. Gas and
interface defaults describe an air bubble with a clean interface.

IMPORTANT: No unicode characters allowed in this file (Windows charmap constraint).
"""

import math

PI = math.pi

# Natural logarithm of 10, converts the log10-based Hugoniot fit
LN_OF_10 = math.log(10.0)

ONE_THIRD = 1.0 / 3.0

# Hugoniot fit of Rice and Walsh for water (Liang et al., JFM 940, 2022, A5)
HUGONIOT_C1 = 5190.0   # m/s
HUGONIOT_C2 = 25306.0  # m/s

# Hard-core radius as a fraction of the equilibrium radius, active
# after the first radius maximum (Liang et al., JFM 940, 2022, A5, p. 15)
HARDCORE_FRACTION = 1.0 / 9.0

# ---------------------------------------------------------------------------
# Liquid (NASG, water)
# ---------------------------------------------------------------------------

RHO_REF = 997.0       # kg/m^3, reference density
P_REF = 1.0e5         # Pa, reference pressure
GAMMA_LIQUID = 7.15   # NASG exponent
B_LIQUID = 3.046e8    # Pa, NASG stiffening pressure
COVOLUME_LIQUID = 0.0  # m^3/kg, NASG co-volume
MU_LIQUID = 1.002e-3  # Pa s, dynamic viscosity

# ---------------------------------------------------------------------------
# Interface and gas
# ---------------------------------------------------------------------------

SIGMA = 0.0728        # N/m, surface tension of clean water/air
KAPPA_S = 0.0         # kg/s, surface dilatational viscosity
GAMMA_GAS = 1.4       # polytropic exponent

# ---------------------------------------------------------------------------
# Bubble and ambient
# ---------------------------------------------------------------------------

P0 = 1.0e5            # Pa, ambient (far-field) reference pressure
R0 = 1.0e-6           # m, initial radius
U0 = 0.0              # m/s, initial wall velocity

# ---------------------------------------------------------------------------
# Solver
# ---------------------------------------------------------------------------

DT_INITIAL = 1.0e-15  # s, first integrator step
RTOL = 1.0e-8
ATOL = 1.0e-12


def reference_sound_speed(rho_ref=RHO_REF, p_ref=P_REF, gamma=GAMMA_LIQUID,
                          B=B_LIQUID, b=COVOLUME_LIQUID):
    """
    NASG sound speed at the reference state.

    c_ref = sqrt(Gamma * (p_ref + B) / (rho_ref^2 * (1/rho_ref - b)))
    """
    return math.sqrt(gamma * (p_ref + B) / (rho_ref * rho_ref * (1.0 / rho_ref - b)))
