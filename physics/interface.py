"""
Gas-liquid interface model: surface tension and surface dilatational viscosity.

The interface contributes 2*sigma/R and a viscous stress 4*kappa_s*U/R^2
to the normal-stress balance at the bubble wall.
"""

from physics import constants


class Interface:
    """
    Interface with constant surface tension.

    Parameters
    ----------
    sigma : float
        Surface tension in N/m.
    kappa_s : float, optional
        Surface dilatational viscosity in kg/s (default 0, clean interface).
    """

    def __init__(self, sigma=constants.SIGMA, kappa_s=constants.KAPPA_S):
        self.sigma = float(sigma)
        self.kappa_s = float(kappa_s)
        if self.sigma < 0:
            raise ValueError("Surface tension must be non-negative")
        if self.kappa_s < 0:
            raise ValueError("Surface dilatational viscosity must be non-negative")

    def surface_tension(self, R):
        """Surface tension at radius R (constant for a clean interface)."""
        return self.sigma

    def pressure_viscous(self, R, U):
        """Viscous interface stress, 4*kappa_s*U/R^2."""
        return 4.0 * self.kappa_s * U / (R * R)

    def pressure_derivative_viscous_expl(self, R, U):
        """Explicit part of d/dt(4*kappa_s*U/R^2), i.e. -8*kappa_s*U^2/R^3."""
        return -8.0 * self.kappa_s * U * U / (R * R * R)

    def pressure_derivative_viscous_impl(self, R):
        """Coefficient of dU/dt in d/dt(4*kappa_s*U/R^2)."""
        return 4.0 * self.kappa_s / (R * R)

    def to_dict(self):
        return {"sigma": self.sigma, "kappa_s": self.kappa_s}
