"""
Gas model parameters.

The pressure law itself belongs to the Dynamics Model (the default
polytropic law in physics.dynamics, the hard-core law in physics.lic);
this class only carries the gas properties those laws share.
"""

from physics import constants


class Gas:
    """
    Polytropic bubble gas.

    Parameters
    ----------
    gamma : float
        Polytropic exponent (1 = isothermal, ratio of specific heats =
        adiabatic).
    """

    def __init__(self, gamma=constants.GAMMA_GAS):
        self.gamma = float(gamma)
        if self.gamma < 1.0:
            raise ValueError("Polytropic exponent must be >= 1")

    def to_dict(self):
        return {"gamma": self.gamma}
