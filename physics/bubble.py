"""
Bubble context: the configuration shared by the driver and the models.

A Bubble bundles the reference state (R0, U0, p0), the fluid
collaborators (Gas, Liquid, Interface), the injected DynamicsModel and
the model's case parameters. The case-parameter slot is typed: the
model declares the type it reads and the Bubble refuses anything else.

The far field is quiescent: p_inf(t) = p0 with zero time derivative.

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
"""

import math

from physics import constants
from physics.dynamics import GilmoreModel
from physics.gas import Gas
from physics.interface import Interface
from physics.lic import LaserCavitationModel
from physics.liquid import Liquid


MODELS = {
    GilmoreModel.id: GilmoreModel,
    LaserCavitationModel.id: LaserCavitationModel,
}


def create_model(model_id):
    """
    Instantiate a registered DynamicsModel by id.

    Raises
    ------
    ValueError
        If no model with that id exists.
    """
    cls = MODELS.get(model_id)
    if cls is None:
        raise ValueError("Unknown dynamics model '{}' (choose from {})".format(
            model_id, ", ".join(sorted(MODELS))))
    return cls()


class Bubble:
    """
    Bubble configuration and model context.

    Parameters
    ----------
    R0 : float
        Initial (reference) radius in m.
    p0 : float
        Ambient reference pressure in Pa.
    U0 : float, optional
        Initial wall velocity in m/s (default 0).
    gas, liquid, interface : optional
        Fluid collaborators; defaults are air in water at 1 bar.
    model : DynamicsModel, optional
        Right-hand-side model (default GilmoreModel).
    case_parameters : object, optional
        Case parameters; must be an instance of model.parameters_type.

    Raises
    ------
    ValueError
        If R0 or p0 is not positive and finite.
    TypeError
        If case_parameters does not match model.parameters_type.
    """

    def __init__(self, R0=constants.R0, p0=constants.P0, U0=constants.U0,
                 gas=None, liquid=None, interface=None, model=None,
                 case_parameters=None):
        self.R0 = float(R0)
        self.p0 = float(p0)
        self.U0 = float(U0)
        if not math.isfinite(self.R0) or self.R0 <= 0:
            raise ValueError("Initial radius R0 must be positive")
        if not math.isfinite(self.p0) or self.p0 <= 0:
            raise ValueError("Ambient pressure p0 must be positive")
        if not math.isfinite(self.U0):
            raise ValueError("Initial velocity U0 must be finite")

        self.gas = gas if gas is not None else Gas()
        self.liquid = liquid if liquid is not None else Liquid()
        self.interface = interface if interface is not None else Interface()
        self.model = model if model is not None else GilmoreModel()
        self.case_parameters = self._check_case_parameters(case_parameters)

        # Current time, maintained by the driver
        self.t = 0.0

    def _check_case_parameters(self, case_parameters):
        expected = self.model.parameters_type
        if expected is None:
            if case_parameters is not None:
                raise TypeError("Model '{}' takes no case parameters".format(self.model.id))
            return None
        if not isinstance(case_parameters, expected):
            raise TypeError("Model '{}' requires {} case parameters, got {}".format(
                self.model.id, expected.__name__, type(case_parameters).__name__))
        return case_parameters

    @property
    def initial_state(self):
        """Initial state vector [U0, R0]."""
        return [self.U0, self.R0]

    def pressure_infinity(self, t):
        """Far-field pressure in Pa."""
        return self.p0

    def pressure_derivative_infinity(self, t):
        """Time derivative of the far-field pressure in Pa/s."""
        return 0.0

    def to_dict(self):
        result = {
            "R0": self.R0,
            "p0": self.p0,
            "U0": self.U0,
            "model": self.model.id,
            "gas": self.gas.to_dict(),
            "liquid": self.liquid.to_dict(),
            "interface": self.interface.to_dict(),
        }
        if self.case_parameters is not None:
            result["case_parameters"] = self.case_parameters.to_dict()
        return result
