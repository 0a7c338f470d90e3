"""
Pytest fixtures for CAVIS test suite.
"""

import pytest
from app import create_app


@pytest.fixture
def app():
    """Create application for testing."""
    app = create_app()
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def liang_params():
    """Case parameters of the Liang et al. (2022) reference case."""
    from physics.lic import LaserCavitationParameters
    return LaserCavitationParameters(
        tauL=265e-15,
        Rnbd=13.718e-6,
        Rnc1=3.615e-6,
        Rnc2=2.415e-6,
        tmax1=3.2440e-6,
        tmax2=7.2688e-6,
    )


@pytest.fixture
def lic_bubble(liang_params):
    """Laser-induced cavitation bubble with default water/air properties."""
    from physics.bubble import Bubble
    from physics.lic import LaserCavitationModel
    return Bubble(R0=1.0e-6, p0=1.0e5, model=LaserCavitationModel(),
                  case_parameters=liang_params)
