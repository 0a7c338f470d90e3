"""
BubbleEngine: time integration of the spherical bubble ODE for CAVIS.

ARCHITECTURE RULE: This module is the shared computation core. It
contains ONLY driver infrastructure (config, engine, result) and shared
utility functions (find_radius_maxima).

DO NOT add physics here. The right-hand side belongs to the injected
DynamicsModel, following the Registry / Dependency Injection pattern:

    app.py
      -> CavisRegistry.register(LaserCavitationService())
         -> LaserCavitationService delegates to:
            - data.cases              (build_bubble)
            - physics.lic             (LaserCavitationModel)
            - physics.engine          (BubbleEngine)

If you need to add a new bubble model:
    1. Subclass physics.dynamics.DynamicsModel in its own module
    2. Add it to physics.bubble.MODELS
    3. Create or extend a service under physics/services/ for the API
    4. The service calls BubbleEngine to run the integration

The state vector is [U, R]:

    dU/dt = model.velocity_derivative([U, R], t, bubble)
    dR/dt = U

This module provides:
    SimulationConfig - Integration window, tolerances and output sampling
    SolverError      - Integrator failure
    BubbleEngine     - Runs scipy's RK45 integrator on a Bubble
    BubbleResult     - Sampled solution with traces and serialization

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
"""

import logging
import math
import time
from collections import OrderedDict

import numpy as np
from scipy.integrate import solve_ivp

from physics import constants
from physics.core import ModelStage, PipelineRunner
from physics.dynamics import BubbleStateError
from physics.equations import (
    EQUILIBRIUM_RADIUS_LABEL,
    GAS_PRESSURE_LABEL,
    PARTICLE_SOURCE_LABEL,
    SOUND_SPEED_LABEL,
    WALL_PRESSURE_LABEL,
    equilibrium_radius_eq,
    gas_pressure_eq,
    particle_source_eq,
    sound_speed_eq,
    wall_pressure_eq,
)
from physics.lic import LaserCavitationModel

log = logging.getLogger(__name__)

MIN_OUTPUTS = 10
MAX_OUTPUTS = 5000


class SolverError(RuntimeError):
    """The integrator failed to reach the end of the time window."""


class SimulationConfig:
    """
    Integration configuration.

    Parameters
    ----------
    t_end : float
        End time in seconds.
    t_start : float, optional
        Start time in seconds (default 0). Must not be negative.
    num_outputs : int, optional
        Number of evenly spaced output samples. Capped at 5000, minimum 10.
    dt_initial : float, optional
        First trial step in seconds. Must be tiny when a laser pulse of
        a few hundred femtoseconds drives the bubble.
    rtol, atol : float, optional
        Relative and absolute integrator tolerances.
    max_step : float, optional
        Largest allowed step in seconds (default unbounded).
    """

    def __init__(self, t_end, t_start=0.0, num_outputs=500,
                 dt_initial=constants.DT_INITIAL, rtol=constants.RTOL,
                 atol=constants.ATOL, max_step=None):
        self.t_start = float(t_start)
        self.t_end = float(t_end)
        # Enforce bounds on num_outputs
        self.num_outputs = max(MIN_OUTPUTS, min(int(num_outputs), MAX_OUTPUTS))
        self.dt_initial = float(dt_initial)
        self.rtol = float(rtol)
        self.atol = float(atol)
        self.max_step = float(max_step) if max_step is not None else math.inf

        for key in ("t_start", "t_end", "dt_initial", "rtol", "atol"):
            if not math.isfinite(getattr(self, key)):
                raise ValueError("Solver option '{}' must be finite".format(key))
        # Time 0 is the start of the laser pulse
        if self.t_start < 0:
            raise ValueError("t_start must not be negative")
        if self.t_end <= self.t_start:
            raise ValueError("t_end must be greater than t_start")
        if self.dt_initial <= 0 or self.rtol <= 0 or self.atol <= 0:
            raise ValueError("dt_initial, rtol and atol must be positive")
        if self.max_step <= 0:
            raise ValueError("max_step must be positive")
        # solve_ivp rejects a first step longer than the window
        self.dt_initial = min(self.dt_initial, self.t_end - self.t_start)

    def output_times(self):
        """Evenly spaced sample times including both ends."""
        return np.linspace(self.t_start, self.t_end, self.num_outputs)

    def to_dict(self):
        """Serialize config for inclusion in verbose output."""
        return {
            "t_start": self.t_start,
            "t_end": self.t_end,
            "num_outputs": self.num_outputs,
            "dt_initial": self.dt_initial,
            "rtol": self.rtol,
            "atol": self.atol,
            "max_step": self.max_step if math.isfinite(self.max_step) else None,
        }


def find_radius_maxima(t, R):
    """
    Locate local maxima of a sampled radius history.

    A sample i is a maximum when R[i-1] < R[i] >= R[i+1]; the end
    points are never reported.

    Parameters
    ----------
    t : sequence of float
        Sample times in seconds.
    R : sequence of float
        Radius at each sample in m.

    Returns
    -------
    list of dict
        Each entry has keys 't' and 'R', in time order.
    """
    t = np.asarray(t, dtype=float)
    R = np.asarray(R, dtype=float)
    if R.size < 3:
        return []
    inner = (R[1:-1] > R[:-2]) & (R[1:-1] >= R[2:])
    indices = np.nonzero(inner)[0] + 1
    return [{"t": float(t[i]), "R": float(R[i])} for i in indices]


class BubbleResult:
    """
    Sampled solution of one integration run.

    Parameters
    ----------
    bubble : Bubble
        The bubble context that was integrated.
    config : SimulationConfig
        The configuration that produced this result.
    t, U, R : list of float
        Output times (s), wall velocities (m/s) and radii (m).
    nsteps : int
        Number of accepted integrator steps.
    nfev : int
        Number of right-hand-side evaluations.
    wall_time : float
        Elapsed wall-clock time in seconds.
    """

    def __init__(self, bubble, config, t, U, R, nsteps, nfev, wall_time):
        self.bubble = bubble
        self.config = config
        self.t = t
        self.U = U
        self.R = R
        self.nsteps = nsteps
        self.nfev = nfev
        self.wall_time = wall_time
        self._stage_results = None

    @property
    def states(self):
        return [[u, r] for u, r in zip(self.U, self.R)]

    def radius_maxima(self):
        return find_radius_maxima(self.t, self.R)

    def build_trace_pipeline(self):
        """
        Pipeline of traced quantities appropriate for the bubble's model.

        The stager and the laser source stages are only added for the
        laser-induced cavitation model.
        """
        runner = PipelineRunner()
        if isinstance(self.bubble.model, LaserCavitationModel):
            runner.add_stage(ModelStage(
                "equilibrium_radius", equilibrium_radius_eq,
                EQUILIBRIUM_RADIUS_LABEL))
        runner.add_stage(ModelStage(
            "gas_pressure", gas_pressure_eq, GAS_PRESSURE_LABEL))
        runner.add_stage(ModelStage(
            "wall_pressure", wall_pressure_eq, WALL_PRESSURE_LABEL))
        runner.add_stage(ModelStage(
            "sound_speed", sound_speed_eq, SOUND_SPEED_LABEL))
        if isinstance(self.bubble.model, LaserCavitationModel):
            runner.add_stage(ModelStage(
                "particle_source", particle_source_eq, PARTICLE_SOURCE_LABEL))
        return runner

    def trace(self):
        """
        Evaluate all traced stages at every output sample.

        Computed once and cached.

        Returns
        -------
        OrderedDict
            Mapping of stage name to StageResult, in execution order.
        """
        if self._stage_results is None:
            runner = self.build_trace_pipeline()
            self._stage_results = runner.run(self.t, self.states, self.bubble)
        return self._stage_results

    def series(self, name):
        """
        Get the output series for a named stage.

        Raises
        ------
        KeyError
            If no stage with that name exists for this model.
        """
        return self.trace()[name].series

    def to_api_response(self):
        """
        Produce the flat dict for the API.

        Returns
        -------
        dict
            Flat response with keys: t, R, U, p_gas, p_wall, sound_speed,
            and Rn for the laser-induced model, plus run statistics.
        """
        response = {
            "model": self.bubble.model.id,
            "t": [float("{:.6e}".format(v)) for v in self.t],
            "R": [float("{:.8e}".format(v)) for v in self.R],
            "U": [float("{:.6e}".format(v)) for v in self.U],
            "nsteps": self.nsteps,
            "nfev": self.nfev,
            "wall_time_s": round(self.wall_time, 4),
        }

        api_key_map = {
            "equilibrium_radius": "Rn",
            "gas_pressure": "p_gas",
            "wall_pressure": "p_wall",
            "sound_speed": "sound_speed",
            "particle_source": "particle_source",
        }

        for stage_name, result in self.trace().items():
            api_key = api_key_map.get(stage_name, stage_name)
            response[api_key] = [float("{:.6e}".format(v)) for v in result.series]

        return response

    def to_verbose_response(self):
        """
        Produce the full computation chain for verbose mode.

        Returns
        -------
        dict
            Complete traced response with config, bubble, samples and
            per-stage traces.
        """
        return {
            "config": self.config.to_dict(),
            "bubble": self.bubble.to_dict(),
            "t": self.t,
            "R": self.R,
            "U": self.U,
            "stages": OrderedDict(
                (name, result.to_dict())
                for name, result in self.trace().items()
            ),
        }


class BubbleEngine:
    """
    Integrates the bubble state with scipy's explicit RK45 scheme.

    Parameters
    ----------
    bubble : Bubble
        Bubble context carrying the injected DynamicsModel.
    config : SimulationConfig
        Integration configuration.
    """

    def __init__(self, bubble, config):
        self.bubble = bubble
        self.config = config

    def rhs(self, t, y):
        """Right-hand side [dU/dt, dR/dt] at (t, [U, R])."""
        self.bubble.t = t
        sol = [y[0], y[1]]
        dU = self.bubble.model.velocity_derivative(sol, t, self.bubble)
        if not math.isfinite(dU):
            raise SolverError("Non-finite wall acceleration at t={:.6e} s".format(t))
        return [dU, y[0]]

    def run(self):
        """
        Integrate from t_start to t_end.

        Returns
        -------
        BubbleResult

        Raises
        ------
        BubbleStateError
            If the model reached an invalid physical state.
        SolverError
            If the integrator failed or produced a non-finite state.
        """
        config = self.config
        bubble = self.bubble
        bubble.t = config.t_start

        started = time.perf_counter()
        try:
            solution = solve_ivp(
                self.rhs,
                (config.t_start, config.t_end),
                bubble.initial_state,
                method="RK45",
                dense_output=True,
                first_step=config.dt_initial,
                max_step=config.max_step,
                rtol=config.rtol,
                atol=config.atol,
            )
        except BubbleStateError as exc:
            log.warning("Model '%s' stopped at t=%s: %s", bubble.model.id, exc.t, exc)
            raise
        except SolverError as exc:
            log.warning("Integration of model '%s' failed: %s", bubble.model.id, exc)
            raise
        wall_time = time.perf_counter() - started

        if not solution.success:
            log.warning("Integration of model '%s' failed: %s",
                        bubble.model.id, solution.message)
            raise SolverError("Integration failed: {}".format(solution.message))

        t_out = config.output_times()
        y_out = solution.sol(t_out)
        if not np.all(np.isfinite(y_out)):
            log.warning("Integration of model '%s' produced a non-finite state",
                        bubble.model.id)
            raise SolverError("Integration produced a non-finite state")

        nsteps = len(solution.sol.ts) - 1
        log.info("Model '%s' integrated to t=%.4g s in %d steps (%d evaluations, %.3f s)",
                 bubble.model.id, config.t_end, nsteps, solution.nfev, wall_time)

        return BubbleResult(
            bubble=bubble,
            config=config,
            t=[float(v) for v in t_out],
            U=[float(v) for v in y_out[0]],
            R=[float(v) for v in y_out[1]],
            nsteps=nsteps,
            nfev=int(solution.nfev),
            wall_time=wall_time,
        )
