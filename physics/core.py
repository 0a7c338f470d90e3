"""
CAVIS Core Pipeline: traced evaluation of model quantities along a solution.

After the integrator has produced a radius-time history, every derived
quantity (gas pressure, wall pressure, sound speed, equilibrium radius,
laser source) is re-evaluated at the output samples through a stage.
Each stage records the equation used, the parameters supplied, all
intermediate values, and the final output series.

Classes:
    StageResult    - Immutable record of one stage's execution
    ModelStage     - Atomic computation unit with a callable equation
    PipelineRunner - Feeds (t, state) samples through ordered stages

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
"""

from collections import OrderedDict


class StageResult:
    """
    Immutable record of one pipeline stage's execution.

    Parameters
    ----------
    name : str
        Stage identifier (e.g. 'gas_pressure', 'equilibrium_radius').
    equation_label : str
        Human-readable equation string for display and traceability.
    parameters : dict
        The parameters that were passed to the equation callable.
    series : list
        Output values at each sample time.
    intermediates : dict
        Mapping of intermediate variable names to lists of per-sample
        values. For example: {"Rn": [...], "rhc": [...]}.
    """

    def __init__(self, name, equation_label, parameters, series,
                 intermediates):
        self.name = name
        self.equation_label = equation_label
        self.parameters = parameters
        self.series = series
        self.intermediates = intermediates

    def to_dict(self):
        """Serialize the full stage trace for verbose output."""
        return {
            "name": self.name,
            "equation": self.equation_label,
            "parameters": self.parameters,
            "series": self.series,
            "intermediates": self.intermediates,
        }


class ModelStage:
    """
    Atomic computation unit in the trace pipeline.

    The equation callable must have the signature:
        (sol: [U, R], t: float, bubble: Bubble, **params) -> (value, intermediates_dict)

    where value is the scalar output (e.g. pressure in Pa) and
    intermediates_dict maps variable names to their values at that sample.

    Parameters
    ----------
    name : str
        Stage identifier. Used as the key in result dictionaries.
    equation : callable
        The computation function. See signature above.
    equation_label : str
        Human-readable equation string.
    parameters : dict, optional
        Stage-specific parameters passed as **kwargs to the equation.
    """

    def __init__(self, name, equation, equation_label, parameters=None):
        self.name = name
        self.equation = equation
        self.equation_label = equation_label
        self.parameters = parameters or {}

    def process(self, times, states, bubble):
        """
        Run the equation at each (t, [U, R]) sample.

        Parameters
        ----------
        times : list of float
            Sample times in seconds.
        states : list of [float, float]
            State [U, R] at each sample time.
        bubble : Bubble
            Bubble context; its current time is set to each sample.

        Returns
        -------
        StageResult
            Complete record of the stage execution.
        """
        output_series = []
        intermed_accum = {}

        for t, sol in zip(times, states):
            bubble.t = t
            value, intermediates = self.equation(sol, t, bubble, **self.parameters)
            output_series.append(value)

            if not intermed_accum:
                for key in intermediates:
                    intermed_accum[key] = []

            for key, val in intermediates.items():
                intermed_accum[key].append(val)

        return StageResult(
            name=self.name,
            equation_label=self.equation_label,
            parameters=self.parameters,
            series=output_series,
            intermediates=intermed_accum,
        )


class PipelineRunner:
    """
    Generic traced pipeline: feed samples through ordered stages.

    Collects all StageResults into an OrderedDict keyed by stage name.
    """

    def __init__(self):
        self._stages = []

    def add_stage(self, stage):
        """
        Add a stage to the pipeline.

        Returns
        -------
        PipelineRunner
            Self, for method chaining.
        """
        self._stages.append(stage)
        return self

    @property
    def stage_names(self):
        return [stage.name for stage in self._stages]

    def run(self, times, states, bubble):
        """
        Execute all stages over the given samples.

        Returns
        -------
        OrderedDict
            Mapping of stage name to StageResult, in execution order.
        """
        results = OrderedDict()
        for stage in self._stages:
            results[stage.name] = stage.process(times, states, bubble)
        return results
