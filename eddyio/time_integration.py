"""Time-integration settings and the master simulation clock."""

from __future__ import annotations

import re
from dataclasses import dataclass

import numpy as np

from eddyio.parameters import ParameterSet, Requirement
from eddyio.report import ParameterReport

INT_MAX = 2**31 - 1
FLT_MIN = float(np.finfo(np.float32).tiny)
FLT_MAX = float(np.finfo(np.float32).max)

_RK_STAGES = {0: 2}
_STEP_RE = re.compile(r"\s*([+-]?\d+)")


@dataclass
class TimeSettings:
    """Parameters controlling time integration."""

    time_method: int = 0
    nt: int = 1000
    dt: float = 1.0
    nt_batch: int = 1


@dataclass
class SimulationClock:
    """Master simulation time and time-step counters."""

    sim_time: float = 0.0
    sim_time_it: int = 0
    sim_time_it_restart: int = 0
    num_rk_stages: int = 0


def time_get_params(parameters: ParameterSet) -> TimeSettings:
    """Query the time-integration parameters from ``parameters``."""
    time_method = parameters.query_integer("timeMethod", 0, 0, 0, Requirement.MANDATORY)
    nt = parameters.query_integer("Nt", 1000, 1, INT_MAX, Requirement.MANDATORY)
    dt = parameters.query_float("dt", 1.0, FLT_MIN, FLT_MAX, Requirement.MANDATORY)
    nt_batch = parameters.query_integer("NtBatch", 1, 1, nt, Requirement.MANDATORY)
    return TimeSettings(time_method=time_method, nt=nt, dt=dt, nt_batch=nt_batch)


def time_report(report: ParameterReport) -> None:
    """Add the time-integration parameters to ``report``."""
    report.comment("TIME_INTEGRATION parameters---")
    report.parameter(
        "timeMethod", "Selector for time integration method. [0=RK3-WS2002 (default)]"
    )
    report.parameter("Nt", "Number of timesteps to perform.")
    report.parameter("dt", "timestep resolution in seconds.")
    report.parameter(
        "NtBatch",
        "Number of timesteps to compute in batch launch, must have NtBatch <= Nt.",
    )


def restart_step(in_file: str) -> int:
    """Return the time step encoded after the first ``.`` of ``in_file``."""
    _, dot, suffix = in_file.partition(".")
    if not dot:
        raise ValueError(f"input file name {in_file!r} has no time-step suffix")
    match = _STEP_RE.match(suffix)
    if match is None:
        raise ValueError(f"input file name {in_file!r} has no integer time-step suffix")
    return int(match.group(1))


def init_clock(settings: TimeSettings, in_file: str | None) -> SimulationClock:
    """Start the clock at zero, or at the step of a restart file when given.

    An unknown time method leaves the number of Runge-Kutta stages at 0.
    """
    stages = _RK_STAGES.get(settings.time_method, 0)
    if in_file is None:
        return SimulationClock(num_rk_stages=stages)
    step = restart_step(in_file)
    sim_time = float(np.float32(settings.dt) * np.float32(step))
    return SimulationClock(
        sim_time=sim_time,
        sim_time_it=step,
        sim_time_it_restart=step,
        num_rk_stages=stages,
    )