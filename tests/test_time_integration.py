import pytest

from eddyio.parameters import ParameterSet, ValueState
from eddyio.report import ParameterReport
from eddyio.time_integration import (
    SimulationClock,
    TimeSettings,
    init_clock,
    restart_step,
    time_get_params,
    time_report,
)


def _params(tmp_path, text):
    path = tmp_path / "params.in"
    path.write_text(text)
    parameters = ParameterSet()
    parameters.read_file(path)
    return parameters


def test_get_params_valid(tmp_path):
    parameters = _params(tmp_path, "timeMethod = 0\nNt = 500\ndt = 0.5\nNtBatch = 10\n")
    settings = time_get_params(parameters)
    assert settings == TimeSettings(time_method=0, nt=500, dt=0.5, nt_batch=10)
    assert parameters.error_count() == 0


def test_batch_larger_than_nt_is_invalid(tmp_path):
    parameters = _params(tmp_path, "timeMethod = 0\nNt = 5\ndt = 0.5\nNtBatch = 10\n")
    settings = time_get_params(parameters)
    assert settings.nt_batch == 1
    assert parameters.error_count() == 1
    assert parameters.lookup("NtBatch").state is ValueState.INVALID


def test_unsupported_method_is_invalid(tmp_path):
    parameters = _params(tmp_path, "timeMethod = 1\nNt = 5\ndt = 0.5\nNtBatch = 1\n")
    settings = time_get_params(parameters)
    assert settings.time_method == 0
    assert parameters.lookup("timeMethod").state is ValueState.INVALID


def test_missing_mandatory_parameters_are_errors(tmp_path):
    parameters = _params(tmp_path, "Nt = 5\n")
    settings = time_get_params(parameters)
    assert settings.dt == 1.0
    assert parameters.error_count() == 3
    assert parameters.lookup("dt").state is ValueState.ABSENT


def test_restart_step_parses_suffix():
    assert restart_step("restart.1200") == 1200


@pytest.mark.parametrize("name", ["noext", "restart.abc", "a.b.7"])
def test_restart_step_rejects_bad_names(name):
    with pytest.raises(ValueError):
        restart_step(name)


def test_init_clock_fresh_start():
    clock = init_clock(TimeSettings(), None)
    assert clock == SimulationClock(0.0, 0, 0, 2)


def test_init_clock_restart():
    clock = init_clock(TimeSettings(dt=0.5), "out.40")
    assert clock.sim_time_it == 40
    assert clock.sim_time_it_restart == 40
    assert clock.sim_time == 20.0


def test_init_clock_unknown_method_has_no_stages():
    clock = init_clock(TimeSettings(time_method=3), None)
    assert clock.num_rk_stages == 0


def test_time_report(tmp_path):
    parameters = _params(tmp_path, "timeMethod = 0\nNt = 500\ndt = 0.5\nNtBatch = 10\n")
    time_get_params(parameters)
    report = ParameterReport(parameters)
    time_report(report)
    text = report.text()
    assert text.startswith("## TIME_INTEGRATION parameters---\n")
    assert "Nt=500" in text
    assert "## Number of timesteps to perform.\n" in text