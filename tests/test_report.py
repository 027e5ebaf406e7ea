import io

import pytest

from eddyio.parameters import ParameterSet, Requirement
from eddyio.report import ParameterReport, unused_lines


@pytest.fixture
def params(tmp_path):
    path = tmp_path / "run.in"
    path.write_text("Nt = 100\ndt = 2.5\nlabel = hello\nunused = 7\n")
    parameter_set = ParameterSet()
    parameter_set.read_file(path)
    return parameter_set


def test_comment_line(params):
    report = ParameterReport(params)
    report.comment("IO parameters---")
    assert report.text() == "## IO parameters---\n"


def test_valid_integer_line_layout(params):
    params.query_integer("Nt", 1, 1, 1000, Requirement.MANDATORY)
    report = ParameterReport(params)
    report.parameter("Nt", "steps")
    line = report.text()
    assert line.startswith("Nt=100")
    assert line.index(" # ") == 18
    assert line.endswith(" # ## steps\n")
    assert "(" not in line


def test_float_uses_general_format(params):
    params.query_float("dt", 1.0, 0.0, 10.0, Requirement.MANDATORY)
    report = ParameterReport(params)
    report.parameter("dt", "step size")
    assert report.text().startswith("dt=2.5 ")


def test_string_value(params):
    params.query_string("label", Requirement.MANDATORY)
    report = ParameterReport(params)
    report.parameter("label", "a label")
    assert report.text().startswith("label=hello")


def test_defaulted_state_is_shown(params):
    params.query_integer("missing", 5, 0, 10, Requirement.OPTIONAL)
    report = ParameterReport(params)
    report.parameter("missing", "desc")
    text = report.text()
    assert text.startswith("missing=5")
    assert "(DEFAULTED) ## desc\n" in text


def test_absent_mandatory_shows_marker(params):
    params.query_integer("needed", 5, 0, 10, Requirement.MANDATORY)
    report = ParameterReport(params)
    report.parameter("needed", "desc")
    text = report.text()
    assert text.startswith("needed=??")
    assert "(ABSENT) " in text


def test_unqueried_and_unknown_are_skipped(params):
    report = ParameterReport(params)
    report.parameter("unused", "never queried")
    report.parameter("nosuch", "unknown")
    assert report.text() == ""


def test_write_frames_text(params):
    report = ParameterReport(params)
    report.comment("x")
    stream = io.StringIO()
    report.write(stream)
    assert stream.getvalue() == "\n" + report.text() + "\n"


def test_unused_lines(params):
    params.query_integer("Nt", 1, 1, 1000, Requirement.MANDATORY)
    params.query_float("dt", 1.0, 0.0, 10.0, Requirement.MANDATORY)
    params.query_string("label", Requirement.MANDATORY)
    assert unused_lines(params) == ["unused = 7   # NOT VALIDATED"]