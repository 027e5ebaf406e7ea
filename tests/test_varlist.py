import pytest

from eddyio.varlist import IoVarList


def test_empty_list():
    registry = IoVarList()
    assert len(registry) == 0
    assert registry.first() is None
    assert registry.get("u") is None


def test_add_keeps_order():
    registry = IoVarList()
    registry.add("rho", "float", [0, 1, 2, 3], "rho-data")
    registry.add("u", "float", [0, 1, 2, 3], "u-data")
    registry.add("zPos", "float", [1, 2, 3], None)
    assert [var.name for var in registry] == ["rho", "u", "zPos"]
    assert len(registry) == 3
    assert registry.first().name == "rho"


def test_get_returns_registered_entry():
    registry = IoVarList()
    data = [1.0, 2.0]
    registry.add("theta", "float", (0, 1, 2, 3), data)
    var = registry.get("theta")
    assert var.data is data
    assert var.dimids == (0, 1, 2, 3)
    assert var.n_dims == 4
    assert registry.get("missing") is None


def test_get_returns_first_of_duplicates():
    registry = IoVarList()
    registry.add("u", "float", [0], "first")
    registry.add("u", "float", [0], "second")
    assert registry.get("u").data == "first"


def test_describe_format():
    registry = IoVarList()
    registry.add("u", "float", [0, 1, 2], None)
    registry.add("big", "float", list(range(6)), None)
    lines = registry.describe().splitlines()
    assert lines[0] == "Entry #: name, type, nDims, [dimids]:"
    assert lines[1] == "0: u, float, 3, [0 1 2]"
    assert lines[2] == "1 has nDims< 1 or nDims >5, no printing..."


def test_clear():
    registry = IoVarList()
    registry.add("u", "float", [0], None)
    registry.clear()
    assert len(registry) == 0
    assert registry.first() is None


def test_too_many_dims_rejected():
    registry = IoVarList()
    with pytest.raises(ValueError):
        registry.add("x", "float", list(range(17)), None)


def test_too_long_name_rejected():
    registry = IoVarList()
    with pytest.raises(ValueError):
        registry.add("n" * 128, "float", [0], None)
    assert len(registry) == 0