"""Ordered registry of variables that take part in input and output."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

MAX_DIMS = 16
MAX_NAME_LENGTH = 128
MAX_TYPE_LENGTH = 16


@dataclass
class IoVar:
    """A registered variable: its name, element type, dimension ids and data."""

    name: str
    type: str
    dimids: tuple[int, ...]
    data: Any = None
    ncvarid: int | None = field(default=None, compare=False)

    @property
    def n_dims(self) -> int:
        """Number of dimensions."""
        return len(self.dimids)


class IoVarList:
    """Variables kept in the order they were registered."""

    def __init__(self) -> None:
        self._vars: list[IoVar] = []

    def add(self, name: str, type: str, dimids: Sequence[int], data: Any) -> IoVar:
        """Register a variable and return its entry."""
        if len(name) >= MAX_NAME_LENGTH:
            raise ValueError(f"variable name {name!r} is too long")
        if len(type) >= MAX_TYPE_LENGTH:
            raise ValueError(f"variable type {type!r} is too long")
        dims = tuple(int(d) for d in dimids)
        if len(dims) > MAX_DIMS:
            raise ValueError(f"variable {name!r} has more than {MAX_DIMS} dimensions")
        var = IoVar(name, type, dims, data)
        self._vars.append(var)
        return var

    def first(self) -> IoVar | None:
        """Return the earliest registered variable, or None."""
        return self._vars[0] if self._vars else None

    def get(self, name: str) -> IoVar | None:
        """Return the first variable called ``name``, or None."""
        return next((var for var in self._vars if var.name == name), None)

    def describe(self) -> str:
        """Return a listing of every entry, one line each."""
        lines = ["Entry #: name, type, nDims, [dimids]:"]
        for index, var in enumerate(self._vars):
            if 1 <= var.n_dims <= 5:
                dims = " ".join(str(d) for d in var.dimids)
                lines.append(f"{index}: {var.name}, {var.type}, {var.n_dims}, [{dims}]")
            else:
                lines.append(f"{index} has nDims< 1 or nDims >5, no printing...")
        return "\n".join(lines) + "\n"

    def clear(self) -> None:
        """Remove every variable."""
        self._vars.clear()

    def __iter__(self) -> Iterator[IoVar]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)