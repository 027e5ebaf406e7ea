"""Human-readable reports of the parameters a run has used."""

from __future__ import annotations

import logging
from typing import TextIO

from eddyio.parameters import ParameterSet, ValueState, ValueType

logger = logging.getLogger(__name__)

_WIDTH = 18


def _format_value(value_type: ValueType, value: object) -> str:
    if value_type in (ValueType.FLOAT, ValueType.DOUBLE):
        return f"{value:g}"
    if value_type is ValueType.INTEGER:
        return f"{int(value)}"
    return "" if value is None else str(value)


class ParameterReport:
    """Collects comment and ``name=value`` lines describing a parameter set."""

    def __init__(self, parameters: ParameterSet) -> None:
        self.parameters = parameters
        self._parts: list[str] = []

    def comment(self, text: str) -> None:
        """Append a ``## text`` line."""
        self._parts.append(f"## {text}\n")

    def parameter(self, name: str, description: str) -> None:
        """Append a line for ``name`` if it has been queried.

        Unknown names are logged and skipped; parameters never queried are
        left out of the report.
        """
        entry = self.parameters.lookup(name)
        if entry is None:
            logger.warning(
                "parameter %s was not found but was requested for printing", name
            )
            return
        if entry.state is ValueState.NOT_USED:
            return
        head = f"{name}={_format_value(entry.type, entry.value)}".ljust(_WIDTH)
        status = "" if entry.state is ValueState.VALID else f"({entry.state.label}) "
        self._parts.append(f"{head} # {status}")
        self.comment(description)

    def text(self) -> str:
        """Return everything collected so far."""
        return "".join(self._parts)

    def write(self, stream: TextIO) -> None:
        """Write the report to ``stream``, framed by blank lines."""
        stream.write(f"\n{self.text()}\n")


def unused_lines(parameters: ParameterSet) -> list[str]:
    """Return one line for each parameter that was read but never queried."""
    return [
        f"{entry.name} = {'(null)' if entry.input_str is None else entry.input_str}"
        f"   # {entry.state.label}"
        for entry in parameters.unused()
    ]