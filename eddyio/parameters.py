"""Parameter files of ``name = value`` lines, with typed, range-checked queries.

Problems found while reading or querying are counted rather than raised, so
that every parameter can be checked in one pass and the caller can inspect
:meth:`ParameterSet.error_count` at the end. Operations on a parameter that
must already exist (overwriting, invalidating) raise :class:`ParameterError`.
"""

from __future__ import annotations

import enum
import logging
import math
import os
import re
import struct
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any, TypeVar

from eddyio.hashtable import HashTable, str_trim

logger = logging.getLogger(__name__)

ERROR_FILE_NOT_FOUND = 201
ERROR_PATH_NOT_FOUND = 202
ERROR_INVALID_FLOAT = 203
ERROR_INVALID_DOUBLE = 204
ERROR_INVALID_INTEGER = 205
ERROR_ABSENT = 206
ERROR_DUPLICATE = 207
ERROR_OVERWRITE_FAILED = 208

_MAX_LINE = 256
_LARGE_TABLE = 10000
_MISSING_MARK = "??"

_FLOAT_RE = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INT_RE = re.compile(r"\s*([+-]?\d+)")

_N = TypeVar("_N", int, float)


class ValueType(enum.IntEnum):
    """How a parameter's value has been interpreted."""

    UNKNOWN = 0
    INTEGER = 1
    FLOAT = 2
    DOUBLE = 3
    STRING = 4
    FILE = 5
    PATH = 6


class ValueState(enum.IntEnum):
    """Validation state of a parameter."""

    NOT_USED = 0
    VALID = 1
    INVALID = 2
    DEFAULTED = 3
    ABSENT = 4
    OVERWRITTEN = 5

    @property
    def label(self) -> str:
        """Text used for this state in parameter reports."""
        return _STATE_LABELS[self]


_STATE_LABELS = {
    ValueState.NOT_USED: "NOT VALIDATED",
    ValueState.VALID: "IN VALUE",
    ValueState.INVALID: "INVALID",
    ValueState.DEFAULTED: "DEFAULTED",
    ValueState.ABSENT: "ABSENT",
    ValueState.OVERWRITTEN: "OVERWRITTEN",
}


class Requirement(enum.IntEnum):
    """Whether a queried parameter must be present."""

    NOT_REQUIRED = 0
    OPTIONAL = 1
    MANDATORY = 2


class ParameterError(Exception):
    """A parameter problem, carrying one of the module's ``ERROR_*`` codes."""

    def __init__(self, message: str, code: int) -> None:
        super().__init__(message)
        self.code = code


@dataclass
class ParameterEntry:
    """One named parameter: its raw text and its interpreted value."""

    name: str
    input_str: str | None
    value: Any = None
    type: ValueType = ValueType.UNKNOWN
    state: ValueState = ValueState.NOT_USED


def _to_float32(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _parse_double(text: str | None) -> float | None:
    if text is None:
        return None
    match = _FLOAT_RE.match(text)
    return float(match.group(1)) if match else None


def _parse_float32(text: str | None) -> float | None:
    value = _parse_double(text)
    return None if value is None else _to_float32(value)


def _parse_int(text: str | None) -> int | None:
    if text is None:
        return None
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else None


def _line_chunks(lines: Iterable[str]) -> Iterator[str]:
    """Yield lines split into pieces no longer than a fixed read buffer."""
    limit = _MAX_LINE - 1
    for line in lines:
        while len(line) > limit:
            yield line[:limit]
            line = line[limit:]
        if line:
            yield line


class ParameterSet:
    """The set of parameters read from a parameter file."""

    def __init__(self) -> None:
        self._table = HashTable(1)
        self._error_count = 0

    def _error(self, message: str, code: int) -> ParameterError:
        self._error_count += 1
        logger.error(message)
        return ParameterError(message, code)

    def read_file(self, path: str | os.PathLike[str]) -> None:
        """Read ``name = value`` lines from ``path``; ``#`` starts a comment."""
        try:
            with open(path, encoding="utf-8", errors="replace", newline="\n") as handle:
                chunks = list(_line_chunks(handle))
        except OSError as exc:
            raise self._error(
                f"failed to open parameters file {os.fspath(path)}", ERROR_FILE_NOT_FOUND
            ) from exc
        logger.info("read %d lines from %s", len(chunks), os.fspath(path))

        size = len(chunks) * len(chunks)
        if size > _LARGE_TABLE:
            logger.warning(
                "more than %d entries were requested for the parameters table", _LARGE_TABLE
            )
        self._table = HashTable(max(size, 1))

        for chunk in chunks:
            text = chunk.split("#", 1)[0]
            name, separator, raw_value = text.partition("=")
            name = str_trim(name)
            if not name:
                continue
            value = str_trim(raw_value) if separator else ""
            if name in self._table:
                self._error(f"duplicate entries for parameter name--{name}", ERROR_DUPLICATE)
                continue
            self._table.add(name, ParameterEntry(name, value or None))

    def lookup(self, name: str) -> ParameterEntry | None:
        """Return the entry for ``name``, or None when it is unknown."""
        return self._table.lookup(name)

    def _create_missing(self, name: str) -> ParameterEntry:
        entry = ParameterEntry(name, None)
        self._table.add(name, entry)
        return entry

    def _mark_absent(self, entry: ParameterEntry) -> None:
        entry.type = ValueType.STRING
        entry.value = _MISSING_MARK
        entry.state = ValueState.ABSENT
        self._error(f"mandatory parameter {entry.name} has not been specified", ERROR_ABSENT)

    def _query_number(
        self,
        name: str,
        default: _N,
        minimum: _N,
        maximum: _N,
        requirement: Requirement | int,
        value_type: ValueType,
        parse: Callable[[str | None], _N | None],
        invalid_code: int,
    ) -> _N:
        requirement = Requirement(requirement)
        entry = self.lookup(name)
        if entry is None:
            if requirement is Requirement.NOT_REQUIRED:
                return default
            entry = self._create_missing(name)
            if requirement is Requirement.OPTIONAL:
                entry.type = value_type
                entry.value = default
                entry.state = ValueState.DEFAULTED
                logger.warning("optional parameter %s defaulted to %s", name, default)
            else:
                self._mark_absent(entry)
            return default

        value = parse(entry.input_str)
        entry.type = value_type
        if value is None or value < minimum or value > maximum:
            entry.state = ValueState.INVALID
            self._error(
                f"parameter '{name}' value {entry.input_str} is outside limits "
                f"[{minimum},{maximum}]",
                invalid_code,
            )
            return default
        entry.value = value
        entry.state = ValueState.VALID
        return value

    def query_float(
        self,
        name: str,
        default: float,
        minimum: float,
        maximum: float,
        requirement: Requirement | int,
    ) -> float:
        """Return ``name`` as a single-precision float within [minimum, maximum]."""
        return self._query_number(
            name,
            _to_float32(default),
            _to_float32(minimum),
            _to_float32(maximum),
            requirement,
            ValueType.FLOAT,
            _parse_float32,
            ERROR_INVALID_FLOAT,
        )

    def query_double(
        self,
        name: str,
        default: float,
        minimum: float,
        maximum: float,
        requirement: Requirement | int,
    ) -> float:
        """Return ``name`` as a double-precision float within [minimum, maximum]."""
        return self._query_number(
            name,
            float(default),
            float(minimum),
            float(maximum),
            requirement,
            ValueType.DOUBLE,
            _parse_double,
            ERROR_INVALID_DOUBLE,
        )

    def query_integer(
        self,
        name: str,
        default: int,
        minimum: int,
        maximum: int,
        requirement: Requirement | int,
    ) -> int:
        """Return ``name`` as an integer within [minimum, maximum]."""
        return self._query_number(
            name,
            int(default),
            int(minimum),
            int(maximum),
            requirement,
            ValueType.INTEGER,
            _parse_int,
            ERROR_INVALID_INTEGER,
        )

    def _query_string(
        self, name: str, requirement: Requirement | int
    ) -> tuple[str | None, bool]:
        requirement = Requirement(requirement)
        entry = self.lookup(name)
        if entry is None:
            if requirement is Requirement.NOT_REQUIRED:
                return None, False
            entry = self._create_missing(name)
            if requirement is Requirement.OPTIONAL:
                entry.type = ValueType.STRING
                entry.value = None
                entry.state = ValueState.DEFAULTED
                logger.warning("optional parameter %s defaulted to None", name)
                return None, False
            self._mark_absent(entry)
            return None, True

        entry.type = ValueType.STRING
        entry.value = entry.input_str
        entry.state = ValueState.VALID
        if entry.input_str is None and requirement is Requirement.MANDATORY:
            entry.state = ValueState.ABSENT
            self._error(f"mandatory parameter {name} has not been specified", ERROR_ABSENT)
            return None, True
        return entry.input_str, False

    def query_string(self, name: str, requirement: Requirement | int) -> str | None:
        """Return the text of ``name``, or None when it has no value."""
        return self._query_string(name, requirement)[0]

    def _query_existing(
        self,
        name: str,
        requirement: Requirement | int,
        value_type: ValueType,
        kind: str,
        code: int,
    ) -> str | None:
        value, absent = self._query_string(name, requirement)
        if absent:
            return value
        entry = self.lookup(name)
        if entry is None:
            return value
        entry.type = value_type
        if entry.value is not None:
            try:
                os.stat(entry.value)
            except FileNotFoundError:
                if Requirement(requirement) is Requirement.MANDATORY:
                    entry.state = ValueState.INVALID
                    self._error(f"could not find {kind} {entry.value}", code)
                else:
                    logger.warning("could not find %s %s", kind, entry.value)
            except OSError:
                pass
        return value

    def query_file(self, name: str, requirement: Requirement | int) -> str | None:
        """Return ``name`` as a file name, checking that the file exists."""
        return self._query_existing(
            name, requirement, ValueType.FILE, "file", ERROR_FILE_NOT_FOUND
        )

    def query_path(self, name: str, requirement: Requirement | int) -> str | None:
        """Return ``name`` as a path, checking that the path exists."""
        return self._query_existing(
            name, requirement, ValueType.PATH, "path", ERROR_PATH_NOT_FOUND
        )

    def _overwrite(self, name: str, value: Any) -> Any:
        entry = self.lookup(name)
        if entry is None:
            raise self._error(
                f"could not overwrite parameter {name} since it was not found",
                ERROR_OVERWRITE_FAILED,
            )
        logger.warning(
            "parameter %s, value = %s overwritten with value = %s", name, entry.value, value
        )
        entry.value = value
        entry.state = ValueState.OVERWRITTEN
        return value

    def overwrite_float(self, name: str, value: float) -> float:
        """Replace the value of ``name`` with a single-precision float."""
        return self._overwrite(name, _to_float32(value))

    def overwrite_double(self, name: str, value: float) -> float:
        """Replace the value of ``name`` with a double-precision float."""
        return self._overwrite(name, float(value))

    def overwrite_integer(self, name: str, value: int) -> int:
        """Replace the value of ``name`` with an integer."""
        return self._overwrite(name, int(value))

    def invalidate(self, name: str) -> None:
        """Mark ``name`` invalid; this counts as an error."""
        entry = self.lookup(name)
        if entry is None:
            raise self._error(
                f"could not invalidate parameter {name} since it was not found", ERROR_ABSENT
            )
        entry.state = ValueState.INVALID
        self._error_count += 1
        logger.error("parameter %s invalidated", name)

    def entries_with_state(self, state: ValueState | int) -> list[ParameterEntry]:
        """Return every entry currently in ``state``."""
        wanted = ValueState(state)
        entries = (self._table.lookup(name) for name in self._table)
        return [entry for entry in entries if entry.state is wanted]

    def unused(self) -> list[ParameterEntry]:
        """Return the entries that were read but never queried."""
        return self.entries_with_state(ValueState.NOT_USED)

    def error_count(self) -> int:
        """Return the number of errors recorded so far."""
        return self._error_count