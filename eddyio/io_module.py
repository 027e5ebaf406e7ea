"""Settings, variable registry and work buffers of the input/output module."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from eddyio.parameters import ParameterSet, Requirement
from eddyio.report import ParameterReport
from eddyio.varlist import IoVar, IoVarList

INT_MAX = 2**31 - 1


@dataclass
class IoSettings:
    """Parameters of the input/output module."""

    output_mode: int = 0
    in_path: str | None = None
    in_file: str | None = None
    out_path: str | None = None
    out_file_base: str | None = None
    frq_output: int = 0


def io_get_params(parameters: ParameterSet) -> IoSettings:
    """Query the input/output parameters from ``parameters``."""
    output_mode = parameters.query_integer("ioOutputMode", 0, 0, 1, Requirement.OPTIONAL)
    in_path = parameters.query_path("inPath", Requirement.OPTIONAL)
    in_file = parameters.query_string("inFile", Requirement.OPTIONAL)
    out_path = parameters.query_path("outPath", Requirement.MANDATORY)
    out_file_base = parameters.query_string("outFileBase", Requirement.MANDATORY)
    frq_output = parameters.query_integer("frqOutput", 0, 0, INT_MAX, Requirement.MANDATORY)
    return IoSettings(
        output_mode=output_mode,
        in_path=in_path,
        in_file=in_file,
        out_path=out_path,
        out_file_base=out_file_base,
        frq_output=frq_output,
    )


def io_report(report: ParameterReport) -> None:
    """Add the input/output parameters to ``report``."""
    report.comment("IO parameters---")
    report.parameter(
        "ioOutputMode",
        "0: N-to-1 gather and write to a netcdf file, 1:N-to-N writes of FastEddy binary files",
    )
    report.parameter("inPath", "Path where initial/restart file is read in from")
    report.parameter(
        "inFile",
        "name of the input file for coordinate system and initial or restart conditions",
    )
    report.parameter("outPath", "Path where output files are to be written")
    report.parameter(
        "outFileBase",
        "Base name of the output file series as in (outFileBase).element-in-series",
    )
    report.parameter("frqOutput", "frequency (in timesteps) at which to produce output")


class IoModule:
    """Holds the registered variables and the global-domain work buffers."""

    def __init__(self, settings: IoSettings) -> None:
        self.settings = settings
        self.variables = IoVarList()
        self.field_buffer: np.ndarray | None = None
        self.transposed_buffer: np.ndarray | None = None
        self.rho_buffer: np.ndarray | None = None
        self.transposed_2d_buffer: np.ndarray | None = None

    def register_var(
        self, name: str, type: str, dimids: Sequence[int], data: Any
    ) -> IoVar:
        """Register a variable for reading and writing.

        Dimension ids follow the order (time), z, y, x of the output files.
        """
        return self.variables.add(name, type, dimids, data)

    def allocate_buffers(self, global_nx: int, global_ny: int, global_nz: int) -> None:
        """Allocate flat float32 buffers sized for the whole domain."""
        if min(global_nx, global_ny, global_nz) < 0:
            raise ValueError("domain extents must not be negative")
        num_elems = global_nx * global_ny * global_nz
        num_elems_2d = global_nx * global_ny
        self.field_buffer = np.zeros(num_elems, dtype=np.float32)
        self.transposed_buffer = np.zeros(num_elems, dtype=np.float32)
        self.rho_buffer = np.zeros(num_elems, dtype=np.float32)
        self.transposed_2d_buffer = np.zeros(num_elems_2d, dtype=np.float32)

    def cleanup(self) -> None:
        """Release the buffers and forget every registered variable."""
        self.field_buffer = None
        self.transposed_buffer = None
        self.rho_buffer = None
        self.transposed_2d_buffer = None
        self.variables.clear()