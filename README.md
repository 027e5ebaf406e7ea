# eddyio

Support pieces for a large-eddy simulation driver: a `name = value`
parameter-file reader with typed, range-checked queries and a printable
report, halo-padded field allocation, a registry of the fields a run reads
and writes, time-integration settings with restart detection, and a simple
per-rank binary output format for registered fields.

## Installation

```
pip install .
```

The package needs Python 3.10 or later and NumPy.

## Parameter files

A parameter file holds one `name = value` pair per line. Everything after a
`#` is a comment, and whitespace around names and values is trimmed. A name
given twice is counted as an error and the later line is ignored.

```
# run settings
Nt        = 2000
dt        = 0.05
NtBatch   = 10
timeMethod = 0
outPath   = ./output/
outFileBase = run
frqOutput = 100
```

Read it with `ParameterSet` (in `eddyio.parameters`) and query each value
with a default, its bounds and a `Requirement`:

```python
from eddyio.parameters import ParameterSet, Requirement

params = ParameterSet()
params.read_file("run.in")

nt = params.query_integer("Nt", 1000, 1, 2**31 - 1, Requirement.MANDATORY)
dt = params.query_float("dt", 1.0, 1e-38, 3.4e38, Requirement.MANDATORY)
base = params.query_string("outFileBase", Requirement.MANDATORY)

print(params.error_count())
```

- `query_integer`, `query_float` (single precision) and `query_double`
  return the parsed value when it lies within the bounds. Otherwise they
  return the default you pass: a missing `OPTIONAL` parameter is recorded
  as defaulted, while a missing `MANDATORY` parameter or an out-of-range
  value is counted as an error.
- `query_string` returns the text, or `None` when there is none.
- `query_file` and `query_path` also check that the named file or path
  exists; for a mandatory parameter a missing one counts as an error,
  otherwise it is only logged.
- `overwrite_integer`, `overwrite_float` and `overwrite_double` replace a
  known parameter's value; `invalidate` marks one invalid. These raise
  `ParameterError` (with an error `code`) when the name is unknown, as does
  `read_file` when the file cannot be opened.
- `entries_with_state` and `unused` list entries by `ValueState`, so
  defaulted, rejected and never-queried names are easy to spot.

Problems are logged through the standard `logging` module.

### Reporting

`ParameterReport` (in `eddyio.report`) collects the settings a run used,
with each value's state and a description. Parameters that were never
queried are left out.

```python
import sys
from eddyio.report import ParameterReport, unused_lines

report = ParameterReport(params)
report.comment("TIME_INTEGRATION parameters---")
report.parameter("Nt", "Number of timesteps to perform.")
report.parameter("dt", "timestep resolution in seconds.")
report.write(sys.stdout)

for line in unused_lines(params):
    print(line)
```

## Fields and the variable registry

`eddyio.mem_utils` allocates zero-filled NumPy `float32` arrays padded by a
halo on every spatial side (`allocate_2d_field`, `allocate_2d_field_n1d`,
`allocate_3d_field`, `allocate_4d_field`):

```python
from eddyio.mem_utils import allocate_3d_field

rho = allocate_3d_field(64, 64, 32, 3, "rho")   # shape (70, 70, 38)
```

Fields meant for output are registered by name, type and dimension ids in
an `IoVarList` (in `eddyio.varlist`); it keeps registration order, looks
entries up by name with `get`, and lists them with `describe`.

```python
from eddyio.varlist import IoVarList

variables = IoVarList()
variables.add("rho", "float", [0, 1, 2, 3], rho)
print(variables.describe())
```

`eddyio.io_module` provides `io_get_params`, which reads `ioOutputMode`,
`inPath`, `inFile`, `outPath`, `outFileBase` and `frqOutput` into an
`IoSettings`, `io_report` for the report, and `IoModule`, which pairs the
settings with a registry (`register_var`) and whole-domain work buffers
(`allocate_buffers`, `cleanup`).

## Time settings and restarts

`eddyio.time_integration.time_get_params` reads `timeMethod`, `Nt`, `dt`
and `NtBatch` into a `TimeSettings`; `time_report` adds them to a report.
`init_clock` returns a `SimulationClock` starting at zero, or, when an input
file name such as `run.4000` is given, at the step encoded after its first
`.` (see `restart_step`, which raises `ValueError` if there is none).

## Binary output

`eddyio.binary_io.put_binary_vars` writes every registered `float` field
to a binary stream; fields of other types are skipped. Each record is the
name length, the name, the number of dimensions, the halo-inclusive extents
and the values, all in native byte order. Volume fields named `u`, `v`, `w`,
`theta`, `TKE_0`, `TKE_1`, `qv`, `ql` or `qr` are divided in place by the
registered `rho` field before they are written; if any of those names is
registered without a `rho`, a `LookupError` is raised.

`write_binary_single_time` writes one rank's file for one time step, named
`<outPath><outFileBase>_rank_<rank>.<tstep>`, and returns the name.
`read_binary_vars` reads such a stream back into a dict of arrays shaped by
their stored extents.

```python
from eddyio.binary_io import read_binary_vars

with open("output/run_rank_0.100", "rb") as stream:
    fields = read_binary_vars(stream)
```

## What this package does not do

It has no command-line program and does not run a simulation. It does not
read or write NetCDF files, and it does not distribute or gather fields
between processes: the rank number for binary output is simply passed in.

## Running the tests

```
pip install ".[test]"
pytest
```