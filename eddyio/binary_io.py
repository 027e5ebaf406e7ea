"""Per-rank binary output of registered variables for a single time step.

Each float variable is written as a record of native-order values:

* ``int32`` length of the name, then the name's bytes;
* ``int32`` number of dimensions (3 for volume fields, 2 otherwise);
* one ``int32`` extent per dimension, halos included;
* the field's ``float32`` values.

Variables of any other type are skipped.
"""

from __future__ import annotations

import os
import struct
from typing import Any, BinaryIO

import numpy as np

from eddyio.io_module import IoModule
from eddyio.varlist import IoVar, IoVarList

RHO_WEIGHTED = frozenset(
    {"u", "v", "w", "theta", "TKE_0", "TKE_1", "qv", "ql", "qr"}
)

_INT = struct.Struct("=i")


def _flat_view(data: Any) -> np.ndarray:
    """Return a flat float32 view of ``data`` when possible, else a flat copy."""
    if (
        isinstance(data, np.ndarray)
        and data.dtype == np.float32
        and data.flags.c_contiguous
    ):
        return data.reshape(-1)
    return np.asarray(data, dtype=np.float32).ravel()


def _is_volume(var: IoVar) -> bool:
    return var.n_dims > 2 and var.dimids[1] == 1


def _write_int(stream: BinaryIO, value: int) -> None:
    stream.write(_INT.pack(value))


def put_binary_vars(
    stream: BinaryIO, variables: IoVarList, nx: int, ny: int, nz: int, nh: int
) -> None:
    """Write every float variable in ``variables`` to ``stream``.

    Volume fields named in :data:`RHO_WEIGHTED` are divided by the ``rho``
    field in place before they are written, turning the flux-conservative
    form held in memory into the plain field.
    """
    ex, ey, ez = nx + 2 * nh, ny + 2 * nh, nz + 2 * nh
    for var in variables:
        rho = None
        if var.name in RHO_WEIGHTED:
            rho_var = variables.get("rho")
            if rho_var is None:
                raise LookupError(
                    f"cannot write {var.name!r}: no 'rho' variable is registered"
                )
            rho = rho_var.data
        if var.type != "float":
            continue

        field = _flat_view(var.data)
        if _is_volume(var):
            extents: tuple[int, ...] = (ex, ey, ez)
        else:
            extents = (ex, ey)
        num_elems = int(np.prod(extents))
        if field.size < num_elems:
            raise ValueError(
                f"variable {var.name!r} holds {field.size} values, "
                f"{num_elems} are needed"
            )

        if rho is not None and _is_volume(var):
            rho_flat = _flat_view(rho)
            if rho_flat.size < num_elems:
                raise ValueError(
                    f"'rho' holds {rho_flat.size} values, {num_elems} are needed"
                )
            part = field[:num_elems]
            with np.errstate(divide="ignore", invalid="ignore"):
                np.divide(part, rho_flat[:num_elems], out=part)

        name_bytes = var.name.encode("utf-8")
        _write_int(stream, len(name_bytes))
        stream.write(name_bytes)
        _write_int(stream, len(extents))
        for extent in extents:
            _write_int(stream, extent)
        stream.write(field[:num_elems].tobytes())


def write_binary_single_time(
    module: IoModule, tstep: int, nx: int, ny: int, nz: int, nh: int, rank: int
) -> str:
    """Write this rank's file for time step ``tstep`` and return its name.

    The name is ``<outPath><outFileBase>_rank_<rank>.<tstep>``.
    """
    settings = module.settings
    if settings.out_path is None or settings.out_file_base is None:
        raise ValueError("output path and output file base must both be set")
    file_name = f"{settings.out_path}{settings.out_file_base}_rank_{rank}.{tstep}"
    with open(file_name, "wb") as stream:
        put_binary_vars(stream, module.variables, nx, ny, nz, nh)
    return os.fspath(file_name)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise ValueError(
            f"truncated record: wanted {size} bytes, got {len(data)}"
        )
    return data


def _read_int(stream: BinaryIO) -> int:
    return _INT.unpack(_read_exact(stream, _INT.size))[0]


def read_binary_vars(stream: BinaryIO) -> dict[str, np.ndarray]:
    """Read the records written by :func:`put_binary_vars`.

    Returns the fields by name, each shaped by its stored extents.
    """
    fields: dict[str, np.ndarray] = {}
    while True:
        head = stream.read(_INT.size)
        if not head:
            return fields
        if len(head) != _INT.size:
            raise ValueError("truncated record header")
        name_len = _INT.unpack(head)[0]
        if name_len < 0:
            raise ValueError(f"invalid name length {name_len}")
        name = _read_exact(stream, name_len).decode("utf-8")
        n_dims = _read_int(stream)
        if n_dims < 1:
            raise ValueError(f"invalid dimension count {n_dims} for {name!r}")
        extents = tuple(_read_int(stream) for _ in range(n_dims))
        if any(extent < 0 for extent in extents):
            raise ValueError(f"invalid extents {extents} for {name!r}")
        count = int(np.prod(extents))
        raw = _read_exact(stream, count * 4)
        fields[name] = np.frombuffer(raw, dtype=np.float32).reshape(extents).copy()