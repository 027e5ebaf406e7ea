"""Zero-initialised float32 field allocation with halo padding."""

from __future__ import annotations

import numpy as np


def _allocate(shape: tuple[int, ...], field_name: str) -> np.ndarray:
    if any(extent < 0 for extent in shape):
        raise ValueError(
            f"cannot allocate field {field_name!r} with negative extent {shape}"
        )
    return np.zeros(shape, dtype=np.float32)


def allocate_2d_field(i_n: int, j_n: int, halo_extent: int, field_name: str) -> np.ndarray:
    """Allocate a zeroed (i_n+2h, j_n+2h) field."""
    pad = 2 * halo_extent
    return _allocate((i_n + pad, j_n + pad), field_name)


def allocate_2d_field_n1d(n_n: int, k_n: int, halo_extent: int, field_name: str) -> np.ndarray:
    """Allocate ``n_n`` zeroed one-dimensional vectors of length k_n+2h."""
    return _allocate((n_n, k_n + 2 * halo_extent), field_name)


def allocate_3d_field(
    i_n: int, j_n: int, k_n: int, halo_extent: int, field_name: str
) -> np.ndarray:
    """Allocate a zeroed (i_n+2h, j_n+2h, k_n+2h) field."""
    pad = 2 * halo_extent
    return _allocate((i_n + pad, j_n + pad, k_n + pad), field_name)


def allocate_4d_field(
    n_fields: int, i_n: int, j_n: int, k_n: int, halo_extent: int, field_name: str
) -> np.ndarray:
    """Allocate a zeroed block of ``n_fields`` halo-padded 3-D fields."""
    pad = 2 * halo_extent
    return _allocate((n_fields, i_n + pad, j_n + pad, k_n + pad), field_name)