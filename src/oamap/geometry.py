"""
geometry.py

Conversions between world coordinates (British National Grid metres by
default) and pixel (x, y) positions on the square output canvas.

The forward map is the plain affine floor transform

    pixel_x = floor((x - x_offset) / scale)
    pixel_y = S - floor((y - y_offset) / scale)

with no clamping: out-of-canvas results are returned as-is and caught by
`check_bounds`.

Public functions:
- `world_to_pixel(x, y, config)` -> (px, py)
- `project_coords(coords, config)` -> (N, 2) int array
- `pixel_to_world(px, py, config)` -> (x, y)
- `pixel_transform(config)` -> `affine.Affine` mapping pixel -> world
- `check_bounds(pixels, config, world=None)`

"""
from typing import Optional, Tuple
import math

import numpy as np
from affine import Affine

from oamap.config import RenderConfig, DEFAULT_CONFIG
from oamap.errors import CoordinateOutOfBoundsError


def world_to_pixel(x: float, y: float, config: RenderConfig = DEFAULT_CONFIG) -> Tuple[int, int]:
    """Project a single world coordinate onto the canvas grid."""
    px = math.floor((float(x) - config.x_offset) / config.scale)
    py = config.canvas_size - math.floor((float(y) - config.y_offset) / config.scale)
    return int(px), int(py)


def project_coords(coords, config: RenderConfig = DEFAULT_CONFIG) -> np.ndarray:
    """Vectorised `world_to_pixel` for an (N, 2) array of coordinates.

    Returns an (N, 2) int64 array of (px, py). Uses the same float64
    arithmetic as the scalar version, so both agree exactly.
    """
    c = np.asarray(coords, dtype=float)
    if c.size == 0:
        return np.empty((0, 2), dtype=np.int64)
    if c.ndim != 2 or c.shape[1] < 2:
        raise ValueError('coords must be shape (N,2)')
    out = np.empty((c.shape[0], 2), dtype=np.int64)
    out[:, 0] = np.floor((c[:, 0] - config.x_offset) / config.scale)
    out[:, 1] = config.canvas_size - np.floor((c[:, 1] - config.y_offset) / config.scale)
    return out


def pixel_transform(config: RenderConfig = DEFAULT_CONFIG) -> Affine:
    """Affine taking pixel (px, py) to the world coordinate of its lower-left corner."""
    top = config.y_offset + config.canvas_size * config.scale
    return Affine(config.scale, 0.0, config.x_offset, 0.0, -config.scale, top)


def pixel_to_world(px, py, config: RenderConfig = DEFAULT_CONFIG) -> Tuple[float, float]:
    """Inverse of `world_to_pixel` on grid points.

    `world_to_pixel(*pixel_to_world(px, py))` returns (px, py) for any
    integer pixel.
    """
    x, y = pixel_transform(config) * (float(px), float(py))
    return float(x), float(y)


def check_bounds(pixels, config: RenderConfig = DEFAULT_CONFIG, world=None) -> None:
    """Raise `CoordinateOutOfBoundsError` for the first pixel outside [0, S].

    Parameters:
    - pixels: (N, 2) int array from `project_coords` (or a single (px, py))
    - world: optional matching (N, 2) world coordinates, used in the message

    Checks run in the order x > S, y > S, x < 0, y < 0 for each vertex.
    """
    p = np.asarray(pixels, dtype=np.int64).reshape(-1, 2)
    if p.shape[0] == 0:
        return
    size = config.canvas_size
    bad = (p[:, 0] > size) | (p[:, 1] > size) | (p[:, 0] < 0) | (p[:, 1] < 0)
    if not bad.any():
        return
    i = int(np.argmax(bad))
    px, py = int(p[i, 0]), int(p[i, 1])
    w: Optional[Tuple[float, float]] = None
    if world is not None:
        wa = np.asarray(world, dtype=float).reshape(-1, 2)
        w = (float(wa[i, 0]), float(wa[i, 1]))
    if px > size:
        axis, bound = 'x', 'max'
    elif py > size:
        axis, bound = 'y', 'max'
    elif px < 0:
        axis, bound = 'x', 'min'
    else:
        axis, bound = 'y', 'min'
    raise CoordinateOutOfBoundsError((px, py), axis, bound, size, world=w)
