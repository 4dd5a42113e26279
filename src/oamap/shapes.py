"""
shapes.py

Reading polygon records from a vector dataset and splitting each record's
raw ring list into one exterior ring plus holes.

Any OGR-readable dataset works (ESRI Shapefile in practice, GeoJSON and
GeoPackage in tests). Records are consumed strictly in file order.

Public API:
- `Boundary` : exterior ring + tuple of hole rings, all read-only (N, 2) arrays
- `iter_shape_records(path)` -> iterator of (index, geometry, properties)
- `read_polygon_rings(geometry, index=None)` -> list of (N, 2) arrays
- `decompose_rings(rings, index=None)` -> Boundary

"""
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Sequence, Tuple
import logging

import fiona
import fiona.errors
import numpy as np

from oamap.errors import DatasetOpenError, EmptyPolygonError, MalformedRingError, UnexpectedShapeError

logger = logging.getLogger(__name__)

POLYGON_TYPES = ('Polygon', 'MultiPolygon')


def as_ring(points, index: int = None) -> np.ndarray:
    """Return ``points`` as a read-only (N, 2) float64 array (Z/M dropped)."""
    try:
        arr = np.array(points, dtype=float)
    except (TypeError, ValueError) as e:
        raise MalformedRingError(index, e) from e
    if arr.size == 0:
        arr = arr.reshape(0, 2)
    elif arr.ndim != 2 or arr.shape[1] < 2:
        raise MalformedRingError(index, 'ring must be a sequence of (x, y) points')
    arr = np.ascontiguousarray(arr[:, :2])
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Boundary:
    """One exterior ring plus zero or more interior (hole) rings."""
    exterior: np.ndarray
    holes: Tuple[np.ndarray, ...] = ()

    def __post_init__(self):
        if len(self.exterior) == 0:
            raise EmptyPolygonError()

    def rings(self) -> List[np.ndarray]:
        """All rings, exterior first."""
        return [self.exterior, *self.holes]

    def vertex_count(self) -> int:
        return sum(len(r) for r in self.rings())


def decompose_rings(rings: Sequence[Any], index: int = None) -> Boundary:
    """Split a polygon's raw ring list into a Boundary.

    A single ring is the exterior. With more than one ring, the LAST ring
    in source order is taken as the exterior and every earlier ring, in
    order, becomes a hole. Ring orientation and area are not consulted.
    """
    if len(rings) == 0:
        raise EmptyPolygonError(index)
    arrays = [as_ring(r, index) for r in rings]
    exterior = arrays.pop()
    if len(exterior) == 0:
        raise EmptyPolygonError(index)
    return Boundary(exterior, tuple(arrays))


def _geometry_parts(geometry: Mapping) -> Tuple[str, Any]:
    if geometry is None:
        return None, None
    return geometry['type'], geometry['coordinates']


def read_polygon_rings(geometry: Mapping, index: int = None) -> List[np.ndarray]:
    """Return the raw ring list of a polygon geometry, in source order.

    OGR reports a multi-part ESRI polygon record as a MultiPolygon; its
    parts are flattened back into one ring list. Any other geometry type
    (including a null geometry) raises `UnexpectedShapeError`.
    """
    geom_type, coords = _geometry_parts(geometry)
    if geom_type not in POLYGON_TYPES:
        raise UnexpectedShapeError(geom_type, index)
    if geom_type == 'Polygon':
        parts = [coords or []]
    else:
        parts = coords or []
    rings = [as_ring(ring, index) for part in parts for ring in part]
    if not rings:
        raise EmptyPolygonError(index)
    return rings


def iter_shape_records(path) -> Iterator[Tuple[int, Mapping, Dict[str, Any]]]:
    """Yield ``(index, geometry, properties)`` for each record of ``path``.

    OGR polygon reorganisation is switched off, so a shapefile record's
    rings arrive in file order (one MultiPolygon part per ring) instead of
    being sorted into exterior-first polygons.

    Failures to open or decode the dataset are raised as
    `DatasetOpenError` naming the file.
    """
    path = str(path)
    with fiona.Env(OGR_ORGANIZE_POLYGONS='SKIP'):
        try:
            src = fiona.open(path, 'r')
        except (fiona.errors.FionaError, OSError) as e:
            raise DatasetOpenError(path, e) from e

        with src:
            logger.debug('Opened %s (driver=%s, %d records)', path, src.driver, len(src))
            it = iter(src)
            index = 0
            while True:
                try:
                    feature = next(it)
                except StopIteration:
                    return
                except (fiona.errors.FionaError, OSError) as e:
                    raise DatasetOpenError(path, f'record {index}: {e}') from e
                yield index, feature['geometry'], dict(feature['properties'] or {})
                index += 1
