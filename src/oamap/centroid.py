"""
centroid.py

Label anchor points for output areas.

The anchor is the pole of inaccessibility: the interior point furthest
from any edge of the polygon (holes included), found to within a distance
tolerance by `shapely.ops.polylabel`. Unlike the area centroid it always
lies inside the polygon, even for C-shaped or holed areas.
"""
from typing import Tuple
import logging
import math

from shapely.errors import ShapelyError
from shapely.geometry import Polygon
from shapely.ops import polylabel

from oamap.errors import CentroidError
from oamap.shapes import Boundary

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.1


def boundary_polygon(boundary: Boundary) -> Polygon:
    """Build a shapely Polygon from a Boundary."""
    return Polygon(boundary.exterior, [h for h in boundary.holes])


def pole_of_inaccessibility(boundary: Boundary, tolerance: float = DEFAULT_TOLERANCE) -> Tuple[float, float]:
    """Return (x, y) of the polygon's pole of inaccessibility.

    Raises `CentroidError` when shapely cannot build the polygon or the
    search returns no usable point.
    """
    try:
        point = polylabel(boundary_polygon(boundary), tolerance=tolerance)
    except (ShapelyError, ValueError) as e:
        raise CentroidError(f'Unable to compute label point: {e}') from e
    if point.is_empty or not (math.isfinite(point.x) and math.isfinite(point.y)):
        raise CentroidError('Unable to compute label point: empty result')
    return float(point.x), float(point.y)
