"""
areas.py

Output-area entities and the registry that owns them for one dataset.

An `Area` is built once from an attribute record and a decomposed
`Boundary`. Its geometry and attributes never change afterwards; the only
mutable state is the label point, which is either "not computed" or
"computed(x, y)":

- `find_centroid()` computes on first use and stores the result.
- `get_centroid()` returns the stored point if present, otherwise computes
  a fresh one without storing it.

Both use the same algorithm and tolerance, so the two paths agree.
"""
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple
import logging

import numpy as np

from oamap.centroid import DEFAULT_TOLERANCE, boundary_polygon, pole_of_inaccessibility
from oamap.config import (DEFAULT_CONFIG, ON_ERROR_ABORT, REQUIRED_FIELDS,
                          RenderConfig, check_on_error)
from oamap.errors import FieldTypeError, MapDataError, MissingFieldError
from oamap.shapes import Boundary, decompose_rings, iter_shape_records, read_polygon_rings
from oamap.utils import ProgressTimer, safe_log_exception

logger = logging.getLogger(__name__)

Coordinate = Tuple[float, float]


def read_text_field(record: Mapping[str, Any], field: str) -> str:
    """Fetch a text field from an attribute record.

    A null value reads as the empty string. A missing key raises
    `MissingFieldError`; a non-text value raises `FieldTypeError`.
    """
    if field not in record:
        raise MissingFieldError(field)
    value = record[field]
    if value is None:
        return ''
    if not isinstance(value, str):
        raise FieldTypeError(field, value)
    return value


class Area:
    """One census output area."""

    __slots__ = ('code', 'label', 'name', 'alt_name', 'boundary', 'tolerance', '_centroid')

    def __init__(self, code: str, label: str, name: str, alt_name: str, boundary: Boundary,
                 tolerance: float = DEFAULT_TOLERANCE):
        self.code = code
        self.label = label
        self.name = name
        self.alt_name = alt_name
        self.boundary = boundary
        self.tolerance = float(tolerance)
        self._centroid: Optional[Coordinate] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any], boundary: Boundary,
                    tolerance: float = DEFAULT_TOLERANCE) -> "Area":
        label, code, name, alt_name = (read_text_field(record, f) for f in REQUIRED_FIELDS)
        return cls(code=code, label=label, name=name, alt_name=alt_name,
                   boundary=boundary, tolerance=tolerance)

    def __repr__(self):
        return (f"Area(code={self.code!r}, label={self.label!r}, "
                f"holes={len(self.boundary.holes)}, centroid={self._centroid!r})")

    @property
    def has_centroid(self) -> bool:
        return self._centroid is not None

    @property
    def centroid(self) -> Optional[Coordinate]:
        """Stored label point, or None when not yet computed."""
        return self._centroid

    def find_centroid(self) -> Coordinate:
        """Return the label point, computing and storing it on first call."""
        if self._centroid is None:
            self._centroid = pole_of_inaccessibility(self.boundary, self.tolerance)
        return self._centroid

    def get_centroid(self) -> Coordinate:
        """Return the label point without storing a newly computed value."""
        if self._centroid is not None:
            return self._centroid
        return pole_of_inaccessibility(self.boundary, self.tolerance)

    def polygon(self):
        return boundary_polygon(self.boundary)


class AreaRegistry:
    """Ordered collection of the Areas loaded from one dataset."""

    def __init__(self, areas: Optional[List[Area]] = None, source: Optional[str] = None,
                 skipped: Optional[List[int]] = None):
        self.areas: List[Area] = list(areas or [])
        self.source = source
        self.skipped: List[int] = list(skipped or [])
        self._by_code: Dict[str, Area] = {}
        for area in self.areas:
            self._by_code.setdefault(area.code, area)

    def __len__(self):
        return len(self.areas)

    def __iter__(self) -> Iterator[Area]:
        return iter(self.areas)

    def __getitem__(self, i) -> Area:
        return self.areas[i]

    def get(self, code: str) -> Optional[Area]:
        return self._by_code.get(code)

    def extent(self) -> Optional[Tuple[float, float, float, float]]:
        """(min_x, min_y, max_x, max_y) over every ring, or None when empty.

        Computed on demand; nothing is tracked while loading.
        """
        if not self.areas:
            return None
        pts = np.vstack([r for a in self.areas for r in a.boundary.rings()])
        mn = pts.min(axis=0)
        mx = pts.max(axis=0)
        return float(mn[0]), float(mn[1]), float(mx[0]), float(mx[1])

    @classmethod
    def from_file(cls, path, config: RenderConfig = DEFAULT_CONFIG,
                  on_error: str = ON_ERROR_ABORT) -> "AreaRegistry":
        return load_registry(path, config=config, on_error=on_error)


def build_area(index: int, geometry: Mapping, record: Mapping[str, Any],
               tolerance: float = DEFAULT_TOLERANCE) -> Area:
    """Shape -> rings -> Boundary -> Area for one dataset record."""
    boundary = decompose_rings(read_polygon_rings(geometry, index), index)
    return Area.from_record(record, boundary, tolerance)


def load_registry(path, config: RenderConfig = DEFAULT_CONFIG,
                  on_error: str = ON_ERROR_ABORT) -> AreaRegistry:
    """Load every record of ``path`` into a new AreaRegistry.

    With ``on_error='abort'`` the first bad record raises and nothing is
    returned. With ``on_error='skip'`` bad records are logged, their
    indices kept on ``registry.skipped``, and loading continues. Errors
    opening or decoding the file itself always raise.
    """
    check_on_error(on_error)
    areas: List[Area] = []
    skipped: List[int] = []
    timer = ProgressTimer(logger, config.progress_interval)
    logger.info('Loading map data from %s...', path)
    for index, geometry, record in iter_shape_records(path):
        try:
            areas.append(build_area(index, geometry, record, config.centroid_tolerance))
        except MapDataError as e:
            if on_error == ON_ERROR_ABORT:
                raise
            safe_log_exception('Skipping record', e, log=logger, index=index, path=str(path))
            skipped.append(index)
        timer.tick(index)
    logger.info('Finished loading %d areas in %.2fs', len(areas), timer.elapsed())
    if skipped:
        logger.warning('Skipped %d invalid records', len(skipped))
    return AreaRegistry(areas, source=str(path), skipped=skipped)
