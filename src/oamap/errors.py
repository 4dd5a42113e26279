"""
errors.py

Typed failures raised while loading and rendering output areas. Each class
also derives from the builtin a caller would naturally catch (``KeyError``
for a missing field, ``OSError`` for an unreadable file, ...), and carries
the context needed to decide between aborting and skipping.
"""
from typing import Any, Optional, Tuple


class MapDataError(Exception):
    """Base class for every load/render failure in oamap."""


class DatasetOpenError(MapDataError, OSError):
    def __init__(self, path: str, reason: Any = None):
        self.path = str(path)
        self.reason = reason
        msg = f"Unable to read dataset '{self.path}'"
        if reason is not None:
            msg += f": {reason}"
        super().__init__(msg)


class UnexpectedShapeError(MapDataError, ValueError):
    def __init__(self, shape_type: Any, index: Optional[int] = None):
        self.shape_type = shape_type
        self.index = index
        super().__init__(f"Unexpected shape: {shape_type} (record {index})")


class EmptyPolygonError(MapDataError, ValueError):
    def __init__(self, index: Optional[int] = None):
        self.index = index
        super().__init__(f"Polygon has no rings (record {index})")


class MissingFieldError(MapDataError, KeyError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field '{field}'")

    def __str__(self):
        # KeyError would otherwise repr() the message
        return self.args[0]


class FieldTypeError(MapDataError, TypeError):
    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(
            f"Unexpected field value type for {field}: {value!r} ({type(value).__name__})"
        )


class MalformedRingError(MapDataError, ValueError):
    def __init__(self, index: Optional[int] = None, reason: Any = None):
        self.index = index
        self.reason = reason
        msg = f"Malformed ring coordinates (record {index})"
        if reason is not None:
            msg += f": {reason}"
        super().__init__(msg)


class CentroidError(MapDataError, RuntimeError):
    """Raised when no label point can be computed for a polygon."""


class CoordinateOutOfBoundsError(MapDataError, ValueError):
    """A projected vertex landed outside ``[0, canvas_size]`` on one axis."""

    def __init__(self, pixel: Tuple[int, int], axis: str, bound: str, canvas_size: int,
                 world: Optional[Tuple[float, float]] = None):
        self.pixel = (int(pixel[0]), int(pixel[1]))
        self.axis = axis
        self.bound = bound
        self.canvas_size = int(canvas_size)
        self.world = world
        value = self.pixel[0] if axis == 'x' else self.pixel[1]
        size = 'big' if bound == 'max' else 'small'
        msg = f"{axis.upper()} coord is too {size}! Coord: {value} (pixel {self.pixel}"
        if world is not None:
            msg += f", world {world}"
        super().__init__(msg + f", canvas {self.canvas_size})")
