"""
config.py

Central configuration for loading and rendering. Values that used to be
compiled-in constants (canvas size, projection offsets, drawing styles)
live on one immutable ``RenderConfig`` that is handed to the projector and
the renderer, so tests can run against tiny canvases.

Defaults reproduce the England & Wales 2011 output-area grid:
- 16384 x 16384 pixel canvas
- origin at (75000, 1000) in British National Grid metres
- 45 metres per pixel
"""
from dataclasses import dataclass, replace as _replace
from typing import Optional, Tuple

# Attribute fields every output-area record must carry (text typed).
REQUIRED_FIELDS = ("label", "code", "name", "altname")

# Error policies accepted by the loader and the renderer.
ON_ERROR_ABORT = "abort"
ON_ERROR_SKIP = "skip"
ON_ERROR_CHOICES = (ON_ERROR_ABORT, ON_ERROR_SKIP)

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class RenderConfig:
    """Projection and drawing parameters for one canvas."""
    canvas_size: int = 16384            # pixels per side
    x_offset: float = 75000.0           # world units
    y_offset: float = 1000.0            # world units
    scale: float = 45.0                 # world units per pixel
    progress_interval: int = 500        # records between progress log lines
    centroid_tolerance: float = 0.1     # world units
    label_font_size: int = 20
    label_font_path: Optional[str] = None
    label_color: Color = (255, 0, 0)
    exterior_color: Color = (0, 0, 0)
    interior_color: Color = (255, 0, 0)
    background: Color = (255, 255, 255)

    def __post_init__(self):
        if int(self.canvas_size) <= 0:
            raise ValueError('canvas_size must be positive')
        if not self.scale > 0:
            raise ValueError('scale must be positive')
        if int(self.progress_interval) <= 0:
            raise ValueError('progress_interval must be positive')
        if not self.centroid_tolerance > 0:
            raise ValueError('centroid_tolerance must be positive')

    def replace(self, **overrides) -> "RenderConfig":
        return _replace(self, **overrides)


DEFAULT_CONFIG = RenderConfig()


def check_on_error(on_error: str) -> str:
    if on_error not in ON_ERROR_CHOICES:
        raise ValueError(f"on_error must be one of {ON_ERROR_CHOICES}, got {on_error!r}")
    return on_error
