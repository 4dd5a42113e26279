"""
rendering.py

Rasterise an AreaRegistry onto a square Pillow canvas.

For every area, in registry order:
- optionally draw its label text anchored at the projected label point;
- mark every exterior-ring vertex with one pixel (exterior colour);
- mark every hole vertex with one pixel (interior colour).

All of an area's points are projected and bounds-checked before any of
them is drawn. A point outside [0, S] on either axis raises
`CoordinateOutOfBoundsError` (or skips the area under ``on_error='skip'``).
The canvas is handed to the sink exactly once, after the last area.
"""
from typing import Callable, List, Optional
import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from oamap.areas import Area, AreaRegistry
from oamap.config import DEFAULT_CONFIG, ON_ERROR_ABORT, RenderConfig, check_on_error
from oamap.errors import MapDataError
from oamap.geometry import check_bounds, project_coords, world_to_pixel
from oamap.utils import ProgressTimer, safe_log_exception

logger = logging.getLogger(__name__)

Sink = Callable[[Image.Image], None]


def load_label_font(config: RenderConfig):
    if config.label_font_path:
        return ImageFont.truetype(config.label_font_path, config.label_font_size)
    return ImageFont.load_default(size=config.label_font_size)


class MapRenderer:
    """Draws output-area vertex outlines (and labels) for one RenderConfig."""

    def __init__(self, config: RenderConfig = DEFAULT_CONFIG):
        self.config = config
        self._font = None

    @property
    def font(self):
        if self._font is None:
            self._font = load_label_font(self.config)
        return self._font

    def new_canvas(self) -> Image.Image:
        size = self.config.canvas_size
        return Image.new('RGB', (size, size), self.config.background)

    def _project_area(self, area: Area, show_labels: bool, cache_centroids: bool):
        """Project and bounds-check everything drawn for one area."""
        cfg = self.config
        anchor = None
        if show_labels:
            centre = area.find_centroid() if cache_centroids else area.get_centroid()
            anchor = world_to_pixel(centre[0], centre[1], cfg)
            check_bounds(anchor, cfg, world=centre)
        exterior = project_coords(area.boundary.exterior, cfg)
        check_bounds(exterior, cfg, world=area.boundary.exterior)
        holes: List[np.ndarray] = []
        for ring in area.boundary.holes:
            pixels = project_coords(ring, cfg)
            check_bounds(pixels, cfg, world=ring)
            holes.append(pixels)
        return anchor, exterior, holes

    def draw_area(self, draw: ImageDraw.ImageDraw, area: Area, show_labels: bool = False,
                  cache_centroids: bool = True) -> None:
        anchor, exterior, holes = self._project_area(area, show_labels, cache_centroids)
        if anchor is not None:
            draw.text(anchor, area.label, fill=self.config.label_color, font=self.font)
        draw.point([tuple(p) for p in exterior.tolist()], fill=self.config.exterior_color)
        for pixels in holes:
            if len(pixels) == 0:
                continue
            draw.point([tuple(p) for p in pixels.tolist()], fill=self.config.interior_color)

    def draw(self, registry: AreaRegistry, canvas: Image.Image, show_labels: bool = False,
             sink: Optional[Sink] = None, on_error: str = ON_ERROR_ABORT,
             cache_centroids: bool = True) -> Image.Image:
        """Draw every area of ``registry`` onto ``canvas`` and flush it once.

        ``cache_centroids`` selects the storing label-point accessor; with
        False the registry is left untouched. Returns the canvas.
        """
        check_on_error(on_error)
        draw = ImageDraw.Draw(canvas)
        timer = ProgressTimer(logger, self.config.progress_interval)
        logger.info('Drawing output areas on map...')
        skipped = 0
        for index, area in enumerate(registry):
            try:
                self.draw_area(draw, area, show_labels, cache_centroids)
            except MapDataError as e:
                if on_error == ON_ERROR_ABORT:
                    raise
                safe_log_exception('Skipping area', e, log=logger, index=index, code=area.code)
                skipped += 1
            timer.tick(index)
        if sink is not None:
            sink(canvas)
        logger.info('Finished drawing in %.2fs', timer.elapsed())
        if skipped:
            logger.warning('Skipped %d areas while drawing', skipped)
        return canvas

    def draw_with_labels(self, registry: AreaRegistry, canvas: Image.Image,
                         sink: Optional[Sink] = None, **kwargs) -> Image.Image:
        return self.draw(registry, canvas, show_labels=True, sink=sink, **kwargs)

    def render_to_file(self, registry: AreaRegistry, path, show_labels: bool = False,
                       on_error: str = ON_ERROR_ABORT) -> Path:
        """Render onto a fresh canvas and write it to ``path`` (PNG unless the suffix says otherwise)."""
        path = Path(path)
        fmt = None if path.suffix else 'PNG'
        canvas = self.new_canvas()
        self.draw(registry, canvas, show_labels=show_labels, on_error=on_error,
                  sink=lambda img: img.save(path, format=fmt))
        return path
