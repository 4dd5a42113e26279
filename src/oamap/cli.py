"""
cli.py

Command line entry point: load an output-area dataset and render it.

    oamap-render census_map_areas/England_wa_2011/england_wa_2011.shp -o grid.png
"""
import argparse
import logging
import sys

from oamap.areas import load_registry
from oamap.config import DEFAULT_CONFIG, ON_ERROR_ABORT, ON_ERROR_SKIP, RenderConfig
from oamap.errors import MapDataError
from oamap.rendering import MapRenderer

log = logging.getLogger("oamap")


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        log.addHandler(h)
    log.setLevel(level)
    for name in ('fiona', 'shapely', 'PIL'):
        logging.getLogger(name).setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog='oamap-render',
        description='Render census output-area boundaries to a bitmap.')
    p.add_argument('dataset', help='polygon dataset (e.g. an ESRI shapefile)')
    p.add_argument('-o', '--output', default='grid.png', help='output image path')
    p.add_argument('--labels', action='store_true', help='draw area labels')
    p.add_argument('--skip-invalid', action='store_true',
                   help='skip bad records/areas instead of aborting')
    p.add_argument('--canvas-size', type=int, default=DEFAULT_CONFIG.canvas_size)
    p.add_argument('--x-offset', type=float, default=DEFAULT_CONFIG.x_offset)
    p.add_argument('--y-offset', type=float, default=DEFAULT_CONFIG.y_offset)
    p.add_argument('--scale', type=float, default=DEFAULT_CONFIG.scale,
                   help='world units per pixel')
    p.add_argument('-v', '--verbose', action='store_true')
    return p


def config_from_args(args) -> RenderConfig:
    return DEFAULT_CONFIG.replace(canvas_size=args.canvas_size, x_offset=args.x_offset,
                                  y_offset=args.y_offset, scale=args.scale)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    on_error = ON_ERROR_SKIP if args.skip_invalid else ON_ERROR_ABORT
    try:
        config = config_from_args(args)
        registry = load_registry(args.dataset, config=config, on_error=on_error)
        log.info('Extent of %d areas: %s', len(registry), registry.extent())
        out = MapRenderer(config).render_to_file(registry, args.output,
                                                 show_labels=args.labels, on_error=on_error)
    except (MapDataError, ValueError) as e:
        log.error('%s', e)
        return 1
    log.info('Wrote %s', out)
    return 0


if __name__ == '__main__':
    sys.exit(main())
