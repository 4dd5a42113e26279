"""oamap: census output-area boundary loading and raster rendering."""

__version__ = "0.1.0"
