"""Label placement for polygons via the pole of inaccessibility."""

from . import (
    cells,
    config,
    datatypes,
    errors,
    geometry,
    logging_utils,
    normalizer,
    queue,
    search,
    storage,
)
from .datatypes import Cell, Point, Polygon, PoleResult
from .errors import ConfigError, InvalidInputError, PolelabelError
from .search import find_pole_of_inaccessibility, polylabel, solve

__all__ = [
    "cells",
    "config",
    "datatypes",
    "errors",
    "geometry",
    "logging_utils",
    "normalizer",
    "queue",
    "search",
    "storage",
    "Cell",
    "ConfigError",
    "InvalidInputError",
    "Point",
    "PoleResult",
    "Polygon",
    "PolelabelError",
    "find_pole_of_inaccessibility",
    "polylabel",
    "solve",
]
