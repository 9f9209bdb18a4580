"""Typed models for the polelabel package."""

from __future__ import annotations

from math import sqrt
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SQRT2 = sqrt(2)


class Point(BaseModel):
    """Planar (x, y) coordinate pair."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        """Return the point as an (x, y) tuple."""
        return (self.x, self.y)


Ring = Tuple[Point, ...]


class Polygon(BaseModel):
    """Outer ring followed by zero or more hole rings."""

    model_config = ConfigDict(frozen=True)

    rings: Tuple[Ring, ...]

    @field_validator("rings")
    @classmethod
    def _validate_rings(cls, value: Tuple[Ring, ...]) -> Tuple[Ring, ...]:  # noqa: N805
        """Require at least one ring and three vertices per ring."""
        if not value:
            raise ValueError("Polygon requires at least one ring")
        for index, ring in enumerate(value):
            if len(ring) < 3:
                msg = f"Ring {index} has {len(ring)} vertices; at least 3 are required"
                raise ValueError(msg)
        return value

    @property
    def outer(self) -> Ring:
        return self.rings[0]

    @property
    def holes(self) -> Tuple[Ring, ...]:
        return self.rings[1:]


class Envelope(BaseModel):
    """Axis-aligned bounding envelope."""

    model_config = ConfigDict(frozen=True)

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @model_validator(mode="after")
    def _validate_bounds(self) -> "Envelope":  # noqa: D401
        """Ensure min values do not exceed max values."""
        if self.max_x < self.min_x or self.max_y < self.min_y:
            raise ValueError("Envelope minimum must not exceed its maximum")
        return self

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def min_corner(self) -> Point:
        return Point(x=self.min_x, y=self.min_y)

    @property
    def center(self) -> Point:
        return Point(x=self.min_x + self.width / 2, y=self.min_y + self.height / 2)


class Cell(BaseModel):
    """Square probe region scored against a polygon.

    ``distance`` is the signed distance from ``center`` to the polygon outline
    (negative outside). ``upper_bound`` is the largest distance any point in
    the square could reach: the far corner is at most ``half_size * sqrt(2)``
    away from the center and distance-to-boundary is 1-Lipschitz.
    """

    model_config = ConfigDict(frozen=True)

    center: Point
    half_size: float = Field(ge=0)
    distance: float
    upper_bound: float

    @property
    def x(self) -> float:
        return self.center.x

    @property
    def y(self) -> float:
        return self.center.y


class PoleResult(BaseModel):
    """Outcome of one pole-of-inaccessibility search."""

    model_config = ConfigDict(frozen=True)

    point: Point
    distance: float
    precision: float
    probes: int
    iterations: int
    budget_exhausted: bool = False

    def as_tuple(self) -> Tuple[Point, float]:
        return (self.point, self.distance)


class LabelledFeature(BaseModel):
    """Pole result paired with the properties of the feature it labels."""

    model_config = ConfigDict(frozen=True)

    properties: Dict[str, Any] = Field(default_factory=dict)
    result: PoleResult


class ResolvedConfig(BaseModel):
    """Runtime configuration resolved from CLI/env/settings file."""

    model_config = ConfigDict(frozen=True)

    input_path: Optional[Path]
    output_path: Optional[Path]
    precision: float
    max_probes: Optional[int]
    with_distance: bool
    log_level: str
    settings_file: Optional[Path] = None
    raw_cli: Dict[str, Any] = Field(default_factory=dict)
    raw_env: Dict[str, Any] = Field(default_factory=dict)

    def redacted_dict(self) -> Dict[str, Any]:
        """Return a dict suitable for logging."""
        return {
            "input_path": str(self.input_path) if self.input_path else None,
            "output_path": str(self.output_path) if self.output_path else None,
            "precision": self.precision,
            "max_probes": self.max_probes,
            "with_distance": self.with_distance,
            "log_level": self.log_level,
            "settings_file": str(self.settings_file) if self.settings_file else None,
        }


def json_default(value: Any) -> Any:
    """`json.dumps` fallback for paths, points, cells and other models."""

    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Point):
        return [value.x, value.y]
    if isinstance(value, Cell):
        return {
            "center": [value.x, value.y],
            "half_size": value.half_size,
            "distance": value.distance,
            "upper_bound": value.upper_bound,
        }
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)
