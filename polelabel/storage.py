"""Readers for polygon inputs and writers for label outputs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Tuple

import yaml

from .datatypes import LabelledFeature, Polygon, json_default
from .errors import InvalidInputError
from .normalizer import coerce_polygons

YAML_SUFFIXES = {".yml", ".yaml"}


def load_document(path: Path) -> Any:
    """Parse a JSON or YAML document from disk."""

    content = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(content)
        return json.loads(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise InvalidInputError(f"Unable to parse {path}: {exc}") from exc


def extract_features(document: Any) -> List[Tuple[Dict[str, Any], Polygon]]:
    """Flatten a geometry document into (properties, polygon) pairs.

    MultiPolygon members share their feature's properties, with a
    ``part`` index added so outputs can be told apart.
    """

    if isinstance(document, Mapping) and document.get("type") == "FeatureCollection":
        raw_features = document.get("features") or []
    elif isinstance(document, Mapping) and document.get("type") == "Feature":
        raw_features = [document]
    elif document is None:
        raise InvalidInputError("Input document is empty")
    else:
        raw_features = [{"type": "Feature", "geometry": document, "properties": {}}]

    features: List[Tuple[Dict[str, Any], Polygon]] = []
    for index, feature in enumerate(raw_features):
        if not isinstance(feature, Mapping):
            raise InvalidInputError(f"Feature {index} is not an object")
        properties = dict(feature.get("properties") or {})
        geometry = feature.get("geometry")
        try:
            polygons = coerce_polygons(geometry)
        except InvalidInputError as exc:
            raise InvalidInputError(f"Feature {index}: {exc}") from exc

        if len(polygons) == 1:
            features.append((properties, polygons[0]))
            continue
        for part, polygon in enumerate(polygons):
            features.append(({**properties, "part": part}, polygon))

    return features


def read_features(path: Path) -> List[Tuple[Dict[str, Any], Polygon]]:
    """Load every polygon in a GeoJSON/JSON/YAML file."""

    return extract_features(load_document(path))


def labels_to_geojson(labels: Iterable[LabelledFeature], with_distance: bool = True) -> Dict[str, Any]:
    """Build a GeoJSON FeatureCollection of label points."""

    return {
        "type": "FeatureCollection",
        "features": [_label_to_feature(label, with_distance) for label in labels],
    }


def write_labels(labels: Iterable[LabelledFeature], path: Path, with_distance: bool = True) -> Path:
    """Write label points to a GeoJSON file and return its path."""

    path.parent.mkdir(parents=True, exist_ok=True)
    collection = labels_to_geojson(labels, with_distance)
    path.write_text(json.dumps(collection, indent=2, default=json_default), encoding="utf-8")
    return path


def _label_to_feature(label: LabelledFeature, with_distance: bool) -> Dict[str, Any]:
    result = label.result
    properties: Dict[str, Any] = dict(label.properties)
    if with_distance:
        properties["distance"] = result.distance
    properties["probes"] = result.probes
    if result.budget_exhausted:
        properties["budget_exhausted"] = True

    return {
        "type": "Feature",
        "geometry": {
            "type": "Point",
            "coordinates": [result.point.x, result.point.y],
        },
        "properties": properties,
    }
