"""Entry point for running polelabel as a command."""

from __future__ import annotations

import json
import sys
from typing import List, Optional, Sequence

from .config import resolve_runtime_config
from .datatypes import LabelledFeature, ResolvedConfig
from .errors import InvalidInputError, PolelabelError
from .logging_utils import configure_logging, get_logger, log_config_snapshot
from .search import solve
from .storage import extract_features, labels_to_geojson, load_document, write_labels


def label_document(config: ResolvedConfig) -> List[LabelledFeature]:
    """Compute a label for every polygon in the configured input."""

    logger = get_logger("polelabel.runtime")
    if config.input_path is None:
        try:
            document = json.load(sys.stdin)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"Unable to parse stdin: {exc}") from exc
    else:
        document = load_document(config.input_path)

    labels: List[LabelledFeature] = []
    for properties, polygon in extract_features(document):
        result = solve(polygon, config.precision, max_probes=config.max_probes)
        labels.append(LabelledFeature(properties=properties, result=result))

    logger.info(
        "labels_computed",
        extra={
            "event": "labels_computed",
            "features": len(labels),
            "probes": sum(label.result.probes for label in labels),
        },
    )
    return labels


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point."""

    config, _ = resolve_runtime_config(argv)
    configure_logging(config.log_level)
    log_config_snapshot(config)
    logger = get_logger("polelabel.runtime")

    try:
        labels = label_document(config)
    except PolelabelError as exc:
        logger.error("labelling_failed", extra={"event": "labelling_failed", "error": str(exc)})
        raise SystemExit(1) from exc

    if config.output_path is not None:
        path = write_labels(labels, config.output_path, with_distance=config.with_distance)
        logger.info("labels_written", extra={"event": "labels_written", "path": path})
    else:
        collection = labels_to_geojson(labels, with_distance=config.with_distance)
        sys.stdout.write(json.dumps(collection, indent=2) + "\n")


if __name__ == "__main__":  # pragma: no cover
    main()
