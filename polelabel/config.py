"""Configuration assembly for the polelabel command line."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import yaml

from .datatypes import ResolvedConfig
from .errors import ConfigError

DEFAULT_SETTINGS_FILE = Path("polelabel.yml")

DEFAULTS: Dict[str, Any] = {
    "precision": 1.0,
    "max_probes": None,
    "with_distance": False,
    "log_level": "INFO",
    "output": None,
}

ENV_PREFIX = "POLELABEL_"

ENV_CASTERS: Dict[str, Any] = {
    "POLELABEL_PRECISION": float,
    "POLELABEL_MAX_PROBES": int,
    "POLELABEL_WITH_DISTANCE": "bool",
    "POLELABEL_LOG_LEVEL": str,
    "POLELABEL_OUTPUT": str,
}

SETTINGS_KEYS = {"precision", "max_probes", "with_distance", "log_level", "output"}


def build_cli() -> argparse.ArgumentParser:
    """Construct the top-level CLI."""

    parser = argparse.ArgumentParser(
        prog="polelabel",
        description="Compute label points (poles of inaccessibility) for polygons",
    )
    parser.add_argument(
        "input",
        nargs="?",
        type=str,
        help="GeoJSON, JSON or YAML file containing polygons",
    )
    parser.add_argument(
        "--precision",
        type=float,
        help="Search precision in coordinate units",
    )
    parser.add_argument(
        "--max-probes",
        type=int,
        help="Stop each search after this many probe cells",
    )
    parser.add_argument(
        "--with-distance",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Include the distance to the outline in each label's properties",
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Write the label FeatureCollection here instead of stdout",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level for the structured logger",
    )
    parser.add_argument(
        "--settings-file",
        type=str,
        default=None,
        help="YAML file with default settings (defaults to ./polelabel.yml)",
    )

    return parser


def load_settings(path: Optional[Path]) -> Dict[str, Any]:
    """Read the YAML settings file, returning an empty mapping when absent."""

    if not path or not path.exists():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Unable to parse settings file {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError("Settings file must contain a mapping")

    settings = {str(key).replace("-", "_").lower(): value for key, value in data.items()}
    unknown = set(settings) - SETTINGS_KEYS
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")
    return settings


def load_environment(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Collect polelabel variables from the process environment."""

    source = os.environ if environ is None else environ
    return {key: source[key] for key in ENV_CASTERS if key in source}


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    truthy = {"1", "true", "yes", "on"}
    falsy = {"0", "false", "no", "off"}
    lowered = str(value).lower()
    if lowered in truthy:
        return True
    if lowered in falsy:
        return False
    raise ConfigError(f"Unable to parse boolean value from '{value}'")


def normalise_environment(raw_env: Mapping[str, str]) -> Dict[str, Any]:
    """Coerce environment values to their expected Python types."""

    typed: Dict[str, Any] = {}
    for key, caster in ENV_CASTERS.items():
        if key not in raw_env:
            continue
        value = raw_env[key]
        try:
            typed[key] = _parse_bool(value) if caster == "bool" else caster(value)
        except ValueError as exc:
            raise ConfigError(f"Invalid value for {key}: {value!r}") from exc
    return typed


def _resolve(
    cli_value: Any,
    env: Mapping[str, Any],
    key: str,
    settings: Mapping[str, Any],
) -> Any:
    """Resolution helper obeying CLI > env > settings file > default."""

    if cli_value is not None:
        return cli_value
    env_key = ENV_PREFIX + key.upper()
    if env_key in env:
        return env[env_key]
    if key in settings:
        return settings[key]
    return DEFAULTS[key]


def resolve_config(
    args: argparse.Namespace,
    env: Mapping[str, Any],
    settings: Mapping[str, Any],
    settings_file: Optional[Path] = None,
) -> ResolvedConfig:
    """Build a ResolvedConfig using precedence rules."""

    try:
        precision = float(_resolve(getattr(args, "precision", None), env, "precision", settings))
        max_probes_value = _resolve(getattr(args, "max_probes", None), env, "max_probes", settings)
        max_probes = int(max_probes_value) if max_probes_value is not None else None
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid numeric setting: {exc}") from exc

    with_distance = _parse_bool(
        _resolve(getattr(args, "with_distance", None), env, "with_distance", settings)
    )
    log_level = str(_resolve(getattr(args, "log_level", None), env, "log_level", settings)).upper()
    output = _resolve(getattr(args, "output", None), env, "output", settings)

    if not precision > 0:
        raise ConfigError("precision must be positive")
    if max_probes is not None and max_probes <= 0:
        raise ConfigError("max_probes must be positive")

    input_value = getattr(args, "input", None)
    raw_cli = {k: v for k, v in vars(args).items() if not k.startswith("_")}

    return ResolvedConfig(
        input_path=Path(input_value) if input_value else None,
        output_path=Path(output) if output else None,
        precision=precision,
        max_probes=max_probes,
        with_distance=with_distance,
        log_level=log_level,
        settings_file=settings_file,
        raw_cli=raw_cli,
        raw_env=dict(env),
    )


def resolve_runtime_config(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    settings_path: Optional[Path] = None,
) -> Tuple[ResolvedConfig, argparse.Namespace]:
    """End-to-end configuration resolution helper."""

    parser = build_cli()
    args = parser.parse_args(argv)

    typed_env = normalise_environment(load_environment(environ))

    effective_settings_path = (
        Path(args.settings_file) if args.settings_file else settings_path or DEFAULT_SETTINGS_FILE
    )
    settings = load_settings(effective_settings_path)
    used_settings = effective_settings_path if effective_settings_path.exists() else None

    config = resolve_config(args, typed_env, settings, settings_file=used_settings)
    return config, args
