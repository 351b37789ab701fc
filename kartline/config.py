from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .raceline.annealing import DEFAULT_ITERATIONS, AnnealParams
from .track import DEFAULT_TRACK_WIDTH
from .vehicle import PhysicsConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_PHYSICS_KEYS = {"grip", "max_acceleration", "max_braking", "max_speed_kmh", "weight_kg"}
_TOP_LEVEL_KEYS = {"physics", "optimizer", "track", "iterations", "seed"}


@dataclass
class AppConfig:
    physics: PhysicsConfig = field(default_factory=PhysicsConfig)
    optimizer: AnnealParams = field(default_factory=AnnealParams)
    track_width: float = DEFAULT_TRACK_WIDTH
    iterations: int = DEFAULT_ITERATIONS
    seed: Optional[int] = None


def _check_keys(section: str, data: Dict[str, Any], allowed) -> None:
    unknown = set(data) - set(allowed)
    if unknown:
        raise ConfigError(f"Unknown keys in '{section}': {sorted(unknown)}")


def config_from_dict(data: Optional[Dict[str, Any]]) -> AppConfig:
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError("Config root must be a mapping")
    _check_keys("<root>", data, _TOP_LEVEL_KEYS)

    physics_cfg = data.get("physics") or {}
    _check_keys("physics", physics_cfg, _PHYSICS_KEYS)
    optimizer_cfg = data.get("optimizer") or {}
    _check_keys("optimizer", optimizer_cfg, {f.name for f in fields(AnnealParams)})
    track_cfg = data.get("track") or {}
    _check_keys("track", track_cfg, {"width"})

    try:
        physics = PhysicsConfig(**physics_cfg)
        optimizer = AnnealParams(**optimizer_cfg)
    except (TypeError, ValueError) as exc:
        raise ConfigError(str(exc)) from exc

    seed = data.get("seed")
    return AppConfig(
        physics=physics,
        optimizer=optimizer,
        track_width=float(track_cfg.get("width", DEFAULT_TRACK_WIDTH)),
        iterations=int(data.get("iterations", DEFAULT_ITERATIONS)),
        seed=int(seed) if seed is not None else None,
    )


def load_config(path) -> AppConfig:
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    return config_from_dict(data)


def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
