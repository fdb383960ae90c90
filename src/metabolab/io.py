"""Network definition files (JSON or YAML)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from metabolab.core.network import Network
from metabolab.exceptions import NetworkLoadError

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = (".yaml", ".yml")


def load_network(path: str | Path) -> Network:
    """Read and validate a network definition."""
    path = Path(path)
    if not path.exists():
        raise NetworkLoadError(f"Network file not found: {path}")

    try:
        with open(path) as f:
            if path.suffix.lower() in _YAML_SUFFIXES:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise NetworkLoadError(f"Cannot parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise NetworkLoadError(f"{path} must contain a mapping at the top level")
    data.setdefault("name", path.stem)

    try:
        network = Network.model_validate(data)
    except ValidationError as exc:
        raise NetworkLoadError(f"Invalid network in {path}: {exc}") from exc

    logger.info("Loaded network definition %s from %s", network.name, path)
    return network


def save_network(network: Network, path: str | Path) -> Path:
    """Write a network definition; the format follows the file suffix."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    data = network.model_dump(mode="json")
    with open(out, "w") as f:
        if out.suffix.lower() in _YAML_SUFFIXES:
            yaml.safe_dump(data, f, sort_keys=False)
        else:
            json.dump(data, f, indent=2)
    logger.info("Network %s saved to %s", network.name, out)
    return out
