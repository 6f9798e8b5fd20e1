"""Load run settings from a YAML configuration file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .errors import ConfigurationError
from .utils import read_yaml_file

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = ".static-review.yml"
DEFAULT_REVIEWS = ("line-length", "trailing-whitespace", "no-commit-tag", "line-endings")
KNOWN_KEYS = {"reviews", "options", "workers", "timeout", "exclude"}


@dataclass
class ReviewConfig:
    """Settings for one invocation, before command-line overrides."""

    reviews: List[str] = field(default_factory=lambda: list(DEFAULT_REVIEWS))
    options: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    workers: int = 1
    timeout: Optional[float] = None
    exclude: List[str] = field(default_factory=list)


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> ReviewConfig:
    """Read ``path`` into a :class:`ReviewConfig`; a missing file yields defaults."""

    config_path = Path(path)
    try:
        data = read_yaml_file(config_path)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"invalid YAML in {config_path}: {exc}") from exc
    if data is None:
        logger.debug("No configuration at %s, using defaults", config_path)
        return ReviewConfig()
    if not isinstance(data, dict):
        raise ConfigurationError(f"configuration at {config_path} is not a mapping")
    return parse_config(data, source=str(config_path))


def parse_config(data: Mapping[str, Any], source: str = "<config>") -> ReviewConfig:
    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(f"unknown configuration key(s) in {source}: {', '.join(unknown)}")

    config = ReviewConfig()
    if "reviews" in data:
        reviews = data["reviews"]
        if not isinstance(reviews, list) or not all(isinstance(item, str) for item in reviews):
            raise ConfigurationError(f"'reviews' in {source} must be a list of identifiers")
        config.reviews = list(reviews)

    options = data.get("options") or {}
    if not isinstance(options, dict) or not all(isinstance(value, dict) for value in options.values()):
        raise ConfigurationError(f"'options' in {source} must map review identifiers to mappings")
    config.options = {str(key): dict(value) for key, value in options.items()}

    workers = data.get("workers", 1)
    if not isinstance(workers, int) or isinstance(workers, bool) or workers < 1:
        raise ConfigurationError(f"'workers' in {source} must be a positive integer")
    config.workers = workers

    timeout = data.get("timeout")
    if timeout is not None:
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
            raise ConfigurationError(f"'timeout' in {source} must be a positive number of seconds")
        config.timeout = float(timeout)

    exclude = data.get("exclude") or []
    if not isinstance(exclude, list):
        raise ConfigurationError(f"'exclude' in {source} must be a list of glob patterns")
    config.exclude = [str(pattern) for pattern in exclude]
    return config
