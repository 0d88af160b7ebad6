"""
Configuration store for OPPR constants.

Callers override individual constants with a partial, nested mapping that
mirrors the constant tree:

    configure_oppr({
        "BASE_VALUE": {"POINTS_PER_PLAYER": 1.0, "MAX_BASE_VALUE": 64},
        "TIME_DECAY": {"YEAR_1_TO_2": 0.8},
    })

Overrides accumulate across calls. Mappings merge key-wise, anything else
(numbers, lists, tuples) replaces the previous value wholesale. The merged
tree is built once and cached until the next configure/reset.

Two ways to use it:

1. Module-level functions (configure_oppr, reset_config, get_config) act on
   one process-wide store. Every calculation uses it when called without an
   explicit ``config=``. Not safe under concurrent configure/reset.

2. Explicit configs: build an ``OPPRConfig`` (or a private ``ConfigStore``)
   and pass ``config=`` into each calculation. Nothing global is touched.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from oppr.engine.constants import DEFAULT_CONSTANTS, OPPRConfig
from oppr.engine.errors import ValidationError

logger = logging.getLogger(__name__)


def deep_merge(target: Mapping[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """
    Recursively merge ``source`` into ``target`` and return a new dict.

    Merge policy:
    - both values are mappings: merged key-wise (recursively)
    - source value is None: ignored, target value kept
    - anything else (primitives, lists, tuples): source replaces target

    Neither input is mutated.

    Example:
        deep_merge({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}})
        # → {"a": {"x": 1, "y": 3}}
    """
    result: dict[str, Any] = {key: copy.deepcopy(value) for key, value in target.items()}

    for key, source_value in source.items():
        if source_value is None:
            continue

        target_value = result.get(key)
        if isinstance(target_value, Mapping) and isinstance(source_value, Mapping):
            result[key] = deep_merge(target_value, source_value)
        else:
            result[key] = copy.deepcopy(source_value)

    return result


def merge_config(base: OPPRConfig, overrides: Mapping[str, Any]) -> OPPRConfig:
    """
    Build a new config from ``base`` with ``overrides`` merged over it.

    Raises:
        ValidationError: If an override names an unknown constant or has a
            value of the wrong type.
    """
    merged = deep_merge(base.model_dump(), overrides)
    try:
        return OPPRConfig.model_validate(merged)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid OPPR configuration override: {e}") from e


class ConfigStore:
    """
    Holds accumulated constant overrides and the cached merged config.

    Usage:
        store = ConfigStore()
        store.configure({"TGP": {"BASE_GAME_VALUE": 0.05}})
        config = store.get_config()
        tgp = calculate_tgp(tgp_config, config=config)
        store.reset()
    """

    def __init__(self, defaults: OPPRConfig = DEFAULT_CONSTANTS):
        self._defaults = defaults
        self._overrides: dict[str, Any] = {}
        self._merged: OPPRConfig | None = None

    def configure(self, overrides: Mapping[str, Any]) -> None:
        """
        Merge ``overrides`` into the accumulated overrides.

        The result is validated before anything changes, so a bad override
        raises ValidationError and leaves the store as it was.
        """
        candidate = deep_merge(self._overrides, overrides)
        merged = merge_config(self._defaults, candidate)

        self._overrides = candidate
        self._merged = merged
        logger.debug("OPPR configuration updated: %s", candidate)

    def reset(self) -> None:
        """Clear all overrides."""
        self._overrides = {}
        self._merged = None
        logger.debug("OPPR configuration reset to defaults")

    def get_config(self) -> OPPRConfig:
        """Return defaults merged with overrides (same object until invalidated)."""
        if self._merged is None:
            self._merged = merge_config(self._defaults, self._overrides)
        return self._merged

    def get_default_config(self) -> OPPRConfig:
        """Return the defaults, never affected by configure()."""
        return self._defaults

    @property
    def overrides(self) -> dict[str, Any]:
        """Copy of the accumulated overrides."""
        return copy.deepcopy(self._overrides)


# Process-wide store used when a calculation gets no explicit config
_default_store = ConfigStore()


def configure_oppr(overrides: Mapping[str, Any]) -> None:
    """Override constants for every calculation that doesn't pass ``config=``."""
    _default_store.configure(overrides)


def reset_config() -> None:
    """Drop all process-wide overrides."""
    _default_store.reset()


def get_config() -> OPPRConfig:
    """Return the current process-wide config."""
    return _default_store.get_config()


def get_default_config() -> OPPRConfig:
    """Return the default constants (without overrides)."""
    return _default_store.get_default_config()


def resolve_config(config: OPPRConfig | None) -> OPPRConfig:
    """Return ``config`` if given, else the process-wide config."""
    return config if config is not None else get_config()


def load_overrides_file(path: str | Path) -> dict[str, Any]:
    """
    Read a JSON override file and apply it to the process-wide store.

    Returns:
        The overrides read from the file.

    Raises:
        ValidationError: If the file isn't a JSON object or holds invalid
            overrides.
    """
    path = Path(path)
    try:
        overrides = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(f"Config overrides file {path} is not valid JSON: {e}") from e

    if not isinstance(overrides, dict):
        raise ValidationError(f"Config overrides file {path} must contain a JSON object")

    configure_oppr(overrides)
    logger.info("Loaded OPPR overrides from %s", path)
    return overrides
