"""
Configuration schema and loader.

This module defines dataclasses that mirror the expected structure of
the YAML configuration file (`config.yaml`).  A helper function
`load_config()` reads a YAML file from disk and returns an instance
of `Config` populated with defaults for any missing fields.

The configuration only provides starting values: the account settings
chosen here are used until the user saves different ones, which are
then restored from storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

import yaml

from ..journal.models import Settings


@dataclass
class StorageConfig:
    """Where the journal is persisted.

    Attributes
    ----------
    path : str
        JSON state file used by the command-line interface.
    trades_key : str
        Storage key holding the serialised trade log.
    settings_key : str
        Storage key holding the serialised account settings.
    """

    path: str = "journal.json"
    trades_key: str = "trading-journal-data"
    settings_key: str = "trading-journal-settings"


@dataclass
class DataConfig:
    """Data interpretation.

    Attributes
    ----------
    timezone : str
        IANA timezone in which trade dates and times are entered.  Also
        decides which calendar month a trade belongs to.
    """

    timezone: str = "UTC"


@dataclass
class Config:
    """Root configuration for the trading journal."""

    settings: Settings = field(default_factory=Settings)
    storage: StorageConfig = field(default_factory=StorageConfig)
    data: DataConfig = field(default_factory=DataConfig)


def _merge_dict(defaults: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries.

    The values in `override` take precedence over those in `defaults`.
    This helper is used when loading YAML into nested dataclasses.
    """
    result: Dict[str, Any] = defaults.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dict(result[key], value)
        else:
            result[key] = value
    return result


def load_config(path: str) -> Config:
    """Load a configuration file from the given YAML path.

    Raises
    ------
    FileNotFoundError
        If `path` does not exist.
    ValueError
        If the file is not a YAML mapping.
    """
    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping")

    defaults: Dict[str, Any] = {
        'settings': {
            'initial_capital': 10_000.0,
            'commission': 0.0,
            'swap_fee': 0.0,
        },
        'storage': {
            'path': "journal.json",
            'trades_key': "trading-journal-data",
            'settings_key': "trading-journal-settings",
        },
        'data': {
            'timezone': "UTC",
        },
    }

    merged = _merge_dict(defaults, raw)

    settings = Settings().merged(**merged['settings'])
    storage_cfg = StorageConfig(**merged['storage'])
    data_cfg = DataConfig(**merged['data'])
    return Config(settings=settings, storage=storage_cfg, data=data_cfg)
