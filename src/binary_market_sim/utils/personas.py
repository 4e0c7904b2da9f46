"""Utilities for loading trader profiles from YAML/JSON configs.

A profile is a mapping with any of ``name``, ``balance``, ``risk_tolerance``,
``trading_style`` and ``confidence_level``. Profiles override the randomly
generated trader at the same index; missing fields keep the generated value.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import json
import os

import yaml

PROFILE_FIELDS = ("name", "balance", "risk_tolerance", "trading_style", "confidence_level")


def load_trader_profiles(path: str | Path) -> List[dict]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Trader profile file not found: {path}")

    if path.suffix.lower() in {".yaml", ".yml"}:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    else:
        with open(path, "r") as f:
            data = json.load(f)

    if not isinstance(data, list):
        raise ValueError("Trader profile file must contain a list of trader entries")

    profiles = []
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError(f"Trader profile entries must be mappings, got {type(entry).__name__}")
        unknown = set(entry) - set(PROFILE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown trader profile fields: {sorted(unknown)}")
        profiles.append(entry)
    return profiles


def list_profile_files(config_dir: str | Path) -> List[Path]:
    """List YAML/JSON profile files in a directory."""
    config_dir = Path(config_dir)
    if not config_dir.exists():
        return []
    return sorted([p for p in config_dir.iterdir() if p.suffix.lower() in {".yaml", ".yml", ".json"}])


def select_profile_file(
    *,
    config_dir: str | Path = "configs/traders",
    env_var: str = "TRADER_PROFILES_FILE",
) -> Optional[Path]:
    """Select a profile file based on an env var or defaults.

    Logic:
    - If env var is set, use it as a path, or match it by filename/stem in config_dir.
    - If only one profile file exists in config_dir, return it.
    - Otherwise return None.
    """

    env_val = os.getenv(env_var)
    if env_val and Path(env_val).exists():
        return Path(env_val)

    files = list_profile_files(config_dir)
    if not files:
        return None

    if env_val:
        for f in files:
            if f.name == env_val or f.stem == env_val:
                return f
        return None

    if len(files) == 1:
        return files[0]
    return None
