"""Utility modules for the market simulation."""

from .config import SimulationConfig, create_engine_from_config
from .personas import load_trader_profiles
from .rng import RandomSource, default_rng, new_id, utc_now

__all__ = [
    "SimulationConfig",
    "create_engine_from_config",
    "load_trader_profiles",
    "RandomSource",
    "default_rng",
    "new_id",
    "utc_now",
]
