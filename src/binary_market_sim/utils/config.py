"""Configuration management for the market simulation.

Reads configuration from a config.env file or environment variables.
"""

import logging
import os
import random
from pathlib import Path
from typing import Callable, Optional, Sequence

from .personas import load_trader_profiles, select_profile_file

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes", "on")


def _env_bool(key: str, default: str) -> bool:
    return os.getenv(key, default).lower() in _TRUTHY


def _env_float(key: str, default: str) -> float:
    raw = os.getenv(key, default)
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {raw!r}") from exc


def _env_int(key: str, default: str) -> int:
    raw = os.getenv(key, default)
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc


class SimulationConfig:
    """Configuration manager for simulation settings."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to .env file (default: config.env in project root)
        """
        self._load_env(config_file)

    def _load_env(self, config_file: Optional[str]):
        """Load environment variables from file."""
        if config_file is None:
            project_root = Path(__file__).parent.parent.parent.parent
            config_file = project_root / "config.env"

        config_path = Path(config_file)
        if config_path.exists():
            with open(config_path) as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith('#') and '=' in line:
                        key, value = line.split('=', 1)
                        key = key.strip()
                        value = value.strip()
                        # Don't override existing env vars
                        if key not in os.environ:
                            os.environ[key] = value

    @property
    def seed(self) -> Optional[int]:
        """Random seed; unset means a fresh seed every run."""
        raw = os.getenv("SIM_SEED", "").strip()
        return int(raw) if raw else None

    @property
    def max_ticks(self) -> int:
        """Get maximum simulation ticks."""
        return _env_int("MAX_TICKS", "100")

    @property
    def orders_per_tick_min(self) -> int:
        return _env_int("ORDERS_PER_TICK_MIN", "2")

    @property
    def orders_per_tick_max(self) -> int:
        return _env_int("ORDERS_PER_TICK_MAX", "4")

    @property
    def intelligent_order_share(self) -> float:
        """Probability that a generated order comes from the edge-seeking strategy."""
        return _env_float("INTELLIGENT_ORDER_SHARE", "0.7")

    @property
    def noise_order_share(self) -> float:
        return _env_float("NOISE_ORDER_SHARE", "0.0")

    @property
    def initial_intelligent_orders(self) -> int:
        return _env_int("INITIAL_INTELLIGENT_ORDERS", "15")

    @property
    def initial_market_maker_orders(self) -> int:
        return _env_int("INITIAL_MARKET_MAKER_ORDERS", "10")

    @property
    def prevent_self_trade(self) -> bool:
        """Skip crossing a trader's bid against their own ask."""
        return _env_bool("PREVENT_SELF_TRADE", "false")

    @property
    def enable_logging(self) -> bool:
        """Get whether record logging is enabled."""
        return _env_bool("ENABLE_LOGGING", "true")

    @property
    def save_logs_csv(self) -> bool:
        """Get whether to save logs as CSV."""
        return _env_bool("SAVE_LOGS_CSV", "true")

    @property
    def save_logs_json(self) -> bool:
        """Get whether to save logs as JSON."""
        return _env_bool("SAVE_LOGS_JSON", "true")

    @property
    def log_dir(self) -> Path:
        """Get log directory path."""
        return Path(os.getenv("LOG_DIR", "simulation_logs"))

    @property
    def log_level(self) -> str:
        return os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def trader_profiles_dir(self) -> Path:
        """Directory searched for trader profile files."""
        return Path(os.getenv("TRADER_PROFILES_DIR", "configs/traders"))

    @property
    def trader_profiles_file(self) -> Optional[Path]:
        """
        Resolve the trader profile file.

        TRADER_PROFILES_FILE may be a path or a file name/stem inside
        ``trader_profiles_dir``. Unset, a lone file in that directory is used.
        """
        selected = select_profile_file(config_dir=self.trader_profiles_dir)
        if selected is not None:
            return selected
        raw = os.getenv("TRADER_PROFILES_FILE", "").strip()
        # Unresolved explicit names surface as FileNotFoundError on load.
        return Path(raw) if raw else None


def create_engine_from_config(
    config: Optional[SimulationConfig] = None,
    run_name: str = "default",
    evaluator_factories: Sequence[Callable[[], object]] = (),
):
    """
    Create a simulation engine based on configuration.

    Args:
        config: Configuration object (default: loads from config.env)
        run_name: Prefix for log files
        evaluator_factories: Zero-arg callables building per-run evaluators

    Returns:
        SimulationEngine seeded from ``config.seed``

    Example:
        >>> config = SimulationConfig()
        >>> engine = create_engine_from_config(config)
        >>> result = engine.run_once(seed=config.seed)
    """
    if config is None:
        config = SimulationConfig()

    from ..simulation import SimulationEngine, SimulationRuntimeConfig, get_logger

    get_logger(config.log_level)

    runtime = SimulationRuntimeConfig(
        max_timesteps=config.max_ticks,
        orders_per_tick_min=config.orders_per_tick_min,
        orders_per_tick_max=config.orders_per_tick_max,
        intelligent_order_share=config.intelligent_order_share,
        noise_order_share=config.noise_order_share,
        initial_intelligent_orders=config.initial_intelligent_orders,
        initial_market_maker_orders=config.initial_market_maker_orders,
        prevent_self_trade=config.prevent_self_trade,
        log_dir=config.log_dir,
        run_name=run_name,
        enable_logging=config.enable_logging,
        save_logs_as_csv=config.save_logs_csv,
        save_logs_as_json=config.save_logs_json,
    )

    profiles = None
    if config.trader_profiles_file is not None:
        profiles = load_trader_profiles(config.trader_profiles_file)

    logger.info(
        "Creating simulation engine (max_ticks=%d, seed=%s, self_trade_prevention=%s)",
        runtime.max_timesteps,
        config.seed,
        runtime.prevent_self_trade,
    )
    return SimulationEngine(
        runtime,
        rng=random.Random(config.seed),
        evaluator_factories=evaluator_factories,
        trader_profiles=profiles,
    )
