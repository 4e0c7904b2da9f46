"""Exports for the simulation subpackage."""

from .engine import (
    SimulationEngine,
    SimulationResult,
    SimulationRuntimeConfig,
    SimulationState,
    TickResult,
)
from .interfaces import Evaluator, OrderStrategy
from .logging import SimulationLogger, create_logger, get_logger, log_market_activity

__all__ = [
    "SimulationEngine",
    "SimulationRuntimeConfig",
    "SimulationResult",
    "SimulationState",
    "TickResult",
    "Evaluator",
    "OrderStrategy",
    "SimulationLogger",
    "create_logger",
    "get_logger",
    "log_market_activity",
]
