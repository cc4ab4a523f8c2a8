"""
banksim package initializer.

This package contains the tick-driven bank simulator: customers, service
stations with their server pools, weighted routing between stages, and the
reporting sinks used to follow queue and server occupancy.
"""
import logging

from .logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    set_level,
)
from .queues import ConfigurationError
from .simulation import Bank, run_simulation

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "entities", "queues", "stations", "network",
    "arrivals", "policies", "metrics", "simulation",
    "Bank", "ConfigurationError", "run_simulation",
    "configure_from_env", "disable_logging", "enable_console_logging", "set_level",
]
