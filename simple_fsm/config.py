"""
Runtime configuration for state machines, read from the environment.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


@dataclass
class FSMConfig:
    """
    Behaviour switches for an FSMInstance.

    Attributes:
        metrics_enabled: Record Prometheus metrics for transitions and errors
        dev_mode: Log every listener invocation at DEBUG level
    """
    metrics_enabled: bool = True
    dev_mode: bool = False

    @classmethod
    def from_env(cls) -> "FSMConfig":
        """Build configuration from SIMPLE_FSM_* environment variables"""
        return cls(
            metrics_enabled=_env_flag('SIMPLE_FSM_METRICS', 'true'),
            dev_mode=_env_flag('SIMPLE_FSM_DEV_MODE', 'false'),
        )
