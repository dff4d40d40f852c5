"""Run configuration.

Defaults can be overridden through environment variables (see
.env.example) and, in the demo script, by command-line flags.
"""

import logging
import os
from typing import Optional

from .core.scheduler import EXECUTORS, PROCESS
from .crypto.params import DEFAULT_PARAMETERS, ParameterSet, get_parameter_set
from .strategies import resolve_name

logger = logging.getLogger(__name__)

DEFAULT_STRATEGY = "integer_sum"
DEFAULT_KEY_CACHE = "keys.json"


class LifeConfig:
    """Configuration for one encrypted Game of Life run."""

    def __init__(self,
                 parameter_set: ParameterSet = DEFAULT_PARAMETERS,
                 strategy: str = DEFAULT_STRATEGY,
                 max_workers: Optional[int] = None,
                 seed: Optional[int] = None,
                 key_cache_path: Optional[str] = DEFAULT_KEY_CACHE,
                 executor: str = PROCESS):
        """Initialize run configuration.

        Args:
            parameter_set: Plaintext capacity preset for key generation
            strategy: Strategy name or alias (a, b, c)
            max_workers: Scheduler pool size (None = CPU count, min 1)
            seed: Optional seed for reproducible keys
            key_cache_path: Key cache file, or None to disable caching
            executor: Scheduler pool kind, "process" or "thread"

        Raises:
            ValueError: If strategy or executor is unknown
        """
        if executor not in EXECUTORS:
            raise ValueError(f"Unknown executor: {executor} (expected one of {', '.join(EXECUTORS)})")
        self.parameter_set = parameter_set
        self.strategy = resolve_name(strategy)
        self.max_workers = None if max_workers is None else max(1, int(max_workers))
        self.seed = seed
        self.key_cache_path = key_cache_path or None
        self.executor = executor

    def copy(self) -> 'LifeConfig':
        return LifeConfig(self.parameter_set, self.strategy, self.max_workers,
                          self.seed, self.key_cache_path, self.executor)

    def __repr__(self) -> str:
        return (f"LifeConfig(parameter_set={self.parameter_set.name}, strategy={self.strategy}, "
                f"max_workers={self.max_workers}, executor={self.executor}, seed={self.seed})")


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def create_config() -> LifeConfig:
    """Create run configuration from environment variables."""
    params_name = os.getenv('FHE_LIFE_PARAMETERS')
    parameter_set = get_parameter_set(params_name) if params_name else DEFAULT_PARAMETERS

    config = LifeConfig(
        parameter_set=parameter_set,
        strategy=os.getenv('FHE_LIFE_STRATEGY', DEFAULT_STRATEGY),
        max_workers=_optional_int('FHE_LIFE_WORKERS'),
        seed=_optional_int('FHE_LIFE_SEED'),
        key_cache_path=os.getenv('FHE_LIFE_KEY_CACHE', DEFAULT_KEY_CACHE),
        executor=os.getenv('FHE_LIFE_EXECUTOR', PROCESS),
    )
    logger.debug(f"Loaded {config!r}")
    return config
