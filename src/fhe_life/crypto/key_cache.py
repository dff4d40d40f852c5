"""On-disk cache for client key material.

Key generation is the slow part of a run, so keys are stored as JSON next
to the working directory and reloaded when the parameter set matches.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from .keys import ClientKey, EvaluationContext, generate_keys
from .params import ParameterSet, get_parameter_set

logger = logging.getLogger(__name__)

DEFAULT_KEY_PATH = "keys.json"


class KeyCache:
    """Load-or-generate cache for a single key file.

    Attributes:
        path: Location of the cached key file
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_KEY_PATH):
        self.path = Path(path)
        self.hits = 0
        self.misses = 0

    def load(self) -> Optional[ClientKey]:
        """Read the cached client key, or None if absent or unreadable."""
        if not self.path.exists():
            return None
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            params = get_parameter_set(data["parameter_set"])
            return ClientKey(params, data["secret"], seed=data.get("seed"))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring unreadable key cache {self.path}: {e}")
            return None

    def store(self, client_key: ClientKey) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(client_key.to_dict(), f, indent=2)
        logger.debug(f"Stored client key in {self.path}")

    def get(self, params: ParameterSet, seed: Optional[int] = None) -> Tuple[ClientKey, EvaluationContext]:
        """Return cached keys for params, generating and storing them on a miss.

        Args:
            params: Required parameter set
            seed: Seed for new keys; a cached key made from a different
                seed is replaced. None accepts any cached key.

        Returns:
            (ClientKey, EvaluationContext)
        """
        client_key = self.load()
        if (client_key is not None and client_key.params == params
                and (seed is None or client_key.seed == seed)):
            self.hits += 1
            logger.info(f"Loaded cached keys from {self.path}")
            return client_key, client_key.evaluation_context()

        if client_key is not None and client_key.params != params:
            logger.info(f"Cached keys are for {client_key.params.name}, regenerating for {params.name}")
        elif client_key is not None:
            logger.info(f"Cached keys were made from seed {client_key.seed}, regenerating for seed {seed}")

        self.misses += 1
        client_key, context = generate_keys(params, seed=seed)
        self.store(client_key)
        return client_key, context
