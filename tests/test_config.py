"""Tests for run configuration and rendering."""

import numpy as np
import pytest

from fhe_life.config import DEFAULT_STRATEGY, LifeConfig, create_config
from fhe_life.crypto.params import DEFAULT_PARAMETERS, PARAM_MESSAGE_3_CARRY_3
from fhe_life.render import render_grid


class TestLifeConfig:
    """Validation and environment overrides."""

    def test_defaults(self, monkeypatch):
        for name in ("FHE_LIFE_PARAMETERS", "FHE_LIFE_STRATEGY", "FHE_LIFE_WORKERS",
                     "FHE_LIFE_SEED", "FHE_LIFE_KEY_CACHE", "FHE_LIFE_EXECUTOR"):
            monkeypatch.delenv(name, raising=False)
        config = create_config()
        assert config.parameter_set is DEFAULT_PARAMETERS
        assert config.strategy == DEFAULT_STRATEGY
        assert config.max_workers is None
        assert config.seed is None
        assert config.key_cache_path == "keys.json"
        assert config.executor == "process"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("FHE_LIFE_PARAMETERS", "PARAM_MESSAGE_3_CARRY_3")
        monkeypatch.setenv("FHE_LIFE_STRATEGY", "c")
        monkeypatch.setenv("FHE_LIFE_WORKERS", "4")
        monkeypatch.setenv("FHE_LIFE_SEED", "17")
        monkeypatch.setenv("FHE_LIFE_KEY_CACHE", "")
        monkeypatch.setenv("FHE_LIFE_EXECUTOR", "thread")
        config = create_config()
        assert config.parameter_set is PARAM_MESSAGE_3_CARRY_3
        assert config.strategy == "fused_lookup"
        assert config.max_workers == 4
        assert config.seed == 17
        assert config.key_cache_path is None
        assert config.executor == "thread"

    def test_bad_integer(self, monkeypatch):
        monkeypatch.setenv("FHE_LIFE_WORKERS", "many")
        with pytest.raises(ValueError, match="FHE_LIFE_WORKERS"):
            create_config()

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown strategy"):
            LifeConfig(strategy="hashlife")

    def test_unknown_executor(self):
        with pytest.raises(ValueError, match="Unknown executor"):
            LifeConfig(executor="greenlet")

    def test_workers_clamped(self):
        assert LifeConfig(max_workers=0).max_workers == 1

    def test_copy_is_independent(self):
        config = LifeConfig(strategy="b", seed=3, executor="thread")
        duplicate = config.copy()
        duplicate.seed = 4
        assert config.seed == 3
        assert duplicate.strategy == "bit_slice"
        assert duplicate.executor == "thread"


class TestRender:
    """Console rendering of decrypted grids."""

    def test_render_grid(self):
        grid = np.array([[1, 0], [0, 1]], dtype=bool)
        assert render_grid(grid) == "█░\n░█"

    def test_custom_characters(self):
        assert render_grid(np.ones((1, 3), dtype=bool), alive_char="X", dead_char=".") == "XXX"
