#!/usr/bin/env python3
"""
Encrypted Conway Glider Demonstration Script

Encrypts the 6x6 glider start position, advances it generation by generation
using only the evaluation context, and decrypts each generation for display.
Key generation and update times are logged.
"""

import logging
import sys
import time

import numpy as np

from fhe_life.config import create_config
from fhe_life.core.board import ToroidalBoard
from fhe_life.core.conway_rules import evolve
from fhe_life.core.patterns import initial_glider_board
from fhe_life.core.scheduler import ParallelUpdateScheduler
from fhe_life.crypto.key_cache import KeyCache
from fhe_life.crypto.keys import generate_keys
from fhe_life.crypto.params import get_parameter_set
from fhe_life.errors import FheLifeError
from fhe_life.render import render_grid
from fhe_life.strategies import available_strategies, resolve_name, select_strategy

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def run_demo(config, iterations: int = 5, verify: bool = False) -> dict:
    """Run the encrypted glider and return timing metrics."""
    logger.info("=== ENCRYPTED CONWAY DEMONSTRATION ===")
    logger.info(f"Configuration: {config!r}")

    keygen_start = time.perf_counter()
    if config.key_cache_path:
        client_key, context = KeyCache(config.key_cache_path).get(config.parameter_set, seed=config.seed)
    else:
        client_key, context = generate_keys(config.parameter_set, seed=config.seed)
    keygen_time = time.perf_counter() - keygen_start
    logger.info(f"Key generation time {keygen_time:.3f}s")

    # Strategy validation happens here, before any cell is touched
    strategy = select_strategy(config.strategy, context)

    initial = initial_glider_board()
    board = ToroidalBoard(initial.shape[1], client_key.encrypt_grid(initial))

    update_times = []
    with ParallelUpdateScheduler(config.max_workers, executor=config.executor) as scheduler:
        for iteration in range(iterations):
            decrypted = client_key.decrypt_board(board)
            print(f"iter: {iteration}")
            print(render_grid(decrypted))

            if verify and not np.array_equal(decrypted, evolve(initial, iteration)):
                raise RuntimeError(f"Decrypted generation {iteration} differs from plaintext reference")

            update_start = time.perf_counter()
            board.update(context, strategy, scheduler)
            update_times.append(time.perf_counter() - update_start)
            logger.info(f"Time to update: {update_times[-1]:.3f}s")

    return {
        "strategy": strategy.name,
        "parameter_set": config.parameter_set.name,
        "keygen_time": keygen_time,
        "update_times": update_times,
        "operation_counts": context.operation_counts(),
    }


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Encrypted Conway's Game of Life Demonstration")
    parser.add_argument("--strategy", choices=available_strategies() + ["a", "b", "c"],
                        help="Neighbor-count strategy")
    parser.add_argument("--parameters", type=str, help="Parameter set name, e.g. PARAM_MESSAGE_2_CARRY_2")
    parser.add_argument("--iterations", type=int, default=5, help="Generations to display")
    parser.add_argument("--workers", type=int, help="Scheduler pool size (1 runs cells inline)")
    parser.add_argument("--executor", choices=["process", "thread"], help="Scheduler pool kind")
    parser.add_argument("--seed", type=int, help="Seed for reproducible keys")
    parser.add_argument("--no-key-cache", action="store_true", help="Always generate fresh keys")
    parser.add_argument("--verify", action="store_true", help="Check each generation against plaintext")

    args = parser.parse_args()

    try:
        config = create_config()
        if args.strategy:
            config.strategy = resolve_name(args.strategy)
        if args.parameters:
            config.parameter_set = get_parameter_set(args.parameters)
        if args.workers is not None:
            config.max_workers = max(1, args.workers)
        if args.executor:
            config.executor = args.executor
        if args.seed is not None:
            config.seed = args.seed
        if args.no_key_cache:
            config.key_cache_path = None

        start = time.perf_counter()
        results = run_demo(config, iterations=args.iterations, verify=args.verify)
        logger.info(f"Elapsed time: {time.perf_counter() - start:.3f}s")
        logger.info(f"Operations issued: {results['operation_counts']}")

    except (FheLifeError, ValueError, RuntimeError) as e:
        logger.error(f"Demonstration failed: {e}")
        sys.exit(1)
