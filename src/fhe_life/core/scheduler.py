"""Parallel per-cell update scheduler.

Generation n+1 is computed from an immutable generation-n buffer. Each work
item owns exactly one slot of the pre-sized output buffer, so workers never
contend on writes and need no locking.

Homomorphic operations are CPU-bound Python code, so the default pool is a
ProcessPoolExecutor. Each worker process receives the evaluation context and
strategy once, through the pool initializer, before any cell is dispatched;
cell results come back tagged with their index. A thread pool is available
for strategies that cannot be pickled.
"""

import logging
import os
from concurrent.futures import FIRST_EXCEPTION, Executor, ProcessPoolExecutor, ThreadPoolExecutor, wait
from typing import Dict, List, MutableSequence, NamedTuple, Optional, Sequence, Set, Tuple

from ..crypto.ciphertext import Ciphertext
from ..crypto.keys import EvaluationContext

logger = logging.getLogger(__name__)

PROCESS = "process"
THREAD = "thread"
EXECUTORS = (PROCESS, THREAD)


class CellWork(NamedTuple):
    """One cell of the flat index space."""

    index: int
    row: int
    col: int


def work_items(rows: int, cols: int) -> List[CellWork]:
    """Partition [0, rows*cols) into one work item per cell."""
    return [CellWork(index, *divmod(index, cols)) for index in range(rows * cols)]


def split_work(items: Sequence[CellWork], chunks: int) -> List[List[CellWork]]:
    """Deal work items round-robin into at most `chunks` non-empty lists."""
    return [list(items[i::chunks]) for i in range(min(chunks, len(items)))]


def neighbor_indices(rows: int, cols: int, row: int, col: int) -> List[int]:
    """Flat indices of the eight toroidal neighbors of (row, col).

    Order: the row above left to right, then left and right, then the row
    below left to right.
    """
    up = (row + rows - 1) % rows
    down = (row + 1) % rows
    left = (col + cols - 1) % cols
    right = (col + 1) % cols
    return [
        up * cols + left, up * cols + col, up * cols + right,
        row * cols + left, row * cols + right,
        down * cols + left, down * cols + col, down * cols + right,
    ]


def _next_state(item: CellWork, rows: int, cols: int, current: Sequence[Ciphertext],
                context: EvaluationContext, strategy) -> Ciphertext:
    neighbors = [current[i] for i in neighbor_indices(rows, cols, item.row, item.col)]
    return strategy.next_state(context, current[item.index], neighbors)


# Per-process state filled in by the pool initializer
_worker_state: Dict[str, object] = {}


def _install_worker(context: EvaluationContext, strategy) -> None:
    _worker_state["context"] = context
    _worker_state["strategy"] = strategy


def _compute_chunk(items: Sequence[CellWork], rows: int, cols: int,
                   current: Sequence[Ciphertext]) -> Tuple[int, List[Tuple[int, Ciphertext]], Dict[str, int]]:
    """Worker-side: compute a chunk of cells with the installed context.

    Returns:
        (worker pid, [(index, ciphertext), ...], operation counts for the chunk)
    """
    context = _worker_state["context"]
    strategy = _worker_state["strategy"]
    context.reset_operation_counts()
    results = [(item.index, _next_state(item, rows, cols, current, context, strategy))
               for item in items]
    return os.getpid(), results, context.operation_counts()


class ParallelUpdateScheduler:
    """Fixed-size worker pool that applies a strategy to every cell.

    Homomorphic operations are blocking calls; any failure is fatal for the
    generation being computed and is re-raised to the caller.

    Attributes:
        max_workers: Pool size
        executor: "process" (default) or "thread"
        worker_ids: Process ids that computed cells in the last generation
    """

    def __init__(self, max_workers: Optional[int] = None, executor: str = PROCESS):
        """Initialize scheduler.

        Args:
            max_workers: Pool size (default: CPU count); 1 runs cells inline
            executor: "process" for a process pool, "thread" for a thread pool

        Raises:
            ValueError: If max_workers < 1 or executor is unknown
        """
        if max_workers is None:
            max_workers = os.cpu_count() or 1
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if executor not in EXECUTORS:
            raise ValueError(f"Unknown executor: {executor} (expected one of {', '.join(EXECUTORS)})")

        self.max_workers = max_workers
        self.executor = executor
        self._executor: Optional[Executor] = None
        self._installed: Optional[Tuple[EvaluationContext, object]] = None
        self.generations_computed = 0
        self.worker_ids: Set[int] = set()

    def _process_pool(self, context: EvaluationContext, strategy) -> Executor:
        # Workers hold one (context, strategy) pair; a new pair needs new workers
        if self._installed is not None and (self._installed[0] is not context
                                            or self._installed[1] is not strategy):
            self.close()
        if self._executor is None:
            self._executor = ProcessPoolExecutor(max_workers=self.max_workers,
                                                 initializer=_install_worker,
                                                 initargs=(context, strategy))
            self._installed = (context, strategy)
            logger.debug(f"Started {self.max_workers} worker processes for {strategy!r}")
        return self._executor

    def _thread_pool(self) -> Executor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.max_workers,
                                                thread_name_prefix="fhe-life")
        return self._executor

    @staticmethod
    def _raise_first_failure(futures) -> None:
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for future in pending:
            future.cancel()
        for future in futures:
            if future in done and future.exception() is not None:
                raise future.exception()

    def compute_generation(self,
                           rows: int,
                           cols: int,
                           current: Sequence[Ciphertext],
                           context: EvaluationContext,
                           strategy,
                           out: MutableSequence) -> None:
        """Fill out with the next generation of current.

        Args:
            rows: Board rows
            cols: Board columns
            current: Generation-n buffer (read only)
            context: Evaluation context used for every cell computation
            strategy: CountStrategy applied per cell
            out: Pre-sized generation-n+1 buffer, written one slot per cell

        Raises:
            Exception: The first failure of any cell computation
        """
        if len(current) != rows * cols or len(out) != rows * cols:
            raise ValueError(f"Buffers must both hold {rows * cols} cells")

        items = work_items(rows, cols)
        self.worker_ids = set()

        if self.max_workers == 1:
            for item in items:
                out[item.index] = _next_state(item, rows, cols, current, context, strategy)
            self.worker_ids.add(os.getpid())

        elif self.executor == THREAD:
            pool = self._thread_pool()

            def run(item: CellWork) -> None:
                out[item.index] = _next_state(item, rows, cols, current, context, strategy)

            self._raise_first_failure([pool.submit(run, item) for item in items])
            self.worker_ids.add(os.getpid())

        else:
            pool = self._process_pool(context, strategy)
            snapshot = list(current)
            futures = [pool.submit(_compute_chunk, chunk, rows, cols, snapshot)
                       for chunk in split_work(items, self.max_workers)]
            self._raise_first_failure(futures)
            for future in futures:
                pid, results, counts = future.result()
                self.worker_ids.add(pid)
                context.merge_operation_counts(counts)
                for index, ciphertext in results:
                    out[index] = ciphertext

        self.generations_computed += 1
        logger.debug(f"Computed {len(items)} cells with {self.max_workers} {self.executor} worker(s)")

    def close(self) -> None:
        """Shut down the worker pool."""
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=True)
            self._executor = None
            self._installed = None

    def __enter__(self) -> 'ParallelUpdateScheduler':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ParallelUpdateScheduler(max_workers={self.max_workers}, executor={self.executor!r})"
