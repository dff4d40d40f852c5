"""Key material and the homomorphic evaluation context.

The client key owns the secret vector and is the only object able to
decrypt. The evaluation context is what the update engine receives: it can
add, scale and bootstrap ciphertexts (lookup tables, boolean gates) but
exposes no decryption.

Programmable bootstrapping is simulated. The context carries an opaque
bootstrapping key that refreshes a ciphertext through a lookup table, the
role a blind-rotation key plays in TFHE. The scheme is noiseless and is a
functional model of the capability set, not a secure implementation.
"""

import logging
import threading
from collections import Counter
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from ..errors import CapacityOverflow
from .ciphertext import Ciphertext
from .lookup import LookupTable
from .params import DEFAULT_PARAMETERS, ParameterSet

logger = logging.getLogger(__name__)

# Boolean gates pack two bits as 2*lhs + rhs before one table lookup
GATE_DOMAIN = 4

_GATE_FUNCTIONS: Dict[str, Callable[[int, int], int]] = {
    "and": lambda lhs, rhs: lhs & rhs,
    "or": lambda lhs, rhs: lhs | rhs,
    "xor": lambda lhs, rhs: lhs ^ rhs,
}


class _Encryptor:
    """Fresh LWE encryptions under one secret vector."""

    def __init__(self, secret: np.ndarray, modulus: int, rng: np.random.Generator):
        self._secret = secret
        self._modulus = modulus
        self._rng = rng
        self._lock = threading.Lock()

    def encrypt(self, value: int) -> Ciphertext:
        with self._lock:
            mask = self._rng.integers(0, self._modulus, size=self._secret.shape[0], dtype=np.int64)
        body = int(np.dot(mask, self._secret)) + int(value)
        return Ciphertext(mask, body, self._modulus)

    def phase(self, ciphertext: Ciphertext) -> int:
        return (ciphertext.b - int(np.dot(ciphertext.a, self._secret))) % self._modulus

    def __getstate__(self) -> dict:
        state = self.__dict__.copy()
        del state["_lock"]
        del state["_rng"]
        return state

    def __setstate__(self, state: dict) -> None:
        self.__dict__.update(state)
        # Each unpickled copy draws its own masks
        self._rng = np.random.default_rng()
        self._lock = threading.Lock()


class _BootstrappingKey:
    """Opaque refresh capability held by the evaluation context."""

    def __init__(self, encryptor: _Encryptor):
        self._encryptor = encryptor

    def refresh(self, ciphertext: Ciphertext, table: LookupTable) -> Ciphertext:
        return self._encryptor.encrypt(table(self._encryptor.phase(ciphertext)))

    def __repr__(self) -> str:
        return "_BootstrappingKey(<opaque>)"


class EvaluationContext:
    """Public capability object for homomorphic evaluation.

    Immutable apart from its operation counters, safe to share between any
    number of worker threads, picklable for worker processes, and passed
    explicitly to every core operation.

    The simulated bootstrapping oracle holds the secret vector, so this is
    not a capability boundary: code that reaches into private attributes
    can decrypt. The public API offers no decryption.

    Attributes:
        params: Parameter set fixing the plaintext capacity
    """

    def __init__(self, params: ParameterSet, bootstrapping_key: _BootstrappingKey):
        self.params = params
        self._bootstrapping_key = bootstrapping_key
        self._counts: Counter = Counter()
        self._counts_lock = threading.Lock()

        self._gate_tables: Dict[str, LookupTable] = {}
        if self.capacity >= GATE_DOMAIN:
            for name, gate in _GATE_FUNCTIONS.items():
                self._gate_tables[name] = LookupTable.from_function(
                    lambda x, gate=gate: gate((x // 2) & 1, x & 1),
                    self.capacity, domain_size=GATE_DOMAIN, name=name)

        logger.debug(f"Evaluation context ready: {params.name}, capacity={self.capacity}")

    @property
    def message_modulus(self) -> int:
        return self.params.message_modulus

    @property
    def carry_modulus(self) -> int:
        return self.params.carry_modulus

    @property
    def capacity(self) -> int:
        """Combined plaintext capacity (message x carry)."""
        return self.params.plaintext_capacity

    def _record(self, operation: str) -> None:
        with self._counts_lock:
            self._counts[operation] += 1

    def _check(self, *ciphertexts: Ciphertext) -> None:
        for ct in ciphertexts:
            if ct.modulus != self.capacity:
                raise ValueError(
                    f"Ciphertext modulus {ct.modulus} does not match context capacity {self.capacity}")

    def operation_counts(self) -> Dict[str, int]:
        """Snapshot of homomorphic operations issued so far, by kind."""
        with self._counts_lock:
            return dict(self._counts)

    def reset_operation_counts(self) -> None:
        with self._counts_lock:
            self._counts.clear()

    def merge_operation_counts(self, counts: Dict[str, int]) -> None:
        """Add counts of operations issued on a copy of this context."""
        with self._counts_lock:
            self._counts.update(counts)

    def __getstate__(self) -> dict:
        state = self.__dict__.copy()
        del state["_counts_lock"]
        state["_counts"] = Counter()
        return state

    def __setstate__(self, state: dict) -> None:
        self.__dict__.update(state)
        self._counts_lock = threading.Lock()

    # Linear operations

    def trivial_encrypt(self, value: int) -> Ciphertext:
        """Noiseless public encryption (zero mask) of a known constant."""
        self._record("trivial_encrypt")
        return Ciphertext(np.zeros(self.params.lwe_dimension, dtype=np.int64), value, self.capacity)

    def add(self, lhs: Ciphertext, rhs: Ciphertext) -> Ciphertext:
        """Unchecked modular addition; sums past the capacity wrap."""
        self._check(lhs, rhs)
        self._record("add")
        return Ciphertext(lhs.a + rhs.a, lhs.b + rhs.b, self.capacity)

    def sub(self, lhs: Ciphertext, rhs: Ciphertext) -> Ciphertext:
        self._check(lhs, rhs)
        self._record("sub")
        return Ciphertext(lhs.a - rhs.a, lhs.b - rhs.b, self.capacity)

    def scalar_add(self, ciphertext: Ciphertext, scalar: int) -> Ciphertext:
        self._check(ciphertext)
        self._record("scalar_add")
        return Ciphertext(ciphertext.a, ciphertext.b + int(scalar), self.capacity)

    def scalar_mul(self, ciphertext: Ciphertext, scalar: int) -> Ciphertext:
        self._check(ciphertext)
        self._record("scalar_mul")
        return Ciphertext(ciphertext.a * int(scalar), ciphertext.b * int(scalar), self.capacity)

    # Programmable bootstrapping

    def generate_lookup_table(self,
                              function: Callable[[int], int],
                              domain_size: Optional[int] = None,
                              name: str = "lut") -> LookupTable:
        """Build a table for this context's plaintext space.

        Raises:
            CapacityOverflow: If domain_size exceeds the context capacity
        """
        return LookupTable.from_function(function, self.capacity, domain_size=domain_size, name=name)

    def apply_lookup_table(self, ciphertext: Ciphertext, table: LookupTable) -> Ciphertext:
        """Evaluate table on the encrypted value, returning a fresh ciphertext."""
        self._check(ciphertext)
        if table.capacity != self.capacity:
            raise ValueError(
                f"Lookup table '{table.name}' was built for capacity {table.capacity}, "
                f"context has {self.capacity}")
        self._record("bootstrap")
        return self._bootstrapping_key.refresh(ciphertext, table)

    # Boolean gates (inputs must encrypt 0 or 1)

    def _gate(self, name: str, lhs: Ciphertext, rhs: Ciphertext) -> Ciphertext:
        table = self._gate_tables.get(name)
        if table is None:
            raise CapacityOverflow(GATE_DOMAIN, self.capacity, what=f"boolean {name} gate")
        self._record(name)
        packed = self.add(self.scalar_mul(lhs, 2), rhs)
        return self.apply_lookup_table(packed, table)

    def and_(self, lhs: Ciphertext, rhs: Ciphertext) -> Ciphertext:
        return self._gate("and", lhs, rhs)

    def or_(self, lhs: Ciphertext, rhs: Ciphertext) -> Ciphertext:
        return self._gate("or", lhs, rhs)

    def xor(self, lhs: Ciphertext, rhs: Ciphertext) -> Ciphertext:
        return self._gate("xor", lhs, rhs)

    def not_(self, ciphertext: Ciphertext) -> Ciphertext:
        """1 - x, a linear operation needing no bootstrap."""
        self._record("not")
        return self.scalar_add(self.scalar_mul(ciphertext, -1), 1)

    def __repr__(self) -> str:
        return f"EvaluationContext({self.params.name}, capacity={self.capacity})"


class ClientKey:
    """Secret key material: the decryption boundary.

    Used only to build the initial board and to inspect finished
    generations, never from inside an update.
    """

    def __init__(self, params: ParameterSet, secret: np.ndarray, seed: Optional[int] = None):
        """Initialize client key.

        Args:
            params: Parameter set the key was generated for
            secret: Secret vector of length params.lwe_dimension
            seed: Optional seed for encryption randomness
        """
        secret = np.array(secret, dtype=np.int64)
        if secret.shape != (params.lwe_dimension,):
            raise ValueError(
                f"Secret shape {secret.shape} doesn't match lwe_dimension {params.lwe_dimension}")
        secret.flags.writeable = False

        self.params = params
        self.seed = seed
        self._secret = secret
        seeds = np.random.SeedSequence(seed).spawn(2)
        self._encryptor = _Encryptor(secret, params.plaintext_capacity, np.random.default_rng(seeds[0]))
        self._bootstrap_seed = seeds[1]

    def encrypt(self, value) -> Ciphertext:
        """Encrypt a boolean or small integer cell value.

        Raises:
            ValueError: If value is outside the message space
        """
        value = int(value)
        if not 0 <= value < self.params.message_modulus:
            raise ValueError(
                f"Value {value} outside message space [0, {self.params.message_modulus})")
        return self._encryptor.encrypt(value)

    def decrypt(self, ciphertext: Ciphertext) -> int:
        if ciphertext.modulus != self.params.plaintext_capacity:
            raise ValueError("Ciphertext was not produced under this key's parameters")
        return self._encryptor.phase(ciphertext)

    def decrypt_bool(self, ciphertext: Ciphertext) -> bool:
        return self.decrypt(ciphertext) != 0

    def encrypt_grid(self, grid: np.ndarray) -> List[Ciphertext]:
        """Encrypt a 2D cell array in row-major order."""
        grid = np.asarray(grid)
        if grid.ndim != 2:
            raise ValueError(f"Grid must be 2D, got shape {grid.shape}")
        return [self.encrypt(v) for v in grid.astype(np.int64).ravel()]

    def decrypt_cells(self, ciphertexts: Sequence[Ciphertext], columns: int) -> np.ndarray:
        """Decrypt a row-major ciphertext sequence to a boolean array."""
        values = np.array([self.decrypt_bool(ct) for ct in ciphertexts], dtype=bool)
        return values.reshape(-1, columns)

    def decrypt_board(self, board) -> np.ndarray:
        """Decrypt every cell of a board to a (rows, cols) boolean array."""
        return self.decrypt_cells(board.states, board.cols)

    def evaluation_context(self) -> EvaluationContext:
        """Derive the public evaluation context for this key."""
        encryptor = _Encryptor(self._secret, self.params.plaintext_capacity,
                               np.random.default_rng(self._bootstrap_seed))
        return EvaluationContext(self.params, _BootstrappingKey(encryptor))

    def to_dict(self) -> dict:
        return {
            "parameter_set": self.params.name,
            "secret": [int(x) for x in self._secret],
            "seed": self.seed,
        }

    def __repr__(self) -> str:
        return f"ClientKey({self.params.name})"


def generate_keys(params: ParameterSet = DEFAULT_PARAMETERS, seed: Optional[int] = None):
    """Generate a client key and its evaluation context.

    Args:
        params: Parameter set to generate keys for
        seed: Optional seed for reproducible keys and encryptions

    Returns:
        (ClientKey, EvaluationContext)
    """
    rng = np.random.default_rng(seed)
    secret = rng.integers(0, params.plaintext_capacity, size=params.lwe_dimension, dtype=np.int64)
    client_key = ClientKey(params, secret, seed=seed)
    logger.info(f"Generated keys for {params.name} (capacity={params.plaintext_capacity})")
    return client_key, client_key.evaluation_context()
