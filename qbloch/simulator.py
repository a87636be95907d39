from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple

import numpy as np

from .gates import I, gate_matrix
from .qasm import Operation

logger = logging.getLogger(__name__)


def bit_mask(num_qubits: int, qubit: int) -> int:
    """Mask of the basis-index bit for ``qubit`` (qubit 0 is the high bit)."""
    return 1 << (num_qubits - 1 - qubit)


def zero_state(num_qubits: int) -> np.ndarray:
    state = np.zeros(1 << num_qubits, dtype=complex)
    state[0] = 1.0
    return state


# -----------------------------
# Bit-indexed updates (in place)
# -----------------------------

def _apply_single_qubit_unitary(state: np.ndarray, num_qubits: int, target: int, U: np.ndarray) -> None:
    # Iterate pairs differing at target bit
    bit = bit_mask(num_qubits, target)
    size = state.size
    for i in range(0, size, bit << 1):
        for j in range(bit):
            i0 = i + j
            i1 = i0 + bit
            a0 = state[i0]
            a1 = state[i1]
            state[i0] = U[0, 0] * a0 + U[0, 1] * a1
            state[i1] = U[1, 0] * a0 + U[1, 1] * a1


def _apply_cx(state: np.ndarray, num_qubits: int, control: int, target: int) -> None:
    cbit = bit_mask(num_qubits, control)
    tbit = bit_mask(num_qubits, target)
    for base in range(state.size):
        if (base & cbit) and not (base & tbit):
            j = base | tbit
            state[base], state[j] = state[j], state[base]


def _apply_cy(state: np.ndarray, num_qubits: int, control: int, target: int) -> None:
    cbit = bit_mask(num_qubits, control)
    tbit = bit_mask(num_qubits, target)
    for base in range(state.size):
        if (base & cbit) and not (base & tbit):
            j = base | tbit
            a0, a1 = state[base], state[j]
            state[base] = -1j * a1
            state[j] = 1j * a0


def _apply_cz(state: np.ndarray, num_qubits: int, control: int, target: int) -> None:
    cbit = bit_mask(num_qubits, control)
    tbit = bit_mask(num_qubits, target)
    for idx in range(state.size):
        if (idx & cbit) and (idx & tbit):
            state[idx] = -state[idx]


def _apply_swap(state: np.ndarray, num_qubits: int, q0: int, q1: int) -> None:
    bit0 = bit_mask(num_qubits, q0)
    bit1 = bit_mask(num_qubits, q1)
    for idx in range(state.size):
        # visit each differing pair once, from the side where q0 is set
        if (idx & bit0) and not (idx & bit1):
            j = idx ^ bit0 ^ bit1
            state[idx], state[j] = state[j], state[idx]


_TWO_QUBIT_RULES: Dict[str, Callable[[np.ndarray, int, int, int], None]] = {
    "cx": _apply_cx,
    "cy": _apply_cy,
    "cz": _apply_cz,
    "swap": _apply_swap,
}


# -----------------------------
# Tensor-product construction
# -----------------------------

def _kron_all(factors: Iterable[np.ndarray]) -> np.ndarray:
    full = np.ones((1, 1), dtype=complex)
    for f in factors:
        full = np.kron(full, f)
    return full


def _basis_op(row: int, col: int) -> np.ndarray:
    m = np.zeros((2, 2), dtype=complex)
    m[row, col] = 1.0
    return m


def expand_gate(gate: np.ndarray, qubits: Sequence[int], num_qubits: int) -> np.ndarray:
    """Embed a 2x2 or 4x4 ``gate`` on ``qubits`` into the full register.

    Single-qubit gates are a plain Kronecker product with identities in
    register order. Two-qubit gates are expanded over the operator basis
    ``|r><c|`` on each wire, so the pair need not be adjacent or ordered.
    """
    gate = np.asarray(gate, dtype=complex)
    if len(qubits) == 1:
        target = qubits[0]
        return _kron_all(gate if k == target else I for k in range(num_qubits))

    qa, qb = qubits
    dim = 1 << num_qubits
    full = np.zeros((dim, dim), dtype=complex)
    for r in range(4):
        for c in range(4):
            coeff = gate[r, c]
            if coeff == 0:
                continue
            wires = {qa: _basis_op(r >> 1, c >> 1), qb: _basis_op(r & 1, c & 1)}
            full += coeff * _kron_all(wires.get(k, I) for k in range(num_qubits))
    return full


def build_full_unitary(op: Operation, num_qubits: int) -> np.ndarray:
    return expand_gate(gate_matrix(op.name, op.params), op.qubits, num_qubits)


# -----------------------------
# Strategies
# -----------------------------

class GateStrategy:
    """Applies one operation to a state vector, returning a new vector."""

    name = "base"

    def supports(self, op: Operation) -> bool:
        return True

    def apply(self, state: np.ndarray, num_qubits: int, op: Operation) -> np.ndarray:
        raise NotImplementedError


class BitIndexedStrategy(GateStrategy):
    name = "bit-indexed"

    def supports(self, op: Operation) -> bool:
        return op.arity == 1 or op.name in _TWO_QUBIT_RULES

    def apply(self, state: np.ndarray, num_qubits: int, op: Operation) -> np.ndarray:
        out = np.array(state, dtype=complex, copy=True)
        if op.arity == 1:
            _apply_single_qubit_unitary(out, num_qubits, op.qubits[0], gate_matrix(op.name, op.params))
        elif op.name in _TWO_QUBIT_RULES:
            _TWO_QUBIT_RULES[op.name](out, num_qubits, op.qubits[0], op.qubits[1])
        else:
            raise ValueError(f"No bit-indexed rule for gate: {op.name}")
        return out


class TensorProductStrategy(GateStrategy):
    name = "tensor"

    def apply(self, state: np.ndarray, num_qubits: int, op: Operation) -> np.ndarray:
        return build_full_unitary(op, num_qubits) @ np.asarray(state, dtype=complex)


class AutoStrategy(GateStrategy):
    """Bit-indexed where a rule exists, tensor product otherwise."""

    name = "auto"

    def __init__(self):
        self.fast = BitIndexedStrategy()
        self.generic = TensorProductStrategy()

    def apply(self, state: np.ndarray, num_qubits: int, op: Operation) -> np.ndarray:
        chosen = self.fast if self.fast.supports(op) else self.generic
        return chosen.apply(state, num_qubits, op)


STRATEGIES: Dict[str, Callable[[], GateStrategy]] = {
    "auto": AutoStrategy,
    "bit-indexed": BitIndexedStrategy,
    "tensor": TensorProductStrategy,
}


def get_strategy(strategy=None) -> GateStrategy:
    if strategy is None:
        return AutoStrategy()
    if isinstance(strategy, GateStrategy):
        return strategy
    try:
        return STRATEGIES[strategy]()
    except KeyError:
        raise ValueError(f"Unknown strategy: {strategy}") from None


# -----------------------------
# Evolution
# -----------------------------

def _frozen(state: np.ndarray) -> np.ndarray:
    snap = state.copy()
    snap.setflags(write=False)
    return snap


@dataclass(frozen=True)
class SimulationResult:
    final_state: np.ndarray
    steps: Tuple[np.ndarray, ...]

    @property
    def num_steps(self) -> int:
        return len(self.steps)


def apply_operation(state: np.ndarray, num_qubits: int, op: Operation, strategy=None) -> np.ndarray:
    return get_strategy(strategy).apply(state, num_qubits, op)


def evolve(num_qubits: int, ops: Sequence[Operation], strategy=None) -> SimulationResult:
    """Evolve ``|0...0>`` through ``ops`` in program order.

    ``steps[0]`` is the initial state and ``steps[k]`` the state after the
    k-th operation; the last step is the final state.
    """
    applier = get_strategy(strategy)
    state = zero_state(num_qubits)
    steps = [_frozen(state)]
    for op in ops:
        state = applier.apply(state, num_qubits, op)
        logger.debug("applied %s on %s via %s", op.name, op.qubits, applier.name)
        steps.append(_frozen(state))
    logger.info("evolved %d qubit(s) through %d operation(s)", num_qubits, len(ops))
    return SimulationResult(final_state=steps[-1], steps=tuple(steps))


def get_statevector(program, strategy=None) -> np.ndarray:
    return evolve(program.num_qubits, program.ops, strategy).final_state


def norm_squared(state: np.ndarray) -> float:
    return float(np.vdot(state, state).real)
