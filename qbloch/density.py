from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .config import MIXED_PURITY_THRESHOLD

BlochVector = Tuple[float, float, float]


@dataclass(frozen=True)
class QubitState:
    index: int
    bloch_vector: BlochVector
    rho: np.ndarray
    purity: float
    coherence: float
    is_mixed: bool

    @property
    def radius(self) -> float:
        return float(np.linalg.norm(self.bloch_vector))


def density_matrix(state: np.ndarray) -> np.ndarray:
    psi = np.asarray(state, dtype=complex)
    return np.outer(psi, psi.conj())


def partial_trace(rho: np.ndarray, num_qubits: int, target: int) -> np.ndarray:
    """Trace out every qubit except ``target`` from a full density matrix."""
    rho = np.asarray(rho, dtype=complex)
    tbit = 1 << (num_qubits - 1 - target)
    reduced = np.zeros((2, 2), dtype=complex)
    for i in range(rho.shape[0]):
        for j in range(rho.shape[1]):
            # environment bits must agree
            if (i & ~tbit) != (j & ~tbit):
                continue
            a = 1 if i & tbit else 0
            b = 1 if j & tbit else 0
            reduced[a, b] += rho[i, j]
    return reduced


def reduced_density_matrix(state: np.ndarray, num_qubits: int, target: int) -> np.ndarray:
    """Reduced 2x2 state of ``target`` built straight from amplitude pairs."""
    amplitudes = np.asarray(state, dtype=complex)
    bit = 1 << (num_qubits - 1 - target)
    rho00 = 0.0 + 0.0j
    rho11 = 0.0 + 0.0j
    rho01 = 0.0 + 0.0j
    for i0 in range(amplitudes.size):
        if i0 & bit:
            continue
        a0 = amplitudes[i0]
        a1 = amplitudes[i0 | bit]
        rho00 += a0 * np.conjugate(a0)
        rho11 += a1 * np.conjugate(a1)
        rho01 += a0 * np.conjugate(a1)
    return np.array([[rho00, rho01], [np.conjugate(rho01), rho11]], dtype=complex)


def bloch_vector(rho: np.ndarray) -> BlochVector:
    rx = (rho[0, 1] + rho[1, 0]).real
    ry = (rho[1, 0] - rho[0, 1]).imag
    rz = (rho[0, 0] - rho[1, 1]).real
    return (float(rx), float(ry), float(rz))


def purity(rho: np.ndarray) -> float:
    """Tr(rho^2); 1 for a pure state."""
    rho = np.asarray(rho, dtype=complex)
    return float(np.real(np.trace(rho @ rho)))


def coherence(rho: np.ndarray) -> float:
    return float(abs(rho[0, 1]))


def reduce_qubit(state: np.ndarray, num_qubits: int, target: int) -> BlochVector:
    return bloch_vector(reduced_density_matrix(state, num_qubits, target))


def qubit_state(index: int, rho: np.ndarray) -> QubitState:
    rho = np.where(np.abs(rho) < 1e-15, 0.0, rho)
    rho.setflags(write=False)
    p = purity(rho)
    return QubitState(
        index=index,
        bloch_vector=bloch_vector(rho),
        rho=rho,
        purity=p,
        coherence=coherence(rho),
        is_mixed=p < MIXED_PURITY_THRESHOLD,
    )


def single_qubit_states(state: np.ndarray, num_qubits: int) -> List[QubitState]:
    return [qubit_state(q, reduced_density_matrix(state, num_qubits, q)) for q in range(num_qubits)]


def states_from_density(rho: np.ndarray, num_qubits: int) -> List[QubitState]:
    return [qubit_state(q, partial_trace(rho, num_qubits, q)) for q in range(num_qubits)]


def bloch_vectors(state: np.ndarray, num_qubits: int) -> List[BlochVector]:
    return [reduce_qubit(state, num_qubits, q) for q in range(num_qubits)]
