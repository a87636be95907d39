from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .config import ENTANGLEMENT_THRESHOLD, FIDELITY_THRESHOLD
from .density import reduced_density_matrix

# 1 - cos^2 is floored here so parallel Bloch vectors give a finite value.
_MI_FLOOR = 1e-12


@dataclass(frozen=True)
class EntanglementMeasures:
    entropy: float
    concurrence: float
    is_entangled: bool
    subsystem: int


@dataclass(frozen=True)
class ErrorMetrics:
    fidelity: float
    trace_distance: float
    error_rate: float
    success_probability: float
    within_tolerance: bool


# -----------------------------
# Bloch-vector entanglement
# -----------------------------

def linear_mutual_information(a: Sequence[float], b: Sequence[float]) -> float:
    """``max(0, -0.5 ln(1 - cos^2))`` for the angle between two Bloch vectors.

    Zero when either vector has zero length.
    """
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    mag_a = np.linalg.norm(va)
    mag_b = np.linalg.norm(vb)
    if mag_a == 0 or mag_b == 0:
        return 0.0
    cos_theta = float(np.dot(va, vb) / (mag_a * mag_b))
    return max(0.0, -0.5 * math.log(max(1.0 - cos_theta * cos_theta, _MI_FLOOR)))


def pairwise_entanglement(vectors: Sequence[Sequence[float]]) -> np.ndarray:
    n = len(vectors)
    matrix = np.zeros((n, n), dtype=float)
    for i in range(n):
        for j in range(i + 1, n):
            matrix[i, j] = matrix[j, i] = linear_mutual_information(vectors[i], vectors[j])
    return matrix


def total_entanglement(vectors: Sequence[Sequence[float]]) -> float:
    """Sum of the pairwise values over distinct qubit pairs."""
    matrix = pairwise_entanglement(vectors)
    return float(np.triu(matrix, k=1).sum())


# -----------------------------
# Entropy and concurrence
# -----------------------------

def eigenvalues_2x2(rho: np.ndarray) -> Tuple[float, float]:
    """Closed-form eigenvalues of a 2x2 Hermitian matrix via trace/determinant."""
    a, b = rho[0, 0], rho[0, 1]
    c, d = rho[1, 0], rho[1, 1]
    tr = float((a + d).real)
    det = float((a * d - b * c).real)
    disc = math.sqrt(max(tr * tr - 4.0 * det, 0.0))
    return ((tr + disc) / 2.0, (tr - disc) / 2.0)


def entanglement_entropy(rho: np.ndarray) -> float:
    entropy = 0.0
    for lam in eigenvalues_2x2(rho):
        if lam > 1e-12:
            entropy -= lam * math.log2(lam)
    return max(entropy, 0.0)


def concurrence_from_entropy(entropy: float) -> float:
    return math.sqrt(max(2.0 * (1.0 - 2.0 ** (-entropy)), 0.0))


def entanglement_measures(state: np.ndarray, num_qubits: int) -> EntanglementMeasures:
    """Entropy of the middle qubit against the rest of the register."""
    if num_qubits < 2:
        return EntanglementMeasures(0.0, 0.0, False, 0)
    mid = num_qubits // 2
    entropy = entanglement_entropy(reduced_density_matrix(state, num_qubits, mid))
    return EntanglementMeasures(
        entropy=entropy,
        concurrence=concurrence_from_entropy(entropy),
        is_entangled=entropy > ENTANGLEMENT_THRESHOLD,
        subsystem=mid,
    )


# -----------------------------
# Error metrics
# -----------------------------

def fidelity(a: np.ndarray, b: np.ndarray) -> float:
    """|<a|b>|^2 for two pure states."""
    a = np.asarray(a, dtype=complex).reshape(-1)
    b = np.asarray(b, dtype=complex).reshape(-1)
    return float(np.abs(np.vdot(a, b)) ** 2)


def trace_distance(a: np.ndarray, b: np.ndarray) -> float:
    # amplitude-difference form, not the operator trace norm
    a = np.asarray(a, dtype=complex).reshape(-1)
    b = np.asarray(b, dtype=complex).reshape(-1)
    return float(0.5 * np.sum(np.abs(a - b)))


def error_metrics(ideal: np.ndarray, noisy: np.ndarray) -> ErrorMetrics:
    f = fidelity(ideal, noisy)
    return ErrorMetrics(
        fidelity=f,
        trace_distance=trace_distance(ideal, noisy),
        error_rate=1.0 - f,
        success_probability=f * f,
        within_tolerance=f > FIDELITY_THRESHOLD,
    )


def mutual_information_pairs(vectors: Sequence[Sequence[float]]) -> List[Tuple[int, int, float]]:
    """Upper-triangle entries of :func:`pairwise_entanglement`, strongest first."""
    matrix = pairwise_entanglement(vectors)
    pairs = [(i, j, float(matrix[i, j])) for i in range(len(vectors)) for j in range(i + 1, len(vectors))]
    return sorted(pairs, key=lambda t: t[2], reverse=True)
