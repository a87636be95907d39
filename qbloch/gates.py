from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

import numpy as np

from .complex_math import Complex


def _phase(angle: float) -> complex:
    return complex(Complex.from_polar(1.0, angle))


# -----------------------------
# Fixed single-qubit gates
# -----------------------------

I = np.eye(2, dtype=complex)
X = np.array([[0, 1], [1, 0]], dtype=complex)
Y = np.array([[0, -1j], [1j, 0]], dtype=complex)
Z = np.array([[1, 0], [0, -1]], dtype=complex)
H = (1 / np.sqrt(2)) * np.array([[1, 1], [1, -1]], dtype=complex)
S = np.array([[1, 0], [0, 1j]], dtype=complex)
SDG = np.array([[1, 0], [0, -1j]], dtype=complex)
T = np.array([[1, 0], [0, _phase(np.pi / 4)]], dtype=complex)
TDG = np.array([[1, 0], [0, _phase(-np.pi / 4)]], dtype=complex)
SX = 0.5 * np.array([[1 + 1j, 1 - 1j], [1 - 1j, 1 + 1j]], dtype=complex)


# -----------------------------
# Parametrized single-qubit gates
# -----------------------------

def rx(theta: float) -> np.ndarray:
    c = np.cos(theta / 2.0)
    s = -1j * np.sin(theta / 2.0)
    return np.array([[c, s], [s, c]], dtype=complex)


def ry(theta: float) -> np.ndarray:
    c = np.cos(theta / 2.0)
    s = np.sin(theta / 2.0)
    return np.array([[c, -s], [s, c]], dtype=complex)


def rz(theta: float) -> np.ndarray:
    return np.array([[_phase(-theta / 2.0), 0], [0, _phase(theta / 2.0)]], dtype=complex)


def p(phi: float) -> np.ndarray:
    return np.array([[1, 0], [0, _phase(phi)]], dtype=complex)


def u(theta: float, phi: float, lam: float) -> np.ndarray:
    """Generic single-qubit gate U(θ, φ, λ)."""
    c = np.cos(theta / 2.0)
    s = np.sin(theta / 2.0)
    return np.array(
        [[c, -_phase(lam) * s], [_phase(phi) * s, _phase(phi + lam) * c]],
        dtype=complex,
    )


# -----------------------------
# Two-qubit gates (first qubit is the high bit of the gate index)
# -----------------------------

CX = np.array([[1, 0, 0, 0],
               [0, 1, 0, 0],
               [0, 0, 0, 1],
               [0, 0, 1, 0]], dtype=complex)

CY = np.array([[1, 0, 0, 0],
               [0, 1, 0, 0],
               [0, 0, 0, -1j],
               [0, 0, 1j, 0]], dtype=complex)

CZ = np.array([[1, 0, 0, 0],
               [0, 1, 0, 0],
               [0, 0, 1, 0],
               [0, 0, 0, -1]], dtype=complex)

SWAP = np.array([[1, 0, 0, 0],
                 [0, 0, 1, 0],
                 [0, 1, 0, 0],
                 [0, 0, 0, 1]], dtype=complex)


# -----------------------------
# Registry
# -----------------------------

@dataclass(frozen=True)
class GateSpec:
    name: str
    num_qubits: int
    num_params: int
    matrix: Optional[np.ndarray] = None
    constructor: Optional[Callable[..., np.ndarray]] = None

    def build(self, params: Sequence[float] = ()) -> np.ndarray:
        if self.constructor is not None:
            return self.constructor(*params)
        return self.matrix


def _fixed(name: str, num_qubits: int, matrix: np.ndarray) -> GateSpec:
    matrix = matrix.copy()
    matrix.setflags(write=False)
    return GateSpec(name, num_qubits, 0, matrix=matrix)


REGISTRY: Dict[str, GateSpec] = {
    spec.name: spec
    for spec in (
        _fixed("h", 1, H),
        _fixed("x", 1, X),
        _fixed("y", 1, Y),
        _fixed("z", 1, Z),
        _fixed("s", 1, S),
        _fixed("t", 1, T),
        _fixed("sdg", 1, SDG),
        _fixed("tdg", 1, TDG),
        _fixed("sx", 1, SX),
        GateSpec("rx", 1, 1, constructor=rx),
        GateSpec("ry", 1, 1, constructor=ry),
        GateSpec("rz", 1, 1, constructor=rz),
        GateSpec("p", 1, 1, constructor=p),
        GateSpec("u", 1, 3, constructor=u),
        _fixed("cx", 2, CX),
        _fixed("cy", 2, CY),
        _fixed("cz", 2, CZ),
        _fixed("swap", 2, SWAP),
    )
}

ALIASES: Dict[str, str] = {
    "s†": "sdg",
    "t†": "tdg",
    "cnot": "cx",
    "u3": "u",
    "phase": "p",
}


def canonical_name(name: str) -> str:
    key = name.strip().lower()
    return ALIASES.get(key, key)


def lookup(name: str) -> Optional[GateSpec]:
    return REGISTRY.get(canonical_name(name))


def gate_matrix(name: str, params: Sequence[float] = ()) -> np.ndarray:
    spec = lookup(name)
    if spec is None:
        raise KeyError(f"Unknown gate: {name}")
    return spec.build(params)


def is_unitary(matrix: np.ndarray, tol: float = 1e-10) -> bool:
    m = np.asarray(matrix, dtype=complex)
    return np.allclose(m.conj().T @ m, np.eye(m.shape[0]), atol=tol)
