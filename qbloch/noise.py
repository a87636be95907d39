from __future__ import annotations

import logging
import math
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from .config import NoiseParams
from .density import BlochVector
from .simulator import bit_mask

logger = logging.getLogger(__name__)


class NoiseChannel(str, Enum):
    NONE = "none"
    DEPOLARIZING = "depolarizing"
    BITFLIP = "bitflip"
    PHASEFLIP = "phaseflip"
    AMPLITUDE_DAMPING = "amplitude"
    PHASE_DAMPING = "phase"


_CHANNEL_ALIASES = {
    "amplitude_damping": NoiseChannel.AMPLITUDE_DAMPING,
    "amplitudedamping": NoiseChannel.AMPLITUDE_DAMPING,
    "phase_damping": NoiseChannel.PHASE_DAMPING,
    "phasedamping": NoiseChannel.PHASE_DAMPING,
    "bit_flip": NoiseChannel.BITFLIP,
    "phase_flip": NoiseChannel.PHASEFLIP,
}


def resolve_channel(channel) -> NoiseChannel:
    if isinstance(channel, NoiseChannel):
        return channel
    key = str(channel).strip().lower()
    if key in _CHANNEL_ALIASES:
        return _CHANNEL_ALIASES[key]
    try:
        return NoiseChannel(key)
    except ValueError:
        raise ValueError(f"Unknown noise channel: {channel}") from None


# -----------------------------
# Bloch-level channels
# -----------------------------

def _apply_one(vec: Sequence[float], channel: NoiseChannel, p: float, rng: np.random.Generator) -> BlochVector:
    rx, ry, rz = (float(v) for v in vec)
    if channel is NoiseChannel.DEPOLARIZING:
        f = 1.0 - p
        return (rx * f, ry * f, rz * f)
    if channel is NoiseChannel.BITFLIP:
        if rng.random() < p:
            return (-rx, ry, -rz)
        return (rx, ry, rz)
    if channel is NoiseChannel.PHASEFLIP:
        if rng.random() < p:
            return (-rx, -ry, rz)
        return (rx, ry, rz)
    if channel is NoiseChannel.AMPLITUDE_DAMPING:
        f = math.sqrt(1.0 - p)
        return (rx * f, ry * f, rz * (1.0 - p) + p)
    if channel is NoiseChannel.PHASE_DAMPING:
        f = math.sqrt(1.0 - p)
        return (rx * f, ry * f, rz)
    return (rx, ry, rz)


def apply_noise(
    vectors: Sequence[Sequence[float]],
    channel,
    param: float,
    rng: Optional[np.random.Generator] = None,
) -> List[BlochVector]:
    """Apply a noise channel to every Bloch vector.

    ``bitflip`` and ``phaseflip`` are stochastic: each vector is flipped
    independently with probability ``param``, drawn from ``rng``.
    """
    channel = resolve_channel(channel)
    if rng is None:
        rng = np.random.default_rng()
    return [_apply_one(v, channel, param, rng) for v in vectors]


# -----------------------------
# Amplitude-level noise (analysis path)
# -----------------------------

def _flip_qubit(state: np.ndarray, num_qubits: int, qubit: int) -> np.ndarray:
    bit = bit_mask(num_qubits, qubit)
    return state[np.arange(state.size) ^ bit]


def _phase_qubit(state: np.ndarray, num_qubits: int, qubit: int) -> np.ndarray:
    bit = bit_mask(num_qubits, qubit)
    signs = np.where(np.arange(state.size) & bit, -1.0, 1.0)
    return state * signs


def perturb_amplitudes(
    state: np.ndarray,
    num_qubits: int,
    params: NoiseParams,
    rng: np.random.Generator,
) -> np.ndarray:
    """One round of amplitude-level noise; returns a renormalised copy.

    Each amplitude is rescaled by a factor in [0.8, 1.2] with probability
    ``depolarization_rate``; each qubit gets an X (``bit_flip_rate``) or a Z
    (``phase_flip_rate``) error.
    """
    noisy = np.array(state, dtype=complex, copy=True)

    if params.depolarization_rate > 0:
        hit = rng.random(noisy.size) < params.depolarization_rate
        factors = 0.8 + 0.4 * rng.random(noisy.size)
        noisy = np.where(hit, noisy * factors, noisy)

    for q in range(num_qubits):
        if params.bit_flip_rate > 0 and rng.random() < params.bit_flip_rate:
            noisy = _flip_qubit(noisy, num_qubits, q)
        if params.phase_flip_rate > 0 and rng.random() < params.phase_flip_rate:
            noisy = _phase_qubit(noisy, num_qubits, q)

    norm = np.linalg.norm(noisy)
    if norm == 0:
        logger.warning("noise left a zero-norm state; keeping the input state")
        return np.array(state, dtype=complex, copy=True)
    return noisy / norm
