from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from .config import MAX_RECOMMENDED_DEPTH, NoiseParams
from .density import QubitState, density_matrix, states_from_density
from .metrics import (
    EntanglementMeasures,
    ErrorMetrics,
    entanglement_measures,
    error_metrics,
    total_entanglement,
)
from .noise import perturb_amplitudes
from .qasm import CircuitProgram
from .simulator import get_strategy, zero_state

logger = logging.getLogger(__name__)


# -----------------------------
# Circuit structure
# -----------------------------

@dataclass(frozen=True)
class GateSummary:
    depth: int
    total_gates: int
    counts: Dict[str, int]


def circuit_depth(program: CircuitProgram) -> int:
    """Number of layers when every gate starts as soon as its qubits are free."""
    levels = [0] * program.num_qubits
    for op in program.ops:
        layer = max(levels[q] for q in op.qubits) + 1
        for q in op.qubits:
            levels[q] = layer
    return max(levels, default=0)


def gate_summary(program: CircuitProgram) -> GateSummary:
    counts = Counter(op.name for op in program.ops)
    return GateSummary(
        depth=circuit_depth(program),
        total_gates=len(program.ops),
        counts=dict(counts),
    )


def optimization_hints(program: CircuitProgram, summary: Optional[GateSummary] = None) -> List[str]:
    summary = summary or gate_summary(program)
    n = program.num_qubits
    hints = []
    if summary.depth > MAX_RECOMMENDED_DEPTH:
        hints.append("Consider reducing circuit depth for better error rates")
    if summary.counts.get("h", 0) > n:
        hints.append("Multiple Hadamard gates on same qubit can be simplified")
    if summary.counts.get("cx", 0) > 2 * n:
        hints.append("Consider using more efficient entangling patterns")
    return hints


# -----------------------------
# Noisy analysis
# -----------------------------

@dataclass(frozen=True)
class AnalysisReport:
    program: CircuitProgram
    noise_params: NoiseParams
    ideal_state: np.ndarray
    noisy_state: np.ndarray
    density_matrix: np.ndarray = field(repr=False)
    qubit_states: List[QubitState]
    entanglement: EntanglementMeasures
    errors: ErrorMetrics
    total_entanglement: float
    gates: GateSummary
    hints: List[str]

    @property
    def num_qubits(self) -> int:
        return self.program.num_qubits

    def to_dict(self) -> Dict[str, Any]:
        return {
            "num_qubits": self.num_qubits,
            "noise_params": {
                "depolarization_rate": self.noise_params.depolarization_rate,
                "bit_flip_rate": self.noise_params.bit_flip_rate,
                "phase_flip_rate": self.noise_params.phase_flip_rate,
            },
            "qubits": [
                {
                    "index": qs.index,
                    "bloch": list(qs.bloch_vector),
                    "purity": qs.purity,
                    "coherence": qs.coherence,
                    "is_mixed": qs.is_mixed,
                }
                for qs in self.qubit_states
            ],
            "entanglement": {
                "entropy": self.entanglement.entropy,
                "concurrence": self.entanglement.concurrence,
                "is_entangled": self.entanglement.is_entangled,
                "subsystem": self.entanglement.subsystem,
                "total": self.total_entanglement,
            },
            "errors": {
                "fidelity": self.errors.fidelity,
                "trace_distance": self.errors.trace_distance,
                "error_rate": self.errors.error_rate,
                "success_probability": self.errors.success_probability,
                "within_tolerance": self.errors.within_tolerance,
            },
            "gates": {
                "depth": self.gates.depth,
                "total": self.gates.total_gates,
                "counts": dict(self.gates.counts),
            },
            "hints": list(self.hints),
        }


def analyze(
    program: CircuitProgram,
    params: Optional[NoiseParams] = None,
    rng: Optional[np.random.Generator] = None,
    strategy="tensor",
) -> AnalysisReport:
    """Run ideal and noisy evolutions side by side and summarise them.

    The noisy branch gets one round of :func:`perturb_amplitudes` after every
    gate. Per-qubit states are taken from the full noisy density matrix.
    """
    params = params or NoiseParams()
    rng = rng if rng is not None else np.random.default_rng()
    applier = get_strategy(strategy)
    n = program.num_qubits

    ideal = zero_state(n)
    noisy = zero_state(n)
    for op in program.ops:
        ideal = applier.apply(ideal, n, op)
        noisy = applier.apply(noisy, n, op)
        noisy = perturb_amplitudes(noisy, n, params, rng)

    rho = density_matrix(noisy)
    qubit_states = states_from_density(rho, n)
    summary = gate_summary(program)
    report = AnalysisReport(
        program=program,
        noise_params=params,
        ideal_state=ideal,
        noisy_state=noisy,
        density_matrix=rho,
        qubit_states=qubit_states,
        entanglement=entanglement_measures(noisy, n),
        errors=error_metrics(ideal, noisy),
        total_entanglement=total_entanglement([qs.bloch_vector for qs in qubit_states]),
        gates=summary,
        hints=optimization_hints(program, summary),
    )
    logger.info(
        "analysis of %d qubit(s): fidelity=%.4f entropy=%.4f depth=%d",
        n, report.errors.fidelity, report.entanglement.entropy, summary.depth,
    )
    return report
