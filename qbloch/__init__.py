"""
qbloch - small quantum circuit simulator for per-qubit Bloch views.

Parses an OpenQASM subset, evolves the state vector, reduces it to
single-qubit density matrices and Bloch vectors, and computes noise,
entanglement and error metrics on the result.

Quick Start:
    >>> from qbloch import parse, evolve, reduce_qubit
    >>> program = parse("qreg q[2]; h q[0]; cx q[0],q[1];")
    >>> result = evolve(program.num_qubits, program.ops)
    >>> rx, ry, rz = reduce_qubit(result.final_state, 2, 0)  # maximally mixed
"""

from .analysis import AnalysisReport, GateSummary, analyze, gate_summary, optimization_hints
from .config import NoiseParams, configure_logging
from .density import (
    QubitState,
    bloch_vector,
    bloch_vectors,
    coherence,
    density_matrix,
    partial_trace,
    purity,
    reduce_qubit,
    reduced_density_matrix,
    single_qubit_states,
)
from .errors import (
    ArityMismatch,
    DuplicateRegister,
    InvalidAngleExpression,
    InvalidRegisterSize,
    MissingRegister,
    ParseError,
    QubitOutOfRange,
    UnknownGate,
)
from .gates import gate_matrix, is_unitary, lookup
from .metrics import (
    entanglement_measures,
    error_metrics,
    fidelity,
    pairwise_entanglement,
    total_entanglement,
    trace_distance,
)
from .noise import NoiseChannel, apply_noise
from .complex_math import Complex
from .qasm import CircuitProgram, Operation, parse, to_qasm2
from .session import Session, start_session
from .simulator import (
    AutoStrategy,
    BitIndexedStrategy,
    SimulationResult,
    TensorProductStrategy,
    build_full_unitary,
    evolve,
)

__version__ = "0.1.0"
__all__ = [
    "AnalysisReport",
    "GateSummary",
    "analyze",
    "gate_summary",
    "optimization_hints",
    "NoiseParams",
    "configure_logging",
    "QubitState",
    "bloch_vector",
    "bloch_vectors",
    "coherence",
    "density_matrix",
    "partial_trace",
    "purity",
    "reduce_qubit",
    "reduced_density_matrix",
    "single_qubit_states",
    "ArityMismatch",
    "DuplicateRegister",
    "InvalidAngleExpression",
    "InvalidRegisterSize",
    "MissingRegister",
    "ParseError",
    "QubitOutOfRange",
    "UnknownGate",
    "gate_matrix",
    "is_unitary",
    "lookup",
    "entanglement_measures",
    "error_metrics",
    "fidelity",
    "pairwise_entanglement",
    "total_entanglement",
    "trace_distance",
    "NoiseChannel",
    "apply_noise",
    "Complex",
    "CircuitProgram",
    "Operation",
    "parse",
    "to_qasm2",
    "Session",
    "start_session",
    "AutoStrategy",
    "BitIndexedStrategy",
    "SimulationResult",
    "TensorProductStrategy",
    "build_full_unitary",
    "evolve",
]
