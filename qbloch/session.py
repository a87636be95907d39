from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional

import numpy as np

from .density import BlochVector, QubitState, bloch_vectors, single_qubit_states
from .qasm import CircuitProgram, parse
from .simulator import SimulationResult, evolve


@dataclass(frozen=True)
class Session:
    """One simulation run plus the step the viewer is looking at.

    The engine keeps no state between calls; front ends hold this value and
    derive new ones from it.
    """

    program: CircuitProgram
    result: SimulationResult
    step_index: Optional[int] = None

    @property
    def num_qubits(self) -> int:
        return self.program.num_qubits

    @property
    def num_steps(self) -> int:
        return self.result.num_steps

    @property
    def current_step(self) -> int:
        if self.step_index is None:
            return self.num_steps - 1
        return self.step_index

    @property
    def state(self) -> np.ndarray:
        return self.result.steps[self.current_step]

    def at_step(self, index: Optional[int]) -> "Session":
        if index is not None:
            index = max(0, min(int(index), self.num_steps - 1))
        return replace(self, step_index=index)

    def bloch_vectors(self) -> List[BlochVector]:
        return bloch_vectors(self.state, self.num_qubits)

    def qubit_states(self) -> List[QubitState]:
        return single_qubit_states(self.state, self.num_qubits)


def start_session(text: str, strategy=None) -> Session:
    program = parse(text)
    return Session(program=program, result=evolve(program.num_qubits, program.ops, strategy))
