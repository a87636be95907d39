from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

# A reduced state counts as mixed below this purity.
MIXED_PURITY_THRESHOLD = 0.99
# Entanglement entropy (bits) above which a state is reported as entangled.
ENTANGLEMENT_THRESHOLD = 0.1
# Fidelity above which a noisy run is considered within tolerance.
FIDELITY_THRESHOLD = 0.99
# Circuits deeper than this get an optimisation hint.
MAX_RECOMMENDED_DEPTH = 10
NORM_TOLERANCE = 1e-9
DEFAULT_FRAMES_PER_STEP = 30
MIN_FRAMES_PER_STEP = 5
# The tensor path builds dense 2^n x 2^n operators.
MAX_QUBITS = 10

LOG_LEVEL_ENV = "QBLOCH_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class NoiseParams:
    """Per-gate rates for the amplitude-level noise of the analysis path."""

    depolarization_rate: float = 0.01
    bit_flip_rate: float = 0.002
    phase_flip_rate: float = 0.002

    def __post_init__(self):
        for name in ("depolarization_rate", "bit_flip_rate", "phase_flip_rate"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must lie in [0, 1], got {value}")

    @classmethod
    def noiseless(cls) -> "NoiseParams":
        return cls(0.0, 0.0, 0.0)


def configure_logging(level: Optional[str] = None) -> None:
    level = (level or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
