from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np
from pydantic import BaseModel, field_validator, model_validator

from .density import BlochVector, bloch_vectors

Vec3 = Tuple[float, float, float]


class Frame(BaseModel):
    bloch: List[Vec3]


class StatevectorPayload(BaseModel):
    re: List[float]
    im: Optional[List[float]] = None

    @field_validator("re")
    @classmethod
    def _power_of_two(cls, re: List[float]) -> List[float]:
        n = len(re)
        if n < 2 or n & (n - 1):
            raise ValueError(f"statevector length must be a power of two >= 2, got {n}")
        return re

    @model_validator(mode="after")
    def _matching_parts(self) -> "StatevectorPayload":
        if self.im is not None and len(self.im) != len(self.re):
            raise ValueError("statevector re and im must have the same length")
        if not any(self.re) and not any(self.im or ()):
            raise ValueError("statevector has zero norm")
        return self

    @property
    def num_qubits(self) -> int:
        return len(self.re).bit_length() - 1

    def amplitudes(self) -> np.ndarray:
        im = self.im if self.im is not None else [0.0] * len(self.re)
        psi = np.asarray(self.re, dtype=float) + 1j * np.asarray(im, dtype=float)
        return psi / np.linalg.norm(psi)


class LiveRecord(BaseModel):
    """A record from a live data source.

    Carries per-frame Bloch sets, a single Bloch set, or a raw statevector.
    When several are present they are used in that order of preference.
    """

    frames: Optional[List[Frame]] = None
    bloch: Optional[List[Vec3]] = None
    statevector: Optional[StatevectorPayload] = None

    @model_validator(mode="after")
    def _has_payload(self) -> "LiveRecord":
        if not (self.frames or self.bloch or self.statevector):
            raise ValueError("expected one of: frames, bloch, statevector")
        return self

    def to_frames(self) -> List[List[BlochVector]]:
        if self.frames:
            return [[tuple(v) for v in frame.bloch] for frame in self.frames]
        if self.bloch:
            return [[tuple(v) for v in self.bloch]]
        sv = self.statevector
        return [bloch_vectors(sv.amplitudes(), sv.num_qubits)]
