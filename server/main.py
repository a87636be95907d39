from __future__ import annotations

import logging
from typing import List, Dict, Any, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from fastapi.middleware.cors import CORSMiddleware

import numpy as np

from qbloch.analysis import analyze
from qbloch.config import DEFAULT_FRAMES_PER_STEP, MIN_FRAMES_PER_STEP, NoiseParams, configure_logging
from qbloch.density import bloch_vectors
from qbloch.errors import ParseError
from qbloch.examples import DEFAULT_EXAMPLE, EXAMPLES
from qbloch.live import LiveRecord, Vec3
from qbloch.metrics import pairwise_entanglement
from qbloch.noise import apply_noise, resolve_channel
from qbloch.qasm import parse
from qbloch.session import Session, start_session

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Live Bloch API", version="1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class PrepareRequest(BaseModel):
    qasm: Optional[str] = None
    frames_per_step: int = DEFAULT_FRAMES_PER_STEP


class FrameResponse(BaseModel):
    i: int
    n: int
    bloch: List[List[float]]


class NoiseRequest(BaseModel):
    bloch: List[Vec3]
    channel: str = "depolarizing"
    param: float = Field(0.1, ge=0.0, le=1.0)
    seed: Optional[int] = None


class AnalyzeRequest(BaseModel):
    qasm: str
    depolarization_rate: float = Field(0.01, ge=0.0, le=1.0)
    bit_flip_rate: float = Field(0.002, ge=0.0, le=1.0)
    phase_flip_rate: float = Field(0.002, ge=0.0, le=1.0)
    seed: Optional[int] = None


def interpolate(psi1: np.ndarray, psi2: np.ndarray, steps: int) -> List[np.ndarray]:
    """Simple linear interpolation of statevectors, re-normalized.
    Not unitary, but good for visualization between steps.
    """
    res: List[np.ndarray] = []
    v1 = np.asarray(psi1, dtype=complex)
    v2 = np.asarray(psi2, dtype=complex)
    for t in np.linspace(0.0, 1.0, steps, endpoint=False):
        vt = (1.0 - t) * v1 + t * v2
        norm = np.linalg.norm(vt)
        # opposite-phase endpoints can cancel at the midpoint
        res.append(vt / norm if norm > 0 else v1)
    return res


def session_frames(session: Session, frames_per_step: int) -> List[List[List[float]]]:
    states = session.result.steps
    interpolated: List[np.ndarray] = []
    for a, b in zip(states[:-1], states[1:]):
        interpolated.extend(interpolate(a, b, frames_per_step))
    # include the exact final state
    interpolated.append(states[-1])
    return [[list(v) for v in bloch_vectors(sv, session.num_qubits)] for sv in interpolated]


def _start(qasm: str) -> Session:
    try:
        return start_session(qasm)
    except ParseError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


class FrameStore:
    def __init__(self):
        self.frames: List[List[List[float]]] = []  # [frame_idx][qubit_idx][xyz]
        self.i: int = 0

    def prepare(self, session: Session, frames_per_step: int = DEFAULT_FRAMES_PER_STEP):
        self.load(session_frames(session, frames_per_step))
        logger.info("prepared %d frame(s) for %d qubit(s)", len(self.frames), session.num_qubits)

    def load(self, frames: List[List[List[float]]]):
        self.frames = frames
        self.i = 0

    def frame(self, idx: Optional[int] = None) -> FrameResponse:
        if not self.frames:
            # lazy default
            self.prepare(start_session(EXAMPLES[DEFAULT_EXAMPLE]))
        if idx is None:
            idx = self.i
            self.i = (self.i + 1) % len(self.frames)
        idx = max(0, min(idx, len(self.frames) - 1))
        return FrameResponse(i=idx, n=len(self.frames), bloch=self.frames[idx])


STORE = FrameStore()


@app.get("/api/frame", response_model=FrameResponse)
def get_frame(i: Optional[int] = None):
    return STORE.frame(i)


@app.post("/api/prepare", response_model=Dict[str, Any])
def post_prepare(req: PrepareRequest):
    session = _start(req.qasm or EXAMPLES[DEFAULT_EXAMPLE])
    STORE.prepare(session, frames_per_step=max(MIN_FRAMES_PER_STEP, int(req.frames_per_step)))
    return {"frames": len(STORE.frames), "qubits": session.num_qubits, "steps": session.num_steps}


@app.post("/api/ingest", response_model=Dict[str, Any])
def post_ingest(record: LiveRecord):
    frames = [[list(v) for v in frame] for frame in record.to_frames()]
    STORE.load(frames)
    logger.info("ingested %d live frame(s)", len(frames))
    return {"frames": len(frames), "qubits": len(frames[0])}


@app.post("/api/noise", response_model=Dict[str, Any])
def post_noise(req: NoiseRequest):
    try:
        channel = resolve_channel(req.channel)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    vectors = apply_noise(req.bloch, channel, req.param, rng=np.random.default_rng(req.seed))
    return {
        "channel": channel.value,
        "bloch": [list(v) for v in vectors],
        "entanglement": pairwise_entanglement(vectors).tolist(),
    }


@app.post("/api/analyze", response_model=Dict[str, Any])
def post_analyze(req: AnalyzeRequest):
    try:
        program = parse(req.qasm)
    except ParseError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    params = NoiseParams(req.depolarization_rate, req.bit_flip_rate, req.phase_flip_rate)
    report = analyze(program, params, rng=np.random.default_rng(req.seed))
    return report.to_dict()


@app.get("/")
def root():
    return {
        "ok": True,
        "endpoints": [
            "GET /api/frame?i=0",
            "POST /api/prepare",
            "POST /api/ingest",
            "POST /api/noise",
            "POST /api/analyze",
        ],
    }
