import numpy as np
import pytest

pytest.importorskip("httpx")

from fastapi.testclient import TestClient  # noqa: E402

from server.main import STORE, app, interpolate  # noqa: E402

client = TestClient(app)

BELL = "qreg q[2]; h q[0]; cx q[0],q[1];"


@pytest.fixture(autouse=True)
def reset_store():
    STORE.load([])
    yield
    STORE.load([])


def test_root_lists_endpoints():
    r = client.get("/")
    assert r.status_code == 200
    assert "POST /api/analyze" in r.json()["endpoints"]


def test_frame_lazily_prepares_default():
    r = client.get("/api/frame", params={"i": 0})
    assert r.status_code == 200
    body = r.json()
    assert body["i"] == 0
    assert body["n"] > 1
    assert body["bloch"] == [[0.0, 0.0, 1.0], [0.0, 0.0, 1.0]]


def test_prepare_counts_frames():
    r = client.post("/api/prepare", json={"qasm": BELL, "frames_per_step": 10})
    assert r.status_code == 200
    assert r.json() == {"frames": 21, "qubits": 2, "steps": 3}


def test_prepare_enforces_minimum_frames():
    r = client.post("/api/prepare", json={"qasm": BELL, "frames_per_step": 1})
    assert r.json()["frames"] == 11


def test_prepare_rejects_bad_qasm():
    r = client.post("/api/prepare", json={"qasm": "qreg q[1]; foo q[0];"})
    assert r.status_code == 400
    assert "foo" in r.json()["detail"]


def test_frame_cycles_and_clamps():
    client.post("/api/prepare", json={"qasm": BELL, "frames_per_step": 5})
    seen = [client.get("/api/frame").json()["i"] for _ in range(3)]
    assert seen == [0, 1, 2]
    last = client.get("/api/frame", params={"i": 999}).json()
    assert last["i"] == 10
    for vec in last["bloch"]:
        assert vec == pytest.approx([0.0, 0.0, 0.0], abs=1e-9)


def test_ingest_replaces_frames():
    r = client.post("/api/ingest", json={"bloch": [[1, 0, 0], [0, 1, 0], [0, 0, -1]]})
    assert r.json() == {"frames": 1, "qubits": 3}
    frame = client.get("/api/frame").json()
    assert frame["n"] == 1
    assert frame["bloch"][2] == [0.0, 0.0, -1.0]


def test_ingest_rejects_empty_record():
    r = client.post("/api/ingest", json={})
    assert r.status_code == 422


def test_noise_depolarizing():
    r = client.post(
        "/api/noise",
        json={"bloch": [[1, 0, 0], [0, 0, 1]], "channel": "depolarizing", "param": 0.5},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["channel"] == "depolarizing"
    assert body["bloch"][0] == pytest.approx([0.5, 0.0, 0.0])
    assert len(body["entanglement"]) == 2


def test_noise_seeded_is_reproducible():
    payload = {"bloch": [[1, 0, 0]] * 8, "channel": "bitflip", "param": 0.5, "seed": 3}
    assert client.post("/api/noise", json=payload).json() == client.post("/api/noise", json=payload).json()


def test_noise_unknown_channel():
    r = client.post("/api/noise", json={"bloch": [[0, 0, 1]], "channel": "thermal"})
    assert r.status_code == 400


def test_noise_param_out_of_range():
    r = client.post("/api/noise", json={"bloch": [[0, 0, 1]], "param": 2.0})
    assert r.status_code == 422


def test_analyze_noiseless():
    r = client.post(
        "/api/analyze",
        json={"qasm": BELL, "depolarization_rate": 0, "bit_flip_rate": 0, "phase_flip_rate": 0, "seed": 1},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["errors"]["fidelity"] == pytest.approx(1.0)
    assert body["entanglement"]["is_entangled"] is True
    assert body["gates"]["total"] == 2
    assert body["hints"] == []


def test_noise_rejects_short_vectors():
    r = client.post("/api/noise", json={"bloch": [[1, 0]], "channel": "depolarizing"})
    assert r.status_code == 422


def test_analyze_rejects_bad_qasm():
    r = client.post("/api/analyze", json={"qasm": "h q[0];"})
    assert r.status_code == 400


@pytest.mark.parametrize("endpoint", ["/api/prepare", "/api/analyze"])
@pytest.mark.parametrize(
    "qasm",
    ["qreg q[0];", "qreg q[40]; h q[0];", "qreg q[1]; rz(" + "+".join(["1"] * 5000) + ") q[0];"],
    ids=["empty-register", "wide-register", "deep-angle"],
)
def test_unparseable_circuits_are_client_errors(endpoint, qasm):
    r = client.post(endpoint, json={"qasm": qasm})
    assert r.status_code == 400


def test_interpolate_survives_cancelling_endpoints():
    a = np.array([1, 0], dtype=complex)
    frames = interpolate(a, -a, 4)
    assert len(frames) == 4
    for psi in frames:
        assert np.linalg.norm(psi) == pytest.approx(1.0)
