import numpy as np
import streamlit as st

from qbloch.analysis import analyze
from qbloch.config import NoiseParams, configure_logging
from qbloch.examples import DEFAULT_EXAMPLE, EXAMPLES
from qbloch.metrics import mutual_information_pairs, pairwise_entanglement
from qbloch.noise import NoiseChannel, apply_noise
from qbloch.complex_math import format_matrix
from qbloch.session import start_session
from qbloch.visuals import create_bloch_figure, create_heatmap_figure


configure_logging()
st.set_page_config(page_title="Qubit Bloch Visualizer", layout="wide")


def _sidebar():
    with st.sidebar:
        st.header("Inputs")
        names = list(EXAMPLES.keys())
        selected_example = st.selectbox("Example circuits", names, index=names.index(DEFAULT_EXAMPLE))
        uploaded = st.file_uploader("Upload .qasm file", type=["qasm"])

        st.header("Noise preview")
        channel = st.selectbox("Channel", [c.value for c in NoiseChannel])
        param = st.slider("Strength p", 0.0, 1.0, 0.1, 0.01)
        seed = st.number_input("Seed", min_value=0, value=0, step=1)
        st.markdown("Or paste/edit QASM below:")
    return EXAMPLES[selected_example], uploaded, channel, param, int(seed)


def _bloch_grid(vectors, infos, ideal_vectors=None):
    num_qubits = len(vectors)
    cols_per_row = 3 if num_qubits >= 3 else num_qubits
    rows = (num_qubits + cols_per_row - 1) // cols_per_row

    idx = 0
    for _ in range(rows):
        cols = st.columns(cols_per_row)
        for c in range(cols_per_row):
            if idx >= num_qubits:
                break
            vec = vectors[idx]
            info = infos[idx]
            with cols[c]:
                st.markdown(f"**Qubit {idx}**")
                ideal = ideal_vectors[idx] if ideal_vectors is not None else None
                fig = create_bloch_figure(vec, title=f"q[{idx}]", ideal_vector=ideal)
                st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})
                r = np.linalg.norm(vec)
                st.caption(
                    f"Bloch = ({vec[0]:.3f}, {vec[1]:.3f}, {vec[2]:.3f})  |  "
                    f"‖r‖ = {r:.3f}  |  purity Tr(ρ²) = {info.purity:.3f}  |  "
                    f"{'mixed' if info.is_mixed else 'pure'}"
                )
                with st.expander("ρ (density matrix)"):
                    st.text(format_matrix(info.rho))
            idx += 1


def _step_slider(session):
    # a circuit without gates has a single step and nothing to slide over
    if session.num_steps < 2:
        return session.at_step(0)
    step = st.slider("Step", 0, session.num_steps - 1, session.num_steps - 1)
    return session.at_step(step)


def _analysis_panel(session, seed):
    with st.expander("Noisy analysis"):
        c1, c2, c3 = st.columns(3)
        with c1:
            depol = st.number_input("Depolarization rate", 0.0, 1.0, 0.01, 0.001, format="%.3f")
        with c2:
            bit = st.number_input("Bit-flip rate", 0.0, 1.0, 0.002, 0.001, format="%.3f")
        with c3:
            phase = st.number_input("Phase-flip rate", 0.0, 1.0, 0.002, 0.001, format="%.3f")
        report = analyze(
            session.program,
            NoiseParams(depol, bit, phase),
            rng=np.random.default_rng(seed),
        )
        ent = report.entanglement
        err = report.errors
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Fidelity", f"{err.fidelity:.4f}")
        m2.metric("Trace distance", f"{err.trace_distance:.4f}")
        m3.metric(f"Entropy (q[{ent.subsystem}])", f"{ent.entropy:.4f}")
        m4.metric("Concurrence", f"{ent.concurrence:.4f}")
        g1, g2, g3 = st.columns(3)
        g1.metric("Total entanglement", f"{report.total_entanglement:.4f}")
        g2.metric("Depth", report.gates.depth)
        g3.metric("Gates", report.gates.total_gates)
        st.write("Gate distribution: " + ", ".join(f"{k}: {v}" for k, v in report.gates.counts.items()))
        for hint in report.hints:
            st.info(hint)
        if not report.hints:
            st.caption("No optimisation hints for this circuit.")
        st.json(report.to_dict())


def main():
    st.title("Single-Qubit Mixed States on the Bloch Sphere")
    st.caption(
        "Paste an OpenQASM circuit or upload a .qasm file. "
        "We'll simulate the state, partial trace each qubit, and display its Bloch vector."
    )

    example_qasm, uploaded, channel, param, seed = _sidebar()

    qasm_text = st.text_area(
        "OpenQASM 2.0",
        value=example_qasm,
        height=220,
        help="Use OpenQASM 2.0 with qelib1.inc; measurements are ignored.",
    )

    if uploaded is not None:
        try:
            qasm_text = uploaded.read().decode("utf-8")
        except UnicodeDecodeError as e:
            st.error(f"Failed to read uploaded file: {e}")

    col_run, col_info = st.columns([1, 3])
    with col_run:
        run = st.button("Simulate and Visualize", type="primary")
    with col_info:
        st.write(
            "Supports x,y,z,h,s,sdg,t,tdg,sx,rx,ry,rz,p,u,cx,cy,cz,swap; angles may use pi."
        )

    if run:
        try:
            st.session_state["session"] = start_session(qasm_text)
        except ValueError as e:
            st.error(f"Error parsing QASM: {e}")
            st.stop()

    session = st.session_state.get("session")
    if session is None:
        st.stop()

    session = _step_slider(session)
    step = session.current_step

    infos = session.qubit_states()
    ideal = [info.bloch_vector for info in infos]
    vectors = apply_noise(ideal, channel, param, rng=np.random.default_rng(seed))

    st.subheader(f"Circuit: {session.num_qubits} qubit(s), step {step} / {session.num_steps - 1}")
    st.code(session.program.source, language="qasm")

    noisy = channel != NoiseChannel.NONE.value
    _bloch_grid(vectors, infos, ideal_vectors=ideal if noisy else None)

    if session.num_qubits >= 2:
        st.subheader("Entanglement")
        matrix = pairwise_entanglement(vectors)
        st.plotly_chart(create_heatmap_figure(matrix), use_container_width=True)
        i, j, value = mutual_information_pairs(vectors)[0]
        st.caption(f"Strongest pair: q[{i}] – q[{j}] ({value:.3f})")

    _analysis_panel(session, seed)

    st.success("Done.")


if __name__ == "__main__":
    main()
