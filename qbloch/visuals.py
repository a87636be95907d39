from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import plotly.graph_objects as go


def _sphere_mesh(n_phi: int = 40, n_theta: int = 80):
    phi = np.linspace(0, np.pi, n_phi)
    theta = np.linspace(0, 2 * np.pi, n_theta)
    phi, theta = np.meshgrid(phi, theta)
    return np.sin(phi) * np.cos(theta), np.sin(phi) * np.sin(theta), np.cos(phi)


def create_bloch_figure(
    bloch_vector: Sequence[float],
    title: str = "",
    ideal_vector: Optional[Sequence[float]] = None,
) -> go.Figure:
    x, y, z = np.asarray(bloch_vector, dtype=float).tolist()

    xs, ys, zs = _sphere_mesh()
    sphere = go.Surface(
        x=xs,
        y=ys,
        z=zs,
        showscale=False,
        opacity=0.15,
        colorscale=[[0, "#1f77b4"], [1, "#1f77b4"]],
    )

    axis_len = 1.2
    axes = [
        go.Scatter3d(x=[0, axis_len], y=[0, 0], z=[0, 0], mode="lines", line=dict(color="red", width=4), name="X"),
        go.Scatter3d(x=[0, 0], y=[0, axis_len], z=[0, 0], mode="lines", line=dict(color="green", width=4), name="Y"),
        go.Scatter3d(x=[0, 0], y=[0, 0], z=[0, axis_len], mode="lines", line=dict(color="blue", width=4), name="Z"),
    ]

    traces = [sphere, *axes]
    if ideal_vector is not None:
        ix, iy, iz = np.asarray(ideal_vector, dtype=float).tolist()
        traces.append(go.Scatter3d(
            x=[0, ix], y=[0, iy], z=[0, iz],
            mode="lines",
            line=dict(color="#888888", width=4, dash="dash"),
            name="Noiseless",
        ))
    traces.append(go.Scatter3d(
        x=[0, x], y=[0, y], z=[0, z],
        mode="lines+markers",
        line=dict(color="#FF8C00", width=8),
        marker=dict(size=3, color="#FF8C00"),
        name="Bloch vector",
    ))

    fig = go.Figure(data=traces)
    fig.update_layout(
        title=title,
        scene=dict(
            xaxis=dict(range=[-1.3, 1.3], zeroline=False, showspikes=False),
            yaxis=dict(range=[-1.3, 1.3], zeroline=False, showspikes=False),
            zaxis=dict(range=[-1.3, 1.3], zeroline=False, showspikes=False),
            aspectmode="cube",
        ),
        margin=dict(l=10, r=10, t=40, b=10),
        showlegend=False,
    )
    return fig


def create_heatmap_figure(matrix, title: str = "Pairwise Linear Mutual Information") -> go.Figure:
    z = np.asarray(matrix, dtype=float)
    labels = [f"q[{i}]" for i in range(z.shape[0])]
    fig = go.Figure(data=go.Heatmap(z=z, x=labels, y=labels, colorscale="Viridis", showscale=True))
    fig.update_layout(
        title=title,
        xaxis=dict(title="Qubit"),
        yaxis=dict(title="Qubit", autorange="reversed"),
        margin=dict(l=10, r=10, t=40, b=10),
    )
    return fig
