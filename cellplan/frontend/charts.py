"""Plotly figure builders for the dashboard pages."""

from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from ..analysis.positions import position_color

QUALITY_COLORS = {
    "excellent": "#10b981",
    "good": "#3b82f6",
    "fair": "#f59e0b",
    "poor": "#ef4444",
}

QUALITY_LABELS = {
    "excellent": "Excellent (>-70)",
    "good": "Good (-70 to -85)",
    "fair": "Fair (-85 to -100)",
    "poor": "Poor (<-100)",
}

PRIORITY_COLORS = {"high": "#ef4444", "medium": "#f59e0b", "low": "#3b82f6"}

RSSI_SCALE = "RdYlGn"


def _layout(fig: go.Figure, height: int = 400) -> go.Figure:
    fig.update_layout(height=height, margin=dict(l=10, r=10, t=40, b=10))
    return fig


def quality_pie(counts: Dict[str, int], title: str = "Signal Quality") -> go.Figure:
    levels = [q for q in QUALITY_LABELS if counts.get(q, 0) > 0]
    fig = go.Figure(go.Pie(
        labels=[QUALITY_LABELS[q] for q in levels],
        values=[counts[q] for q in levels],
        marker=dict(colors=[QUALITY_COLORS[q] for q in levels]),
        textinfo="label+percent",
    ))
    fig.update_layout(title=title)
    return _layout(fig)


def histogram_bar(bins: List[Dict[str, Any]], title: str = "RSSI Distribution") -> go.Figure:
    df = pd.DataFrame(bins)
    fig = px.bar(df, x="range", y="count", title=title, labels={"range": "RSSI (dBm)", "count": "Samples"})
    return _layout(fig)


def position_box(stats: List[Dict[str, Any]]) -> go.Figure:
    """Box plot drawn from precomputed quartiles, one box per position."""

    fig = go.Figure()
    for s in stats:
        fig.add_trace(go.Box(
            name=f"{s['icon']} {s['position']}",
            q1=[s["q1"]],
            median=[s["median"]],
            q3=[s["q3"]],
            lowerfence=[s["min"]],
            upperfence=[s["max"]],
            mean=[s["mean"]],
            marker_color=position_color(s["position"]),
        ))
    fig.update_layout(title="RSSI by Body Position", yaxis_title="RSSI (dBm)", showlegend=False)
    return _layout(fig)


def position_mean_bar(stats: List[Dict[str, Any]]) -> go.Figure:
    df = pd.DataFrame(stats)
    fig = go.Figure(go.Bar(
        x=[f"{i} {p}" for i, p in zip(df["icon"], df["position"])],
        y=df["mean"],
        error_y=dict(type="data", symmetric=False,
                     array=df["max"] - df["mean"], arrayminus=df["mean"] - df["min"]),
        marker_color=[position_color(p) for p in df["position"]],
    ))
    fig.update_layout(title="Mean RSSI by Body Position", yaxis_title="RSSI (dBm)")
    return _layout(fig)


def position_share_pie(stats: List[Dict[str, Any]]) -> go.Figure:
    fig = go.Figure(go.Pie(
        labels=[f"{s['icon']} {s['position']}" for s in stats],
        values=[s["count"] for s in stats],
        marker=dict(colors=[position_color(s["position"]) for s in stats]),
    ))
    fig.update_layout(title="Samples per Body Position")
    return _layout(fig)


def quality_by_position_bar(rows: List[Dict[str, Any]]) -> go.Figure:
    fig = go.Figure()
    for level in ("excellent", "good", "fair", "poor"):
        fig.add_trace(go.Bar(
            name=level.capitalize(),
            x=[r["position"] for r in rows],
            y=[r[level] for r in rows],
            marker_color=QUALITY_COLORS[level],
        ))
    fig.update_layout(barmode="stack", title="Signal Quality by Body Position")
    return _layout(fig)


def radar_chart(scores: List[Dict[str, Any]]) -> go.Figure:
    axes = ["Mean RSSI", "Stability", "Count"]
    fig = go.Figure()
    for s in scores:
        fig.add_trace(go.Scatterpolar(
            r=[s[a] for a in axes] + [s[axes[0]]],
            theta=axes + [axes[0]],
            name=s["position"],
            line_color=position_color(s["position"]),
        ))
    fig.update_layout(polar=dict(radialaxis=dict(range=[0, 100])), title="Position Comparison")
    return _layout(fig)


def location_scatter(points: List[Dict[str, Any]], title: str = "Signal by Location") -> go.Figure:
    df = pd.DataFrame(points)
    if df.empty:
        return _layout(go.Figure().update_layout(title=title))
    fig = px.scatter(df, x="x", y="y", color="rssi", color_continuous_scale=RSSI_SCALE,
                     title=title, labels={"rssi": "RSSI (dBm)"})
    fig.update_yaxes(scaleanchor="x", scaleratio=1)
    return _layout(fig, height=500)


def time_series_line(series: List[Dict[str, Any]]) -> go.Figure:
    df = pd.DataFrame(series)
    fig = px.line(df, x="time", y="rssi", title="RSSI over Time", labels={"rssi": "RSSI (dBm)", "time": "Sample"})
    return _layout(fig)


def cell_performance_bar(cells: List[Dict[str, Any]]) -> go.Figure:
    df = pd.DataFrame(cells)
    fig = px.bar(df, x="cell_id", y="mean", hover_data=["count"], title="Top Cells by Sample Count",
                 labels={"cell_id": "Cell", "mean": "Mean RSSI (dBm)"})
    return _layout(fig)


def planner_map(
    points: List[Dict[str, Any]],
    gaps: List[Dict[str, Any]],
    towers: List[Dict[str, Any]],
) -> go.Figure:
    fig = go.Figure()
    if points:
        df = pd.DataFrame(points)
        fig.add_trace(go.Scatter(
            x=df["x"], y=df["y"], mode="markers", name="Samples",
            marker=dict(size=4, color=df["rssi"], colorscale=RSSI_SCALE, opacity=0.5,
                        colorbar=dict(title="RSSI")),
        ))
    if gaps:
        df = pd.DataFrame(gaps)
        fig.add_trace(go.Scatter(
            x=df["x"], y=df["y"], mode="markers", name="Coverage gaps",
            marker=dict(size=10, symbol="square-open",
                        color=[PRIORITY_COLORS[p] for p in df["priority"]]),
            text=[f"{a:.1f} dBm, {c} samples" for a, c in zip(df["avg_rssi"], df["count"])],
            hoverinfo="text",
        ))
    if towers:
        df = pd.DataFrame(towers)
        fig.add_trace(go.Scatter(
            x=df["x"], y=df["y"], mode="markers+text", name="Suggested towers",
            marker=dict(size=16, symbol="star", color="#7c3aed"),
            text=[f"T{i}" for i in df["id"]], textposition="top center",
        ))
    fig.update_layout(title="Coverage Gaps and Suggested Towers", xaxis_title="X", yaxis_title="Y")
    return _layout(fig, height=550)


def grid_heatmap(cells: List[Dict[str, Any]], title: str = "Coverage Grid") -> go.Figure:
    df = pd.DataFrame(cells)
    if df.empty:
        return _layout(go.Figure().update_layout(title=title))
    fig = go.Figure(go.Scatter(
        x=df["x"], y=df["y"], mode="markers",
        marker=dict(symbol="square", size=14, color=df["avg_rssi"], colorscale=RSSI_SCALE,
                    colorbar=dict(title="Avg RSSI")),
        text=[f"{a:.1f} dBm, {c} samples" for a, c in zip(df["avg_rssi"], df["count"])],
        hoverinfo="text",
    ))
    fig.update_layout(title=title)
    return _layout(fig, height=500)


def distribution_bar(bins: List[Dict[str, Any]]) -> go.Figure:
    df = pd.DataFrame(bins)
    fig = px.bar(df, x="range", y="count", title="Signal Strength Distribution",
                 labels={"range": "RSSI (dBm)", "count": "Points"})
    return _layout(fig)


def priority_pie(counts: Dict[str, int]) -> go.Figure:
    names = list(counts)
    fig = go.Figure(go.Pie(
        labels=[n.capitalize() for n in names],
        values=[counts[n] for n in names],
        marker=dict(colors=[PRIORITY_COLORS.get(n, "#6b7280") for n in names]),
    ))
    fig.update_layout(title="Tower Priority")
    return _layout(fig)
