# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Dash-based viewer for SADL render models."""

from __future__ import annotations

import dash
import plotly.graph_objects as go
from dash import dcc, html

from sadl.model.types import ConnectorRole
from sadl.views.layout import Box, PositionedEdge, PositionedEntity, PositionedNat, RenderModel, View

# ###############
# Public Interface
# ###############

COLORS: dict[str, str] = {
    "background": "#1a1a2e",
    "node": "#16213e",
    "node_border": "#0f3460",
    "node_text": "#e8e8e8",
    "server": "#4ecca3",
    "client": "#ff6b6b",
    "nat": "#f4a261",
    "connection": "#7f8c8d",
    "subtitle": "#bdc3c7",
}


def create_app(model: RenderModel, title: str = "SADL Architecture Viewer") -> dash.Dash:
    """Create a Dash application showing *model*.

    The figure is drawn from the render model as-is; panning and zooming are
    provided by the plotly graph.
    """
    app = dash.Dash(__name__, title=title)
    app.layout = _build_layout(model, title)
    return app


def build_figure(model: RenderModel) -> go.Figure:
    """Draw a render model as a plotly figure with y growing downwards."""
    fig = go.Figure()
    for edge in model.edges:
        _add_edge(fig, edge)
    for entity in model.entities:
        _add_entity(fig, entity, show_subtitle=model.view == View.INSTANCES)
    for nat in model.nats:
        _add_nat(fig, nat)

    width, height = _extent(model)
    fig.update_xaxes(visible=False, range=[0, width])
    fig.update_yaxes(visible=False, range=[height, 0], scaleanchor="x")
    fig.update_layout(
        plot_bgcolor=COLORS["background"],
        paper_bgcolor=COLORS["background"],
        margin={"l": 0, "r": 0, "t": 0, "b": 0},
        height=max(int(height), 400),
        showlegend=False,
        dragmode="pan",
    )
    return fig


# ################
# Implementation
# ################

_HEADER_HEIGHT = 28


def _build_layout(model: RenderModel, title: str) -> html.Div:
    """Build the application layout."""
    return html.Div(
        [
            html.H1(title),
            html.P(f"View: {model.view.value}"),
            html.Hr(),
            dcc.Graph(
                id="sadl-graph",
                figure=build_figure(model),
                config={"scrollZoom": True, "displaylogo": False},
            ),
        ],
        style={"fontFamily": "sans-serif", "padding": "2rem"},
    )


def _extent(model: RenderModel) -> tuple[float, float]:
    """Return the width and height needed to show every box, with a margin."""
    boxes: list[Box] = [e.box for e in model.entities] + [n.box for n in model.nats]
    if not boxes:
        return 800.0, 600.0
    margin = 40.0
    return (
        max(b.x + b.width for b in boxes) + margin,
        max(b.y + b.height for b in boxes) + margin,
    )


def _add_entity(fig: go.Figure, entity: PositionedEntity, show_subtitle: bool) -> None:
    box = entity.box
    fig.add_shape(
        type="rect",
        x0=box.x,
        y0=box.y,
        x1=box.x + box.width,
        y1=box.y + box.height,
        fillcolor=COLORS["node"],
        line={"color": COLORS["node_border"], "width": 2},
        layer="below",
    )
    fig.add_shape(
        type="rect",
        x0=box.x,
        y0=box.y,
        x1=box.x + box.width,
        y1=box.y + _HEADER_HEIGHT,
        fillcolor=COLORS["node_border"],
        line={"width": 0},
        layer="below",
    )
    fig.add_annotation(
        x=box.x + box.width / 2,
        y=box.y + _HEADER_HEIGHT / 2,
        text=f"<b>{entity.name}</b>",
        showarrow=False,
        font={"color": COLORS["node_text"], "size": 12},
    )
    if show_subtitle and entity.node_class is not None:
        subtitle = f"({entity.node_class}) {entity.ip}" if entity.ip else f"({entity.node_class})"
        fig.add_annotation(
            x=box.x + box.width / 2,
            y=box.y + 42,
            text=subtitle,
            showarrow=False,
            font={"color": COLORS["subtitle"], "size": 10},
        )

    for connector in entity.connectors:
        is_server = connector.role == ConnectorRole.SERVER
        cx = box.x if is_server else box.x + box.width
        cy = box.y + connector.y
        fig.add_trace(
            go.Scatter(
                x=[cx],
                y=[cy],
                mode="markers",
                marker={
                    "size": 12,
                    "color": COLORS["node"],
                    "line": {"color": COLORS["server" if is_server else "client"], "width": 2},
                },
                hovertext=f"{entity.name}.{connector.name} ({connector.role.value})",
                hoverinfo="text",
            )
        )
        fig.add_annotation(
            x=box.x + 12 if is_server else box.x + box.width - 12,
            y=cy,
            text=connector.name,
            showarrow=False,
            xanchor="left" if is_server else "right",
            font={"color": COLORS["node_text"], "size": 10},
        )


def _add_nat(fig: go.Figure, nat: PositionedNat) -> None:
    box = nat.box
    inset = box.width / 6
    mid_y = box.y + box.height / 2
    xs = [box.x + inset, box.x + box.width - inset, box.x + box.width, box.x + box.width - inset, box.x + inset, box.x]
    ys = [box.y, box.y, mid_y, box.y + box.height, box.y + box.height, mid_y]
    path = "M " + " L ".join(f"{x},{y}" for x, y in zip(xs, ys)) + " Z"
    fig.add_shape(
        type="path",
        path=path,
        fillcolor=COLORS["node"],
        line={"color": COLORS["nat"], "width": 2},
        layer="below",
    )
    fig.add_annotation(
        x=box.x + box.width / 2,
        y=mid_y,
        text=f"<b>{nat.name}</b><br>{nat.external_ip} → {nat.internal_ip}",
        showarrow=False,
        font={"color": COLORS["node_text"], "size": 11},
    )


def _add_edge(fig: go.Figure, edge: PositionedEdge) -> None:
    """Draw a cubic curve with horizontal tangents at both ends."""
    (x0, y0), (x1, y1) = (edge.start.x, edge.start.y), (edge.end.x, edge.end.y)
    mid_x = (x0 + x1) / 2
    fig.add_shape(
        type="path",
        path=f"M {x0},{y0} C {mid_x},{y0} {mid_x},{y1} {x1},{y1}",
        line={"color": COLORS["connection"], "width": 2},
        layer="below",
    )
    fig.add_annotation(
        x=x1,
        y=y1,
        ax=x1 - 12,
        ay=y1,
        xref="x",
        yref="y",
        axref="x",
        ayref="y",
        showarrow=True,
        arrowhead=2,
        arrowcolor=COLORS["connection"],
        text="",
    )
