# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Layered layout of SADL graphs.

Turns the connectivity of a SadlFile into a render model with pixel
coordinates. Two views are supported:

- **schema**: one box per node class, one edge per link class.
- **instances**: one box per instance entry, one hexagon per NAT entry, one
  edge per connection.

Placement is a simplified Sugiyama scheme:

1. Every entity gets a layer equal to its longest-path distance from a source.
   Cycles are tolerated: an edge that closes a cycle contributes layer 0.
2. Layer 0 is ordered by name; every later layer is ordered by the mean row of
   each entity's predecessors (barycenter heuristic), ties keeping input order.
3. Layer and row become the column and row of a fixed grid. Box height grows
   with the number of connectors shown on either side.

All functions here are pure and deterministic for a given input order.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from pydantic import BaseModel
from pydantic import Field as _Field

from sadl.log import get_logger
from sadl.model.entities import NodeClass, SadlFile
from sadl.model.types import Connector, ConnectorRole

# ###############
# Public Interface
# ###############


class View(Enum):
    """Which part of a SadlFile a render model shows."""

    SCHEMA = "schema"
    INSTANCES = "instances"


class LayoutOptions(BaseModel):
    """Grid and box metrics used to convert layers and rows into pixels."""

    node_width: int = 200
    node_height: int = 100
    padding: int = 40
    connector_spacing: int = 24
    connector_radius: int = 6
    schema_content_start: int = 40
    instance_content_start: int = 55
    content_bottom_margin: int = 15


@dataclass
class LayoutNode:
    """An entity to be placed.

    Attributes:
        name: Unique name of the entity; edges refer to it.
        kind: ``"node_class"``, ``"instance"`` or ``"nat"``.
        connectors: Connectors drawn on the entity's box.
        node_class: Node class of an instance entry.
        ip: IP literal of an instance entry.
        external_ip: External address of a NAT entry.
        internal_ip: Internal address of a NAT entry.
    """

    name: str
    kind: Literal["node_class", "instance", "nat"]
    connectors: list[Connector] = field(default_factory=list)
    node_class: str | None = None
    ip: str | None = None
    external_ip: str | None = None
    internal_ip: str | None = None


class Point(BaseModel):
    x: float
    y: float


class Box(BaseModel):
    """Axis-aligned rectangle, origin at the top-left corner."""

    x: float
    y: float
    width: float
    height: float


class PositionedConnector(BaseModel):
    """A connector label; ``y`` is relative to the top of its box.

    Server connectors sit on the left edge, client connectors on the right.
    """

    name: str
    role: ConnectorRole
    y: float


class PositionedEntity(BaseModel):
    """A placed entity: grid cell plus pixel box."""

    name: str
    kind: Literal["node_class", "instance", "nat"]
    layer: int
    row: int
    box: Box
    connectors: list[PositionedConnector] = _Field(default_factory=list)
    node_class: str | None = None
    ip: str | None = None


class PositionedNat(BaseModel):
    """A placed NAT entry, drawn as a hexagon inscribed in ``box``."""

    name: str
    external_ip: str
    internal_ip: str
    layer: int
    row: int
    box: Box


class PositionedEdge(BaseModel):
    """A drawn edge from the client side of one box to the server side of another."""

    source: str
    target: str
    start: Point
    end: Point
    source_connector: str | None = None
    target_connector: str | None = None


class RenderModel(BaseModel):
    """Everything a drawing surface needs to paint one view."""

    view: View
    entities: list[PositionedEntity] = _Field(default_factory=list)
    nats: list[PositionedNat] = _Field(default_factory=list)
    edges: list[PositionedEdge] = _Field(default_factory=list)


def assign_layers(names: Sequence[str], edges: Iterable[tuple[str, str]]) -> dict[str, int]:
    """Assign each name its longest-path distance from a source.

    ``layer(n)`` is 0 when *n* has no predecessors, otherwise one more than the
    largest predecessor layer. A predecessor still being computed (the edge
    closes a cycle) counts as layer 0, so cyclic graphs terminate.

    Edges whose endpoints are not both in *names* are ignored. In particular a
    dangling source does not lift its declared target off layer 0.

    The walk keeps an explicit stack, so path length is not bounded by the
    interpreter's recursion limit.
    """
    predecessors = _predecessors(names, edges)
    unvisited, in_progress, done = 0, 1, 2
    state: dict[str, int] = {}
    layers: dict[str, int] = {}

    for root in predecessors:
        if state.get(root, unvisited) != unvisited:
            continue
        state[root] = in_progress
        layers[root] = 0
        stack = [(root, iter(predecessors[root]))]
        while stack:
            name, pending = stack[-1]
            pred = next(pending, None)
            if pred is None:
                stack.pop()
                state[name] = done
                if stack:
                    parent = stack[-1][0]
                    layers[parent] = max(layers[parent], layers[name] + 1)
                continue
            mark = state.get(pred, unvisited)
            if mark == unvisited:
                state[pred] = in_progress
                layers[pred] = 0
                stack.append((pred, iter(predecessors[pred])))
            elif mark == in_progress:
                layers[name] = max(layers[name], 1)
            else:
                layers[name] = max(layers[name], layers[pred] + 1)
    return layers


def order_rows(
    names: Sequence[str],
    edges: Iterable[tuple[str, str]],
    layers: dict[str, int],
) -> dict[str, int]:
    """Assign each name a row index within its layer.

    Layer 0 is sorted by name. Each later layer is sorted by the mean row of
    each entity's predecessors as assigned so far; the sort is stable, so ties
    keep the order of *names*.
    """
    predecessors = _predecessors(names, edges)
    groups: dict[int, list[str]] = {}
    for name in predecessors:
        groups.setdefault(layers.get(name, 0), []).append(name)

    rows: dict[str, int] = {}
    for layer in sorted(groups):
        members = groups[layer]
        if layer == 0:
            members = sorted(members)
        else:
            members = sorted(members, key=lambda n: _barycenter(predecessors[n], rows))
        for row, name in enumerate(members):
            rows[name] = row
    return rows


def layout(
    nodes: Sequence[LayoutNode],
    edges: Iterable[tuple[str, str]],
    view: View,
    options: LayoutOptions | None = None,
) -> list[PositionedEntity]:
    """Place *nodes* on a layered grid.

    Args:
        nodes: Entities to place, in declaration order.
        edges: Directed ``(source, target)`` name pairs.
        view: The view being laid out; selects the connector start offset.
        options: Grid metrics, defaults when omitted.

    Returns:
        One PositionedEntity per node, in the order of *nodes*.
    """
    opts = options or LayoutOptions()
    edge_list = list(edges)
    names = [node.name for node in nodes]
    layers = assign_layers(names, edge_list)
    rows = order_rows(names, edge_list, layers)

    content_start = opts.schema_content_start if view == View.SCHEMA else opts.instance_content_start
    column_spacing = opts.node_width + opts.padding * 3
    row_spacing = opts.node_height + opts.padding * 2

    placed: list[PositionedEntity] = []
    for node in nodes:
        layer = layers[node.name]
        row = rows[node.name]
        connectors = _place_connectors(node.connectors, content_start, opts.connector_spacing)
        per_side = max(
            sum(1 for c in node.connectors if c.role == ConnectorRole.SERVER),
            sum(1 for c in node.connectors if c.role == ConnectorRole.CLIENT),
        )
        height = max(
            opts.node_height,
            content_start + per_side * opts.connector_spacing + opts.content_bottom_margin,
        )
        placed.append(
            PositionedEntity(
                name=node.name,
                kind=node.kind,
                layer=layer,
                row=row,
                box=Box(
                    x=opts.padding + layer * column_spacing,
                    y=opts.padding + row * row_spacing,
                    width=opts.node_width,
                    height=height,
                ),
                connectors=connectors,
                node_class=node.node_class,
                ip=node.ip,
            )
        )

    logger.debug(
        "layout_computed",
        view=view.value,
        entities=len(placed),
        layers=len(set(layers.values())),
    )
    return placed


def layout_schema(sadl_file: SadlFile, options: LayoutOptions | None = None) -> RenderModel:
    """Lay out node classes connected by link classes."""
    opts = options or LayoutOptions()
    nodes = [
        LayoutNode(name=nc.name, kind="node_class", connectors=list(nc.connectors))
        for nc in sadl_file.node_classes
    ]
    edges = [(lc.source.node_class, lc.target.node_class) for lc in sadl_file.link_classes]
    entities = layout(nodes, edges, View.SCHEMA, opts)

    by_name = {e.name: e for e in entities}
    drawn: list[PositionedEdge] = []
    for lc in sadl_file.link_classes:
        source = by_name.get(lc.source.node_class)
        target = by_name.get(lc.target.node_class)
        if source is None or target is None:
            continue
        source_conn = _find_connector(source, lc.source.connector)
        target_conn = _find_connector(target, lc.target.connector)
        if source_conn is None or target_conn is None:
            continue
        drawn.append(_edge(source, target, source_conn, target_conn, opts))

    return RenderModel(view=View.SCHEMA, entities=entities, edges=drawn)


def layout_instances(sadl_file: SadlFile, options: LayoutOptions | None = None) -> RenderModel:
    """Lay out instance entries and NAT entries connected by connections.

    Instance entries take their connectors from their node class; an entry
    whose node class is not declared is drawn without connectors.
    """
    opts = options or LayoutOptions()
    classes: dict[str, NodeClass] = {}
    for nc in sadl_file.node_classes:
        classes.setdefault(nc.name, nc)

    nodes: list[LayoutNode] = []
    for inst in sadl_file.instances:
        node_class = classes.get(inst.node_class)
        connectors = list(node_class.connectors) if node_class is not None else []
        for entry in inst.entries:
            nodes.append(
                LayoutNode(
                    name=entry.name,
                    kind="instance",
                    connectors=connectors,
                    node_class=inst.node_class,
                    ip=entry.ip,
                )
            )
    for nat in sadl_file.nats:
        nodes.append(
            LayoutNode(
                name=nat.name,
                kind="nat",
                external_ip=nat.external_ip,
                internal_ip=nat.internal_ip,
            )
        )

    edges = [(conn.source, conn.target) for conn in sadl_file.connections]
    placed = layout(nodes, edges, View.INSTANCES, opts)

    entities: list[PositionedEntity] = []
    nats: list[PositionedNat] = []
    for node, entity in zip(nodes, placed):
        if node.kind == "nat":
            nats.append(
                PositionedNat(
                    name=node.name,
                    external_ip=node.external_ip or "",
                    internal_ip=node.internal_ip or "",
                    layer=entity.layer,
                    row=entity.row,
                    box=entity.box,
                )
            )
        else:
            entities.append(entity)

    by_name = {e.name: e for e in placed}
    drawn: list[PositionedEdge] = []
    for conn in sadl_file.connections:
        source = by_name.get(conn.source)
        target = by_name.get(conn.target)
        if source is None or target is None:
            continue
        source_conn = _first_connector(source, ConnectorRole.CLIENT)
        target_conn = _first_connector(target, ConnectorRole.SERVER)
        drawn.append(_edge(source, target, source_conn, target_conn, opts))

    return RenderModel(view=View.INSTANCES, entities=entities, nats=nats, edges=drawn)


def default_view(sadl_file: SadlFile) -> View:
    """Return the instances view when any instance group is declared, else the schema view."""
    return View.INSTANCES if sadl_file.instances else View.SCHEMA


def build_render_model(
    sadl_file: SadlFile,
    view: View | None = None,
    options: LayoutOptions | None = None,
) -> RenderModel:
    """Lay out *sadl_file* in the requested view (or its default view)."""
    chosen = view or default_view(sadl_file)
    if chosen == View.SCHEMA:
        return layout_schema(sadl_file, options)
    return layout_instances(sadl_file, options)


# ################
# Implementation
# ################

logger = get_logger(__name__)


def _predecessors(names: Sequence[str], edges: Iterable[tuple[str, str]]) -> dict[str, list[str]]:
    """Map every distinct name (first-seen order) to its predecessors, one per edge."""
    predecessors: dict[str, list[str]] = {name: [] for name in names}
    for source, target in edges:
        if source in predecessors and target in predecessors:
            predecessors[target].append(source)
    return predecessors


def _barycenter(preds: list[str], rows: dict[str, int]) -> float:
    """Mean row of *preds*; a predecessor without a row yet counts as row 0."""
    if not preds:
        return 0.0
    return sum(rows.get(p, 0) for p in preds) / len(preds)


def _place_connectors(
    connectors: list[Connector],
    content_start: int,
    spacing: int,
) -> list[PositionedConnector]:
    """Stack server connectors and client connectors independently from *content_start*."""
    placed: list[PositionedConnector] = []
    for role in (ConnectorRole.SERVER, ConnectorRole.CLIENT):
        same_side = [c for c in connectors if c.role == role]
        placed.extend(
            PositionedConnector(name=c.name, role=role, y=content_start + i * spacing)
            for i, c in enumerate(same_side)
        )
    return placed


def _find_connector(entity: PositionedEntity, name: str) -> PositionedConnector | None:
    return next((c for c in entity.connectors if c.name == name), None)


def _first_connector(entity: PositionedEntity, role: ConnectorRole) -> PositionedConnector | None:
    return next((c for c in entity.connectors if c.role == role), None)


def _edge(
    source: PositionedEntity,
    target: PositionedEntity,
    source_conn: PositionedConnector | None,
    target_conn: PositionedConnector | None,
    opts: LayoutOptions,
) -> PositionedEdge:
    """Build an edge leaving the right edge of *source* and entering the left edge of *target*.

    Without a connector the edge attaches at the vertical middle of the box.
    """
    start_y = source_conn.y if source_conn is not None else source.box.height / 2
    end_y = target_conn.y if target_conn is not None else target.box.height / 2
    return PositionedEdge(
        source=source.name,
        target=target.name,
        start=Point(
            x=source.box.x + source.box.width + opts.connector_radius,
            y=source.box.y + start_y,
        ),
        end=Point(x=target.box.x - opts.connector_radius, y=target.box.y + end_y),
        source_connector=source_conn.name if source_conn is not None else None,
        target_connector=target_conn.name if target_conn is not None else None,
    )
