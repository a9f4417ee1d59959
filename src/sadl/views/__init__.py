# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Layout and export of SADL models for display."""

from sadl.views.flowchart import to_mermaid
from sadl.views.layout import (
    LayoutNode,
    LayoutOptions,
    RenderModel,
    View,
    build_render_model,
    default_view,
    layout,
    layout_instances,
    layout_schema,
)

__all__ = [
    "LayoutNode",
    "LayoutOptions",
    "RenderModel",
    "View",
    "build_render_model",
    "default_view",
    "layout",
    "layout_instances",
    "layout_schema",
    "to_mermaid",
]
