"""SVG serialisation of a rendered ChartView.

Every layout produces the same node vocabulary, so one walker covers all
five designs. Node kinds without a visual form (rows, arcs, jaws) only group
their children.
"""

from __future__ import annotations

import html

from dental_chart.schemas.view import ChartNode, ChartView

FONT_FAMILY = "Helvetica, Arial, sans-serif"
LEGEND_ROW_HEIGHT = 18
LEGEND_WIDTH = 140


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _text(x: float, y: float, text: str, *, size: int = 10, weight: str = "normal",
          rotate: float = 0.0, anchor: str = "middle", color: str = "#111827") -> str:
    transform = f' transform="rotate({_fmt(rotate)} {_fmt(x)} {_fmt(y)})"' if rotate else ""
    return (
        f'<text x="{_fmt(x)}" y="{_fmt(y)}" font-family="{FONT_FAMILY}" font-size="{size}" '
        f'font-weight="{weight}" text-anchor="{anchor}" dominant-baseline="middle" fill="{color}"'
        f"{transform}>{html.escape(text)}</text>"
    )


def _tooth(node: ChartNode) -> list[str]:
    left = node.x - node.width / 2
    top = node.y - node.height / 2
    stroke_width = 2 if node.highlighted else 1
    parts = [
        f'<g class="tooth" data-tooth="{node.tooth}" data-condition="{html.escape(str(node.attrs.get("condition", "")))}"'
        f' transform="rotate({_fmt(node.rotation)} {_fmt(node.x)} {_fmt(node.y)})">',
        f'<rect x="{_fmt(left)}" y="{_fmt(top)}" width="{_fmt(node.width)}" height="{_fmt(node.height)}"'
        f' rx="4" fill="{node.fill}" stroke="{node.stroke}" stroke-width="{stroke_width}"/>',
    ]
    for child in node.children:
        parts.extend(_node(child))
    parts.append(
        _text(node.x, node.y, node.label or "", size=11, weight="bold", rotate=node.label_rotation)
    )
    tag = node.attrs.get("tag")
    if tag:
        parts.append(_text(node.x, top + node.height - 6, tag, size=8, color="#374151"))
    parts.append("</g>")
    return parts


def _node(node: ChartNode) -> list[str]:
    if node.kind == "tooth":
        return _tooth(node)
    if node.kind == "surface":
        points = " ".join(f"{_fmt(x)},{_fmt(y)}" for x, y in node.attrs.get("points", []))
        return [
            f'<polygon class="surface" data-surface="{node.label}" points="{points}" fill="{node.fill}"'
            f' fill-opacity="{node.attrs.get("opacity", 0.8)}" stroke="{node.stroke}" stroke-width="0.5"/>'
        ]
    if node.kind in {"urgency_dot", "badge"}:
        parts = [
            f'<circle class="{node.kind}" cx="{_fmt(node.x)}" cy="{_fmt(node.y)}" r="{_fmt(node.width / 2)}"'
            f' fill="{node.fill}"/>'
        ]
        if node.label:
            parts.append(_text(node.x, node.y, node.label, size=8, weight="bold", color="#ffffff"))
        return parts
    if node.kind in {"priority_ring", "plan_marker"}:
        return [
            f'<rect class="{node.kind}" x="{_fmt(node.x - node.width / 2)}" y="{_fmt(node.y - node.height / 2)}"'
            f' width="{_fmt(node.width)}" height="{_fmt(node.height)}" rx="6" fill="none"'
            f' stroke="{node.stroke}" stroke-width="2"/>'
        ]
    if node.kind == "crosshair":
        return [
            f'<line class="crosshair" x1="{_fmt(node.x)}" y1="{_fmt(node.y)}" x2="{_fmt(node.x + node.width)}"'
            f' y2="{_fmt(node.y + node.height)}" stroke="{node.stroke}" stroke-width="1"/>'
        ]
    if node.kind == "quadrant":
        stroke = "#3b82f6" if node.highlighted else "#e5e7eb"
        parts = [
            f'<g class="quadrant" data-quadrant="{node.key}">',
            f'<rect x="{_fmt(node.x - 6)}" y="{_fmt(node.y - 6)}" width="{_fmt(node.width + 12)}"'
            f' height="{_fmt(node.height + 12)}" rx="8" fill="none" stroke="{stroke}"/>',
        ]
        for child in node.children:
            parts.extend(_node(child))
        parts.append("</g>")
        return parts
    if node.kind in {"type_label", "quadrant_label"}:
        return [_text(node.x, node.y, node.label or "", size=9, color="#6b7280")]
    if node.kind == "periodontal":
        color = "#dc2626" if node.highlighted else "#6b7280"
        return [_text(node.x, node.y + 6, node.label or "", size=8, color=color)]

    parts = [f'<g class="{html.escape(node.kind)}" data-key="{html.escape(node.key)}">']
    for child in node.children:
        parts.extend(_node(child))
    parts.append("</g>")
    return parts


def _legend(view: ChartView, top: float) -> list[str]:
    parts = ['<g class="legend">']
    for index, entry in enumerate(view.legend):
        x = 10 + (index % 4) * LEGEND_WIDTH
        y = top + (index // 4) * LEGEND_ROW_HEIGHT
        parts.append(
            f'<rect x="{x}" y="{_fmt(y)}" width="12" height="12" fill="{entry.color}" stroke="{entry.border}"/>'
        )
        parts.append(_text(x + 18, y + 6, entry.label, size=10, anchor="start"))
    parts.append("</g>")
    return parts


def render_svg(view: ChartView) -> str:
    legend_rows = (len(view.legend) + 3) // 4
    total_height = view.height + 10 + legend_rows * LEGEND_ROW_HEIGHT
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_fmt(view.width)}" height="{_fmt(total_height)}"'
        f' viewBox="0 0 {_fmt(view.width)} {_fmt(total_height)}" data-design="{view.design}">',
        f"<title>{html.escape(view.title)}</title>",
        f'<rect width="{_fmt(view.width)}" height="{_fmt(total_height)}" fill="#ffffff"/>',
    ]
    for node in view.nodes:
        parts.extend(_node(node))
    parts.extend(_legend(view, view.height + 10))
    parts.append("</svg>")
    return "\n".join(parts)
