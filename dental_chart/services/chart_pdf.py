from __future__ import annotations

from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Table, TableStyle

from dental_chart.schemas.view import ChartNode, ChartView

CHART_LEFT = 20 * mm
CHART_TOP = 255 * mm
CHART_MAX_WIDTH = 170 * mm
CHART_MAX_HEIGHT = 130 * mm


class _Frame:
    """Maps view coordinates (top-left origin) onto the PDF page."""

    def __init__(self, view: ChartView):
        self.scale = min(CHART_MAX_WIDTH / view.width, CHART_MAX_HEIGHT / view.height)
        self.bottom = CHART_TOP - view.height * self.scale

    def point(self, x: float, y: float) -> tuple[float, float]:
        return CHART_LEFT + x * self.scale, CHART_TOP - y * self.scale


def _draw_header(pdf: canvas.Canvas, view: ChartView) -> None:
    pdf.setFont("Helvetica-Bold", 16)
    pdf.drawString(20 * mm, 280 * mm, view.title)
    pdf.setFont("Helvetica", 10)
    pdf.drawString(20 * mm, 274 * mm, f"Layout: {view.design}")
    pdf.setStrokeColor(colors.lightgrey)
    pdf.line(20 * mm, 268 * mm, 190 * mm, 268 * mm)


def _draw_tooth(pdf: canvas.Canvas, frame: _Frame, node: ChartNode) -> None:
    cx, cy = frame.point(node.x, node.y)
    width = node.width * frame.scale
    height = node.height * frame.scale
    pdf.saveState()
    pdf.translate(cx, cy)
    pdf.rotate(-node.rotation)
    pdf.setFillColor(colors.HexColor(node.fill or "#ffffff"))
    pdf.setStrokeColor(colors.HexColor(node.stroke or "#d1d5db"))
    pdf.setLineWidth(1.5 if node.highlighted else 0.6)
    pdf.roundRect(-width / 2, -height / 2, width, height, 2, stroke=1, fill=1)
    pdf.restoreState()
    for child in node.children:
        if child.kind == "surface":
            _draw_surface(pdf, frame, child)
    pdf.setFillColor(colors.black)
    pdf.setFont("Helvetica", 6)
    pdf.drawCentredString(cx, cy - 2, node.label or "")
    tag = node.attrs.get("tag")
    if tag:
        pdf.setFont("Helvetica", 5)
        pdf.drawCentredString(cx, cy - height / 2 + 1.5, tag)


def _draw_surface(pdf: canvas.Canvas, frame: _Frame, node: ChartNode) -> None:
    points = [frame.point(x, y) for x, y in node.attrs.get("points", [])]
    if len(points) < 3:
        return
    path = pdf.beginPath()
    path.moveTo(*points[0])
    for point in points[1:]:
        path.lineTo(*point)
    path.close()
    pdf.saveState()
    pdf.setFillColor(colors.HexColor(node.fill or "#ffffff"), alpha=node.attrs.get("opacity", 0.8))
    pdf.setStrokeColor(colors.white)
    pdf.setLineWidth(0.3)
    pdf.drawPath(path, stroke=1, fill=1)
    pdf.restoreState()


def _draw_chart(pdf: canvas.Canvas, view: ChartView) -> float:
    frame = _Frame(view)
    pdf.setStrokeColor(colors.lightgrey)
    pdf.rect(CHART_LEFT, frame.bottom, view.width * frame.scale, view.height * frame.scale)
    for node in view.tooth_nodes().values():
        _draw_tooth(pdf, frame, node)
    for root in view.nodes:
        for node in root.walk():
            if node.kind == "quadrant_label" and node.label:
                x, y = frame.point(node.x, node.y)
                pdf.setFont("Helvetica-Bold", 7)
                pdf.drawCentredString(x, y, node.label)
    return frame.bottom - 10 * mm


def _draw_legend(pdf: canvas.Canvas, view: ChartView, y: float) -> float:
    data = [["Condition", "Colour"]]
    for entry in view.legend:
        data.append([entry.label, entry.color])
    table = Table(data, colWidths=[50 * mm, 30 * mm])
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f0f0f0")),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
    ]
    for row, entry in enumerate(view.legend, start=1):
        style.append(("BACKGROUND", (1, row), (1, row), colors.HexColor(entry.tint)))
    table.setStyle(TableStyle(style))
    _, height = table.wrapOn(pdf, 20 * mm, y)
    table.drawOn(pdf, 20 * mm, y - height)
    return y - height - 8 * mm


def _draw_details(pdf: canvas.Canvas, view: ChartView, y: float) -> None:
    pdf.setFont("Helvetica-Bold", 10)
    if view.details is None:
        if view.placeholder:
            pdf.setFont("Helvetica", 9)
            pdf.drawString(110 * mm, y, view.placeholder)
        return
    details = view.details
    pdf.drawString(110 * mm, y, details.title)
    pdf.setFont("Helvetica", 9)
    pdf.drawString(110 * mm, y - 12, details.summary)
    line_y = y - 24
    for tab in details.tabs:
        if not tab.items:
            continue
        pdf.setFont("Helvetica-Bold", 9)
        pdf.drawString(110 * mm, line_y, tab.title)
        pdf.setFont("Helvetica", 8)
        line_y -= 10
        for item in tab.items:
            text = " • ".join(str(value) for value in item.values() if value not in (None, "", [], {}))
            pdf.drawString(112 * mm, line_y, text[:90])
            line_y -= 9


def build_chart_pdf(view: ChartView) -> bytes:
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(view.title)
    _draw_header(pdf, view)
    y = _draw_chart(pdf, view)
    _draw_legend(pdf, view, y)
    _draw_details(pdf, view, y)
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()
