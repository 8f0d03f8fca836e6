from fastapi import APIRouter, Depends, Response

from dental_chart.deps import get_dispatcher, require_pdf_export
from dental_chart.schemas.chart import ChartRenderRequest
from dental_chart.schemas.view import ChartView, LegendEntry
from dental_chart.services import taxonomy
from dental_chart.services.chart_pdf import build_chart_pdf
from dental_chart.services.chart_svg import render_svg
from dental_chart.services.dispatcher import RenderingDispatcher, render_request

router = APIRouter(prefix="/charts", tags=["charts"])


@router.post("/render", response_model=ChartView)
def render_chart(
    payload: ChartRenderRequest,
    dispatcher: RenderingDispatcher = Depends(get_dispatcher),
):
    return render_request(dispatcher, payload)


@router.post("/render.svg")
def render_chart_svg(
    payload: ChartRenderRequest,
    dispatcher: RenderingDispatcher = Depends(get_dispatcher),
):
    view = render_request(dispatcher, payload)
    return Response(content=render_svg(view), media_type="image/svg+xml")


@router.post("/export.pdf", dependencies=[Depends(require_pdf_export)])
def export_chart_pdf(
    payload: ChartRenderRequest,
    dispatcher: RenderingDispatcher = Depends(get_dispatcher),
):
    view = render_request(dispatcher, payload)
    pdf_bytes = build_chart_pdf(view)
    headers = {"Content-Disposition": f'attachment; filename="chart-{view.design}.pdf"'}
    return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)


@router.get("/conditions", response_model=list[LegendEntry])
def list_conditions():
    return taxonomy.legend()
