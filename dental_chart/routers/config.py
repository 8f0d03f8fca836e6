from __future__ import annotations

from fastapi import APIRouter

from dental_chart.core.settings import settings

router = APIRouter(tags=["config"])


@router.get("/config")
def get_config() -> dict[str, object]:
    return {
        "default_design": settings.default_design,
        "feature_flags": {
            "chart_pdf_export": settings.feature_chart_pdf_export,
        },
    }
