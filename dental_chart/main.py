import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dental_chart.core.settings import settings, validate_settings
from dental_chart.db.session import engine
from dental_chart.models import Base
from dental_chart.routers.charts import router as charts_router
from dental_chart.routers.config import router as config_router
from dental_chart.routers.preferences import router as preferences_router

app = FastAPI(title="Dental Chart Engine API", version="0.1.0")
logger = logging.getLogger("dental_chart.startup")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    request_id = request.headers.get("x-request-id")
    logger.exception("Unhandled server error", extra={"request_id": request_id})
    payload = {"detail": "Internal server error"}
    if request_id:
        payload["request_id"] = request_id
    return JSONResponse(status_code=500, content=payload)


@app.on_event("startup")
def startup():
    validate_settings(settings)
    Base.metadata.create_all(bind=engine)
    logger.info(
        "Chart engine ready (default design %s, PDF export %s).",
        settings.default_design,
        "on" if settings.feature_chart_pdf_export else "off",
    )


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(config_router)
app.include_router(charts_router)
app.include_router(preferences_router)
