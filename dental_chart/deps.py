from collections.abc import Iterator

from fastapi import Depends, HTTPException, status

from dental_chart.core.settings import settings
from dental_chart.services.dispatcher import RenderingDispatcher
from dental_chart.services.preferences import DesignPreferenceStore, get_design_preference_store


def get_preference_store() -> DesignPreferenceStore:
    return get_design_preference_store()


def get_dispatcher(
    preferences: DesignPreferenceStore = Depends(get_preference_store),
) -> Iterator[RenderingDispatcher]:
    dispatcher = RenderingDispatcher(preferences)
    try:
        yield dispatcher
    finally:
        dispatcher.close()


def require_pdf_export() -> None:
    if not settings.feature_chart_pdf_export:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chart PDF export is disabled")
