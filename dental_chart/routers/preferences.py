from fastapi import APIRouter, Depends, Query

from dental_chart.deps import get_preference_store
from dental_chart.schemas.preference import DesignOut, DesignPreferenceOut, DesignPreferenceUpdate
from dental_chart.services.design_catalog import filter_designs
from dental_chart.services.preferences import DesignPreferenceStore

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("/design", response_model=DesignPreferenceOut)
def get_design_preference(store: DesignPreferenceStore = Depends(get_preference_store)):
    design = store.read()
    return DesignPreferenceOut(design=design, state=store.state)


@router.put("/design", response_model=DesignPreferenceOut)
def update_design_preference(
    payload: DesignPreferenceUpdate,
    store: DesignPreferenceStore = Depends(get_preference_store),
):
    design = store.write(payload.design)
    return DesignPreferenceOut(design=design, state=store.state)


@router.get("/designs", response_model=list[DesignOut])
def list_designs(
    search: str | None = Query(default=None),
    complexity: str | None = Query(default=None),
    detail: str | None = Query(default=None),
    store: DesignPreferenceStore = Depends(get_preference_store),
):
    return filter_designs(search=search, complexity=complexity, detail=detail, active=store.read())
