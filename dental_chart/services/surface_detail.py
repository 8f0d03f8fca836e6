from __future__ import annotations

from dental_chart.schemas.chart import (
    GLYPH_SURFACES,
    ClinicalToothView,
    Condition,
    SurfaceCode,
    SurfaceDetail,
    ToothRecord,
    TreatmentEntry,
)
from dental_chart.services.taxonomy import WHOLE_TOOTH_CONDITIONS


def _latest_treatment_for(treatments: list[TreatmentEntry], surface: SurfaceCode) -> TreatmentEntry | None:
    for entry in reversed(treatments):
        if entry.covers(surface):
            return entry
    return None


def surface_condition(record: ToothRecord, surface: SurfaceCode) -> Condition:
    if surface in record.surfaces:
        return record.condition
    if not record.surfaces and record.condition in WHOLE_TOOTH_CONDITIONS:
        return record.condition
    return Condition.healthy


def to_clinical_view(record: ToothRecord) -> ClinicalToothView:
    surfaces = {
        surface: SurfaceDetail(
            condition=surface_condition(record, surface),
            treatment=_latest_treatment_for(record.treatments, surface),
        )
        for surface in GLYPH_SURFACES
    }
    return ClinicalToothView(
        number=record.number,
        condition=record.condition,
        surfaces=surfaces,
        affected_surfaces=list(record.surfaces),
        treatments=list(record.treatments),
        notes=list(record.notes),
        periodontal=record.periodontal,
    )


def from_clinical_view(view: ClinicalToothView) -> ToothRecord:
    affected = list(view.affected_surfaces)
    whole_tooth = not affected and view.condition in WHOLE_TOOTH_CONDITIONS
    if not whole_tooth:
        for surface in GLYPH_SURFACES:
            detail = view.surfaces.get(surface)
            if detail and detail.condition != Condition.healthy and surface not in affected:
                affected.append(surface)
    return ToothRecord(
        number=view.number,
        condition=view.condition,
        surfaces=affected,
        treatments=list(view.treatments),
        notes=list(view.notes),
        periodontal=view.periodontal,
    )
