from __future__ import annotations

import enum
import logging
import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger("dental_chart.schemas")

TOOTH_MIN = 1
TOOTH_MAX = 32


class Condition(str, enum.Enum):
    healthy = "healthy"
    cavity = "cavity"
    filled = "filled"
    crown = "crown"
    extracted = "extracted"
    root_canal = "root_canal"
    watchful = "watchful"


class SurfaceCode(str, enum.Enum):
    M = "M"
    O = "O"
    D = "D"
    B = "B"
    L = "L"
    I = "I"


class TreatmentStatus(str, enum.Enum):
    planned = "planned"
    in_progress = "in_progress"
    completed = "completed"


CONDITION_VALUES = {item.value for item in Condition}
SURFACE_VALUES = {item.value for item in SurfaceCode}

# Surfaces drawn as wedges of the five-surface glyph, in drawing order.
GLYPH_SURFACES: tuple[SurfaceCode, ...] = (
    SurfaceCode.M,
    SurfaceCode.O,
    SurfaceCode.D,
    SurfaceCode.B,
    SurfaceCode.L,
)


def is_valid_tooth_number(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and TOOTH_MIN <= value <= TOOTH_MAX


def _split_surface_letters(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [letter for letter in value.strip().upper() if not letter.isspace() and letter != ","]
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError(f"Surfaces must be a string or a list of surface codes, got {type(value).__name__}")
    letters: list[str] = []
    for item in value:
        raw = item.value if isinstance(item, SurfaceCode) else str(item)
        letters.extend(letter for letter in raw.strip().upper() if letter != ",")
    return letters


class TreatmentEntry(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    description: str
    surface: Optional[str] = None
    date: datetime.date
    performed_by: str
    status: TreatmentStatus = TreatmentStatus.planned

    @field_validator("surface", mode="before")
    @classmethod
    def validate_surface(cls, value):
        if value is None or value == "":
            return None
        letters = _split_surface_letters(value)
        invalid = [letter for letter in letters if letter not in SURFACE_VALUES]
        if invalid:
            raise ValueError(
                f"Invalid surface code(s): {', '.join(invalid)}. Valid: {', '.join(sorted(SURFACE_VALUES))}"
            )
        return "".join(dict.fromkeys(letters))

    @property
    def is_outstanding(self) -> bool:
        return self.status != TreatmentStatus.completed

    def covers(self, surface: SurfaceCode) -> bool:
        return bool(self.surface) and surface.value in self.surface


class PeriodontalMetrics(BaseModel):
    probing_depths: dict[str, float] = Field(default_factory=dict)
    bleeding: bool = False
    plaque: bool = False
    mobility: Optional[int] = Field(default=None, ge=0, le=3)

    @field_validator("probing_depths")
    @classmethod
    def validate_depths(cls, value: dict[str, float]) -> dict[str, float]:
        cleaned: dict[str, float] = {}
        for site, depth in value.items():
            if depth < 0:
                raise ValueError(f"Probing depth for site {site} must be >= 0")
            cleaned[site.strip().upper()] = depth
        return cleaned

    @property
    def deepest_pocket(self) -> float | None:
        if not self.probing_depths:
            return None
        return max(self.probing_depths.values())


class ToothRecord(BaseModel):
    number: int = Field(..., ge=TOOTH_MIN, le=TOOTH_MAX)
    condition: Condition = Condition.healthy
    surfaces: list[SurfaceCode] = Field(default_factory=list)
    treatments: list[TreatmentEntry] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
    periodontal: Optional[PeriodontalMetrics] = None

    @model_validator(mode="before")
    @classmethod
    def degrade_unknown_condition(cls, data):
        if not isinstance(data, dict):
            return data
        raw = data.get("condition")
        if raw is None or isinstance(raw, Condition):
            return data
        normalized = str(raw).strip().lower()
        if normalized in CONDITION_VALUES:
            return {**data, "condition": normalized}
        logger.warning(
            "Unknown condition %r on tooth %s; rendering as healthy", raw, data.get("number")
        )
        return {**data, "condition": Condition.healthy}

    @field_validator("surfaces", mode="before")
    @classmethod
    def dedupe_surfaces(cls, value):
        # Affected surfaces behave as an insertion-ordered set.
        return list(dict.fromkeys(_split_surface_letters(value)))

    @property
    def surface_tag(self) -> str:
        return "".join(surface.value for surface in self.surfaces)

    @property
    def outstanding_treatments(self) -> list[TreatmentEntry]:
        return [entry for entry in self.treatments if entry.is_outstanding]

    def is_default(self) -> bool:
        return (
            self.condition == Condition.healthy
            and not self.surfaces
            and not self.treatments
            and not self.notes
            and self.periodontal is None
        )


class SurfaceDetail(BaseModel):
    condition: Condition = Condition.healthy
    treatment: Optional[TreatmentEntry] = None


class ClinicalToothView(BaseModel):
    """Per-surface projection of a ToothRecord used by the surface-level layouts."""

    number: int = Field(..., ge=TOOTH_MIN, le=TOOTH_MAX)
    condition: Condition = Condition.healthy
    surfaces: dict[SurfaceCode, SurfaceDetail] = Field(default_factory=dict)
    affected_surfaces: list[SurfaceCode] = Field(default_factory=list)
    treatments: list[TreatmentEntry] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
    periodontal: Optional[PeriodontalMetrics] = None


Density = Literal["overview", "detailed"]
ClinicalViewMode = Literal["treatments", "periodontal", "planning"]


class ChartRenderRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    teeth: dict[str, dict] = Field(default_factory=dict)
    design: Optional[str] = None
    selected: Optional[int] = None
    hovered: Optional[int] = None
    density: Density = "overview"
    clinical_view: ClinicalViewMode = "treatments"

    @field_validator("teeth", mode="before")
    @classmethod
    def accept_record_lists(cls, value):
        if isinstance(value, list):
            keyed: dict[str, dict] = {}
            for item in value:
                if isinstance(item, dict) and "number" in item:
                    keyed[str(item["number"])] = item
                else:
                    logger.warning("Ignoring tooth entry without a number: %r", item)
            return keyed
        return value
