from __future__ import annotations

import enum
from typing import Literal

from pydantic import BaseModel


class DesignPreference(str, enum.Enum):
    traditional = "traditional"
    anatomical = "anatomical"
    interactive = "interactive"
    minimalist = "minimalist"
    clinical = "clinical"


DEFAULT_DESIGN = DesignPreference.traditional


class PreferenceState(str, enum.Enum):
    initializing = "initializing"
    ready = "ready"


class DesignPreferenceOut(BaseModel):
    design: DesignPreference
    state: PreferenceState


class DesignPreferenceUpdate(BaseModel):
    design: str


class DesignOut(BaseModel):
    id: DesignPreference
    name: str
    description: str
    features: list[str]
    complexity: Literal["simple", "medium", "complex"]
    detail: Literal["basic", "medium", "high"]
    best_for: str
    active: bool = False
