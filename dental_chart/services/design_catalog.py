from __future__ import annotations

from dental_chart.schemas.preference import DesignOut, DesignPreference

DESIGNS: tuple[dict, ...] = (
    {
        "id": DesignPreference.traditional,
        "name": "Traditional Grid Layout",
        "description": "Classic numbered grid format with clear tooth positioning",
        "features": [
            "Numbered grid layout",
            "Clear tooth identification",
            "Simple condition indicators",
            "Easy to understand",
        ],
        "complexity": "simple",
        "detail": "basic",
        "best_for": "General practice",
    },
    {
        "id": DesignPreference.anatomical,
        "name": "Anatomical Layout",
        "description": "Realistic mouth positioning with curved jaw alignment",
        "features": [
            "Anatomical positioning",
            "Quadrant-based layout",
            "Realistic jaw curves",
            "Visual tooth representation",
        ],
        "complexity": "medium",
        "detail": "medium",
        "best_for": "Patient education",
    },
    {
        "id": DesignPreference.interactive,
        "name": "Interactive Modern",
        "description": "Advanced interactive design with detailed surface mapping",
        "features": [
            "Surface-level detail",
            "Interactive hover effects",
            "Multi-view modes",
            "Comprehensive tooth data",
        ],
        "complexity": "complex",
        "detail": "high",
        "best_for": "Specialist practice",
    },
    {
        "id": DesignPreference.minimalist,
        "name": "Minimalist Clean",
        "description": "Clean, simple design focusing on essential information",
        "features": [
            "Clean interface",
            "Priority indicators",
            "Quadrant organization",
            "Simplified workflow",
        ],
        "complexity": "simple",
        "detail": "basic",
        "best_for": "Quick assessments",
    },
    {
        "id": DesignPreference.clinical,
        "name": "Detailed Clinical",
        "description": "Comprehensive clinical layout with treatment codes and notes",
        "features": [
            "Treatment code integration",
            "Clinical notes",
            "Detailed surface mapping",
            "Professional workflow",
        ],
        "complexity": "complex",
        "detail": "high",
        "best_for": "Academic/research",
    },
)


def _matches_search(design: dict, term: str) -> bool:
    haystack = [design["name"], design["description"], *design["features"]]
    return any(term in text.lower() for text in haystack)


def filter_designs(
    search: str | None = None,
    complexity: str | None = None,
    detail: str | None = None,
    active: DesignPreference | None = None,
) -> list[DesignOut]:
    term = (search or "").strip().lower()
    complexity = (complexity or "all").strip().lower()
    detail = (detail or "all").strip().lower()
    results: list[DesignOut] = []
    for design in DESIGNS:
        if term and not _matches_search(design, term):
            continue
        if complexity != "all" and design["complexity"] != complexity:
            continue
        if detail != "all" and design["detail"] != detail:
            continue
        results.append(DesignOut(**design, active=design["id"] == active))
    return results
