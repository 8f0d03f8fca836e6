from __future__ import annotations

from typing import Any

# Demo chart used by the CLI and the API docs.
SAMPLE_TEETH: dict[int, dict[str, Any]] = {
    8: {
        "condition": "filled",
        "surfaces": ["O"],
        "treatments": [
            {
                "code": "D2161",
                "description": "Resin composite - one surface",
                "surface": "O",
                "date": "2024-01-15",
                "performed_by": "Dr. Smith",
                "status": "completed",
            }
        ],
        "notes": ["Patient reports sensitivity to cold"],
    },
    14: {
        "condition": "cavity",
        "surfaces": ["M", "O"],
        "treatments": [
            {
                "code": "D2150",
                "description": "Resin composite - two surfaces",
                "surface": "MO",
                "date": "2024-02-10",
                "performed_by": "Dr. Johnson",
                "status": "planned",
            }
        ],
        "notes": ["Large cavity requiring restoration", "Patient scheduled for treatment"],
        "periodontal": {
            "probing_depths": {"MB": 3, "DB": 2, "ML": 3, "DL": 2},
            "bleeding": False,
            "plaque": True,
            "mobility": 0,
        },
    },
    19: {"condition": "crown"},
    30: {"condition": "extracted"},
}


def sample_snapshot() -> dict[str, dict[str, Any]]:
    return {str(number): dict(record) for number, record in SAMPLE_TEETH.items()}
