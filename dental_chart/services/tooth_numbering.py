from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from dental_chart.schemas.chart import TOOTH_MAX, TOOTH_MIN

ToothType = Literal["molar", "premolar", "canine", "incisor"]

ALL_TEETH: tuple[int, ...] = tuple(range(TOOTH_MIN, TOOTH_MAX + 1))
UPPER_TEETH: tuple[int, ...] = tuple(range(1, 17))
LOWER_TEETH: tuple[int, ...] = tuple(range(17, 33))

# Short labels for one jaw row read from the patient's right to left.
JAW_ROW_LABELS: tuple[str, ...] = (
    "M3", "M2", "M1", "PM2", "PM1", "C", "LI", "CI",
    "CI", "LI", "C", "PM1", "PM2", "M1", "M2", "M3",
)

_TYPE_BY_LABEL: dict[str, ToothType] = {
    "M3": "molar",
    "M2": "molar",
    "M1": "molar",
    "PM2": "premolar",
    "PM1": "premolar",
    "C": "canine",
    "LI": "incisor",
    "CI": "incisor",
}

# Universal 1..32 in chart order mapped onto FDI two-digit notation.
_FDI_ORDER: tuple[int, ...] = (
    18, 17, 16, 15, 14, 13, 12, 11, 21, 22, 23, 24, 25, 26, 27, 28,
    38, 37, 36, 35, 34, 33, 32, 31, 41, 42, 43, 44, 45, 46, 47, 48,
)


@dataclass(frozen=True)
class Quadrant:
    id: int
    key: str
    name: str
    roman: str
    teeth: tuple[int, ...]


QUADRANTS: tuple[Quadrant, ...] = (
    Quadrant(1, "upper_right", "Upper Right", "I", tuple(range(1, 9))),
    Quadrant(2, "upper_left", "Upper Left", "II", tuple(range(9, 17))),
    Quadrant(3, "lower_left", "Lower Left", "III", tuple(range(17, 25))),
    Quadrant(4, "lower_right", "Lower Right", "IV", tuple(range(25, 33))),
)


def quadrant_for(number: int) -> Quadrant:
    if not TOOTH_MIN <= number <= TOOTH_MAX:
        raise ValueError(f"Tooth number out of range: {number}")
    return QUADRANTS[(number - 1) // 8]


def is_upper(number: int) -> bool:
    return number in UPPER_TEETH


def row_label(number: int) -> str:
    """Tooth-type label as printed under the jaw rows (M3 ... CI)."""
    if is_upper(number):
        return JAW_ROW_LABELS[number - 1]
    # Lower teeth are shown 32..17 left to right, mirroring the upper row.
    return JAW_ROW_LABELS[32 - number]


def tooth_type(number: int) -> ToothType:
    return _TYPE_BY_LABEL[row_label(number)]


def to_fdi(number: int) -> int:
    if not TOOTH_MIN <= number <= TOOTH_MAX:
        raise ValueError(f"Tooth number out of range: {number}")
    return _FDI_ORDER[number - 1]


def from_fdi(fdi: int) -> int:
    try:
        return _FDI_ORDER.index(fdi) + 1
    except ValueError as exc:
        raise ValueError(f"Not a permanent FDI tooth number: {fdi}") from exc
