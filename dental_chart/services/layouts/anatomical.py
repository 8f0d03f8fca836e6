from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from dental_chart.core.settings import settings
from dental_chart.schemas.preference import DesignPreference
from dental_chart.schemas.view import ChartNode
from dental_chart.services.interaction import InteractionState
from dental_chart.services.layouts.base import LayoutStrategy, Placement
from dental_chart.services.tooth_store import ToothRecordStore

logger = logging.getLogger("dental_chart.layouts")

ARC_STEP_DEGREES = 22.5
TOOTH_WIDTH = 30.0
TOOTH_HEIGHT = 40.0
UPPER_CENTER = (400.0, 150.0)
LOWER_CENTER = (400.0, 400.0)
# Smallest radius at which neighbouring teeth on a ring do not overlap.
MIN_ARC_RADIUS = TOOTH_WIDTH / (2 * math.sin(math.radians(ARC_STEP_DEGREES / 2)))


@dataclass(frozen=True)
class ArcQuadrant:
    key: str
    jaw: str
    roman: str
    center: tuple[float, float]
    offset: float
    teeth: tuple[int, ...]
    label_at: tuple[float, float]


# Lower quadrants run from the back molar forward so each jaw closes into one ring.
ARC_QUADRANTS: tuple[ArcQuadrant, ...] = (
    ArcQuadrant("upper_right", "upper", "I", UPPER_CENTER, -90.0, tuple(range(1, 9)), (550.0, 30.0)),
    ArcQuadrant("upper_left", "upper", "II", UPPER_CENTER, 90.0, tuple(range(9, 17)), (200.0, 30.0)),
    ArcQuadrant("lower_right", "lower", "IV", LOWER_CENTER, 0.0, tuple(range(32, 24, -1)), (550.0, 580.0)),
    ArcQuadrant("lower_left", "lower", "III", LOWER_CENTER, 180.0, tuple(range(24, 16, -1)), (200.0, 580.0)),
)


def arc_angle(index: int, offset: float) -> float:
    return index * ARC_STEP_DEGREES + offset


def arc_offset(angle: float, radius: float) -> tuple[float, float]:
    radians = angle * math.pi / 180
    return math.cos(radians) * radius, math.sin(radians) * radius


class AnatomicalLayout(LayoutStrategy):
    """Two jaw rings; each quadrant fans its eight teeth in 22.5 degree steps."""

    design = DesignPreference.anatomical
    title = "Anatomical Digital Odontogram"
    width = 800.0
    height = 600.0

    def __init__(self, radius: float | None = None):
        radius = float(radius if radius is not None else settings.arc_radius)
        if radius < MIN_ARC_RADIUS:
            logger.warning(
                "Arc radius %s would overlap neighbouring teeth; using %.1f", radius, MIN_ARC_RADIUS
            )
            radius = MIN_ARC_RADIUS
        self.radius = radius

    def placements(self) -> dict[int, Placement]:
        placements: dict[int, Placement] = {}
        for quadrant in ARC_QUADRANTS:
            cx, cy = quadrant.center
            for index, number in enumerate(quadrant.teeth):
                angle = arc_angle(index, quadrant.offset)
                dx, dy = arc_offset(angle, self.radius)
                placements[number] = Placement(
                    x=cx + dx,
                    y=cy + dy,
                    width=TOOTH_WIDTH,
                    height=TOOTH_HEIGHT,
                    rotation=angle + 90,
                    label_rotation=-(angle + 90),
                    column=index,
                    group=quadrant.key,
                )
        return placements

    def angles(self) -> dict[int, float]:
        return {
            number: arc_angle(index, quadrant.offset)
            for quadrant in ARC_QUADRANTS
            for index, number in enumerate(quadrant.teeth)
        }

    def build_nodes(
        self,
        store: ToothRecordStore,
        interaction: InteractionState,
        placements: dict[int, Placement],
        **options: Any,
    ) -> list[ChartNode]:
        nodes: list[ChartNode] = []
        for jaw, center in (("upper", UPPER_CENTER), ("lower", LOWER_CENTER)):
            children = [
                self.tooth_node(store.get(number), placements[number], interaction)
                for quadrant in ARC_QUADRANTS
                if quadrant.jaw == jaw
                for number in quadrant.teeth
            ]
            nodes.append(
                ChartNode(
                    kind="arc",
                    key=f"{jaw}-arc",
                    x=center[0],
                    y=center[1],
                    width=self.radius * 2,
                    height=self.radius * 2,
                    attrs={"radius": self.radius},
                    children=children,
                )
            )
        for quadrant in ARC_QUADRANTS:
            nodes.append(
                ChartNode(
                    kind="quadrant_label",
                    key=f"{quadrant.key}-label",
                    x=quadrant.label_at[0],
                    y=quadrant.label_at[1],
                    label=f"Quadrant {quadrant.roman}",
                )
            )
        return nodes
