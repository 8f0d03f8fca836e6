from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from dental_chart.schemas.chart import GLYPH_SURFACES, Condition, ToothRecord, TreatmentStatus
from dental_chart.schemas.preference import DesignPreference
from dental_chart.schemas.view import ChartNode, ChartView, DetailsPanel
from dental_chart.services import taxonomy
from dental_chart.services.interaction import (
    ChartIntent,
    ChartIntentHandler,
    IntentKind,
    InteractionState,
    dispatch_intent,
)
from dental_chart.services.surface_detail import to_clinical_view
from dental_chart.services.tooth_numbering import ALL_TEETH, to_fdi, tooth_type
from dental_chart.services.tooth_store import ToothRecordStore

logger = logging.getLogger("dental_chart.layouts")

SELECTED_STROKE = "#3b82f6"
HOVER_STROKE = "#6b7280"
HEALTHY_SUMMARY = "Healthy tooth"

# Five-surface glyph wedges in a unit box (top-left origin).
_WEDGES: dict[str, tuple[tuple[float, float], ...]] = {
    "M": ((0.0, 0.0), (0.25, 0.3), (0.25, 0.7), (0.0, 1.0)),
    "O": ((0.0, 0.0), (1.0, 0.0), (0.75, 0.3), (0.25, 0.3)),
    "D": ((1.0, 0.0), (1.0, 1.0), (0.75, 0.7), (0.75, 0.3)),
    "B": ((0.25, 0.3), (0.75, 0.3), (0.75, 0.7), (0.25, 0.7)),
    "L": ((0.0, 1.0), (0.25, 0.7), (0.75, 0.7), (1.0, 1.0)),
}


@dataclass(frozen=True)
class Placement:
    """Centre point and footprint of one tooth inside a layout's canvas."""

    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0
    label_rotation: float = 0.0
    row: int | None = None
    column: int | None = None
    group: str | None = None


def urgency(record: ToothRecord) -> str:
    if record.condition == Condition.cavity:
        return "urgent"
    if record.condition == Condition.watchful:
        return "attention"
    if any(
        entry.status in {TreatmentStatus.planned, TreatmentStatus.in_progress}
        for entry in record.treatments
    ):
        return "attention"
    return "healthy"


def surface_wedges(record: ToothRecord, placement: Placement, *, opacity: float = 0.8) -> list[ChartNode]:
    view = to_clinical_view(record)
    left = placement.x - placement.width / 2
    top = placement.y - placement.height / 2
    nodes: list[ChartNode] = []
    for surface in GLYPH_SURFACES:
        detail = view.surfaces[surface]
        style = taxonomy.condition_style(detail.condition)
        points = [
            (round(left + px * placement.width, 2), round(top + py * placement.height, 2))
            for px, py in _WEDGES[surface.value]
        ]
        nodes.append(
            ChartNode(
                kind="surface",
                key=f"tooth-{record.number}-{surface.value}",
                tooth=record.number,
                x=placement.x,
                y=placement.y,
                fill=style.color,
                stroke="#ffffff",
                label=surface.value,
                attrs={
                    "surface": surface.value,
                    "condition": detail.condition.value,
                    "points": points,
                    "opacity": opacity,
                    "treatment": detail.treatment.code if detail.treatment else None,
                },
            )
        )
    return nodes


class LayoutStrategy(ABC):
    design: ClassVar[DesignPreference]
    title: ClassVar[str]
    width: ClassVar[float]
    height: ClassVar[float]
    actions: ClassVar[tuple[IntentKind, ...]] = (IntentKind.add_treatment, IntentKind.view_history)

    @abstractmethod
    def placements(self) -> dict[int, Placement]:
        """Return one placement per tooth number 1..32."""

    def render(
        self,
        store: ToothRecordStore,
        interaction: InteractionState,
        **options: Any,
    ) -> ChartView:
        placements = self.placements()
        nodes = self.build_nodes(store, interaction, placements, **options)
        details = self.details_panel(store, interaction)
        return ChartView(
            design=self.design.value,
            title=self.title,
            width=self.width,
            height=self.height,
            nodes=nodes,
            legend=taxonomy.legend(),
            details=details,
            placeholder=self.placeholder(interaction),
            panels=self.build_panels(store, interaction, **options),
        )

    def build_nodes(
        self,
        store: ToothRecordStore,
        interaction: InteractionState,
        placements: dict[int, Placement],
        **options: Any,
    ) -> list[ChartNode]:
        return [
            self.tooth_node(store.get(number), placements[number], interaction)
            for number in ALL_TEETH
        ]

    def build_panels(
        self, store: ToothRecordStore, interaction: InteractionState, **options: Any
    ) -> dict[str, Any]:
        return {}

    def placeholder(self, interaction: InteractionState) -> str | None:
        return None

    def stroke_for(self, record: ToothRecord, interaction: InteractionState) -> str:
        if interaction.selected_tooth == record.number:
            return SELECTED_STROKE
        if interaction.hovered_tooth == record.number:
            return HOVER_STROKE
        return taxonomy.condition_style(record.condition).border

    def tooth_node(
        self,
        record: ToothRecord,
        placement: Placement,
        interaction: InteractionState,
        *,
        kind: str = "tooth",
    ) -> ChartNode:
        style = taxonomy.condition_style(record.condition)
        return ChartNode(
            kind=kind,
            key=f"tooth-{record.number}",
            tooth=record.number,
            x=placement.x,
            y=placement.y,
            width=placement.width,
            height=placement.height,
            rotation=placement.rotation,
            fill=style.tint,
            stroke=self.stroke_for(record, interaction),
            label=str(record.number),
            label_rotation=placement.label_rotation,
            highlighted=interaction.selected_tooth == record.number,
            attrs={
                "condition": record.condition.value,
                "condition_label": style.label,
                "color": style.color,
                "surface_tag": record.surface_tag,
                "tooth_type": tooth_type(record.number),
                "fdi": to_fdi(record.number),
                "hovered": interaction.hovered_tooth == record.number,
                "row": placement.row,
                "column": placement.column,
                "group": placement.group,
            },
        )

    def details_panel(
        self, store: ToothRecordStore, interaction: InteractionState
    ) -> DetailsPanel | None:
        number = interaction.focus_tooth
        if number is None:
            return None
        record = store.get(number)
        style = taxonomy.condition_style(record.condition)
        if not store.has_record(number) or record.is_default():
            summary = HEALTHY_SUMMARY
        elif record.surfaces:
            summary = f"{style.label} ({', '.join(s.value for s in record.surfaces)})"
        else:
            summary = style.label
        selected = interaction.selected_tooth == number
        return DetailsPanel(
            tooth=number,
            title=f"Tooth #{number}",
            condition=record.condition.value,
            condition_label=style.label,
            color=style.color,
            summary=summary,
            surfaces=[surface.value for surface in record.surfaces],
            selected=selected,
            actions=[action.value for action in self.actions] if selected else [],
        )

    def emit(
        self,
        intent: ChartIntent,
        interaction: InteractionState,
        handler: ChartIntentHandler | None = None,
    ) -> bool:
        return dispatch_intent(intent, interaction, handler)
