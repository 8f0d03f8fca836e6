from __future__ import annotations

from typing import Any

from dental_chart.schemas.preference import DesignPreference
from dental_chart.schemas.view import ChartNode
from dental_chart.services.interaction import InteractionState
from dental_chart.services.layouts.base import LayoutStrategy, Placement
from dental_chart.services.tooth_numbering import LOWER_TEETH, UPPER_TEETH, row_label
from dental_chart.services.tooth_store import ToothRecordStore

CELL = 40.0
GAP = 4.0
MARGIN = 20.0
UPPER_ROW_Y = 60.0
LOWER_ROW_Y = 180.0
TYPE_LABEL_OFFSET = 34.0


def _column_x(column: int) -> float:
    return MARGIN + CELL / 2 + column * (CELL + GAP)


class TraditionalLayout(LayoutStrategy):
    """Linear grid: maxilla 1..16 on top, mandible 32..17 underneath."""

    design = DesignPreference.traditional
    title = "Traditional Digital Odontogram"
    width = MARGIN * 2 + 16 * CELL + 15 * GAP
    height = 250.0

    def placements(self) -> dict[int, Placement]:
        placements: dict[int, Placement] = {}
        for column, number in enumerate(UPPER_TEETH):
            placements[number] = Placement(
                x=_column_x(column), y=UPPER_ROW_Y, width=CELL, height=CELL,
                row=0, column=column, group="maxilla",
            )
        for column, number in enumerate(reversed(LOWER_TEETH)):
            placements[number] = Placement(
                x=_column_x(column), y=LOWER_ROW_Y, width=CELL, height=CELL,
                row=1, column=column, group="mandible",
            )
        return placements

    def build_nodes(
        self,
        store: ToothRecordStore,
        interaction: InteractionState,
        placements: dict[int, Placement],
        **options: Any,
    ) -> list[ChartNode]:
        nodes: list[ChartNode] = []
        rows = (
            ("maxilla", "Upper Jaw (Maxilla)", UPPER_ROW_Y, UPPER_TEETH),
            ("mandible", "Lower Jaw (Mandible)", LOWER_ROW_Y, tuple(reversed(LOWER_TEETH))),
        )
        for key, heading, row_y, teeth in rows:
            children: list[ChartNode] = []
            for number in teeth:
                record = store.get(number)
                cell = self.tooth_node(record, placements[number], interaction)
                if record.surface_tag:
                    cell.attrs["tag"] = record.surface_tag
                children.append(cell)
            for column, number in enumerate(teeth):
                children.append(
                    ChartNode(
                        kind="type_label",
                        key=f"{key}-type-{column}",
                        x=_column_x(column),
                        y=row_y + TYPE_LABEL_OFFSET,
                        label=row_label(number),
                    )
                )
            nodes.append(
                ChartNode(
                    kind="row",
                    key=key,
                    x=self.width / 2,
                    y=row_y - CELL,
                    label=heading,
                    children=children,
                )
            )
        return nodes
