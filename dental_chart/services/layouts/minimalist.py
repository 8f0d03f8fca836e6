from __future__ import annotations

from typing import Any

from dental_chart.schemas.preference import DesignPreference
from dental_chart.schemas.view import ChartNode
from dental_chart.services.interaction import IntentKind, InteractionState
from dental_chart.services.layouts.base import LayoutStrategy, Placement, urgency
from dental_chart.services.tooth_numbering import QUADRANTS
from dental_chart.services.tooth_store import ToothRecordStore

CELL = 36.0
GAP = 6.0
MARGIN = 20.0
BLOCK_SPACING = 40.0
BLOCK_WIDTH = 4 * CELL + 3 * GAP
BLOCK_HEIGHT = 2 * CELL + GAP

PRIORITY_BY_URGENCY = {"urgent": "high", "attention": "medium", "healthy": "low"}
PRIORITY_RING = {"high": "#ef4444", "medium": "#f59e0b"}

# (quadrant id, block column, block row, two rows of four teeth as drawn)
QUADRANT_BLOCKS: tuple[tuple[int, int, int, tuple[tuple[int, ...], tuple[int, ...]]], ...] = (
    (2, 0, 0, ((16, 15, 14, 13), (12, 11, 10, 9))),
    (1, 1, 0, ((1, 2, 3, 4), (5, 6, 7, 8))),
    (3, 0, 1, ((24, 23, 22, 21), (20, 19, 18, 17))),
    (4, 1, 1, ((25, 26, 27, 28), (29, 30, 31, 32))),
)


def _block_origin(block_column: int, block_row: int) -> tuple[float, float]:
    return (
        MARGIN + block_column * (BLOCK_WIDTH + BLOCK_SPACING),
        MARGIN + block_row * (BLOCK_HEIGHT + BLOCK_SPACING),
    )


class MinimalistLayout(LayoutStrategy):
    """Four quadrant blocks around a crosshair."""

    design = DesignPreference.minimalist
    title = "Dental Chart"
    width = MARGIN * 2 + BLOCK_WIDTH * 2 + BLOCK_SPACING
    height = MARGIN * 2 + BLOCK_HEIGHT * 2 + BLOCK_SPACING
    actions = (IntentKind.add_treatment,)

    def placements(self) -> dict[int, Placement]:
        placements: dict[int, Placement] = {}
        for quadrant_id, block_column, block_row, rows in QUADRANT_BLOCKS:
            left, top = _block_origin(block_column, block_row)
            for row_index, row in enumerate(rows):
                for column, number in enumerate(row):
                    placements[number] = Placement(
                        x=left + CELL / 2 + column * (CELL + GAP),
                        y=top + CELL / 2 + row_index * (CELL + GAP),
                        width=CELL,
                        height=CELL,
                        row=row_index,
                        column=column,
                        group=f"quadrant-{quadrant_id}",
                    )
        return placements

    def build_nodes(
        self,
        store: ToothRecordStore,
        interaction: InteractionState,
        placements: dict[int, Placement],
        **options: Any,
    ) -> list[ChartNode]:
        selected_quadrant = interaction.selected_quadrant
        nodes: list[ChartNode] = [
            ChartNode(
                kind="crosshair",
                key="crosshair-vertical",
                x=self.width / 2,
                y=MARGIN,
                width=0.0,
                height=self.height - MARGIN * 2,
                stroke="#e5e7eb",
            ),
            ChartNode(
                kind="crosshair",
                key="crosshair-horizontal",
                x=MARGIN,
                y=self.height / 2,
                width=self.width - MARGIN * 2,
                height=0.0,
                stroke="#e5e7eb",
            ),
        ]
        quadrants = {quadrant.id: quadrant for quadrant in QUADRANTS}
        for quadrant_id, block_column, block_row, rows in QUADRANT_BLOCKS:
            quadrant = quadrants[quadrant_id]
            left, top = _block_origin(block_column, block_row)
            children: list[ChartNode] = []
            for row in rows:
                for number in row:
                    record = store.get(number)
                    placement = placements[number]
                    cell = self.tooth_node(record, placement, interaction)
                    priority = PRIORITY_BY_URGENCY[urgency(record)]
                    cell.attrs["priority"] = priority
                    if priority in PRIORITY_RING:
                        cell.children.append(
                            ChartNode(
                                kind="priority_ring",
                                key=f"tooth-{number}-priority",
                                tooth=number,
                                x=placement.x,
                                y=placement.y,
                                width=placement.width + 6,
                                height=placement.height + 6,
                                stroke=PRIORITY_RING[priority],
                                attrs={"priority": priority},
                            )
                        )
                    children.append(cell)
            nodes.append(
                ChartNode(
                    kind="quadrant",
                    key=quadrant.key,
                    x=left,
                    y=top,
                    width=BLOCK_WIDTH,
                    height=BLOCK_HEIGHT,
                    label=f"Q{quadrant.id}",
                    highlighted=selected_quadrant is not None and selected_quadrant.id == quadrant.id,
                    attrs={"name": quadrant.name},
                    children=children,
                )
            )
        return nodes
