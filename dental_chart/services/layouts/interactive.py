from __future__ import annotations

from collections import Counter
from typing import Any

from dental_chart.schemas.chart import GLYPH_SURFACES
from dental_chart.schemas.preference import DesignPreference
from dental_chart.schemas.view import ChartNode, DetailsPanel, DetailsTab
from dental_chart.services.interaction import InteractionState
from dental_chart.services.layouts.base import LayoutStrategy, Placement, surface_wedges, urgency
from dental_chart.services.surface_detail import to_clinical_view
from dental_chart.services.tooth_numbering import ALL_TEETH, LOWER_TEETH, UPPER_TEETH
from dental_chart.services.tooth_store import ToothRecordStore

TILE_WIDTH = 40.0
TILE_HEIGHT = 48.0
PITCH = 48.0
MARGIN = 20.0
UPPER_ARCH_Y = 70.0
LOWER_ARCH_Y = 230.0
# Per-column drop away from the midline, mirrored for the mandible.
ARCH_DROP = (24.0, 18.0, 12.0, 7.0, 3.0, 1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 3.0, 7.0, 12.0, 18.0, 24.0)

URGENCY_DOT = {"urgent": "#ef4444", "attention": "#f59e0b"}
URGENCY_TINT = {"healthy": "#f0fdf4", "attention": "#fefce8", "urgent": "#fef2f2"}


class InteractiveLayout(LayoutStrategy):
    design = DesignPreference.interactive
    title = "Interactive Digital Odontogram"
    width = MARGIN * 2 + 16 * PITCH
    height = 320.0

    def placements(self) -> dict[int, Placement]:
        placements: dict[int, Placement] = {}
        for column, number in enumerate(UPPER_TEETH):
            placements[number] = Placement(
                x=MARGIN + PITCH / 2 + column * PITCH,
                y=UPPER_ARCH_Y + ARCH_DROP[column],
                width=TILE_WIDTH,
                height=TILE_HEIGHT,
                row=0,
                column=column,
                group="upper_arch",
            )
        for column, number in enumerate(reversed(LOWER_TEETH)):
            placements[number] = Placement(
                x=MARGIN + PITCH / 2 + column * PITCH,
                y=LOWER_ARCH_Y - ARCH_DROP[column],
                width=TILE_WIDTH,
                height=TILE_HEIGHT,
                row=1,
                column=column,
                group="lower_arch",
            )
        return placements

    def build_nodes(
        self,
        store: ToothRecordStore,
        interaction: InteractionState,
        placements: dict[int, Placement],
        **options: Any,
    ) -> list[ChartNode]:
        detailed = options.get("density") == "detailed"
        nodes: list[ChartNode] = []
        for key, heading, teeth in (
            ("upper_arch", "Upper Arch", UPPER_TEETH),
            ("lower_arch", "Lower Arch", tuple(reversed(LOWER_TEETH))),
        ):
            tiles: list[ChartNode] = []
            for number in teeth:
                record = store.get(number)
                placement = placements[number]
                tile = self.tooth_node(record, placement, interaction)
                level = urgency(record)
                tile.attrs["urgency"] = level
                tile.attrs["urgency_tint"] = URGENCY_TINT[level]
                tile.attrs["density"] = "detailed" if detailed else "overview"
                if detailed:
                    tile.children.extend(surface_wedges(record, placement, opacity=0.7))
                if level in URGENCY_DOT:
                    tile.children.append(
                        ChartNode(
                            kind="urgency_dot",
                            key=f"tooth-{number}-urgency",
                            tooth=number,
                            x=placement.x + placement.width / 4,
                            y=placement.y - placement.height / 4,
                            width=10.0,
                            height=10.0,
                            fill=URGENCY_DOT[level],
                            attrs={"urgency": level},
                        )
                    )
                tiles.append(tile)
            nodes.append(ChartNode(kind="arch", key=key, label=heading, children=tiles))
        return nodes

    def build_panels(
        self, store: ToothRecordStore, interaction: InteractionState, **options: Any
    ) -> dict[str, Any]:
        counts = Counter(urgency(store.get(number)) for number in ALL_TEETH)
        return {
            "quick_stats": {
                "healthy": counts["healthy"],
                "attention": counts["attention"],
                "urgent": counts["urgent"],
            },
            "density": options.get("density") or "overview",
        }

    def details_panel(
        self, store: ToothRecordStore, interaction: InteractionState
    ) -> DetailsPanel | None:
        panel = super().details_panel(store, interaction)
        if panel is None:
            return None
        view = to_clinical_view(store.get(panel.tooth))
        panel.tabs = [
            DetailsTab(
                key="surfaces",
                title="Surfaces",
                items=[
                    {
                        "surface": surface.value,
                        "condition": view.surfaces[surface].condition.value,
                        "date": (
                            view.surfaces[surface].treatment.date.isoformat()
                            if view.surfaces[surface].treatment
                            else None
                        ),
                    }
                    for surface in GLYPH_SURFACES
                ],
            ),
            DetailsTab(
                key="history",
                title="History",
                items=[entry.model_dump(mode="json") for entry in view.treatments],
            ),
        ]
        return panel
