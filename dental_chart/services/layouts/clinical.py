from __future__ import annotations

from typing import Any

from dental_chart.schemas.chart import GLYPH_SURFACES, ToothRecord, TreatmentStatus
from dental_chart.schemas.preference import DesignPreference
from dental_chart.schemas.view import ChartNode, DetailsPanel, DetailsTab
from dental_chart.services.interaction import IntentKind, InteractionState
from dental_chart.services.layouts.base import LayoutStrategy, Placement, surface_wedges
from dental_chart.services.surface_detail import to_clinical_view
from dental_chart.services.tooth_store import ToothRecordStore

CELL_WIDTH = 80.0
CELL_HEIGHT = 100.0
GAP = 10.0
MARGIN = 20.0
JAW_GAP = 30.0
DEEP_POCKET_MM = 4.0
PLACEHOLDER = "Select a tooth to view detailed information"

TREATMENT_CODES: tuple[tuple[str, str], ...] = (
    ("D0150", "Comprehensive oral evaluation"),
    ("D1110", "Prophylaxis - adult"),
    ("D2161", "Resin composite - one surface"),
    ("D2150", "Resin composite - two surfaces"),
    ("D2140", "Resin composite - three surfaces"),
    ("D2740", "Crown - porcelain/ceramic"),
    ("D3310", "Endodontic treatment"),
    ("D7140", "Extraction, erupted tooth"),
)

# (jaw, row index, teeth as drawn left to right)
CLINICAL_ROWS: tuple[tuple[str, int, tuple[int, ...]], ...] = (
    ("maxilla", 0, tuple(range(1, 9))),
    ("maxilla", 1, tuple(range(9, 17))),
    ("mandible", 2, tuple(range(32, 24, -1))),
    ("mandible", 3, tuple(range(24, 16, -1))),
)


def _row_top(row: int) -> float:
    top = MARGIN + row * (CELL_HEIGHT + GAP)
    if row >= 2:
        top += JAW_GAP
    return top


def _needs_planning(record: ToothRecord) -> bool:
    return any(
        entry.status in {TreatmentStatus.planned, TreatmentStatus.in_progress}
        for entry in record.treatments
    )


class ClinicalLayout(LayoutStrategy):
    design = DesignPreference.clinical
    title = "Detailed Clinical Odontogram"
    width = MARGIN * 2 + 8 * CELL_WIDTH + 7 * GAP
    height = MARGIN * 2 + 4 * CELL_HEIGHT + 3 * GAP + JAW_GAP
    actions = (IntentKind.add_treatment, IntentKind.add_note)

    def placements(self) -> dict[int, Placement]:
        placements: dict[int, Placement] = {}
        for jaw, row, teeth in CLINICAL_ROWS:
            top = _row_top(row)
            for column, number in enumerate(teeth):
                placements[number] = Placement(
                    x=MARGIN + CELL_WIDTH / 2 + column * (CELL_WIDTH + GAP),
                    y=top + CELL_HEIGHT / 2,
                    width=CELL_WIDTH,
                    height=CELL_HEIGHT,
                    row=row,
                    column=column,
                    group=jaw,
                )
        return placements

    def build_nodes(
        self,
        store: ToothRecordStore,
        interaction: InteractionState,
        placements: dict[int, Placement],
        **options: Any,
    ) -> list[ChartNode]:
        mode = options.get("clinical_view") or "treatments"
        nodes: list[ChartNode] = []
        for jaw, heading in (("maxilla", "Maxilla"), ("mandible", "Mandible")):
            children: list[ChartNode] = []
            for row_jaw, _, teeth in CLINICAL_ROWS:
                if row_jaw != jaw:
                    continue
                for number in teeth:
                    children.append(self._cell(store.get(number), placements[number], interaction, mode))
            nodes.append(ChartNode(kind="jaw", key=jaw, label=heading, children=children))
        return nodes

    def _cell(
        self,
        record: ToothRecord,
        placement: Placement,
        interaction: InteractionState,
        mode: str,
    ) -> ChartNode:
        cell = self.tooth_node(record, placement, interaction)
        cell.attrs["view_mode"] = mode
        cell.children.extend(surface_wedges(record, placement))

        outstanding = len(record.outstanding_treatments)
        cell.attrs["outstanding"] = outstanding
        if outstanding:
            cell.children.append(
                ChartNode(
                    kind="badge",
                    key=f"tooth-{record.number}-badge",
                    tooth=record.number,
                    x=placement.x + placement.width / 2,
                    y=placement.y - placement.height / 2,
                    width=20.0,
                    height=20.0,
                    fill="#ef4444",
                    label=str(outstanding),
                )
            )

        if mode == "periodontal" and record.periodontal is not None:
            perio = record.periodontal
            deepest = perio.deepest_pocket
            cell.children.append(
                ChartNode(
                    kind="periodontal",
                    key=f"tooth-{record.number}-perio",
                    tooth=record.number,
                    x=placement.x,
                    y=placement.y + placement.height / 2,
                    label=f"{deepest:g}" if deepest is not None else None,
                    highlighted=perio.bleeding or (deepest is not None and deepest >= DEEP_POCKET_MM),
                    attrs={
                        "probing_depths": dict(perio.probing_depths),
                        "bleeding": perio.bleeding,
                        "plaque": perio.plaque,
                        "mobility": perio.mobility,
                    },
                )
            )
        elif mode == "planning":
            planned = _needs_planning(record)
            cell.attrs["planned"] = planned
            if planned:
                cell.children.append(
                    ChartNode(
                        kind="plan_marker",
                        key=f"tooth-{record.number}-plan",
                        tooth=record.number,
                        x=placement.x,
                        y=placement.y,
                        width=placement.width + 4,
                        height=placement.height + 4,
                        stroke="#2563eb",
                        highlighted=True,
                        attrs={
                            "codes": [
                                entry.code for entry in record.treatments
                                if entry.status != TreatmentStatus.completed
                            ]
                        },
                    )
                )
        return cell

    def build_panels(
        self, store: ToothRecordStore, interaction: InteractionState, **options: Any
    ) -> dict[str, Any]:
        return {
            "view_mode": options.get("clinical_view") or "treatments",
            "treatment_codes": [
                {"code": code, "description": description} for code, description in TREATMENT_CODES
            ],
        }

    def placeholder(self, interaction: InteractionState) -> str | None:
        if interaction.selected_tooth is None:
            return PLACEHOLDER
        return None

    def details_panel(
        self, store: ToothRecordStore, interaction: InteractionState
    ) -> DetailsPanel | None:
        # Only the selected tooth opens the side panel; hover alone does not.
        if interaction.selected_tooth is None:
            return None
        panel = super().details_panel(store, interaction)
        view = to_clinical_view(store.get(interaction.selected_tooth))
        panel.tabs = [
            DetailsTab(
                key="surfaces",
                title="Surfaces",
                items=[
                    {
                        "surface": surface.value,
                        "condition": view.surfaces[surface].condition.value,
                        "treatment": (
                            view.surfaces[surface].treatment.code
                            if view.surfaces[surface].treatment
                            else None
                        ),
                    }
                    for surface in GLYPH_SURFACES
                ],
            ),
            DetailsTab(
                key="treatments",
                title="Treatments",
                items=[entry.model_dump(mode="json") for entry in view.treatments],
            ),
            DetailsTab(
                key="notes",
                title="Notes",
                items=[{"note": note} for note in view.notes],
            ),
        ]
        return panel
