from dental_chart.schemas.chart import TreatmentStatus
from dental_chart.services.interaction import InteractionState
from dental_chart.services.layouts.clinical import PLACEHOLDER, TREATMENT_CODES, ClinicalLayout
from dental_chart.services.layouts.interactive import InteractiveLayout
from dental_chart.services.layouts.minimalist import MinimalistLayout
from dental_chart.services.layouts.traditional import TraditionalLayout
from dental_chart.services.tooth_numbering import JAW_ROW_LABELS


def _children(view, number, kind):
    return [child for child in view.tooth_nodes()[number].children if child.kind == kind]


def test_traditional_rows_preserve_left_right_order():
    placements = TraditionalLayout().placements()
    upper = sorted((p.x, n) for n, p in placements.items() if p.row == 0)
    lower = sorted((p.x, n) for n, p in placements.items() if p.row == 1)
    assert [n for _, n in upper] == list(range(1, 17))
    assert [n for _, n in lower] == list(range(32, 16, -1))


def test_traditional_cells_show_surface_tag_and_type_labels(sample_store):
    view = TraditionalLayout().render(sample_store, InteractionState())
    assert view.tooth_nodes()[14].attrs["tag"] == "MO"
    assert "tag" not in view.tooth_nodes()[19].attrs
    maxilla = next(node for node in view.nodes if node.key == "maxilla")
    labels = [child.label for child in maxilla.children if child.kind == "type_label"]
    assert labels == list(JAW_ROW_LABELS)


def test_interactive_density_toggles_surface_wedges(sample_store):
    layout = InteractiveLayout()
    overview = layout.render(sample_store, InteractionState(), density="overview")
    detailed = layout.render(sample_store, InteractionState(), density="detailed")

    assert _children(overview, 14, "surface") == []
    wedges = {child.label: child.attrs["condition"] for child in _children(detailed, 14, "surface")}
    assert wedges == {"M": "cavity", "O": "cavity", "D": "healthy", "B": "healthy", "L": "healthy"}


def test_interactive_quick_stats_and_urgency_dot(sample_store):
    view = InteractiveLayout().render(sample_store, InteractionState())
    assert view.panels["quick_stats"] == {"healthy": 31, "attention": 0, "urgent": 1}
    assert [dot.fill for dot in _children(view, 14, "urgency_dot")] == ["#ef4444"]
    assert _children(view, 8, "urgency_dot") == []


def test_interactive_details_include_history_tab(sample_store):
    interaction = InteractionState()
    interaction.select(8)
    view = InteractiveLayout().render(sample_store, interaction)
    tabs = {tab.key: tab for tab in view.details.tabs}
    assert list(tabs) == ["surfaces", "history"]
    assert tabs["history"].items[0]["code"] == "D2161"


def test_minimalist_selection_highlights_quadrant_block(sample_store):
    interaction = InteractionState()
    interaction.select(3)
    view = MinimalistLayout().render(sample_store, interaction)
    highlighted = [node.key for node in view.nodes if node.kind == "quadrant" and node.highlighted]
    assert highlighted == ["upper_right"]
    assert view.details.actions == ["add_treatment"]


def test_minimalist_quadrant_blocks_sit_around_crosshair():
    placements = MinimalistLayout().placements()
    mid_x = MinimalistLayout.width / 2
    mid_y = MinimalistLayout.height / 2
    assert placements[16].x < mid_x and placements[16].y < mid_y
    assert placements[1].x > mid_x and placements[1].y < mid_y
    assert placements[17].x < mid_x and placements[17].y > mid_y
    assert placements[32].x > mid_x and placements[32].y > mid_y


def test_minimalist_priority_rings(sample_store):
    view = MinimalistLayout().render(sample_store, InteractionState())
    rings = _children(view, 14, "priority_ring")
    assert [ring.attrs["priority"] for ring in rings] == ["high"]
    assert view.tooth_nodes()[19].attrs["priority"] == "low"
    assert _children(view, 19, "priority_ring") == []


def test_clinical_placeholder_until_a_tooth_is_selected(sample_store):
    interaction = InteractionState()
    interaction.hover(14)
    view = ClinicalLayout().render(sample_store, interaction)
    assert view.details is None
    assert view.placeholder == PLACEHOLDER


def test_clinical_side_panel_tabs_for_selected_tooth(sample_store):
    interaction = InteractionState()
    interaction.select(14)
    view = ClinicalLayout().render(sample_store, interaction)
    assert view.placeholder is None
    assert [tab.key for tab in view.details.tabs] == ["surfaces", "treatments", "notes"]
    assert view.details.actions == ["add_treatment", "add_note"]
    notes = view.details.tabs[2].items
    assert notes[0] == {"note": "Large cavity requiring restoration"}


def test_clinical_badge_counts_outstanding_treatments(sample_store):
    layout = ClinicalLayout()
    view = layout.render(sample_store, InteractionState())
    assert [badge.label for badge in _children(view, 14, "badge")] == ["1"]
    assert _children(view, 8, "badge") == []

    sample_store.update_treatment_status(14, "D2150", TreatmentStatus.completed)
    view = layout.render(sample_store, InteractionState())
    assert _children(view, 14, "badge") == []


def test_clinical_treatment_code_reference_is_independent_of_selection(sample_store):
    view = ClinicalLayout().render(sample_store, InteractionState())
    codes = [item["code"] for item in view.panels["treatment_codes"]]
    assert codes == [code for code, _ in TREATMENT_CODES]


def test_clinical_view_modes(sample_store):
    layout = ClinicalLayout()
    perio = layout.render(sample_store, InteractionState(), clinical_view="periodontal")
    markers = _children(perio, 14, "periodontal")
    assert len(markers) == 1
    assert markers[0].label == "3"
    assert markers[0].attrs["plaque"] is True

    planning = layout.render(sample_store, InteractionState(), clinical_view="planning")
    planned = [n for n, node in planning.tooth_nodes().items() if node.attrs.get("planned")]
    assert planned == [14]
    assert planning.panels["view_mode"] == "planning"
