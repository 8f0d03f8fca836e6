import pytest

from dental_chart.schemas.chart import Condition
from dental_chart.services.dispatcher import LAYOUT_STRATEGIES
from dental_chart.services.interaction import InteractionState
from dental_chart.services.layouts.base import HEALTHY_SUMMARY
from dental_chart.services.tooth_store import ToothRecordStore

STRATEGIES = list(LAYOUT_STRATEGIES.values())


@pytest.mark.parametrize("strategy_cls", STRATEGIES, ids=lambda cls: cls.design.value)
def test_every_tooth_gets_one_distinct_position(strategy_cls):
    placements = strategy_cls().placements()
    assert sorted(placements) == list(range(1, 33))
    positions = {(round(p.x, 3), round(p.y, 3)) for p in placements.values()}
    assert len(positions) == 32


@pytest.mark.parametrize("strategy_cls", STRATEGIES, ids=lambda cls: cls.design.value)
def test_empty_chart_renders_all_teeth_healthy(strategy_cls):
    interaction = InteractionState()
    interaction.select(5)

    view = strategy_cls().render(ToothRecordStore(), interaction)

    nodes = view.tooth_nodes()
    assert sorted(nodes) == list(range(1, 33))
    assert {node.attrs["condition"] for node in nodes.values()} == {Condition.healthy.value}
    assert view.details.tooth == 5
    assert view.details.summary == HEALTHY_SUMMARY
    assert view.details.selected is True


@pytest.mark.parametrize("strategy_cls", STRATEGIES, ids=lambda cls: cls.design.value)
def test_cavity_record_shows_colour_and_ordered_surfaces(strategy_cls):
    store = ToothRecordStore({14: {"number": 14, "condition": "cavity", "surfaces": ["M", "O"]}})
    interaction = InteractionState()
    interaction.select(14)

    view = strategy_cls().render(store, interaction)

    node = view.tooth_nodes()[14]
    assert node.attrs["color"] == "#ef4444"
    assert node.highlighted is True
    assert view.details.surfaces == ["M", "O"]
    assert view.details.condition_label == "Cavity"


@pytest.mark.parametrize("strategy_cls", STRATEGIES, ids=lambda cls: cls.design.value)
def test_actions_are_offered_only_for_the_selected_tooth(strategy_cls):
    strategy = strategy_cls()
    interaction = InteractionState()
    interaction.hover(3)

    hovered = strategy.render(ToothRecordStore(), interaction)
    if hovered.details is not None:
        assert hovered.details.actions == []

    interaction.select(3)
    selected = strategy.render(ToothRecordStore(), interaction)
    assert selected.details.actions
    assert "add_treatment" in selected.details.actions


@pytest.mark.parametrize("strategy_cls", STRATEGIES, ids=lambda cls: cls.design.value)
def test_legend_is_shared_by_every_strategy(strategy_cls):
    view = strategy_cls().render(ToothRecordStore(), InteractionState())
    assert [entry.condition for entry in view.legend] == [item.value for item in Condition]
