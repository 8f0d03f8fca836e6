import pytest

from dental_chart.schemas.chart import Condition
from dental_chart.services import taxonomy
from dental_chart.services.dispatcher import LAYOUT_STRATEGIES
from dental_chart.services.interaction import InteractionState
from dental_chart.services.tooth_store import ToothRecordStore


def test_legend_lists_every_condition_in_canonical_order():
    assert [entry.condition for entry in taxonomy.legend()] == [item.value for item in Condition]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("cavity", "#ef4444"),
        ("FILLED", "#3b82f6"),
        (" crown ", "#f59e0b"),
        (Condition.root_canal, "#8b5cf6"),
        ("watchful", "#f97316"),
    ],
)
def test_condition_style_accepts_enum_and_strings(value, expected):
    assert taxonomy.condition_style(value).color == expected


@pytest.mark.parametrize("value", [None, "", "chipped", 42])
def test_condition_style_unknown_degrades_to_healthy(value):
    assert taxonomy.condition_style(value) == taxonomy.HEALTHY_STYLE
    assert taxonomy.condition_style(value).label == "Healthy"


@pytest.mark.parametrize("condition", list(Condition))
def test_every_strategy_colours_a_condition_identically(condition: Condition):
    style = taxonomy.condition_style(condition)
    store = ToothRecordStore({9: {"condition": condition.value}})
    for strategy_cls in LAYOUT_STRATEGIES.values():
        node = strategy_cls().render(store, InteractionState()).tooth_nodes()[9]
        assert node.attrs["condition"] == condition.value
        assert node.attrs["color"] == style.color
        assert node.fill == style.tint
