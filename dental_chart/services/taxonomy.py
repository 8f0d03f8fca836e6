from __future__ import annotations

from dataclasses import dataclass

from dental_chart.schemas.chart import Condition
from dental_chart.schemas.view import LegendEntry


@dataclass(frozen=True)
class ConditionStyle:
    condition: Condition
    label: str
    color: str
    tint: str
    border: str


_STYLES: dict[Condition, ConditionStyle] = {
    Condition.healthy: ConditionStyle(Condition.healthy, "Healthy", "#ffffff", "#ffffff", "#d1d5db"),
    Condition.cavity: ConditionStyle(Condition.cavity, "Cavity", "#ef4444", "#fee2e2", "#ef4444"),
    Condition.filled: ConditionStyle(Condition.filled, "Filled", "#3b82f6", "#dbeafe", "#3b82f6"),
    Condition.crown: ConditionStyle(Condition.crown, "Crown", "#f59e0b", "#fef3c7", "#f59e0b"),
    Condition.extracted: ConditionStyle(Condition.extracted, "Extracted", "#6b7280", "#f3f4f6", "#9ca3af"),
    Condition.root_canal: ConditionStyle(Condition.root_canal, "Root Canal", "#8b5cf6", "#f3e8ff", "#8b5cf6"),
    Condition.watchful: ConditionStyle(Condition.watchful, "Watchful", "#f97316", "#ffedd5", "#f97316"),
}

HEALTHY_STYLE = _STYLES[Condition.healthy]

# Conditions that apply to the tooth as a whole rather than to individual surfaces.
WHOLE_TOOTH_CONDITIONS = frozenset({Condition.crown, Condition.extracted, Condition.root_canal})


def normalize_condition(value) -> Condition | None:
    if isinstance(value, Condition):
        return value
    if value is None:
        return None
    label = str(value).strip().lower()
    try:
        return Condition(label)
    except ValueError:
        return None


def condition_style(value) -> ConditionStyle:
    condition = normalize_condition(value)
    if condition is None:
        return HEALTHY_STYLE
    return _STYLES.get(condition, HEALTHY_STYLE)


def legend() -> list[LegendEntry]:
    return [
        LegendEntry(
            condition=style.condition.value,
            label=style.label,
            color=style.color,
            tint=style.tint,
            border=style.border,
        )
        for style in _STYLES.values()
    ]
