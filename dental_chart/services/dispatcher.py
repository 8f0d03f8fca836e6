from __future__ import annotations

import logging
from typing import Any

from dental_chart.schemas.chart import ChartRenderRequest
from dental_chart.schemas.preference import DEFAULT_DESIGN, DesignPreference
from dental_chart.schemas.view import ChartView
from dental_chart.services.interaction import ChartIntent, IntentKind, InteractionState, dispatch_intent
from dental_chart.services.layouts.anatomical import AnatomicalLayout
from dental_chart.services.layouts.base import LayoutStrategy
from dental_chart.services.layouts.clinical import ClinicalLayout
from dental_chart.services.layouts.interactive import InteractiveLayout
from dental_chart.services.layouts.minimalist import MinimalistLayout
from dental_chart.services.layouts.traditional import TraditionalLayout
from dental_chart.services.preferences import DesignPreferenceStore
from dental_chart.services.tooth_store import ToothRecordStore

logger = logging.getLogger("dental_chart.dispatcher")

LAYOUT_STRATEGIES: dict[DesignPreference, type[LayoutStrategy]] = {
    DesignPreference.traditional: TraditionalLayout,
    DesignPreference.anatomical: AnatomicalLayout,
    DesignPreference.interactive: InteractiveLayout,
    DesignPreference.minimalist: MinimalistLayout,
    DesignPreference.clinical: ClinicalLayout,
}


def resolve_design(preference) -> DesignPreference:
    if isinstance(preference, DesignPreference):
        return preference
    if preference is not None:
        try:
            return DesignPreference(str(preference).strip().lower())
        except ValueError:
            pass
    logger.warning("Unknown design preference %r; falling back to %s", preference, DEFAULT_DESIGN.value)
    return DEFAULT_DESIGN


def select(preference) -> LayoutStrategy:
    """Return the layout strategy for a design value; never raises."""
    return LAYOUT_STRATEGIES[resolve_design(preference)]()


class RenderingDispatcher:
    """Follows a design preference store and hands out the matching layout.

    While open, `active()` tracks the store's current value, whether it was
    written by this view or arrived from another one. After `close()` the last
    resolved layout is kept.
    """

    def __init__(self, preferences: DesignPreferenceStore):
        self.preferences = preferences
        self.last_switch: DesignPreference | None = None
        self._strategy = select(preferences.read())
        self._unsubscribe = preferences.subscribe(self._on_preference_changed)

    def active(self) -> LayoutStrategy:
        if self._unsubscribe is not None:
            self._follow(self.preferences.read())
        return self._strategy

    def render(
        self,
        store: ToothRecordStore,
        interaction: InteractionState,
        design: str | None = None,
        **options: Any,
    ) -> ChartView:
        strategy = select(design) if design is not None else self.active()
        return strategy.render(store, interaction, **options)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _follow(self, preference) -> None:
        design = resolve_design(preference)
        if design == self._strategy.design:
            return
        logger.info("Layout switched from %s to %s", self._strategy.design.value, design.value)
        self._strategy = select(design)
        self.last_switch = design

    def _on_preference_changed(self, design: DesignPreference) -> None:
        self._follow(design)


def render_request(dispatcher: RenderingDispatcher, request: ChartRenderRequest) -> ChartView:
    """Mount a chart from an inbound snapshot and replay the requested focus."""
    store = ToothRecordStore(request.teeth)
    interaction = InteractionState()
    if request.hovered is not None:
        dispatch_intent(ChartIntent(IntentKind.hover, request.hovered), interaction)
    if request.selected is not None:
        dispatch_intent(ChartIntent(IntentKind.select, request.selected), interaction)
    return dispatcher.render(
        store,
        interaction,
        design=request.design,
        density=request.density,
        clinical_view=request.clinical_view,
    )
