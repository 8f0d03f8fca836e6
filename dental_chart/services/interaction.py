from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Protocol

from dental_chart.schemas.chart import is_valid_tooth_number
from dental_chart.services.tooth_numbering import Quadrant, quadrant_for

logger = logging.getLogger("dental_chart.interaction")


class IntentKind(str, enum.Enum):
    hover = "hover"
    leave = "leave"
    select = "select"
    add_treatment = "add_treatment"
    view_history = "view_history"
    add_note = "add_note"


@dataclass(frozen=True)
class ChartIntent:
    kind: IntentKind
    tooth: int


class ChartIntentHandler(Protocol):
    def on_tooth_selected(self, number: int) -> None: ...

    def on_add_treatment_requested(self, number: int) -> None: ...

    def on_view_history_requested(self, number: int) -> None: ...

    def on_add_note_requested(self, number: int) -> None: ...


class LoggingIntentHandler:
    """Default outbound handler when no persistence collaborator is attached."""

    def on_tooth_selected(self, number: int) -> None:
        logger.debug("Tooth %s selected", number)

    def on_add_treatment_requested(self, number: int) -> None:
        logger.debug("Add treatment requested for tooth %s", number)

    def on_view_history_requested(self, number: int) -> None:
        logger.debug("History requested for tooth %s", number)

    def on_add_note_requested(self, number: int) -> None:
        logger.debug("Add note requested for tooth %s", number)


@dataclass
class InteractionState:
    hovered_tooth: int | None = None
    selected_tooth: int | None = None

    @property
    def focus_tooth(self) -> int | None:
        if self.selected_tooth is not None:
            return self.selected_tooth
        return self.hovered_tooth

    @property
    def selected_quadrant(self) -> Quadrant | None:
        if self.selected_tooth is None:
            return None
        return quadrant_for(self.selected_tooth)

    def hover(self, number: int) -> bool:
        changed = self.hovered_tooth != number
        self.hovered_tooth = number
        return changed

    def leave(self, number: int) -> bool:
        if self.hovered_tooth != number:
            return False
        self.hovered_tooth = None
        return True

    def select(self, number: int) -> bool:
        if self.selected_tooth == number:
            return False
        self.selected_tooth = number
        return True

    def clear(self) -> None:
        self.hovered_tooth = None
        self.selected_tooth = None


def dispatch_intent(
    intent: ChartIntent,
    state: InteractionState,
    handler: ChartIntentHandler | None = None,
) -> bool:
    """Apply an intent to the interaction state and forward outbound intents.

    Returns True when the state changed or an outbound intent was delivered.
    """
    if not is_valid_tooth_number(intent.tooth):
        logger.warning("Ignoring %s intent for out-of-range tooth %r", intent.kind.value, intent.tooth)
        return False
    handler = handler or LoggingIntentHandler()

    if intent.kind == IntentKind.hover:
        return state.hover(intent.tooth)
    if intent.kind == IntentKind.leave:
        return state.leave(intent.tooth)
    if intent.kind == IntentKind.select:
        if not state.select(intent.tooth):
            return False
        handler.on_tooth_selected(intent.tooth)
        return True
    if intent.kind == IntentKind.add_treatment:
        handler.on_add_treatment_requested(intent.tooth)
    elif intent.kind == IntentKind.view_history:
        handler.on_view_history_requested(intent.tooth)
    elif intent.kind == IntentKind.add_note:
        handler.on_add_note_requested(intent.tooth)
    return True
