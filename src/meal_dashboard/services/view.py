"""Dashboard view bindings keyed by device id and meal period."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from meal_dashboard.domain.meals import MealPeriod

SUBMIT_LABEL = "Add"
SUBMIT_BUSY_LABEL = "..."


def device_count_key(device: str, period: MealPeriod) -> str:
    return f"device-count:{device}:{period}"


def meal_total_key(period: MealPeriod) -> str:
    return f"meal-total:{period}"


def timestamp_key(period: MealPeriod) -> str:
    return f"timestamp:{period}"


def total_key(period: MealPeriod) -> str:
    return f"total:{period}"


GRAND_TOTAL_KEY = "grand-total"


def manual_input_key(device: str, period: MealPeriod) -> str:
    return f"manual-input:{device}:{period}"


def submit_button_key(device: str, period: MealPeriod) -> str:
    return f"submit-button:{device}:{period}"


def card_key(period: MealPeriod) -> str:
    return f"card:{period}"


def default_binding_keys(devices: Iterable[str]) -> list[str]:
    """Return every selector key a full dashboard page exposes."""
    device_list = list(devices)
    keys: list[str] = []
    for period in MealPeriod:
        keys.append(card_key(period))
        for device in device_list:
            keys.append(device_count_key(device, period))
            keys.append(manual_input_key(device, period))
            keys.append(submit_button_key(device, period))
        keys.append(meal_total_key(period))
        keys.append(timestamp_key(period))
        keys.append(total_key(period))
    keys.append(GRAND_TOTAL_KEY)
    return keys


class TextSink(Protocol):
    """Writable text target."""

    def write(self, text: str) -> None:
        """Replace the visible text."""


@dataclass
class TextBinding(TextSink):
    """Plain text node."""

    value: str = ""

    def write(self, text: str) -> None:
        self.value = text


@dataclass
class InputBinding(TextSink):
    """Manual-entry input mirroring the stored override."""

    value: str = ""

    def write(self, text: str) -> None:
        self.value = text

    def clear(self) -> None:
        self.value = ""


@dataclass
class ButtonBinding(TextSink):
    """Submit control with a label and disabled state."""

    value: str = SUBMIT_LABEL
    disabled: bool = False

    def write(self, text: str) -> None:
        self.value = text

    def disable(self) -> None:
        self.disabled = True
        self.value = SUBMIT_BUSY_LABEL

    def enable(self) -> None:
        self.disabled = False
        self.value = SUBMIT_LABEL


@dataclass
class CardBinding(TextSink):
    """Meal card container; its text is unused."""

    period: MealPeriod
    inactive: bool = False

    def write(self, text: str) -> None:
        return None


class View(Protocol):
    """Page abstraction consumed by the dashboard service."""

    def bind(self, key: str) -> TextSink | None:
        """Return the sink for a selector key, or None if absent."""

    def reorder_cards(self, order: list[MealPeriod]) -> None:
        """Arrange meal cards in the given order."""

    def highlight(self, active: MealPeriod | None) -> None:
        """Mark the active period's rows and de-emphasize the other cards."""


@dataclass
class DashboardView(View):
    """In-memory page model rendered by the HTTP layer."""

    bindings: dict[str, TextSink] = field(default_factory=dict)
    card_order: list[MealPeriod] = field(default_factory=lambda: list(MealPeriod))
    active_rows: MealPeriod | None = None

    @classmethod
    def from_keys(cls, keys: Iterable[str]) -> "DashboardView":
        """Build a view exposing only the given selector keys."""
        bindings: dict[str, TextSink] = {}
        for key in keys:
            kind = key.split(":", 1)[0]
            if kind == "manual-input":
                bindings[key] = InputBinding()
            elif kind == "submit-button":
                bindings[key] = ButtonBinding()
            elif kind == "card":
                bindings[key] = CardBinding(period=MealPeriod(key.split(":", 1)[1]))
            else:
                bindings[key] = TextBinding()
        view = cls(bindings=bindings)
        view.card_order = [
            period for period in MealPeriod if card_key(period) in bindings
        ]
        return view

    def bind(self, key: str) -> TextSink | None:
        return self.bindings.get(key)

    def reorder_cards(self, order: list[MealPeriod]) -> None:
        self.card_order = [
            period for period in order if card_key(period) in self.bindings
        ]

    def highlight(self, active: MealPeriod | None) -> None:
        self.active_rows = active
        for period in MealPeriod:
            card = self.bindings.get(card_key(period))
            if isinstance(card, CardBinding):
                card.inactive = active is not None and period != active

    def snapshot(self) -> dict[str, object]:
        """Return the page state as plain data."""
        text: dict[str, str] = {}
        inputs: dict[str, dict[str, object]] = {}
        buttons: dict[str, dict[str, object]] = {}
        for key, binding in self.bindings.items():
            if isinstance(binding, InputBinding):
                inputs[key] = {"value": binding.value}
            elif isinstance(binding, ButtonBinding):
                buttons[key] = {"label": binding.value, "disabled": binding.disabled}
            elif isinstance(binding, TextBinding):
                text[key] = binding.value
        cards = []
        for period in self.card_order:
            card = self.bindings.get(card_key(period))
            cards.append(
                {
                    "period": str(period),
                    "inactive": isinstance(card, CardBinding) and card.inactive,
                }
            )
        return {
            "text": text,
            "inputs": inputs,
            "buttons": buttons,
            "cards": cards,
            "active_period": str(self.active_rows) if self.active_rows else None,
        }
