"""Keyboard shortcut table mapping key combos to intents."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .intents import Intent, ResetZoom, SaveFile, ZoomIn, ZoomOut

_MODIFIER_ALIASES = {
    "control": "ctrl",
    "ctl": "ctrl",
    "command": "cmd",
    "super": "cmd",
    "meta": "cmd",
    "option": "alt",
}


def normalize_key_combo(combo: str) -> str:
    """Lowercase ``combo`` and sort its modifiers, e.g. ``Shift+Ctrl+S`` -> ``ctrl+shift+s``."""
    text = combo.strip().lower()
    if text.endswith("++"):
        key = "+"
        modifier_text = text[:-2]
    elif "+" in text and text != "+":
        modifier_text, key = text.rsplit("+", 1)
    else:
        return text
    modifiers = {
        _MODIFIER_ALIASES.get(token.strip(), token.strip())
        for token in modifier_text.split("+")
        if token.strip()
    }
    return "+".join([*sorted(modifiers), key])


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key combos to a single intent factory."""

    combos: tuple[str, ...]
    intent: Callable[[], Intent]


class KeyComboRegistry:
    """Small key-dispatch table over normalized combos."""

    def __init__(self) -> None:
        self._bindings: dict[str, Callable[[], Intent]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing entries for the same combos."""
        for combo in binding.combos:
            self._bindings[normalize_key_combo(combo)] = binding.intent
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def intent_for(self, combo: str) -> Intent | None:
        """Return the intent bound to ``combo`` or ``None``."""
        factory = self._bindings.get(normalize_key_combo(combo))
        if factory is None:
            return None
        return factory()


def _command_combos(*keys: str) -> tuple[str, ...]:
    """Expand keys for both the ctrl and cmd "command" modifiers."""
    return tuple(f"{modifier}+{key}" for key in keys for modifier in ("ctrl", "cmd"))


def build_shortcut_registry(zoom_enabled: bool = False) -> KeyComboRegistry:
    registry = KeyComboRegistry()
    registry.register_binding(KeyComboBinding(_command_combos("s"), SaveFile))
    if zoom_enabled:
        registry.register_bindings(
            KeyComboBinding(_command_combos("+", "=", "shift+="), ZoomIn),
            KeyComboBinding(_command_combos("-", "_", "shift+-"), ZoomOut),
            KeyComboBinding(_command_combos("0", ")", "shift+0"), ResetZoom),
        )
    return registry


__all__ = [
    "normalize_key_combo",
    "KeyComboBinding",
    "KeyComboRegistry",
    "build_shortcut_registry",
]
