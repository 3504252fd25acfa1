# Filename: filter_editor.py

import logging
import math
import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from bot_state import BotState

logger = logging.getLogger("FilterEditor")

COMMAND_PREFIX = "/"


@dataclass(frozen=True)
class EditableField:
    key: str          # callback suffix and ChatEditState value
    attr: str         # FilterConfig attribute
    label: str
    is_range: bool
    example: str = ""


EDITABLE_FIELDS: Dict[str, EditableField] = {
    f.key: f for f in (
        EditableField("liquidity", "liquidity", "Liquidity", True, "4000-25000"),
        EditableField("poolsupply", "pool_supply", "Pool Supply", True, "60-95"),
        EditableField("devholding", "dev_holding", "Dev Holding", True, "2-10"),
        EditableField("launchprice", "launch_price", "Launch Price", True, "0.0000000022-0.0000000058"),
        EditableField("mintauth", "mint_auth_revoked", "Mint Auth Revoked", False),
        EditableField("freezeauth", "freeze_auth_revoked", "Freeze Auth Revoked", False),
    )
}


@dataclass(frozen=True)
class EditOutcome:
    accepted: bool
    message: str


def parse_range(text: str) -> Optional[Tuple[float, float]]:
    """Parses "min-max" or "min max". None when the text is not two finite numbers."""
    text = text.strip()
    parts = text.split("-") if "-" in text else re.split(r"\s+", text)
    if len(parts) != 2:
        return None
    try:
        low, high = float(parts[0].strip()), float(parts[1].strip())
    except ValueError:
        return None
    if not (math.isfinite(low) and math.isfinite(high)):
        return None
    return low, high


def parse_yes_no(text: str) -> Optional[bool]:
    value = text.strip().lower()
    if value == "yes":
        return True
    if value == "no":
        return False
    return None


class FilterEditSession:
    """
    Per-chat edit flow: Idle -> AwaitingValue(field) -> Idle.
    Invalid input keeps the chat waiting so the operator can resend.
    """

    def __init__(self, state: BotState):
        self.state = state

    def start_edit(self, chat_id: int, key: str) -> EditableField:
        editable = EDITABLE_FIELDS[key]
        self.state.chat_states[chat_id] = key
        return editable

    def prompt_for(self, key: str) -> str:
        editable = EDITABLE_FIELDS[key]
        if editable.is_range:
            low, high = editable.example.split("-")
            return (f"✏️ Edit {editable.label}\n"
                    f"Please send the new range (e.g., \"{low}-{high}\" or \"{low} {high}\")")
        return f"✏️ Edit {editable.label}\nSend \"Yes\" or \"No\""

    def pending_field(self, chat_id: int) -> Optional[str]:
        return self.state.chat_states.get(chat_id)

    def cancel(self, chat_id: int):
        self.state.chat_states.pop(chat_id, None)

    def handle_text(self, chat_id: int, text: Optional[str]) -> Optional[EditOutcome]:
        """
        Applies a plain-text reply to the field the chat is editing.

        Returns:
            None when the message is not for this flow (command, or chat is idle)
        """
        if not text or text.startswith(COMMAND_PREFIX):
            return None

        key = self.state.chat_states.get(chat_id)
        if key is None:
            return None

        editable = EDITABLE_FIELDS[key]
        if editable.is_range:
            outcome = self._apply_range(editable, text)
        else:
            outcome = self._apply_flag(editable, text)

        if outcome.accepted:
            del self.state.chat_states[chat_id]
            logger.info(f"[EDIT] chat {chat_id} set {editable.attr}: {outcome.message}")
        return outcome

    def _apply_range(self, editable: EditableField, text: str) -> EditOutcome:
        parsed = parse_range(text)
        if parsed is None or parsed[0] > parsed[1]:
            low, high = editable.example.split("-")
            return EditOutcome(False, f"Invalid range. Please send a valid range (e.g., \"{low}-{high}\" or \"{low} {high}\").")

        low, high = parsed
        self.state.filters.set_range(editable.attr, low, high)
        return EditOutcome(True, f"✅ {editable.label} updated to {getattr(self.state.filters, editable.attr)}!")

    def _apply_flag(self, editable: EditableField, text: str) -> EditOutcome:
        value = parse_yes_no(text)
        if value is None:
            return EditOutcome(False, "Invalid input. Please send \"Yes\" or \"No\".")

        self.state.filters.set_flag(editable.attr, value)
        return EditOutcome(True, f"✅ {editable.label} updated to {'Yes' if value else 'No'}!")
