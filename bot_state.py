# Filename: bot_state.py

from dataclasses import dataclass, field
from typing import Dict, Optional

from models import FilterConfig, TokenInfo
from rate_limit import DedupCursor, RateWindow


@dataclass
class BotState:
    """
    Shared runtime state. Created once in main and handed to every component.
    All access happens on the event loop thread, so plain assignments are atomic.
    """
    filters: FilterConfig = field(default_factory=FilterConfig)
    chat_states: Dict[int, str] = field(default_factory=dict)  # chat_id -> field being edited
    dedup: DedupCursor = field(default_factory=DedupCursor)
    rate_window: RateWindow = field(default_factory=RateWindow)
    last_token: Optional[TokenInfo] = None

    @classmethod
    def from_config(cls, config: dict) -> "BotState":
        return cls(
            rate_window=RateWindow(
                cap=config.get("ALERT_RATE_CAP", 5),
                window_seconds=config.get("RATE_WINDOW_SECONDS", 60),
            )
        )
