from typing import Any, Dict, List, Optional

import pytest

from bot_state import BotState
from models import MintState, TokenInfo

PROGRAM_ID = "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P"
MINT_A = "7GCihgDB8fe6KNjn2MYtkzZcRjQy3t9GHdC8uHYmW2hr"
MINT_B = "So11111111111111111111111111111111111111112"
MINT_C = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


class FakeResponse:
    def __init__(self, status: int = 200, json_data: Any = None, text: str = ""):
        self.status = status
        self._json = json_data
        self._text = text

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def json(self, content_type: Optional[str] = "application/json"):
        return self._json

    async def text(self):
        return self._text


class FakeSession:
    """Stands in for aiohttp.ClientSession: hands out queued responses in order."""

    def __init__(self, responses: Optional[List[Any]] = None):
        self.responses = list(responses or [])
        self.calls: List[Dict[str, Any]] = []

    def _next(self, method: str, url: str, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url, **kwargs):
        return self._next("POST", url, **kwargs)

    def get(self, url, **kwargs):
        return self._next("GET", url, **kwargs)


class FakeChain:
    def __init__(self, states: Optional[Dict[str, Any]] = None, default: Any = None):
        self.states = states or {}
        self.default = default if default is not None else MintState(supply=1_000_000_000_000_000, decimals=6)
        self.calls: List[str] = []

    async def get_mint_state(self, address: str) -> MintState:
        self.calls.append(address)
        state = self.states.get(address, self.default)
        if isinstance(state, Exception):
            raise state
        return state


class FakeNotifier:
    def __init__(self):
        self.messages: List[Dict[str, Any]] = []
        self.answered: List[str] = []
        self.edited: List[Dict[str, Any]] = []
        self.chat_id = "alerts"

    async def send_message(self, text, chat_id=None, reply_markup=None, parse_mode=None):
        self.messages.append({"text": text, "chat_id": chat_id, "reply_markup": reply_markup,
                              "parse_mode": parse_mode})
        return True

    async def send_markdown(self, text, chat_id=None, reply_markup=None):
        return await self.send_message(text, chat_id=chat_id, reply_markup=reply_markup, parse_mode="Markdown")

    async def answer_callback_query(self, callback_query_id):
        self.answered.append(callback_query_id)
        return True

    async def edit_message_text(self, chat_id, message_id, text, reply_markup=None):
        self.edited.append({"chat_id": chat_id, "message_id": message_id, "text": text})
        return True

    @property
    def texts(self) -> List[str]:
        return [m["text"] for m in self.messages]


class FakeFetcher:
    def __init__(self, tokens: Optional[Dict[str, Optional[TokenInfo]]] = None):
        self.tokens = tokens or {}
        self.calls: List[str] = []

    async def fetch(self, address):
        self.calls.append(address)
        token = self.tokens.get(address)
        if isinstance(token, Exception):
            raise token
        return token

    async def fetch_for_event(self, event):
        return await self.fetch(event.get("tokenMint"))


def make_token(address: str = MINT_A, **overrides) -> TokenInfo:
    fields = dict(
        address=address,
        name="Moon Cat",
        liquidity=10_000.0,
        market_cap=50_000.0,
        dev_holding=5.0,
        pool_supply=80.0,
        launch_price=0.000000004,
        mint_auth_revoked=True,
        freeze_auth_revoked=True,
    )
    fields.update(overrides)
    return TokenInfo(**fields)


def mint_event(address: str = MINT_A, **overrides) -> Dict[str, Any]:
    event = {
        "type": "TOKEN_MINT",
        "tokenMint": address,
        "programId": PROGRAM_ID,
        "accounts": [address, PROGRAM_ID],
        "signature": f"sig-{address[:6]}",
    }
    event.update(overrides)
    return event


@pytest.fixture
def state():
    return BotState()


@pytest.fixture
def notifier():
    return FakeNotifier()
