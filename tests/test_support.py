import asyncio
import base64
from types import SimpleNamespace

import pytest
from solders.keypair import Keypair

from chain_client import ChainClient, parse_mint_info
from config import DEFAULT_CONFIG, load_config_from_env, validate_config
from errors import ConfigError
from models import DEFAULT_PUBKEY
from rate_limit import DedupCursor, RateWindow
from telegram_alert import TelegramNotifier, inline_keyboard
from token_cache import TokenCache
from trader import load_keypair

from conftest import MINT_B, FakeResponse, FakeSession


def test_rate_window_resets_after_window():
    now = [0.0]
    window = RateWindow(cap=2, window_seconds=60, clock=lambda: now[0])
    assert window.try_acquire() and window.try_acquire()
    assert not window.try_acquire()
    now[0] = 60.5
    assert window.try_acquire()
    assert window.count == 1


def test_dedup_cursor():
    cursor = DedupCursor()
    assert cursor.should_notify("a")
    cursor.record("a")
    assert not cursor.should_notify("a")
    assert cursor.should_notify("b")


def test_token_cache_expires_entries():
    now = [0.0]
    cache = TokenCache(max_lifetime=10, clock=lambda: now[0])
    cache.mark_processed("sig")
    assert not cache.should_process("sig")
    now[0] = 11
    assert cache.should_process("sig")
    cache.cleanup_expired_tokens()
    assert len(cache) == 0


def test_token_cache_is_bounded():
    now = [0.0]
    cache = TokenCache(max_entries=3, clock=lambda: now[0])
    for i in range(5):
        now[0] = i
        cache.mark_processed(f"sig{i}")
    assert len(cache) == 3
    assert cache.should_process("sig0")
    assert not cache.should_process("sig4")


def test_env_values_are_coerced(monkeypatch):
    monkeypatch.setenv("BYPASS_FILTERS", "TRUE")
    monkeypatch.setenv("ALERT_RATE_CAP", "7")
    monkeypatch.setenv("NOTICE_DELAY_SECONDS", "0.5")
    monkeypatch.setenv("SCAN_LIMIT", "not-a-number")
    config = load_config_from_env()
    assert config["BYPASS_FILTERS"] is True
    assert config["ALERT_RATE_CAP"] == 7
    assert config["NOTICE_DELAY_SECONDS"] == 0.5
    assert config["SCAN_LIMIT"] == DEFAULT_CONFIG["SCAN_LIMIT"]


def test_validate_config_requires_credentials():
    config = dict(DEFAULT_CONFIG, TELEGRAM_BOT_TOKEN="t", WEBHOOK_URL="https://x", HELIUS_API_KEY="k")
    validate_config(config)
    with pytest.raises(ConfigError, match="PRIVATE_KEY"):
        validate_config(dict(config, AUTO_SNIPE=True))
    with pytest.raises(ConfigError, match="HELIUS_API_KEY"):
        validate_config(dict(config, HELIUS_API_KEY=""))


def test_parse_mint_info():
    state = parse_mint_info({"supply": "1000000000", "decimals": 6, "mintAuthority": None,
                             "freezeAuthority": DEFAULT_PUBKEY})
    assert state.ui_supply == 1000.0
    assert state.mint_authority_revoked and state.freeze_authority_revoked


def test_get_mint_state_reads_parsed_account():
    parsed = {"type": "mint", "info": {"supply": "5", "decimals": 0, "mintAuthority": "Auth"}}

    class FakeRpc:
        async def get_account_info_json_parsed(self, pubkey):
            assert str(pubkey) == MINT_B
            return SimpleNamespace(value=SimpleNamespace(data=SimpleNamespace(parsed=parsed)))

    chain = ChainClient("http://rpc", client=FakeRpc())
    state = asyncio.run(chain.get_mint_state(MINT_B))
    assert state.supply == 5
    assert not state.mint_authority_revoked


def test_get_mint_state_rejects_missing_account():
    class FakeRpc:
        async def get_account_info_json_parsed(self, pubkey):
            return SimpleNamespace(value=None)

    with pytest.raises(ValueError):
        asyncio.run(ChainClient("http://rpc", client=FakeRpc()).get_mint_state(MINT_B))


def test_load_keypair_accepts_base64_and_base58():
    keypair = Keypair()
    assert load_keypair(base64.b64encode(bytes(keypair)).decode()).pubkey() == keypair.pubkey()
    assert load_keypair(str(keypair)).pubkey() == keypair.pubkey()


def test_notifier_falls_back_to_plain_text_on_markdown_error():
    session = FakeSession([
        FakeResponse(400, {"ok": False, "description": "can't parse entities"}),
        FakeResponse(200, {"ok": True}),
    ])
    notifier = TelegramNotifier(session, "token", chat_id=-100)

    assert asyncio.run(notifier.send_markdown("*broken"))
    assert session.calls[0]["json"]["parse_mode"] == "Markdown"
    assert "parse_mode" not in session.calls[1]["json"]
    assert session.calls[1]["url"] == "https://api.telegram.org/bottoken/sendMessage"


def test_notifier_swallows_transport_errors():
    notifier = TelegramNotifier(FakeSession([ConnectionError("down")]), "token", chat_id=1)
    assert asyncio.run(notifier.send_message("hi")) is False


def test_inline_keyboard_layout():
    assert inline_keyboard([[("A", "a"), ("B", "b")]]) == {
        "inline_keyboard": [[{"text": "A", "callback_data": "a"}, {"text": "B", "callback_data": "b"}]]
    }
