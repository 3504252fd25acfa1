from models import TokenInfo
from notifier import NOT_AVAILABLE, format_token_alert

from conftest import MINT_A, make_token


def test_full_record_renders_every_field():
    text = format_token_alert(make_token())
    assert "Moon Cat" in text
    assert f"`{MINT_A}`" in text
    assert "$50,000.00" in text
    assert "$10,000.00" in text
    assert "5%" in text
    assert "80%" in text
    assert "0.0000000040 SOL" in text
    assert text.count("✅ Revoked") == 2
    assert f"https://dexscreener.com/solana/{MINT_A}" in text
    assert NOT_AVAILABLE not in text


def test_missing_fields_render_not_available_marker():
    token = TokenInfo(address=MINT_A, name="Bare")
    text = format_token_alert(token)
    # market cap, liquidity, dev holding, pool supply, launch price
    assert text.count(NOT_AVAILABLE) == 5
    assert text.count("❌ Not Revoked") == 2


def test_message_shape_is_constant():
    full = format_token_alert(make_token())
    bare = format_token_alert(TokenInfo(address=MINT_A, name="Bare"))
    assert len(full.splitlines()) == len(bare.splitlines())


def test_markdown_characters_in_name_are_escaped():
    text = format_token_alert(make_token(name="Token_abc*"))
    assert "Token\\_abc\\*" in text
