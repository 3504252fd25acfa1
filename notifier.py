from typing import Optional

from models import TokenInfo

NOT_AVAILABLE = "N/A"


def escape_md(text: str) -> str:
    # Escape Markdown-sensitive characters
    return text.replace('_', '\\_').replace('*', '\\*').replace('[', '\\[').replace('`', '\\`')


def _usd(value: Optional[float]) -> str:
    return f"${value:,.2f}" if value is not None else NOT_AVAILABLE


def _percent(value: Optional[float]) -> str:
    return f"{value:g}%" if value is not None else NOT_AVAILABLE


def _price(value: Optional[float]) -> str:
    return f"{value:.10f} SOL" if value is not None else NOT_AVAILABLE


def _revoked(flag: bool) -> str:
    return "✅ Revoked" if flag else "❌ Not Revoked"


def format_token_alert(token: TokenInfo) -> str:
    """Format the alert message text for a token. Same shape whatever data is missing."""
    address = token.address or NOT_AVAILABLE
    text = "\n🌟 *New Token Alert* 🌟\n"
    text += f"📛 *Token Name*: {escape_md(token.name or 'Unknown')}\n"
    text += f"📍 *Token Address*: `{address}`\n"
    text += f"💰 *Market Cap*: {_usd(token.market_cap)}\n"
    text += f"💧 *Liquidity*: {_usd(token.liquidity)}\n"
    text += f"👨‍💻 *Dev Holding*: {_percent(token.dev_holding)}\n"
    text += f"🏊 *Pool Supply*: {_percent(token.pool_supply)}\n"
    text += f"🚀 *Launch Price*: {_price(token.launch_price)}\n"
    text += f"🔒 *Mint Authority*: {_revoked(token.mint_auth_revoked)}\n"
    text += f"🧊 *Freeze Authority*: {_revoked(token.freeze_auth_revoked)}\n"
    text += f"📈 *DexScreener*: [View on DexScreener](https://dexscreener.com/solana/{token.address or ''})\n"
    return text
