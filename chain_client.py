# Filename: chain_client.py

import logging
from typing import Any, Dict

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.pubkey import Pubkey

from models import MintState

logger = logging.getLogger("ChainClient")


def parse_mint_info(info: Dict[str, Any]) -> MintState:
    """Builds a MintState from the `parsed.info` object of a jsonParsed mint account."""
    return MintState(
        supply=int(info.get("supply") or 0),
        decimals=int(info.get("decimals") or 0),
        mint_authority=info.get("mintAuthority"),
        freeze_authority=info.get("freezeAuthority"),
    )


class ChainClient:
    """Read-only access to SPL mint accounts over Solana RPC."""

    def __init__(self, rpc_url: str, commitment: str = "confirmed", client: AsyncClient = None):
        self.rpc_url = rpc_url
        self.client = client or AsyncClient(rpc_url, commitment=Commitment(commitment))

    async def get_mint_state(self, address: str) -> MintState:
        """
        Fetches supply, decimals and authorities of a mint.

        Raises:
            ValueError: invalid address, missing account, or not a mint account
        """
        pubkey = Pubkey.from_string(address)
        resp = await self.client.get_account_info_json_parsed(pubkey)

        account = resp.value
        if account is None:
            raise ValueError(f"Account not found: {address}")

        parsed = getattr(account.data, "parsed", None)
        if not isinstance(parsed, dict) or parsed.get("type") != "mint":
            raise ValueError(f"Account is not an SPL mint: {address}")

        return parse_mint_info(parsed.get("info") or {})

    async def close(self):
        await self.client.close()
