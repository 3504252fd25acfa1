# Filename: trader.py

import base64
import binascii
import logging
from typing import Any, Dict, Optional

from solana.rpc.async_api import AsyncClient
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction

from telegram_alert import TelegramNotifier

logger = logging.getLogger("trader")

LAMPORTS_PER_SOL = 1_000_000_000


def load_keypair(private_key: str) -> Keypair:
    """Accepts a base64 encoded 64-byte secret key, or a base58 string."""
    try:
        raw = base64.b64decode(private_key, validate=True)
        if len(raw) == 64:
            return Keypair.from_bytes(raw)
    except (binascii.Error, ValueError):
        pass
    return Keypair.from_base58_string(private_key)


class Trader:
    """
    Best-effort auto-snipe: submits a SOL transfer towards the token and reports the outcome.
    Nothing about execution price or fill is guaranteed.
    """

    def __init__(self, client: AsyncClient, notifier: Optional[TelegramNotifier], private_key: str,
                 amount_sol: float = 0.1):
        self.client = client
        self.notifier = notifier
        self.private_key = private_key
        self.amount_sol = amount_sol
        self._wallet: Optional[Keypair] = None

        logger.info("Trader initialisé")

    @property
    def wallet(self) -> Keypair:
        if self._wallet is None:
            self._wallet = load_keypair(self.private_key)
        return self._wallet

    async def buy_token(self, token_address: str, amount_sol: float = None) -> Dict[str, Any]:
        amount_sol = amount_sol or self.amount_sol
        logger.info(f"Buying token {token_address} for {amount_sol} SOL")

        if not self.private_key:
            return {"success": False, "error": "Wallet private key not configured"}

        try:
            wallet = self.wallet
            ix = transfer(TransferParams(
                from_pubkey=wallet.pubkey(),
                to_pubkey=Pubkey.from_string(token_address),
                lamports=int(amount_sol * LAMPORTS_PER_SOL),
            ))
            blockhash = (await self.client.get_latest_blockhash()).value.blockhash
            tx = Transaction([wallet], Message([ix], wallet.pubkey()), blockhash)

            resp = await self.client.send_transaction(tx)
            signature = resp.value
            await self.client.confirm_transaction(signature)

            return {"success": True, "transaction_id": str(signature), "amount_sol": amount_sol}
        except Exception as e:
            logger.error(f"Error buying token {token_address}: {e}")
            return {"success": False, "error": str(e)}

    async def snipe(self, token_address: str) -> Dict[str, Any]:
        """Buys and posts the result to the alert chat."""
        result = await self.buy_token(token_address)
        if self.notifier:
            if result["success"]:
                await self.notifier.send_message(
                    f"✅ Bought token {token_address} for {result['amount_sol']} SOL! Signature: {result['transaction_id']}"
                )
            else:
                await self.notifier.send_message(f"❌ Failed to buy token {token_address}: {result['error']}")
        return result
