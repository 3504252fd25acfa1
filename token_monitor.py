# token_monitor.py

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from bot_state import BotState
from chain_client import ChainClient
from event_classifier import classify_event
from filters import passes
from metadata_fetcher import MetadataFetcher
from models import TokenInfo
from notifier import format_token_alert
from telegram_alert import TelegramNotifier
from trader import Trader

logger = logging.getLogger("TokenMonitor")

# Telegram caps a message at 4096 characters
MAX_MESSAGE_LENGTH = 4096


def chunk_messages(parts: List[str], limit: int = MAX_MESSAGE_LENGTH) -> List[List[str]]:
    """Groups alert texts, in order, so each joined group fits in one Telegram message."""
    chunks: List[List[str]] = []
    size = 0
    for part in parts:
        if chunks and size + len(part) <= limit:
            chunks[-1].append(part)
            size += len(part)
        else:
            chunks.append([part])
            size = len(part)
    return chunks


class BatchResult(str, Enum):
    OK = "OK"
    RATE_LIMITED = "RATE_LIMITED"
    ERROR = "ERROR"


class TokenMonitor:
    """
    Runs a webhook batch through classify -> sanity check -> fetch -> filter -> alert.
    Events of a batch are handled one after the other, in order.
    """

    def __init__(self, state: BotState, fetcher: MetadataFetcher, chain: ChainClient,
                 notifier: TelegramNotifier, program_id: str, trader: Optional[Trader] = None,
                 bypass_filters: bool = False, auto_snipe: bool = False, notice_delay: float = 2.0):
        self.state = state
        self.fetcher = fetcher
        self.chain = chain
        self.notifier = notifier
        self.program_id = program_id
        self.trader = trader
        self.bypass_filters = bypass_filters
        self.auto_snipe = auto_snipe
        self.notice_delay = notice_delay
        self.pending_buys: Set[asyncio.Task] = set()

    async def process_batch(self, events: List[Dict[str, Any]]) -> BatchResult:
        if not self.state.rate_window.try_acquire():
            logger.info("Rate limit exceeded, skipping webhook")
            return BatchResult.RATE_LIMITED

        logger.info(f"Webhook received, events count: {len(events)}")

        batch: List[str] = []
        failed = False
        for event in events:
            try:
                message = await self.handle_event(event)
                if message:
                    batch.append(message)
            except Exception as e:
                logger.exception(f"Error processing event: {e}")
                failed = True

        for chunk in chunk_messages(batch):
            try:
                logger.info(f"Sending batch message with {len(chunk)} token(s)")
                if not await self.notifier.send_markdown("".join(chunk)):
                    logger.error(f"Batch message with {len(chunk)} token(s) was not delivered")
                    failed = True
            except Exception as e:
                logger.exception(f"Error sending batch message: {e}")
                failed = True

        return BatchResult.ERROR if failed else BatchResult.OK

    async def handle_event(self, event: Dict[str, Any]) -> Optional[str]:
        """Returns the formatted alert when the token is accepted, else None."""
        address = classify_event(event, self.program_id)
        if address is None:
            return None

        if not await self.is_fungible(address):
            return None

        token = await self.fetcher.fetch(address)
        if token is None:
            logger.info(f"No valid token data for: {address}")
            await self.report_fetch_failure(address)
            return None

        self.state.last_token = token

        if self.bypass_filters or passes(token, self.state.filters):
            logger.info(f"Token passed filters, adding to batch: {address}")
            if self.auto_snipe:
                self.schedule_snipe(address)
            return format_token_alert(token)

        logger.info(f"Token did not pass filters: {address}")
        await self.notifier.send_message(f"ℹ️ Token {address} did not pass filters")
        await self._pause()
        return None

    async def is_fungible(self, address: str) -> bool:
        try:
            mint_state = await self.chain.get_mint_state(address)
        except Exception as e:
            logger.error(f"Error checking mint supply for {address}: {e}")
            return False

        if mint_state.supply <= 1:
            logger.info(f"Skipping NFT-like token: {address}")
            return False
        return True

    async def report_fetch_failure(self, address: str):
        dedup = self.state.dedup
        if not dedup.should_notify(address):
            return
        dedup.record(address)
        await self.notifier.send_message(f"⚠️ Failed to fetch data for token: {address}")
        await self._pause()

    async def send_token_alert(self, token: TokenInfo) -> bool:
        return await self.notifier.send_markdown(format_token_alert(token))

    def schedule_snipe(self, address: str):
        if self.trader is None:
            logger.warning(f"AUTO_SNIPE is on but no trader is configured, skipping {address}")
            return
        task = asyncio.create_task(self.trader.snipe(address))
        self.pending_buys.add(task)
        task.add_done_callback(self._buy_done)

    def _buy_done(self, task: asyncio.Task):
        self.pending_buys.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Auto-snipe task failed: {task.exception()}")

    async def _pause(self):
        # keep notices under Telegram's per-chat flood limit
        if self.notice_delay > 0:
            await asyncio.sleep(self.notice_delay)
