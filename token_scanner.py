"""
Periodic scan of the tracked program's latest transactions.
Runs next to the webhook feed so mints are still caught when pushes are missed.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Set

import aiohttp

from bot_state import BotState
from errors import UpstreamError, UpstreamRateLimited
from event_classifier import MINT_EVENT_TYPE
from filters import passes
from metadata_fetcher import DEFAULT_API_BASE, MetadataFetcher, resolve_token_address
from rate_limit import backoff_delay
from token_cache import TokenCache
from token_monitor import TokenMonitor

logger = logging.getLogger("token_scanner")


class PollingScanner:
    def __init__(self, session: aiohttp.ClientSession, state: BotState, fetcher: MetadataFetcher,
                 monitor: TokenMonitor, api_key: str, program_id: str, api_base: str = DEFAULT_API_BASE,
                 interval: float = 10, limit: int = 5, max_attempts: int = 3, retry_base_delay: float = 1.0,
                 seen: Optional[TokenCache] = None):
        self.session = session
        self.state = state
        self.fetcher = fetcher
        self.monitor = monitor
        self.api_key = api_key
        self.program_id = program_id
        self.api_base = api_base.rstrip("/")
        self.interval = interval
        self.limit = limit
        self.max_attempts = max_attempts
        self.retry_base_delay = retry_base_delay
        self.seen = seen if seen is not None else TokenCache()
        self._running = False
        self._ticks: Set[asyncio.Task] = set()

    async def run(self):
        """Spawns a tick every `interval` seconds. Slow ticks overlap, they are never queued."""
        self._running = True
        logger.info(f"Polling scanner started (every {self.interval}s)")
        while self._running:
            task = asyncio.create_task(self.tick())
            self._ticks.add(task)
            task.add_done_callback(self._tick_done)
            await asyncio.sleep(self.interval)

    def _tick_done(self, task: asyncio.Task):
        self._ticks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Periodic token check crashed: {task.exception()}")

    def stop(self):
        self._running = False
        for task in list(self._ticks):
            task.cancel()

    async def tick(self) -> int:
        """
        One scan. Returns the number of alerts sent.
        Upstream errors are reported to the alert chat and end the tick.
        A failing transaction is reported and skipped, the rest of the tick goes on.
        """
        logger.info("Running periodic checkNewTokens...")
        try:
            transactions = await self.fetch_recent_transactions()
        except Exception as e:
            logger.error(f"Error in periodic token check: {e}")
            await self.monitor.notifier.send_message(f"❌ Error in periodic token check: {e}")
            return 0

        sent = 0
        for tx in transactions:
            if not isinstance(tx, dict) or tx.get("type") != MINT_EVENT_TYPE:
                continue

            try:
                signature = tx.get("signature")
                if signature:
                    if not self.seen.should_process(signature):
                        continue
                    self.seen.mark_processed(signature)

                if await self.handle_transaction(tx):
                    sent += 1
            except Exception as e:
                logger.exception(f"Error processing transaction {tx.get('signature')!r}: {e}")
                await self.monitor.notifier.send_message(f"❌ Error in periodic token check: {e}")

        self.seen.cleanup_expired_tokens()
        logger.info(f"checkNewTokens executed successfully ({sent} alert(s))")
        return sent

    async def handle_transaction(self, tx: Dict[str, Any]) -> bool:
        address = resolve_token_address(tx)
        if not address:
            return False

        token = await self.fetcher.fetch(address)
        if token is None:
            await self.monitor.report_fetch_failure(address)
            return False

        self.state.last_token = token

        if not passes(token, self.state.filters):
            logger.info(f"[SCAN] Token did not pass filters: {address}")
            return False

        return await self.monitor.send_token_alert(token)

    async def fetch_recent_transactions(self) -> List[Dict[str, Any]]:
        url = f"{self.api_base}/v0/addresses/{self.program_id}/transactions"
        params = {"api-key": self.api_key, "limit": str(self.limit)}

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._get_transactions(url, params)
            except UpstreamRateLimited:
                if attempt == self.max_attempts:
                    raise
                delay = backoff_delay(attempt, self.retry_base_delay)
                logger.warning(f"Rate limit hit while polling, retrying after {delay:.1f}s...")
                await asyncio.sleep(delay)
        return []

    async def _get_transactions(self, url: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        async with self.session.get(url, params=params) as response:
            if response.status == 429:
                raise UpstreamRateLimited(url)
            if response.status != 200:
                body = await response.text()
                raise UpstreamError(f"Helius API error: {response.status} - {body}", status=response.status)
            data = await response.json()

        if not isinstance(data, list):
            raise UpstreamError("Unexpected transactions payload")
        return data
