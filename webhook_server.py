import json
import logging

from aiohttp import web

from metadata_fetcher import MetadataFetcher
from telegram_bot import TelegramBot
from token_monitor import BatchResult, TokenMonitor

logger = logging.getLogger("WebhookServer")

TEST_TOKEN_ADDRESS = "TEST_TOKEN_ADDRESS"


class WebhookServer:
    """HTTP surface: Helius event webhook, Telegram update webhook, health and test routes."""

    def __init__(self, monitor: TokenMonitor, bot: TelegramBot, fetcher: MetadataFetcher,
                 bot_token: str, program_id: str):
        self.monitor = monitor
        self.bot = bot
        self.fetcher = fetcher
        self.program_id = program_id
        self.runner = None
        self.app = web.Application()
        self.app.add_routes([
            web.get("/", self.handle_root),
            web.post("/webhook", self.handle_webhook),
            web.post("/test-webhook", self.handle_test_webhook),
            web.post(f"/bot{bot_token}", self.handle_bot_update),
        ])

    async def start(self, host: str = "0.0.0.0", port: int = 10000):
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, host, port)
        await site.start()
        logger.info(f"📡 Server running on port {port}")

    async def stop(self):
        if self.runner:
            await self.runner.cleanup()

    async def handle_root(self, request: web.Request) -> web.Response:
        return web.Response(text="Bot running!")

    async def handle_webhook(self, request: web.Request) -> web.Response:
        try:
            events = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            events = None

        if not isinstance(events, list) or not events:
            logger.info("No events in webhook")
            return web.Response(text="No events received", status=400)

        try:
            result = await self.monitor.process_batch(events)
        except Exception as e:
            logger.exception(f"Webhook error: {e}")
            return web.Response(text="Internal Server Error", status=500)

        if result is BatchResult.RATE_LIMITED:
            return web.Response(text="Rate limit exceeded")
        if result is BatchResult.ERROR:
            return web.Response(text="Internal Server Error", status=500)
        return web.Response(text="OK")

    async def handle_bot_update(self, request: web.Request) -> web.Response:
        try:
            update = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return web.Response(status=400)

        if isinstance(update, dict):
            await self.bot.process_update(update)
        return web.Response(status=200)

    async def handle_test_webhook(self, request: web.Request) -> web.Response:
        address = request.query.get("mint", TEST_TOKEN_ADDRESS)
        mock_event = {
            "type": "TOKEN_MINT",
            "tokenMint": address,
            "programId": self.program_id,
            "accounts": [address, self.program_id],
        }
        logger.info(f"Received test webhook: {mock_event}")
        notifier = self.monitor.notifier

        try:
            await notifier.send_message("ℹ️ Received test webhook")
            token = await self.fetcher.fetch_for_event(mock_event)
            if token:
                await self.monitor.send_token_alert(token)
                await notifier.send_message("✅ Test webhook successful!")
            else:
                await notifier.send_message("⚠️ Test webhook failed: No token data")
            return web.Response(text="Test webhook processed")
        except Exception as e:
            logger.exception(f"Test webhook error: {e}")
            await notifier.send_message(f"❌ Test webhook error: {e}")
            return web.Response(text="Test webhook failed", status=500)
