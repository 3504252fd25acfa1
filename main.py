# Filename: main.py

import asyncio
import logging
import sys

import aiohttp

from bot_state import BotState
from chain_client import ChainClient
from config import load_config, validate_config
from errors import ConfigError
from metadata_fetcher import MetadataFetcher
from telegram_alert import TelegramNotifier
from telegram_bot import TelegramBot
from token_monitor import TokenMonitor
from token_scanner import PollingScanner
from trader import Trader
from webhook_server import WebhookServer

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("Main")


async def run(config: dict):
    state = BotState.from_config(config)
    program_id = config["PUMP_FUN_PROGRAM"]
    logger.info(f"PUMP_FUN_PROGRAM defined: {program_id}")

    timeout = aiohttp.ClientTimeout(total=30)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        chain = ChainClient(config["RPC_HTTP_ENDPOINT"], commitment=config.get("COMMITMENT", "confirmed"))
        notifier = TelegramNotifier(session, config["TELEGRAM_BOT_TOKEN"], config["TELEGRAM_CHAT_ID"])
        fetcher = MetadataFetcher(
            session, chain, config["HELIUS_API_KEY"],
            api_base=config["HELIUS_API_BASE"],
            max_attempts=config["MAX_FETCH_ATTEMPTS"],
            retry_base_delay=config["RETRY_BASE_DELAY_SECONDS"],
        )

        trader = None
        if config.get("AUTO_SNIPE"):
            logger.info("💰 AUTO_SNIPE enabled")
            trader = Trader(chain.client, notifier, config["PRIVATE_KEY"], config["AUTO_SNIPE_AMOUNT_SOL"])
        if config.get("BYPASS_FILTERS"):
            logger.warning("🧪 BYPASS_FILTERS enabled, every fetched token will be alerted")

        monitor = TokenMonitor(
            state, fetcher, chain, notifier, program_id,
            trader=trader,
            bypass_filters=config["BYPASS_FILTERS"],
            auto_snipe=config["AUTO_SNIPE"],
            notice_delay=config["NOTICE_DELAY_SECONDS"],
        )
        scanner = PollingScanner(
            session, state, fetcher, monitor, config["HELIUS_API_KEY"], program_id,
            api_base=config["HELIUS_API_BASE"],
            interval=config["SCAN_INTERVAL_SECONDS"],
            limit=config["SCAN_LIMIT"],
            max_attempts=config["MAX_FETCH_ATTEMPTS"],
            retry_base_delay=config["RETRY_BASE_DELAY_SECONDS"],
        )
        bot = TelegramBot(notifier, state)
        server = WebhookServer(monitor, bot, fetcher, config["TELEGRAM_BOT_TOKEN"], program_id)

        webhook_base = config["WEBHOOK_URL"].rstrip("/")
        await notifier.set_webhook(f"{webhook_base}/bot{config['TELEGRAM_BOT_TOKEN']}")

        await server.start(port=config["PORT"])
        helius_url = webhook_base if webhook_base.endswith("/webhook") else f"{webhook_base}/webhook"
        logger.info(f"Helius Webhook URL: {helius_url}")
        await notifier.send_message("🚀 Bot started! Waiting for Pump.fun token mints...")

        try:
            await scanner.run()
        finally:
            scanner.stop()
            await server.stop()
            await chain.close()


def main():
    logger.info("🚀 Starting moongraph alert bot...")

    config = load_config()
    try:
        validate_config(config)
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("❌ Bot stopped by user.")


if __name__ == "__main__":
    main()
