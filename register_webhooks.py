# Filename: register_webhooks.py

import logging
import sys

import requests

from config import load_config

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("RegisterWebhooks")


def register_telegram_webhook(bot_token: str, base_url: str) -> bool:
    url = f"{base_url}/bot{bot_token}"
    logger.info(f"Setting Telegram webhook with URL: {base_url}/bot<token>")
    try:
        resp = requests.get(f"https://api.telegram.org/bot{bot_token}/setWebhook", params={"url": url}, timeout=10)
        resp.raise_for_status()
        logger.info(f"Telegram webhook response: {resp.json()}")
        return True
    except requests.RequestException as e:
        logger.error(f"Failed to register Telegram webhook: {e}")
        return False


def register_helius_webhook(api_key: str, base_url: str, program_id: str,
                            api_base: str = "https://api.helius.xyz") -> bool:
    if not api_key:
        logger.info("HELIUS_API_KEY not found, skipping Helius webhook registration")
        return False

    payload = {
        "webhookURL": f"{base_url}/webhook",
        "webhookType": "EVENTS",
        "transactionTypes": ["TOKEN_MINT"],
        "accountAddresses": [program_id],
    }
    logger.info(f"Attempting to register Helius webhook with URL: {payload['webhookURL']}")
    try:
        resp = requests.post(
            f"{api_base}/v0/webhooks",
            params={"api-key": api_key},
            json=payload,
            timeout=10,
        )
        resp.raise_for_status()
        logger.info(f"Helius webhook response: {resp.json()}")
        return True
    except requests.RequestException as e:
        body = e.response.text if e.response is not None else ""
        logger.error(f"Failed to register Helius webhook: {e} {body}")
        return False


def main() -> int:
    config = load_config()
    base_url = (config.get("WEBHOOK_URL") or "").rstrip("/")
    if not config.get("TELEGRAM_BOT_TOKEN") or not base_url:
        logger.error("TELEGRAM_BOT_TOKEN and WEBHOOK_URL are required")
        return 1

    ok = register_telegram_webhook(config["TELEGRAM_BOT_TOKEN"], base_url)
    ok = register_helius_webhook(
        config.get("HELIUS_API_KEY"), base_url, config["PUMP_FUN_PROGRAM"], config["HELIUS_API_BASE"]
    ) and ok
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
