# Filename: telegram_alert.py

import logging
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import aiohttp

logger = logging.getLogger("TelegramNotifier")

TELEGRAM_API_BASE = "https://api.telegram.org"

Button = Tuple[str, str]  # (label, callback_data)


def inline_keyboard(rows: Sequence[Sequence[Button]]) -> Dict[str, Any]:
    return {
        "inline_keyboard": [
            [{"text": text, "callback_data": data} for text, data in row]
            for row in rows
        ]
    }


class TelegramNotifier:
    """Thin async wrapper over the Telegram Bot API."""

    def __init__(self, session: aiohttp.ClientSession, bot_token: str, chat_id: Union[int, str] = None,
                 api_base: str = TELEGRAM_API_BASE):
        self.session = session
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.api_base = api_base.rstrip("/")

        if not self.bot_token or not self.chat_id:
            logger.error("[Telegram] Missing bot token or chat ID!")

    async def _call(self, method: str, payload: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        url = f"{self.api_base}/bot{self.bot_token}/{method}"
        async with self.session.post(url, json=payload) as response:
            try:
                body = await response.json(content_type=None)
            except ValueError:
                body = {"ok": False, "description": await response.text()}
            return response.status, body or {}

    async def send_message(self, text: str, chat_id: Union[int, str] = None,
                           reply_markup: Optional[Dict[str, Any]] = None,
                           parse_mode: Optional[str] = None) -> bool:
        """
        Sends a message to a chat (defaults to the alert chat).
        Failures are logged, never raised.
        """
        target = chat_id if chat_id is not None else self.chat_id
        if not self.bot_token or target is None:
            return False

        payload: Dict[str, Any] = {"chat_id": target, "text": text, "disable_web_page_preview": False}
        if reply_markup:
            payload["reply_markup"] = reply_markup
        if parse_mode:
            payload["parse_mode"] = parse_mode

        try:
            status, body = await self._call("sendMessage", payload)
            if status == 400 and parse_mode:
                # entity parsing failed, resend as plain text
                logger.warning(f"[Telegram] {parse_mode} rejected, resending as plain text: {body.get('description')}")
                payload = {k: v for k, v in payload.items() if k != "parse_mode"}
                status, body = await self._call("sendMessage", payload)
            if status != 200:
                logger.error(f"[Telegram] Failed: {status} - {body.get('description')}")
                return False
            logger.info("[Telegram] ✅ Message sent successfully.")
            return True
        except Exception as e:
            logger.error(f"[Telegram] Request exception: {e}")
            return False

    async def send_markdown(self, text: str, chat_id: Union[int, str] = None,
                            reply_markup: Optional[Dict[str, Any]] = None) -> bool:
        return await self.send_message(text, chat_id=chat_id, reply_markup=reply_markup, parse_mode="Markdown")

    async def answer_callback_query(self, callback_query_id: str) -> bool:
        try:
            status, _ = await self._call("answerCallbackQuery", {"callback_query_id": callback_query_id})
            return status == 200
        except Exception as e:
            logger.error(f"[Telegram] answerCallbackQuery failed: {e}")
            return False

    async def edit_message_text(self, chat_id: Union[int, str], message_id: int, text: str,
                                reply_markup: Optional[Dict[str, Any]] = None) -> bool:
        payload: Dict[str, Any] = {"chat_id": chat_id, "message_id": message_id, "text": text}
        if reply_markup:
            payload["reply_markup"] = reply_markup
        try:
            status, body = await self._call("editMessageText", payload)
            if status != 200:
                logger.error(f"[Telegram] editMessageText failed: {status} - {body.get('description')}")
            return status == 200
        except Exception as e:
            logger.error(f"[Telegram] editMessageText failed: {e}")
            return False

    async def set_webhook(self, url: str) -> bool:
        try:
            status, body = await self._call("setWebhook", {"url": url})
            logger.info(f"[Telegram] setWebhook response: {body}")
            return status == 200 and bool(body.get("ok"))
        except Exception as e:
            logger.error(f"[Telegram] Failed to set webhook: {e}")
            return False
