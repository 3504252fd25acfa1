# Filename: telegram_bot.py

import logging
from typing import Any, Dict

from bot_state import BotState
from filter_editor import EDITABLE_FIELDS, FilterEditSession
from telegram_alert import TelegramNotifier, inline_keyboard

logger = logging.getLogger("TelegramBot")

BOT_HANDLE = "@moongraphi_bot"

WELCOME_TEXT = (
    f"👋 Welcome to {BOT_HANDLE}\n"
    "💰 Trade  |  🔐 Wallet\n"
    "⚙️ Filters  |  📊 Portfolio\n"
    "❓ Help  |  🔄 Refresh"
)

MAIN_MENU = inline_keyboard([
    [("💰 Trade", "trade"), ("🔐 Wallet", "wallet")],
    [("⚙️ Filters", "filters"), ("📊 Portfolio", "portfolio")],
    [("❓ Help", "help"), ("🔄 Refresh", "refresh")],
])

BACK = ("⬅️ Back", "back")
BACK_TO_FILTERS = ("⬅️ Back", "filters")

STATIC_MENUS = {
    "trade": ("💰 Trade Menu\n🚀 Buy  |  📉 Sell",
              [[("🚀 Buy", "buy"), ("📉 Sell", "sell")], [BACK]]),
    "wallet": ("🔐 Wallet Menu\n💳 Your wallet: Not connected yet.\n🔗 Connect Wallet",
               [[("🔗 Connect Wallet", "connect_wallet")], [BACK]]),
    "portfolio": ("📊 Portfolio Menu\nYour portfolio is empty.\n💰 Start trading to build your portfolio!",
                  [[BACK]]),
    "help": ("❓ Help Menu\nThis bot alerts you about new Pump.fun tokens that match your filters.\n"
             "Commands:\n/start - Start the bot",
             [[BACK]]),
}


def filters_keyboard() -> Dict[str, Any]:
    buttons = [[(f"✏️ Edit {f.label.replace(' Revoked', '')}", f"edit_{key}")] for key, f in EDITABLE_FIELDS.items()]
    buttons.append([BACK])
    return inline_keyboard(buttons)


class TelegramBot:
    """Routes raw Telegram updates: menus, callbacks and the filter edit flow."""

    def __init__(self, notifier: TelegramNotifier, state: BotState):
        self.notifier = notifier
        self.state = state
        self.editor = FilterEditSession(state)

    async def process_update(self, update: Dict[str, Any]):
        try:
            if "callback_query" in update:
                await self.handle_callback(update["callback_query"])
            elif "message" in update:
                await self.handle_message(update["message"])
        except Exception as e:
            logger.exception(f"Error processing update {update.get('update_id')}: {e}")

    async def handle_message(self, message: Dict[str, Any]):
        chat_id = (message.get("chat") or {}).get("id")
        text = message.get("text")
        if chat_id is None or not text:
            return

        if text.startswith("/start"):
            await self.notifier.send_message(WELCOME_TEXT, chat_id=chat_id, reply_markup=MAIN_MENU)
            return

        outcome = self.editor.handle_text(chat_id, text)
        if outcome is None:
            return

        if outcome.accepted:
            await self.notifier.send_message(
                outcome.message, chat_id=chat_id,
                reply_markup=inline_keyboard([[("⬅️ Back to Filters", "filters")]]),
            )
        else:
            await self.notifier.send_message(outcome.message, chat_id=chat_id)

    async def handle_callback(self, query: Dict[str, Any]):
        message = query.get("message") or {}
        chat_id = (message.get("chat") or {}).get("id")
        data = query.get("data")

        if query.get("id"):
            await self.notifier.answer_callback_query(query["id"])
        if chat_id is None:
            return

        if data in STATIC_MENUS:
            text, buttons = STATIC_MENUS[data]
            await self.notifier.send_message(text, chat_id=chat_id, reply_markup=inline_keyboard(buttons))
        elif data == "filters":
            await self.notifier.send_message(
                f"⚙️ Filters Menu\nCurrent Filters:\n{self.state.filters.describe()}",
                chat_id=chat_id, reply_markup=filters_keyboard(),
            )
        elif data == "refresh":
            last = self.state.last_token.address if self.state.last_token else "N/A"
            await self.notifier.send_message(f"🔄 Refreshing latest token data...\nLast Token: {last}", chat_id=chat_id)
        elif data == "back":
            await self.notifier.edit_message_text(chat_id, message.get("message_id"), WELCOME_TEXT, reply_markup=MAIN_MENU)
        elif data and data.startswith("edit_") and data[len("edit_"):] in EDITABLE_FIELDS:
            key = data[len("edit_"):]
            self.editor.start_edit(chat_id, key)
            await self.notifier.send_message(
                self.editor.prompt_for(key), chat_id=chat_id, reply_markup=inline_keyboard([[BACK_TO_FILTERS]]),
            )
        else:
            await self.notifier.send_message("Unknown command. Please use the buttons", chat_id=chat_id)
