"""
security/auth.py
-----------------
Authentication middleware for the HR bot.
Only whitelisted HR operators may read or change employee records; their
Telegram identity is what ends up in the audit columns.
"""

from functools import wraps
from typing import Callable

from telegram import Update, User
from telegram.ext import ContextTypes

from config import ALLOWED_USER_IDS
from utils.logger import get_logger

logger = get_logger(__name__)


def actor_for(user: User) -> str:
    """Identity stored in changed_by / deleted_by / transferred_by."""
    return f"tg:{user.id}"


def is_allowed(user_id: int) -> bool:
    """An empty whitelist allows everyone (dev mode)."""
    return not ALLOWED_USER_IDS or user_id in ALLOWED_USER_IDS


def authorized_only(func: Callable):
    """
    Decorator that restricts a handler to whitelisted operators only.

    Usage:
        @authorized_only
        async def my_handler(update, context):
            ...

    Behavior:
        - If ALLOWED_USER_IDS is empty, ALL users are allowed (dev mode).
        - If the list is set, only those users can use the bot.
        - Unauthorized attempts are logged.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not is_allowed(user.id):
            logger.warning(
                f"🚫 Unauthorized access attempt: user_id={user.id}, "
                f"username={user.username}, name={user.first_name}"
            )
            await update.message.reply_text(
                "⛔ Sorry, this bot is restricted to HR staff."
            )
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
