"""
security/rate_limiter.py
-------------------------
Rate limiting middleware for the HR bot.
Limits how many commands an operator can send within a time window, so a
stuck client or a script cannot hammer the employee tables.
"""

import time
from collections import defaultdict
from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from config import RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)


class SlidingWindowLimiter:
    """
    Per-user sliding window: at most `max_calls` within `window_seconds`.

    Timestamps older than the window are dropped on every check.
    """

    def __init__(self, max_calls: int, window_seconds: float, clock: Callable[[], float] = time.time):
        self.max_calls = max_calls
        self.window_seconds = window_seconds
        self._clock = clock
        self._calls: dict[int, list[float]] = defaultdict(list)

    def allow(self, user_id: int) -> bool:
        """Record a call for `user_id` and return False if it exceeds the limit."""
        now = self._clock()
        cutoff = now - self.window_seconds
        recent = [t for t in self._calls[user_id] if t > cutoff]
        if len(recent) >= self.max_calls:
            self._calls[user_id] = recent
            return False
        recent.append(now)
        self._calls[user_id] = recent
        return True

    def reset(self) -> None:
        self._calls.clear()


limiter = SlidingWindowLimiter(RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS)


def rate_limited(func: Callable):
    """
    Decorator that enforces rate limiting per user.

    Configuration (via .env):
        RATE_LIMIT_MESSAGES: Max commands per window (default: 30).
        RATE_LIMIT_WINDOW_SECONDS: Window duration in seconds (default: 60).
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not limiter.allow(user.id):
            logger.warning(f"⚠️ Rate limit hit for user {user.id}")
            await update.message.reply_text(
                "⚠️ Too many requests. Please wait a moment and try again."
            )
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
