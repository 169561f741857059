import asyncio
from unittest.mock import AsyncMock

from security import auth
from security.auth import actor_for, authorized_only, is_allowed
from security.rate_limiter import SlidingWindowLimiter, limiter, rate_limited


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_limiter_blocks_after_max_calls():
    clock = FakeClock()
    window = SlidingWindowLimiter(max_calls=3, window_seconds=60, clock=clock)

    assert [window.allow(1) for _ in range(4)] == [True, True, True, False]
    assert window.allow(2), "limits are per user"


def test_limiter_window_slides():
    clock = FakeClock()
    window = SlidingWindowLimiter(max_calls=2, window_seconds=60, clock=clock)
    window.allow(1)
    clock.now += 30
    window.allow(1)
    assert not window.allow(1)

    clock.now += 31
    assert window.allow(1)


def test_limiter_reset():
    window = SlidingWindowLimiter(max_calls=1, window_seconds=60)
    window.allow(1)
    window.reset()
    assert window.allow(1)


def test_actor_for(fake_update):
    assert actor_for(fake_update(user_id=123456).effective_user) == "tg:123456"


def test_empty_whitelist_allows_everyone():
    assert is_allowed(1)


def test_whitelist(monkeypatch):
    monkeypatch.setattr(auth, "ALLOWED_USER_IDS", [7])
    assert is_allowed(7)
    assert not is_allowed(8)


def test_authorized_only_rejects_strangers(monkeypatch, fake_update, fake_context):
    monkeypatch.setattr(auth, "ALLOWED_USER_IDS", [7])
    handler = AsyncMock()
    update = fake_update(user_id=8)

    asyncio.run(authorized_only(handler)(update, fake_context()))

    handler.assert_not_called()
    assert "restricted" in update.message.reply_text.call_args.args[0]


def test_authorized_only_passes_operators(monkeypatch, fake_update, fake_context):
    monkeypatch.setattr(auth, "ALLOWED_USER_IDS", [7])
    handler = AsyncMock(return_value="done")
    update = fake_update(user_id=7)
    context = fake_context()

    assert asyncio.run(authorized_only(handler)(update, context)) == "done"
    handler.assert_awaited_once_with(update, context)


def test_rate_limited_stops_flooding(monkeypatch, fake_update, fake_context):
    monkeypatch.setattr(limiter, "max_calls", 2)
    handler = AsyncMock()
    wrapped = rate_limited(handler)
    update = fake_update()

    for _ in range(3):
        asyncio.run(wrapped(update, fake_context()))

    assert handler.await_count == 2
    assert "Too many requests" in update.message.reply_text.call_args.args[0]
