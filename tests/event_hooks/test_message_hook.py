import asyncio
from types import SimpleNamespace

from chatdispatch.commands import DispatchOutcome
from chatdispatch.event_hooks import message_hook


def _client(outcome=DispatchOutcome.INVOKED):
    dispatched = []

    async def dispatch(message):
        dispatched.append(message)
        return outcome

    client = SimpleNamespace(
        user=SimpleNamespace(id=999),
        command_manager=SimpleNamespace(dispatch=dispatch),
    )
    return client, dispatched


def test_message_hook_forwards_user_messages(message_factory):
    client, dispatched = _client()
    message = message_factory("!help")

    asyncio.run(message_hook.handle(client, message))

    assert dispatched == [message]


def test_message_hook_skips_own_messages(message_factory):
    client, dispatched = _client()
    message = message_factory("!help", author=SimpleNamespace(id=999, bot=True))

    asyncio.run(message_hook.handle(client, message))

    assert dispatched == []


def test_message_hook_respects_ignore_bots(monkeypatch, message_factory):
    client, dispatched = _client()
    message = message_factory("!help", author=SimpleNamespace(id=5, bot=True))

    monkeypatch.setattr(message_hook.core, "IGNORE_BOTS", True)
    asyncio.run(message_hook.handle(client, message))
    assert dispatched == []

    monkeypatch.setattr(message_hook.core, "IGNORE_BOTS", False)
    asyncio.run(message_hook.handle(client, message))
    assert dispatched == [message]
