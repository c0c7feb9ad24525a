import asyncio
from types import SimpleNamespace

from chatdispatch import commands as cd_commands
from chatdispatch.commands import CommandManager, DispatchOutcome


def _manager():
    client = SimpleNamespace(user=SimpleNamespace(id=1))
    manager = CommandManager(client)
    client.command_manager = manager
    cd_commands.setup(manager, prefixes=["!"])
    return manager


def _run(manager, message):
    async def _go():
        outcome = await manager.dispatch(message)
        await asyncio.sleep(0)
        return outcome

    return asyncio.run(_go())


def _admin(is_admin):
    return SimpleNamespace(
        id=7, bot=False, guild_permissions=SimpleNamespace(administrator=is_admin)
    )


def test_setup_registers_known_handlers():
    manager = _manager()
    assert {"help", "lobotomy"}.issubset(set(manager.snapshot.names()))
    assert {"Help", "Lobotomy"}.issubset({cls.__name__ for cls in cd_commands.registered_handlers()})


def test_setup_is_idempotent():
    manager = _manager()
    before = manager.snapshot
    cd_commands.setup(manager, prefixes=["!"])
    assert manager.snapshot.names() == before.names()


def test_help_lists_commands(message_factory):
    manager = _manager()
    message = message_factory("!help")

    assert _run(manager, message) is DispatchOutcome.INVOKED
    assert message.channel.sent == ["Available commands: help, lobotomy"]


def test_help_topic_describes_command(message_factory):
    manager = _manager()
    message = message_factory("!help topic lobotomy")

    _run(manager, message)
    assert message.channel.sent == ["`!lobotomy` sub-commands: none"]


def test_help_topic_usage_falls_back_to_wrong_usage(message_factory):
    manager = _manager()
    message = message_factory("!help topic")

    assert _run(manager, message) is DispatchOutcome.WRONG_USAGE
    assert message.channel.sent == ["Wrong usage of that command."]

    manager.register_message("#help.topic.usage", "Usage: `!help topic <command>`")
    message = message_factory("!help topic")
    _run(manager, message)
    assert message.channel.sent == ["Usage: `!help topic <command>`"]


def test_lobotomy_requires_admin(message_factory):
    manager = _manager()
    message = message_factory("!lobotomy", author=_admin(False))

    assert _run(manager, message) is DispatchOutcome.NO_PERMISSION
    assert message.channel.sent == ["You don't have permission to use that command."]
    assert message.deleted == 0


def test_lobotomy_deletes_trigger_for_admin(message_factory):
    manager = _manager()
    message = message_factory("!lobotomy", author=_admin(True))

    assert _run(manager, message) is DispatchOutcome.INVOKED
    assert message.channel.sent == ["Initiating lobotomy sequence..."]
    assert message.deleted == 1
