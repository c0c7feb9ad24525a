import asyncio
from types import SimpleNamespace

import discord
import pytest

from chatdispatch.commands.errors import ConfigurationError
from chatdispatch.commands.messages import NO_PERMISSION, TemplateRegistry
from chatdispatch.commands.requirements import PermissionGateRegistry


class _Channel(SimpleNamespace):
    def __init__(self, fail=False):
        super().__init__(id=5, sent=[], fail=fail)

    async def send(self, content=None, **kwargs):
        if self.fail:
            raise RuntimeError("403 Forbidden")
        self.sent.append(content if content is not None else kwargs)


# ----------------------------- Gates ----------------------------- #


def test_admin_gate_is_builtin():
    gates = PermissionGateRegistry()
    admin = SimpleNamespace(guild_permissions=SimpleNamespace(administrator=True))
    member = SimpleNamespace(guild_permissions=SimpleNamespace(administrator=False))

    assert gates.is_registered("#admin")
    assert asyncio.run(gates.check("#admin", admin)) is True
    assert asyncio.run(gates.check("#admin", member)) is False


def test_gate_ids_need_sigil():
    gates = PermissionGateRegistry()
    with pytest.raises(ConfigurationError):
        gates.register("staff", lambda actor: True)


def test_unknown_gate_denies():
    gates = PermissionGateRegistry()
    assert asyncio.run(gates.check("#ghost", SimpleNamespace())) is False


# ----------------------------- Templates ----------------------------- #


def test_builtin_template_can_be_overridden():
    templates = TemplateRegistry({"cmd.no.permission": "Nope."})
    channel = _Channel()

    asyncio.run(templates.send(NO_PERMISSION, channel))
    assert channel.sent == ["Nope."]


def test_custom_template_ids_need_sigil():
    templates = TemplateRegistry()
    with pytest.raises(ConfigurationError):
        templates.register("greeting", "hi")

    templates.register("#greeting", "hi")
    assert templates.has_id("#greeting")


def test_unknown_template_falls_back_to_literal():
    templates = TemplateRegistry()
    channel = _Channel()

    asyncio.run(templates.send("#not.registered", channel))
    assert channel.sent == ["#not.registered"]


def test_callable_template_can_return_embed():
    templates = TemplateRegistry()
    embed = discord.Embed(title="Usage")
    templates.register("#usage", lambda: embed)
    channel = _Channel()

    asyncio.run(templates.send("#usage", channel))
    assert channel.sent == [{"embed": embed}]


def test_send_failure_is_logged(caplog):
    templates = TemplateRegistry()

    asyncio.run(templates.send(NO_PERMISSION, _Channel(fail=True)))
    assert "Failed to send message cmd.no.permission" in caplog.text


def test_failing_callable_template_is_logged(caplog):
    templates = TemplateRegistry()

    def broken():
        raise RuntimeError("template bug")

    templates.register("#broken", broken)
    channel = _Channel()

    asyncio.run(templates.send("#broken", channel))
    assert channel.sent == []
    assert "Failed to send message #broken" in caplog.text
