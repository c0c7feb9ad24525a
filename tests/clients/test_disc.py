import asyncio

from chatdispatch.clients import disc


def test_setup_hook_registers_handlers_and_usage_template():
    asyncio.run(disc.bot.setup_hook())

    manager = disc.bot.command_manager
    assert {"help", "lobotomy"}.issubset(set(manager.snapshot.names()))
    assert manager.templates.has_id("#help.topic.usage")
    assert manager.client is disc.bot


def test_run_without_token_logs_error(monkeypatch, caplog):
    started = []
    monkeypatch.setattr(disc.core, "DISCORD_API_TOKEN", None)
    monkeypatch.setattr(disc.bot, "run", lambda *a, **k: started.append(a))

    disc.run()

    assert started == []
    assert "No DISCORD_API_TOKEN configured" in caplog.text
