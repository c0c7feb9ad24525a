"""Discord bot bootstrap utilities."""

from __future__ import annotations

import logging

import discord

from chatdispatch import commands as cd_commands
from chatdispatch.commands import CommandManager
from chatdispatch.config import core
from chatdispatch.event_hooks import message_hook, ready_hook

logger = logging.getLogger(__name__)

# --- Intents --------------------------------------------------------------- #
intents = discord.Intents.default()
intents.message_content = True
intents.members = True


class DispatchBot(discord.Client):
    """Discord client that routes prefixed text messages to command handlers."""

    def __init__(self) -> None:
        super().__init__(intents=intents)
        self.command_manager = CommandManager(self, messages=core.MESSAGES)

    async def setup_hook(self) -> None:
        """Register text command handlers before any message is delivered."""

        self.command_manager.register_message(
            "#help.topic.usage",
            f"Usage: `{core.COMMAND_PREFIXES[0]}help topic <command>`",
        )
        cd_commands.setup(self.command_manager, prefixes=core.COMMAND_PREFIXES)


bot = DispatchBot()


@bot.event
async def on_ready() -> None:
    await ready_hook.handle(bot)


@bot.event
async def on_message(message: discord.Message) -> None:
    await message_hook.handle(bot, message)


def run() -> None:
    """Start the Discord bot using configuration from the environment."""

    if not core.DISCORD_API_TOKEN:
        logger.error("No DISCORD_API_TOKEN configured. Cannot run client.")
        return

    try:
        bot.run(core.DISCORD_API_TOKEN, log_handler=None)
    except discord.LoginFailure as exc:
        logger.error("Login failed: %s", exc)
