import logging

import discord

from chatdispatch.config import core

logger = logging.getLogger(__name__)


async def handle(client: discord.Client, message: discord.Message):
    """Handle incoming Discord messages."""

    author = getattr(message, "author", None)

    # 1) Never react to ourselves, and optionally to no bot at all
    if author is not None and client.user is not None and author.id == client.user.id:
        return
    if core.IGNORE_BOTS and getattr(author, "bot", False):
        logger.debug("Skipping bot message %s", message.id)
        return

    # 2) Route through the command dispatcher; rejections are reported there
    outcome = await client.command_manager.dispatch(message)
    logger.debug("Message %s dispatched: %s", message.id, outcome.value)
