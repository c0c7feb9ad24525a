import discord

import logging

logger = logging.getLogger(__name__)


async def handle(client: discord.Client):
    """Log the login and the command table on client ready event."""
    logger.info(f"Logged in as {client.user.name} (ID: {client.user.id})")

    snapshot = client.command_manager.snapshot
    if not len(snapshot):
        logger.warning("Ready with an empty command table")
        return

    for table in snapshot:
        labels = ", ".join(sorted(table.sub_commands)) or "-"
        logger.info(
            "Command %s (prefixes %s; default: %s; sub-commands: %s)",
            table.name,
            " ".join(table.prefixes),
            "yes" if table.default is not None else "no",
            labels,
        )
