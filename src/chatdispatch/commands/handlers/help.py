from __future__ import annotations

from ..base import CommandBase, CommandContext, Param, RestArgs, default, sub_command
from .. import register_command


def _snapshot(ctx: CommandContext):
    manager = getattr(ctx.client, "command_manager", None)
    return manager.snapshot if manager is not None else None


@register_command
class Help(CommandBase):
    """List available text commands."""

    names = ("help",)

    @default(params=[Param("args", RestArgs)])
    async def overview(self, ctx: CommandContext, args: RestArgs) -> None:
        """
        Send a comma-separated list of registered commands to the channel.
        """

        snapshot = _snapshot(ctx)
        command_names = sorted(snapshot.names()) if snapshot is not None else []
        listing = ", ".join(command_names) if command_names else "None registered"
        await ctx.send(f"Available commands: {listing}")

    @sub_command("topic", params=[Param("name", str)], usage="#help.topic.usage")
    async def topic(self, ctx: CommandContext, name: str) -> None:
        """Describe the prefixes and sub-commands of one command."""

        snapshot = _snapshot(ctx)
        table = snapshot.get(name) if snapshot is not None else None
        if table is None:
            await ctx.send(f"No command named {name!r}.")
            return

        prefixes = " ".join(f"`{p}{table.name}`" for p in table.prefixes)
        labels = ", ".join(sorted(table.sub_commands)) or "none"
        await ctx.send(f"{prefixes} sub-commands: {labels}")
