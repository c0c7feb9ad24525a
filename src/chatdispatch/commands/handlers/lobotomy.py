from __future__ import annotations

from ..base import CommandBase, CommandContext, default
from .. import register_command


@register_command
class Lobotomy(CommandBase):
    """Admin-only utility command for demo purposes."""

    names = ("lobotomy",)

    @default(requirement="#admin", delete=True)
    async def lobotomy(self, ctx: CommandContext) -> None:
        """Respond with the lobotomy confirmation message."""

        await ctx.send("Initiating lobotomy sequence...")
