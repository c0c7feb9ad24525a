"""
User-facing message templates.

Templates are looked up by id at send time. Built-in ids use the ``cmd.``
namespace and may be overridden; application ids must start with ``#``.
Sending an unknown id falls back to sending the id itself as literal text.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Union

import discord

from .base import MessageId
from .errors import ConfigurationError
from .requirements import SIGIL

logger = logging.getLogger(__name__)

Template = Union[str, Callable[[], Union[str, discord.Embed]]]

NO_SUCH_COMMAND = MessageId("cmd.no.exists")
WRONG_USAGE = MessageId("cmd.wrong.usage")
NO_PERMISSION = MessageId("cmd.no.permission")

DEFAULT_TEMPLATES: Dict[MessageId, str] = {
    NO_SUCH_COMMAND: "That command doesn't exist.",
    WRONG_USAGE: "Wrong usage of that command.",
    NO_PERMISSION: "You don't have permission to use that command.",
    MessageId("cmd.arg.number"): "That argument must be a number.",
    MessageId("cmd.arg.bool"): "That argument must be yes or no.",
    MessageId("cmd.arg.member"):"I couldn't find that member.",
    MessageId("cmd.arg.role"): "I couldn't find that role.",
    MessageId("cmd.arg.channel"): "I couldn't find that channel.",
}


class TemplateRegistry:
    """Resolves message ids to display text (or embeds)."""

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        self._templates: Dict[MessageId, Template] = dict(DEFAULT_TEMPLATES)
        for message_id, text in (overrides or {}).items():
            self.register(message_id, text)

    def register(self, message_id: str, template: Template) -> None:
        if not message_id.startswith(SIGIL) and message_id not in DEFAULT_TEMPLATES:
            raise ConfigurationError(
                f"Message id {message_id!r} must start with {SIGIL!r}"
            )
        self._templates[MessageId(message_id)] = template

    def has_id(self, message_id: str) -> bool:
        return message_id in self._templates

    def render(self, message_id: str) -> Union[str, discord.Embed]:
        """Return the content for ``message_id``, or the id itself if unknown."""

        template = self._templates.get(MessageId(message_id))
        if template is None:
            return message_id
        if callable(template):
            return template()
        return template

    async def send(self, message_id: str, channel: Any) -> None:
        """Send the rendered template to ``channel``; send failures are logged."""

        try:
            content = self.render(message_id)
            if isinstance(content, discord.Embed):
                await channel.send(embed=content)
            else:
                await channel.send(content)
        except Exception:
            logger.exception(
                "Failed to send message %s to channel %s",
                message_id,
                getattr(channel, "id", "unknown"),
            )


__all__ = [
    "DEFAULT_TEMPLATES",
    "NO_PERMISSION",
    "NO_SUCH_COMMAND",
    "Template",
    "TemplateRegistry",
    "WRONG_USAGE",
]
