"""
Message intake: route one inbound message to at most one operation.

Each message walks a small state machine::

    Received -> PrefixMatched -> CommandMatched -> SubcommandResolved
             -> PermissionGranted -> ArgumentsBound -> Invoked

Leaving it early either ignores the message silently (empty text, no prefix
match) or sends exactly one templated reply to the originating channel.
Nothing raised by a handler or resolver escapes :meth:`Dispatcher.dispatch`.
"""

from __future__ import annotations

import asyncio
import enum
import inspect
import logging
from typing import TYPE_CHECKING, Any, List, Set, Tuple

from .base import CommandContext
from .binding import bind_arguments
from .errors import ConversionFailure, WrongUsage
from .messages import NO_PERMISSION, NO_SUCH_COMMAND, WRONG_USAGE
from .requirements import SIGIL
from .table import CommandSnapshot, CommandTable, OperationDescriptor

if TYPE_CHECKING:
    from .manager import CommandManager

logger = logging.getLogger(__name__)


class DispatchOutcome(enum.Enum):
    """Terminal state reached by one dispatch."""

    IGNORED = "ignored"
    NO_SUCH_COMMAND = "no-such-command"
    WRONG_USAGE = "wrong-usage"
    NO_PERMISSION = "no-permission"
    CONVERSION_FAILED = "conversion-failed"
    INVOKED = "invoked"


def _log_background_task(task: asyncio.Task[Any]) -> None:
    if task.cancelled():
        return
    try:
        task.result()
    except Exception:
        logger.warning("Deleting a command message failed", exc_info=True)


class Dispatcher:
    """Routes messages using the manager's current command snapshot."""

    def __init__(self, manager: "CommandManager") -> None:
        self._manager = manager
        self._background: Set[asyncio.Task[Any]] = set()

    # ----------------------------- Matching ----------------------------- #

    @staticmethod
    def match(snapshot: CommandSnapshot, token: str) -> Tuple[bool, CommandTable | None, str]:
        """
        Match the first token of a message against every table.

        Returns ``(prefix_matched, table, prefix)``. ``table`` is ``None`` when a
        prefix matched but no command of that prefix carries the typed name.
        """

        prefix_matched = False
        for table in snapshot:
            prefix = table.match_prefix(token)
            if prefix is None:
                continue
            prefix_matched = True
            if token[len(prefix):].lower() == table.name:
                return True, table, prefix
        return prefix_matched, None, ""

    # ----------------------------- Reporting ----------------------------- #

    async def _report(self, message_id: str, message: Any) -> None:
        logger.debug(
            "Reporting %s for message %s", message_id, getattr(message, "id", "unknown")
        )
        await self._manager.templates.send(message_id, message.channel)

    async def _wrong_usage(self, message: Any, descriptor: OperationDescriptor | None) -> None:
        usage = descriptor.usage if descriptor is not None else None
        templates = self._manager.templates
        if usage and usage.startswith(SIGIL) and templates.has_id(usage):
            await self._report(usage, message)
            return
        await self._report(WRONG_USAGE, message)

    # ----------------------------- Side effects ----------------------------- #

    def _schedule_delete(self, message: Any) -> None:
        coro = None
        try:
            coro = message.delete()
            task = asyncio.create_task(coro)
        except Exception:
            if inspect.iscoroutine(coro):
                coro.close()
            logger.warning("Could not request deletion of message %s", getattr(message, "id", "unknown"), exc_info=True)
            return
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        task.add_done_callback(_log_background_task)

    async def _invoke(self, descriptor: OperationDescriptor, ctx: CommandContext, args: List[Any]) -> None:
        try:
            result = descriptor.func(ctx, *args)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(
                "Command %s (%s) failed for message %s",
                ctx.command,
                descriptor.name,
                getattr(ctx.message, "id", "unknown"),
            )

    # ----------------------------- Entry point ----------------------------- #

    async def dispatch(self, message: Any) -> DispatchOutcome:
        """Run ``message`` through the command state machine exactly once."""

        tokens = (getattr(message, "content", None) or "").split()
        if not tokens:
            return DispatchOutcome.IGNORED

        prefix_matched, table, prefix = self.match(self._manager.snapshot, tokens[0])
        if not prefix_matched:
            return DispatchOutcome.IGNORED

        if table is None:
            await self._report(NO_SUCH_COMMAND, message)
            return DispatchOutcome.NO_SUCH_COMMAND

        label = tokens[1].lower() if len(tokens) > 1 else None
        descriptor = table.lookup(label)
        if descriptor is None:
            await self._wrong_usage(message, None)
            return DispatchOutcome.WRONG_USAGE

        if descriptor.requirement is not None:
            allowed = await self._manager.requirements.check(
                descriptor.requirement, getattr(message, "author", None)
            )
            if not allowed:
                await self._report(NO_PERMISSION, message)
                return DispatchOutcome.NO_PERMISSION

        try:
            args = bind_arguments(tokens, descriptor, self._manager.resolvers, message)
        except WrongUsage as exc:
            logger.debug("Wrong usage of %s: %s", table.name, exc)
            await self._wrong_usage(message, descriptor)
            return DispatchOutcome.WRONG_USAGE
        except ConversionFailure as exc:
            logger.debug("Conversion failed for %s: %s", table.name, exc)
            if exc.message_id and self._manager.templates.has_id(exc.message_id):
                await self._report(exc.message_id, message)
            else:
                await self._wrong_usage(message, descriptor)
            return DispatchOutcome.CONVERSION_FAILED
        except Exception:
            logger.exception(
                "Resolver failed while binding %s for message %s",
                table.name,
                getattr(message, "id", "unknown"),
            )
            await self._wrong_usage(message, descriptor)
            return DispatchOutcome.CONVERSION_FAILED

        if descriptor.should_delete:
            self._schedule_delete(message)

        ctx = CommandContext(
            message=message,
            client=self._manager.client,
            command=table.name,
            label=None if descriptor.is_default else label,
            prefix=prefix,
        )
        logger.info(
            "Invoking %s%s%s for %s",
            prefix,
            table.name,
            f" {ctx.label}" if ctx.label else "",
            getattr(getattr(message, "author", None), "id", "unknown"),
        )
        await self._invoke(descriptor, ctx, args)
        return DispatchOutcome.INVOKED


__all__ = ["DispatchOutcome", "Dispatcher"]
