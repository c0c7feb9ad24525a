"""
Auto-discovery & registry for text command handlers.

Any module inside ``commands/handlers`` that defines::

    from chatdispatch.commands import register_command
    from chatdispatch.commands.base import CommandBase, default

    @register_command
    class MyCommand(CommandBase):
        names = ("mine",)

        @default()
        async def run(self, ctx): ...

is picked up automatically at import-time. Invoking :func:`setup` registers
every discovered handler with a :class:`CommandManager`.
"""

from __future__ import annotations

import logging
from importlib import import_module
from pathlib import Path
from pkgutil import iter_modules
from typing import Iterable, List, Optional, Type

from .base import (
    CommandBase,
    CommandContext,
    Param,
    RestArgs,
    default,
    sub_command,
)
from .dispatcher import DispatchOutcome
from .errors import ConfigurationError, ConversionFailure
from .manager import CommandManager

logger = logging.getLogger(__name__)

_HANDLER_CLASSES: List[Type[CommandBase]] = []


def register_command(cls: Optional[Type[CommandBase]] = None):
    """Decorator registering a handler class for later attachment to a manager."""

    def _register(handler_cls: Type[CommandBase]):
        if not issubclass(handler_cls, CommandBase):
            raise TypeError("register_command expects a CommandBase subclass")

        _HANDLER_CLASSES.append(handler_cls)
        return handler_cls

    if cls is None:
        return _register
    return _register(cls)


def registered_handlers() -> List[Type[CommandBase]]:
    return list(_HANDLER_CLASSES)


def _is_attached(manager: CommandManager, handler_cls: Type[CommandBase]) -> bool:
    for table in manager.snapshot:
        operations = list(table.sub_commands.values())
        if table.default is not None:
            operations.append(table.default)
        if any(type(op.handler) is handler_cls for op in operations):
            return True
    return False


def setup(manager: CommandManager, *, prefixes: Iterable[str] = ("!",)) -> None:
    """
    Register every discovered handler with ``manager``.

    Handlers that declare no prefixes of their own use ``prefixes``. This must
    run before the client starts delivering messages.
    """

    fallback = tuple(prefixes)
    for handler_cls in _HANDLER_CLASSES:
        if _is_attached(manager, handler_cls):
            continue
        manager.register(handler_cls(), prefixes=handler_cls.prefixes or fallback)

    if _HANDLER_CLASSES:
        logger.info("Registered %d command handler(s)", len(_HANDLER_CLASSES))
    else:
        logger.warning("No command handlers discovered; command table is empty")


_pkg_path = Path(__file__).resolve().parent / "handlers"
for _, modname, _ in iter_modules([str(_pkg_path)]):
    if modname.startswith("_"):
        continue
    import_module(f"{__name__}.handlers.{modname}")


__all__ = [
    "CommandBase",
    "CommandContext",
    "CommandManager",
    "ConfigurationError",
    "ConversionFailure",
    "DispatchOutcome",
    "Param",
    "RestArgs",
    "default",
    "register_command",
    "registered_handlers",
    "setup",
    "sub_command",
]
