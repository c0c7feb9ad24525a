"""
Registration API for text commands.

The manager owns the resolver, requirement and template registries and the
current :class:`CommandSnapshot`. Registration calls are serialized by a single
writer lock and publish a fresh snapshot; dispatches read the snapshot
attribute without locking.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, Mapping

from .base import CommandBase
from .dispatcher import DispatchOutcome, Dispatcher
from .errors import ConfigurationError
from .messages import Template, TemplateRegistry
from .parameters import Resolver, TypeResolverRegistry
from .registrar import merge_handler
from .requirements import Gate, PermissionGateRegistry
from .table import CommandSnapshot

logger = logging.getLogger(__name__)


class CommandManager:
    """Registers command handlers and dispatches messages to them."""

    def __init__(self, client: Any = None, *, messages: Mapping[str, str] | None = None) -> None:
        self.client = client
        self.resolvers = TypeResolverRegistry()
        self.requirements = PermissionGateRegistry()
        self.templates = TemplateRegistry(messages)
        self.dispatcher = Dispatcher(self)

        self._lock = threading.Lock()
        self._snapshot = CommandSnapshot()

    @property
    def snapshot(self) -> CommandSnapshot:
        return self._snapshot

    def register(
        self,
        handler: CommandBase,
        *,
        names: Iterable[str] | None = None,
        prefixes: Iterable[str] | None = None,
    ) -> None:
        """
        Register ``handler`` under ``names`` with ``prefixes``.

        Both default to the handler's class attributes. Registering under a
        name that already exists adds the handler's sub-commands to it.

        :raises ConfigurationError: if any declared operation is invalid.
        """

        if not isinstance(handler, CommandBase):
            raise ConfigurationError(
                f"{type(handler).__name__} must subclass CommandBase to be registered"
            )

        names = list(names if names is not None else handler.names)
        prefixes = list(prefixes if prefixes is not None else handler.prefixes)

        with self._lock:
            snapshot = merge_handler(
                self._snapshot,
                handler,
                names,
                prefixes,
                self.resolvers,
                self.requirements,
            )
            handler.client = self.client
            self._snapshot = snapshot

        logger.info(
            "Registered %s as %s with prefixes %s",
            type(handler).__name__,
            ", ".join(names),
            ", ".join(repr(p) for p in prefixes),
        )

    def register_parameter(self, param_type: Any, resolver: Resolver) -> None:
        with self._lock:
            self.resolvers.register(param_type, resolver)

    def register_requirement(self, requirement_id: str, gate: Gate) -> None:
        with self._lock:
            self.requirements.register(requirement_id, gate)

    def register_message(self, message_id: str, template: Template) -> None:
        with self._lock:
            self.templates.register(message_id, template)

    def unregister(self, name: str) -> None:
        """Commands stay registered for the life of the process; this is a no-op."""

        logger.debug("Ignoring unregister request for command %r", name)

    async def dispatch(self, message: Any) -> DispatchOutcome:
        return await self.dispatcher.dispatch(message)


__all__ = ["CommandManager"]
