"""
Build validated operation descriptors from a handler and merge them into the
command tables.

Every problem found here is a programming error in the handler declaration
and raises :class:`ConfigurationError`; nothing is registered for a handler
that fails validation.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Tuple

from .base import CommandBase, OperationSpec, RestArgs
from .errors import ConfigurationError
from .parameters import TypeResolverRegistry
from .requirements import SIGIL, PermissionGateRegistry
from .table import CommandSnapshot, CommandTable, OperationDescriptor

logger = logging.getLogger(__name__)


def _fail(handler: CommandBase, spec_owner: str, reason: str) -> ConfigurationError:
    return ConfigurationError(
        f"Method {spec_owner} in class {type(handler).__name__} - {reason}"
    )


def build_descriptor(
    handler: CommandBase,
    spec: OperationSpec,
    func,
    resolvers: TypeResolverRegistry,
    requirements: PermissionGateRegistry,
) -> OperationDescriptor:
    """Validate one declared operation and turn it into a descriptor."""

    owner = getattr(func, "__name__", repr(func))
    last = len(spec.params) - 1

    for index, param in enumerate(spec.params):
        if not resolvers.is_registered(param.type):
            raise _fail(handler, owner, f"parameter {param.name!r} has unregistered type {param.type!r}")
        if param.type is RestArgs and index != last:
            raise _fail(handler, owner, f"rest parameter {param.name!r} must be the last parameter")
        if param.optional and index != last:
            raise _fail(handler, owner, f"optional parameter {param.name!r} must be the last parameter")

    if spec.requirement is not None:
        if not spec.requirement.startswith(SIGIL):
            raise _fail(handler, owner, f"requirement id {spec.requirement!r} must start with {SIGIL!r}")
        if not requirements.is_registered(spec.requirement):
            raise _fail(handler, owner, f"requirement {spec.requirement!r} is not registered")

    if spec.is_default and spec.labels:
        raise _fail(handler, owner, "an operation cannot be both default and a sub-command")
    if not spec.is_default and not spec.labels:
        raise _fail(handler, owner, "a sub-command needs at least one label")

    return OperationDescriptor(
        handler=handler,
        func=func,
        params=spec.params,
        labels=tuple(label.lower() for label in spec.labels),
        is_default=spec.is_default,
        has_optional=bool(spec.params) and spec.params[-1].optional,
        should_delete=spec.delete,
        requirement=spec.requirement,
        usage=spec.usage,
    )


def build_operations(
    handler: CommandBase,
    resolvers: TypeResolverRegistry,
    requirements: PermissionGateRegistry,
) -> Tuple[Dict[str, OperationDescriptor], OperationDescriptor | None]:
    """Return ``(label -> descriptor, default descriptor)`` for ``handler``."""

    sub_commands: Dict[str, OperationDescriptor] = {}
    default: OperationDescriptor | None = None

    for spec, func in handler.operations():
        descriptor = build_descriptor(handler, spec, func, resolvers, requirements)
        if descriptor.is_default:
            if default is not None:
                raise _fail(handler, descriptor.name, "only one default operation is allowed")
            default = descriptor
            continue
        for label in descriptor.labels:
            if label in sub_commands:
                raise _fail(handler, descriptor.name, f"sub-command {label!r} is declared twice")
            sub_commands[label] = descriptor

    return sub_commands, default


def _merge_into(
    table: CommandTable,
    sub_commands: Dict[str, OperationDescriptor],
    default: OperationDescriptor | None,
) -> CommandTable:
    for label, descriptor in sub_commands.items():
        existing = table.sub_commands.get(label)
        if existing is not None and not existing.same_operation(descriptor):
            raise ConfigurationError(
                f"Command {table.name!r} already has a sub-command {label!r} ({existing.name})"
            )
    if (
        default is not None
        and table.default is not None
        and not table.default.same_operation(default)
    ):
        raise ConfigurationError(
            f"Command {table.name!r} already has a default operation ({table.default.name})"
        )
    return table.with_operations(sub_commands, default)


def merge_handler(
    snapshot: CommandSnapshot,
    handler: CommandBase,
    names: Iterable[str],
    prefixes: Iterable[str],
    resolvers: TypeResolverRegistry,
    requirements: PermissionGateRegistry,
) -> CommandSnapshot:
    """
    Return a new snapshot with ``handler`` registered under every name.

    An existing table for a name gains the new sub-commands (and prefixes);
    previously registered labels are kept.
    """

    names = [name for name in names if name]
    prefixes = [prefix for prefix in prefixes if prefix]
    if not names:
        raise ConfigurationError(f"Class {type(handler).__name__} needs at least one command name")
    if not prefixes:
        raise ConfigurationError(f"Class {type(handler).__name__} needs at least one prefix")

    sub_commands, default = build_operations(handler, resolvers, requirements)

    tables: List[CommandTable] = list(snapshot.tables)
    for name in names:
        lowered = name.lower()
        index = next((i for i, t in enumerate(tables) if t.name == lowered), None)
        if index is None:
            tables.append(_merge_into(CommandTable.create(lowered, prefixes), sub_commands, default))
            logger.debug("Created command table %r with prefixes %s", lowered, prefixes)
            continue
        tables[index] = _merge_into(tables[index].with_prefixes(prefixes), sub_commands, default)
        logger.debug("Merged %s into existing command table %r", type(handler).__name__, lowered)

    return CommandSnapshot(tuple(tables))


__all__ = ["build_descriptor", "build_operations", "merge_handler"]
