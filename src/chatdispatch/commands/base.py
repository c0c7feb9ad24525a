"""
Declarative building blocks for command handlers.

A handler is a :class:`CommandBase` subclass whose public methods are tagged
with :func:`default` or :func:`sub_command`::

    class Help(CommandBase):
        names = ("help",)
        prefixes = ("!",)

        @default(params=[Param("args", RestArgs)])
        async def overview(self, ctx, args): ...

        @sub_command("topic", params=[Param("name", str)])
        async def topic(self, ctx, name): ...

Each tag attaches an :class:`OperationSpec` to the function. The specs are
collected once when the class is created, so registration never inspects
method signatures; the declared ``params`` are the only source of truth for
argument binding.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, List, NewType, Sequence, Tuple

import discord

RequirementId = NewType("RequirementId", str)
MessageId = NewType("MessageId", str)

_SPEC_ATTR = "__operation_spec__"


class RestArgs(tuple):
    """Variadic parameter type: all remaining tokens, in order, as one value."""

    __slots__ = ()


@dataclass(frozen=True, slots=True)
class Param:
    """One declared parameter of an operation."""

    name: str
    type: Any
    optional: bool = False


@dataclass(frozen=True, slots=True)
class OperationSpec:
    """Static description of a handler operation, as declared by its decorator."""

    labels: Tuple[str, ...] = ()
    params: Tuple[Param, ...] = ()
    is_default: bool = False
    requirement: RequirementId | None = None
    delete: bool = False
    usage: MessageId | None = None


@dataclass(slots=True)
class CommandContext:
    """Runtime metadata describing the message being dispatched."""

    message: discord.Message
    client: Any = None
    command: str = ""
    label: str | None = None
    prefix: str = ""

    @property
    def author(self) -> Any:
        return getattr(self.message, "author", None)

    @property
    def channel(self) -> Any:
        return getattr(self.message, "channel", None)

    @property
    def guild(self) -> Any:
        return getattr(self.message, "guild", None)

    async def send(self, *args: Any, **kwargs: Any) -> Any:
        """Reply in the channel the command came from."""

        return await self.channel.send(*args, **kwargs)


def _tag(func: Callable[..., Any], spec: OperationSpec) -> Callable[..., Any]:
    existing: OperationSpec | None = getattr(func, _SPEC_ATTR, None)
    if existing is not None:
        # Stacked tags are merged and left for the registrar to reject.
        spec = replace(
            existing,
            labels=existing.labels + spec.labels,
            is_default=existing.is_default or spec.is_default,
        )
    setattr(func, _SPEC_ATTR, spec)
    return func


def _spec_kwargs(
    params: Iterable[Param],
    requirement: str | None,
    delete: bool,
    usage: str | None,
) -> dict[str, Any]:
    return {
        "params": tuple(params),
        "requirement": RequirementId(requirement) if requirement is not None else None,
        "delete": delete,
        "usage": MessageId(usage) if usage is not None else None,
    }


def default(
    *,
    params: Sequence[Param] = (),
    requirement: str | None = None,
    delete: bool = False,
    usage: str | None = None,
):
    """Mark a method as the operation run when no known sub-command is given."""

    spec = OperationSpec(is_default=True, **_spec_kwargs(params, requirement, delete, usage))

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        return _tag(func, spec)

    return decorator


def sub_command(
    *labels: str,
    params: Sequence[Param] = (),
    requirement: str | None = None,
    delete: bool = False,
    usage: str | None = None,
):
    """Mark a method as the operation reached through one or more labels."""

    spec = OperationSpec(labels=tuple(labels), **_spec_kwargs(params, requirement, delete, usage))

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        return _tag(func, spec)

    return decorator


class CommandBase:
    """
    Base class for text command handlers.

    ``names`` and ``prefixes`` are the command names and prefixes used when the
    handler is registered without explicit ones. ``client`` is injected by the
    :class:`~chatdispatch.commands.manager.CommandManager` on registration.
    """

    names: Tuple[str, ...] = ()
    prefixes: Tuple[str, ...] = ()
    client: Any = None

    __operations__: Tuple[Tuple[str, OperationSpec], ...] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        collected: dict[str, OperationSpec] = {}
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                if attr.startswith("_"):
                    continue
                spec = getattr(value, _SPEC_ATTR, None)
                if isinstance(spec, OperationSpec):
                    collected[attr] = spec
                elif attr in collected:
                    # Overridden without a tag in a subclass.
                    del collected[attr]
        cls.__operations__ = tuple(collected.items())

    def operations(self) -> List[Tuple[OperationSpec, Callable[..., Any]]]:
        """Return every declared operation bound to this instance."""

        return [(spec, getattr(self, attr)) for attr, spec in self.__operations__]


__all__ = [
    "CommandBase",
    "CommandContext",
    "MessageId",
    "OperationSpec",
    "Param",
    "RequirementId",
    "RestArgs",
    "default",
    "sub_command",
]
