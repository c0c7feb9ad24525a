"""
Parameter type resolvers.

A resolver turns one raw token into the value bound to a declared parameter.
It receives the token and a :class:`ConversionContext` and either returns the
converted value or raises :class:`ConversionFailure`. The registry is filled
during startup and only read while dispatching.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict

import discord

from .base import RestArgs
from .errors import ConfigurationError, ConversionFailure

if TYPE_CHECKING:
    from .table import OperationDescriptor

logger = logging.getLogger(__name__)

_MENTION_RE = re.compile(r"^<(?P<kind>@!?|@&|#)(?P<id>\d+)>$")
_SNOWFLAKE_RE = re.compile(r"^\d{15,20}$")

_TRUE_WORDS = frozenset({"true", "yes", "y", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "n", "off", "0"})


@dataclass(slots=True)
class ConversionContext:
    """What a resolver knows about the parameter it is converting."""

    operation: "OperationDescriptor"
    param_name: str
    message: Any = None

    @property
    def guild(self) -> Any:
        return getattr(self.message, "guild", None)


Resolver = Callable[[str, ConversionContext], Any]


def _entity_id(token: str, kinds: tuple[str, ...]) -> int | None:
    match = _MENTION_RE.match(token)
    if match:
        return int(match.group("id")) if match.group("kind") in kinds else None
    if _SNOWFLAKE_RE.match(token):
        return int(token)
    return None


# ----------------------------- Built-in resolvers ----------------------------- #


def _resolve_str(token: str, context: ConversionContext) -> str:
    return token


def _resolve_int(token: str, context: ConversionContext) -> int:
    try:
        return int(token)
    except ValueError as exc:
        raise ConversionFailure(
            f"{context.param_name} must be a whole number", message_id="cmd.arg.number"
        ) from exc


def _resolve_float(token: str, context: ConversionContext) -> float:
    try:
        return float(token)
    except ValueError as exc:
        raise ConversionFailure(
            f"{context.param_name} must be a number", message_id="cmd.arg.number"
        ) from exc


def _resolve_bool(token: str, context: ConversionContext) -> bool:
    lowered = token.lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise ConversionFailure(
        f"{context.param_name} must be true or false", message_id="cmd.arg.bool"
    )


def _resolve_rest(token: Any, context: ConversionContext) -> RestArgs:
    if isinstance(token, str):
        return RestArgs((token,))
    return RestArgs(token)


def _resolve_member(token: str, context: ConversionContext) -> discord.Member:
    guild = context.guild
    entity_id = _entity_id(token, ("@", "@!"))
    member = guild.get_member(entity_id) if guild is not None and entity_id is not None else None
    if member is None:
        raise ConversionFailure(f"unknown member {token!r}", message_id="cmd.arg.member")
    return member


def _resolve_user(token: str, context: ConversionContext) -> discord.User | discord.Member:
    entity_id = _entity_id(token, ("@", "@!"))
    user = None
    if entity_id is not None:
        guild = context.guild
        if guild is not None:
            user = guild.get_member(entity_id)
        client = context.operation.handler.client
        if user is None and client is not None:
            user = client.get_user(entity_id)
    if user is None:
        raise ConversionFailure(f"unknown user {token!r}", message_id="cmd.arg.member")
    return user


def _resolve_role(token: str, context: ConversionContext) -> discord.Role:
    guild = context.guild
    entity_id = _entity_id(token, ("@&",))
    role = guild.get_role(entity_id) if guild is not None and entity_id is not None else None
    if role is None:
        raise ConversionFailure(f"unknown role {token!r}", message_id="cmd.arg.role")
    return role


def _resolve_text_channel(token: str, context: ConversionContext) -> discord.TextChannel:
    guild = context.guild
    entity_id = _entity_id(token, ("#",))
    channel = guild.get_channel(entity_id) if guild is not None and entity_id is not None else None
    if not isinstance(channel, discord.TextChannel):
        raise ConversionFailure(f"unknown channel {token!r}", message_id="cmd.arg.channel")
    return channel


_BUILTIN_RESOLVERS: Dict[Any, Resolver] = {
    str: _resolve_str,
    int: _resolve_int,
    float: _resolve_float,
    bool: _resolve_bool,
    RestArgs: _resolve_rest,
    discord.Member: _resolve_member,
    discord.User: _resolve_user,
    discord.Role: _resolve_role,
    discord.TextChannel: _resolve_text_channel,
}


class TypeResolverRegistry:
    """Maps a parameter type to the resolver converting tokens into it."""

    def __init__(self, *, builtins: bool = True) -> None:
        self._resolvers: Dict[Any, Resolver] = dict(_BUILTIN_RESOLVERS) if builtins else {}

    def register(self, param_type: Any, resolver: Resolver) -> None:
        if not callable(resolver):
            raise ConfigurationError(f"Resolver for {param_type!r} is not callable")
        if param_type in self._resolvers:
            logger.info("Replacing resolver for parameter type %r", param_type)
        self._resolvers[param_type] = resolver

    def is_registered(self, param_type: Any) -> bool:
        return param_type in self._resolvers

    def resolve(self, param_type: Any, token: str, context: ConversionContext) -> Any:
        """
        Convert ``token`` for a parameter of ``param_type``.

        :raises ConversionFailure: when the resolver rejects the token.
        :raises KeyError: when no resolver exists for ``param_type``.
        """

        return self._resolvers[param_type](token, context)


__all__ = [
    "ConversionContext",
    "Resolver",
    "TypeResolverRegistry",
]
