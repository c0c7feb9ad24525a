"""
Bind message tokens to the declared parameters of an operation.

Rules, in order:

* Drop the command token, and the sub-command label unless the target is the
  default operation.
* No parameters and no tokens left: bind nothing.
* A single rest parameter receives the *original* token list, command word
  included.
* Otherwise the remaining token count must equal the parameter count, except
  that a trailing optional parameter allows one token less (bound to ``None``)
  and a trailing rest parameter allows any count from N-1 upwards.
* Each parameter is converted through its resolver; a rest parameter gets
  every token from its position to the end.
"""

from __future__ import annotations

from typing import Any, List, Sequence

from .base import RestArgs
from .errors import WrongUsage
from .parameters import ConversionContext, TypeResolverRegistry
from .table import OperationDescriptor


def _check_count(descriptor: OperationDescriptor, remaining: int) -> None:
    expected = len(descriptor.params)

    if descriptor.has_optional:
        if not expected - 1 <= remaining <= expected:
            raise WrongUsage(f"expected {expected - 1} or {expected} arguments, got {remaining}")
        return

    if descriptor.takes_rest:
        if remaining < expected - 1:
            raise WrongUsage(f"expected at least {expected - 1} arguments, got {remaining}")
        return

    if remaining != expected:
        raise WrongUsage(f"expected {expected} arguments, got {remaining}")


def bind_arguments(
    tokens: Sequence[str],
    descriptor: OperationDescriptor,
    resolvers: TypeResolverRegistry,
    message: Any = None,
) -> List[Any]:
    """
    Return the converted positional arguments for ``descriptor``.

    :raises WrongUsage: when the token count does not fit the parameters.
    :raises ConversionFailure: when a resolver rejects a token.
    """

    params = descriptor.params
    remaining: List[Any] = list(tokens[1:])
    if not descriptor.is_default and remaining:
        remaining.pop(0)

    if not params and not remaining:
        return []

    if len(params) == 1 and params[0].type is RestArgs:
        return [RestArgs(tokens)]

    _check_count(descriptor, len(remaining))

    bound: List[Any] = []
    for index, param in enumerate(params):
        if param.type is RestArgs:
            raw: Any = RestArgs(remaining[index:])
        else:
            raw = remaining[index] if index < len(remaining) else None
            if raw is None:
                # Omitted trailing optional parameter.
                bound.append(None)
                continue

        context = ConversionContext(operation=descriptor, param_name=param.name, message=message)
        bound.append(resolvers.resolve(param.type, raw, context))

    return bound


__all__ = ["bind_arguments"]
