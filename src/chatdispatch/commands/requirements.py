"""
Permission gates ("requirements") keyed by ``#``-prefixed ids.

A gate is a predicate over the invoking actor. It may be a plain function or a
coroutine function; anything other than a truthy result, including an
exception or a missing actor, counts as a denial.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Union

from .base import RequirementId
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

SIGIL = "#"

Gate = Callable[[Any], Union[bool, Awaitable[bool]]]


def is_administrator(actor: Any) -> bool:
    """Default ``#admin`` gate: the member holds the administrator permission."""

    permissions = getattr(actor, "guild_permissions", None)
    return bool(getattr(permissions, "administrator", False))


class PermissionGateRegistry:
    """Maps requirement ids to gate predicates."""

    def __init__(self, *, builtins: bool = True) -> None:
        self._gates: Dict[RequirementId, Gate] = {}
        if builtins:
            self.register(RequirementId("#admin"), is_administrator)

    def register(self, requirement_id: str, gate: Gate) -> None:
        if not requirement_id.startswith(SIGIL):
            raise ConfigurationError(
                f"Requirement id {requirement_id!r} must start with {SIGIL!r}"
            )
        if not callable(gate):
            raise ConfigurationError(f"Requirement {requirement_id!r} is not callable")
        self._gates[RequirementId(requirement_id)] = gate

    def is_registered(self, requirement_id: str) -> bool:
        return requirement_id in self._gates

    async def check(self, requirement_id: str, actor: Any) -> bool:
        """Evaluate the gate for ``actor``; failures are reported as denial."""

        gate = self._gates.get(RequirementId(requirement_id))
        if gate is None or actor is None:
            logger.debug("Requirement %s denied: no gate or no actor", requirement_id)
            return False

        try:
            result = gate(actor)
            if inspect.isawaitable(result):
                result = await result
        except Exception:
            logger.exception("Requirement %s raised while checking %r", requirement_id, actor)
            return False

        return bool(result)


__all__ = ["Gate", "PermissionGateRegistry", "SIGIL", "is_administrator"]
