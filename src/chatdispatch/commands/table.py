"""
Command tables and the immutable snapshot handed to the dispatcher.

Tables are never mutated once built. Registration produces new tables and a
new :class:`CommandSnapshot`; the dispatcher reads whichever snapshot is
current without locking.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping, Tuple

from .base import MessageId, Param, RequirementId, RestArgs


@dataclass(frozen=True, slots=True)
class OperationDescriptor:
    """A validated, invocable operation of a registered handler."""

    handler: Any
    func: Callable[..., Any]
    params: Tuple[Param, ...] = ()
    labels: Tuple[str, ...] = ()
    is_default: bool = False
    has_optional: bool = False
    should_delete: bool = False
    requirement: RequirementId | None = None
    usage: MessageId | None = None

    @property
    def name(self) -> str:
        return getattr(self.func, "__qualname__", repr(self.func))

    @property
    def takes_rest(self) -> bool:
        """Whether the last declared parameter is the variadic rest type."""

        return bool(self.params) and self.params[-1].type is RestArgs

    def same_operation(self, other: "OperationDescriptor") -> bool:
        return self.handler is other.handler and self.func == other.func


def _prefix_pattern(prefix: str) -> re.Pattern[str]:
    return re.compile(rf"^{re.escape(prefix)}[a-zA-Z]")


@dataclass(frozen=True, slots=True)
class CommandTable:
    """Everything registered under one command name."""

    name: str
    prefixes: Tuple[str, ...]
    sub_commands: Mapping[str, OperationDescriptor] = field(default_factory=dict)
    default: OperationDescriptor | None = None
    _patterns: Tuple[re.Pattern[str], ...] = field(default=(), repr=False, compare=False)

    @classmethod
    def create(cls, name: str, prefixes: Iterable[str]) -> "CommandTable":
        ordered = tuple(dict.fromkeys(prefixes))
        return cls(
            name=name.lower(),
            prefixes=ordered,
            _patterns=tuple(_prefix_pattern(p) for p in ordered),
        )

    def match_prefix(self, token: str) -> str | None:
        """Return the first prefix that ``token`` starts with, followed by a letter."""

        for prefix, pattern in zip(self.prefixes, self._patterns):
            if pattern.match(token):
                return prefix
        return None

    def with_prefixes(self, prefixes: Iterable[str]) -> "CommandTable":
        merged = tuple(dict.fromkeys(self.prefixes + tuple(prefixes)))
        if merged == self.prefixes:
            return self
        return replace(
            self,
            prefixes=merged,
            _patterns=tuple(_prefix_pattern(p) for p in merged),
        )

    def with_operations(
        self,
        sub_commands: Mapping[str, OperationDescriptor],
        default: OperationDescriptor | None,
    ) -> "CommandTable":
        merged: Dict[str, OperationDescriptor] = dict(self.sub_commands)
        merged.update(sub_commands)
        return replace(
            self,
            sub_commands=merged,
            default=default if default is not None else self.default,
        )

    def lookup(self, label: str | None) -> OperationDescriptor | None:
        """
        Pick the operation for ``label``.

        The default wins when there is no label or the label is unknown;
        otherwise the labelled sub-command is returned, if any.
        """

        if self.default is not None and (label is None or label not in self.sub_commands):
            return self.default
        if label is None:
            return None
        return self.sub_commands.get(label)


@dataclass(frozen=True, slots=True)
class CommandSnapshot:
    """Immutable view of every command table, in registration order."""

    tables: Tuple[CommandTable, ...] = ()

    def __iter__(self) -> Iterator[CommandTable]:
        return iter(self.tables)

    def __len__(self) -> int:
        return len(self.tables)

    def get(self, name: str) -> CommandTable | None:
        lowered = name.lower()
        for table in self.tables:
            if table.name == lowered:
                return table
        return None

    def names(self) -> list[str]:
        return [table.name for table in self.tables]


__all__ = ["CommandSnapshot", "CommandTable", "OperationDescriptor"]
