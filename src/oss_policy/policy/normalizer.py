"""Policy – statement normalization.

A statement naming *k* resources is expanded into *k* single-resource units;
units are the granularity of merge, lookup and evaluation.  Canonical
(lower-cased) keys are computed once here so that downstream comparisons are
plain equality.
"""
from __future__ import annotations

import dataclasses
from typing import Iterable, Sequence

from oss_policy.policy.models import Effect, Statement
from oss_policy.policy.resources import canonical


@dataclasses.dataclass(frozen=True)
class ScopedStatement:
    """A statement narrowed to exactly one resource.

    ``origin`` is the index of the statement it was expanded from, used to
    regroup surviving units before a document is written back.
    """

    source: Statement
    resource: str
    origin: int
    effect: Effect | None = dataclasses.field(init=False)
    resource_key: str = dataclasses.field(init=False)
    action_keys: frozenset[str] = dataclasses.field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "effect", Effect.coerce(self.source.effect))
        object.__setattr__(self, "resource_key", canonical(self.resource))
        object.__setattr__(
            self, "action_keys", frozenset(canonical(a) for a in self.source.actions if isinstance(a, str))
        )

    @property
    def actions(self) -> tuple[str, ...]:
        return self.source.actions

    def has_action(self, action: str) -> bool:
        return canonical(action) in self.action_keys

    def to_statement(self) -> Statement:
        return self.source.with_resources((self.resource,))


def normalize(statements: Sequence[Statement]) -> tuple[ScopedStatement, ...]:
    """Expand every statement into one unit per resource, preserving order.

    Statements without resources grant nothing and are dropped.
    """
    return tuple(
        ScopedStatement(source=statement, resource=resource, origin=index)
        for index, statement in enumerate(statements)
        for resource in statement.resources
    )


def regroup(units: Iterable[ScopedStatement]) -> tuple[Statement, ...]:
    """Fold consecutive units expanded from the same statement back into one."""
    grouped: list[tuple[ScopedStatement, list[str]]] = []
    for unit in units:
        if grouped:
            head, resources = grouped[-1]
            if head.origin == unit.origin and head.source is unit.source:
                resources.append(unit.resource)
                continue
        grouped.append((unit, [unit.resource]))
    return tuple(head.source.with_resources(resources) for head, resources in grouped)


__all__ = ["ScopedStatement", "normalize", "regroup"]
