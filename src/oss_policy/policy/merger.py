"""Policy – PolicyMerger: resource-identity supersede merge.

Merging is split into a pure computation (:func:`merge_statements`) and the
read-modify-write driver (:class:`PolicyMerger`).  Rules:

1. Existing and incoming statements are normalized to single-resource units.
2. Each incoming unit not flagged for deletion supersedes every existing unit
   with the same resource identity, whatever their effects or actions.
3. The result is the surviving incoming units (in incoming order) followed by
   the surviving existing units (in existing order): newest first.

The read-modify-write is not transactional.  Two concurrent merges on one
bucket can lose an update; callers that need atomicity wrap the call in
:meth:`~oss_policy.policy.locks.BucketLocks.exclusive`.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Collection, Iterable, Mapping, Sequence, Union

from oss_policy.kernel.errors import PolicyDocumentError, ValidationError
from oss_policy.observability.logging import get_logger
from oss_policy.policy.models import Effect, PolicyDocument, Principal, Statement
from oss_policy.policy.normalizer import ScopedStatement, normalize, regroup
from oss_policy.policy.resources import identity_equals, require_bucket
from oss_policy.policy.store import PolicyStore

logger = get_logger(__name__)

StatementInput = Union[Statement, Mapping[str, Any]]


@dataclasses.dataclass(frozen=True)
class MergeResult:
    """Outcome of a merge.

    ``superseded`` holds indices into the normalized *existing* units that were
    replaced; ``dropped`` holds indices of incoming statements that were
    flagged for deletion and therefore not emitted.
    """

    statements: tuple[Statement, ...]
    superseded: frozenset[int] = frozenset()
    dropped: frozenset[int] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.statements


def coerce_statement(value: StatementInput) -> Statement:
    """Accept a :class:`Statement` or its wire-format dict."""
    if isinstance(value, Statement):
        return value
    if isinstance(value, Mapping):
        try:
            return Statement.from_dict(value)
        except PolicyDocumentError as exc:
            raise ValidationError.for_field("statement", exc.message, cause=exc) from exc
    raise ValidationError.for_field(
        "statement", f"Statement must be a Statement or a mapping, got {type(value).__name__}"
    )


def validate_statement(statement: Statement, index: int = 0) -> Statement:
    """Check an incoming statement; an absent/empty principal becomes ``*``."""
    if statement.effect is None or statement.effect == "":
        raise ValidationError.for_field("effect", "Statement effect is required", index=index)
    if not isinstance(statement.effect, Effect):
        raise ValidationError.for_field(
            "effect",
            f"Statement effect only supports 'Allow' or 'Deny', got {statement.effect!r}",
            index=index,
            value=statement.effect,
        )
    if not statement.actions or not all(isinstance(a, str) and a for a in statement.actions):
        raise ValidationError.for_field(
            "actions", "Statement actions must be a non-empty list of names", index=index
        )
    if not statement.resources or not all(isinstance(r, str) and r for r in statement.resources):
        raise ValidationError.for_field(
            "resources", "Statement resources must be a non-empty list of names", index=index
        )
    if statement.principal is None or statement.principal.is_empty:
        return dataclasses.replace(statement, principal=Principal.anyone())
    return statement


def validate_statements(statements: Iterable[StatementInput]) -> tuple[Statement, ...]:
    validated = tuple(
        validate_statement(coerce_statement(item), index) for index, item in enumerate(statements)
    )
    if not validated:
        raise ValidationError.for_field("statements", "At least one statement is required")
    return validated


def validate_deleted(deleted: Collection[int], count: int) -> frozenset[int]:
    """Deletion flags must point at statements of the incoming batch."""
    flags = frozenset(deleted)
    invalid = sorted(index for index in flags if not 0 <= index < count)
    if invalid:
        raise ValidationError.for_field(
            "deleted", f"Deletion flags out of range for {count} statement(s): {invalid}", value=invalid
        )
    return flags


def merge_statements(
    bucket: str,
    existing: Sequence[Statement],
    incoming: Sequence[Statement],
    deleted: Collection[int] = (),
) -> MergeResult:
    """Compute the merged statement list without touching any input."""
    existing_units = normalize(existing)
    incoming_units = [unit for unit in normalize(incoming) if unit.origin not in deleted]
    dropped = frozenset(index for index in deleted if 0 <= index < len(incoming))

    superseded: set[int] = set()
    if existing_units:
        for unit in incoming_units:
            for position, old in enumerate(existing_units):
                if position not in superseded and identity_equals(bucket, old.resource, unit.resource):
                    superseded.add(position)

    survivors: list[ScopedStatement] = [
        old for position, old in enumerate(existing_units) if position not in superseded
    ]
    return MergeResult(
        statements=regroup(incoming_units) + regroup(survivors),
        superseded=frozenset(superseded),
        dropped=dropped,
    )


def statement_covers(bucket: str, stored: ScopedStatement, query: ScopedStatement) -> bool:
    """Same resource identity, same effect, and ``stored`` grants every queried action."""
    if not identity_equals(bucket, stored.resource, query.resource):
        return False
    if stored.effect is None or stored.effect is not query.effect:
        return False
    return query.action_keys <= stored.action_keys


class PolicyMerger:
    """Drives merges, removals and existence checks against a :class:`PolicyStore`."""

    def __init__(self, store: PolicyStore) -> None:
        self._store = store

    async def merge(
        self,
        bucket: str,
        statements: Iterable[StatementInput],
        *,
        deleted: Collection[int] = (),
        resource: str | None = None,
    ) -> PolicyDocument:
        """Merge *statements* into the bucket's policy and persist the result.

        ``deleted`` holds indices into *statements* flagged for deletion: they
        are neither written nor allowed to supersede anything.  ``resource``
        is the object being operated on, reported in backend errors.
        Validation runs before the backend is contacted.
        """
        bucket = require_bucket(bucket)
        incoming = validate_statements(statements)
        deleted = validate_deleted(deleted, len(incoming))
        current = await self._store.get(bucket, resource=resource)
        result = merge_statements(bucket, current.statements, incoming, deleted)
        document = await self._store.set(bucket, result.statements, resource=resource)
        logger.info(
            "policy.merged",
            bucket=bucket,
            added=len(incoming) - len(result.dropped),
            superseded=len(result.superseded),
            statements=len(document.statements),
        )
        return document

    async def rewrite(
        self, bucket: str, survivors: Sequence[ScopedStatement], *, resource: str | None = None
    ) -> PolicyDocument:
        """Persist already-filtered units; a merge into an empty document."""
        bucket = require_bucket(bucket)
        result = merge_statements(bucket, (), regroup(survivors))
        return await self._store.set(bucket, result.statements, resource=resource)

    async def remove_policy(self, bucket: str) -> None:
        await self._store.remove(require_bucket(bucket))

    async def policy_exists(self, bucket: str, statement: StatementInput) -> bool:
        """Whether an equal-or-broader statement is already in effect for the query."""
        bucket = require_bucket(bucket)
        query = coerce_statement(statement)
        if len(query.resources) > 1:
            raise ValidationError.for_field(
                "resources", "Existence checks support exactly one resource", count=len(query.resources)
            )
        query = validate_statement(query)
        (query_unit,) = normalize((query,))
        document = await self._store.get(bucket)
        return any(statement_covers(bucket, unit, query_unit) for unit in normalize(document.statements))


__all__ = [
    "MergeResult",
    "PolicyMerger",
    "StatementInput",
    "coerce_statement",
    "merge_statements",
    "statement_covers",
    "validate_deleted",
    "validate_statement",
    "validate_statements",
]
