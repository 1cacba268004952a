"""Policy – statement, principal and document models plus the JSON wire codec.

Wire format (both directions)::

    {"Version": "2024-10-22",
     "Statement": [{"Effect": "Allow",
                    "Principal": {"AWS": ["*"]},
                    "Action": ["s3:GetObject"],
                    "Resource": ["arn:aws:s3:::docs/*"]}]}
"""
from __future__ import annotations

import dataclasses
import json
from enum import Enum
from typing import Any, Iterable, Mapping

from oss_policy.kernel.errors import PolicyDocumentError

ANY_PRINCIPAL = "*"


class Effect(str, Enum):
    """Statement effect, compared case-insensitively on input."""

    ALLOW = "Allow"
    DENY = "Deny"

    @classmethod
    def coerce(cls, value: Any) -> Effect | None:
        """Return the canonical member for *value*, or ``None`` if unsupported."""
        if isinstance(value, Effect):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return None


class AccessMode(str, Enum):
    """Coarse caller-facing summary of a policy document."""

    DEFAULT = "Default"
    PRIVATE = "Private"
    PUBLIC_READ = "PublicRead"
    PUBLIC_READ_WRITE = "PublicReadWrite"

    @classmethod
    def from_flags(cls, can_read: bool, can_write: bool) -> AccessMode:
        if can_read and can_write:
            return cls.PUBLIC_READ_WRITE
        if can_read:
            return cls.PUBLIC_READ
        # write-only has no public mode of its own
        return cls.PRIVATE


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def _wire_strings(value: Any, member: str) -> tuple[str, ...]:
    """Decode a wire member that is a string or a list of strings."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise PolicyDocumentError(f"Statement {member} must be a string or a list of strings, got {value!r}")
    return tuple(value)


@dataclasses.dataclass(frozen=True)
class Principal:
    """Statement principal; ``aws`` lists the matched identities."""

    aws: tuple[str, ...] = (ANY_PRINCIPAL,)

    def __post_init__(self) -> None:
        object.__setattr__(self, "aws", _as_tuple(self.aws))

    @classmethod
    def anyone(cls) -> Principal:
        return cls((ANY_PRINCIPAL,))

    @property
    def is_empty(self) -> bool:
        return not self.aws

    def to_dict(self) -> dict[str, list[str]]:
        return {"AWS": list(self.aws)}

    @classmethod
    def from_wire(cls, value: Any) -> Principal | None:
        if value is None:
            return None
        if isinstance(value, str):
            return cls((value,))
        if isinstance(value, Mapping):
            for key, identities in value.items():
                if str(key).lower() == "aws":
                    return cls(_wire_strings(identities, "Principal.AWS"))
            return cls(())
        raise PolicyDocumentError(f"Unsupported Principal value {value!r}")


@dataclasses.dataclass(frozen=True)
class Statement:
    """One Allow/Deny rule over a set of actions and resources.

    ``effect`` holds an :class:`Effect` whenever the supplied literal is
    recognised; anything else is kept verbatim so validation can report it.
    Lists passed for ``actions``/``resources`` are stored as tuples.
    """

    effect: Effect | str | None
    actions: tuple[str, ...] = ()
    resources: tuple[str, ...] = ()
    principal: Principal | None = None
    sid: str | None = None
    condition: dict[str, Any] | None = dataclasses.field(default=None, compare=False)

    def __post_init__(self) -> None:
        effect = Effect.coerce(self.effect)
        if effect is not None:
            object.__setattr__(self, "effect", effect)
        object.__setattr__(self, "actions", _as_tuple(self.actions))
        object.__setattr__(self, "resources", _as_tuple(self.resources))

    @classmethod
    def allow(cls, actions: Iterable[str], resources: Iterable[str]) -> Statement:
        return cls(Effect.ALLOW, tuple(actions), tuple(resources), Principal.anyone())

    @classmethod
    def deny(cls, actions: Iterable[str], resources: Iterable[str]) -> Statement:
        return cls(Effect.DENY, tuple(actions), tuple(resources), Principal.anyone())

    def with_resources(self, resources: Iterable[str]) -> Statement:
        return dataclasses.replace(self, resources=tuple(resources))

    def to_dict(self) -> dict[str, Any]:
        effect = self.effect.value if isinstance(self.effect, Effect) else self.effect
        payload: dict[str, Any] = {}
        if self.sid is not None:
            payload["Sid"] = self.sid
        payload["Effect"] = effect
        payload["Principal"] = (self.principal or Principal.anyone()).to_dict()
        payload["Action"] = list(self.actions)
        payload["Resource"] = list(self.resources)
        if self.condition is not None:
            payload["Condition"] = self.condition
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Statement:
        """Build a statement from its wire form; scalar members become lists."""
        if not isinstance(data, Mapping):
            raise PolicyDocumentError(f"Statement must be a JSON object, got {type(data).__name__}")
        return cls(
            effect=data.get("Effect"),
            actions=_wire_strings(data.get("Action"), "Action"),
            resources=_wire_strings(data.get("Resource"), "Resource"),
            principal=Principal.from_wire(data.get("Principal")),
            sid=data.get("Sid"),
            condition=data.get("Condition"),
        )


@dataclasses.dataclass(frozen=True)
class PolicyDocument:
    """Ordered statements of one bucket's policy; order is significant."""

    version: str
    statements: tuple[Statement, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "statements", tuple(self.statements))

    @classmethod
    def empty(cls, version: str) -> PolicyDocument:
        return cls(version, ())

    @property
    def is_empty(self) -> bool:
        return not self.statements

    def to_dict(self) -> dict[str, Any]:
        return {
            "Version": self.version,
            "Statement": [statement.to_dict() for statement in self.statements],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str | bytes, *, bucket: str | None = None) -> PolicyDocument:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        if not raw or not raw.strip():
            raise PolicyDocumentError("Policy document is empty", bucket=bucket)
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise PolicyDocumentError("Policy document is not valid JSON", bucket=bucket, cause=exc) from exc
        if not isinstance(data, dict):
            raise PolicyDocumentError("Policy document must be a JSON object", bucket=bucket)
        statements = data.get("Statement") or []
        if isinstance(statements, Mapping):
            statements = [statements]
        if not isinstance(statements, list):
            raise PolicyDocumentError("Policy Statement must be a list of objects", bucket=bucket)
        try:
            decoded = tuple(Statement.from_dict(item) for item in statements)
        except PolicyDocumentError as exc:
            raise PolicyDocumentError(exc.message, bucket=bucket, cause=exc) from exc
        return cls(version=str(data.get("Version", "")), statements=decoded)


__all__ = [
    "ANY_PRINCIPAL",
    "AccessMode",
    "Effect",
    "PolicyDocument",
    "Principal",
    "Statement",
]
