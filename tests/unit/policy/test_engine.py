"""Behavioural tests for BucketPolicyEngine over the in-memory backend."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from oss_policy.kernel.errors import PolicyBackendError, PolicyDocumentError, ValidationError
from oss_policy.policy import AccessMode, BucketPolicyEngine, PolicyDocument, Statement
from oss_policy.testing.fakes import InMemoryPolicyBackend

OBJ = "arn:aws:s3:::docs/f.txt"


def _engine(**kwargs) -> tuple[BucketPolicyEngine, InMemoryPolicyBackend]:  # type: ignore[no-untyped-def]
    backend = InMemoryPolicyBackend()
    return BucketPolicyEngine(backend, policy_version="2024-10-22", **kwargs), backend


# ---------------------------------------------------------------------------
# Whole-document operations
# ---------------------------------------------------------------------------


class TestPolicyDocumentOperations:
    def test_bucket_without_policy(self) -> None:
        engine, _ = _engine()
        assert asyncio.run(engine.get_policy("docs")) == PolicyDocument("2024-10-22", ())
        assert asyncio.run(engine.get_bucket_access_mode("docs")) is AccessMode.DEFAULT

    def test_set_policy_returns_written_document(self) -> None:
        engine, backend = _engine()
        statement = Statement.allow(["s3:GetObject"], [OBJ])
        document = asyncio.run(engine.set_policy("docs", [statement]))
        assert document.statements == (statement,)
        assert asyncio.run(engine.get_policy("docs")) == document

    def test_set_policy_accepts_wire_dicts(self) -> None:
        engine, _ = _engine()
        document = asyncio.run(
            engine.set_policy("docs", [{"Effect": "Deny", "Action": ["s3:PutObject"], "Resource": [OBJ]}])
        )
        assert document.statements[0].actions == ("s3:PutObject",)

    @pytest.mark.parametrize("statements", [[], None])
    def test_set_policy_requires_statements(self, statements: list | None) -> None:
        engine, backend = _engine()
        with pytest.raises(ValidationError):
            asyncio.run(engine.set_policy("docs", statements))  # type: ignore[arg-type]
        assert backend.calls == []

    def test_remove_policy_restores_default(self) -> None:
        engine, backend = _engine()
        asyncio.run(engine.set_bucket_access_mode("docs", AccessMode.PRIVATE))
        asyncio.run(engine.remove_policy("docs"))
        asyncio.run(engine.remove_policy("docs"))
        assert asyncio.run(engine.get_bucket_access_mode("docs")) is AccessMode.DEFAULT

    def test_policy_exists_after_broader_statement(self) -> None:
        engine, _ = _engine()
        query = {"Effect": "Allow", "Action": ["s3:GetObject"], "Resource": ["arn:aws:s3:::docs/*"]}
        assert asyncio.run(engine.policy_exists("docs", query)) is False
        asyncio.run(engine.set_bucket_access_mode("docs", AccessMode.PUBLIC_READ))
        assert asyncio.run(engine.policy_exists("docs", query)) is True
        disjoint = {"Effect": "Allow", "Action": ["s3:GetObject"], "Resource": ["arn:aws:s3:::docs/f.txt"]}
        assert asyncio.run(engine.policy_exists("docs", disjoint)) is False

    def test_stored_non_string_resource_is_rejected(self) -> None:
        engine, backend = _engine()
        backend.seed(
            "docs",
            {"Version": "v", "Statement": [{"Effect": "Allow", "Action": ["s3:GetObject"], "Resource": [None]}]},
        )
        with pytest.raises(PolicyDocumentError):
            asyncio.run(engine.get_bucket_access_mode("docs"))

    def test_wire_dict_with_non_string_resource_is_invalid(self) -> None:
        engine, backend = _engine()
        with pytest.raises(ValidationError):
            asyncio.run(engine.set_policy("docs", [{"Effect": "Allow", "Action": ["s3:GetObject"], "Resource": [None]}]))
        assert backend.calls == []

    def test_backend_failure_surfaces(self) -> None:
        engine, backend = _engine()
        backend.fail_next(TimeoutError("backend timeout"))
        with pytest.raises(PolicyBackendError) as exc_info:
            asyncio.run(engine.get_bucket_access_mode("docs"))
        assert exc_info.value.resource is None

    def test_set_policy_deleted_flags_do_not_supersede(self) -> None:
        engine, backend = _engine()
        existing = Statement.allow(["s3:GetObject"], [OBJ])
        asyncio.run(engine.set_policy("docs", [existing]))
        document = asyncio.run(engine.set_policy("docs", [Statement.deny(["s3:GetObject"], [OBJ])], deleted={0}))
        assert document.statements == (existing,)
        assert asyncio.run(engine.get_object_access_mode("docs", "f.txt")) is AccessMode.PUBLIC_READ
        assert len(backend.document("docs")["Statement"]) == 1

    def test_set_policy_out_of_range_deleted_flag(self) -> None:
        engine, backend = _engine()
        with pytest.raises(ValidationError):
            asyncio.run(engine.set_policy("docs", [Statement.allow(["s3:GetObject"], [OBJ])], deleted={5}))
        assert backend.calls == []


# ---------------------------------------------------------------------------
# Access modes
# ---------------------------------------------------------------------------


class TestBucketAccessMode:
    @pytest.mark.parametrize(
        "mode", [AccessMode.PRIVATE, AccessMode.PUBLIC_READ, AccessMode.PUBLIC_READ_WRITE]
    )
    def test_set_then_get(self, mode: AccessMode) -> None:
        engine, _ = _engine()
        asyncio.run(engine.set_bucket_access_mode("docs", mode))
        assert asyncio.run(engine.get_bucket_access_mode("docs")) is mode

    def test_switching_modes_supersedes(self) -> None:
        engine, backend = _engine()
        asyncio.run(engine.set_bucket_access_mode("docs", AccessMode.PUBLIC_READ_WRITE))
        asyncio.run(engine.set_bucket_access_mode("docs", AccessMode.PRIVATE))
        assert asyncio.run(engine.get_bucket_access_mode("docs")) is AccessMode.PRIVATE
        assert len(backend.document("docs")["Statement"]) == 1

    def test_bucket_deny_does_not_revoke_earlier_allow(self) -> None:
        # bucket scope is Allow-only while object scope honours Deny in order
        engine, backend = _engine()
        backend.seed(
            "docs",
            PolicyDocument(
                "2024-10-22",
                (
                    Statement.allow(["s3:GetObject"], ["arn:aws:s3:::docs/*"]),
                    Statement.deny(["s3:GetObject"], ["arn:aws:s3:::docs/*"]),
                    Statement.deny(["s3:GetObject"], [OBJ]),
                ),
            ).to_json(),
        )
        assert asyncio.run(engine.get_bucket_access_mode("docs")) is AccessMode.PUBLIC_READ
        assert asyncio.run(engine.get_object_access_mode("docs", "f.txt")) is AccessMode.PRIVATE


class TestObjectAccessMode:
    def test_repeated_set_does_not_duplicate(self) -> None:
        engine, backend = _engine()
        asyncio.run(engine.set_object_access_mode("docs", "f.txt", AccessMode.PUBLIC_READ))
        asyncio.run(engine.set_object_access_mode("docs", "f.txt", AccessMode.PUBLIC_READ))
        statements = backend.document("docs")["Statement"]
        assert [(s["Effect"], s["Resource"]) for s in statements] == [("Allow", [OBJ]), ("Deny", [OBJ])]

    def test_later_mode_supersedes_earlier(self) -> None:
        engine, _ = _engine()
        asyncio.run(engine.set_object_access_mode("docs", "secret.pdf", AccessMode.PRIVATE))
        asyncio.run(engine.set_object_access_mode("docs", "secret.pdf", AccessMode.PUBLIC_READ))
        assert asyncio.run(engine.get_object_access_mode("docs", "secret.pdf")) is AccessMode.PUBLIC_READ

    def test_remove_falls_back_to_bucket_mode(self) -> None:
        engine, _ = _engine()
        asyncio.run(engine.set_bucket_access_mode("docs", AccessMode.PUBLIC_READ_WRITE))
        asyncio.run(engine.set_object_access_mode("docs", "secret.pdf", AccessMode.PRIVATE))
        assert asyncio.run(engine.get_object_access_mode("docs", "secret.pdf")) is AccessMode.PRIVATE
        assert asyncio.run(engine.remove_object_access_mode("docs", "secret.pdf")) is AccessMode.PUBLIC_READ_WRITE
        assert asyncio.run(engine.get_object_access_mode("docs", "secret.pdf")) is AccessMode.PUBLIC_READ_WRITE

    def test_object_mode_does_not_change_bucket_mode(self) -> None:
        engine, _ = _engine()
        asyncio.run(engine.set_bucket_access_mode("docs", AccessMode.PRIVATE))
        asyncio.run(engine.set_object_access_mode("docs", "f.txt", AccessMode.PUBLIC_READ_WRITE))
        assert asyncio.run(engine.get_bucket_access_mode("docs")) is AccessMode.PRIVATE
        assert asyncio.run(engine.get_object_access_mode("docs", "other.txt")) is AccessMode.PRIVATE

    @pytest.mark.parametrize(
        "first,second,expected",
        [
            (Statement.allow, Statement.deny, AccessMode.PRIVATE),
            (Statement.deny, Statement.allow, AccessMode.PUBLIC_READ),
        ],
    )
    def test_merge_order_decides_read(self, first, second, expected) -> None:  # type: ignore[no-untyped-def]
        engine, _ = _engine()
        asyncio.run(engine.set_policy("docs", [first(["s3:GetObject"], [OBJ])]))
        asyncio.run(engine.set_policy("docs", [second(["s3:GetObject"], [OBJ])]))
        assert asyncio.run(engine.get_object_access_mode("docs", "f.txt")) is expected

    @pytest.mark.parametrize(
        "call",
        [
            lambda engine: engine.set_object_access_mode("docs", "f.txt", AccessMode.PRIVATE),
            lambda engine: engine.get_object_access_mode("docs", "f.txt"),
            lambda engine: engine.remove_object_access_mode("docs", "/f.txt"),
        ],
        ids=["set", "get", "remove"],
    )
    def test_backend_failure_names_the_object(self, call) -> None:  # type: ignore[no-untyped-def]
        engine, backend = _engine()
        backend.fail_next(ConnectionError("down"))
        with pytest.raises(PolicyBackendError) as exc_info:
            asyncio.run(call(engine))
        assert exc_info.value.resource == OBJ
        assert exc_info.value.detail == {"bucket": "docs", "resource": OBJ}

    def test_object_write_failure_names_the_object(self) -> None:
        engine, backend = _engine()
        asyncio.run(engine.set_object_access_mode("docs", "f.txt", AccessMode.PRIVATE))
        backend.set_policy = AsyncMock(side_effect=ConnectionError("down"))  # type: ignore[method-assign]
        with pytest.raises(PolicyBackendError) as exc_info:
            asyncio.run(engine.set_object_access_mode("docs", "f.txt", AccessMode.PUBLIC_READ))
        assert exc_info.value.resource == OBJ

    def test_default_mode_rejected_for_objects(self) -> None:
        engine, backend = _engine()
        with pytest.raises(ValidationError):
            asyncio.run(engine.set_object_access_mode("docs", "f.txt", AccessMode.DEFAULT))
        assert backend.calls == []

    def test_empty_object_name_rejected(self) -> None:
        engine, backend = _engine()
        with pytest.raises(ValidationError):
            asyncio.run(engine.set_object_access_mode("docs", "/", AccessMode.PRIVATE))
        assert backend.calls == []


# ---------------------------------------------------------------------------
# Serialized writes
# ---------------------------------------------------------------------------


class TestSerializedWrites:
    def test_concurrent_merges_do_not_lose_updates(self) -> None:
        engine, backend = _engine(serialize_writes=True)
        names = [f"f{i}.txt" for i in range(5)]

        async def run() -> None:
            await asyncio.gather(
                *(engine.set_object_access_mode("docs", name, AccessMode.PRIVATE) for name in names)
            )

        asyncio.run(run())
        resources = {s["Resource"][0] for s in backend.document("docs")["Statement"]}
        assert resources == {f"arn:aws:s3:::docs/{name}" for name in names}

    def test_exclusive_section_holds_bucket_lock(self) -> None:
        engine, _ = _engine()

        async def run() -> AccessMode:
            async with engine.exclusive("docs") as locked:
                assert engine.locks.locked("docs")
                mode = await locked.get_bucket_access_mode("docs")
                await locked.set_bucket_access_mode("docs", AccessMode.PUBLIC_READ)
            assert not engine.locks.locked("docs")
            return mode

        assert asyncio.run(run()) is AccessMode.DEFAULT
        assert asyncio.run(engine.get_bucket_access_mode("docs")) is AccessMode.PUBLIC_READ
