"""Unit tests for the kernel error hierarchy."""

from __future__ import annotations

import json

import pytest

from oss_policy.kernel.errors import (
    BaseError,
    ConflictError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    PolicyBackendError,
    PolicyDocumentError,
    PolicyNotFoundError,
    SerializationError,
    StorageBackendError,
    ValidationError,
)


class TestBaseError:
    def test_message_and_default_code(self) -> None:
        err = BaseError("something went wrong")
        assert err.message == "something went wrong"
        assert err.code == "base_error"

    def test_custom_code(self) -> None:
        assert BaseError("m", code="custom").code == "custom"

    def test_to_dict_basic(self) -> None:
        err = BaseError("m", code="my_code", detail={"key": "val"})
        assert err.to_dict() == {"code": "my_code", "message": "m", "detail": {"key": "val"}}

    def test_cause_is_chained(self) -> None:
        cause = RuntimeError("root")
        err = BaseError("wrap", cause=cause)
        assert err.__cause__ is cause
        assert "root" in err.to_dict()["cause"]

    def test_str_is_valid_json(self) -> None:
        parsed = json.loads(str(BaseError("oops", code="oops", detail={"x": 1})))
        assert parsed["code"] == "oops"
        assert parsed["detail"] == {"x": 1}

    def test_repr(self) -> None:
        assert repr(ValidationError("bad")) == "ValidationError(code='validation_error', message='bad')"


class TestDomainErrors:
    def test_validation_error_carries_field_errors(self) -> None:
        err = ValidationError("bad input", errors=[{"field": "bucket"}])
        assert isinstance(err, DomainError)
        assert err.to_dict()["errors"] == [{"field": "bucket"}]

    def test_validation_error_defaults_to_empty_errors(self) -> None:
        assert ValidationError("bad").errors == []

    def test_for_field(self) -> None:
        cause = ValueError("nope")
        err = ValidationError.for_field("effect", "bad effect", index=2, value="Permit", cause=cause)
        assert err.errors == [{"field": "effect", "index": 2, "value": "Permit"}]
        assert err.fields == ["effect"]
        assert err.__cause__ is cause

    def test_policy_not_found_is_not_found(self) -> None:
        err = PolicyNotFoundError("docs")
        assert isinstance(err, NotFoundError)
        assert err.bucket == "docs"
        assert err.code == "policy_not_found"
        assert err.detail == {"bucket": "docs"}
        assert "docs" in err.message

    def test_conflict_code(self) -> None:
        assert ConflictError("exists").code == "conflict"


class TestInfrastructureErrors:
    def test_policy_backend_error_keeps_bucket_and_cause(self) -> None:
        cause = OSError("connection reset")
        err = PolicyBackendError("docs", cause=cause)
        assert isinstance(err, InfrastructureError)
        assert err.bucket == "docs"
        assert err.detail == {"bucket": "docs"}
        assert err.__cause__ is cause
        assert "docs" in err.message

    def test_policy_backend_error_with_resource(self) -> None:
        err = PolicyBackendError("docs", resource="arn:aws:s3:::docs/f.txt")
        assert err.detail["resource"] == "arn:aws:s3:::docs/f.txt"

    def test_policy_document_error_is_serialization_error(self) -> None:
        err = PolicyDocumentError("not json", bucket="docs")
        assert isinstance(err, SerializationError)
        assert err.payload_type == "policy"
        assert err.detail == {"bucket": "docs"}

    def test_storage_backend_error(self) -> None:
        err = StorageBackendError("make_bucket", bucket="docs")
        assert err.operation == "make_bucket"
        assert "make_bucket" in err.message
        assert err.detail == {"bucket": "docs"}

    @pytest.mark.parametrize(
        "cls",
        [PolicyBackendError, PolicyDocumentError, StorageBackendError],
    )
    def test_all_are_base_errors(self, cls: type) -> None:
        assert issubclass(cls, BaseError)


class TestLogFields:
    def test_flattens_detail_and_code(self) -> None:
        err = PolicyBackendError("docs", cause=TimeoutError("slow"))
        assert err.log_fields() == {
            "bucket": "docs",
            "error_code": "policy_backend_error",
            "error": "Policy backend failed for bucket 'docs'",
            "error_cause": "TimeoutError",
        }

    def test_detail_cannot_override_error_keys(self) -> None:
        err = BaseError("m", code="c", detail={"error_code": "spoofed"})
        assert err.log_fields()["error_code"] == "c"

    def test_detail_is_copied(self) -> None:
        detail = {"bucket": "docs"}
        err = BaseError("m", detail=detail)
        err.detail["resource"] = "x"
        assert detail == {"bucket": "docs"}
