"""Unit tests for the in-memory policy backend fake."""

from __future__ import annotations

import asyncio

import pytest

from oss_policy.kernel.errors import PolicyNotFoundError
from oss_policy.testing.fakes import InMemoryPolicyBackend


class TestInMemoryPolicyBackend:
    def test_get_missing_raises_not_found(self) -> None:
        backend = InMemoryPolicyBackend()
        with pytest.raises(PolicyNotFoundError):
            asyncio.run(backend.get_policy("docs"))

    def test_set_then_get(self) -> None:
        backend = InMemoryPolicyBackend()
        asyncio.run(backend.set_policy("docs", '{"Version": "v", "Statement": []}'))
        assert asyncio.run(backend.get_policy("docs")) == '{"Version": "v", "Statement": []}'
        assert backend.document("docs") == {"Version": "v", "Statement": []}

    def test_delete(self) -> None:
        backend = InMemoryPolicyBackend().seed("docs", {"Version": "v", "Statement": []})
        asyncio.run(backend.delete_policy("docs"))
        assert not backend.has_policy("docs")
        with pytest.raises(PolicyNotFoundError):
            asyncio.run(backend.delete_policy("docs"))

    def test_calls_are_recorded(self) -> None:
        backend = InMemoryPolicyBackend().seed("docs", "{}")
        asyncio.run(backend.get_policy("docs"))
        asyncio.run(backend.set_policy("media", "{}"))
        assert backend.calls == [("get", "docs"), ("set", "media")]

    def test_fail_next_is_one_shot(self) -> None:
        backend = InMemoryPolicyBackend().seed("docs", "{}")
        backend.fail_next(ConnectionError("down"))
        with pytest.raises(ConnectionError):
            asyncio.run(backend.get_policy("docs"))
        assert asyncio.run(backend.get_policy("docs")) == "{}"

    def test_reset(self) -> None:
        backend = InMemoryPolicyBackend().seed("docs", "{}")
        asyncio.run(backend.get_policy("docs"))
        backend.reset()
        assert backend.calls == []
        assert backend.document("docs") is None
