"""Policy – backend port for the whole-document policy primitive."""
from __future__ import annotations

import abc


class PolicyBackend(abc.ABC):
    """Port: get/set/delete the JSON policy document of a bucket.

    ``get_policy`` raises :class:`~oss_policy.kernel.errors.PolicyNotFoundError`
    when the bucket has no policy; any other failure is raised as-is.
    """

    @abc.abstractmethod
    async def get_policy(self, bucket: str) -> str: ...

    @abc.abstractmethod
    async def set_policy(self, bucket: str, policy: str) -> None: ...

    @abc.abstractmethod
    async def delete_policy(self, bucket: str) -> None: ...


__all__ = ["PolicyBackend"]
