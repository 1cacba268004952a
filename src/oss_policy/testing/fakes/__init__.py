"""Testing fakes – in-memory doubles for policy ports."""
from oss_policy.testing.fakes.policy_backend import InMemoryPolicyBackend

__all__ = ["InMemoryPolicyBackend"]
