"""Testing – in-memory doubles for the engine's ports."""
from oss_policy.testing.fakes import InMemoryPolicyBackend

__all__ = ["InMemoryPolicyBackend"]
