"""Adapters – concrete backends for the engine's ports."""
