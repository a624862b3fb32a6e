"""Pending registration adapters - Process-local store and its sweeper."""

from .memory import InMemoryPendingRegistrationStore
from .sweeper import PendingRegistrationSweeper

__all__ = ["InMemoryPendingRegistrationStore", "PendingRegistrationSweeper"]
