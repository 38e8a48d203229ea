"""Repositories holding statuses and the sensor roster."""

from .memory_repository import InMemorySecurityRepository

__all__ = ["InMemorySecurityRepository"]
