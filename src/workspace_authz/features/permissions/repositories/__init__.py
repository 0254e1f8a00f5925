"""Membership store implementations."""

from .membership_repository import AsyncPGMembershipRepository
from .memory_membership_repository import InMemoryMembershipRepository

__all__ = [
    "AsyncPGMembershipRepository",
    "InMemoryMembershipRepository",
]
