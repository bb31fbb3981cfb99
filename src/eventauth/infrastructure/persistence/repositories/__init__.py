"""Repositories for database access."""

from eventauth.infrastructure.persistence.repositories.user_repository import UserRepository

__all__ = ["UserRepository"]
