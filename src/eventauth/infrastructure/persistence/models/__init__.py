"""SQLAlchemy models for EventAuth.

All models inherit from the Base class defined in database.py and are
created on application startup.
"""

from eventauth.infrastructure.persistence.models.user import UserModel

__all__ = ["UserModel"]
