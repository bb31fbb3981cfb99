"""User repository for database operations.

UserRepository is the SQLAlchemy-backed CredentialStore. It converts between
UserModel rows and User entities so the auth service never sees ORM objects.
"""

from datetime import timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventauth.core.logging import get_logger
from eventauth.domain.entities import User
from eventauth.domain.exceptions import CredentialStoreError, DuplicateUsernameError
from eventauth.infrastructure.persistence.models import UserModel

logger = get_logger(__name__)


def _to_entity(model: UserModel) -> User:
    created_at = model.created_at
    if created_at is not None and created_at.tzinfo is None:
        # SQLite drops the offset; values are always written in UTC
        created_at = created_at.replace(tzinfo=timezone.utc)
    kwargs = {"created_at": created_at} if created_at is not None else {}
    return User(
        id=model.id,
        username=model.username,
        password_hash=model.password_hash,
        gender=model.gender,
        age=model.age,
        email=model.email,
        phone=model.phone,
        address=model.address or "",
        **kwargs,
    )


def _to_model(user: User) -> UserModel:
    return UserModel(
        id=user.id,
        username=user.username,
        password_hash=user.password_hash,
        gender=user.gender,
        age=user.age,
        email=user.email,
        phone=user.phone,
        address=user.address,
        created_at=user.created_at,
    )


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def get_by_username(self, username: str) -> User | None:
        """Get a user by username.

        Args:
            username: Login name.

        Returns:
            User if found, None otherwise.

        Raises:
            CredentialStoreError: If the query fails.
        """
        try:
            result = await self.session.execute(
                select(UserModel).where(UserModel.username == username)
            )
        except SQLAlchemyError as e:
            logger.error("User lookup failed", username=username, error=str(e))
            raise CredentialStoreError("User lookup failed") from e
        model = result.scalar_one_or_none()
        return _to_entity(model) if model is not None else None

    async def insert(self, user: User) -> User:
        """Persist a new user and commit.

        Args:
            user: User to insert.

        Returns:
            The inserted user.

        Raises:
            DuplicateUsernameError: If the username is already taken.
            CredentialStoreError: On any other database failure.
        """
        self.session.add(_to_model(user))
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateUsernameError(user.username) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("User insert failed", username=user.username, error=str(e))
            raise CredentialStoreError("User insert failed") from e
        return user
