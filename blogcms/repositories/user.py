"""User repository for database operations."""

from datetime import timedelta
from logging import getLogger
from uuid import UUID

from sqlalchemy import func, or_

from blogcms.configs import file_logger
from blogcms.models.user import UserDB, UserRole
from blogcms.repositories.base import BaseRepository, Condition
from blogcms.schemas.pagination import Page
from blogcms.schemas.user import UserCreate, UserProfileUpdate, UserQuery
from blogcms.utils.helpers import utcnow

logger = file_logger(getLogger(__name__))


class UserRepository(BaseRepository[UserDB]):
    """
    Repository for User database operations.

    This class implements the repository pattern for User entities,
    providing account lookups, profile changes and the password reset
    token lifecycle. Passwords arrive already hashed.
    """

    model = UserDB

    async def create_user(self, user: UserCreate) -> UserDB:
        """
        Create a new user in the database.

        Args:
            user: User schema with user data

        Returns:
            UserDB: Created user database model

        Raises:
            DuplicateEntryError: If the email already exists
        """
        data = user.model_dump()
        data["email"] = user.email.lower()
        created = await self.create(data)
        logger.info(f"User created: {created.id}")
        return created

    async def get_user(self, user_id: UUID) -> UserDB | None:
        """
        Get user by ID.

        Args:
            user_id: User UUID

        Returns:
            UserDB | None: User if found, None otherwise
        """
        return await self.get_by_id(user_id)

    async def find_by_email(self, email: str) -> UserDB | None:
        """
        Get user by email, ignoring case.

        Args:
            email: Email address

        Returns:
            UserDB | None: User if found, None otherwise
        """
        users = await self.find_many(
            # pyrefly: ignore [bad-argument-type]
            [func.lower(UserDB.email) == email.lower()],
            limit=1,
        )
        return users[0] if users else None

    async def update_profile(self, user_id: UUID, profile: UserProfileUpdate) -> UserDB | None:
        changes = profile.field_changes()
        if "email" in changes:
            changes["email"] = changes["email"].lower()
        return await self.update(user_id, changes)

    async def update_password(self, user_id: UUID, hashed_password: str) -> bool:
        return await self.update(user_id, {"password": hashed_password}) is not None

    async def update_last_login(self, user_id: UUID) -> bool:
        return await self.update(user_id, {"last_login_at": utcnow()}) is not None

    async def set_reset_token(self, user_id: UUID, token: str, expiry_hours: int = 24) -> bool:
        """
        Store a password reset token.

        Args:
            user_id: User UUID
            token: Reset token
            expiry_hours: Hours until the token stops being accepted

        Returns:
            bool: True if the user exists
        """
        expiry = utcnow() + timedelta(hours=expiry_hours)
        updated = await self.update(user_id, {"reset_token": token, "reset_token_expiry": expiry})
        return updated is not None

    async def find_by_reset_token(self, token: str) -> UserDB | None:
        """Get the user owning an unexpired reset token."""
        users = await self.find_many(
            [
                # pyrefly: ignore [bad-argument-type]
                UserDB.reset_token == token,
                # pyrefly: ignore [bad-argument-type]
                UserDB.reset_token_expiry > utcnow(),
            ],
            limit=1,
        )
        return users[0] if users else None

    async def clear_reset_token(self, user_id: UUID) -> bool:
        updated = await self.update(user_id, {"reset_token": None, "reset_token_expiry": None})
        return updated is not None

    async def change_role(self, user_id: UUID, role: UserRole) -> UserDB | None:
        return await self.update(user_id, {"role": role})

    async def deactivate_user(self, user_id: UUID) -> UserDB | None:
        user = await self.update(user_id, {"is_active": False, "deactivated_at": utcnow()})
        if user is not None:
            logger.info(f"User deactivated: {user_id}")
        return user

    async def activate_user(self, user_id: UUID) -> UserDB | None:
        return await self.update(user_id, {"is_active": True, "deactivated_at": None})

    async def count_by_role(self, role: UserRole) -> int:
        """Count active users with the given role."""
        # pyrefly: ignore [bad-argument-type]
        return await self.count([UserDB.role == role, UserDB.is_active.is_(True)])

    async def search_users(self, query: UserQuery) -> Page[UserDB]:
        """
        Search users by name or email, newest first.

        Args:
            query: Search text, role/status filters and pagination

        Returns:
            Page[UserDB]: Matching users plus pagination metadata
        """
        conditions: list[Condition] = []
        if query.query:
            conditions.append(
                or_(
                    # pyrefly: ignore [missing-attribute]
                    UserDB.name.icontains(query.query, autoescape=True),
                    # pyrefly: ignore [missing-attribute]
                    UserDB.email.icontains(query.query, autoescape=True),
                ),
            )
        if query.role:
            # pyrefly: ignore [bad-argument-type]
            conditions.append(UserDB.role == query.role)
        if query.is_active is not None:
            # pyrefly: ignore [bad-argument-type]
            conditions.append(UserDB.is_active == query.is_active)

        return await self.paginate(
            query,
            conditions,
            # pyrefly: ignore [missing-attribute]
            order_by=[UserDB.created_at.desc(), UserDB.id.desc()],
        )

    async def delete_user(self, user_id: UUID) -> bool:
        """
        Soft delete a user.

        Returns:
            bool: True if deleted, False if missing or already deleted
        """
        deleted = await self.soft_delete(user_id)
        if deleted:
            logger.info(f"User soft-deleted: {user_id}")
        return deleted
