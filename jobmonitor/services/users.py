"""User administration: CRUD, profile updates, password changes, demo seeding."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobmonitor.core.errors import (
    DuplicateUserError,
    InvalidPasswordError,
    UserNotFoundError,
)
from jobmonitor.core.security import hash_password, verify_password
from jobmonitor.models.user import Role, User
from jobmonitor.schemas.user import (
    AdminStatsResponse,
    SignUpRequest,
    UpdateProfileRequest,
    UpdateUserRequest,
)
from jobmonitor.services.refresh_tokens import RefreshTokenStore

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"

# (username, password, email, first name, last name, role) created by seed_demo_users.
DEMO_USERS = (
    ("admin", "admin123", "admin@jobmonitor.com", "System", "Administrator", Role.ADMIN),
    ("user", "user123", "user@jobmonitor.com", "Test", "User", Role.USER),
)


class UserService:
    """
    Operations behind the /admin and /user endpoints.

    ``actor`` is the username recorded in created_by/updated_by.
    """

    def __init__(self, db: Session, refresh_tokens: RefreshTokenStore) -> None:
        self.db = db
        self.refresh_tokens = refresh_tokens

    def list_users(self) -> list[User]:
        return self.db.query(User).order_by(User.id).all()

    def get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise UserNotFoundError("User not found")
        return user

    def get_by_username(self, username: str) -> User:
        user = self.db.query(User).filter(User.username == username).first()
        if user is None:
            raise UserNotFoundError("User not found")
        return user

    def create_user(self, data: SignUpRequest, role: Role, actor: str = SYSTEM_ACTOR) -> User:
        if self._username_taken(data.username):
            raise DuplicateUserError("Username already exists")
        if self._email_taken(str(data.email)):
            raise DuplicateUserError("Email already exists")

        user = User(
            username=data.username,
            email=str(data.email),
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role=role,
            enabled=True,
            account_non_expired=True,
            account_non_locked=True,
            credentials_non_expired=True,
            created_by=actor,
            updated_by=actor,
        )
        self.db.add(user)
        self._commit("Username or email already exists")
        self.db.refresh(user)
        logger.info("Created user_id=%s role=%s by %s", user.id, role.value, actor)
        return user

    def update_user(self, user_id: int, data: UpdateUserRequest, actor: str) -> User:
        """Admin update; a role change revokes the user's refresh tokens."""
        user = self.get_user(user_id)
        self._apply_profile(user, data)
        if user.role != data.role:
            logger.info(
                "Role of user_id=%s changed %s -> %s by %s",
                user.id, Role(user.role).value, data.role.value, actor,
            )
            user.role = data.role
            self.refresh_tokens.revoke_all_for_user(user.id)
        user.updated_by = actor
        self._commit("Email already exists")
        self.db.refresh(user)
        return user

    def update_profile(self, username: str, data: UpdateProfileRequest) -> User:
        user = self.get_by_username(username)
        self._apply_profile(user, data)
        user.updated_by = username
        self._commit("Email already exists")
        self.db.refresh(user)
        return user

    def change_password(self, username: str, current_password: str, new_password: str) -> None:
        """Verify the current password, store the new hash and end every other session."""
        user = self.get_by_username(username)
        if not verify_password(current_password, user.password_hash):
            logger.info("Password change refused: wrong current password (user_id=%s)", user.id)
            raise InvalidPasswordError("Invalid current password")
        user.password_hash = hash_password(new_password)
        user.updated_by = username
        self.refresh_tokens.revoke_all_for_user(user.id)
        self.db.commit()
        logger.info("Password changed for user_id=%s", user.id)

    def toggle_enabled(self, user_id: int, actor: str) -> User:
        """Flip the enabled flag; disabling also revokes the user's refresh tokens."""
        user = self.get_user(user_id)
        user.enabled = not user.enabled
        user.updated_by = actor
        if not user.enabled:
            self.refresh_tokens.revoke_all_for_user(user.id)
        self.db.commit()
        self.db.refresh(user)
        logger.info("user_id=%s enabled=%s by %s", user.id, user.enabled, actor)
        return user

    def revoke_tokens(self, user_id: int, actor: str) -> int:
        """Forced logout: revoke all refresh tokens of a user."""
        user = self.get_user(user_id)
        revoked = self.refresh_tokens.revoke_all_for_user(user.id)
        self.db.commit()
        logger.info("Forced logout of user_id=%s by %s (%s tokens)", user.id, actor, revoked)
        return revoked

    def delete_user(self, user_id: int, actor: str) -> None:
        user = self.get_user(user_id)
        self.db.delete(user)
        self.db.commit()
        logger.info("Deleted user_id=%s by %s", user_id, actor)

    def count_users(self, role: Role | None = None) -> int:
        query = self.db.query(User)
        if role is not None:
            query = query.filter(User.role == role)
        return query.count()

    def stats(self) -> AdminStatsResponse:
        return AdminStatsResponse(
            total_users=self.count_users(),
            admin_users=self.count_users(Role.ADMIN),
            active_refresh_tokens=self.refresh_tokens.count_active(),
            system_status="Operational",
        )

    def _apply_profile(self, user: User, data: UpdateProfileRequest) -> None:
        email = str(data.email)
        if email != user.email and self._email_taken(email, exclude_id=user.id):
            raise DuplicateUserError("Email already exists")
        user.email = email
        user.first_name = data.first_name
        user.last_name = data.last_name

    def _username_taken(self, username: str) -> bool:
        return self.db.query(User.id).filter(User.username == username).first() is not None

    def _email_taken(self, email: str, exclude_id: int | None = None) -> bool:
        query = self.db.query(User.id).filter(User.email == email)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    def _commit(self, conflict_message: str) -> None:
        # Unique constraints still guard against a concurrent insert between check and commit.
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateUserError(conflict_message) from e


def seed_demo_users(db: Session) -> int:
    """Create the demo accounts when the users table is empty. Returns how many were created."""
    if db.query(User.id).first() is not None:
        logger.info("Users already exist, skipping demo user seeding")
        return 0
    for username, password, email, first_name, last_name, role in DEMO_USERS:
        db.add(
            User(
                username=username,
                email=email,
                password_hash=hash_password(password),
                first_name=first_name,
                last_name=last_name,
                role=role,
                created_by=SYSTEM_ACTOR,
                updated_by=SYSTEM_ACTOR,
            )
        )
        logger.info("Created demo user %s (%s)", username, role.value)
    db.commit()
    return len(DEMO_USERS)
