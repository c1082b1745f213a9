"""Tests for UserService and demo seeding."""

from jobmonitor.core.errors import DuplicateUserError, InvalidPasswordError, UserNotFoundError
from jobmonitor.core.security import verify_password
from jobmonitor.models import RefreshToken, Role, User
from jobmonitor.schemas.auth import SecurityPrincipal
from jobmonitor.schemas.user import SignUpRequest, UpdateUserRequest
from jobmonitor.services.users import SYSTEM_ACTOR, UserService, seed_demo_users
from tests.factories import DatabaseTestCase, FixedClock, make_codec, make_store, make_user


class TestUserService(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.store = make_store(self.db, make_codec(FixedClock()))
        self.service = UserService(self.db, self.store)

    def _signup(self, username: str = "carol") -> SignUpRequest:
        return SignUpRequest(
            username=username,
            email=f"{username}@jobmonitor.com",
            password="carol-pw",
            first_name="Carol",
            last_name="Jones",
        )

    def test_create_user_hashes_password_and_sets_audit(self) -> None:
        user = self.service.create_user(self._signup(), Role.USER)
        self.assertNotEqual(user.password_hash, "carol-pw")
        self.assertTrue(verify_password("carol-pw", user.password_hash))
        self.assertEqual(user.created_by, SYSTEM_ACTOR)
        self.assertTrue(user.enabled)
        self.assertTrue(user.account_non_locked)
        self.assertTrue(user.credentials_non_expired)
        self.assertIsNotNone(user.created_at)

    def test_duplicate_username(self) -> None:
        self.service.create_user(self._signup(), Role.USER)
        with self.assertRaises(DuplicateUserError):
            self.service.create_user(self._signup(), Role.USER)

    def test_get_missing_user(self) -> None:
        with self.assertRaises(UserNotFoundError):
            self.service.get_user(404)

    def test_change_password_requires_current(self) -> None:
        make_user(self.db, "dave", "dave-pw")
        with self.assertRaises(InvalidPasswordError):
            self.service.change_password("dave", "wrong", "new-dave-pw")

    def test_role_change_revokes_tokens(self) -> None:
        user = make_user(self.db, "erin", "erin-pw")
        self.store.issue(SecurityPrincipal.from_user(user))
        self.db.commit()
        self.service.update_user(
            user.id,
            UpdateUserRequest(
                email="erin@jobmonitor.com", first_name="Erin", last_name="Tester", role=Role.ADMIN
            ),
            actor="admin",
        )
        self.assertEqual(user.role, Role.ADMIN)
        self.assertEqual(user.updated_by, "admin")
        self.assertEqual(
            self.db.query(RefreshToken).filter(RefreshToken.revoked.is_(False)).count(), 0
        )

    def test_count_users_by_role(self) -> None:
        make_user(self.db, "a1", "pw-a1", role=Role.ADMIN)
        make_user(self.db, "u1", "pw-u1")
        make_user(self.db, "u2", "pw-u2")
        self.assertEqual(self.service.count_users(), 3)
        self.assertEqual(self.service.count_users(Role.ADMIN), 1)


class TestSeedDemoUsers(DatabaseTestCase):
    def test_seeds_admin_and_user_once(self) -> None:
        self.assertEqual(seed_demo_users(self.db), 2)
        self.assertEqual(seed_demo_users(self.db), 0)
        admin = self.db.query(User).filter(User.username == "admin").one()
        self.assertEqual(admin.role, Role.ADMIN)
        self.assertTrue(verify_password("admin123", admin.password_hash))
        user = self.db.query(User).filter(User.username == "user").one()
        self.assertEqual(user.role, Role.USER)
