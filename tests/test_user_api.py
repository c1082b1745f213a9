"""HTTP tests for the self-service /api/user endpoints."""

from jobmonitor.models import RefreshToken, User
from tests.factories import ApiTestCase


class TestProfile(ApiTestCase):
    def test_get_profile(self) -> None:
        response = self.client.get("/api/user/profile", headers=self.bearer("user", "user123"))
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["id"], self.user_id)
        self.assertEqual(body["username"], "user")
        self.assertEqual(body["email"], "user@jobmonitor.com")
        self.assertEqual(body["role"], "USER")

    def test_admin_may_use_user_endpoints(self) -> None:
        response = self.client.get("/api/user/profile", headers=self.bearer("admin", "admin123"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["username"], "admin")

    def test_anonymous_is_401(self) -> None:
        response = self.client.get("/api/user/profile")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["path"], "/api/user/profile")

    def test_update_profile_records_actor(self) -> None:
        response = self.client.put(
            "/api/user/profile",
            headers=self.bearer("user", "user123"),
            json={"email": "renamed@jobmonitor.com", "firstName": "Re", "lastName": "Named"},
        )
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["email"], "renamed@jobmonitor.com")
        self.assertEqual(body["fullName"], "Re Named")
        self.assertEqual(body["role"], "USER")

        self.db.expire_all()
        user = self.db.get(User, self.user_id)
        self.assertEqual(user.updated_by, "user")

    def test_update_profile_cannot_change_role(self) -> None:
        response = self.client.put(
            "/api/user/profile",
            headers=self.bearer("user", "user123"),
            json={
                "email": "user@jobmonitor.com",
                "firstName": "User",
                "lastName": "Tester",
                "role": "ADMIN",
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["role"], "USER")

    def test_update_profile_to_taken_email_is_409(self) -> None:
        response = self.client.put(
            "/api/user/profile",
            headers=self.bearer("user", "user123"),
            json={"email": "admin@jobmonitor.com", "firstName": "U", "lastName": "T"},
        )
        self.assertEqual(response.status_code, 409)


class TestChangePassword(ApiTestCase):
    def test_change_password_revokes_sessions(self) -> None:
        login = self.login("user", "user123")
        headers = {"Authorization": f"Bearer {login['accessToken']}"}
        response = self.client.post(
            "/api/user/change-password",
            headers=headers,
            json={"currentPassword": "user123", "newPassword": "brand-new-pw"},
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json(), {"message": "Password changed successfully"})

        refreshed = self.client.post(
            "/api/auth/refresh", json={"refreshToken": login["refreshToken"]}
        )
        self.assertEqual(refreshed.status_code, 401)

        old = self.client.post("/api/auth/login", json={"username": "user", "password": "user123"})
        self.assertEqual(old.status_code, 401)
        self.login("user", "brand-new-pw")

    def test_wrong_current_password_is_400(self) -> None:
        response = self.client.post(
            "/api/user/change-password",
            headers=self.bearer("user", "user123"),
            json={"currentPassword": "nope", "newPassword": "brand-new-pw"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Invalid current password")

        self.db.expire_all()
        active = (
            self.db.query(RefreshToken)
            .filter(RefreshToken.user_id == self.user_id, RefreshToken.revoked.is_(False))
            .count()
        )
        self.assertEqual(active, 1)
