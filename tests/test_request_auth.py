"""Tests for bearer-token extraction and per-request authentication."""

import unittest
from datetime import timedelta

from jobmonitor.core.errors import ExpiredTokenError, InvalidTokenError
from jobmonitor.core.request_auth import (
    RequestAuthenticator,
    extract_bearer_token,
    principal_from_claims,
)
from jobmonitor.core.tokens import TokenCodec, TokenType
from jobmonitor.models import Role
from jobmonitor.schemas.auth import SecurityPrincipal
from tests.factories import FixedClock

SECRET = "c" * 64

USER = SecurityPrincipal(
    id=3,
    username="user",
    email="user@jobmonitor.com",
    role=Role.USER,
    authorities=frozenset({Role.USER.authority}),
)


class TestExtractBearerToken(unittest.TestCase):
    def test_extracts_token(self) -> None:
        self.assertEqual(extract_bearer_token("Bearer abc.def.ghi"), "abc.def.ghi")

    def test_scheme_is_case_insensitive(self) -> None:
        self.assertEqual(extract_bearer_token("bearer abc"), "abc")

    def test_missing_or_other_scheme(self) -> None:
        for header in (None, "", "Bearer", "Bearer   ", "Basic dXNlcjpwYXNz", "abc"):
            with self.subTest(header=header):
                self.assertIsNone(extract_bearer_token(header))


class TestRequestAuthenticator(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FixedClock()
        self.codec = TokenCodec(SECRET, clock=self.clock)
        self.authenticator = RequestAuthenticator(self.codec)

    def _header(self, token_type: TokenType, ttl: timedelta = timedelta(hours=1)) -> str:
        return f"Bearer {self.codec.issue(USER, token_type, ttl)}"

    def test_no_header_is_anonymous_without_error(self) -> None:
        result = self.authenticator.authenticate(None)
        self.assertIsNone(result.principal)
        self.assertIsNone(result.error)

    def test_valid_access_token(self) -> None:
        result = self.authenticator.authenticate(self._header(TokenType.ACCESS))
        self.assertIsNone(result.error)
        self.assertEqual(result.principal.id, 3)
        self.assertEqual(result.principal.username, "user")
        self.assertEqual(result.principal.email, "user@jobmonitor.com")
        self.assertEqual(result.principal.role, Role.USER)
        self.assertTrue(result.principal.has_any_role(Role.USER))
        self.assertFalse(result.principal.has_any_role(Role.ADMIN))

    def test_refresh_token_does_not_authenticate(self) -> None:
        result = self.authenticator.authenticate(self._header(TokenType.REFRESH))
        self.assertIsNone(result.principal)
        self.assertIsInstance(result.error, InvalidTokenError)

    def test_expired_access_token(self) -> None:
        header = self._header(TokenType.ACCESS, ttl=timedelta(minutes=5))
        self.clock.advance(timedelta(minutes=6))
        result = self.authenticator.authenticate(header)
        self.assertIsNone(result.principal)
        self.assertIsInstance(result.error, ExpiredTokenError)

    def test_invalid_token(self) -> None:
        result = self.authenticator.authenticate("Bearer not-a-jwt")
        self.assertIsNone(result.principal)
        self.assertIsInstance(result.error, InvalidTokenError)

    def test_token_from_other_key(self) -> None:
        other = TokenCodec("d" * 64, clock=self.clock)
        token = other.issue(USER, TokenType.ACCESS, timedelta(hours=1))
        result = self.authenticator.authenticate(f"Bearer {token}")
        self.assertIsInstance(result.error, InvalidTokenError)


class TestPrincipalFromClaims(unittest.TestCase):
    def test_admin_authority_wins(self) -> None:
        codec = TokenCodec(SECRET, clock=FixedClock())
        admin = SecurityPrincipal(
            id=1,
            username="admin",
            email="admin@jobmonitor.com",
            role=Role.ADMIN,
            authorities=frozenset({Role.ADMIN.authority}),
        )
        claims = codec.parse(codec.issue(admin, TokenType.ACCESS, timedelta(hours=1)))
        principal = principal_from_claims(claims)
        self.assertEqual(principal.role, Role.ADMIN)
        self.assertEqual(principal.authorities, frozenset({"ROLE_ADMIN"}))
        self.assertTrue(principal.enabled)
