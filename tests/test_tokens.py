"""Tests for TokenCodec: issue/parse, signature checks, token types and expiry."""

import unittest
from unittest.mock import MagicMock
from datetime import timedelta

import jwt

from jobmonitor.core.errors import InvalidTokenError, TokenConfigurationError
from jobmonitor.core.tokens import TokenCodec, TokenType
from jobmonitor.models import Role
from jobmonitor.schemas.auth import SecurityPrincipal
from tests.factories import T0, FixedClock

SECRET = "a" * 64
OTHER_SECRET = "b" * 64


def _principal(role: Role = Role.ADMIN) -> SecurityPrincipal:
    return SecurityPrincipal(
        id=7,
        username="admin",
        email="admin@jobmonitor.com",
        role=role,
        authorities=frozenset({role.authority}),
    )


class TestIssueAndParse(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FixedClock()
        self.codec = TokenCodec(SECRET, clock=self.clock)

    def test_access_token_round_trip(self) -> None:
        token = self.codec.issue(_principal(), TokenType.ACCESS, timedelta(hours=1))
        claims = self.codec.parse(token)
        self.assertEqual(claims.subject, "admin")
        self.assertEqual(claims.user_id, 7)
        self.assertEqual(claims.email, "admin@jobmonitor.com")
        self.assertEqual(claims.authorities, frozenset({"ROLE_ADMIN"}))
        self.assertIs(claims.token_type, TokenType.ACCESS)
        self.assertEqual(claims.issued_at, T0)
        self.assertEqual(claims.expires_at, T0 + timedelta(hours=1))

    def test_refresh_token_omits_email_and_authorities(self) -> None:
        token = self.codec.issue(_principal(), TokenType.REFRESH, timedelta(days=7))
        claims = self.codec.parse(token)
        self.assertIs(claims.token_type, TokenType.REFRESH)
        self.assertIsNone(claims.email)
        self.assertEqual(claims.authorities, frozenset())
        payload = jwt.decode(token, options={"verify_signature": False})
        self.assertNotIn("email", payload)
        self.assertNotIn("authorities", payload)

    def test_tokens_issued_in_same_instant_differ(self) -> None:
        first = self.codec.issue(_principal(), TokenType.REFRESH, timedelta(days=7))
        second = self.codec.issue(_principal(), TokenType.REFRESH, timedelta(days=7))
        self.assertNotEqual(first, second)

    def test_signed_with_hs512_by_default(self) -> None:
        token = self.codec.issue(_principal(), TokenType.ACCESS, timedelta(hours=1))
        self.assertEqual(jwt.get_unverified_header(token)["alg"], "HS512")

    def test_token_type_distinguishes_kinds(self) -> None:
        access = self.codec.parse(self.codec.issue(_principal(), TokenType.ACCESS, timedelta(hours=1)))
        refresh = self.codec.parse(self.codec.issue(_principal(), TokenType.REFRESH, timedelta(days=1)))
        self.assertIs(self.codec.token_type(access), TokenType.ACCESS)
        self.assertIs(self.codec.token_type(refresh), TokenType.REFRESH)


class TestParseRejects(unittest.TestCase):
    def setUp(self) -> None:
        self.codec = TokenCodec(SECRET, clock=FixedClock())

    def test_token_signed_with_other_key(self) -> None:
        other = TokenCodec(OTHER_SECRET, clock=FixedClock())
        token = other.issue(_principal(), TokenType.ACCESS, timedelta(hours=1))
        with self.assertRaises(InvalidTokenError):
            self.codec.parse(token)

    def test_tampered_payload(self) -> None:
        token = self.codec.issue(_principal(Role.USER), TokenType.ACCESS, timedelta(hours=1))
        header, payload, signature = token.split(".")
        forged = TokenCodec(OTHER_SECRET).issue(_principal(Role.ADMIN), TokenType.ACCESS, timedelta(hours=1))
        with self.assertRaises(InvalidTokenError):
            self.codec.parse(".".join([header, forged.split(".")[1], signature]))

    def test_garbage(self) -> None:
        for token in ("", "not-a-token", "a.b.c"):
            with self.subTest(token=token), self.assertRaises(InvalidTokenError):
                self.codec.parse(token)

    def test_missing_token_type_claim(self) -> None:
        token = jwt.encode({"sub": "admin", "userId": 7, "iat": 0, "exp": 10}, SECRET, algorithm="HS512")
        with self.assertRaises(InvalidTokenError):
            self.codec.parse(token)

    def test_unknown_token_type(self) -> None:
        token = jwt.encode(
            {"sub": "admin", "userId": 7, "tokenType": "ID", "iat": 0, "exp": 10},
            SECRET,
            algorithm="HS512",
        )
        with self.assertRaises(InvalidTokenError):
            self.codec.parse(token)

    def test_other_algorithm_rejected(self) -> None:
        token = jwt.encode(
            {"sub": "admin", "userId": 7, "tokenType": "ACCESS", "iat": 0, "exp": 10},
            SECRET,
            algorithm="HS256",
        )
        with self.assertRaises(InvalidTokenError):
            self.codec.parse(token)

    def test_expired_token_still_parses(self) -> None:
        clock = FixedClock()
        codec = TokenCodec(SECRET, clock=clock)
        token = codec.issue(_principal(), TokenType.REFRESH, timedelta(minutes=1))
        clock.advance(timedelta(days=30))
        claims = codec.parse(token)
        self.assertTrue(codec.is_expired(claims))


class TestExpiry(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FixedClock()
        self.codec = TokenCodec(SECRET, clock=self.clock)
        token = self.codec.issue(_principal(), TokenType.ACCESS, timedelta(minutes=60))
        self.claims = self.codec.parse(token)

    def test_not_expired_right_after_issue(self) -> None:
        self.assertFalse(self.codec.is_expired(self.claims))

    def test_not_expired_exactly_at_expiry(self) -> None:
        self.clock.advance(timedelta(minutes=60))
        self.assertFalse(self.codec.is_expired(self.claims))

    def test_expired_after_ttl(self) -> None:
        self.clock.advance(timedelta(minutes=60, seconds=1))
        self.assertTrue(self.codec.is_expired(self.claims))

    def test_explicit_now(self) -> None:
        self.assertTrue(self.codec.is_expired(self.claims, now=T0 + timedelta(days=1)))
        self.assertFalse(self.codec.is_expired(self.claims, now=T0))


class TestConfiguration(unittest.TestCase):
    def test_short_secret_rejected(self) -> None:
        with self.assertRaises(TokenConfigurationError):
            TokenCodec("too-short")

    def test_empty_secret_rejected(self) -> None:
        with self.assertRaises(TokenConfigurationError):
            TokenCodec("")

    def test_unsupported_algorithm_rejected(self) -> None:
        with self.assertRaises(TokenConfigurationError):
            TokenCodec(SECRET, algorithm="RS256")

    def test_from_settings(self) -> None:
        settings = MagicMock()
        settings.JWT_SECRET.get_secret_value.return_value = SECRET
        settings.JWT_ALGORITHM = "HS384"
        codec = TokenCodec.from_settings(settings)
        self.assertEqual(codec.algorithm, "HS384")
