"""Unit tests for the JWT token service."""

import uuid
from datetime import timedelta

import jwt
import pytest

from eventauth.domain.exceptions import SigningError, TokenExpiredError, TokenInvalidError
from eventauth.infrastructure.auth.jwt_service import JWTService, token_fingerprint

USER_ID = str(uuid.uuid4())
WEEK = timedelta(days=7)


@pytest.fixture
def token(jwt_service: JWTService, clock) -> str:
    return jwt_service.issue(USER_ID, "alice", clock() + WEEK)


class TestIssue:
    """Tests for JWTService.issue."""

    def test_wire_claims(self, token, clock, token_secret):
        header = jwt.get_unverified_header(token)
        payload = jwt.decode(
            token,
            token_secret,
            algorithms=["HS256"],
            options={"verify_exp": False},
        )

        assert header["alg"] == "HS256"
        assert payload == {
            "sub": USER_ID,
            "username": "alice",
            "exp": int((clock() + WEEK).timestamp()),
        }

    def test_empty_secret_raises_signing_error(self, clock):
        service = JWTService(secret_key="", clock=clock)

        with pytest.raises(SigningError):
            service.issue(USER_ID, "alice", clock() + WEEK)

    def test_unsupported_algorithm_raises_signing_error(self, clock, token_secret):
        service = JWTService(secret_key=token_secret, algorithm="XX999", clock=clock)

        with pytest.raises(SigningError):
            service.issue(USER_ID, "alice", clock() + WEEK)


class TestParse:
    """Tests for JWTService.parse."""

    def test_returns_claims_as_issued(self, jwt_service, token, clock):
        claims = jwt_service.parse(token)

        assert claims.user_id == USER_ID
        assert claims.username == "alice"
        assert claims.expires_at == clock() + WEEK

    def test_expired_token(self, jwt_service, token, clock):
        clock.advance(WEEK + timedelta(seconds=1))

        with pytest.raises(TokenExpiredError):
            jwt_service.parse(token)

    def test_token_expires_at_exact_expiry_instant(self, jwt_service, token, clock):
        clock.advance(WEEK)

        with pytest.raises(TokenExpiredError):
            jwt_service.parse(token)

    def test_valid_one_second_before_expiry(self, jwt_service, token, clock):
        clock.advance(WEEK - timedelta(seconds=1))

        assert jwt_service.parse(token).username == "alice"

    def test_tampered_signature(self, jwt_service, token, tamper):
        with pytest.raises(TokenInvalidError):
            jwt_service.parse(tamper(token))

    def test_tampered_expired_token_is_invalid_not_expired(self, jwt_service, token, clock, tamper):
        """Signature is checked before expiry."""
        clock.advance(WEEK * 2)

        with pytest.raises(TokenInvalidError):
            jwt_service.parse(tamper(token))

    def test_wrong_secret(self, token, clock):
        other = JWTService(secret_key="another-secret-that-is-long-enough-too", clock=clock)

        with pytest.raises(TokenInvalidError):
            other.parse(token)

    @pytest.mark.parametrize("garbage", ["", "abc", "a.b.c", "not.a.jwt.at.all"])
    def test_garbage(self, jwt_service, garbage):
        with pytest.raises(TokenInvalidError):
            jwt_service.parse(garbage)

    def test_missing_subject(self, jwt_service, clock, token_secret):
        forged = jwt.encode(
            {"username": "alice", "exp": int((clock() + WEEK).timestamp())},
            token_secret,
            algorithm="HS256",
        )

        with pytest.raises(TokenInvalidError):
            jwt_service.parse(forged)

    def test_missing_expiry(self, jwt_service, token_secret):
        forged = jwt.encode(
            {"sub": USER_ID, "username": "alice"},
            token_secret,
            algorithm="HS256",
        )

        with pytest.raises(TokenInvalidError):
            jwt_service.parse(forged)

    def test_unsigned_token_rejected(self, jwt_service, clock):
        forged = jwt.encode(
            {"sub": USER_ID, "username": "alice", "exp": int((clock() + WEEK).timestamp())},
            None,
            algorithm="none",
        )

        with pytest.raises(TokenInvalidError):
            jwt_service.parse(forged)


class TestRefresh:
    """Tests for JWTService.refresh."""

    def test_refresh_keeps_identity_and_moves_expiry(self, jwt_service, token, clock):
        clock.advance(timedelta(hours=1))

        new_token = jwt_service.refresh(token, clock() + WEEK)
        old_claims = jwt_service.parse(token)
        new_claims = jwt_service.parse(new_token)

        assert new_claims.user_id == old_claims.user_id
        assert new_claims.username == old_claims.username
        assert new_claims.expires_at > old_claims.expires_at

    def test_immediate_refresh_moves_expiry(self, jwt_service, token, clock):
        new_token = jwt_service.refresh(token, clock() + WEEK)

        assert new_token != token
        assert jwt_service.parse(new_token).expires_at > jwt_service.parse(token).expires_at

    def test_refresh_keeps_requested_expiry_when_later(self, jwt_service, token, clock):
        clock.advance(timedelta(days=1))

        new_token = jwt_service.refresh(token, clock() + WEEK)

        assert jwt_service.parse(new_token).expires_at == clock() + WEEK

    def test_refresh_expired_token(self, jwt_service, token, clock):
        clock.advance(WEEK * 2)

        with pytest.raises(TokenExpiredError):
            jwt_service.refresh(token, clock() + WEEK)

    def test_refresh_tampered_token(self, jwt_service, token, clock, tamper):
        with pytest.raises(TokenInvalidError):
            jwt_service.refresh(tamper(token), clock() + WEEK)


def test_token_fingerprint_is_short_and_stable(token):
    assert len(token_fingerprint(token)) == 12
    assert token_fingerprint(token) == token_fingerprint(token)
