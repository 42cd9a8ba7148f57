"""Tests for services/auth_service.py -- register, login, logout, authenticate."""

from __future__ import annotations

import pytest

from models import BlacklistedToken
from services.exceptions import (
    DuplicateEmail,
    InvalidCredentials,
    MissingToken,
    StoreUnavailable,
    TokenExpired,
    TokenInvalid,
    TokenRevoked,
    ValidationError,
)


class TestRegister:
    def test_register_returns_user_with_hash(self, service, clock) -> None:
        user = service.register("a@x.com", "secret123", "Al")
        assert user.id
        assert user.email == "a@x.com"
        assert user.name == "Al"
        assert user.password_hash != "secret123"
        assert service.hasher.verify(user.password_hash, "secret123")
        assert user.created_at == user.updated_at == clock()

    def test_name_is_optional(self, service) -> None:
        assert service.register("a@x.com", "secret123").name is None

    def test_duplicate_email_rejected(self, service) -> None:
        first = service.register("a@x.com", "secret123", "Al")
        with pytest.raises(DuplicateEmail):
            service.register("a@x.com", "other-password", "Imposter")
        user, _token = service.login("a@x.com", "secret123")
        assert user.id == first.id

    def test_empty_password_rejected(self, service) -> None:
        with pytest.raises(ValidationError):
            service.register("a@x.com", "", "Al")

    def test_register_never_logs_password(self, service, caplog) -> None:
        caplog.set_level("DEBUG")
        service.register("a@x.com", "secret123", "Al")
        assert "secret123" not in caplog.text


class TestLogin:
    def test_login_issues_token_for_stored_user(self, service) -> None:
        registered = service.register("a@x.com", "secret123", "Al")
        user, token = service.login("a@x.com", "secret123")
        assert user.id == registered.id
        claims = service.authenticate(token)
        assert claims.email == "a@x.com"
        assert claims.user_id == registered.id

    def test_wrong_password_and_unknown_email_look_identical(self, service) -> None:
        service.register("a@x.com", "secret123", "Al")
        with pytest.raises(InvalidCredentials) as wrong:
            service.login("a@x.com", "wrongpass")
        with pytest.raises(InvalidCredentials) as unknown:
            service.login("nobody@x.com", "secret123")
        assert str(wrong.value) == str(unknown.value)
        assert (wrong.value.code, wrong.value.status) == (unknown.value.code, unknown.value.status)
        # the reason is internal only
        assert (wrong.value.reason, unknown.value.reason) == ("mismatch", "not_found")

    def test_login_never_logs_secrets(self, service, caplog) -> None:
        service.register("a@x.com", "secret123", "Al")
        caplog.set_level("DEBUG")
        user, token = service.login("a@x.com", "secret123")
        with pytest.raises(InvalidCredentials):
            service.login("a@x.com", "wrongpass")
        assert "secret123" not in caplog.text
        assert "wrongpass" not in caplog.text
        assert user.password_hash not in caplog.text
        assert token not in caplog.text


class TestLogoutAndAuthenticate:
    def test_logout_revokes_unexpired_token(self, service) -> None:
        service.register("a@x.com", "secret123", "Al")
        _user, token = service.login("a@x.com", "secret123")
        service.logout(token)
        with pytest.raises(TokenRevoked):
            service.authenticate(token)

    def test_logout_only_revokes_that_token(self, service) -> None:
        service.register("a@x.com", "secret123", "Al")
        _u, first = service.login("a@x.com", "secret123")
        _u, second = service.login("a@x.com", "secret123")
        service.logout(first)
        assert service.authenticate(second).email == "a@x.com"

    def test_logout_records_revocation_time(self, service, storage, clock) -> None:
        service.logout("some-token")
        row = storage.get_session().get(BlacklistedToken, "some-token")
        assert row.revoked_at == int(clock().timestamp())

    @pytest.mark.parametrize("token", [None, "", "   "])
    def test_logout_requires_token(self, service, token) -> None:
        with pytest.raises(MissingToken):
            service.logout(token)

    def test_logout_is_idempotent(self, service) -> None:
        service.logout("tok")
        service.logout("tok")

    def test_logout_accepts_invalid_and_expired_tokens(self, service, clock) -> None:
        service.register("a@x.com", "secret123", "Al")
        _user, token = service.login("a@x.com", "secret123")
        clock.advance(days=2)
        service.logout(token)
        service.logout("definitely-not-a-jwt")

    def test_token_expires_after_24_hours(self, service, clock) -> None:
        service.register("a@x.com", "secret123", "Al")
        _user, token = service.login("a@x.com", "secret123")
        clock.advance(hours=24)
        with pytest.raises(TokenExpired):
            service.authenticate(token)

    def test_rejections_share_one_caller_visible_kind(self, service, clock) -> None:
        service.register("a@x.com", "secret123", "Al")
        _u, revoked = service.login("a@x.com", "secret123")
        service.logout(revoked)
        for token in (revoked, "garbage"):
            with pytest.raises(TokenInvalid) as excinfo:
                service.authenticate(token)
            assert excinfo.value.status == 401

    def test_current_user_for_unknown_id(self, service) -> None:
        from utils.security import TokenClaims

        claims = TokenClaims(email="ghost@x.com", user_id="missing", expires_at=None)
        with pytest.raises(TokenInvalid):
            service.current_user(claims)

    def test_store_outage_surfaces_as_store_unavailable(self, service, storage) -> None:
        from models import Base

        Base.metadata.drop_all(storage.engine)
        with pytest.raises(StoreUnavailable):
            service.login("a@x.com", "secret123")
        with pytest.raises(StoreUnavailable):
            service.logout("tok")


def test_end_to_end_session_lifecycle(service) -> None:
    """Register -> login -> authenticate -> logout -> revoked -> wrong password."""
    al = service.register("a@x.com", "secret123", "Al")

    user, token = service.login("a@x.com", "secret123")
    assert user.name == "Al"

    claims = service.authenticate(token)
    assert claims.to_dict() == {"email": "a@x.com", "user_id": al.id}

    service.logout(token)
    with pytest.raises(TokenRevoked):
        service.authenticate(token)

    with pytest.raises(InvalidCredentials):
        service.login("a@x.com", "wrongpass")
