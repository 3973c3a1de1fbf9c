# tests/test_security.py
"""Unit tests for password hashing, session tokens, settings and the capability table."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import jwt
import pytest
from jrdriving.errors import InvalidToken
from jrdriving.models.user import Role
from jrdriving.services.permissions import CAPABILITIES, SIGNUP_ROLES, Capability, is_allowed
from jrdriving.services.security import (
    TokenIssuer, hash_password, hash_reset_secret, new_reset_secret, verify_password,
)
from tests.conftest import make_settings


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("password1")
        assert hashed != "password1"
        assert verify_password("password1", hashed)
        assert not verify_password("password2", hashed)

    def test_corrupt_hash_does_not_raise(self):
        assert verify_password("password1", "not-a-hash") is False

    def test_reset_secret_hash_is_stable(self):
        secret = new_reset_secret()
        assert len(secret) == 64
        assert hash_reset_secret(secret) == hash_reset_secret(secret)
        assert hash_reset_secret(secret) != secret


class TestTokens:
    def test_round_trip(self):
        issuer = TokenIssuer(make_settings())
        claims = issuer.verify(issuer.issue(42, Role.DRIVER))
        assert claims.user_id == 42
        assert claims.role == Role.DRIVER

    def test_expired_token(self):
        issuer = TokenIssuer(make_settings(JWT_TTL_SECONDS=-60))
        with pytest.raises(InvalidToken, match="expired"):
            issuer.verify(issuer.issue(1, Role.CLIENT))

    def test_foreign_signature_rejected(self):
        forged = TokenIssuer(make_settings(JWT_SECRET="other-secret")).issue(1, Role.ADMIN)
        with pytest.raises(InvalidToken):
            TokenIssuer(make_settings()).verify(forged)

    def test_garbage_rejected(self):
        with pytest.raises(InvalidToken):
            TokenIssuer(make_settings()).verify("not.a.token")

    def test_missing_role_claim_rejected(self):
        token = jwt.encode({"sub": "1"}, "test-secret", algorithm="HS256")
        with pytest.raises(InvalidToken):
            TokenIssuer(make_settings()).verify(token)


class TestSettings:
    def test_production_requires_secret(self):
        with pytest.raises(ValueError):
            make_settings(ENVIRONMENT="production", JWT_SECRET="change-me")

    def test_production_with_secret(self):
        assert make_settings(ENVIRONMENT="production", JWT_SECRET="s3cret-value").is_production

    def test_webhook_lists(self):
        settings = make_settings(MISSION_STATUS_WEBHOOKS=" http://a/hook , ,http://b/hook")
        assert settings.WEBHOOKS["mission_status"] == ["http://a/hook", "http://b/hook"]
        assert settings.WEBHOOKS["quote_created"] == []


class TestCapabilities:
    def test_every_capability_has_roles(self):
        assert set(CAPABILITIES) == set(Capability)

    def test_admin_only_operations(self):
        for capability in (Capability.DASHBOARD_READ, Capability.QUOTE_REVIEW, Capability.MISSION_CREATE):
            assert is_allowed(Role.ADMIN, capability)
            assert not is_allowed(Role.DRIVER, capability)
            assert not is_allowed(Role.CLIENT, capability)

    def test_status_change_roles(self):
        assert is_allowed(Role.DRIVER, Capability.MISSION_CHANGE_STATUS)
        assert not is_allowed(Role.CLIENT, Capability.MISSION_CHANGE_STATUS)

    def test_admin_not_offered_at_signup(self):
        assert Role.ADMIN not in SIGNUP_ROLES
