"""
Tests for session token issuance and verification.
"""

import pytest
from jose import jwt

from ordering_api.core.exceptions import AuthError
from ordering_api.services.tokens import Identity, TokenService

SECRET = "unit-test-secret"
ISSUED_AT = 1_700_000_000


class FakeClock:
    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(ISSUED_AT)


@pytest.fixture
def service(clock):
    return TokenService(secret_key=SECRET, ttl_seconds=3600, clock=clock)


class TestIssue:

    def test_embeds_identity_and_expiry(self, service):
        token = service.issue(Identity(id=7, username="jdoe"))
        claims = jwt.decode(token, SECRET, algorithms=["HS256"], options={"verify_exp": False})

        assert claims["id"] == 7
        assert claims["username"] == "jdoe"
        assert claims["iat"] == ISSUED_AT
        assert claims["exp"] == ISSUED_AT + 3600

    def test_deterministic_for_fixed_time(self, service):
        identity = Identity(id=7, username="jdoe")
        assert service.issue(identity) == service.issue(identity)

    def test_differs_across_timestamps(self, service, clock):
        identity = Identity(id=7, username="jdoe")
        first = service.issue(identity)
        clock.now += 1
        assert service.issue(identity) != first

    def test_requires_secret(self):
        with pytest.raises(ValueError):
            TokenService(secret_key="")


class TestVerify:

    def test_round_trip(self, service):
        token = service.issue(Identity(id=7, username="jdoe"))
        identity = service.verify(token)

        assert identity.id == 7
        assert identity.username == "jdoe"
        assert identity.issued_at == ISSUED_AT
        assert identity.expires_at == ISSUED_AT + 3600

    def test_valid_until_just_before_expiry(self, service, clock):
        token = service.issue(Identity(id=7, username="jdoe"))
        clock.now = ISSUED_AT + 3599.999
        assert service.verify(token).id == 7

    @pytest.mark.parametrize("offset", [3600, 3601, 86400])
    def test_rejected_at_or_after_expiry(self, service, clock, offset):
        token = service.issue(Identity(id=7, username="jdoe"))
        clock.now = ISSUED_AT + offset
        with pytest.raises(AuthError):
            service.verify(token)

    def test_rejects_foreign_signature(self, service, clock):
        other = TokenService(secret_key="another-secret", clock=clock)
        token = other.issue(Identity(id=7, username="jdoe"))
        with pytest.raises(AuthError):
            service.verify(token)

    def test_rejects_tampered_payload(self, service):
        token = service.issue(Identity(id=7, username="jdoe"))
        header, _, signature = token.split(".")
        forged_payload = jwt.encode(
            {"id": 1, "username": "admin", "iat": ISSUED_AT, "exp": ISSUED_AT + 3600},
            "guess",
            algorithm="HS256",
        ).split(".")[1]
        with pytest.raises(AuthError):
            service.verify(f"{header}.{forged_payload}.{signature}")

    def test_rejects_other_algorithm(self, service):
        token = jwt.encode(
            {"id": 7, "username": "jdoe", "iat": ISSUED_AT, "exp": ISSUED_AT + 3600},
            SECRET,
            algorithm="HS512",
        )
        with pytest.raises(AuthError):
            service.verify(token)

    @pytest.mark.parametrize("token", [None, "", "not-a-jwt", "a.b.c"])
    def test_rejects_malformed(self, service, token):
        with pytest.raises(AuthError):
            service.verify(token)

    def test_rejects_missing_claims(self, service):
        token = jwt.encode({"id": 7, "iat": ISSUED_AT, "exp": ISSUED_AT + 3600}, SECRET, algorithm="HS256")
        with pytest.raises(AuthError):
            service.verify(token)

    def test_expired_and_tampered_look_the_same(self, service, clock):
        token = service.issue(Identity(id=7, username="jdoe"))

        with pytest.raises(AuthError) as tampered:
            service.verify(token[:-2] + ("AA" if not token.endswith("AA") else "BB"))

        clock.now = ISSUED_AT + 3600
        with pytest.raises(AuthError) as expired:
            service.verify(token)

        assert tampered.value.message == expired.value.message
        assert tampered.value.status_code == expired.value.status_code == 401
