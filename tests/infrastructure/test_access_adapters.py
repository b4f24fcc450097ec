"""Tests for the token authenticator and the JSON rate limiter."""

import json

import pytest

from storefront.domain.exceptions import AuthorizationError
from storefront.domain.model.user import User
from storefront.infrastructure.persistence import atomic_write
from storefront.infrastructure.security.json_rate_limiter import JsonRateLimiter
from storefront.infrastructure.security.token_authenticator import TokenAuthenticator
from tests.fakes import FakeUnitOfWork


class TestTokenAuthenticator:

    def _authenticator(self):
        users = [
            User.create("user_admin", "owner@example.com", token="admin-token", is_admin=True),
            User.create("user_alice", "alice@example.com", token="alice-token"),
        ]
        return TokenAuthenticator(FakeUnitOfWork(users=users))

    def test_resolves_identity(self):
        auth = self._authenticator()
        assert auth.resolve("alice-token").user_id == "user_alice"
        assert auth.resolve(" admin-token ").is_admin is True

    @pytest.mark.parametrize("token", [None, "", "   ", "wrong-token"])
    def test_rejects_with_generic_message(self, token):
        with pytest.raises(AuthorizationError, match="^Authentication required$"):
            self._authenticator().resolve(token)


class _Clock:

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestJsonRateLimiter:

    def test_allows_up_to_budget_then_denies(self, tmp_path):
        limiter = JsonRateLimiter(tmp_path / "limits.json", clock=_Clock())

        assert [limiter.check("k", 3, 60_000) for _ in range(4)] == [True, True, True, False]

    def test_window_resets(self, tmp_path):
        clock = _Clock()
        limiter = JsonRateLimiter(tmp_path / "limits.json", clock=clock)
        limiter.check("k", 1, 60_000)
        assert limiter.check("k", 1, 60_000) is False

        clock.now += 61
        assert limiter.check("k", 1, 60_000) is True

    def test_keys_are_independent(self, tmp_path):
        limiter = JsonRateLimiter(tmp_path / "limits.json", clock=_Clock())
        assert limiter.check("order:create:a", 1, 60_000)
        assert limiter.check("order:create:b", 1, 60_000)
        assert not limiter.check("order:create:a", 1, 60_000)

    def test_budget_shared_across_instances(self, tmp_path):
        clock = _Clock()
        JsonRateLimiter(tmp_path / "limits.json", clock=clock).check("k", 1, 60_000)
        assert JsonRateLimiter(tmp_path / "limits.json", clock=clock).check("k", 1, 60_000) is False

    def test_expired_windows_pruned(self, tmp_path):
        clock = _Clock()
        path = tmp_path / "limits.json"
        limiter = JsonRateLimiter(path, clock=clock)
        limiter.check("old", 5, 1_000)
        clock.now += 2
        limiter.check("new", 5, 1_000)
        assert set(json.loads(path.read_text())) == {"new"}

    def test_unreadable_file_reset(self, tmp_path):
        path = tmp_path / "limits.json"
        path.write_text("garbage")
        assert JsonRateLimiter(path, clock=_Clock()).check("k", 1, 60_000) is True

    def test_failed_write_keeps_previous_windows(self, tmp_path, monkeypatch):
        path = tmp_path / "limits.json"
        limiter = JsonRateLimiter(path, clock=_Clock())
        limiter.check("k", 1, 60_000)
        before = path.read_text()

        def crash(fd):
            raise OSError("disk full")

        monkeypatch.setattr(atomic_write.os, "fsync", crash)
        with pytest.raises(OSError, match="disk full"):
            limiter.check("other", 1, 60_000)

        assert path.read_text() == before
        assert sorted(p.name for p in tmp_path.iterdir()) == ["limits.json", "limits.json.lock"]
        monkeypatch.undo()
        assert limiter.check("k", 1, 60_000) is False
