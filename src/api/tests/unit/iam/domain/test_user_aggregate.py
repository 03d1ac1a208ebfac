"""Unit tests for the User aggregate's lockout rules."""

from datetime import UTC, datetime, timedelta

from iam.domain.aggregates import User

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def make_user(**overrides) -> User:
    fields = dict(
        id=None, username="alice", email="alice@example.com", name="Alice"
    )
    fields.update(overrides)
    return User(**fields)


class TestLockout:
    def test_failures_below_threshold_do_not_lock(self):
        user = make_user().with_failure_count(1, 3, 30, 600, now=NOW)

        assert user.failed_login_attempts == 1
        assert not user.is_locked(NOW)

    def test_reaching_threshold_locks_for_base_period(self):
        user = make_user(failed_login_attempts=2).with_failure_count(
            3, 3, 30, 600, now=NOW
        )

        assert user.failed_login_attempts == 3
        assert user.locked_until == NOW + timedelta(seconds=30)
        assert user.is_locked(NOW)
        assert not user.is_locked(NOW + timedelta(seconds=31))

    def test_stored_count_wins_over_stale_copy(self):
        # another request recorded failures after this copy was loaded
        user = make_user(failed_login_attempts=0).with_failure_count(
            4, 3, 30, 600, now=NOW
        )

        assert user.failed_login_attempts == 4
        assert user.locked_until == NOW + timedelta(seconds=60)

    def test_lockout_doubles_with_each_further_failure(self):
        user = make_user().with_failure_count(5, 3, 30, 600, now=NOW)
        assert user.locked_until == NOW + timedelta(seconds=120)

    def test_lockout_is_capped(self):
        user = make_user().with_failure_count(51, 3, 30, 600, now=NOW)
        assert user.locked_until == NOW + timedelta(seconds=600)

    def test_clear_resets_counter_and_lock(self):
        user = make_user(failed_login_attempts=5, locked_until=NOW)

        cleared = user.clear_failed_attempts()

        assert cleared.failed_login_attempts == 0
        assert cleared.locked_until is None


class TestRegistration:
    def test_email_is_normalized(self):
        user = User.register(
            username="alice",
            email="  Alice@Example.COM ",
            name="Alice",
            password_hash=None,
        )

        assert user.email == "alice@example.com"
        assert user.is_passwordless

    def test_second_factor_flag(self):
        assert make_user(totp_secret="JBSWY3DPEHPK3PXP").has_totp
        assert not make_user().has_totp
