"""Tests for the per-owner creation quota."""

import time

import pytest

from recipe_intake.jobs.rate_limit import MovingWindowQuota, QuotaTracker


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock()
    monkeypatch.setattr(time, "time", fake)
    return fake


@pytest.fixture
def quota(clock):
    return MovingWindowQuota(max_requests=3, window_seconds=60)


class TestMovingWindowQuota:
    """Tests for the moving window over in-memory storage."""

    def test_allows_up_to_limit(self, quota):
        decisions = [quota.try_acquire("user-1") for _ in range(3)]
        assert all(d.allowed for d in decisions)
        assert [d.remaining for d in decisions] == [2, 1, 0]

    def test_rejects_over_limit(self, quota, clock):
        for _ in range(3):
            quota.try_acquire("user-1")
        clock.advance(20)

        decision = quota.try_acquire("user-1")

        assert not decision.allowed
        assert decision.remaining == 0
        assert decision.retry_after_seconds == pytest.approx(40)

    def test_rejections_do_not_consume(self, quota, clock):
        for _ in range(3):
            quota.try_acquire("user-1")
        for _ in range(5):
            assert not quota.try_acquire("user-1").allowed

        clock.advance(61)
        assert quota.try_acquire("user-1").allowed

    def test_window_moves(self, quota, clock):
        quota.try_acquire("user-1")
        clock.advance(30)
        quota.try_acquire("user-1")
        quota.try_acquire("user-1")
        assert not quota.try_acquire("user-1").allowed

        clock.advance(31)
        assert quota.try_acquire("user-1").allowed
        assert not quota.try_acquire("user-1").allowed

    def test_check_does_not_consume(self, quota):
        for _ in range(5):
            decision = quota.check("user-1")
            assert decision.allowed
            assert decision.remaining == 3

        assert all(quota.try_acquire("user-1").allowed for _ in range(3))

    def test_check_reports_rejection(self, quota, clock):
        for _ in range(3):
            quota.try_acquire("user-1")
        clock.advance(15)

        decision = quota.check("user-1")

        assert not decision.allowed
        assert decision.retry_after_seconds == pytest.approx(45)

    def test_keys_are_independent(self, quota):
        for _ in range(3):
            quota.try_acquire("user-1")
        assert quota.try_acquire("user-2").allowed

    def test_reset(self, quota):
        for _ in range(3):
            quota.try_acquire("user-1")
            quota.try_acquire("user-2")

        quota.reset("user-1")
        assert quota.try_acquire("user-1").allowed
        assert not quota.try_acquire("user-2").allowed

        quota.reset()
        assert quota.try_acquire("user-2").allowed

    def test_instances_do_not_share_memory_storage(self, clock):
        first = MovingWindowQuota(max_requests=1, window_seconds=60)
        second = MovingWindowQuota(max_requests=1, window_seconds=60)

        assert first.try_acquire("user-1").allowed
        assert second.try_acquire("user-1").allowed

    def test_invalid_configuration(self):
        with pytest.raises(ValueError):
            MovingWindowQuota(max_requests=0, window_seconds=60)
        with pytest.raises(ValueError):
            MovingWindowQuota(max_requests=1, window_seconds=0)

    def test_satisfies_protocol(self, quota):
        assert isinstance(quota, QuotaTracker)
