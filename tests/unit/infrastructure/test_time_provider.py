"""Tests for TimeProvider implementations.

Payments stamp created_at/verified_at from a TimeProvider, so both adapters
must hand out timezone-aware UTC datetimes.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta, timezone

import pytest

from paybridge.application.ports import TimeProvider
from paybridge.infrastructure.time_provider import (
    FixedTimeProvider,
    SystemTimeProvider,
)

NON_UTC = timezone(timedelta(hours=1))


class TestSystemTimeProvider:
    def test_implements_time_provider_interface(self) -> None:
        assert isinstance(SystemTimeProvider(), TimeProvider)

    def test_now_returns_utc_datetime(self) -> None:
        assert SystemTimeProvider().now().tzinfo is UTC

    def test_now_returns_current_time(self) -> None:
        provider = SystemTimeProvider()
        before = datetime.now(UTC)

        result = provider.now()

        after = datetime.now(UTC)
        assert before <= result <= after


class TestFixedTimeProvider:
    def test_now_returns_same_time_on_successive_calls(self, fixed_time: datetime) -> None:
        provider = FixedTimeProvider(fixed_time)

        assert provider.now() == provider.now() == fixed_time

    def test_set_time_changes_returned_time(self, fixed_time: datetime) -> None:
        provider = FixedTimeProvider(fixed_time)
        later = fixed_time + timedelta(hours=2)

        provider.set_time(later)

        assert provider.now() == later

    def test_advance_moves_clock_forward(self, fixed_time: datetime) -> None:
        provider = FixedTimeProvider(fixed_time)

        provider.advance(timedelta(minutes=5))
        provider.advance(timedelta(seconds=30))

        assert provider.now() == fixed_time + timedelta(minutes=5, seconds=30)
        assert provider.now().tzinfo is UTC

    def test_clock_never_moves_backwards(self, fixed_time: datetime) -> None:
        provider = FixedTimeProvider(fixed_time)

        with pytest.raises(ValueError, match="backwards"):
            provider.advance(timedelta(seconds=-1))
        with pytest.raises(ValueError, match="backwards"):
            provider.set_time(fixed_time - timedelta(days=1))

        assert provider.now() == fixed_time

    def test_concurrent_advances_are_not_lost(self, fixed_time: datetime) -> None:
        provider = FixedTimeProvider(fixed_time)

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(lambda _: provider.advance(timedelta(seconds=1)), range(100)))

        assert provider.now() == fixed_time + timedelta(seconds=100)


# =============================================================================
# UTC Validation
# =============================================================================


class TestFixedTimeProviderUtcValidation:
    def test_creation_raises_for_naive_datetime(self) -> None:
        with pytest.raises(ValueError, match="tzinfo=UTC"):
            FixedTimeProvider(datetime(2024, 1, 15, 12, 0, 0))

    def test_creation_raises_for_non_utc_timezone(self) -> None:
        with pytest.raises(ValueError, match="tzinfo=UTC"):
            FixedTimeProvider(datetime(2024, 1, 15, 12, 0, 0, tzinfo=NON_UTC))

    def test_set_time_raises_for_non_utc_timezone(self, fixed_time: datetime) -> None:
        provider = FixedTimeProvider(fixed_time)

        with pytest.raises(ValueError, match="tzinfo=UTC"):
            provider.set_time(datetime(2024, 1, 15, 13, 0, 0, tzinfo=NON_UTC))

        assert provider.now() == fixed_time
