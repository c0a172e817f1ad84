import pytest

from sliders.supervisor import ExponentialBackoff


class TestExponentialBackoff:
    def test_grows_exponentially_without_jitter(self) -> None:
        backoff = ExponentialBackoff(base=0.5, multiplier=2.0, jitter=0.0)

        assert [backoff.delay(n) for n in range(4)] == [0.5, 1.0, 2.0, 4.0]

    def test_caps_at_max_delay(self) -> None:
        backoff = ExponentialBackoff(base=1.0, max_delay=5.0, jitter=0.0)

        assert backoff.delay(10) == 5.0

    @pytest.mark.parametrize("attempt", [0, 1, 5])
    def test_jitter_stays_within_range(self, attempt: int) -> None:
        backoff = ExponentialBackoff(base=1.0, max_delay=8.0, jitter=0.2)
        expected = min(2.0**attempt, 8.0)

        for _ in range(50):
            delay = backoff.delay(attempt)
            assert expected * 0.9 <= delay <= expected * 1.1

    def test_zero_base_never_waits(self) -> None:
        assert ExponentialBackoff(base=0.0).delay(3) == 0.0
