import pytest

from lunex import ExponentialBackoff, FixedBackoff, FunctionalBackoff, coerce_backoff


def test_string_and_number_policies():
    assert isinstance(coerce_backoff(None), ExponentialBackoff)
    assert isinstance(coerce_backoff("exponential"), ExponentialBackoff)
    assert isinstance(coerce_backoff("fixed"), FixedBackoff)
    assert coerce_backoff(120).delay_for(3) == 120  # noqa: PLR2004
    with pytest.raises(ValueError):
        coerce_backoff("linear")
    with pytest.raises(TypeError):
        coerce_backoff(True)


def test_exponential_schedule_is_capped_and_non_decreasing():
    pol = ExponentialBackoff(base_ms=100, growth=2.0, cap_ms=1000)
    delays = [pol.delay_for(n) for n in range(1, 10)]
    assert delays[:4] == [100, 200, 400, 800]
    assert max(delays) == 1000  # noqa: PLR2004
    assert delays == sorted(delays)
    assert pol.delay_for(10_000) == 1000  # noqa: PLR2004


def test_callable_policy_is_clamped_monotonic():
    pol = coerce_backoff(lambda n: 300 if n == 1 else 50)
    assert isinstance(pol, FunctionalBackoff)
    assert [pol.delay_for(n) for n in (1, 2, 3)] == [300, 300, 300]


def test_invalid_policy_args():
    with pytest.raises(ValueError):
        ExponentialBackoff(growth=0.5)
    with pytest.raises(ValueError):
        FixedBackoff(-1)
    with pytest.raises(TypeError):
        coerce_backoff(lambda a, b: 0)
