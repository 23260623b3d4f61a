import pytest
from pydantic import ValidationError
from wait_helper.models import (
    RetryConfig,
    RetryProfile,
    WaitConfig,
    WaitProfile,
    retry_profile,
    wait_profile,
)


@pytest.mark.parametrize(
    "profile, timeout, poll_interval",
    [
        (WaitProfile.default, 5.0, 0.1),
        (WaitProfile.short, 3.0, 0.1),
        (WaitProfile.long, 10.0, 0.1),
        (WaitProfile.slow_poll, 5.0, 0.15),
    ],
)
def test_wait_profiles(profile, timeout, poll_interval):
    config = wait_profile(profile)
    assert config.timeout == timeout
    assert config.poll_interval == poll_interval


def test_profiles_accept_plain_names():
    assert wait_profile("short") is wait_profile(WaitProfile.short)
    assert retry_profile("delayed").delay == 0.5


def test_default_retry_profile_has_no_delay():
    config = retry_profile(RetryProfile.default)
    assert config.max_attempts == 3
    assert config.delay == 0.0


def test_unknown_profile_is_rejected():
    with pytest.raises(ValueError):
        wait_profile("glacial")


def test_shared_profiles_are_frozen():
    with pytest.raises(ValidationError):
        wait_profile(WaitProfile.default).timeout = 60.0


def test_zero_timeout_is_allowed():
    assert WaitConfig(timeout=0).timeout == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_attempts": 0},
        {"max_attempts": -1},
        {"delay": -0.5},
        {"backoff_factor": 0.5},
    ],
)
def test_invalid_retry_config(kwargs):
    with pytest.raises(ValidationError):
        RetryConfig(**kwargs)
