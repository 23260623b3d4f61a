from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class WaitProfile(str, Enum):
    default = "default"
    short = "short"
    long = "long"
    slow_poll = "slow_poll"


class RetryProfile(str, Enum):
    default = "default"
    delayed = "delayed"


class WaitConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    timeout: float = Field(default=5.0, ge=0)
    poll_interval: float = Field(default=0.1, gt=0)


class RetryConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1)
    delay: float = Field(default=0.0, ge=0)
    backoff_factor: float = Field(default=1.0, ge=1)
    max_delay: float = Field(default=32.0, ge=0)
    jitter: bool = False


_WAIT_PROFILES = {
    WaitProfile.default: WaitConfig(timeout=5.0, poll_interval=0.1),
    WaitProfile.short: WaitConfig(timeout=3.0, poll_interval=0.1),
    WaitProfile.long: WaitConfig(timeout=10.0, poll_interval=0.1),
    WaitProfile.slow_poll: WaitConfig(timeout=5.0, poll_interval=0.15),
}

_RETRY_PROFILES = {
    RetryProfile.default: RetryConfig(max_attempts=3),
    RetryProfile.delayed: RetryConfig(max_attempts=3, delay=0.5),
}


def wait_profile(profile: WaitProfile) -> WaitConfig:
    """Return the shared wait settings registered under ``profile``"""
    return _WAIT_PROFILES[WaitProfile(profile)]


def retry_profile(profile: RetryProfile) -> RetryConfig:
    """Return the shared retry settings registered under ``profile``"""
    return _RETRY_PROFILES[RetryProfile(profile)]
