"""
Exceptions raised by the wait helpers.

Errors raised by caller-supplied conditions and operations are never wrapped
in these types; they propagate unchanged.
"""

from typing import Optional


class WaitHelperError(Exception):
    """Base exception for failures introduced by the wait helpers themselves."""

    pass


class ConditionTimeoutError(WaitHelperError, TimeoutError):
    """Raised when a condition is still false once the timeout budget is spent."""

    def __init__(
        self,
        timeout: float,
        elapsed: float,
        checks: int,
        label: Optional[str] = None,
    ):
        self.timeout = timeout
        self.elapsed = elapsed
        self.checks = checks
        self.label = label
        super().__init__(self._describe())

    def _describe(self) -> str:
        subject = f"Condition '{self.label}'" if self.label else "Condition"
        return (
            f"{subject} not met within {self.timeout}s "
            f"({self.checks} checks, {self.elapsed:.3f}s elapsed)"
        )


class ConditionCancelledError(ConditionTimeoutError):
    """Raised when polling is stopped through its cancel event."""

    def _describe(self) -> str:
        subject = f"Condition '{self.label}'" if self.label else "Condition"
        return (
            f"{subject} polling cancelled after {self.elapsed:.3f}s "
            f"({self.checks} checks, timeout {self.timeout}s)"
        )
