import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, TypeVar

from loguru import logger
from wait_helper.errors import ConditionCancelledError, ConditionTimeoutError
from wait_helper.models import RetryConfig, WaitConfig

T = TypeVar("T")

Condition = Callable[[], Awaitable[bool]]
Operation = Callable[[], Awaitable[T]]
RetryCallback = Callable[[int, BaseException], Any]


def _subject(label: Optional[str], kind: str = "Condition") -> str:
    return f"{kind} '{label}'" if label else kind


class WaitHelper:
    def __init__(
        self,
        wait_config: Optional[WaitConfig] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        self.wait_config = wait_config or WaitConfig()
        self.retry_config = retry_config or RetryConfig()
        self.logger = logger

    def _resolve_wait_config(
        self,
        config: Optional[WaitConfig],
        timeout: Optional[float],
        poll_interval: Optional[float],
    ) -> WaitConfig:
        """Merges per-call overrides into the base config, validating the result"""
        base = config or self.wait_config
        return WaitConfig(
            timeout=base.timeout if timeout is None else timeout,
            poll_interval=base.poll_interval if poll_interval is None else poll_interval,
        )

    async def _evaluate(
        self, condition: Condition, ignore_errors: bool, label: Optional[str]
    ) -> bool:
        """Evaluates the condition once, optionally treating errors as false"""
        if not ignore_errors:
            return bool(await condition())

        try:
            return bool(await condition())
        except Exception as e:
            self.logger.debug(f"{_subject(label)} raised {e!r}, treating as false")
            return False

    async def _pause(self, delay: float, cancel_event: Optional[asyncio.Event]) -> bool:
        """Sleeps for delay seconds; returns True if the cancel event fired first"""
        if cancel_event is None:
            await asyncio.sleep(delay)
            return False

        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    async def wait_for_condition(
        self,
        condition: Condition,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        *,
        config: Optional[WaitConfig] = None,
        label: Optional[str] = None,
        ignore_errors: bool = False,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        """Poll condition until it returns true or the timeout budget is spent.

        The first check runs immediately. Between unsuccessful checks the helper
        sleeps for poll_interval, never past the deadline, so the last check
        happens when the budget runs out. A zero timeout checks exactly once.

        Raises ConditionTimeoutError when the budget is spent and
        ConditionCancelledError when cancel_event is set. Exceptions raised by
        the condition propagate unless ignore_errors is set.
        """
        settings = self._resolve_wait_config(config, timeout, poll_interval)
        loop = asyncio.get_event_loop()
        start = loop.time()
        deadline = start + settings.timeout
        checks = 0

        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise ConditionCancelledError(
                    settings.timeout, loop.time() - start, checks, label
                )

            checks += 1
            if await self._evaluate(condition, ignore_errors, label):
                self.logger.debug(
                    f"{_subject(label)} met after {checks} checks "
                    f"({loop.time() - start:.3f}s)"
                )
                return

            remaining = deadline - loop.time()
            if remaining <= 0:
                break

            delay = min(settings.poll_interval, remaining)
            self.logger.debug(
                f"{_subject(label)} not met, waiting {delay:.3f}s before next check"
            )
            if await self._pause(delay, cancel_event):
                raise ConditionCancelledError(
                    settings.timeout, loop.time() - start, checks, label
                )

        error = ConditionTimeoutError(settings.timeout, loop.time() - start, checks, label)
        self.logger.error(str(error))
        raise error

    def _calculate_delay(self, settings: RetryConfig, attempt: int) -> float:
        """Calculates the delay after a failed attempt using exponential backoff with an optional jitter"""
        if settings.delay == 0:
            return 0.0

        delay = min(
            settings.delay * (settings.backoff_factor ** (attempt - 1)),
            settings.max_delay,
        )

        # Add jitter between 0-20% of the delay
        if settings.jitter:
            delay *= 1 + 0.2 * (asyncio.get_event_loop().time() % 1)
        return delay

    async def _handle_retry(
        self, on_retry: Optional[RetryCallback], attempt: int, error: BaseException
    ) -> None:
        """Invoke the retry callback, awaiting it when it returns an awaitable"""
        if on_retry is None:
            return
        result = on_retry(attempt, error)
        if inspect.isawaitable(result):
            await result

    async def retry_operation(
        self,
        operation: Operation,
        max_attempts: Optional[int] = None,
        *,
        config: Optional[RetryConfig] = None,
        label: Optional[str] = None,
        on_retry: Optional[RetryCallback] = None,
    ) -> T:
        """Invoke operation until it succeeds or max_attempts attempts have failed.

        The first call counts as attempt 1. Once attempts are exhausted the
        exception from the last attempt is re-raised unchanged; earlier errors
        are only logged.
        """
        settings = config or self.retry_config
        if max_attempts is not None:
            settings = RetryConfig(**{**settings.model_dump(), "max_attempts": max_attempts})

        name = _subject(label, "Operation")
        last_error: Optional[Exception] = None

        for attempt in range(1, settings.max_attempts + 1):
            try:
                result = await operation()
            except Exception as e:
                last_error = e
                if attempt == settings.max_attempts:
                    break

                self.logger.debug(
                    f"{name} attempt {attempt}/{settings.max_attempts} failed: {e!r}"
                )
                await self._handle_retry(on_retry, attempt, e)

                delay = self._calculate_delay(settings, attempt)
                if delay > 0:
                    await asyncio.sleep(delay)
                continue

            if attempt > 1:
                self.logger.debug(f"{name} succeeded on attempt {attempt}")
            return result

        self.logger.error(
            f"{name} failed after {settings.max_attempts} attempts: {last_error!r}"
        )
        raise last_error


async def wait_for_condition(
    condition: Condition,
    timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
    **kwargs: Any,
) -> None:
    """Poll condition with a default WaitHelper; see WaitHelper.wait_for_condition"""
    await WaitHelper().wait_for_condition(condition, timeout, poll_interval, **kwargs)


async def retry_operation(
    operation: Operation, max_attempts: Optional[int] = None, **kwargs: Any
) -> Any:
    """Retry operation with a default WaitHelper; see WaitHelper.retry_operation"""
    return await WaitHelper().retry_operation(operation, max_attempts, **kwargs)
