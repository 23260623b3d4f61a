"""
Building blocks for conditions passed to WaitHelper.wait_for_condition.

Every helper returns a zero-argument callable producing an awaitable bool, so
the results compose with each other and with hand-written conditions.
"""

from typing import Any

import aiohttp
from loguru import logger
from wait_helper.wait_helper import Condition


def negate(condition: Condition) -> Condition:
    """True once condition turns false, e.g. a notification disappearing"""

    async def _negated() -> bool:
        return not await condition()

    return _negated


def all_of(*conditions: Condition) -> Condition:
    """True when every condition holds; stops at the first false one"""

    async def _all() -> bool:
        for condition in conditions:
            if not await condition():
                return False
        return True

    return _all


def any_of(*conditions: Condition) -> Condition:
    """True when at least one condition holds; stops at the first true one"""

    async def _any() -> bool:
        for condition in conditions:
            if await condition():
                return True
        return False

    return _any


def ignoring_errors(condition: Condition, *errors: type) -> Condition:
    """Treat the given exception types (any Exception by default) as false.

    Prefer the ignore_errors flag of wait_for_condition; this wrapper is for
    narrowing the swallowed errors to specific types.
    """
    swallowed = errors or (Exception,)

    async def _guarded() -> bool:
        try:
            return bool(await condition())
        except swallowed as e:
            logger.debug(f"Condition raised {e!r}, treating as false")
            return False

    return _guarded


def http_status_is(
    session: aiohttp.ClientSession, url: str, expected_status: int = 200
) -> Condition:
    """True once a GET to url answers with expected_status"""

    async def _check() -> bool:
        async with session.get(url) as response:
            logger.debug(f"GET {url} -> {response.status}")
            return response.status == expected_status

    return _check


def json_field_equals(
    session: aiohttp.ClientSession, url: str, field: str, expected: Any
) -> Condition:
    """True once the JSON body of a GET to url has field set to expected.

    Non-2xx answers raise aiohttp.ClientResponseError.
    """

    async def _check() -> bool:
        async with session.get(url) as response:
            response.raise_for_status()
            data = await response.json()
            value = data.get(field)
            logger.debug(f"GET {url} -> {field}={value!r}")
            return value == expected

    return _check
