from typing import AsyncGenerator, Tuple

import aiohttp
import pytest
import pytest_asyncio
from aiohttp.test_utils import unused_port
from storefront_server import StorefrontServer
from wait_helper.models import RetryConfig, WaitConfig
from wait_helper.wait_helper import WaitHelper

BASE_URL_TEMPLATE = "http://localhost:{}"


@pytest_asyncio.fixture
async def server() -> AsyncGenerator[Tuple[StorefrontServer, str], None]:
    """Start and yield a StorefrontServer on a random port with its base URL."""
    port = unused_port()
    server_instance = StorefrontServer(cart_delay=0.3, notification_time=0.5)
    await server_instance.start(port=port)
    try:
        yield server_instance, BASE_URL_TEMPLATE.format(port)
    finally:
        await server_instance.stop()


@pytest_asyncio.fixture
async def session() -> AsyncGenerator[aiohttp.ClientSession, None]:
    async with aiohttp.ClientSession() as client_session:
        yield client_session


@pytest.fixture
def helper() -> WaitHelper:
    """Provide a helper with short budgets so failing waits stay fast."""
    return WaitHelper(
        wait_config=WaitConfig(timeout=1.0, poll_interval=0.05),
        retry_config=RetryConfig(max_attempts=3),
    )
