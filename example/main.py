import asyncio

import aiohttp
from storefront_server import StorefrontServer
from wait_helper.conditions import json_field_equals, negate
from wait_helper.errors import ConditionTimeoutError
from wait_helper.models import RetryProfile, WaitProfile, retry_profile, wait_profile
from wait_helper.wait_helper import WaitHelper


async def report_retry(attempt, error):
    print(f"Attempt {attempt} failed: {error}")


async def main():
    PORT = 8000
    server = StorefrontServer(cart_delay=1.0, notification_time=2.0, flaky_failures=2)
    await server.start(port=PORT)
    base_url = f"http://localhost:{PORT}"
    print(f"Storefront started on {base_url}")

    helper = WaitHelper(
        wait_config=wait_profile(WaitProfile.short),
        retry_config=retry_profile(RetryProfile.delayed),
    )

    async with aiohttp.ClientSession() as session:

        async def add_product():
            async with session.post(f"{base_url}/addtocart", json={"id": 1}) as response:
                response.raise_for_status()
                return await response.json()

        async def fetch_flaky():
            async with session.get(f"{base_url}/flaky") as response:
                response.raise_for_status()
                return await response.json()

        try:
            print(f"Added: {await helper.retry_operation(add_product, label='add to cart')}")
            await helper.wait_for_condition(
                json_field_equals(session, f"{base_url}/cart", "count", 1),
                label="cart count is 1",
            )
            print("Cart updated")

            await helper.wait_for_condition(
                negate(json_field_equals(session, f"{base_url}/notification", "visible", True)),
                config=wait_profile(WaitProfile.slow_poll),
                label="notification hidden",
            )
            print("Notification dismissed")

            result = await helper.retry_operation(
                fetch_flaky, label="flaky endpoint", on_retry=report_retry
            )
            print(f"Flaky endpoint answered after {result['calls']} calls")
        except ConditionTimeoutError as e:
            print(f"Waiting timed out: {e}")
        except Exception as e:
            print(f"Error occurred: {e}")
        finally:
            await server.stop()


if __name__ == "__main__":
    asyncio.run(main())
