from datetime import datetime
from typing import List, Optional

from aiohttp import web
from loguru import logger

CATALOG = [
    {"id": 1, "title": "Samsung galaxy s6", "price": 360.0, "cat": "phone"},
    {"id": 2, "title": "Nokia lumia 1520", "price": 820.0, "cat": "phone"},
    {"id": 8, "title": "Sony vaio i5", "price": 790.0, "cat": "notebook"},
    {"id": 10, "title": "Apple monitor 24", "price": 400.0, "cat": "monitor"},
]


class StorefrontServer:
    """Stub of the demo shop whose state changes settle after a delay."""

    def __init__(
        self,
        cart_delay: float = 0.3,
        notification_time: float = 0.5,
        flaky_failures: int = 0,
    ):
        self.cart_delay = cart_delay
        self.notification_time = notification_time
        self.flaky_failures = flaky_failures
        self.flaky_calls = 0
        self.cart: List[tuple] = []
        self.notified_at: Optional[datetime] = None
        self.runner: Optional[web.AppRunner] = None
        self.app = web.Application()
        self.app.router.add_get("/entries", self.handle_entries)
        self.app.router.add_post("/addtocart", self.handle_add_to_cart)
        self.app.router.add_get("/cart", self.handle_cart)
        self.app.router.add_get("/notification", self.handle_notification)
        self.app.router.add_get("/flaky", self.handle_flaky)
        self.logger = logger

    @staticmethod
    def _since(moment: datetime) -> float:
        return (datetime.now() - moment).total_seconds()

    async def handle_entries(self, request):
        return web.json_response({"Items": CATALOG})

    async def handle_add_to_cart(self, request):
        data = await request.json()
        product_id = data["id"]
        if not any(item["id"] == product_id for item in CATALOG):
            self.logger.info(f"Rejecting unknown product {product_id}")
            return web.json_response({"error": "unknown product"}, status=404)

        now = datetime.now()
        self.cart.append((product_id, now))
        self.notified_at = now
        self.logger.info(f"Product {product_id} added, settles in {self.cart_delay}s")
        return web.json_response({"added": product_id})

    async def handle_cart(self, request):
        settled = [pid for pid, added in self.cart if self._since(added) >= self.cart_delay]
        self.logger.info(f"Returning cart with {len(settled)} settled items")
        return web.json_response({"count": len(settled), "items": settled})

    async def handle_notification(self, request):
        visible = (
            self.notified_at is not None
            and self._since(self.notified_at) < self.notification_time
        )
        return web.json_response({"visible": visible})

    async def handle_flaky(self, request):
        self.flaky_calls += 1
        if self.flaky_calls <= self.flaky_failures:
            self.logger.info(f"Failing flaky call {self.flaky_calls}")
            return web.json_response({"error": "unavailable"}, status=503)
        return web.json_response({"ok": True, "calls": self.flaky_calls})

    async def start(self, port: int = 8080):
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, "localhost", port)
        await site.start()
        self.logger.info(f"Storefront started on port {port}")
        return site

    async def stop(self):
        if self.runner is not None:
            await self.runner.cleanup()
            self.runner = None
