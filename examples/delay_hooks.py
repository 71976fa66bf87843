"""Custom retry delay function plus start/end/error hooks that log request activity."""

import asyncio
import logging

from lunex import ClientOptions, LunexClient, LunexError

logging.basicConfig(level=logging.INFO)
log = logging.getLogger("example")


async def custom_delay(ms):
    log.info(f"[Retry Delay] Waiting for {ms}ms...")
    await asyncio.sleep(ms / 1000)


def on_start(method, url, options):
    log.info(f"[Request Start] {method} {url} {options}")


def on_end(summary):
    log.info(f"[Request End] Status: {summary.status} {summary.status_text}")


def on_error(error):
    log.error(f"[Request Error] {error!r}")


options = ClientOptions(
    timeout=5000,
    max_retries=3,
    delay_fn=custom_delay,
    on_request_start=on_start,
    on_request_end=on_end,
    on_request_error=on_error,
)


async def main():
    async with LunexClient("https://api.example.com", {}, options) as client:
        try:
            post = await client.get("users/1")
            print("Post data:", post)
        except LunexError as e:
            print("Request failed:", e)


if __name__ == "__main__":
    asyncio.run(main())
