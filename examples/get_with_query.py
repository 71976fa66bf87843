"""GET request with query string parameters."""

import asyncio

from lunex import LunexClient, LunexError


async def main():
    async with LunexClient("https://api.example.com") as client:
        try:
            users = await client.get("users", {"limit": 5, "active": True})
            print("Users with query:", users)
        except LunexError as e:
            print("GET with query failed:", e)


if __name__ == "__main__":
    asyncio.run(main())
