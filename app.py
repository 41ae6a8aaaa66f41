import asyncio

from salonbot.main import main


if __name__ == "__main__":
    asyncio.run(main())
