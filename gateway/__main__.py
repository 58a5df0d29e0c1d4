"""Entry point for running the gateway as a module via python -m gateway"""

import asyncio
import logging

from gateway.runtime import main


def run() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    asyncio.run(main())


if __name__ == "__main__":
    run()
