"""
Bot 진입점

실행 방법:
    python -m bot
    allinvoo-bot
"""

import asyncio

from bot.bootstrap import main


def run() -> None:
    """콘솔 스크립트 진입점"""
    asyncio.run(main())


if __name__ == "__main__":
    run()
