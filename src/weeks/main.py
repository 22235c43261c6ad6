"""Weeks entry point."""

import logging
import sys

from dotenv import find_dotenv, load_dotenv

from .cli import run_cli


def main() -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))

    if len(sys.argv) > 1 and sys.argv[1] == "bot":
        from .telegram import TelegramBot

        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
        bot = TelegramBot()
        bot.run()
        return

    sys.exit(run_cli(sys.argv[1:]))


if __name__ == "__main__":
    main()
