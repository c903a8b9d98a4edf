"""Long-polling bot process: ``python -m rewardapi.bot_main``"""

import logging

from dotenv import load_dotenv

from rewardapi.bot.telegram_bot import build_application
from rewardapi.containers import Container
from rewardapi.logging_config import setup_logging

logger = logging.getLogger(__name__)


def run() -> None:
    load_dotenv()
    container = Container()
    settings = container.config.settings()
    setup_logging(settings.LOG_LEVEL)

    if not settings.BOT_TOKEN:
        raise SystemExit("BOT_TOKEN is not set")

    container.init_resources()
    try:
        app = build_application(
            settings,
            login_service=container.services.login_service(),
            referral_service=container.services.referral_service(),
        )
        logger.info(f"Bot @{settings.BOT_USERNAME} polling for updates")
        app.run_polling()
    finally:
        container.shutdown_resources()


if __name__ == "__main__":
    run()
