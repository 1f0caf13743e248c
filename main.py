import logging

from ticketdesk.bot import TicketBot
from ticketdesk.config import load_settings


def main():
    settings = load_settings()
    bot = TicketBot(settings)
    bot.run(settings.token, log_level=logging.getLevelName(settings.log_level), root_logger=True)


if __name__ == "__main__":
    main()
