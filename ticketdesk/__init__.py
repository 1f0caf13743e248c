from .config import ConfigError, Settings, load_settings
from .discounts import DiscountValidator
from .handlers import TicketCommands
from .scheduler import ClosureScheduler

__all__ = [
    "ClosureScheduler",
    "ConfigError",
    "DiscountValidator",
    "Settings",
    "TicketCommands",
    "load_settings",
]
