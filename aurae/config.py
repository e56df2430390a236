"""Configuration management"""
import logging
import os

import pytz
from dotenv import load_dotenv

from aurae.exceptions import ConfigurationError

load_dotenv()

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Calendar math (day boundaries, weekday, hour of onset) happens in this
# IANA timezone. Naive datetimes are treated as already being local to it.
TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def validate_config() -> None:
    """Validate configuration"""
    if LOG_LEVEL.upper() not in logging.getLevelNamesMapping():
        raise ConfigurationError(
            f"Unknown LOG_LEVEL '{LOG_LEVEL}'",
            config_key="LOG_LEVEL"
        )
    try:
        pytz.timezone(TIMEZONE)
    except pytz.exceptions.UnknownTimeZoneError:
        raise ConfigurationError(
            f"Invalid TIMEZONE '{TIMEZONE}'. Use an IANA timezone (e.g. 'Europe/Stockholm')",
            config_key="TIMEZONE"
        )


def configure_logging() -> None:
    """Apply LOG_LEVEL to the root logger"""
    logging.basicConfig(
        format=LOG_FORMAT,
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    )
