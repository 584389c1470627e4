"""Process settings read from the environment (``KOMMUTE_`` prefix).

Tariff constants can be overridden per deployment, e.g.::

    KOMMUTE_TARIFF__TAX_RATE=0.13
    KOMMUTE_TARIFF__MIN_FARE=1500
"""

import logging
import sys
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from kommute_fares.config.tariff import TariffConstants


class FareServiceSettings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    tariff: TariffConstants = Field(default_factory=TariffConstants)

    model_config = SettingsConfigDict(env_prefix="KOMMUTE_", env_nested_delimiter="__")


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stdout with a single plain-text handler."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))

    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
