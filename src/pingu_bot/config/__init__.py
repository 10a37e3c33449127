"""Application configuration"""

from dotenv import load_dotenv

from .loader import load_raw_config
from .core import Core
from .log import configure_logging

load_dotenv()

core = Core(load_raw_config())

configure_logging(core.LOG_LEVEL)


__all__ = ["core", "configure_logging"]
