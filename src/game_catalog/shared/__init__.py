"""共有レイヤの公開インターフェース。"""

from .config import AppSettings, get_settings
from .exceptions import BaseAppError, ConfigurationError, DomainError, NotFoundError
from .logging import configure_from_settings, configure_logging, get_logger
from .types import DTO, ValueObject, isoformat

__all__ = [
    "AppSettings",
    "get_settings",
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "BaseAppError",
    "ConfigurationError",
    "DomainError",
    "NotFoundError",
    "DTO",
    "ValueObject",
    "isoformat",
]
