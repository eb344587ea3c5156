from .timestamp import parse_timestamp, to_storage
from .logging import configure_logging

__all__ = ["parse_timestamp", "to_storage", "configure_logging"]
