from .logger import clear_correlation_id, get_correlation_id, logger, set_correlation_id, setup_logging
from .sensitive_filter import redact, sanitize_record

__all__ = [
    "clear_correlation_id",
    "get_correlation_id",
    "logger",
    "redact",
    "sanitize_record",
    "set_correlation_id",
    "setup_logging",
]
