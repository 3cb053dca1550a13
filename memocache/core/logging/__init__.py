from .logger import (
    get_logger,
    log_stage,
    preview_key,
    setup_logging,
)

__all__ = [
    "get_logger",
    "log_stage",
    "preview_key",
    "setup_logging",
]
