"""Application configuration.

Provides hooks for embedding applications and the CLI to customize tailing,
search and logging behavior.
"""

from typing import Optional
from dataclasses import dataclass


@dataclass
class PandaLogConfig:
    """Process-wide configuration for the log viewer.

    Attributes:
        follow_tail_default: Initial follow-tail flag for newly opened sessions
        poll_interval_ms: Polling fallback for file systems without reliable
            change notifications (0 disables polling)
        async_load_threshold_bytes: Files at least this large are read on a
            background thread at open time (None keeps the synchronous read)
        hold_partial_lines: Buffer an unterminated final fragment until its
            newline arrives instead of publishing it immediately
        search_debounce_ms: Delay between the last keystroke in the search
            field and the query being applied to the session
        log_dir: Directory for the application's own log file
        log_level: Level name for the application logger
        log_file_name: File name of the application log inside log_dir
    """

    follow_tail_default: bool = True
    poll_interval_ms: int = 0
    async_load_threshold_bytes: Optional[int] = None
    hold_partial_lines: bool = False
    search_debounce_ms: int = 150
    log_dir: Optional[str] = None
    log_level: str = "INFO"
    log_file_name: str = "panda_log.log"


# Global config instance (set by application)
_config: Optional[PandaLogConfig] = None


def set_config(config: Optional[PandaLogConfig]) -> None:
    """Set the global configuration.

    Args:
        config: PandaLogConfig instance, or None to restore defaults
    """
    global _config
    _config = config


def get_config() -> PandaLogConfig:
    """Get the current configuration.

    Returns:
        Current PandaLogConfig or default if not set
    """
    if _config is None:
        return PandaLogConfig()
    return _config
