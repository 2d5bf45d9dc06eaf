"""Process-wide logging for the scorer CLI.

Three steps, in import order:

1. ``setup_logging()`` before anything imports litellm. litellm reads
   LITELLM_LOG once at import, and the root handler must exist before
   the first ``event=`` line is emitted.
2. ``cleanup_third_party_handlers()`` after all imports, to drop the
   StreamHandlers litellm attaches to its own loggers.
3. ``apply_log_level(settings.log_level)`` once Settings are loaded,
   since configuration is read after step 1.

Steps 1 and 2 run once per process; step 3 may be repeated.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# litellm's own loggers, which attach a handler at import time
_LITELLM_LOGGERS = ("LiteLLM", "LiteLLM Router", "LiteLLM Proxy")

# Held at WARNING whatever the configured level, so DEBUG shows the
# judge's events without per-request HTTP chatter
_SUPPRESSED_LOGGERS = (
    *_LITELLM_LOGGERS,
    "openai._base_client",
    "httpx",
    "httpcore",
)

_phase1_done = False
_phase2_done = False


def setup_logging(level: str = "INFO") -> None:
    """Install the root handler and quieten litellm. No-op after the first call."""
    global _phase1_done  # noqa: PLW0603
    if _phase1_done:
        return
    _phase1_done = True

    os.environ.setdefault("LITELLM_LOG", "WARNING")
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
    _pin_third_party()


def cleanup_third_party_handlers() -> None:
    """Route litellm records through root only. No-op after the first call."""
    global _phase2_done  # noqa: PLW0603
    if _phase2_done:
        return
    _phase2_done = True

    for name in _LITELLM_LOGGERS:
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True


def apply_log_level(level: str) -> None:
    """Set the root logger to a validated level name such as ``DEBUG``."""
    logging.getLogger().setLevel(level.upper())
    _pin_third_party()


def _pin_third_party() -> None:
    for name in _SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
