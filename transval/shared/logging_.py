"""Structured logging for transval."""
import logging
import sys
from pathlib import Path
from typing import Optional

from transval.shared.errors import ErrorCode

LOGGER_NAME = "transval"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Longest rule text echoed into a log line
MAX_RULES_IN_LOG = 80


def setup_logger(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    name: str = LOGGER_NAME
) -> logging.Logger:
    """
    Attach handlers to the ``transval`` logger.

    Entry point for a hosting application (workflow engine, CLI) that wants
    the registry's rule events on stdout or in a file; the library only
    emits records and never calls this.

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def _shorten(text: str, limit: int = MAX_RULES_IN_LOG) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - 3] + "..."


def log_rule_event(
    logger: logging.Logger,
    name: str,
    action: str,
    status: str,
    rules: Optional[str] = None,
    from_state: Optional[int] = None,
    to_state: Optional[int] = None,
    state_count: Optional[int] = None,
    error_code: Optional[ErrorCode] = None,
    message: Optional[str] = None
):
    """
    Log a structured rule-set event.

    Args:
        logger: Logger instance
        name: Rule set name
        action: Operation (set/delete/assert)
        status: Outcome (ok/rejected/missing)
        rules: Rule text involved (optional, truncated)
        from_state: Source state (optional)
        to_state: Target state (optional)
        state_count: Number of source states after the operation (optional)
        error_code: Error code if rejected (optional)
        message: Additional message (optional)
    """
    parts = [
        f"name={name}",
        f"action={action}",
        f"status={status}",
    ]

    if rules is not None:
        parts.append(f"rules={_shorten(rules)!r}")
    if from_state is not None and to_state is not None:
        parts.append(f"transition={from_state}->{to_state}")
    if state_count is not None:
        parts.append(f"states={state_count}")
    if error_code:
        parts.append(f"error={error_code.name}")
    if message:
        parts.append(f"msg={message}")

    log_msg = " | ".join(parts)

    if error_code:
        logger.warning(log_msg)
    else:
        logger.debug(log_msg)
