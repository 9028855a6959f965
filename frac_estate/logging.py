"""Structured logging configuration for frac-estate.

Transaction and pipeline logs carry their context as
``extra={"extra": {...}}``; the JSON formatter lifts those fields to
the top level of each record so a log shipper can index them by
``tx_id``, ``block_number`` or ``step``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, TextIO

if TYPE_CHECKING:
    from frac_estate.models import TransactionReceipt


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    stream: TextIO | None = None,
) -> None:
    """Configure logging for frac-estate.

    Parameters
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    format_type : str
        Format type: "standard" or "json".
    stream : TextIO | None
        Destination of log records. Defaults to stderr so scripts can
        keep stdout for values meant to be captured (``KEY=VALUE`` lines).
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("frac_estate").setLevel(log_level)

    # Reduce noise from external libraries
    logging.getLogger("confluent_kafka").setLevel(logging.WARNING)
    logging.getLogger("faker").setLevel(logging.WARNING)


def tx_context(receipt: TransactionReceipt, **fields: Any) -> dict[str, Any]:
    """Build the ``extra=`` mapping for a log line about ``receipt``."""
    context: dict[str, Any] = {
        "tx_id": receipt.tx_id,
        "block_number": receipt.block_number,
        "method": receipt.method,
        "contract": receipt.contract_address,
        "sender": receipt.sender,
        "status": receipt.status.value,
    }
    if receipt.revert_reason:
        context["revert_reason"] = receipt.revert_reason
    if receipt.events:
        context["events"] = [event.event_type.value for event in receipt.events]
    context.update(fields)
    return {"extra": context}


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        context = getattr(record, "extra", None)
        if isinstance(context, dict):
            log_data.update(context)

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Parameters
    ----------
    name : str
        Logger name (usually __name__).

    Returns
    -------
    logging.Logger
        Configured logger.
    """
    return logging.getLogger(name)
