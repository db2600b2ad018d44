"""
JSON-lines logging for the clone step.

Records go to stderr, one JSON object per line, so stdout stays free for a
command's own output (``--output json`` in particular).
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


class StructuredLogger:
    """
    Thin wrapper over a stdlib logger that takes fields as keyword arguments.

    ``logger.info("Cloned VM", vm_path="builds/vm1")`` emits
    ``{"message": "Cloned VM", "vm_path": "builds/vm1", ...}``.
    """

    class JsonFormatter(logging.Formatter):
        def format(self, record: logging.LogRecord) -> str:
            entry: Dict[str, Any] = {
                "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            if record.exc_info:
                entry["exception"] = self.formatException(record.exc_info)
            entry.update(
                (key, value)
                for key, value in vars(record).items()
                if key not in _RECORD_ATTRS
            )
            # VM handles and exceptions are not JSON-native
            return json.dumps(entry, default=str)

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        # The JSON handler is the only sink; root handlers would repeat it
        self.logger.propagate = False

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(self.JsonFormatter())
        self.logger.handlers[:] = [handler]

    def set_level(self, level: str) -> None:
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    def _log(self, level: int, message: str, exc_info: bool, fields: Dict[str, Any]) -> None:
        self.logger.log(level, message, exc_info=exc_info, extra=fields)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, False, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, False, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, False, kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, exc_info, kwargs)

    def critical(self, message: str, exc_info: bool = True, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, message, exc_info, kwargs)


logger = StructuredLogger("vsphere_clone")
