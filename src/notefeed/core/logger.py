"""
Structured logging for notefeed.

Components log an event name plus keyword context:

```python
from notefeed.core.logger import Logger

logger = Logger("feed.pipeline")
logger.info("pipeline_completed", posts=42, profiles=7)
```

[Logger][notefeed.core.logger.Logger] attaches the keyword context to the
stdlib ``LogRecord`` (as ``structured_kv``); rendering is left to the
formatter installed on the root handler by
[setup_logging()][notefeed.core.logger.setup_logging]:

* ``text`` (default): ``info feed.pipeline pipeline_completed posts=42 profiles=7``
* ``json``: one JSON object per line, for log shippers.

The lower layers (``models``, ``nips``, ``utils``) cannot import ``core``
and log through plain ``logging.getLogger(__name__)``; the same root
formatter renders those records, so output stays uniform.
"""

from __future__ import annotations

import datetime
import json
import logging
from enum import StrEnum
from typing import Any


KV_ATTRIBUTE = "structured_kv"
DEFAULT_MAX_VALUE_LENGTH = 1000

_NEEDS_QUOTES = (" ", "=", '"', "'")


class LogFormat(StrEnum):
    """Output format selected at startup."""

    TEXT = "text"
    JSON = "json"


def _truncate(value: Any, max_value_length: int | None) -> str:
    text = str(value)
    if max_value_length and len(text) > max_value_length:
        dropped = len(text) - max_value_length
        return f"{text[:max_value_length]}...<truncated {dropped} chars>"
    return text


def _kv_token(key: str, text: str) -> str:
    if text and not any(c in text for c in _NEEDS_QUOTES):
        return f"{key}={text}"
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'{key}="{escaped}"'


def format_kv_pairs(
    kwargs: dict[str, Any],
    max_value_length: int | None = DEFAULT_MAX_VALUE_LENGTH,
    prefix: str = " ",
) -> str:
    """Render *kwargs* as ``key=value`` tokens joined by spaces.

    Empty values and values containing spaces, ``=`` or quotes are quoted
    with backslash escaping. Values longer than *max_value_length* are cut
    and marked (``None`` disables the limit).

    Returns:
        ``prefix`` followed by the tokens, or ``""`` when *kwargs* is empty.
    """
    if not kwargs:
        return ""
    tokens = (_kv_token(k, _truncate(v, max_value_length)) for k, v in kwargs.items())
    return prefix + " ".join(tokens)


class StructuredFormatter(logging.Formatter):
    """``level name message key=value ...``, traceback on following lines."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname.lower()} {record.name} {record.getMessage()}"
        line += format_kv_pairs(getattr(record, KV_ATTRIBUTE, {}))
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Keyword context is merged at the top level; it never overrides the
    ``timestamp``, ``level``, ``logger`` or ``message`` keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = dict(getattr(record, KV_ATTRIBUTE, {}))
        payload.update(
            timestamp=datetime.datetime.fromtimestamp(record.created, datetime.UTC).isoformat(),
            level=record.levelname.lower(),
            logger=record.name,
            message=record.getMessage(),
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class Logger:
    """Named logger taking an event name plus keyword context.

    Context values are stringified and truncated at *max_value_length*
    when the record is created, so a huge filter or response body cannot
    flood the log.

    Examples:
        ```python
        logger = Logger("feed.fetcher")
        logger.debug("relay_attempt", relay="wss://relay.damus.io", index=0)
        ```
    """

    def __init__(self, name: str, *, max_value_length: int | None = DEFAULT_MAX_VALUE_LENGTH) -> None:
        self._logger = logging.getLogger(name)
        self._max_value_length = max_value_length

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, event: str, context: dict[str, Any], *, exc_info: bool = False) -> None:
        if not self._logger.isEnabledFor(level):
            return
        kv = {k: _truncate(v, self._max_value_length) for k, v in context.items()}
        self._logger.log(level, event, extra={KV_ATTRIBUTE: kv}, exc_info=exc_info)

    def debug(self, event: str, **context: Any) -> None:
        self._log(logging.DEBUG, event, context)

    def info(self, event: str, **context: Any) -> None:
        self._log(logging.INFO, event, context)

    def warning(self, event: str, **context: Any) -> None:
        self._log(logging.WARNING, event, context)

    def error(self, event: str, **context: Any) -> None:
        self._log(logging.ERROR, event, context)

    def exception(self, event: str, **context: Any) -> None:
        """Log at ERROR with the active exception's traceback."""
        self._log(logging.ERROR, event, context, exc_info=True)


def setup_logging(level: str = "INFO", log_format: LogFormat = LogFormat.TEXT) -> None:
    """Replace the root handlers with one stderr handler in *log_format*."""
    formatter: logging.Formatter = (
        JsonFormatter() if log_format == LogFormat.JSON else StructuredFormatter()
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, level.upper()))
