"""JSON log formatting for mp4batch.

One object per line::

    {"timestamp": "...", "level": "ERROR", "logger": "mp4batch.cli.resolve",
     "message": "...", "input": "/media/ep01.vpy",
     "context": {"segment_index": 1, "error_type": "UnknownProfileError"}}
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord has, plus those added by formatting and by
# InputContextFilter; anything else came in through extra=
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))
) | {"message", "asctime", "source_file", "input_tag"}


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    ``input`` names the file being resolved when the record has one (see
    InputContextFilter). Values passed with ``extra=`` are grouped under
    ``context``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        source_file = getattr(record, "source_file", None)
        if source_file:
            entry["input"] = str(source_file)

        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
